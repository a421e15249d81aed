from datetime import datetime

from .base import db
from .ticket_reserve import is_shipping_name, is_pickup_name


class SoldTicket(db.Model):
    __tablename__ = 'sold_tickets'

    id = db.Column(db.Integer, primary_key=True)
    delivery = db.Column(db.String(100), nullable=False)
    code = db.Column(db.String(20), nullable=False, unique=True, index=True)
    quantity = db.Column(db.Integer, nullable=False, default=1)
    paid = db.Column(db.Boolean, nullable=False, default=False)
    sent = db.Column(db.Boolean, nullable=False, default=False)
    payment_reference = db.Column(db.String(255), nullable=True)
    checkout_session_id = db.Column(db.String(255), nullable=True, index=True)
    timestamp = db.Column(db.DateTime, default=datetime.utcnow)
    sold_price = db.Column(db.Float, nullable=True)
    buyer_id = db.Column(db.Integer, db.ForeignKey('buyers.id'), nullable=False)
    reserve_id = db.Column(db.Integer, db.ForeignKey('ticket_reserves.id'), nullable=False)

    buyer = db.relationship('Buyer', back_populates='sold_tickets')
    reserve = db.relationship('TicketReserve', back_populates='sold_tickets')

    @property
    def is_shipping(self):
        return is_shipping_name(self.delivery)

    @property
    def is_pickup(self):
        return is_pickup_name(self.delivery)

    def to_dict(self):
        return {
            'id': self.id,
            'delivery': self.delivery,
            'code': self.code,
            'quantity': self.quantity,
            'paid': self.paid,
            'sent': self.sent,
            'timestamp': self.timestamp.isoformat() if self.timestamp else None,
        }

    def __repr__(self):
        return f'<SoldTicket {self.code}>'
