"""Ticket contingents, their types and the delivery methods they ship with."""
from datetime import datetime
from sqlalchemy import func

from .base import db


reserve_delivery_methods = db.Table(
    'reserve_delivery_methods',
    db.Column('reserve_id', db.Integer, db.ForeignKey('ticket_reserves.id'), primary_key=True),
    db.Column('delivery_method_id', db.Integer, db.ForeignKey('delivery_methods.id'), primary_key=True),
)

SHIPPING_KEYWORDS = ('versand', 'shipping')
PICKUP_KEYWORDS = ('abholung',)


def is_shipping_name(name):
    lowered = (name or '').lower()
    return any(keyword in lowered for keyword in SHIPPING_KEYWORDS)


def is_pickup_name(name):
    lowered = (name or '').lower()
    return any(keyword in lowered for keyword in PICKUP_KEYWORDS)


class TicketType(db.Model):
    __tablename__ = 'ticket_types'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False, unique=True)

    reserves = db.relationship('TicketReserve', back_populates='type')
    buyer_groups = db.relationship(
        'BuyerGroup', secondary='buyer_group_ticket_types', back_populates='ticket_types')

    def __repr__(self):
        return f'<TicketType {self.name}>'


class DeliveryMethod(db.Model):
    __tablename__ = 'delivery_methods'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False, unique=True)
    surcharge = db.Column(db.Float, nullable=False, default=0.0)

    @property
    def is_shipping(self):
        return is_shipping_name(self.name)

    @property
    def is_pickup(self):
        return is_pickup_name(self.name)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'surcharge': self.surcharge,
        }

    def __repr__(self):
        return f'<DeliveryMethod {self.name}>'


class TicketReserve(db.Model):
    """A priced, quantity-limited pool of tickets. `amount` is what is still available."""
    __tablename__ = 'ticket_reserves'

    id = db.Column(db.Integer, primary_key=True)
    amount = db.Column(db.Integer, nullable=False, default=0)
    price = db.Column(db.Float, nullable=False, default=0.0)
    type_id = db.Column(db.Integer, db.ForeignKey('ticket_types.id'), nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    updated_by = db.Column(db.String(200), nullable=True)

    type = db.relationship('TicketType', back_populates='reserves')
    delivery_methods = db.relationship(
        'DeliveryMethod', secondary=reserve_delivery_methods, order_by='DeliveryMethod.id')
    sold_tickets = db.relationship('SoldTicket', back_populates='reserve', lazy='dynamic')

    @property
    def type_name(self):
        return self.type.name if self.type else 'Unbekannter Typ'

    @property
    def sold_count(self):
        """Number of paid tickets sold from this contingent."""
        from .sold_ticket import SoldTicket
        total = db.session.query(func.coalesce(func.sum(SoldTicket.quantity), 0)).filter(
            SoldTicket.reserve_id == self.id,
            SoldTicket.paid.is_(True),
        ).scalar()
        return int(total or 0)

    def find_delivery_method(self, kind):
        """Return the attached method matching 'shipping' or 'self-pickup', if any."""
        for method in self.delivery_methods:
            if kind == 'shipping' and method.is_shipping:
                return method
            if kind == 'self-pickup' and method.is_pickup:
                return method
        return None

    def __repr__(self):
        return f'<TicketReserve {self.type_name} x{self.amount}>'
