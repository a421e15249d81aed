"""Buyer and buyer group models."""
from datetime import datetime
from flask_login import UserMixin

from .base import db


buyer_group_ticket_types = db.Table(
    'buyer_group_ticket_types',
    db.Column('buyer_group_id', db.Integer, db.ForeignKey('buyer_groups.id'), primary_key=True),
    db.Column('ticket_type_id', db.Integer, db.ForeignKey('ticket_types.id'), primary_key=True),
)


class BuyerGroup(db.Model):
    __tablename__ = 'buyer_groups'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False, unique=True)
    max_tickets = db.Column(db.Integer, nullable=False, default=10)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    updated_by = db.Column(db.String(200), nullable=True)

    buyers = db.relationship('Buyer', back_populates='group', lazy='dynamic')
    ticket_types = db.relationship(
        'TicketType',
        secondary=buyer_group_ticket_types,
        back_populates='buyer_groups',
        order_by='TicketType.name',
    )

    @classmethod
    def get_by_name(cls, name):
        return cls.query.filter_by(name=name).first()

    @property
    def ticket_reserves(self):
        """All contingents whose type this group may buy."""
        reserves = []
        for ticket_type in self.ticket_types:
            reserves.extend(ticket_type.reserves)
        return reserves

    def __repr__(self):
        return f'<BuyerGroup {self.name}>'


class Buyer(UserMixin, db.Model):
    """A ticket buyer. Signs in with a passwordless email link."""
    __tablename__ = 'buyers'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=True)
    email = db.Column(db.String(255), nullable=False, unique=True, index=True)
    phone = db.Column(db.String(50), nullable=True)
    address = db.Column(db.String(255), nullable=True)
    postal = db.Column(db.Integer, nullable=True)
    city = db.Column(db.String(100), nullable=True)
    country = db.Column(db.String(2), nullable=True)
    verified = db.Column(db.Boolean, nullable=False, default=False)
    last_login_at = db.Column(db.DateTime, nullable=True)
    max_tickets = db.Column(db.Integer, nullable=True)
    group_id = db.Column(db.Integer, db.ForeignKey('buyer_groups.id'), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    group = db.relationship('BuyerGroup', back_populates='buyers')
    sold_tickets = db.relationship(
        'SoldTicket', back_populates='buyer', lazy='dynamic', order_by='SoldTicket.id')

    # Flask-Login ids are namespaced so buyers and staff never collide
    auth_provider = 'email'
    group_name = None

    def get_id(self):
        return f'buyer:{self.id}'

    @property
    def has_purchased(self):
        return self.sold_tickets.first() is not None

    @property
    def effective_max_tickets(self):
        """Per-order cap: the tighter of the buyer's own and the group's limit."""
        from flask import current_app
        limits = [current_app.config['MAX_TICKETS_PER_ORDER']]
        if self.max_tickets is not None:
            limits.append(self.max_tickets)
        if self.group is not None:
            limits.append(self.group.max_tickets)
        return min(limits)

    def __repr__(self):
        return f'<Buyer {self.email}>'
