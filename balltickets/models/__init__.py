"""
Models package for the ball ticket shop.
"""
from .base import db

from .buyer import Buyer, BuyerGroup, buyer_group_ticket_types
from .ticket_reserve import TicketType, TicketReserve, DeliveryMethod, reserve_delivery_methods
from .sold_ticket import SoldTicket
from .backend_user import BackendUser, BackendGroup
from .system_settings import SystemSettings

# Import Flask-Login user loader
from .. import login_manager


@login_manager.user_loader
def load_user(user_id):
    """Resolve a namespaced session id ('buyer:1' or 'staff:1')."""
    kind, _, raw_id = str(user_id).partition(':')
    if not raw_id.isdigit():
        return None
    if kind == 'buyer':
        return db.session.get(Buyer, int(raw_id))
    if kind == 'staff':
        return db.session.get(BackendUser, int(raw_id))
    return None


__all__ = [
    'db',
    'Buyer',
    'BuyerGroup',
    'TicketType',
    'TicketReserve',
    'DeliveryMethod',
    'SoldTicket',
    'BackendUser',
    'BackendGroup',
    'SystemSettings',
    'buyer_group_ticket_types',
    'reserve_delivery_methods',
    'load_user',
]
