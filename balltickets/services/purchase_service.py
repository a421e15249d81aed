"""
Purchase flow and payment reconciliation.

create_purchase checks every precondition before writing anything, then
stores an unpaid SoldTicket and opens a hosted checkout session.
confirm_payment is idempotent: the paid flag is flipped with a
conditional UPDATE, and only the confirmation that flips it decrements
the contingent and sends the confirmation email.
"""
import secrets
import string

from flask import current_app, url_for

from .. import db
from ..models import SoldTicket, TicketReserve, DeliveryMethod
from ..errors import PurchaseError, PaymentProviderError
from ..notifications import send_confirmation_email
from ..utils import to_cents
from . import payments
from .settings_service import SettingsService

DELIVERY_SHIPPING = 'shipping'
DELIVERY_PICKUP = 'self-pickup'
DELIVERY_CHOICES = (DELIVERY_SHIPPING, DELIVERY_PICKUP)

CODE_ALPHABET = string.ascii_uppercase + string.digits
SUPPORTED_COUNTRIES = ('AT', 'DE')


def generate_pickup_code():
    """Format: HTL-XXXX-XXXX (e.g. HTL-A1B2-C3D4)."""
    first = ''.join(secrets.choice(CODE_ALPHABET) for _ in range(4))
    last = ''.join(secrets.choice(CODE_ALPHABET) for _ in range(4))
    return f'HTL-{first}-{last}'


def _require_min_length(data, field, length, message):
    value = str(data.get(field) or '').strip()
    if len(value) < length:
        raise PurchaseError(message)
    return value


def validate_contact_info(delivery_method, data):
    """
    Check the contact form by shape. Pickup needs name and phone;
    shipping additionally needs street, postal code, city and country.
    Returns the cleaned values.
    """
    data = data or {}
    cleaned = {
        'name': _require_min_length(data, 'name', 2, "Name muss mindestens 2 Zeichen lang sein"),
        'phone': _require_min_length(data, 'phone', 8, "Telefonnummer muss mindestens 8 Zeichen lang sein"),
    }
    if delivery_method != DELIVERY_SHIPPING:
        return cleaned

    cleaned['address'] = _require_min_length(
        data, 'address', 5, "Adresse muss mindestens 5 Zeichen lang sein")

    try:
        postal = int(str(data.get('postal', '')).strip())
    except ValueError:
        raise PurchaseError("Bitte geben Sie eine gültige Postleitzahl ein")

    country = str(data.get('country') or '').strip().upper()
    if country not in SUPPORTED_COUNTRIES:
        raise PurchaseError("Nur Österreich (AT) und Deutschland (DE) werden unterstützt")
    if country == 'AT' and not 1000 <= postal <= 9999:
        raise PurchaseError("Österreichische Postleitzahl muss zwischen 1000 und 9999 liegen")
    if country == 'DE' and not 1000 <= postal <= 99999:
        raise PurchaseError("Deutsche Postleitzahl muss zwischen 01000 und 99999 liegen")

    cleaned['postal'] = postal
    cleaned['city'] = _require_min_length(data, 'city', 2, "Stadt muss mindestens 2 Zeichen lang sein")
    cleaned['country'] = country
    return cleaned


class PurchaseService:
    @staticmethod
    def create_unique_pickup_code(attempts=None):
        """Draw codes until one is unused. Fails closed once the retry budget is spent."""
        if attempts is None:
            attempts = current_app.config['PICKUP_CODE_ATTEMPTS']
        for _ in range(attempts):
            code = generate_pickup_code()
            if SoldTicket.query.filter_by(code=code).first() is None:
                return code
        current_app.logger.error(f"No unique pickup code after {attempts} attempts")
        raise PurchaseError(
            "Es konnte kein eindeutiger Abholcode erzeugt werden. Bitte versuchen Sie es erneut.")

    @staticmethod
    def get_available_tickets(buyer):
        """Contingents visible to the buyer's group."""
        if buyer is None or buyer.group is None:
            return []
        max_tickets = buyer.effective_max_tickets
        return [{
            'id': reserve.id,
            'type': reserve.type_name,
            'amount': reserve.amount,
            'price': reserve.price,
            'maxTickets': max_tickets,
            'deliveryMethods': [m.to_dict() for m in reserve.delivery_methods],
        } for reserve in buyer.group.ticket_reserves]

    @staticmethod
    def get_delivery_methods():
        return [m.to_dict() for m in DeliveryMethod.query.order_by(DeliveryMethod.id.asc()).all()]

    @staticmethod
    def _line_items(reserve, method, quantity):
        currency = current_app.config['CURRENCY']
        items = [{
            'price_data': {
                'currency': currency,
                'product_data': {'name': f'Ballkarte - {reserve.type_name}'},
                'unit_amount': to_cents(reserve.price),
            },
            'quantity': quantity,
        }]
        if method.is_shipping and method.surcharge > 0:
            items.append({
                'price_data': {
                    'currency': currency,
                    'product_data': {'name': 'Versandkosten'},
                    'unit_amount': to_cents(method.surcharge),
                },
                'quantity': 1,
            })
        return items

    @staticmethod
    def create_purchase(buyer, delivery_method, contact_info, reserve_id, quantity):
        """
        Validate the order, store an unpaid ticket and open a checkout session.

        Returns a dict with the checkout URL to redirect the buyer to.
        Raises PurchaseError before any write when a precondition fails.
        """
        if delivery_method not in DELIVERY_CHOICES:
            raise PurchaseError("Ungültige Versandart.")

        if not SettingsService.is_sale_open():
            raise PurchaseError("Der Ticketverkauf ist derzeit nicht geöffnet.")

        max_per_order = current_app.config['MAX_TICKETS_PER_ORDER']
        try:
            quantity = int(quantity)
        except (TypeError, ValueError):
            raise PurchaseError("Ungültige Anzahl.")
        if not 1 <= quantity <= max_per_order:
            raise PurchaseError(f"Die Anzahl muss zwischen 1 und {max_per_order} liegen.")

        contact = validate_contact_info(delivery_method, contact_info)

        reserve = db.session.get(TicketReserve, reserve_id) if reserve_id else None
        if reserve is None:
            raise PurchaseError("Das gewählte Kontingent existiert nicht.")

        if buyer.group is None or reserve.type not in buyer.group.ticket_types:
            raise PurchaseError("Dieses Kontingent ist für Sie nicht verfügbar.")

        if quantity > buyer.effective_max_tickets:
            raise PurchaseError(f"Sie können maximal {buyer.effective_max_tickets} Karten kaufen.")

        if reserve.amount < quantity:
            raise PurchaseError("Nicht genügend Karten verfügbar.")

        if buyer.has_purchased:
            raise PurchaseError("Sie haben bereits Karten gekauft. Pro Person ist nur ein Kauf möglich.")

        method = reserve.find_delivery_method(delivery_method)
        if method is None:
            raise PurchaseError("Die gewählte Versandart ist für dieses Kontingent nicht verfügbar.")

        code = PurchaseService.create_unique_pickup_code()

        # All checks passed; from here on we write.
        for field, value in contact.items():
            setattr(buyer, field, value)

        total = reserve.price * quantity
        if method.is_shipping:
            total += method.surcharge

        ticket = SoldTicket(
            delivery=method.name,
            code=code,
            quantity=quantity,
            paid=False,
            sent=False,
            sold_price=total,
            buyer=buyer,
            reserve=reserve,
        )
        db.session.add(ticket)
        db.session.flush()

        base_url = current_app.config['PUBLIC_BASE_URL'].rstrip('/')
        try:
            checkout = payments.create_checkout_session(
                line_items=PurchaseService._line_items(reserve, method, quantity),
                metadata={
                    'sold_ticket_id': ticket.id,
                    'reserve_id': reserve.id,
                    'buyer_id': buyer.id,
                    'quantity': quantity,
                    'delivery_method': delivery_method,
                },
                customer_email=buyer.email,
                success_url=base_url + url_for('buyer_bp.success') + '?session_id={CHECKOUT_SESSION_ID}',
                cancel_url=base_url + url_for('buyer_bp.portal'),
            )
        except PaymentProviderError:
            db.session.rollback()
            raise PurchaseError("Fehler beim Erstellen der Bestellung. Bitte versuchen Sie es erneut.")

        ticket.checkout_session_id = checkout.get('id')
        db.session.commit()

        current_app.logger.info(
            f"Purchase started: ticket {ticket.id} ({quantity}x {reserve.type_name}) for {buyer.email}")
        return {
            'ticket_id': ticket.id,
            'session_id': checkout.get('id'),
            'checkout_url': checkout.get('url'),
        }

    @staticmethod
    def _confirmation_result(ticket):
        return {
            'ticket_id': ticket.id,
            'code': ticket.code,
            'delivery': ticket.delivery,
            'is_pickup': ticket.is_pickup,
            'quantity': ticket.quantity,
            'total_price': ticket.sold_price,
            'ticket_type': ticket.reserve.type_name,
            'name': ticket.buyer.name,
            'email': ticket.buyer.email,
            'paid': ticket.paid,
        }

    @staticmethod
    def confirm_payment(session_id):
        """Reconcile a completed checkout session with its pending ticket."""
        if not session_id:
            raise PurchaseError("Keine gültige Sitzungs-ID gefunden.")

        try:
            checkout = payments.retrieve_checkout_session(session_id)
        except PaymentProviderError:
            raise PurchaseError("Die Zahlung konnte nicht überprüft werden.")

        metadata = checkout.get('metadata') or {}
        try:
            ticket_id = int(metadata.get('sold_ticket_id'))
        except (TypeError, ValueError):
            raise PurchaseError("Bestellung nicht gefunden.")

        ticket = db.session.get(SoldTicket, ticket_id)
        if ticket is None:
            raise PurchaseError("Bestellung nicht gefunden.")

        if ticket.paid:
            return PurchaseService._confirmation_result(ticket)

        if checkout.get('payment_status') != 'paid':
            raise PurchaseError("Die Zahlung wurde noch nicht abgeschlossen.")

        # Only the confirmation that flips paid applies the side effects.
        flipped = SoldTicket.query.filter_by(id=ticket.id, paid=False).update(
            {
                'paid': True,
                'payment_reference': checkout.get('payment_intent') or session_id,
            },
            synchronize_session='fetch',
        )
        if flipped:
            TicketReserve.query.filter_by(id=ticket.reserve_id).update(
                {'amount': TicketReserve.amount - ticket.quantity},
                synchronize_session='fetch',
            )
        db.session.commit()
        db.session.refresh(ticket)

        if flipped:
            current_app.logger.info(f"Payment confirmed for ticket {ticket.id} ({ticket.payment_reference})")
            try:
                send_confirmation_email(ticket)
            except Exception as e:
                current_app.logger.error(f"Error sending confirmation email for ticket {ticket.id}: {e}")

        return PurchaseService._confirmation_result(ticket)
