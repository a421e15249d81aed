from flask import current_app

from .. import db
from ..models import SoldTicket, Buyer
from ..errors import AdminValidationError
from ..notifications import send_shipping_notification_email, send_pickup_notification_email


class TicketService:
    @staticmethod
    def list_tickets():
        return SoldTicket.query.order_by(SoldTicket.id.asc()).all()

    @staticmethod
    def buyer_tickets(buyer):
        return [t.to_dict() for t in buyer.sold_tickets]

    @staticmethod
    def list_buyers():
        return Buyer.query.order_by(Buyer.id.asc()).all()

    @staticmethod
    def mark_as_sent(ticket_id):
        """Flag a paid shipping order as posted and notify the buyer (best effort)."""
        ticket = db.session.get(SoldTicket, ticket_id)
        if ticket is None:
            raise AdminValidationError("Karte nicht gefunden")
        if not ticket.paid:
            raise AdminValidationError("Nur bezahlte Karten können versendet werden")
        if not ticket.is_shipping:
            raise AdminValidationError("Diese Karte wird nicht versendet, sondern abgeholt")
        if ticket.sent:
            raise AdminValidationError("Diese Karte wurde bereits versendet")

        ticket.sent = True
        db.session.commit()

        try:
            send_shipping_notification_email(ticket)
        except Exception as e:
            current_app.logger.error(f"Error sending shipping notification for ticket {ticket.id}: {e}")
        return ticket

    @staticmethod
    def mark_picked_up(code):
        """Hand out a self-pickup order identified by its pickup code."""
        code = (code or '').strip().upper()
        ticket = SoldTicket.query.filter_by(code=code).first()
        if ticket is None:
            raise AdminValidationError("Unbekannter Abholcode")
        if not ticket.paid:
            raise AdminValidationError("Diese Bestellung wurde noch nicht bezahlt")
        if not ticket.is_pickup:
            raise AdminValidationError("Diese Bestellung wird versendet, nicht abgeholt")
        if ticket.sent:
            raise AdminValidationError("Diese Karten wurden bereits abgeholt")

        ticket.sent = True
        db.session.commit()

        try:
            send_pickup_notification_email(ticket)
        except Exception as e:
            current_app.logger.error(f"Error sending pickup notification for ticket {ticket.id}: {e}")
        return ticket
