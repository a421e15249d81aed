from .. import db
from ..models import BuyerGroup, TicketReserve
from ..errors import AdminValidationError


class BuyerGroupService:
    @staticmethod
    def list_groups():
        groups = BuyerGroup.query.order_by(BuyerGroup.name.asc()).all()
        return [{
            'id': group.id,
            'name': group.name,
            'maxTickets': group.max_tickets,
            'updatedAt': group.updated_at,
            'updatedBy': group.updated_by,
            'ticketReserves': [{
                'id': reserve.id,
                'amount': reserve.amount,
                'price': reserve.price,
                'type': reserve.type_name,
            } for reserve in group.ticket_reserves],
        } for group in groups]

    @staticmethod
    def update_max_tickets(group_id, max_tickets, updated_by, reserve_id=None):
        """
        Set the per-buyer limit of a group. When a reserve is given, the
        limit may not exceed what that contingent still has available.
        """
        group = db.session.get(BuyerGroup, group_id)
        if group is None:
            raise AdminValidationError("Gruppe nicht gefunden")
        if max_tickets is None or max_tickets < 0:
            raise AdminValidationError("Max. Karten darf nicht minus sein")

        if reserve_id:
            reserve = db.session.get(TicketReserve, reserve_id)
            if reserve is None:
                raise AdminValidationError("Kontingent nicht gefunden")
            if max_tickets > reserve.amount:
                raise AdminValidationError(
                    f"Max. Karten ({max_tickets}) darf das Kontingent nicht überschreiten "
                    f"({reserve.amount} verfügbar)")

        group.max_tickets = max_tickets
        group.updated_by = updated_by or "Unbekannt"
        db.session.commit()
        return group
