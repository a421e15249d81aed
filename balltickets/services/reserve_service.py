import math

from .. import db
from ..models import TicketReserve, TicketType, DeliveryMethod
from ..errors import AdminValidationError


def _validate_bounds(amount, price, delivery_method_ids):
    if amount is None:
        raise AdminValidationError("Anzahl ist erforderlich")
    if amount < 1:
        raise AdminValidationError("Anzahl muss mindestens 1 sein")
    if price is None:
        raise AdminValidationError("Preis ist erforderlich")
    if not math.isfinite(price):
        raise AdminValidationError("Preis muss eine gültige Zahl sein")
    if price < 0:
        raise AdminValidationError("Preis darf nicht minus sein")
    if not delivery_method_ids:
        raise AdminValidationError("Mindestens eine Versandmethode muss gewählt werden")


def _load_delivery_methods(delivery_method_ids):
    methods = DeliveryMethod.query.filter(DeliveryMethod.id.in_(delivery_method_ids)).all()
    if len(methods) != len(set(delivery_method_ids)):
        raise AdminValidationError("Unbekannte Versandmethode")
    return methods


class ReserveService:
    @staticmethod
    def list_reserves():
        reserves = TicketReserve.query.order_by(TicketReserve.id.asc()).all()
        result = []
        for reserve in reserves:
            sold = reserve.sold_count
            result.append({
                'id': reserve.id,
                'type': reserve.type_name,
                'type_id': reserve.type_id,
                'amount': reserve.amount,
                'price': reserve.price,
                'sold': sold,
                'remaining': reserve.amount,
                'deliveryMethods': [m.to_dict() for m in reserve.delivery_methods],
                'updatedAt': reserve.updated_at,
                'updatedBy': reserve.updated_by,
            })
        return result

    @staticmethod
    def get_types():
        return TicketType.query.order_by(TicketType.name.asc()).all()

    @staticmethod
    def get_delivery_methods():
        return DeliveryMethod.query.order_by(DeliveryMethod.id.asc()).all()

    @staticmethod
    def create_reserve(amount, price, type_id, delivery_method_ids, updated_by):
        _validate_bounds(amount, price, delivery_method_ids)
        if type_id is None:
            raise AdminValidationError("Kartentyp ist erforderlich")
        ticket_type = db.session.get(TicketType, type_id)
        if ticket_type is None:
            raise AdminValidationError("Kartentyp nicht gefunden")

        reserve = TicketReserve(
            amount=amount,
            price=price,
            type=ticket_type,
            delivery_methods=_load_delivery_methods(delivery_method_ids),
            updated_by=updated_by or "Unbekannt",
        )
        db.session.add(reserve)
        db.session.commit()
        return reserve

    @staticmethod
    def update_reserve(reserve_id, amount, price, delivery_method_ids, updated_by):
        """Edit a contingent. The amount may never drop below what has already been sold."""
        reserve = db.session.get(TicketReserve, reserve_id)
        if reserve is None:
            raise AdminValidationError("Kontingent nicht gefunden")

        _validate_bounds(amount, price, delivery_method_ids)

        sold = reserve.sold_count
        if amount < sold:
            raise AdminValidationError(
                f"Anzahl ({amount}) darf nicht kleiner als die bereits verkauften Karten ({sold}) sein")

        reserve.amount = amount
        reserve.price = price
        reserve.delivery_methods = _load_delivery_methods(delivery_method_ids)
        reserve.updated_by = updated_by or "Unbekannt"
        db.session.commit()
        return reserve
