import math

from .. import db
from ..models import DeliveryMethod
from ..errors import AdminValidationError


class DeliveryMethodService:
    @staticmethod
    def list_methods():
        return DeliveryMethod.query.order_by(DeliveryMethod.id.asc()).all()

    @staticmethod
    def update_surcharge(method_id, surcharge):
        method = db.session.get(DeliveryMethod, method_id)
        if method is None:
            raise AdminValidationError("Versandmethode nicht gefunden")
        if surcharge is None or not math.isfinite(surcharge):
            raise AdminValidationError("Aufpreis muss eine gültige Zahl sein")
        if surcharge < 0:
            raise AdminValidationError("Aufpreis darf nicht minus sein")

        method.surcharge = surcharge
        db.session.commit()
        return method
