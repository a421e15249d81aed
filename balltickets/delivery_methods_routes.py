# balltickets/delivery_methods_routes.py

from flask import Blueprint, render_template, request, jsonify, current_app

from . import db
from .auth.permissions import permission_required, Permissions
from .errors import AdminValidationError
from .services.delivery_method_service import DeliveryMethodService
from .utils import request_data, parse_float

delivery_methods_bp = Blueprint('delivery_methods_bp', __name__)


@delivery_methods_bp.route('/backend/delivery-methods')
@permission_required(Permissions.DELIVERY_METHODS)
def delivery_methods():
    return render_template('backend/delivery_methods.html', methods=DeliveryMethodService.list_methods())


@delivery_methods_bp.route('/backend/delivery-methods/<int:method_id>/update', methods=['POST'])
@permission_required(Permissions.DELIVERY_METHODS)
def update_delivery_method(method_id):
    data = request_data(request)
    try:
        method = DeliveryMethodService.update_surcharge(method_id, parse_float(data.get('surcharge')))
    except AdminValidationError as e:
        db.session.rollback()
        return jsonify(success=False, message=e.message), 400
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error updating delivery method {method_id}: {e}")
        return jsonify(success=False, message="Interner Serverfehler"), 500

    return jsonify(success=True, message="Aufpreis gespeichert", surcharge=method.surcharge)
