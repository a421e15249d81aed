# balltickets/reserves_routes.py

from flask import Blueprint, render_template, request, jsonify, current_app

from . import db
from .auth.permissions import permission_required, Permissions
from .auth.utils import current_staff_name
from .errors import AdminValidationError
from .services.reserve_service import ReserveService
from .utils import request_data, parse_int, parse_float, get_id_list, format_timestamp

reserves_bp = Blueprint('reserves_bp', __name__)


def _serialize(reserves):
    for reserve in reserves:
        reserve['updatedAt'] = format_timestamp(reserve['updatedAt'])
    return reserves


@reserves_bp.route('/backend/reserves')
@permission_required(Permissions.RESERVES)
def reserves():
    return render_template(
        'backend/reserves.html',
        reserves=ReserveService.list_reserves(),
        types=ReserveService.get_types(),
        delivery_methods=ReserveService.get_delivery_methods(),
    )


@reserves_bp.route('/backend/reserves/all')
@permission_required(Permissions.RESERVES)
def all_reserves():
    return jsonify(_serialize(ReserveService.list_reserves()))


@reserves_bp.route('/backend/reserves/types')
@permission_required(Permissions.RESERVES)
def types():
    return jsonify([{'id': t.id, 'name': t.name} for t in ReserveService.get_types()])


@reserves_bp.route('/backend/reserves/delivery-methods')
@permission_required(Permissions.RESERVES)
def delivery_methods():
    return jsonify([m.to_dict() for m in ReserveService.get_delivery_methods()])


@reserves_bp.route('/backend/reserves/create', methods=['POST'])
@permission_required(Permissions.RESERVES)
def create_reserve():
    data = request_data(request)
    try:
        reserve = ReserveService.create_reserve(
            amount=parse_int(data.get('amount')),
            price=parse_float(data.get('price')),
            type_id=parse_int(data.get('typeId')),
            delivery_method_ids=get_id_list(data, 'deliveryMethodIds'),
            updated_by=current_staff_name(),
        )
    except AdminValidationError as e:
        db.session.rollback()
        return jsonify(success=False, message=e.message), 400
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error creating reserve: {e}")
        return jsonify(success=False, message="Interner Serverfehler"), 500

    return jsonify(success=True, message="Kontingent erstellt", id=reserve.id)


@reserves_bp.route('/backend/reserves/<int:reserve_id>/update', methods=['POST'])
@permission_required(Permissions.RESERVES)
def update_reserve(reserve_id):
    data = request_data(request)
    try:
        reserve = ReserveService.update_reserve(
            reserve_id,
            amount=parse_int(data.get('amount')),
            price=parse_float(data.get('price')),
            delivery_method_ids=get_id_list(data, 'deliveryMethodIds'),
            updated_by=current_staff_name(),
        )
    except AdminValidationError as e:
        db.session.rollback()
        return jsonify(success=False, message=e.message), 400
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error updating reserve {reserve_id}: {e}")
        return jsonify(success=False, message="Interner Serverfehler"), 500

    return jsonify(success=True, message="Kontingent aktualisiert", amount=reserve.amount)
