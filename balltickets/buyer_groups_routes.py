# balltickets/buyer_groups_routes.py

from flask import Blueprint, render_template, request, jsonify, current_app

from . import db
from .auth.permissions import permission_required, Permissions
from .auth.utils import current_staff_name
from .errors import AdminValidationError
from .services.buyer_group_service import BuyerGroupService
from .utils import request_data, parse_int

buyer_groups_bp = Blueprint('buyer_groups_bp', __name__)


@buyer_groups_bp.route('/backend/buyer-groups')
@permission_required(Permissions.BUYERS)
def buyer_groups():
    return render_template('backend/buyer_groups.html', groups=BuyerGroupService.list_groups())


@buyer_groups_bp.route('/backend/buyer-groups/<int:group_id>/update', methods=['POST'])
@permission_required(Permissions.BUYERS)
def update_buyer_group(group_id):
    data = request_data(request)
    try:
        group = BuyerGroupService.update_max_tickets(
            group_id,
            parse_int(data.get('maxTickets')),
            updated_by=current_staff_name(),
            reserve_id=parse_int(data.get('reserveId')),
        )
    except AdminValidationError as e:
        db.session.rollback()
        return jsonify(success=False, message=e.message), 400
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error updating buyer group {group_id}: {e}")
        return jsonify(success=False, message="Interner Serverfehler"), 500

    return jsonify(success=True, message="Gruppe aktualisiert", maxTickets=group.max_tickets)
