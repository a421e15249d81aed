# balltickets/backend_routes.py

from flask import Blueprint, render_template, request, jsonify, current_app, abort
from flask_login import current_user

from . import db
from .auth.permissions import has_permission, get_allowed_routes, Permissions
from .auth.utils import backend_login_required, current_group_name
from .errors import AdminValidationError
from .services.settings_service import SettingsService
from .services.stats_service import StatsService
from .utils import csv_response, request_data
from datetime import date

backend_bp = Blueprint('backend_bp', __name__)

EXPORTS = {
    'reserves': (Permissions.RESERVES, StatsService.reserves_export),
    'tickets': (Permissions.TICKETS, StatsService.tickets_export),
    'buyers': (Permissions.BUYERS, StatsService.buyers_export),
}


@backend_bp.route('/backend')
@backend_login_required
def dashboard():
    group_name = current_group_name()
    stats = StatsService.dashboard_stats() if has_permission(group_name, Permissions.RESERVES) else None
    return render_template(
        'backend/dashboard.html',
        stats=stats,
        allowed_routes=get_allowed_routes(group_name),
        sales_enabled=SettingsService.get_sales_enabled(),
    )


@backend_bp.route('/backend/sales-enabled', methods=['GET', 'POST'])
def sales_enabled():
    """Public read of the kill switch; staff may toggle it."""
    if request.method == 'GET':
        return jsonify(enabled=SettingsService.get_sales_enabled())

    data = request_data(request)
    enabled = data.get('enabled')
    if enabled is None:
        return jsonify(success=False, message="Feld 'enabled' fehlt"), 400
    if isinstance(enabled, str):
        enabled = enabled.lower() in ('true', 'on', '1')

    try:
        result = SettingsService.set_sales_enabled(bool(enabled), current_user if current_user.is_authenticated else None)
    except AdminValidationError as e:
        return jsonify(success=False, message=e.message), 403
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error toggling sales: {e}")
        return jsonify(success=False, message="Interner Serverfehler"), 500

    return jsonify(result)


@backend_bp.route('/backend/export/<kind>.csv')
@backend_login_required
def export_csv(kind):
    if kind not in EXPORTS:
        abort(404)
    permission_key, builder = EXPORTS[kind]
    if not has_permission(current_group_name(), permission_key):
        abort(403)

    headers, rows = builder()
    filename = f"{kind}_export_{date.today().isoformat()}.csv"
    return csv_response(headers, rows, filename)
