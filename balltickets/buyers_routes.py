# balltickets/buyers_routes.py

from flask import Blueprint, render_template, request, jsonify, current_app

from . import db
from .auth.permissions import permission_required, Permissions
from .errors import AdminValidationError
from .services.alumni_import_service import import_alumni
from .services.ticket_service import TicketService

buyers_bp = Blueprint('buyers_bp', __name__)


@buyers_bp.route('/backend/buyers')
@permission_required(Permissions.BUYERS)
def buyers():
    return render_template('backend/buyers.html', buyers=TicketService.list_buyers())


@buyers_bp.route('/backend/import-alumni', methods=['GET', 'POST'])
@permission_required(Permissions.IMPORT)
def import_alumni_page():
    if request.method == 'GET':
        return render_template('backend/import_alumni.html', results=None)

    upload = request.files.get('file')
    if upload and upload.filename:
        csv_content = upload.read().decode('utf-8-sig', errors='replace')
    else:
        data = request.get_json(silent=True) or request.form
        csv_content = data.get('csvContent', '')

    try:
        results = import_alumni(csv_content)
    except AdminValidationError as e:
        db.session.rollback()
        if request.is_json:
            return jsonify(success=False, message=e.message), 400
        return render_template('backend/import_alumni.html', results=None, error=e.message), 400
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Alumni import failed: {e}")
        message = "Fehler beim Import: Unbekannter Fehler"
        if request.is_json:
            return jsonify(success=False, message=message), 500
        return render_template('backend/import_alumni.html', results=None, error=message), 500

    if request.is_json:
        return jsonify(results)
    return render_template('backend/import_alumni.html', results=results)
