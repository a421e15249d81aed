# balltickets/tickets_routes.py

from flask import Blueprint, render_template, request, jsonify, current_app

from . import db
from .auth.permissions import permission_required, Permissions
from .errors import AdminValidationError
from .services.ticket_service import TicketService
from .utils import request_data

tickets_bp = Blueprint('tickets_bp', __name__)


@tickets_bp.route('/backend/tickets')
@permission_required(Permissions.TICKETS)
def tickets():
    return render_template('backend/tickets.html', tickets=TicketService.list_tickets())


@tickets_bp.route('/backend/tickets/all')
@permission_required(Permissions.TICKETS)
def all_tickets():
    return jsonify([t.to_dict() for t in TicketService.list_tickets()])


@tickets_bp.route('/backend/tickets/<int:ticket_id>/mark-sent', methods=['POST'])
@permission_required(Permissions.TICKETS)
def mark_as_sent(ticket_id):
    try:
        ticket = TicketService.mark_as_sent(ticket_id)
    except AdminValidationError as e:
        db.session.rollback()
        return jsonify(success=False, message=e.message), 400
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error marking ticket {ticket_id} as sent: {e}")
        return jsonify(success=False, message="Interner Serverfehler"), 500

    return jsonify(success=True, message="Als versendet markiert", id=ticket.id)


@tickets_bp.route('/backend/tickets/pickup', methods=['POST'])
@permission_required(Permissions.TICKETS)
def mark_picked_up():
    data = request_data(request)
    try:
        ticket = TicketService.mark_picked_up(data.get('code'))
    except AdminValidationError as e:
        db.session.rollback()
        return jsonify(success=False, message=e.message), 400
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error handing out pickup code: {e}")
        return jsonify(success=False, message="Interner Serverfehler"), 500

    return jsonify(success=True, message="Karten ausgegeben", id=ticket.id, quantity=ticket.quantity)
