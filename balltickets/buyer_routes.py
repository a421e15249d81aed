# balltickets/buyer_routes.py

from flask import Blueprint, render_template, request, redirect, url_for, jsonify, current_app, flash
from flask_login import current_user

from . import db
from .auth.utils import buyer_login_required
from .errors import PurchaseError
from .services.purchase_service import PurchaseService
from .services.settings_service import SettingsService
from .services.ticket_service import TicketService
from .utils import parse_int

buyer_bp = Blueprint('buyer_bp', __name__)

CONTACT_FIELDS = ('name', 'phone', 'address', 'postal', 'city', 'country')


@buyer_bp.route('/buyer')
@buyer_login_required
def portal():
    """Buyer home: own tickets, or the purchase form when nothing was bought yet."""
    return render_template(
        'buyer/portal.html',
        tickets=TicketService.buyer_tickets(current_user),
        available_tickets=PurchaseService.get_available_tickets(current_user),
        delivery_methods=PurchaseService.get_delivery_methods(),
        sale_open=SettingsService.is_sale_open(),
    )


@buyer_bp.route('/buyer/tickets')
@buyer_login_required
def my_tickets():
    return jsonify(TicketService.buyer_tickets(current_user))


@buyer_bp.route('/buyer/available-tickets')
@buyer_login_required
def available_tickets():
    return jsonify(PurchaseService.get_available_tickets(current_user))


@buyer_bp.route('/buyer/delivery-methods')
def delivery_methods():
    return jsonify(PurchaseService.get_delivery_methods())


@buyer_bp.route('/buyer/purchase', methods=['POST'])
@buyer_login_required
def purchase():
    """Start a purchase. JSON clients get the checkout URL, form posts are redirected."""
    wants_json = request.is_json
    data = request.get_json(silent=True) if wants_json else request.form

    contact_info = data.get('contactInfo') if wants_json else None
    if contact_info is None:
        contact_info = {field: data.get(field) for field in CONTACT_FIELDS}

    try:
        result = PurchaseService.create_purchase(
            buyer=current_user,
            delivery_method=data.get('deliveryMethod'),
            contact_info=contact_info,
            reserve_id=parse_int(data.get('ticketTypeId')),
            quantity=data.get('quantity'),
        )
    except PurchaseError as e:
        if wants_json:
            return jsonify(success=False, message=e.message), 400
        flash(e.message, 'error')
        return redirect(url_for('buyer_bp.portal'))
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Purchase error: {e}")
        message = "Fehler beim Erstellen der Bestellung. Bitte versuchen Sie es erneut."
        if wants_json:
            return jsonify(success=False, message=message), 500
        flash(message, 'error')
        return redirect(url_for('buyer_bp.portal'))

    if wants_json:
        return jsonify(success=True, checkoutUrl=result['checkout_url'], ticketId=result['ticket_id'])
    return redirect(result['checkout_url'], code=303)


@buyer_bp.route('/buyer/success')
def success():
    """Landing page after checkout; confirms the payment session."""
    session_id = request.args.get('session_id')
    if not session_id:
        return render_template('buyer/success.html', error="Keine gültige Sitzungs-ID gefunden."), 400

    try:
        order = PurchaseService.confirm_payment(session_id)
    except PurchaseError as e:
        return render_template('buyer/success.html', error=e.message), 400
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Payment confirmation error: {e}")
        return render_template(
            'buyer/success.html',
            error="Die Zahlung konnte nicht bestätigt werden. Bitte laden Sie die Seite neu."), 500

    return render_template('buyer/success.html', order=order)
