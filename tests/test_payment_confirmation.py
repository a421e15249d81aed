import re
import pytest
from unittest.mock import patch

from balltickets import db
from balltickets.errors import PurchaseError, PaymentProviderError, MailDeliveryError
from balltickets.models import Buyer, SoldTicket, TicketReserve
from balltickets.services.purchase_service import PurchaseService

PICKUP_CONTACT = {'name': 'Anna Gast', 'phone': '+43 660 1234567'}


@pytest.fixture
def pending_ticket(app, buyer, seeded, checkout_session):
    """An unpaid order for three tickets."""
    with patch('balltickets.services.payments.create_checkout_session', return_value=checkout_session):
        with app.app_context():
            result = PurchaseService.create_purchase(
                buyer=db.session.get(Buyer, buyer.id),
                delivery_method='self-pickup',
                contact_info=PICKUP_CONTACT,
                reserve_id=seeded.reserve_id,
                quantity=3,
            )
    return result['ticket_id']


@patch('balltickets.services.purchase_service.send_confirmation_email')
@patch('balltickets.services.payments.retrieve_checkout_session')
def test_confirm_marks_paid_and_decrements_once(mock_retrieve, mock_email, app, seeded, pending_ticket, paid_session):
    mock_retrieve.return_value = paid_session(pending_ticket)

    with app.app_context():
        first = PurchaseService.confirm_payment('cs_test_123')
        second = PurchaseService.confirm_payment('cs_test_123')

        ticket = db.session.get(SoldTicket, pending_ticket)
        assert ticket.paid is True
        assert ticket.payment_reference == 'pi_test_456'
        assert db.session.get(TicketReserve, seeded.reserve_id).amount == 97

    assert first == second
    assert first['paid'] is True
    assert first['quantity'] == 3
    assert first['is_pickup'] is True
    assert mock_email.call_count == 1


@patch('balltickets.services.purchase_service.send_confirmation_email')
@patch('balltickets.services.payments.retrieve_checkout_session')
def test_confirm_skips_side_effects_when_another_request_won(mock_retrieve, mock_email, app, seeded, pending_ticket, paid_session):
    mock_retrieve.return_value = paid_session(pending_ticket)

    with app.app_context():
        # Load the ticket while it is still unpaid
        stale = db.session.get(SoldTicket, pending_ticket)
        assert stale.paid is False

        # A concurrent confirmation commits first
        with app.app_context():
            SoldTicket.query.filter_by(id=pending_ticket).update({'paid': True})
            db.session.commit()

        result = PurchaseService.confirm_payment('cs_test_123')

        assert result['paid'] is True
        assert db.session.get(TicketReserve, seeded.reserve_id).amount == 100

    mock_email.assert_not_called()


@patch('balltickets.services.purchase_service.send_confirmation_email')
@patch('balltickets.services.payments.retrieve_checkout_session')
def test_confirm_rejects_unpaid_session(mock_retrieve, mock_email, app, seeded, pending_ticket, paid_session):
    mock_retrieve.return_value = paid_session(pending_ticket, status='unpaid')

    with app.app_context():
        with pytest.raises(PurchaseError):
            PurchaseService.confirm_payment('cs_test_123')

        assert db.session.get(SoldTicket, pending_ticket).paid is False
        assert db.session.get(TicketReserve, seeded.reserve_id).amount == 100

    mock_email.assert_not_called()


@patch('balltickets.services.payments.retrieve_checkout_session')
def test_confirm_rejects_unknown_ticket(mock_retrieve, app, seeded, paid_session):
    mock_retrieve.return_value = paid_session(4242)

    with app.app_context():
        with pytest.raises(PurchaseError):
            PurchaseService.confirm_payment('cs_test_123')


@patch('balltickets.services.payments.retrieve_checkout_session')
def test_confirm_wraps_provider_errors(mock_retrieve, app, seeded):
    mock_retrieve.side_effect = PaymentProviderError("down")

    with app.app_context():
        with pytest.raises(PurchaseError):
            PurchaseService.confirm_payment('cs_test_123')


def test_confirm_requires_session_id(app):
    with app.app_context():
        with pytest.raises(PurchaseError):
            PurchaseService.confirm_payment('')


@patch('balltickets.services.purchase_service.send_confirmation_email')
@patch('balltickets.services.payments.retrieve_checkout_session')
def test_confirmation_survives_email_failure(mock_retrieve, mock_email, app, seeded, pending_ticket, paid_session):
    mock_retrieve.return_value = paid_session(pending_ticket)
    mock_email.side_effect = MailDeliveryError("smtp down")

    with app.app_context():
        result = PurchaseService.confirm_payment('cs_test_123')

        assert result['paid'] is True
        assert db.session.get(TicketReserve, seeded.reserve_id).amount == 97


@patch('balltickets.services.purchase_service.send_confirmation_email')
@patch('balltickets.services.payments.retrieve_checkout_session')
def test_success_page_shows_pickup_code(mock_retrieve, mock_email, app, client, pending_ticket, paid_session, captured_templates):
    mock_retrieve.return_value = paid_session(pending_ticket)

    response = client.get('/buyer/success', query_string={'session_id': 'cs_test_123'})

    assert response.status_code == 200
    template, context = captured_templates[0]
    assert template.name == 'buyer/success.html'
    assert re.fullmatch(r'HTL-[A-Z0-9]{4}-[A-Z0-9]{4}', context['order']['code'])
    assert context['order']['code'].encode() in response.data


def test_success_page_without_session_id(client, seeded):
    response = client.get('/buyer/success')
    assert response.status_code == 400
