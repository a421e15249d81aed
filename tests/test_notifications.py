import pytest
import requests
from unittest.mock import patch, MagicMock

from balltickets import db
from balltickets.errors import MailDeliveryError, PaymentProviderError
from balltickets.models import Buyer, SoldTicket
from balltickets.notifications import send_confirmation_email, send_magic_link_email
from balltickets.services import graph_client, payments


def _token_response(token='graph-token'):
    response = MagicMock()
    response.json.return_value = {'access_token': token, 'expires_in': 3600}
    return response


def _ticket(app, buyer_id, reserve_id, delivery):
    with app.app_context():
        ticket = SoldTicket(
            delivery=delivery, code='HTL-MAIL-0001', quantity=2, paid=True, sold_price=95.0,
            buyer=db.session.get(Buyer, buyer_id), reserve_id=reserve_id,
        )
        db.session.add(ticket)
        db.session.commit()
        return ticket.id


@patch('balltickets.services.graph_client.requests.post')
def test_graph_token_is_cached(mock_post, app):
    mock_post.return_value = _token_response()

    with app.app_context():
        assert graph_client.get_access_token() == 'graph-token'
        assert graph_client.get_access_token() == 'graph-token'

    assert mock_post.call_count == 1
    assert 'tenant-id/oauth2/v2.0/token' in mock_post.call_args.args[0]


@patch('balltickets.services.graph_client.requests.post')
def test_graph_send_mail(mock_post, app):
    mock_post.return_value = _token_response()

    with app.app_context():
        graph_client.send_mail('ball@example.com', 'anna@example.com', 'Betreff', '<p>Hallo</p>')

    url = mock_post.call_args.args[0]
    kwargs = mock_post.call_args.kwargs
    assert url.endswith('/users/ball@example.com/sendMail')
    assert kwargs['headers']['Authorization'] == 'Bearer graph-token'
    assert kwargs['json']['message']['toRecipients'][0]['emailAddress']['address'] == 'anna@example.com'


@patch('balltickets.services.graph_client.requests.post')
def test_graph_failure_raises_mail_error(mock_post, app):
    mock_post.side_effect = requests.ConnectionError("offline")

    with app.app_context():
        with pytest.raises(MailDeliveryError):
            graph_client.send_mail('ball@example.com', 'anna@example.com', 'Betreff', '<p>Hallo</p>')


def test_graph_requires_credentials(app):
    app.config['GRAPH_APP_SECRET'] = None
    try:
        with app.app_context():
            with pytest.raises(MailDeliveryError):
                graph_client.get_access_token()
    finally:
        app.config['GRAPH_APP_SECRET'] = 'app-secret'


@patch('balltickets.notifications.graph_client.send_mail')
def test_magic_link_email(mock_send, app):
    with app.test_request_context():
        send_magic_link_email('anna@example.com', 'http://localhost.localdomain/auth/callback/email?token=abc')

    sender, to, subject, html = mock_send.call_args.args
    assert sender == 'ball@example.com'
    assert to == 'anna@example.com'
    assert 'token=abc' in html


@patch('balltickets.notifications.graph_client.send_mail')
def test_pickup_confirmation_contains_code(mock_send, app, buyer, seeded):
    ticket_id = _ticket(app, buyer.id, seeded.reserve_id, 'Selbstabholung')

    with app.test_request_context():
        send_confirmation_email(db.session.get(SoldTicket, ticket_id))

    _, _, subject, html = mock_send.call_args.args
    assert 'Abholung' in subject
    assert 'HTL-MAIL-0001' in html
    assert '95,00 €' in html


@patch('balltickets.notifications.graph_client.send_mail')
def test_shipping_confirmation_variant(mock_send, app, buyer, seeded):
    ticket_id = _ticket(app, buyer.id, seeded.reserve_id, 'Versand')

    with app.test_request_context():
        send_confirmation_email(db.session.get(SoldTicket, ticket_id))

    _, _, subject, html = mock_send.call_args.args
    assert 'Versand' in subject
    assert 'HTL-MAIL-0001' not in html


@patch('balltickets.notifications.mail.send')
def test_smtp_transport_uses_flask_mail(mock_send, app):
    app.config['MAIL_TRANSPORT'] = 'smtp'
    try:
        with app.test_request_context():
            send_magic_link_email('anna@example.com', 'http://localhost.localdomain/login')
    finally:
        app.config['MAIL_TRANSPORT'] = 'graph'

    message = mock_send.call_args.args[0]
    assert message.recipients == ['anna@example.com']


def test_flatten_uses_bracketed_keys():
    flat = payments._flatten({
        'line_items': [{'price_data': {'unit_amount': 4500}, 'quantity': 2}],
        'metadata': {'sold_ticket_id': 7},
        'customer_email': None,
    })

    assert flat == [
        ('line_items[0][price_data][unit_amount]', '4500'),
        ('line_items[0][quantity]', '2'),
        ('metadata[sold_ticket_id]', '7'),
    ]


@patch('balltickets.services.payments.requests.request')
def test_checkout_session_request(mock_request, app):
    mock_request.return_value.json.return_value = {'id': 'cs_1', 'url': 'https://pay'}

    with app.app_context():
        session = payments.create_checkout_session(
            line_items=[], metadata={'sold_ticket_id': 1}, customer_email='anna@example.com',
            success_url='https://ok', cancel_url='https://cancel')

    assert session['id'] == 'cs_1'
    method, url = mock_request.call_args.args
    assert method == 'POST'
    assert url == 'https://api.stripe.com/v1/checkout/sessions'
    assert mock_request.call_args.kwargs['auth'] == ('sk_test_dummy', '')


@patch('balltickets.services.payments.requests.request')
def test_payment_provider_errors_are_wrapped(mock_request, app):
    mock_request.side_effect = requests.Timeout("slow")

    with app.app_context():
        with pytest.raises(PaymentProviderError):
            payments.retrieve_checkout_session('cs_1')
