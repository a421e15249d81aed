import pytest

from balltickets import db
from balltickets.models import SystemSettings
from balltickets.services.settings_service import SettingsService


@pytest.mark.parametrize('path', ['/', '/anfahrt', '/impressum', '/dsgvo', '/auth/signin', '/backend/login'])
def test_public_pages_render(client, seeded, path):
    assert client.get(path).status_code == 200


def test_index_announces_sale_date(app, client, seeded):
    app.config['TICKET_SALE_DATE'] = '2999-03-01T18:00:00'
    try:
        response = client.get('/')
    finally:
        app.config['TICKET_SALE_DATE'] = None

    assert '01.03.2999'.encode() in response.data


def test_sales_enabled_defaults_to_true_without_settings_row(app):
    with app.app_context():
        assert SystemSettings.query.count() == 0
        assert SettingsService.get_sales_enabled() is True
        assert SettingsService.is_sale_open() is True


def test_kill_switch_closes_sale(app, seeded):
    with app.app_context():
        db.session.get(SystemSettings, 1).sales_enabled = False
        db.session.commit()
        assert SettingsService.is_sale_open() is False


def test_portal_lists_available_tickets(client, auth, buyer, captured_templates):
    auth.login_buyer()

    response = client.get('/buyer')

    assert response.status_code == 200
    _, context = captured_templates[-1]
    assert context['sale_open'] is True
    assert len(context['available_tickets']) == 1
    assert context['tickets'] == []


def test_delivery_methods_endpoint(client, seeded):
    names = [m['name'] for m in client.get('/buyer/delivery-methods').json]
    assert names == ['Versand', 'Selbstabholung']
