"""
Pytest configuration and fixtures.
"""
import sys
import os
import tempfile
from types import SimpleNamespace

import pytest

# Add project root to Python path
sys.path.insert(0, os.path.abspath(os.path.dirname(__file__) + '/..'))

STAFF_PASSWORD = 'correct-horse-battery'


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    from balltickets import create_app
    from config import Config

    class TestConfig(Config):
        TESTING = True
        db_fd, db_path = tempfile.mkstemp()
        SQLALCHEMY_DATABASE_URI = f'sqlite:///{db_path}'
        SQLALCHEMY_ENGINE_OPTIONS = {}
        SERVER_NAME = 'localhost.localdomain'
        PUBLIC_BASE_URL = 'http://localhost.localdomain'
        PRESERVE_CONTEXT_ON_EXCEPTION = False
        ASSETS_DEBUG = True
        CACHE_TYPE = 'SimpleCache'
        TICKET_SALE_DATE = None
        STRIPE_SECRET_KEY = 'sk_test_dummy'
        MAIL_TRANSPORT = 'graph'
        EMAIL_FROM = 'HTL Ball <ball@example.com>'
        GRAPH_CLIENT_ID = 'client-id'
        GRAPH_TENANT_ID = 'tenant-id'
        GRAPH_APP_SECRET = 'app-secret'

    app = create_app(TestConfig)

    with app.app_context():
        from balltickets import db
        db.session.configure(expire_on_commit=False)
        db.create_all()

    yield app

    os.close(TestConfig.db_fd)
    os.unlink(TestConfig.db_path)


@pytest.fixture(scope='function', autouse=True)
def clean_db(app):
    """Clean database and cache between tests."""
    with app.app_context():
        from balltickets import db, cache
        db.drop_all()
        db.create_all()
        cache.clear()
    yield


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def seeded(app):
    """Reference data plus one contingent with both delivery methods."""
    from balltickets import db
    from balltickets.commands.seed_data import seed_reference_data
    from balltickets.models import TicketType, DeliveryMethod, TicketReserve, BuyerGroup

    with app.app_context():
        seed_reference_data()
        full_price = TicketType.query.filter_by(name='Vollpreis').first()
        shipping = DeliveryMethod.query.filter_by(name='Versand').first()
        pickup = DeliveryMethod.query.filter_by(name='Selbstabholung').first()

        reserve = TicketReserve(
            amount=100,
            price=45.0,
            type=full_price,
            delivery_methods=[shipping, pickup],
            updated_by='Test',
        )
        db.session.add(reserve)
        db.session.commit()

        return SimpleNamespace(
            reserve_id=reserve.id,
            type_id=full_price.id,
            shipping_id=shipping.id,
            pickup_id=pickup.id,
            public_group_id=BuyerGroup.get_by_name(app.config['PUBLIC_GROUP_NAME']).id,
            alumni_group_id=BuyerGroup.get_by_name(app.config['ALUMNI_GROUP_NAME']).id,
        )


@pytest.fixture(scope='function')
def buyer(app, seeded):
    """A verified buyer in the public group."""
    from balltickets import db
    from balltickets.models import Buyer, BuyerGroup

    with app.app_context():
        group = db.session.get(BuyerGroup, seeded.public_group_id)
        buyer = Buyer(email='anna@example.com', name='Anna Gast', verified=True, group=group)
        db.session.add(buyer)
        db.session.commit()
        db.session.refresh(buyer)
        return buyer


def _create_staff(email, group_name):
    from balltickets import db
    from balltickets.models import BackendUser, BackendGroup

    group = BackendGroup.query.filter_by(name=group_name).first()
    if not group:
        group = BackendGroup(name=group_name)
        db.session.add(group)
    user = BackendUser(email=email, first_name='Maria', sur_name='Huber', group=group)
    user.set_password(STAFF_PASSWORD)
    db.session.add(user)
    db.session.commit()
    db.session.refresh(user)
    return user


@pytest.fixture(scope='function')
def admin_user(app, seeded):
    with app.app_context():
        return _create_staff('admin@example.com', 'Admin')


@pytest.fixture(scope='function')
def import_user(app, seeded):
    with app.app_context():
        return _create_staff('import@example.com', 'Import')


@pytest.fixture(scope='function')
def checkout_session():
    """Fake hosted checkout session returned by the payment provider."""
    return {'id': 'cs_test_123', 'url': 'https://checkout.stripe.test/pay/cs_test_123'}


def _paid_session(ticket_id, session_id='cs_test_123', status='paid'):
    return {
        'id': session_id,
        'payment_status': status,
        'payment_intent': 'pi_test_456',
        'metadata': {'sold_ticket_id': str(ticket_id)},
    }


@pytest.fixture(scope='function')
def paid_session():
    """Builder for a completed checkout session pointing at a ticket."""
    return _paid_session


class AuthActions:
    def __init__(self, app, client):
        self._app = app
        self._client = client

    def login_buyer(self, email='anna@example.com'):
        from balltickets.auth.tokens import generate_login_token
        with self._app.app_context():
            token = generate_login_token(email)
        return self._client.get('/auth/callback/email', query_string={'token': token})

    def login_staff(self, email='admin@example.com', password=STAFF_PASSWORD):
        return self._client.post(
            '/backend/login',
            data={'email': email, 'password': password},
        )

    def logout(self):
        return self._client.get('/auth/signout')


@pytest.fixture
def auth(app, client):
    return AuthActions(app, client)


@pytest.fixture
def captured_templates(app):
    recorded = []

    def record(sender, template, context, **extra):
        recorded.append((template, context))

    from flask import template_rendered
    template_rendered.connect(record, app)
    try:
        yield recorded
    finally:
        template_rendered.disconnect(record, app)
