import os
from datetime import timedelta
from dotenv import load_dotenv

# Load environment variables from .env file
BASE_DIR = os.path.abspath(os.path.dirname(__file__))
dotenv_path = os.path.join(BASE_DIR, '.env')

# Load the .env file from that specific path
load_dotenv(dotenv_path=dotenv_path)


class Config:
    """Base configuration class."""

    # Get secret key and database URL from environment variables
    SECRET_KEY = os.getenv('SECRET_KEY') or 'dev-fallback-secret-key-change-in-prod'
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL') or \
        'sqlite:///' + os.path.join(BASE_DIR, 'balltickets.db')

    # Flask-SQLAlchemy settings
    SQLALCHEMY_ENGINE_OPTIONS = {'pool_recycle': 280}
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Session settings
    PERMANENT_SESSION_LIFETIME = timedelta(days=30)

    # Flask-Login settings
    REMEMBER_COOKIE_DURATION = timedelta(days=30)
    REMEMBER_COOKIE_HTTPONLY = True
    SESSION_PROTECTION = 'basic'

    # Flask-Caching (Graph access tokens live here)
    CACHE_TYPE = os.getenv('CACHE_TYPE', 'SimpleCache')
    CACHE_DEFAULT_TIMEOUT = 300

    # Public URL used in emails and payment redirects
    PUBLIC_BASE_URL = os.getenv('PUBLIC_BASE_URL', 'http://localhost:5000')

    # Ticket sale settings
    TICKET_SALE_DATE = os.getenv('TICKET_SALE_DATE')  # ISO format, e.g. 2026-01-10T18:00:00
    MAX_TICKETS_PER_ORDER = 10
    PICKUP_CODE_ATTEMPTS = 5
    MAGIC_LINK_MAX_AGE = int(timedelta(hours=24).total_seconds())
    CURRENCY = 'eur'
    PUBLIC_GROUP_NAME = 'Öffentlich'
    ALUMNI_GROUP_NAME = 'Absolventen'
    DEFAULT_MAX_TICKETS = 10

    # Venue marker on the directions page
    VENUE_NAME = os.getenv('VENUE_NAME', 'HTL Festsaal')
    VENUE_LATITUDE = float(os.getenv('VENUE_LATITUDE', 47.0707))
    VENUE_LONGITUDE = float(os.getenv('VENUE_LONGITUDE', 15.4395))

    # Pickup dates shown on the directions page and in pickup emails
    PICKUP_DATES = [
        {
            'date': os.getenv('PICKUP_DATE_1'),
            'start': os.getenv('PICKUP_DATE_1_START_TIME'),
            'end': os.getenv('PICKUP_DATE_1_END_TIME'),
        },
        {
            'date': os.getenv('PICKUP_DATE_2'),
            'start': os.getenv('PICKUP_DATE_2_START_TIME'),
            'end': os.getenv('PICKUP_DATE_2_END_TIME'),
        },
    ]

    # Payment provider (Stripe hosted checkout)
    STRIPE_SECRET_KEY = os.getenv('STRIPE_SECRET_KEY')
    STRIPE_PUBLISHABLE_KEY = os.getenv('STRIPE_PUBLISHABLE_KEY')
    STRIPE_API_BASE = os.getenv('STRIPE_API_BASE', 'https://api.stripe.com/v1')

    # Email configuration
    EMAIL_FROM = os.getenv('EMAIL_FROM', 'HTL Ball <ball@example.com>')
    MAIL_TRANSPORT = os.getenv('MAIL_TRANSPORT', 'graph')  # 'graph' or 'smtp'

    # Microsoft Graph app credentials (client credentials flow)
    GRAPH_CLIENT_ID = os.getenv('GRAPH_CLIENT_ID') or os.getenv('CLIENT_ID')
    GRAPH_TENANT_ID = os.getenv('GRAPH_TENANT_ID') or os.getenv('TENANT_ID')
    GRAPH_APP_SECRET = os.getenv('GRAPH_APP_SECRET') or os.getenv('APP_SECRET')

    # SMTP fallback through Flask-Mail
    MAIL_SERVER = os.getenv('MAIL_SERVER', 'smtp.office365.com')
    MAIL_PORT = int(os.getenv('MAIL_PORT', 587))
    MAIL_USE_TLS = os.getenv('MAIL_USE_TLS', 'true').lower() in ['true', 'on', '1']
    MAIL_USERNAME = os.getenv('MAIL_USERNAME')
    MAIL_PASSWORD = os.getenv('MAIL_PASSWORD')
    MAIL_DEFAULT_SENDER = EMAIL_FROM
