from itsdangerous import URLSafeTimedSerializer as Serializer, BadSignature, SignatureExpired
from flask import current_app

from ..models import Buyer

SALT = 'buyer-email-login'


def _login_stamp(buyer):
    if buyer is None or buyer.last_login_at is None:
        return None
    return buyer.last_login_at.isoformat()


def generate_login_token(email):
    """
    Sign the email together with the buyer's last login time. Signing in
    moves that time forward, so every link works exactly once.
    """
    s = Serializer(current_app.config['SECRET_KEY'], salt=SALT)
    buyer = Buyer.query.filter_by(email=email).first()
    return s.dumps({'email': email, 'last_login': _login_stamp(buyer)})


def verify_login_token(token):
    """Return the token payload, or None when it is invalid or expired."""
    s = Serializer(current_app.config['SECRET_KEY'], salt=SALT)
    try:
        data = s.loads(token, max_age=current_app.config['MAGIC_LINK_MAX_AGE'])
    except (SignatureExpired, BadSignature):
        return None
    if not data.get('email'):
        return None
    return data


def login_token_is_fresh(data, buyer):
    """False once the buyer has signed in since the token was issued."""
    return data.get('last_login') == _login_stamp(buyer)
