from flask import url_for, current_app

from .tokens import generate_login_token
from ..notifications import send_magic_link_email


def send_login_link(email):
    """Email a passwordless sign-in link. Delivery errors propagate to the caller."""
    token = generate_login_token(email)
    base_url = current_app.config['PUBLIC_BASE_URL'].rstrip('/')
    login_url = base_url + url_for('auth_bp.email_callback', token=token)

    current_app.logger.debug(f"Sign-in link for {email}: {login_url}")
    send_magic_link_email(email, login_url)
    return login_url
