from functools import wraps
from flask import redirect, url_for, session, flash, request, has_request_context
from flask_login import current_user

PROVIDER_EMAIL = 'email'
PROVIDER_CREDENTIALS = 'credentials'


def current_provider():
    """The provider tag stored in the session at sign-in."""
    if not has_request_context() or not current_user.is_authenticated:
        return None
    return session.get('auth_provider', getattr(current_user, 'auth_provider', None))


def current_group_name():
    if current_provider() != PROVIDER_CREDENTIALS:
        return None
    return session.get('group_name') or getattr(current_user, 'group_name', None)


def is_backend_session():
    return current_provider() == PROVIDER_CREDENTIALS


def is_buyer_session():
    return current_provider() == PROVIDER_EMAIL


def current_staff_name():
    """Name recorded in `updated_by` columns."""
    if is_backend_session():
        return getattr(current_user, 'full_name', None) or 'Unbekannt'
    return 'Unbekannt'


def backend_login_required(f):
    """Only staff signed in with credentials may pass."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not is_backend_session():
            flash('Für den Backend-Zugang ist eine Anmeldung mit Passwort erforderlich.', 'error')
            return redirect(url_for('auth_bp.backend_login', next=request.path))
        return f(*args, **kwargs)
    return decorated_function


def buyer_login_required(f):
    """Only buyers signed in through the email link may pass."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not is_buyer_session():
            return redirect(url_for('auth_bp.signin', next=request.path))
        return f(*args, **kwargs)
    return decorated_function
