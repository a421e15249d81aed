from datetime import datetime
from flask import render_template, request, redirect, url_for, session, flash, jsonify, current_app
from flask_login import login_user, logout_user, current_user
from flask_principal import identity_changed, AnonymousIdentity

from . import auth_bp
from .. import db
from ..models import Buyer, BuyerGroup, BackendUser
from ..errors import MailDeliveryError
from ..utils import is_valid_email, normalize_email
from .email import send_login_link
from .tokens import verify_login_token, login_token_is_fresh
from .utils import PROVIDER_EMAIL, PROVIDER_CREDENTIALS, is_backend_session


@auth_bp.route('/auth/signin', methods=['GET', 'POST'])
def signin():
    """Buyer sign-in: request a passwordless email link."""
    if request.method == 'POST':
        email = normalize_email(request.form.get('email', ''))

        if not is_valid_email(email):
            flash('Bitte geben Sie eine gültige E-Mail-Adresse ein.', 'error')
            return redirect(url_for('auth_bp.signin'))

        try:
            send_login_link(email)
        except MailDeliveryError as e:
            current_app.logger.error(f"Sign-in email to {email} failed: {e}")
            flash('Die Anmelde-E-Mail konnte nicht gesendet werden. Bitte versuchen Sie es später erneut.', 'error')
            return redirect(url_for('auth_bp.signin'))

        return redirect(url_for('auth_bp.verify_request'))

    return render_template('auth/signin.html', error=request.args.get('error'))


@auth_bp.route('/auth/verify-request')
def verify_request():
    return render_template('auth/verify_request.html')


@auth_bp.route('/auth/callback/email')
def email_callback():
    """Consume a sign-in link, creating the buyer on first visit."""
    data = verify_login_token(request.args.get('token', ''))
    buyer = Buyer.query.filter_by(email=data['email']).first() if data else None
    if not data or not login_token_is_fresh(data, buyer):
        flash('Der Anmeldelink ist ungültig oder abgelaufen.', 'error')
        return redirect(url_for('auth_bp.signin'))

    email = data['email']
    if buyer is None:
        public_group = BuyerGroup.get_by_name(current_app.config['PUBLIC_GROUP_NAME'])
        buyer = Buyer(
            email=email,
            group=public_group,
            max_tickets=public_group.max_tickets if public_group else None,
        )
        db.session.add(buyer)
        current_app.logger.info(f"New buyer registered: {email}")

    buyer.verified = True
    buyer.last_login_at = datetime.utcnow()
    db.session.commit()

    login_user(buyer, remember=True)
    session['auth_provider'] = PROVIDER_EMAIL
    session.pop('group_name', None)
    return redirect(url_for('buyer_bp.portal'))


@auth_bp.route('/backend/login', methods=['GET', 'POST'])
def backend_login():
    """Staff sign-in with email and password."""
    if is_backend_session():
        return redirect(url_for('backend_bp.dashboard'))

    if request.method == 'POST':
        email = normalize_email(request.form.get('email', ''))
        password = request.form.get('password', '')

        if not email or not password:
            flash('E-Mail und Passwort sind erforderlich.', 'error')
            return redirect(url_for('auth_bp.backend_login'))

        if len(email) > 255 or len(password) > 128:
            flash('Eingabe zu lang.', 'error')
            return redirect(url_for('auth_bp.backend_login'))

        user = BackendUser.query.filter_by(email=email).first()

        if user and user.check_password(password):
            login_user(user, remember=False)
            session['auth_provider'] = PROVIDER_CREDENTIALS
            session['group_name'] = user.group_name

            next_page = request.args.get('next')
            if not next_page or not next_page.startswith('/'):
                next_page = url_for('backend_bp.dashboard')
            return redirect(next_page)

        flash('Ungültige E-Mail-Adresse oder falsches Passwort.', 'error')
        return redirect(url_for('auth_bp.backend_login'))

    return render_template('auth/backend_login.html')


@auth_bp.route('/auth/signout')
def signout():
    logout_user()
    session.pop('auth_provider', None)
    session.pop('group_name', None)
    identity_changed.send(current_app._get_current_object(), identity=AnonymousIdentity())
    return redirect(url_for('main_bp.index'))


@auth_bp.route('/api/check-backend-user')
def check_backend_user():
    if not current_user.is_authenticated or not current_user.email:
        return jsonify(isBackendUser=False)

    backend_user = BackendUser.query.filter_by(email=current_user.email).first()
    return jsonify(isBackendUser=backend_user is not None)
