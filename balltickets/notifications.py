"""
Transactional emails: sign-in link, purchase confirmation, shipping and
pickup notifications.

Messages go out through the Microsoft Graph sendMail endpoint, or
through Flask-Mail when MAIL_TRANSPORT is 'smtp'. Every sender raises
MailDeliveryError on failure; callers decide whether that is fatal.
"""
from flask import current_app, render_template
from flask_mail import Message

from . import mail
from .errors import MailDeliveryError
from .services import graph_client
from .utils import extract_email_address, format_euro

EVENT_TITLE = "HTL Ball 2026"


def _deliver(to, subject, html):
    sender = current_app.config.get('EMAIL_FROM')
    if not sender:
        raise MailDeliveryError('EMAIL_FROM is not configured')

    if current_app.config.get('MAIL_TRANSPORT') == 'smtp':
        msg = Message(subject, sender=sender, recipients=[to], html=html)
        try:
            mail.send(msg)
        except Exception as e:
            raise MailDeliveryError(f"SMTP delivery failed: {e}") from e
    else:
        graph_client.send_mail(extract_email_address(sender), to, subject, html)

    current_app.logger.info(f"Email '{subject}' sent to {to}")


def _base_url():
    return current_app.config['PUBLIC_BASE_URL'].rstrip('/')


def send_magic_link_email(to, login_url):
    subject = f"{EVENT_TITLE} - Anmeldung für den Ball der Auserwählten"
    html = render_template('email/magic_link.html', url=login_url, base_url=_base_url())
    _deliver(to, subject, html)


def send_confirmation_email(ticket):
    """Purchase confirmation; the variant depends on the ticket's delivery method."""
    buyer = ticket.buyer
    context = dict(
        name=buyer.name,
        ticket_type=ticket.reserve.type_name,
        quantity=ticket.quantity,
        total_price=format_euro(ticket.sold_price),
        base_url=_base_url(),
    )
    if ticket.is_shipping:
        subject = f"{EVENT_TITLE} - Bestätigung Ihrer Karten-Bestellung (Versand)"
        html = render_template('email/confirmation_shipping.html', buyer=buyer, **context)
    else:
        subject = f"{EVENT_TITLE} - Bestätigung Ihrer Karten-Bestellung (Abholung)"
        html = render_template(
            'email/confirmation_pickup.html',
            pickup_code=ticket.code,
            pickup_dates=[d for d in current_app.config.get('PICKUP_DATES', []) if d.get('date')],
            **context
        )
    _deliver(buyer.email, subject, html)


def send_shipping_notification_email(ticket):
    buyer = ticket.buyer
    subject = f"{EVENT_TITLE} - Ihre Karten sind unterwegs!"
    html = render_template(
        'email/shipping_notification.html',
        name=buyer.name, code=ticket.code, buyer=buyer, base_url=_base_url())
    _deliver(buyer.email, subject, html)


def send_pickup_notification_email(ticket):
    buyer = ticket.buyer
    subject = f"{EVENT_TITLE} - Ihre Karten wurden abgeholt!"
    html = render_template(
        'email/pickup_notification.html',
        name=buyer.name, code=ticket.code, base_url=_base_url())
    _deliver(buyer.email, subject, html)
