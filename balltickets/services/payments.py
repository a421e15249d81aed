"""
Stripe hosted checkout over its REST API.

Stripe expects form-encoded bodies with bracketed keys for nested
structures (line_items[0][price_data][currency]=eur), so payloads are
flattened before posting.
"""
import requests
from flask import current_app

from ..errors import PaymentProviderError


def _flatten(value, prefix=''):
    items = []
    if isinstance(value, dict):
        for key, inner in value.items():
            items.extend(_flatten(inner, f'{prefix}[{key}]' if prefix else str(key)))
    elif isinstance(value, (list, tuple)):
        for index, inner in enumerate(value):
            items.extend(_flatten(inner, f'{prefix}[{index}]'))
    elif value is not None:
        items.append((prefix, str(value)))
    return items


def _request(method, path, data=None):
    secret = current_app.config.get('STRIPE_SECRET_KEY')
    if not secret:
        raise PaymentProviderError("STRIPE_SECRET_KEY is not configured")

    url = f"{current_app.config['STRIPE_API_BASE']}{path}"
    try:
        response = requests.request(
            method, url,
            auth=(secret, ''),
            data=_flatten(data) if data else None,
            timeout=15,
        )
        response.raise_for_status()
    except requests.RequestException as e:
        current_app.logger.error(f"Stripe {method} {path} failed: {e}")
        raise PaymentProviderError("Die Zahlungsanbieter-Anfrage ist fehlgeschlagen.") from e
    return response.json()


def create_checkout_session(line_items, metadata, customer_email, success_url, cancel_url):
    """Open a hosted checkout session. Returns the provider's session object."""
    payload = {
        'mode': 'payment',
        'payment_method_types': ['card'],
        'line_items': line_items,
        'metadata': metadata,
        'customer_email': customer_email,
        'success_url': success_url,
        'cancel_url': cancel_url,
    }
    return _request('POST', '/checkout/sessions', payload)


def retrieve_checkout_session(session_id):
    return _request('GET', f'/checkout/sessions/{session_id}')
