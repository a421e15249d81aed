"""Minimal Microsoft Graph client using the app-credential (client credentials) flow."""
import requests
from flask import current_app

from .. import cache
from ..errors import MailDeliveryError

GRAPH_BASE_URL = "https://graph.microsoft.com/v1.0"
GRAPH_SCOPE = "https://graph.microsoft.com/.default"
TOKEN_CACHE_KEY = "graph_access_token"


def _credentials():
    config = current_app.config
    client_id = config.get('GRAPH_CLIENT_ID')
    tenant_id = config.get('GRAPH_TENANT_ID')
    secret = config.get('GRAPH_APP_SECRET')
    if not client_id or not tenant_id or not secret:
        raise MailDeliveryError(
            "Microsoft Graph API credentials are not configured. "
            "Please set GRAPH_CLIENT_ID, GRAPH_TENANT_ID and GRAPH_APP_SECRET."
        )
    return client_id, tenant_id, secret


def get_access_token():
    token = cache.get(TOKEN_CACHE_KEY)
    if token:
        return token

    client_id, tenant_id, secret = _credentials()
    url = f"https://login.microsoftonline.com/{tenant_id}/oauth2/v2.0/token"
    payload = {
        "client_id": client_id,
        "client_secret": secret,
        "scope": GRAPH_SCOPE,
        "grant_type": "client_credentials",
    }
    try:
        response = requests.post(url, data=payload, timeout=10)
        response.raise_for_status()
    except requests.RequestException as e:
        current_app.logger.error(f"Error acquiring Microsoft Graph token: {e}")
        raise MailDeliveryError("Failed to authenticate with Microsoft Graph API") from e

    data = response.json()
    token = data.get("access_token")
    if not token:
        raise MailDeliveryError("Failed to acquire access token from Microsoft Graph")

    # Refresh a minute before the token actually expires
    expires_in = int(data.get("expires_in", 3600))
    cache.set(TOKEN_CACHE_KEY, token, timeout=max(expires_in - 60, 60))
    return token


def send_mail(sender, recipient, subject, html):
    url = f"{GRAPH_BASE_URL}/users/{sender}/sendMail"
    headers = {
        "Authorization": f"Bearer {get_access_token()}",
        "Content-Type": "application/json",
    }
    payload = {
        "message": {
            "subject": subject,
            "body": {"contentType": "HTML", "content": html},
            "toRecipients": [{"emailAddress": {"address": recipient}}],
        }
    }
    try:
        response = requests.post(url, headers=headers, json=payload, timeout=10)
        response.raise_for_status()
    except requests.RequestException as e:
        raise MailDeliveryError(f"Graph sendMail failed: {e}") from e
