# balltickets/utils.py

import csv
import io
import math
import re
from datetime import datetime

from flask import Response

EMAIL_PATTERN = re.compile(r"^[^@\s;,]+@[^@\s;,]+\.[^@\s;,]+$")


def normalize_email(value):
    return (value or '').strip().lower()


def is_valid_email(value):
    return bool(value) and len(value) <= 255 and EMAIL_PATTERN.match(value) is not None


def extract_email_address(from_string):
    """
    Pull the bare address out of a sender string.
    Handles "Name <email@domain.com>" as well as "email@domain.com".
    """
    match = re.search(r"<([^>]+)>", from_string or '')
    if not match:
        match = re.search(r"([\w.-]+@[\w.-]+\.\w+)", from_string or '')
    return match.group(1) if match else from_string


def parse_iso_datetime(value):
    """Parse an ISO date/datetime string; returns None for empty or malformed values."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace('Z', '+00:00')).replace(tzinfo=None)
    except ValueError:
        return None


def to_cents(amount):
    return int(round(float(amount or 0) * 100))


def format_euro(amount):
    return f"{float(amount or 0):.2f} €".replace('.', ',')


def format_timestamp(value):
    return value.strftime('%d.%m.%Y %H:%M') if value else '-'


def csv_response(headers, rows, filename):
    """Build a downloadable CSV response (UTF-8 with BOM so Excel reads umlauts)."""
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(headers)
    writer.writerows(rows)
    return Response(
        '\ufeff' + output.getvalue(),
        mimetype='text/csv',
        headers={'Content-Disposition': f'attachment; filename={filename}'},
    )


def parse_int(value, default=None):
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return default


def parse_float(value, default=None):
    try:
        number = float(str(value).strip().replace(',', '.'))
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


def request_data(req):
    """JSON body when present, otherwise the submitted form."""
    data = req.get_json(silent=True)
    return data if isinstance(data, dict) else req.form


def get_id_list(data, key):
    """Read a list of ids from a JSON list or repeated form fields."""
    if hasattr(data, 'getlist'):
        values = data.getlist(key)
    else:
        values = data.get(key) or []
    ids = [parse_int(v) for v in values]
    return [i for i in ids if i is not None]
