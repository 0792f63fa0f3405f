"""
QR check-in tokens.

Two time-stamped formats are shown on the customer's phone:

    {"type":"loyalty","customerId":"<uuid>","timestamp":"2026-01-01T10:00:00.000Z"}
    LOUVA_<customer id>_<unix millis>          (legacy)

Both are valid for QR_VALIDITY_SECONDS after issue. Tokens are never
stored; the static per-customer code lives on Customer.qr_code.
"""

import json
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone as dt_timezone

from django.utils.dateparse import parse_datetime

TOKEN_TYPE = "loyalty"
LEGACY_PATTERN = re.compile(r"^LOUVA_(.+)_(\d+)$")
EPOCH = datetime(1970, 1, 1, tzinfo=dt_timezone.utc)


class TokenFormat:
    JSON = "json"
    STATIC = "static"
    LEGACY = "legacy"


@dataclass(frozen=True)
class QRToken:
    customer_id: str
    issued_at: datetime
    format: str


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=dt_timezone.utc)
    return value.astimezone(dt_timezone.utc)


def format_timestamp(value: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision and a Z suffix."""
    value = _as_utc(value)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def build_payload(customer_id, issued_at: datetime) -> str:
    return json.dumps(
        {
            "type": TOKEN_TYPE,
            "customerId": str(customer_id),
            "timestamp": format_timestamp(issued_at),
        },
        separators=(",", ":"),
    )


def build_legacy_token(customer_id, issued_at: datetime) -> str:
    millis = (_as_utc(issued_at) - EPOCH) // timedelta(milliseconds=1)
    return f"LOUVA_{customer_id}_{millis}"


def parse_payload(raw: str) -> QRToken | None:
    """Parse the JSON format. Returns None for anything else."""
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, ValueError, TypeError):
        return None

    if not isinstance(data, dict) or data.get("type") != TOKEN_TYPE:
        return None

    customer_id = data.get("customerId")
    timestamp = data.get("timestamp")
    if not customer_id or not isinstance(timestamp, str):
        return None

    try:
        issued_at = parse_datetime(timestamp)
    except ValueError:
        return None
    if issued_at is None:
        return None

    return QRToken(str(customer_id), _as_utc(issued_at), TokenFormat.JSON)


def parse_legacy_token(raw: str) -> QRToken | None:
    match = LEGACY_PATTERN.match(raw)
    if not match:
        return None
    customer_id, millis = match.groups()
    try:
        issued_at = EPOCH + timedelta(milliseconds=int(millis))
    except OverflowError:
        return None
    return QRToken(customer_id, issued_at, TokenFormat.LEGACY)


def is_fresh(issued_at: datetime, now: datetime, validity_seconds: int = 300) -> bool:
    """Valid iff now - issued_at <= validity (boundary inclusive)."""
    return _as_utc(now) - _as_utc(issued_at) <= timedelta(seconds=validity_seconds)


def is_from_future(issued_at: datetime, now: datetime, skew_seconds: int = 60) -> bool:
    """Issued further ahead of now than the allowed clock skew."""
    return _as_utc(issued_at) - _as_utc(now) > timedelta(seconds=skew_seconds)
