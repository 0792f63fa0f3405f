"""
Louva configuration.

Usage in settings.py:
    LOUVA = {
        "QR_VALIDITY_SECONDS": 300,
        "VOUCHER_VALIDITY_DAYS": 30,
    }
"""

from dataclasses import dataclass
from typing import Any

from django.conf import settings


@dataclass
class LouvaSettings:
    """Louva configuration settings."""

    # Currency units per base point (Rp 1.000 = 1 point)
    POINTS_UNIT: int = 1000

    # Time-stamped QR tokens
    QR_VALIDITY_SECONDS: int = 300
    QR_CLOCK_SKEW_SECONDS: int = 60

    # Reward vouchers
    VOUCHER_PREFIX: str = "LOUVA-"
    VOUCHER_CODE_LENGTH: int = 6
    VOUCHER_ALPHABET: str = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
    VOUCHER_MAX_ATTEMPTS: int = 10
    VOUCHER_VALIDITY_DAYS: int = 30

    # Points history rows returned with the balance
    HISTORY_LIMIT: int = 20

    # Pinned principals for single-tenant demo deployments
    DEFAULT_CUSTOMER_ID: str = ""
    DEFAULT_STAFF_ID: str = ""


def get_louva_settings() -> LouvaSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "LOUVA", {})
    return LouvaSettings(**user_settings)


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_louva_settings(), name)


louva_settings = _LazySettings()
