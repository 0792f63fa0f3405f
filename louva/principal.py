"""
Request principal - who a ledger call acts for.

Resolved once per request and passed explicitly into services, so the
ledger never reads identity from globals.
"""

from dataclasses import dataclass

from louva.conf import louva_settings
from louva.exceptions import LouvaError

CUSTOMER_HEADER = "X-Customer-Id"
STAFF_HEADER = "X-Staff-Id"


@dataclass(frozen=True)
class Principal:
    """Acting identity. A staff principal may act on any customer."""

    customer_id: str | None = None
    staff_id: str | None = None

    @property
    def is_staff(self) -> bool:
        return bool(self.staff_id)

    @property
    def actor(self) -> str:
        """Label stored in created_by/staff audit columns."""
        if self.staff_id:
            return f"staff:{self.staff_id}"
        if self.customer_id:
            return f"customer:{self.customer_id}"
        return ""

    def require_customer(self) -> str:
        if not self.customer_id:
            raise LouvaError("UNAUTHENTICATED", message="Customer identity required")
        return self.customer_id

    def require_staff(self) -> str:
        if not self.staff_id:
            raise LouvaError("FORBIDDEN", message="Staff identity required")
        return self.staff_id


def resolve_principal(request) -> Principal:
    """
    Build the principal from request headers.

    Falls back to the pinned DEFAULT_CUSTOMER_ID / DEFAULT_STAFF_ID
    settings when a header is absent (single-tenant demo deployments).
    """
    customer_id = (
        request.headers.get(CUSTOMER_HEADER, "").strip()
        or louva_settings.DEFAULT_CUSTOMER_ID
    )
    staff_id = (
        request.headers.get(STAFF_HEADER, "").strip()
        or louva_settings.DEFAULT_STAFF_ID
    )
    return Principal(customer_id=customer_id or None, staff_id=staff_id or None)
