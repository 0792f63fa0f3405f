"""Louva exceptions."""


class BaseError(Exception):
    """
    Structured exception carrying a machine-readable code.

    Subclasses provide ``_default_messages`` keyed by code. Extra keyword
    arguments are kept in ``data`` for callers and API responses.
    """

    _default_messages: dict[str, str] = {}

    def __init__(self, code: str, message: str | None = None, **data):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.data = data
        super().__init__(f"[{code}] {self.message}")

    def as_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "data": self.data}


class LouvaError(BaseError):
    """
    Structured exception for loyalty operations.

    Usage:
        try:
            RewardService.redeem(customer_id, reward_id)
        except LouvaError as e:
            if e.code == "INSUFFICIENT_POINTS":
                show_balance(e.data["available"])
    """

    _default_messages = {
        # Not found
        "CUSTOMER_NOT_FOUND": "Customer not found",
        "SERVICE_NOT_FOUND": "Service not found",
        "REWARD_NOT_FOUND": "Reward not found",
        "MISSION_NOT_FOUND": "Mission not found",
        "PAYMENT_METHOD_NOT_FOUND": "Payment method not found",
        "VOUCHER_NOT_FOUND": "Voucher not found",
        # Validation
        "VALIDATION_ERROR": "Invalid request",
        "QR_INVALID": "QR code is required",
        # Ledger decisions
        "INSUFFICIENT_POINTS": "Insufficient points",
        "QR_EXPIRED": "QR code has expired",
        "MISSION_ALREADY_ACTIVATED": "Mission already activated",
        "MISSION_NOT_ACTIVE": "Mission not found or already completed",
        "VOUCHER_GENERATION_EXHAUSTED": "Failed to generate unique voucher code",
        "VOUCHER_NOT_ACTIVE": "Voucher is not active",
        "VOUCHER_EXPIRED": "Voucher has expired",
        # Infrastructure
        "PERSISTENCE_FAILURE": "Storage operation failed",
        # Principal
        "UNAUTHENTICATED": "Authentication required",
        "FORBIDDEN": "Not allowed",
    }

    _http_status = {
        "CUSTOMER_NOT_FOUND": 404,
        "SERVICE_NOT_FOUND": 404,
        "REWARD_NOT_FOUND": 404,
        "MISSION_NOT_FOUND": 404,
        "PAYMENT_METHOD_NOT_FOUND": 404,
        "VOUCHER_NOT_FOUND": 404,
        "MISSION_NOT_ACTIVE": 404,
        "MISSION_ALREADY_ACTIVATED": 409,
        "VOUCHER_GENERATION_EXHAUSTED": 500,
        "PERSISTENCE_FAILURE": 500,
        "UNAUTHENTICATED": 401,
        "FORBIDDEN": 403,
    }

    @property
    def http_status(self) -> int:
        """HTTP status for API responses (400 unless mapped)."""
        return self._http_status.get(self.code, 400)
