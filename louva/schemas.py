"""
Typed request payloads.

Views parse JSON bodies into these dataclasses before calling services.
Every from_payload() raises LouvaError("VALIDATION_ERROR") with the
offending field in ``data`` instead of letting a KeyError or TypeError
reach the ledger.
"""

import uuid
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any

from louva.exceptions import LouvaError
from louva.models import MembershipLevel, PaymentType, ServiceCategory


def _invalid(field_name: str, message: str) -> LouvaError:
    return LouvaError("VALIDATION_ERROR", message=message, field=field_name)


def _require(payload: dict, *names: str) -> Any:
    """First present, non-empty value among ``names`` (aliases)."""
    for name in names:
        value = payload.get(name)
        if value not in (None, "", []):
            return value
    raise _invalid(names[0], f"{names[0]} is required")


def as_int(value: Any, field_name: str, minimum: int | None = 0) -> int:
    if isinstance(value, bool):
        raise _invalid(field_name, f"{field_name} must be an integer")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise _invalid(field_name, f"{field_name} must be an integer")
    if isinstance(value, float) and value != number:
        raise _invalid(field_name, f"{field_name} must be an integer")
    if minimum is not None and number < minimum:
        raise _invalid(field_name, f"{field_name} must be >= {minimum}")
    return number


def _optional_int(value: Any, field_name: str, minimum: int | None = 0) -> int | None:
    if value in (None, ""):
        return None
    return as_int(value, field_name, minimum)


def _decimal(value: Any, field_name: str, minimum: Decimal | None = None) -> Decimal:
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise _invalid(field_name, f"{field_name} must be a number")
    if not number.is_finite():
        raise _invalid(field_name, f"{field_name} must be a number")
    if minimum is not None and number < minimum:
        raise _invalid(field_name, f"{field_name} must be >= {minimum}")
    return number


def as_uuid(value: Any, field_name: str) -> str:
    try:
        return str(uuid.UUID(str(value)))
    except (ValueError, AttributeError, TypeError):
        raise _invalid(field_name, f"{field_name} must be a UUID")


def _bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def _choice(value: Any, field_name: str, choices) -> str:
    if value not in choices.values:
        raise _invalid(field_name, f"{field_name} must be one of {list(choices.values)}")
    return value


def _list(value: Any, field_name: str) -> list:
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise _invalid(field_name, f"{field_name} must be a list")
    return list(value)


# =============================================================================
# Ledger requests
# =============================================================================


@dataclass(frozen=True)
class TransactionRequest:
    """
    Checkout submitted by staff.

    service_prices is aligned by index with service_ids; a missing or
    null entry means "use the service's listed price".
    """

    customer_id: str
    service_ids: tuple[int, ...]
    payment_method_id: int
    service_prices: tuple[int | None, ...] = ()
    mission_ids: tuple[int, ...] = ()
    notes: str = ""

    @classmethod
    def from_payload(cls, payload: dict) -> "TransactionRequest":
        customer_id = as_uuid(_require(payload, "customer_id", "user_id"), "customer_id")

        service_ids = tuple(
            as_int(value, "service_ids", minimum=1)
            for value in _list(_require(payload, "service_ids"), "service_ids")
        )
        payment_method_id = as_int(
            _require(payload, "payment_method_id"), "payment_method_id", minimum=1
        )

        prices = _list(payload.get("service_prices"), "service_prices")
        if len(prices) > len(service_ids):
            raise _invalid("service_prices", "More prices than services")
        service_prices = tuple(_optional_int(p, "service_prices") for p in prices)

        mission_ids = []
        if payload.get("mission_id") not in (None, ""):
            mission_ids.append(as_int(payload["mission_id"], "mission_id", minimum=1))
        for value in _list(payload.get("mission_ids"), "mission_ids"):
            mission_ids.append(as_int(value, "mission_ids", minimum=1))
        for mission in _list(payload.get("active_missions"), "active_missions"):
            value = mission.get("mission_id") if isinstance(mission, dict) else mission
            mission_ids.append(as_int(value, "active_missions", minimum=1))

        notes = payload.get("notes") or ""
        if not isinstance(notes, str):
            raise _invalid("notes", "notes must be a string")

        return cls(
            customer_id=customer_id,
            service_ids=service_ids,
            payment_method_id=payment_method_id,
            service_prices=service_prices,
            mission_ids=tuple(dict.fromkeys(mission_ids)),
            notes=notes,
        )

    def price_override(self, index: int) -> int | None:
        if index < len(self.service_prices):
            return self.service_prices[index]
        return None


@dataclass(frozen=True)
class RedemptionRequest:
    reward_id: int
    customer_id: str | None = None

    @classmethod
    def from_payload(cls, payload: dict) -> "RedemptionRequest":
        reward_id = as_int(_require(payload, "reward_id"), "reward_id", minimum=1)
        customer_id = payload.get("customer_id") or payload.get("user_id")
        return cls(
            reward_id=reward_id,
            customer_id=as_uuid(customer_id, "customer_id") if customer_id else None,
        )


@dataclass(frozen=True)
class MissionRequest:
    mission_id: int
    customer_id: str | None = None

    @classmethod
    def from_payload(cls, payload: dict) -> "MissionRequest":
        mission_id = as_int(_require(payload, "mission_id"), "mission_id", minimum=1)
        customer_id = payload.get("customer_id") or payload.get("user_id")
        return cls(
            mission_id=mission_id,
            customer_id=as_uuid(customer_id, "customer_id") if customer_id else None,
        )


@dataclass(frozen=True)
class VoucherUseRequest:
    voucher_code: str

    @classmethod
    def from_payload(cls, payload: dict) -> "VoucherUseRequest":
        code = _require(payload, "voucher_code", "code")
        if not isinstance(code, str):
            raise _invalid("voucher_code", "voucher_code must be a string")
        return cls(voucher_code=code.strip().upper())


@dataclass(frozen=True)
class ScanRequest:
    qr_code: str

    @classmethod
    def from_payload(cls, payload: dict) -> "ScanRequest":
        value = payload.get("qr_code")
        if not isinstance(value, str) or not value.strip():
            raise LouvaError("QR_INVALID", field="qr_code")
        return cls(qr_code=value.strip())


# =============================================================================
# Customer and catalog payloads
# =============================================================================


@dataclass(frozen=True)
class ProfileUpdate:
    """Whitelisted profile fields; None means unchanged."""

    full_name: str | None = None
    email: str | None = None
    phone: str | None = None

    @classmethod
    def from_payload(cls, payload: dict) -> "ProfileUpdate":
        values = {
            "full_name": payload.get("full_name", payload.get("name")),
            "email": payload.get("email"),
            "phone": payload.get("phone"),
        }
        for key, value in values.items():
            if value is not None and not isinstance(value, str):
                raise _invalid(key, f"{key} must be a string")
        if values["full_name"] is not None and not values["full_name"].strip():
            raise _invalid("full_name", "full_name cannot be empty")
        if all(value is None for value in values.values()):
            raise LouvaError("VALIDATION_ERROR", message="Nothing to update")
        return cls(**values)

    def changes(self) -> dict:
        return {k: v.strip() for k, v in self.__dict__.items() if v is not None}


@dataclass(frozen=True)
class CustomerCreate:
    full_name: str
    email: str
    phone: str

    @classmethod
    def from_payload(cls, payload: dict) -> "CustomerCreate":
        try:
            full_name = _require(payload, "name", "full_name")
            email = _require(payload, "email")
            phone = _require(payload, "phone")
        except LouvaError:
            raise LouvaError(
                "VALIDATION_ERROR",
                message="Name, email, and phone are required",
            )
        return cls(
            full_name=str(full_name).strip(),
            email=str(email).strip().lower(),
            phone=str(phone).strip(),
        )


@dataclass(frozen=True)
class ServicePayload:
    """Service create/update. For updates only the given fields are set."""

    fields: dict = field(default_factory=dict)
    id: int | None = None

    @classmethod
    def from_payload(cls, payload: dict, partial: bool = False) -> "ServicePayload":
        service_id = None
        if partial:
            service_id = as_int(_require(payload, "id"), "id", minimum=1)
        else:
            try:
                _require(payload, "name")
                _require(payload, "category")
                _require(payload, "min_price", "price")
            except LouvaError:
                raise LouvaError(
                    "VALIDATION_ERROR",
                    message="Name, category, and minimum price are required",
                )

        fields = {}
        if payload.get("name"):
            fields["name"] = str(payload["name"]).strip()
        if payload.get("category"):
            fields["category"] = _choice(payload["category"], "category", ServiceCategory)
        if payload.get("description") is not None:
            fields["description"] = str(payload["description"])
        price = payload.get("min_price", payload.get("price"))
        if price not in (None, ""):
            fields["min_price"] = as_int(price, "min_price")
        if "max_price" in payload:
            fields["max_price"] = _optional_int(payload["max_price"], "max_price")
        multiplier = payload.get("point_multiplier", payload.get("points_multiplier"))
        if multiplier not in (None, ""):
            fields["point_multiplier"] = _decimal(
                multiplier, "point_multiplier", minimum=Decimal("1")
            )
        elif not partial:
            fields["point_multiplier"] = Decimal("1.00")
        if "is_active" in payload:
            fields["is_active"] = _bool(payload["is_active"], True)

        max_price = fields.get("max_price")
        min_price = fields.get("min_price")
        if max_price is not None and min_price is not None and max_price < min_price:
            raise _invalid("max_price", "max_price must be >= min_price")

        return cls(fields=fields, id=service_id)


@dataclass(frozen=True)
class PaymentMethodPayload:
    name: str
    type: str
    bank: str = ""
    is_active: bool = True

    @classmethod
    def from_payload(cls, payload: dict) -> "PaymentMethodPayload":
        try:
            name = _require(payload, "name")
            method_type = _require(payload, "type")
        except LouvaError:
            raise LouvaError("VALIDATION_ERROR", message="Name and type are required")
        return cls(
            name=str(name).strip(),
            type=_choice(method_type, "type", PaymentType),
            bank=str(payload.get("bank") or ""),
            is_active=_bool(payload.get("is_active"), True),
        )


@dataclass(frozen=True)
class MembershipRulePayload:
    level: str
    min_points: int
    max_points: int | None
    multiplier: Decimal
    color: str = "#4A8BC2"
    benefits: tuple[str, ...] = ()

    @classmethod
    def from_payload(cls, payload: dict) -> "MembershipRulePayload":
        if not isinstance(payload, dict):
            raise _invalid("rules", "Each rule must be an object")
        level = payload.get("level") or payload.get("name")
        if not level:
            raise _invalid("name", "Rule name is required")
        level = str(level).strip().capitalize()
        _choice(level, "name", MembershipLevel)

        if payload.get("min_points") is None:
            raise _invalid("min_points", f"{level}: min_points is required")
        min_points = as_int(payload["min_points"], "min_points")
        max_points = _optional_int(payload.get("max_points"), "max_points")
        if max_points is not None and max_points < min_points:
            raise _invalid("max_points", f"{level}: max_points must be >= min_points")

        multiplier = _decimal(payload.get("multiplier", 1), "multiplier", minimum=Decimal("1"))
        benefits = _list(payload.get("benefits"), "benefits")

        return cls(
            level=level,
            min_points=min_points,
            max_points=max_points,
            multiplier=multiplier,
            color=str(payload.get("color") or "#4A8BC2"),
            benefits=tuple(str(b) for b in benefits),
        )

    @classmethod
    def list_from_payload(cls, payload: dict) -> list["MembershipRulePayload"]:
        rules = payload.get("rules")
        if not isinstance(rules, list) or not rules:
            raise _invalid("rules", "Rules array is required")
        return [cls.from_payload(rule) for rule in rules]
