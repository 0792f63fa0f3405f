"""Scan service - in-store QR check-in."""

import logging
from dataclasses import dataclass, field

from django.utils import timezone

from louva import qr
from louva.conf import louva_settings
from louva.exceptions import LouvaError
from louva.models import Customer, RewardRedemption, UserMission
from louva.services.customers import CustomerService, fetch_customer
from louva.services.missions import MissionService
from louva.services.rewards import RewardService

logger = logging.getLogger(__name__)


@dataclass
class ScanResult:
    customer: Customer
    token_format: str
    active_missions: list[UserMission] = field(default_factory=list)
    active_rewards: list[RewardRedemption] = field(default_factory=list)

    def as_dict(self) -> dict:
        customer = self.customer
        return {
            "valid": True,
            "format": self.token_format,
            "customer": {
                "id": str(customer.pk),
                "name": customer.full_name,
                "email": customer.email,
                "phone": customer.phone,
                "membership_level": customer.membership_level,
                "total_points": customer.total_points,
                "last_visit": customer.updated_at.isoformat() if customer.updated_at else None,
            },
            "active_missions": [
                MissionService.serialize_user_mission(um) for um in self.active_missions
            ],
            "active_rewards": [
                RewardService.serialize_redemption(r) for r in self.active_rewards
            ],
        }


class ScanService:
    """
    Service for QR verification.

    Formats are tried in order: JSON payload, static Customer.qr_code,
    legacy LOUVA_<id>_<millis>. Time-stamped formats expire after
    QR_VALIDITY_SECONDS; the static code never does.
    """

    @classmethod
    def verify(cls, raw: str, now=None) -> ScanResult:
        """
        Resolve a scanned string to a customer.

        Raises:
            LouvaError: QR_INVALID (empty input), QR_EXPIRED,
                CUSTOMER_NOT_FOUND (no format matched a customer)
        """
        raw = (raw or "").strip()
        if not raw:
            raise LouvaError("QR_INVALID")
        now = now or timezone.now()

        token = qr.parse_payload(raw)
        if token is None:
            customer = Customer.objects.filter(qr_code=raw, is_active=True).first()
            if customer is not None:
                return cls._result(customer, qr.TokenFormat.STATIC, now)

            token = qr.parse_legacy_token(raw)
            if token is None:
                logger.info("Unrecognized QR code scanned")
                raise LouvaError("CUSTOMER_NOT_FOUND", message="No customer matches this QR code")

        return cls._result(cls._from_token(token, now), token.format, now)

    @classmethod
    def _result(cls, customer, token_format, now) -> ScanResult:
        logger.info("QR check-in for customer %s (%s)", customer.pk, token_format)
        return ScanResult(
            customer=customer,
            token_format=token_format,
            active_missions=MissionService.active_for_customer(customer.pk, now),
            active_rewards=RewardService.active_for_customer(customer.pk, now),
        )

    @classmethod
    def _from_token(cls, token: qr.QRToken, now) -> Customer:
        if qr.is_from_future(token.issued_at, now, louva_settings.QR_CLOCK_SKEW_SECONDS):
            raise LouvaError(
                "QR_INVALID",
                message="QR code timestamp is in the future",
                issued_at=qr.format_timestamp(token.issued_at),
            )
        if not qr.is_fresh(token.issued_at, now, louva_settings.QR_VALIDITY_SECONDS):
            raise LouvaError("QR_EXPIRED", issued_at=qr.format_timestamp(token.issued_at))
        return fetch_customer(token.customer_id)

    @classmethod
    def customer_rewards(cls, customer_id, now=None) -> dict:
        """Active vouchers a customer can apply at checkout."""
        customer = CustomerService.get(customer_id)
        rewards = RewardService.active_for_customer(customer.pk, now)
        return {
            "active_rewards": [
                {
                    **RewardService.serialize_redemption(r),
                    "reward_description": r.reward.description,
                    "display_text": f"{r.reward.name} (Redeemed with {r.points_used} points)",
                }
                for r in rewards
            ],
            "total_active": len(rewards),
        }
