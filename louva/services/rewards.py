"""Reward service - catalog, redemption and voucher lifecycle."""

import logging
import secrets

from django.db import DatabaseError, IntegrityError, transaction
from django.utils import timezone

from louva import ledger
from louva.conf import get_louva_settings, louva_settings
from louva.exceptions import LouvaError
from louva.models import EntryType, RedemptionStatus, Reward, RewardRedemption
from louva.services.customers import fetch_customer
from louva.services.points import PointsService
from louva.signals import reward_redeemed

logger = logging.getLogger(__name__)


def generate_voucher_code() -> str:
    """LOUVA- followed by random characters from the voucher alphabet."""
    conf = get_louva_settings()
    suffix = "".join(
        secrets.choice(conf.VOUCHER_ALPHABET) for _ in range(conf.VOUCHER_CODE_LENGTH)
    )
    return f"{conf.VOUCHER_PREFIX}{suffix}"


class RewardService:
    """
    Service for rewards.

    Uses @classmethod for extensibility (consistent with other services).
    """

    @classmethod
    def catalog(cls) -> list[Reward]:
        return list(Reward.objects.filter(is_active=True).order_by("points_required", "name"))

    @classmethod
    def get_reward(cls, reward_id) -> Reward:
        try:
            return Reward.objects.get(pk=reward_id, is_active=True)
        except (Reward.DoesNotExist, ValueError):
            raise LouvaError("REWARD_NOT_FOUND", reward_id=reward_id)

    @classmethod
    def redeem(cls, customer_id, reward_id, principal=None, now=None) -> RewardRedemption:
        """
        Exchange points for a voucher.

        The balance is checked on the locked row before any code is
        generated. Lifetime points and tier are left unchanged.

        Returns:
            RewardRedemption (status active, expiry_date = now + 30 days)

        Raises:
            LouvaError: REWARD_NOT_FOUND, CUSTOMER_NOT_FOUND,
                INSUFFICIENT_POINTS, VOUCHER_GENERATION_EXHAUSTED,
                PERSISTENCE_FAILURE
        """
        now = now or timezone.now()
        reward = cls.get_reward(reward_id)
        created_by = principal.actor if principal else ""

        try:
            with transaction.atomic():
                customer = fetch_customer(customer_id, for_update=True)
                ledger.authorize_redemption(customer.total_points, reward.points_required)

                redemption = cls._create_redemption(customer, reward, now)

                # Free rewards issue a voucher without a ledger entry
                if reward.points_required:
                    customer, _ = PointsService.apply_delta(
                        customer.pk,
                        -reward.points_required,
                        f"Redeemed {reward.name}",
                        entry_type=EntryType.REDEEM,
                        created_by=created_by,
                        redemption=redemption,
                    )
                    redemption.customer = customer
        except DatabaseError as exc:
            logger.exception("Redemption failed for customer %s", customer_id)
            raise LouvaError("PERSISTENCE_FAILURE", customer_id=str(customer_id)) from exc

        logger.info(
            "Customer %s redeemed reward %s (-%d pts), voucher %s",
            customer.pk,
            reward.pk,
            reward.points_required,
            redemption.voucher_code,
        )
        reward_redeemed.send(sender=RewardRedemption, redemption=redemption, customer=customer)
        return redemption

    @classmethod
    def _create_redemption(cls, customer, reward, now) -> RewardRedemption:
        """Insert with a fresh voucher code, retrying on collision."""
        attempts = louva_settings.VOUCHER_MAX_ATTEMPTS
        expiry = ledger.voucher_expiry(now, louva_settings.VOUCHER_VALIDITY_DAYS)

        for _ in range(attempts):
            code = generate_voucher_code()
            if RewardRedemption.objects.filter(voucher_code=code).exists():
                continue
            try:
                with transaction.atomic():
                    return RewardRedemption.objects.create(
                        customer=customer,
                        reward=reward,
                        points_used=reward.points_required,
                        voucher_code=code,
                        status=RedemptionStatus.ACTIVE,
                        redeemed_at=now,
                        expiry_date=expiry,
                    )
            except IntegrityError:
                logger.warning("Voucher code collision on insert: %s", code)

        raise LouvaError("VOUCHER_GENERATION_EXHAUSTED", attempts=attempts)

    @classmethod
    def history(cls, customer_id) -> list[RewardRedemption]:
        fetch_customer(customer_id)
        return list(
            RewardRedemption.objects.filter(customer_id=customer_id).select_related("reward")
        )

    @classmethod
    def active_for_customer(cls, customer_id, now=None) -> list[RewardRedemption]:
        """Active vouchers still inside their validity window."""
        now = now or timezone.now()
        return list(
            RewardRedemption.objects.filter(
                customer_id=customer_id,
                status=RedemptionStatus.ACTIVE,
                expiry_date__gte=now,
            )
            .select_related("reward")
            .order_by("expiry_date")
        )

    @classmethod
    def use_voucher(cls, voucher_code: str, principal, now=None) -> RewardRedemption:
        """
        Consume a voucher at the counter.

        Raises:
            LouvaError: VOUCHER_NOT_FOUND, VOUCHER_NOT_ACTIVE (already used
                or expired), VOUCHER_EXPIRED (past expiry_date; the row is
                marked expired)
        """
        principal.require_staff()
        now = now or timezone.now()

        with transaction.atomic():
            redemption = (
                RewardRedemption.objects.select_for_update()
                .select_related("reward")
                .filter(voucher_code=voucher_code)
                .first()
            )
            if redemption is None:
                raise LouvaError("VOUCHER_NOT_FOUND", voucher_code=voucher_code)
            if redemption.status != RedemptionStatus.ACTIVE:
                raise LouvaError(
                    "VOUCHER_NOT_ACTIVE",
                    voucher_code=voucher_code,
                    status=redemption.status,
                )

            expired = redemption.is_expired(now)
            if expired:
                redemption.status = RedemptionStatus.EXPIRED
                redemption.save(update_fields=["status"])
            else:
                redemption.status = RedemptionStatus.USED
                redemption.used_at = now
                redemption.used_by = principal.actor
                redemption.save(update_fields=["status", "used_at", "used_by"])

        if expired:
            raise LouvaError("VOUCHER_EXPIRED", voucher_code=voucher_code)

        logger.info("Voucher %s used by %s", voucher_code, principal.actor)
        return redemption

    @classmethod
    def expire_overdue(cls, now=None) -> int:
        """Bulk active -> expired for vouchers past expiry_date."""
        now = now or timezone.now()
        count = RewardRedemption.objects.filter(
            status=RedemptionStatus.ACTIVE,
            expiry_date__lt=now,
        ).update(status=RedemptionStatus.EXPIRED)
        if count:
            logger.info("Expired %d overdue vouchers", count)
        return count

    @staticmethod
    def serialize_reward(reward: Reward) -> dict:
        return {
            "id": reward.pk,
            "name": reward.name,
            "description": reward.description,
            "points_required": reward.points_required,
        }

    @staticmethod
    def serialize_redemption(redemption: RewardRedemption) -> dict:
        return {
            "id": redemption.pk,
            "reward_id": redemption.reward_id,
            "reward_name": redemption.reward.name,
            "points_used": redemption.points_used,
            "voucher_code": redemption.voucher_code,
            "status": redemption.effective_status,
            "redeemed_at": redemption.redeemed_at.isoformat(),
            "expiry_date": redemption.expiry_date.isoformat(),
            "used_at": redemption.used_at.isoformat() if redemption.used_at else None,
        }
