"""Tests for reward redemption and vouchers."""

import re
from datetime import timedelta
from unittest.mock import patch

import pytest
from django.utils import timezone

from louva.exceptions import LouvaError
from louva.models import (
    EntryType,
    PointsHistoryEntry,
    RedemptionStatus,
    Reward,
    RewardRedemption,
)
from louva.principal import Principal
from louva.services.rewards import RewardService, generate_voucher_code
from louva.signals import reward_redeemed

pytestmark = pytest.mark.django_db

VOUCHER_RE = re.compile(r"^LOUVA-[A-Z0-9]{6}$")


def existing_redemption(customer, reward, code, **kwargs):
    now = timezone.now()
    return RewardRedemption.objects.create(
        customer=customer,
        reward=reward,
        points_used=reward.points_required,
        voucher_code=code,
        expiry_date=kwargs.pop("expiry_date", now + timedelta(days=30)),
        **kwargs,
    )


class TestVoucherCode:
    def test_format(self):
        for _ in range(50):
            assert VOUCHER_RE.match(generate_voucher_code())

    def test_configurable(self, settings):
        settings.LOUVA = {"VOUCHER_PREFIX": "SALON-", "VOUCHER_CODE_LENGTH": 4, "VOUCHER_ALPHABET": "X"}
        assert generate_voucher_code() == "SALON-XXXX"


class TestRedeem:
    def test_success(self, make_customer, reward):
        customer = make_customer(points=600, level="Silver")
        now = timezone.now()

        redemption = RewardService.redeem(customer.pk, reward.pk, now=now)

        assert VOUCHER_RE.match(redemption.voucher_code)
        assert redemption.status == RedemptionStatus.ACTIVE
        assert redemption.points_used == 500
        assert redemption.expiry_date == now + timedelta(days=30)
        assert redemption.customer.total_points == 100

        customer.refresh_from_db()
        assert customer.total_points == 100
        assert customer.lifetime_points == 600
        assert customer.membership_level == "Silver"

    def test_history_entry(self, make_customer, reward, staff):
        customer = make_customer(points=500)

        redemption = RewardService.redeem(customer.pk, reward.pk, principal=staff)

        entry = PointsHistoryEntry.objects.get(customer=customer)
        assert entry.entry_type == EntryType.REDEEM
        assert entry.points_change == -500
        assert entry.balance_after == 0
        assert entry.redemption == redemption
        assert entry.created_by == "staff:staff-1"

    def test_signal(self, make_customer, reward):
        customer = make_customer(points=500)
        received = []

        def receiver(sender, **kwargs):
            received.append((kwargs["redemption"].voucher_code, kwargs["customer"].total_points))

        reward_redeemed.connect(receiver)
        try:
            redemption = RewardService.redeem(customer.pk, reward.pk)
        finally:
            reward_redeemed.disconnect(receiver)

        assert received == [(redemption.voucher_code, 0)]

    def test_insufficient_points_leaves_balance(self, make_customer):
        customer = make_customer(points=600, level="Silver")
        reward = Reward.objects.create(name="VIP package", points_required=800)

        with pytest.raises(LouvaError) as exc:
            RewardService.redeem(customer.pk, reward.pk)

        assert exc.value.code == "INSUFFICIENT_POINTS"
        assert exc.value.data == {"available": 600, "requested": 800}
        customer.refresh_from_db()
        assert customer.total_points == 600
        assert not RewardRedemption.objects.exists()
        assert not PointsHistoryEntry.objects.exists()

    def test_free_reward(self, customer):
        reward = Reward.objects.create(name="Welcome drink", points_required=0)

        redemption = RewardService.redeem(customer.pk, reward.pk)

        assert VOUCHER_RE.match(redemption.voucher_code)
        assert not PointsHistoryEntry.objects.exists()

    def test_inactive_reward(self, make_customer, reward):
        customer = make_customer(points=1000)
        reward.is_active = False
        reward.save()

        with pytest.raises(LouvaError) as exc:
            RewardService.redeem(customer.pk, reward.pk)
        assert exc.value.code == "REWARD_NOT_FOUND"

    def test_unknown_customer(self, reward):
        with pytest.raises(LouvaError) as exc:
            RewardService.redeem("00000000-0000-0000-0000-000000000000", reward.pk)
        assert exc.value.code == "CUSTOMER_NOT_FOUND"

    def test_collision_retries(self, make_customer, reward):
        other = make_customer(points=0)
        existing_redemption(other, reward, "LOUVA-AAAAAA")
        customer = make_customer(points=500)

        with patch(
            "louva.services.rewards.generate_voucher_code",
            side_effect=["LOUVA-AAAAAA", "LOUVA-AAAAAA", "LOUVA-BBBBBB"],
        ) as gen:
            redemption = RewardService.redeem(customer.pk, reward.pk)

        assert redemption.voucher_code == "LOUVA-BBBBBB"
        assert gen.call_count == 3

    def test_exhaustion_after_ten_attempts(self, make_customer, reward):
        other = make_customer(points=0)
        existing_redemption(other, reward, "LOUVA-AAAAAA")
        customer = make_customer(points=500)

        with patch(
            "louva.services.rewards.generate_voucher_code",
            return_value="LOUVA-AAAAAA",
        ) as gen:
            with pytest.raises(LouvaError) as exc:
                RewardService.redeem(customer.pk, reward.pk)

        assert exc.value.code == "VOUCHER_GENERATION_EXHAUSTED"
        assert gen.call_count == 10
        customer.refresh_from_db()
        assert customer.total_points == 500
        assert RewardRedemption.objects.count() == 1

    def test_attempts_configurable(self, make_customer, reward, settings):
        settings.LOUVA = {"VOUCHER_MAX_ATTEMPTS": 3}
        other = make_customer(points=0)
        existing_redemption(other, reward, "LOUVA-AAAAAA")
        customer = make_customer(points=500)

        with patch(
            "louva.services.rewards.generate_voucher_code",
            return_value="LOUVA-AAAAAA",
        ) as gen:
            with pytest.raises(LouvaError):
                RewardService.redeem(customer.pk, reward.pk)

        assert gen.call_count == 3


class TestUseVoucher:
    def test_marks_used(self, customer, reward, staff):
        existing_redemption(customer, reward, "LOUVA-USE001")

        redemption = RewardService.use_voucher("LOUVA-USE001", staff)

        assert redemption.status == RedemptionStatus.USED
        assert redemption.used_at is not None
        assert redemption.used_by == "staff:staff-1"

    def test_used_twice(self, customer, reward, staff):
        existing_redemption(customer, reward, "LOUVA-USE002")
        RewardService.use_voucher("LOUVA-USE002", staff)

        with pytest.raises(LouvaError) as exc:
            RewardService.use_voucher("LOUVA-USE002", staff)
        assert exc.value.code == "VOUCHER_NOT_ACTIVE"

    def test_expired_voucher(self, customer, reward, staff):
        existing_redemption(
            customer, reward, "LOUVA-OLD001", expiry_date=timezone.now() - timedelta(days=1)
        )

        with pytest.raises(LouvaError) as exc:
            RewardService.use_voucher("LOUVA-OLD001", staff)

        assert exc.value.code == "VOUCHER_EXPIRED"
        assert RewardRedemption.objects.get(voucher_code="LOUVA-OLD001").status == RedemptionStatus.EXPIRED

    def test_unknown_voucher(self, db, staff):
        with pytest.raises(LouvaError) as exc:
            RewardService.use_voucher("LOUVA-NOPE00", staff)
        assert exc.value.code == "VOUCHER_NOT_FOUND"

    def test_requires_staff(self, customer, reward):
        existing_redemption(customer, reward, "LOUVA-USE003")
        with pytest.raises(LouvaError) as exc:
            RewardService.use_voucher("LOUVA-USE003", Principal(customer_id=str(customer.pk)))
        assert exc.value.code == "FORBIDDEN"


class TestRedemptionLifecycle:
    def test_effective_status(self, customer, reward):
        redemption = existing_redemption(
            customer, reward, "LOUVA-EFF001", expiry_date=timezone.now() - timedelta(seconds=1)
        )
        assert redemption.status == RedemptionStatus.ACTIVE
        assert redemption.effective_status == RedemptionStatus.EXPIRED

    def test_expire_overdue(self, customer, reward):
        existing_redemption(customer, reward, "LOUVA-EXP001", expiry_date=timezone.now() - timedelta(days=1))
        existing_redemption(customer, reward, "LOUVA-EXP002")

        assert RewardService.expire_overdue() == 1
        assert RewardRedemption.objects.get(voucher_code="LOUVA-EXP001").status == RedemptionStatus.EXPIRED
        assert RewardRedemption.objects.get(voucher_code="LOUVA-EXP002").status == RedemptionStatus.ACTIVE

    def test_history_and_active(self, customer, reward):
        existing_redemption(customer, reward, "LOUVA-HIS001")
        existing_redemption(customer, reward, "LOUVA-HIS002", expiry_date=timezone.now() - timedelta(days=1))

        history = RewardService.history(customer.pk)
        statuses = {r.voucher_code: RewardService.serialize_redemption(r)["status"] for r in history}
        assert statuses == {"LOUVA-HIS001": "active", "LOUVA-HIS002": "expired"}
        assert [r.voucher_code for r in RewardService.active_for_customer(customer.pk)] == ["LOUVA-HIS001"]

    def test_catalog_active_only(self, reward):
        Reward.objects.create(name="Retired", points_required=100, is_active=False)
        assert RewardService.catalog() == [reward]
