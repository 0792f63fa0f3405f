"""Tests for management commands."""

from datetime import timedelta
from io import StringIO

import pytest
from django.core.management import call_command
from django.utils import timezone

from louva.models import (
    MembershipRule,
    PaymentMethod,
    RedemptionStatus,
    Reward,
    RewardRedemption,
    Service,
    UserMission,
    UserMissionStatus,
)
from louva.services.missions import MissionService

pytestmark = pytest.mark.django_db


def run(*args):
    out = StringIO()
    call_command(*args, stdout=out)
    return out.getvalue()


class TestSeed:
    def test_seeds_catalog(self):
        output = run("louva_seed")

        assert "Seeded 8 services, 8 payment methods, 5 rewards, 3 membership rules." in output
        assert Service.objects.get(name="Hair Color").min_price == 150000
        assert Reward.objects.get(name="Free Haircut").points_required == 500
        assert list(MembershipRule.objects.values_list("min_points", flat=True)) == [0, 500, 1000]

    def test_idempotent(self):
        run("louva_seed")

        output = run("louva_seed")

        assert "Seeded 0 services, 0 payment methods, 0 rewards, 0 membership rules." in output
        assert Service.objects.count() == 8
        assert PaymentMethod.objects.count() == 8

    def test_keeps_custom_rules(self):
        MembershipRule.objects.create(level="Bronze", min_points=0)

        run("louva_seed")

        assert MembershipRule.objects.count() == 1


class TestRecalculate:
    def test_retiers_customers(self, make_customer):
        customer = make_customer(points=0, lifetime=650, level="Bronze")

        output = run("louva_recalculate")

        assert "Recalculated membership for 1 customers." in output
        customer.refresh_from_db()
        assert customer.membership_level == "Silver"


class TestExpire:
    @pytest.fixture
    def overdue(self, customer, reward, mission):
        now = timezone.now()
        RewardRedemption.objects.create(
            customer=customer,
            reward=reward,
            points_used=500,
            voucher_code="LOUVA-OLD001",
            expiry_date=now - timedelta(days=1),
        )
        RewardRedemption.objects.create(
            customer=customer,
            reward=reward,
            points_used=500,
            voucher_code="LOUVA-NEW001",
            expiry_date=now + timedelta(days=29),
        )
        MissionService.activate(customer.pk, mission.pk, now=now - timedelta(days=8))

    def test_expires(self, overdue):
        output = run("louva_expire")

        assert "Expired 1 vouchers and 1 missions." in output
        assert RewardRedemption.objects.get(voucher_code="LOUVA-OLD001").status == RedemptionStatus.EXPIRED
        assert RewardRedemption.objects.get(voucher_code="LOUVA-NEW001").status == RedemptionStatus.ACTIVE
        assert UserMission.objects.get().status == UserMissionStatus.EXPIRED

    def test_dry_run(self, overdue):
        output = run("louva_expire", "--dry-run")

        assert "Would expire 1 vouchers and 1 missions." in output
        assert RewardRedemption.objects.filter(status=RedemptionStatus.EXPIRED).count() == 0
        assert UserMission.objects.get().status == UserMissionStatus.ACTIVE
