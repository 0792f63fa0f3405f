"""Pytest fixtures for Louva tests."""

from decimal import Decimal

import pytest

from louva.models import (
    Customer,
    MembershipLevel,
    Mission,
    PaymentMethod,
    PaymentType,
    Reward,
    Service,
    ServiceCategory,
)
from louva.principal import Principal


@pytest.fixture
def make_customer(db):
    """Factory for customers with a given balance."""
    counter = {"n": 0}

    def _make(points=0, lifetime=None, level=MembershipLevel.BRONZE, **kwargs):
        counter["n"] += 1
        n = counter["n"]
        defaults = {
            "full_name": f"Customer {n}",
            "email": f"customer{n}@example.com",
            "phone": f"0812000000{n:02d}",
            "qr_code": f"LOUVA_CUSTOMER{n}EXAMPLECOM_17000000000{n:02d}",
        }
        defaults.update(kwargs)
        return Customer.objects.create(
            total_points=points,
            lifetime_points=points if lifetime is None else lifetime,
            membership_level=level,
            **defaults,
        )

    return _make


@pytest.fixture
def customer(db):
    """Bronze customer with no points."""
    return Customer.objects.create(
        full_name="Sari Dewi",
        email="sari@example.com",
        phone="081234567890",
        qr_code="LOUVA_SARIEXAMPLECOM_1700000000000",
    )


@pytest.fixture
def staff():
    return Principal(staff_id="staff-1")


@pytest.fixture
def haircut(db):
    return Service.objects.create(
        name="Haircut",
        category=ServiceCategory.HAIR,
        min_price=50000,
        point_multiplier=Decimal("1.00"),
    )


@pytest.fixture
def hair_color(db):
    return Service.objects.create(
        name="Hair Color",
        category=ServiceCategory.HAIR,
        min_price=150000,
        max_price=300000,
        point_multiplier=Decimal("1.20"),
    )


@pytest.fixture
def manicure(db):
    return Service.objects.create(
        name="Manicure",
        category=ServiceCategory.NAIL,
        min_price=60000,
        point_multiplier=Decimal("1.00"),
    )


@pytest.fixture
def cash(db):
    return PaymentMethod.objects.create(name="Cash", type=PaymentType.CASH)


@pytest.fixture
def reward(db):
    return Reward.objects.create(
        name="Free Haircut",
        description="One free haircut",
        points_required=500,
    )


@pytest.fixture
def mission(db, haircut):
    """50-point bonus for a haircut within 7 days."""
    return Mission.objects.create(
        title="Haircut week",
        bonus_points=50,
        service=haircut,
        duration_days=7,
    )


@pytest.fixture
def open_mission(db):
    """Bonus for any service, no expiry."""
    return Mission.objects.create(title="Any visit", bonus_points=20)
