"""Tests for customer signup, profile and search."""

import re

import pytest

from louva.exceptions import LouvaError
from louva.models import Customer, MembershipLevel
from louva.schemas import CustomerCreate, ProfileUpdate
from louva.services.customers import CustomerService, static_qr_code
from louva.signals import customer_created

pytestmark = pytest.mark.django_db


class TestCreate:
    def test_starts_bronze_with_static_code(self):
        data = CustomerCreate.from_payload({
            "name": "Rina Putri",
            "email": "Rina.Putri@Example.com",
            "phone": "081298765432",
        })

        customer = CustomerService.create(data)

        assert customer.membership_level == MembershipLevel.BRONZE
        assert customer.total_points == 0
        assert customer.email == "rina.putri@example.com"
        assert re.match(r"^LOUVA_RINAPUTRIEXAMPLECOM_\d+$", customer.qr_code)

    def test_duplicate_email(self, customer):
        data = CustomerCreate.from_payload({
            "name": "Other",
            "email": "SARI@example.com",
            "phone": "0800",
        })
        with pytest.raises(LouvaError) as exc:
            CustomerService.create(data)
        assert exc.value.code == "VALIDATION_ERROR"

    def test_duplicate_phone(self, customer):
        data = CustomerCreate.from_payload({
            "name": "Other",
            "email": "other@example.com",
            "phone": customer.phone,
        })
        with pytest.raises(LouvaError):
            CustomerService.create(data)

    def test_signal(self):
        received = []

        def receiver(sender, **kwargs):
            received.append(kwargs["customer"])

        customer_created.connect(receiver)
        try:
            customer = CustomerService.create(
                CustomerCreate(full_name="Ayu", email="ayu@example.com", phone="0811")
            )
        finally:
            customer_created.disconnect(receiver)

        assert received == [customer]


class TestProfile:
    def test_update_whitelisted_fields(self, customer):
        update = ProfileUpdate.from_payload({"name": "Sari D.", "total_points": 99999})

        updated = CustomerService.update_profile(customer.pk, update)

        assert updated.full_name == "Sari D."
        customer.refresh_from_db()
        assert customer.full_name == "Sari D."
        assert customer.total_points == 0

    def test_email_taken(self, customer, make_customer):
        other = make_customer()
        with pytest.raises(LouvaError) as exc:
            CustomerService.update_profile(other.pk, ProfileUpdate(email="sari@example.com"))
        assert exc.value.data == {"field": "email"}

    def test_inactive_customer_not_found(self, customer):
        customer.is_active = False
        customer.save()
        with pytest.raises(LouvaError) as exc:
            CustomerService.get(customer.pk)
        assert exc.value.code == "CUSTOMER_NOT_FOUND"

    def test_malformed_id_not_found(self, db):
        with pytest.raises(LouvaError) as exc:
            CustomerService.get("not-a-uuid")
        assert exc.value.code == "CUSTOMER_NOT_FOUND"


class TestSearch:
    def test_query_and_membership(self, make_customer):
        make_customer(full_name="Budi", points=0)
        make_customer(full_name="Bunga", points=700, level="Silver")
        make_customer(full_name="Citra", points=1500, level="Gold")

        assert {c.full_name for c in CustomerService.search("Bu")} == {"Budi", "Bunga"}
        assert [c.full_name for c in CustomerService.search(membership="silver")] == ["Bunga"]
        assert len(CustomerService.search(limit=2)) == 2

    def test_membership_stats(self, make_customer):
        make_customer()
        make_customer(points=700, level="Silver")
        make_customer(points=800, level="Silver")

        assert CustomerService.membership_stats() == {
            "bronze": 1,
            "silver": 2,
            "gold": 0,
            "total": 3,
        }


def test_static_qr_code_strips_symbols():
    from datetime import datetime, timezone as dt_timezone

    now = datetime(2026, 1, 1, tzinfo=dt_timezone.utc)
    assert static_qr_code("a.b+c@x.io", now) == "LOUVA_ABCXIO_1767225600000"


def test_serialize(customer):
    data = CustomerService.serialize(customer)
    assert data["id"] == str(customer.pk)
    assert data["membership_level"] == "Bronze"
    assert Customer.objects.count() == 1
