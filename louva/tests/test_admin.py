"""Tests for the admin registrations."""

import pytest
from django.contrib import admin
from django.test import RequestFactory

from louva.admin import (
    CustomerAdmin,
    PointsHistoryEntryAdmin,
    ServiceAdmin,
    TransactionAdmin,
    level_badge,
    signed_points,
)
from louva.models import (
    Customer,
    MembershipRule,
    Mission,
    PaymentMethod,
    PointsHistoryEntry,
    Reward,
    RewardRedemption,
    Service,
    Transaction,
)


@pytest.mark.parametrize("model", [
    Customer,
    Service,
    PaymentMethod,
    Reward,
    Mission,
    MembershipRule,
    Transaction,
    PointsHistoryEntry,
    RewardRedemption,
])
def test_registered(model):
    assert admin.site.is_registered(model)


def test_level_badge():
    html = level_badge("Gold")
    assert "#ffd700" in html
    assert ">Gold</span>" in html


def test_signed_points():
    assert "+25" in signed_points(25)
    assert "color:red" in signed_points(-500)


class TestPermissions:
    def setup_method(self):
        self.request = RequestFactory().get("/admin/")

    @pytest.mark.parametrize("admin_class,model", [
        (TransactionAdmin, Transaction),
        (PointsHistoryEntryAdmin, PointsHistoryEntry),
    ])
    def test_ledger_is_read_only(self, admin_class, model):
        model_admin = admin_class(model, admin.site)

        assert model_admin.has_add_permission(self.request) is False
        assert model_admin.has_change_permission(self.request) is False
        assert model_admin.has_delete_permission(self.request) is False

    def test_balances_not_editable(self):
        model_admin = CustomerAdmin(Customer, admin.site)
        assert {"total_points", "lifetime_points", "membership_level"} <= set(model_admin.readonly_fields)

    def test_catalog_editable(self):
        assert ServiceAdmin.list_editable == ["is_active"]
