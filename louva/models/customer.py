"""Customer model - loyalty member with balance and tier."""

import uuid as uuid_lib

from django.db import models
from django.utils.translation import gettext_lazy as _


class MembershipLevel(models.TextChoices):
    """Membership tiers, lowest first."""

    BRONZE = "Bronze", _("Bronze")
    SILVER = "Silver", _("Silver")
    GOLD = "Gold", _("Gold")


class Customer(models.Model):
    """
    Loyalty member.

    total_points is the spendable balance and never goes negative.
    lifetime_points only grows; membership_level is derived from it
    (see louva.ledger.MembershipPolicy) and is rewritten on every
    balance mutation.
    """

    id = models.UUIDField(primary_key=True, default=uuid_lib.uuid4, editable=False)

    full_name = models.CharField(_("full name"), max_length=150)
    email = models.EmailField(_("email"), blank=True, db_index=True)
    phone = models.CharField(_("phone"), max_length=20, blank=True, db_index=True)

    # Permanent per-customer code printed on member cards
    qr_code = models.CharField(
        _("static QR code"),
        max_length=120,
        unique=True,
        null=True,
        blank=True,
    )

    # Ledger
    total_points = models.PositiveIntegerField(
        _("points balance"),
        default=0,
        help_text=_("Points available for redemption"),
    )
    lifetime_points = models.PositiveIntegerField(
        _("lifetime points"),
        default=0,
        help_text=_("Total points ever earned (never decreases)"),
    )
    membership_level = models.CharField(
        _("membership level"),
        max_length=10,
        choices=MembershipLevel.choices,
        default=MembershipLevel.BRONZE,
        db_index=True,
    )

    # Visit statistics
    total_visits = models.PositiveIntegerField(_("total visits"), default=0)
    total_spent = models.PositiveBigIntegerField(
        _("total spent"),
        default=0,
        help_text=_("Rupiah"),
    )

    is_active = models.BooleanField(_("active"), default=True, db_index=True)
    created_at = models.DateTimeField(_("created at"), auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(_("updated at"), auto_now=True)

    class Meta:
        verbose_name = _("customer")
        verbose_name_plural = _("customers")
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.full_name}: {self.total_points}pts | {self.membership_level}"
