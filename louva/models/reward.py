"""Reward catalog and redemptions."""

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class Reward(models.Model):
    name = models.CharField(_("name"), max_length=100)
    description = models.TextField(_("description"), blank=True)
    points_required = models.PositiveIntegerField(_("points required"))
    is_active = models.BooleanField(_("active"), default=True)
    created_at = models.DateTimeField(_("created at"), auto_now_add=True)
    updated_at = models.DateTimeField(_("updated at"), auto_now=True)

    class Meta:
        verbose_name = _("reward")
        verbose_name_plural = _("rewards")
        ordering = ["points_required", "name"]

    def __str__(self):
        return f"{self.name} ({self.points_required}pts)"


class RedemptionStatus(models.TextChoices):
    ACTIVE = "active", _("Active")
    USED = "used", _("Used")
    EXPIRED = "expired", _("Expired")


class RewardRedemption(models.Model):
    """
    A reward claimed with points, identified by its voucher code.

    Status transitions: active -> used, active -> expired.
    The status column is not eagerly updated on expiry; read
    effective_status when presenting a voucher.
    """

    customer = models.ForeignKey(
        "louva.Customer",
        on_delete=models.PROTECT,
        related_name="redemptions",
        verbose_name=_("customer"),
    )
    reward = models.ForeignKey(
        Reward,
        on_delete=models.PROTECT,
        related_name="redemptions",
        verbose_name=_("reward"),
    )
    points_used = models.PositiveIntegerField(_("points used"))
    voucher_code = models.CharField(_("voucher code"), max_length=32, unique=True)
    status = models.CharField(
        _("status"),
        max_length=10,
        choices=RedemptionStatus.choices,
        default=RedemptionStatus.ACTIVE,
        db_index=True,
    )
    redeemed_at = models.DateTimeField(_("redeemed at"), default=timezone.now)
    expiry_date = models.DateTimeField(_("expires at"))
    used_at = models.DateTimeField(_("used at"), null=True, blank=True)
    used_by = models.CharField(_("used by"), max_length=100, blank=True)

    class Meta:
        verbose_name = _("reward redemption")
        verbose_name_plural = _("reward redemptions")
        ordering = ["-redeemed_at"]
        indexes = [
            models.Index(fields=["customer", "status"], name="louva_redeem_cust_status_idx"),
        ]

    def __str__(self):
        return f"{self.voucher_code} ({self.status})"

    def is_expired(self, now=None) -> bool:
        return (now or timezone.now()) > self.expiry_date

    @property
    def effective_status(self) -> str:
        """Status as seen by the customer: overdue active vouchers are expired."""
        if self.status == RedemptionStatus.ACTIVE and self.is_expired():
            return RedemptionStatus.EXPIRED
        return self.status
