"""Points history - audit trail of balance changes."""

from django.db import models
from django.utils.translation import gettext_lazy as _


class EntryType(models.TextChoices):
    EARN = "earn", _("Earn")
    REDEEM = "redeem", _("Redeem")
    ADJUST = "adjust", _("Adjustment")
    EXPIRE = "expire", _("Expiration")


class PointsHistoryEntry(models.Model):
    """
    Immutable record of a ledger delta.

    One row per balance-changing event. Rows are append-only:
    never modified or deleted.
    """

    customer = models.ForeignKey(
        "louva.Customer",
        on_delete=models.CASCADE,
        related_name="points_history",
        verbose_name=_("customer"),
    )
    entry_type = models.CharField(_("type"), max_length=20, choices=EntryType.choices)
    points_change = models.IntegerField(
        _("points change"),
        help_text=_("Positive for earnings, negative for redemptions"),
    )
    balance_after = models.IntegerField(_("balance after"))
    description = models.CharField(_("description"), max_length=255)

    transaction = models.ForeignKey(
        "louva.Transaction",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="history_entries",
    )
    redemption = models.ForeignKey(
        "louva.RewardRedemption",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="history_entries",
    )
    created_by = models.CharField(_("created by"), max_length=100, blank=True)
    created_at = models.DateTimeField(_("created at"), auto_now_add=True, db_index=True)

    class Meta:
        verbose_name = _("points history entry")
        verbose_name_plural = _("points history")
        ordering = ["-created_at", "-pk"]
        indexes = [
            models.Index(fields=["customer", "-created_at"], name="louva_hist_cust_created_idx"),
        ]

    def __str__(self):
        sign = "+" if self.points_change > 0 else ""
        return f"{sign}{self.points_change}pts - {self.description}"
