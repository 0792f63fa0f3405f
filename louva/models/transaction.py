"""Checkout transactions (append-only ledger entries)."""

from django.db import models
from django.utils.translation import gettext_lazy as _


class TransactionStatus(models.TextChoices):
    COMPLETED = "completed", _("Completed")


class Transaction(models.Model):
    """
    Completed checkout.

    points_earned is the final amount credited, mission bonus included.
    Rows are written once and never modified.
    """

    customer = models.ForeignKey(
        "louva.Customer",
        on_delete=models.PROTECT,
        related_name="transactions",
        verbose_name=_("customer"),
    )
    payment_method = models.ForeignKey(
        "louva.PaymentMethod",
        on_delete=models.PROTECT,
        related_name="transactions",
        verbose_name=_("payment method"),
    )
    staff = models.CharField(_("staff"), max_length=100, blank=True)

    total_amount = models.PositiveBigIntegerField(_("total amount"), default=0)
    points_earned = models.PositiveIntegerField(_("points earned"), default=0)
    mission_bonus_points = models.PositiveIntegerField(_("mission bonus"), default=0)

    notes = models.TextField(_("notes"), blank=True)
    status = models.CharField(
        _("status"),
        max_length=20,
        choices=TransactionStatus.choices,
        default=TransactionStatus.COMPLETED,
    )
    created_at = models.DateTimeField(_("created at"), auto_now_add=True, db_index=True)

    class Meta:
        verbose_name = _("transaction")
        verbose_name_plural = _("transactions")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["customer", "-created_at"], name="louva_txn_cust_created_idx"),
        ]

    def __str__(self):
        return f"#{self.pk} {self.total_amount} (+{self.points_earned}pts)"


class TransactionLine(models.Model):
    """One service performed within a transaction."""

    transaction = models.ForeignKey(
        Transaction,
        on_delete=models.CASCADE,
        related_name="lines",
        verbose_name=_("transaction"),
    )
    service = models.ForeignKey(
        "louva.Service",
        on_delete=models.PROTECT,
        related_name="transaction_lines",
        verbose_name=_("service"),
    )
    price = models.PositiveIntegerField(_("price"))
    points_earned = models.PositiveIntegerField(
        _("points earned"),
        help_text=_("Base points before the membership multiplier"),
    )
    created_at = models.DateTimeField(_("created at"), auto_now_add=True, db_index=True)

    class Meta:
        verbose_name = _("transaction line")
        verbose_name_plural = _("transaction lines")
        ordering = ["pk"]

    def __str__(self):
        return f"{self.service.name}: {self.price}"
