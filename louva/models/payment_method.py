"""Payment methods accepted at checkout."""

from django.db import models
from django.utils.translation import gettext_lazy as _


class PaymentType(models.TextChoices):
    CASH = "cash", _("Cash")
    CARD = "card", _("Debit/Credit card")
    EWALLET = "ewallet", _("E-wallet")
    TRANSFER = "transfer", _("Bank transfer")
    VOUCHER = "voucher", _("Voucher")


class PaymentMethod(models.Model):
    name = models.CharField(_("name"), max_length=60)
    type = models.CharField(
        _("type"),
        max_length=20,
        choices=PaymentType.choices,
        default=PaymentType.CASH,
    )
    bank = models.CharField(_("bank"), max_length=60, blank=True)
    is_active = models.BooleanField(_("active"), default=True)
    created_at = models.DateTimeField(_("created at"), auto_now_add=True)

    class Meta:
        verbose_name = _("payment method")
        verbose_name_plural = _("payment methods")
        ordering = ["type", "name"]

    def __str__(self):
        if self.bank:
            return f"{self.name} ({self.bank})"
        return self.name
