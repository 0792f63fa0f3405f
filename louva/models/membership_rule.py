"""Admin-editable membership tier table."""

from decimal import Decimal

from django.db import models
from django.utils.translation import gettext_lazy as _

from louva.models.customer import MembershipLevel


class MembershipRule(models.Model):
    """
    One tier of the membership policy.

    When the table is empty the built-in policy applies
    (Bronze 0-499 x1.0, Silver 500-999 x1.2, Gold 1000+ x1.5).
    """

    level = models.CharField(
        _("level"),
        max_length=10,
        choices=MembershipLevel.choices,
        unique=True,
    )
    min_points = models.PositiveIntegerField(_("minimum lifetime points"))
    max_points = models.PositiveIntegerField(
        _("maximum lifetime points"),
        null=True,
        blank=True,
        help_text=_("Empty for the top tier"),
    )
    multiplier = models.DecimalField(
        _("points multiplier"),
        max_digits=4,
        decimal_places=2,
        default=Decimal("1.00"),
    )
    color = models.CharField(_("color"), max_length=7, default="#4A8BC2")
    benefits = models.JSONField(_("benefits"), default=list, blank=True)
    updated_at = models.DateTimeField(_("updated at"), auto_now=True)

    class Meta:
        verbose_name = _("membership rule")
        verbose_name_plural = _("membership rules")
        ordering = ["min_points"]

    def __str__(self):
        upper = self.max_points if self.max_points is not None else "+"
        return f"{self.level}: {self.min_points}-{upper} x{self.multiplier}"
