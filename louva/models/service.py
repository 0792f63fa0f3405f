"""Salon service catalog."""

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _


class ServiceCategory(models.TextChoices):
    HAIR = "Hair", _("Hair")
    TREATMENT = "Treatment", _("Treatment")
    NAIL = "Nail Care", _("Nail Care")


class Service(models.Model):
    """
    Salon service offered at checkout.

    Price is either fixed (min_price only) or a range staff pick from.
    point_multiplier boosts the base points of this service.
    """

    name = models.CharField(_("name"), max_length=100)
    category = models.CharField(
        _("category"),
        max_length=20,
        choices=ServiceCategory.choices,
        default=ServiceCategory.HAIR,
    )
    description = models.TextField(_("description"), blank=True)

    min_price = models.PositiveIntegerField(_("price"), help_text=_("Rupiah"))
    max_price = models.PositiveIntegerField(
        _("maximum price"),
        null=True,
        blank=True,
        help_text=_("Upper bound for variable-price services"),
    )
    point_multiplier = models.DecimalField(
        _("point multiplier"),
        max_digits=5,
        decimal_places=2,
        default=Decimal("1.00"),
        validators=[MinValueValidator(Decimal("1.00"))],
    )

    is_active = models.BooleanField(_("active"), default=True)
    created_at = models.DateTimeField(_("created at"), auto_now_add=True)
    updated_at = models.DateTimeField(_("updated at"), auto_now=True)

    class Meta:
        verbose_name = _("service")
        verbose_name_plural = _("services")
        ordering = ["category", "name"]

    def __str__(self):
        return f"{self.name} ({self.category})"

    @property
    def price_label(self) -> str:
        if self.max_price and self.max_price != self.min_price:
            return f"{self.min_price}-{self.max_price}"
        return str(self.min_price)
