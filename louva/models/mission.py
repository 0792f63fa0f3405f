"""Missions - time-boxed, service-gated bonus offers."""

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class Mission(models.Model):
    """
    Bonus-point offer a customer may activate.

    A transaction including ``service`` (any service when unset) while the
    customer's instance is active and unexpired completes the mission and
    adds ``bonus_points`` flat to the earned points.
    """

    title = models.CharField(_("title"), max_length=120)
    description = models.TextField(_("description"), blank=True)
    service = models.ForeignKey(
        "louva.Service",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="missions",
        verbose_name=_("required service"),
    )
    bonus_points = models.PositiveIntegerField(_("bonus points"))
    duration_days = models.PositiveIntegerField(
        _("duration (days)"),
        null=True,
        blank=True,
        help_text=_("Activation window; empty means no expiry"),
    )
    is_active = models.BooleanField(_("active"), default=True)
    created_at = models.DateTimeField(_("created at"), auto_now_add=True)

    class Meta:
        verbose_name = _("mission")
        verbose_name_plural = _("missions")
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.title} (+{self.bonus_points}pts)"


class UserMissionStatus(models.TextChoices):
    AVAILABLE = "available", _("Available")
    ACTIVE = "active", _("Active")
    COMPLETED = "completed", _("Completed")
    EXPIRED = "expired", _("Expired")


class UserMission(models.Model):
    """
    Per-customer mission instance.

    available -> active -> completed, or active -> expired once
    expires_at has passed. completed and expired are terminal.
    At most one row per (customer, mission).
    """

    customer = models.ForeignKey(
        "louva.Customer",
        on_delete=models.CASCADE,
        related_name="user_missions",
        verbose_name=_("customer"),
    )
    mission = models.ForeignKey(
        Mission,
        on_delete=models.CASCADE,
        related_name="user_missions",
        verbose_name=_("mission"),
    )
    status = models.CharField(
        _("status"),
        max_length=10,
        choices=UserMissionStatus.choices,
        default=UserMissionStatus.ACTIVE,
        db_index=True,
    )
    activated_at = models.DateTimeField(_("activated at"), default=timezone.now)
    completed_at = models.DateTimeField(_("completed at"), null=True, blank=True)
    expires_at = models.DateTimeField(_("expires at"), null=True, blank=True)
    transaction = models.ForeignKey(
        "louva.Transaction",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="completed_missions",
        verbose_name=_("completed by"),
    )

    class Meta:
        verbose_name = _("customer mission")
        verbose_name_plural = _("customer missions")
        ordering = ["-activated_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["customer", "mission"],
                name="louva_unique_user_mission",
            ),
        ]

    def __str__(self):
        return f"{self.mission.title}: {self.status}"

    def is_expired(self, now=None) -> bool:
        if self.expires_at is None:
            return False
        return (now or timezone.now()) > self.expires_at

    def is_open(self, now=None) -> bool:
        """Active and still inside its window."""
        return self.status == UserMissionStatus.ACTIVE and not self.is_expired(now)
