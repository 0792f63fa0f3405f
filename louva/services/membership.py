"""Membership service - tier rules and recalculation."""

import logging
from decimal import Decimal

from django.db import transaction

from louva.exceptions import LouvaError
from louva.ledger import DEFAULT_TIERS, MembershipPolicy, Tier
from louva.models import Customer, MembershipRule
from louva.services.customers import fetch_customer

logger = logging.getLogger(__name__)


_DEFAULT_PRESENTATION = {
    "Bronze": ("#CD7F32", ["Basic points earning", "Standard service access"]),
    "Silver": ("#C0C0C0", ["1.2x points multiplier", "Priority booking", "Exclusive offers"]),
    "Gold": (
        "#FFD700",
        ["1.5x points multiplier", "VIP service", "Exclusive rewards", "Birthday bonus"],
    ),
}


class MembershipService:
    """
    Service for membership tier configuration.

    Uses @classmethod for extensibility (consistent with other services).
    """

    @classmethod
    def rules(cls) -> list[dict]:
        """Configured rules, or the built-in defaults when none are stored."""
        stored = list(MembershipRule.objects.order_by("min_points"))
        if stored:
            return [cls._serialize(rule) for rule in stored]

        defaults = []
        for tier in DEFAULT_TIERS:
            color, benefits = _DEFAULT_PRESENTATION[tier.level]
            defaults.append({
                "id": tier.level.lower(),
                "name": tier.level,
                "min_points": tier.min_points,
                "max_points": tier.max_points,
                "multiplier": float(tier.multiplier),
                "color": color,
                "benefits": benefits,
            })
        return defaults

    @classmethod
    def policy(cls) -> MembershipPolicy:
        """MembershipPolicy built from stored rules (defaults if empty)."""
        stored = list(MembershipRule.objects.order_by("min_points"))
        if not stored:
            return MembershipPolicy()
        return MembershipPolicy(
            Tier(rule.level, rule.min_points, rule.max_points, Decimal(rule.multiplier))
            for rule in stored
        )

    @classmethod
    def replace_rules(cls, rules) -> list[dict]:
        """
        Replace the whole tier table.

        Args:
            rules: list of MembershipRulePayload

        Raises:
            LouvaError: VALIDATION_ERROR for duplicate levels, overlapping
                ranges, or a table that does not start at 0 points
        """
        levels = [rule.level for rule in rules]
        if len(set(levels)) != len(levels):
            raise LouvaError("VALIDATION_ERROR", message="Each level may appear only once")

        for i, first in enumerate(rules):
            for second in rules[i + 1:]:
                if cls._overlaps(first, second):
                    raise LouvaError(
                        "VALIDATION_ERROR",
                        message=f"Overlapping point ranges between {first.level} and {second.level}",
                    )

        if min(rule.min_points for rule in rules) != 0:
            raise LouvaError("VALIDATION_ERROR", message="Lowest tier must start at 0 points")

        with transaction.atomic():
            MembershipRule.objects.all().delete()
            MembershipRule.objects.bulk_create([
                MembershipRule(
                    level=rule.level,
                    min_points=rule.min_points,
                    max_points=rule.max_points,
                    multiplier=rule.multiplier,
                    color=rule.color,
                    benefits=list(rule.benefits),
                )
                for rule in rules
            ])
            changed = cls.recalculate_all()

        logger.info(
            "Membership rules replaced: %s (%d customers re-tiered)",
            ", ".join(levels),
            changed,
        )
        return cls.rules()

    @classmethod
    def recalculate_all(cls, policy: MembershipPolicy | None = None) -> int:
        """
        Re-derive every customer's tier from lifetime points.

        One UPDATE per tier over its lifetime range. The lowest tier also
        takes anything below its minimum, matching level_for().

        Returns:
            Number of customers whose level changed
        """
        policy = policy or cls.policy()
        tiers = policy.tiers
        changed = 0
        with transaction.atomic():
            for index, tier in enumerate(tiers):
                qs = Customer.objects.exclude(membership_level=tier.level)
                if index > 0:
                    qs = qs.filter(lifetime_points__gte=tier.min_points)
                if index + 1 < len(tiers):
                    qs = qs.filter(lifetime_points__lt=tiers[index + 1].min_points)
                changed += qs.update(membership_level=tier.level)
        if changed:
            logger.info("Recalculated membership level for %d customers", changed)
        return changed

    @classmethod
    def recalculate(cls, customer_id, policy: MembershipPolicy | None = None) -> Customer:
        """Re-derive a customer's tier from lifetime points."""
        policy = policy or cls.policy()
        with transaction.atomic():
            customer = fetch_customer(customer_id, for_update=True)
            level = policy.level_for(customer.lifetime_points)
            if customer.membership_level != level:
                customer.membership_level = level
                customer.save(update_fields=["membership_level", "updated_at"])
        return customer

    @staticmethod
    def _overlaps(first, second) -> bool:
        first_max = first.max_points if first.max_points is not None else float("inf")
        second_max = second.max_points if second.max_points is not None else float("inf")
        return first.min_points <= second_max and second.min_points <= first_max

    @staticmethod
    def _serialize(rule: MembershipRule) -> dict:
        return {
            "id": rule.level.lower(),
            "name": rule.level,
            "min_points": rule.min_points,
            "max_points": rule.max_points,
            "multiplier": float(rule.multiplier),
            "color": rule.color,
            "benefits": rule.benefits,
        }
