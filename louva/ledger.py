"""
Loyalty ledger - pure points, tier and redemption arithmetic.

Nothing here touches the database. Services load rows, call these
functions and persist the result.

    points per service = floor(price / 1000 * service multiplier)
    earned             = floor(sum(points) * tier multiplier)
    total earned       = earned + mission bonus (not scaled by tier)
    tier               = f(lifetime points), Bronze < 500 <= Silver < 1000 <= Gold
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Iterable, Sequence

from louva.exceptions import LouvaError


@dataclass(frozen=True)
class Tier:
    level: str
    min_points: int
    max_points: int | None
    multiplier: Decimal

    def contains(self, quantity: int) -> bool:
        return quantity >= self.min_points and (
            self.max_points is None or quantity <= self.max_points
        )


DEFAULT_TIERS = (
    Tier("Bronze", 0, 499, Decimal("1.0")),
    Tier("Silver", 500, 999, Decimal("1.2")),
    Tier("Gold", 1000, None, Decimal("1.5")),
)


class MembershipPolicy:
    """
    Ordered tier table.

    level_for() is monotonic in its argument, so feeding it the lifetime
    quantity (which never decreases) keeps tiers from ever downgrading.
    """

    def __init__(self, tiers: Iterable[Tier] = DEFAULT_TIERS):
        self.tiers = tuple(sorted(tiers, key=lambda t: t.min_points))
        if not self.tiers:
            raise ValueError("MembershipPolicy needs at least one tier")

    def __repr__(self):
        return f"MembershipPolicy({[t.level for t in self.tiers]})"

    def level_for(self, quantity: int) -> str:
        """Highest tier whose minimum is reached."""
        level = self.tiers[0].level
        for tier in self.tiers:
            if quantity >= tier.min_points:
                level = tier.level
        return level

    def tier(self, level: str) -> Tier | None:
        for tier in self.tiers:
            if tier.level == level:
                return tier
        return None

    def multiplier_for(self, level: str) -> Decimal:
        tier = self.tier(level)
        return tier.multiplier if tier else Decimal("1.0")

    def next_tier(self, level: str) -> Tier | None:
        levels = [t.level for t in self.tiers]
        if level not in levels:
            return None
        idx = levels.index(level)
        return self.tiers[idx + 1] if idx + 1 < len(self.tiers) else None

    def points_to_next_level(self, quantity: int) -> int:
        """Points still needed for the next tier (0 at the top tier)."""
        upcoming = self.next_tier(self.level_for(quantity))
        if upcoming is None:
            return 0
        return max(0, upcoming.min_points - quantity)


DEFAULT_POLICY = MembershipPolicy()


@dataclass(frozen=True)
class PricedLine:
    """A purchased service as the ledger sees it."""

    price: int
    multiplier: Decimal = Decimal("1")
    service_id: int | None = None


@dataclass(frozen=True)
class LedgerComputation:
    line_points: tuple[int, ...]
    base_points: int
    membership_multiplier: Decimal
    earned: int
    mission_bonus: int
    total_earned: int
    total_amount: int
    new_balance: int
    new_lifetime: int
    previous_level: str
    new_level: str

    @property
    def level_changed(self) -> bool:
        return self.previous_level != self.new_level


def service_points(price, multiplier=Decimal("1"), unit: int = 1000) -> int:
    """floor(price / unit * multiplier), exact in Decimal."""
    price = Decimal(price)
    multiplier = Decimal(str(multiplier))
    if price < 0:
        raise LouvaError("VALIDATION_ERROR", message="Price must be non-negative", price=str(price))
    if multiplier < 0:
        raise LouvaError("VALIDATION_ERROR", message="Multiplier must be non-negative")
    return math.floor(price / Decimal(unit) * multiplier)


def apply_multiplier(base_points: int, multiplier) -> int:
    return math.floor(Decimal(base_points) * Decimal(str(multiplier)))


def compute_transaction(
    lines: Sequence[PricedLine],
    current_points: int,
    lifetime_points: int,
    level: str,
    mission_bonus: int = 0,
    policy: MembershipPolicy = DEFAULT_POLICY,
    unit: int = 1000,
) -> LedgerComputation:
    """
    Points earned by a checkout and the resulting customer state.

    The tier multiplier is taken from the customer's current level; the
    new level is derived from the new lifetime total.
    """
    if not lines:
        raise LouvaError("VALIDATION_ERROR", message="At least one service is required")
    if mission_bonus < 0:
        raise LouvaError("VALIDATION_ERROR", message="Mission bonus must be non-negative")

    line_points = tuple(service_points(line.price, line.multiplier, unit) for line in lines)
    base_points = sum(line_points)
    membership_multiplier = policy.multiplier_for(level)
    earned = apply_multiplier(base_points, membership_multiplier)
    total_earned = earned + mission_bonus
    new_lifetime = lifetime_points + total_earned

    return LedgerComputation(
        line_points=line_points,
        base_points=base_points,
        membership_multiplier=membership_multiplier,
        earned=earned,
        mission_bonus=mission_bonus,
        total_earned=total_earned,
        total_amount=sum(int(line.price) for line in lines),
        new_balance=current_points + total_earned,
        new_lifetime=new_lifetime,
        previous_level=level,
        new_level=policy.level_for(new_lifetime),
    )


def authorize_redemption(current_points: int, points_required: int) -> int:
    """
    Decide a redemption and return the balance after it.

    Raises:
        LouvaError: INSUFFICIENT_POINTS when the balance does not cover
            the reward; nothing is debited.
    """
    if points_required < 0:
        raise LouvaError("VALIDATION_ERROR", message="points_required must be non-negative")
    if current_points < points_required:
        raise LouvaError(
            "INSUFFICIENT_POINTS",
            available=current_points,
            requested=points_required,
        )
    return current_points - points_required


def voucher_expiry(redeemed_at: datetime, days: int = 30) -> datetime:
    return redeemed_at + timedelta(days=days)
