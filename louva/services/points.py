"""Points service - the single entry point for balance mutations."""

import logging

from django.db import DatabaseError, transaction

from louva.conf import louva_settings
from louva.exceptions import LouvaError
from louva.ledger import MembershipPolicy
from louva.models import Customer, EntryType, PointsHistoryEntry
from louva.services.customers import fetch_customer
from louva.services.membership import MembershipService

logger = logging.getLogger(__name__)


class PointsService:
    """
    Service for ledger deltas.

    Every balance change goes through apply_delta() (or, for checkouts,
    TransactionService which holds the same row lock). History rows are
    best-effort: a failed insert is logged and the mutation stands.
    """

    @classmethod
    def apply_delta(
        cls,
        customer_id,
        delta: int,
        description: str,
        entry_type: str = EntryType.ADJUST,
        created_by: str = "",
        redemption=None,
        policy: MembershipPolicy | None = None,
    ) -> tuple[Customer, PointsHistoryEntry | None]:
        """
        Atomically apply a signed delta to a customer's balance.

        Positive EARN/ADJUST deltas also grow lifetime points and may
        upgrade the tier. Negative deltas never touch lifetime points.

        Returns:
            Tuple of (updated Customer, history entry or None)

        Raises:
            LouvaError: CUSTOMER_NOT_FOUND, INSUFFICIENT_POINTS (balance
                would go negative; nothing is written), PERSISTENCE_FAILURE
        """
        if delta == 0:
            raise LouvaError("VALIDATION_ERROR", message="Points change cannot be zero")

        policy = policy or MembershipService.policy()

        try:
            with transaction.atomic():
                customer = fetch_customer(customer_id, for_update=True)

                new_balance = customer.total_points + delta
                if new_balance < 0:
                    raise LouvaError(
                        "INSUFFICIENT_POINTS",
                        available=customer.total_points,
                        requested=-delta,
                    )

                customer.total_points = new_balance
                fields = ["total_points", "membership_level", "updated_at"]
                if delta > 0:
                    customer.lifetime_points += delta
                    fields.append("lifetime_points")
                customer.membership_level = policy.level_for(customer.lifetime_points)
                customer.save(update_fields=fields)

                entry = cls.record_history(
                    customer,
                    delta,
                    description,
                    entry_type=entry_type,
                    created_by=created_by,
                    redemption=redemption,
                )
        except DatabaseError as exc:
            logger.exception("Ledger delta failed for customer %s", customer_id)
            raise LouvaError("PERSISTENCE_FAILURE", customer_id=str(customer_id)) from exc

        logger.info(
            "Ledger delta %+d for customer %s (balance %d, %s)",
            delta,
            customer.pk,
            customer.total_points,
            customer.membership_level,
        )
        return customer, entry

    @classmethod
    def adjust(cls, customer_id, delta: int, reason: str, principal) -> Customer:
        """Staff correction (positive or negative)."""
        principal.require_staff()
        if not reason:
            raise LouvaError("VALIDATION_ERROR", message="Adjustment reason is required")
        customer, _ = cls.apply_delta(
            customer_id,
            delta,
            reason,
            entry_type=EntryType.ADJUST,
            created_by=principal.actor,
        )
        return customer

    @classmethod
    def record_history(
        cls,
        customer: Customer,
        delta: int,
        description: str,
        entry_type: str,
        created_by: str = "",
        transaction_obj=None,
        redemption=None,
    ) -> PointsHistoryEntry | None:
        """
        Append a history row inside its own savepoint.

        Failure is logged and swallowed so the primary mutation is kept.
        """
        try:
            with transaction.atomic():
                return PointsHistoryEntry.objects.create(
                    customer=customer,
                    entry_type=entry_type,
                    points_change=delta,
                    balance_after=customer.total_points,
                    description=description[:255],
                    transaction=transaction_obj,
                    redemption=redemption,
                    created_by=created_by,
                )
        except DatabaseError:
            logger.exception("Points history insert failed for customer %s", customer.pk)
            return None

    @classmethod
    def history(cls, customer_id, limit: int | None = None) -> list[PointsHistoryEntry]:
        limit = limit or louva_settings.HISTORY_LIMIT
        return list(PointsHistoryEntry.objects.filter(customer_id=customer_id)[:limit])

    @classmethod
    def summary(cls, customer_id, limit: int | None = None) -> dict:
        """Balance, tier progress and recent history."""
        customer = fetch_customer(customer_id)
        policy = MembershipService.policy()
        return {
            "current_points": customer.total_points,
            "lifetime_points": customer.lifetime_points,
            "membership_level": customer.membership_level,
            "points_to_next_level": policy.points_to_next_level(customer.lifetime_points),
            "total_visits": customer.total_visits,
            "total_spent": customer.total_spent,
            "history": [cls.serialize_entry(e) for e in cls.history(customer.pk, limit)],
        }

    @staticmethod
    def serialize_entry(entry: PointsHistoryEntry) -> dict:
        return {
            "id": entry.pk,
            "type": entry.entry_type,
            "points_change": entry.points_change,
            "balance_after": entry.balance_after,
            "description": entry.description,
            "transaction_id": entry.transaction_id,
            "redemption_id": entry.redemption_id,
            "created_at": entry.created_at.isoformat(),
        }
