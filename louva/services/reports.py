"""Report service - admin dashboard aggregates."""

from datetime import timedelta

from django.db.models import Count, Sum
from django.utils import timezone

from louva.exceptions import LouvaError
from louva.models import Customer, MembershipLevel, Transaction, TransactionLine, TransactionStatus

PERIODS = ("today", "week", "month", "year")
ACTIVE_WINDOW_DAYS = 30


def period_start(period: str, now=None):
    """
    Start of a reporting period in the current timezone.

    today: local midnight; week: rolling 7 days; month and year: calendar.
    """
    now = now or timezone.now()
    local = timezone.localtime(now)
    midnight = local.replace(hour=0, minute=0, second=0, microsecond=0)
    if period == "today":
        return midnight
    if period == "week":
        return now - timedelta(days=7)
    if period == "month":
        return midnight.replace(day=1)
    if period == "year":
        return midnight.replace(month=1, day=1)
    raise LouvaError(
        "VALIDATION_ERROR",
        message=f"period must be one of {list(PERIODS)}",
        field="period",
    )


class ReportService:
    """
    Service for admin reporting.

    Read-only; every figure covers completed transactions only.
    """

    @classmethod
    def top_services(cls, period: str = "today", now=None, limit: int = 5) -> dict:
        """Services ranked by bookings, then revenue."""
        start = period_start(period, now)
        rows = list(
            TransactionLine.objects.filter(
                transaction__status=TransactionStatus.COMPLETED,
                transaction__created_at__gte=start,
            )
            .values("service_id", "service__name", "service__category")
            .annotate(booking_count=Count("id"), total_revenue=Sum("price"))
            .order_by("-booking_count", "-total_revenue", "service__name")
        )
        return {
            "period": period,
            "top_services": [
                {
                    "service_id": row["service_id"],
                    "service_name": row["service__name"],
                    "category": row["service__category"],
                    "booking_count": row["booking_count"],
                    "total_revenue": row["total_revenue"] or 0,
                }
                for row in rows[:limit]
            ],
            "total_revenue": sum(row["total_revenue"] or 0 for row in rows),
            "total_bookings": sum(row["booking_count"] for row in rows),
        }

    @classmethod
    def dashboard(cls, period: str = "today", now=None) -> dict:
        now = now or timezone.now()
        start = period_start(period, now)

        customers = Customer.objects.filter(is_active=True)
        total_customers = customers.count()

        completed = Transaction.objects.filter(
            status=TransactionStatus.COMPLETED,
            created_at__gte=start,
        )
        totals = completed.aggregate(revenue=Sum("total_amount"), count=Count("id"))

        recent = (
            Transaction.objects.filter(status=TransactionStatus.COMPLETED)
            .select_related("customer")
            .order_by("-created_at")[:5]
        )

        levels = dict(
            customers.order_by().values_list("membership_level").annotate(total=Count("id"))
        )
        distribution = []
        for level in reversed(MembershipLevel.values):
            count = levels.get(level, 0)
            distribution.append({
                "level": level,
                "count": count,
                "percentage": round(count * 100 / total_customers) if total_customers else 0,
            })

        top = cls.top_services(period, now)["top_services"]

        return {
            "period": period,
            "stats": {
                "total_customers": total_customers,
                "active_customers": customers.filter(
                    updated_at__gte=now - timedelta(days=ACTIVE_WINDOW_DAYS)
                ).count(),
                "new_customers": customers.filter(created_at__gte=start).count(),
                "total_revenue": totals["revenue"] or 0,
                "total_transactions": totals["count"],
            },
            "top_services": sorted(top, key=lambda s: s["total_revenue"], reverse=True),
            "recent_transactions": [
                {
                    "id": txn.pk,
                    "customer_name": txn.customer.full_name,
                    "total_amount": txn.total_amount,
                    "points_earned": txn.points_earned,
                    "created_at": txn.created_at.isoformat(),
                }
                for txn in recent
            ],
            "membership_distribution": distribution,
        }
