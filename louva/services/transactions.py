"""Transaction service - checkout recording and history."""

import logging
from dataclasses import dataclass, field

from django.db import DatabaseError, transaction
from django.utils import timezone

from louva import ledger
from louva.conf import louva_settings
from louva.exceptions import LouvaError
from louva.models import (
    Customer,
    EntryType,
    PaymentMethod,
    Service,
    Transaction,
    TransactionLine,
    UserMission,
)
from louva.services.customers import fetch_customer
from louva.services.membership import MembershipService
from louva.services.missions import MissionService
from louva.services.points import PointsService
from louva.signals import mission_completed, points_earned

logger = logging.getLogger(__name__)


@dataclass
class TransactionResult:
    """Outcome of a recorded checkout."""

    transaction: Transaction
    customer: Customer
    computation: ledger.LedgerComputation
    completed_missions: list[UserMission] = field(default_factory=list)

    @property
    def points_earned(self) -> int:
        return self.computation.total_earned

    @property
    def mission_bonus(self) -> int:
        return self.computation.mission_bonus

    @property
    def new_balance(self) -> int:
        return self.customer.total_points

    @property
    def new_level(self) -> str:
        return self.customer.membership_level

    def as_dict(self) -> dict:
        return {
            "transaction": TransactionService.serialize(self.transaction),
            "points_earned": self.points_earned,
            "base_points": self.computation.base_points,
            "membership_multiplier": float(self.computation.membership_multiplier),
            "mission_bonus": self.mission_bonus,
            "new_balance": self.new_balance,
            "new_level": self.new_level,
            "level_changed": self.computation.level_changed,
            "completed_missions": [um.mission_id for um in self.completed_missions],
        }


class TransactionService:
    """
    Service for checkouts.

    record() is the only path that credits earned points. Customer row,
    transaction, lines, mission completions and history commit together.
    """

    @classmethod
    def record(cls, request, principal, now=None) -> TransactionResult:
        """
        Record a checkout and credit its points.

        Args:
            request: TransactionRequest
            principal: acting staff Principal

        Returns:
            TransactionResult

        Raises:
            LouvaError: FORBIDDEN, CUSTOMER_NOT_FOUND, SERVICE_NOT_FOUND,
                PAYMENT_METHOD_NOT_FOUND, MISSION_NOT_FOUND,
                VALIDATION_ERROR, PERSISTENCE_FAILURE
        """
        principal.require_staff()
        now = now or timezone.now()

        try:
            with transaction.atomic():
                customer = fetch_customer(request.customer_id, for_update=True)
                services = Service.objects.filter(is_active=True).in_bulk(set(request.service_ids))
                for service_id in request.service_ids:
                    if service_id not in services:
                        raise LouvaError("SERVICE_NOT_FOUND", service_id=service_id)

                payment_method = PaymentMethod.objects.filter(
                    pk=request.payment_method_id, is_active=True
                ).first()
                if payment_method is None:
                    raise LouvaError(
                        "PAYMENT_METHOD_NOT_FOUND",
                        payment_method_id=request.payment_method_id,
                    )

                lines = []
                for index, service_id in enumerate(request.service_ids):
                    service = services[service_id]
                    override = request.price_override(index)
                    lines.append(ledger.PricedLine(
                        price=service.min_price if override is None else override,
                        multiplier=service.point_multiplier,
                        service_id=service.pk,
                    ))

                user_missions, bonus = MissionService.eligible_bonus(
                    customer, request.mission_ids, request.service_ids, now
                )

                computation = ledger.compute_transaction(
                    lines,
                    current_points=customer.total_points,
                    lifetime_points=customer.lifetime_points,
                    level=customer.membership_level,
                    mission_bonus=bonus,
                    policy=MembershipService.policy(),
                    unit=louva_settings.POINTS_UNIT,
                )

                txn = Transaction.objects.create(
                    customer=customer,
                    payment_method=payment_method,
                    staff=principal.actor,
                    total_amount=computation.total_amount,
                    points_earned=computation.total_earned,
                    mission_bonus_points=computation.mission_bonus,
                    notes=request.notes,
                )
                TransactionLine.objects.bulk_create([
                    TransactionLine(
                        transaction=txn,
                        service=services[line.service_id],
                        price=line.price,
                        points_earned=points,
                    )
                    for line, points in zip(lines, computation.line_points)
                ])

                customer.total_points = computation.new_balance
                customer.lifetime_points = computation.new_lifetime
                customer.membership_level = computation.new_level
                customer.total_visits += 1
                customer.total_spent += computation.total_amount
                customer.save(update_fields=[
                    "total_points",
                    "lifetime_points",
                    "membership_level",
                    "total_visits",
                    "total_spent",
                    "updated_at",
                ])

                MissionService.mark_completed(user_missions, txn, now)

                if computation.total_earned:
                    PointsService.record_history(
                        customer,
                        computation.total_earned,
                        f"Points earned from transaction #{txn.pk}",
                        entry_type=EntryType.EARN,
                        created_by=principal.actor,
                        transaction_obj=txn,
                    )
        except DatabaseError as exc:
            logger.exception("Checkout failed for customer %s", request.customer_id)
            raise LouvaError("PERSISTENCE_FAILURE", customer_id=request.customer_id) from exc

        logger.info(
            "Transaction #%s: customer %s earned %d pts (bonus %d), balance %d, %s",
            txn.pk,
            customer.pk,
            computation.total_earned,
            computation.mission_bonus,
            customer.total_points,
            customer.membership_level,
        )

        points_earned.send(
            sender=Transaction,
            customer=customer,
            transaction=txn,
            points=computation.total_earned,
        )
        for um in user_missions:
            mission_completed.send(sender=UserMission, user_mission=um, transaction=txn)

        return TransactionResult(
            transaction=txn,
            customer=customer,
            computation=computation,
            completed_missions=user_missions,
        )

    @classmethod
    def history(cls, customer_id, limit: int | None = None) -> list[Transaction]:
        limit = limit or louva_settings.HISTORY_LIMIT
        return list(
            Transaction.objects.filter(customer_id=customer_id)
            .select_related("payment_method")
            .prefetch_related("lines__service")[:limit]
        )

    @staticmethod
    def serialize(txn: Transaction) -> dict:
        return {
            "id": txn.pk,
            "customer_id": str(txn.customer_id),
            "payment_method": txn.payment_method.name,
            "staff": txn.staff,
            "total_amount": txn.total_amount,
            "points_earned": txn.points_earned,
            "mission_bonus_points": txn.mission_bonus_points,
            "notes": txn.notes,
            "status": txn.status,
            "created_at": txn.created_at.isoformat(),
            "services": [
                {
                    "service_id": line.service_id,
                    "name": line.service.name,
                    "price": line.price,
                    "points_earned": line.points_earned,
                }
                for line in txn.lines.all()
            ],
        }
