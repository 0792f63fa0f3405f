"""Mission service - activation, eligibility and completion."""

import logging
from datetime import timedelta

from django.db import IntegrityError, transaction
from django.utils import timezone

from louva.exceptions import LouvaError
from louva.models import Mission, UserMission, UserMissionStatus
from louva.services.customers import fetch_customer
from louva.signals import mission_completed

logger = logging.getLogger(__name__)


class MissionService:
    """
    Service for the mission state machine.

        available -> active -> completed
                          \\-> expired

    "available" is implicit: a mission with no UserMission row.
    completed and expired are terminal.
    """

    @classmethod
    def get_mission(cls, mission_id) -> Mission:
        try:
            return Mission.objects.select_related("service").get(pk=mission_id, is_active=True)
        except (Mission.DoesNotExist, ValueError):
            raise LouvaError("MISSION_NOT_FOUND", mission_id=mission_id)

    @classmethod
    def catalog(cls, customer_id, now=None) -> list[dict]:
        """Active missions merged with the customer's own status."""
        now = now or timezone.now()
        customer = fetch_customer(customer_id)
        user_missions = {
            um.mission_id: um
            for um in UserMission.objects.filter(customer=customer)
        }

        result = []
        for mission in Mission.objects.filter(is_active=True).select_related("service"):
            um = user_missions.get(mission.pk)
            result.append({
                **cls.serialize_mission(mission),
                "status": um.status if um else UserMissionStatus.AVAILABLE,
                "activated_at": um.activated_at.isoformat() if um else None,
                "completed_at": um.completed_at.isoformat() if um and um.completed_at else None,
                "expires_at": um.expires_at.isoformat() if um and um.expires_at else None,
                "is_expired": bool(um and um.status == UserMissionStatus.ACTIVE and um.is_expired(now)),
            })
        return result

    @classmethod
    def activate(cls, customer_id, mission_id, now=None) -> UserMission:
        """
        Activate a mission for a customer.

        Raises:
            LouvaError: MISSION_NOT_FOUND, MISSION_ALREADY_ACTIVATED (any
                prior row for the pair, whatever its status)
        """
        now = now or timezone.now()
        customer = fetch_customer(customer_id)
        mission = cls.get_mission(mission_id)

        if UserMission.objects.filter(customer=customer, mission=mission).exists():
            raise LouvaError("MISSION_ALREADY_ACTIVATED", mission_id=mission.pk)

        expires_at = None
        if mission.duration_days:
            expires_at = now + timedelta(days=mission.duration_days)

        try:
            with transaction.atomic():
                user_mission = UserMission.objects.create(
                    customer=customer,
                    mission=mission,
                    status=UserMissionStatus.ACTIVE,
                    activated_at=now,
                    expires_at=expires_at,
                )
        except IntegrityError:
            # Concurrent activation won the unique constraint
            raise LouvaError("MISSION_ALREADY_ACTIVATED", mission_id=mission.pk)

        logger.info("Mission %s activated for customer %s", mission.pk, customer.pk)
        return user_mission

    @classmethod
    def eligible_bonus(cls, customer, mission_ids, service_ids, now=None) -> tuple[list[UserMission], int]:
        """
        Missions completed by a checkout and their summed flat bonus.

        A mission qualifies when the customer's row is active, unexpired,
        and its required service (if any) is among ``service_ids``.
        Overdue active rows are moved to expired on the way. Must be
        called inside transaction.atomic(); rows are locked.

        Raises:
            LouvaError: MISSION_NOT_FOUND for an id with no mission at all
        """
        if not mission_ids:
            return [], 0

        now = now or timezone.now()
        found = set(Mission.objects.filter(pk__in=mission_ids).values_list("pk", flat=True))
        for mission_id in mission_ids:
            if mission_id not in found:
                raise LouvaError("MISSION_NOT_FOUND", mission_id=mission_id)

        rows = {
            um.mission_id: um
            for um in UserMission.objects.select_for_update()
            .select_related("mission")
            .filter(customer=customer, mission_id__in=mission_ids)
        }
        services = set(service_ids)

        qualifying = []
        for mission_id in mission_ids:
            um = rows.get(mission_id)
            if um is None or um.status != UserMissionStatus.ACTIVE:
                logger.info("Mission %s not active for customer %s, skipped", mission_id, customer.pk)
                continue
            if um.is_expired(now):
                um.status = UserMissionStatus.EXPIRED
                um.save(update_fields=["status"])
                logger.info("Mission %s expired for customer %s", mission_id, customer.pk)
                continue
            if um.mission.service_id is not None and um.mission.service_id not in services:
                logger.info("Mission %s requires service %s, skipped", mission_id, um.mission.service_id)
                continue
            qualifying.append(um)

        return qualifying, sum(um.mission.bonus_points for um in qualifying)

    @classmethod
    def mark_completed(cls, user_missions, transaction_obj=None, now=None) -> None:
        """Move qualifying rows to completed (inside the checkout's atomic block)."""
        now = now or timezone.now()
        for um in user_missions:
            um.status = UserMissionStatus.COMPLETED
            um.completed_at = now
            um.transaction = transaction_obj
            um.save(update_fields=["status", "completed_at", "transaction"])

    @classmethod
    def complete(cls, customer_id, mission_id, now=None) -> UserMission:
        """
        Explicitly complete an active mission (no points are credited).

        Raises:
            LouvaError: MISSION_NOT_ACTIVE unless the row is active and unexpired
        """
        now = now or timezone.now()
        customer = fetch_customer(customer_id)

        with transaction.atomic():
            um = (
                UserMission.objects.select_for_update()
                .select_related("mission")
                .filter(customer=customer, mission_id=mission_id)
                .first()
            )
            if um is None or um.status != UserMissionStatus.ACTIVE:
                raise LouvaError("MISSION_NOT_ACTIVE", mission_id=mission_id)
            if um.is_expired(now):
                um.status = UserMissionStatus.EXPIRED
                um.save(update_fields=["status"])
                expired = True
            else:
                cls.mark_completed([um], now=now)
                expired = False

        if expired:
            raise LouvaError("MISSION_NOT_ACTIVE", mission_id=mission_id, status=um.status)

        mission_completed.send(sender=UserMission, user_mission=um, transaction=None)
        return um

    @classmethod
    def active_for_customer(cls, customer_id, now=None) -> list[UserMission]:
        """Open (active, unexpired) missions, as shown at checkout."""
        now = now or timezone.now()
        rows = (
            UserMission.objects.filter(customer_id=customer_id, status=UserMissionStatus.ACTIVE)
            .select_related("mission", "mission__service")
        )
        return [um for um in rows if not um.is_expired(now)]

    @classmethod
    def expire_overdue(cls, now=None) -> int:
        """Bulk active -> expired for rows past expires_at."""
        now = now or timezone.now()
        count = UserMission.objects.filter(
            status=UserMissionStatus.ACTIVE,
            expires_at__isnull=False,
            expires_at__lt=now,
        ).update(status=UserMissionStatus.EXPIRED)
        if count:
            logger.info("Expired %d overdue missions", count)
        return count

    @staticmethod
    def serialize_mission(mission: Mission) -> dict:
        return {
            "id": mission.pk,
            "title": mission.title,
            "description": mission.description,
            "service_id": mission.service_id,
            "service_name": mission.service.name if mission.service else None,
            "bonus_points": mission.bonus_points,
            "duration_days": mission.duration_days,
        }

    @classmethod
    def serialize_user_mission(cls, um: UserMission) -> dict:
        return {
            **cls.serialize_mission(um.mission),
            "mission_id": um.mission_id,
            "status": um.status,
            "activated_at": um.activated_at.isoformat(),
            "completed_at": um.completed_at.isoformat() if um.completed_at else None,
            "expires_at": um.expires_at.isoformat() if um.expires_at else None,
        }
