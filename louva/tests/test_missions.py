"""Tests for the mission state machine."""

from datetime import timedelta

import pytest
from django.utils import timezone

from louva.exceptions import LouvaError
from louva.models import Mission, UserMission, UserMissionStatus
from louva.services.missions import MissionService

pytestmark = pytest.mark.django_db


class TestActivate:
    def test_activate_sets_window(self, customer, mission):
        now = timezone.now()

        um = MissionService.activate(customer.pk, mission.pk, now=now)

        assert um.status == UserMissionStatus.ACTIVE
        assert um.activated_at == now
        assert um.expires_at == now + timedelta(days=7)

    def test_no_duration_no_expiry(self, customer, open_mission):
        um = MissionService.activate(customer.pk, open_mission.pk)
        assert um.expires_at is None
        assert um.is_open() is True

    def test_second_activation_rejected(self, customer, mission):
        MissionService.activate(customer.pk, mission.pk)

        with pytest.raises(LouvaError) as exc:
            MissionService.activate(customer.pk, mission.pk)

        assert exc.value.code == "MISSION_ALREADY_ACTIVATED"
        assert exc.value.http_status == 409
        assert UserMission.objects.filter(customer=customer, mission=mission).count() == 1

    def test_completed_cannot_be_reactivated(self, customer, mission):
        MissionService.activate(customer.pk, mission.pk)
        MissionService.complete(customer.pk, mission.pk)

        with pytest.raises(LouvaError) as exc:
            MissionService.activate(customer.pk, mission.pk)
        assert exc.value.code == "MISSION_ALREADY_ACTIVATED"

    def test_inactive_mission(self, customer, mission):
        mission.is_active = False
        mission.save()

        with pytest.raises(LouvaError) as exc:
            MissionService.activate(customer.pk, mission.pk)
        assert exc.value.code == "MISSION_NOT_FOUND"

    def test_unknown_mission(self, customer):
        with pytest.raises(LouvaError) as exc:
            MissionService.activate(customer.pk, 9999)
        assert exc.value.code == "MISSION_NOT_FOUND"


class TestComplete:
    def test_active_to_completed(self, customer, mission):
        MissionService.activate(customer.pk, mission.pk)

        um = MissionService.complete(customer.pk, mission.pk)

        assert um.status == UserMissionStatus.COMPLETED
        assert um.completed_at is not None

    def test_not_activated(self, customer, mission):
        with pytest.raises(LouvaError) as exc:
            MissionService.complete(customer.pk, mission.pk)
        assert exc.value.code == "MISSION_NOT_ACTIVE"

    def test_completed_is_terminal(self, customer, mission):
        MissionService.activate(customer.pk, mission.pk)
        MissionService.complete(customer.pk, mission.pk)

        with pytest.raises(LouvaError) as exc:
            MissionService.complete(customer.pk, mission.pk)
        assert exc.value.code == "MISSION_NOT_ACTIVE"

    def test_overdue_becomes_expired(self, customer, mission):
        MissionService.activate(customer.pk, mission.pk, now=timezone.now() - timedelta(days=10))

        with pytest.raises(LouvaError) as exc:
            MissionService.complete(customer.pk, mission.pk)

        assert exc.value.code == "MISSION_NOT_ACTIVE"
        assert UserMission.objects.get(mission=mission).status == UserMissionStatus.EXPIRED


class TestCatalog:
    def test_merges_customer_status(self, customer, mission, open_mission):
        MissionService.activate(customer.pk, mission.pk)

        catalog = {m["id"]: m for m in MissionService.catalog(customer.pk)}

        assert catalog[mission.pk]["status"] == "active"
        assert catalog[mission.pk]["service_name"] == "Haircut"
        assert catalog[open_mission.pk]["status"] == "available"
        assert catalog[open_mission.pk]["is_expired"] is False

    def test_flags_overdue_active(self, customer, mission):
        MissionService.activate(customer.pk, mission.pk, now=timezone.now() - timedelta(days=8))

        (entry,) = MissionService.catalog(customer.pk)
        assert entry["status"] == "active"
        assert entry["is_expired"] is True

    def test_hides_inactive_missions(self, customer, mission):
        Mission.objects.create(title="Retired", bonus_points=10, is_active=False)
        assert [m["id"] for m in MissionService.catalog(customer.pk)] == [mission.pk]


class TestEligibility:
    def test_active_for_customer_skips_overdue(self, customer, mission, open_mission):
        MissionService.activate(customer.pk, mission.pk, now=timezone.now() - timedelta(days=8))
        MissionService.activate(customer.pk, open_mission.pk)

        active = MissionService.active_for_customer(customer.pk)
        assert [um.mission_id for um in active] == [open_mission.pk]

    def test_expire_overdue(self, customer, mission, open_mission):
        MissionService.activate(customer.pk, mission.pk, now=timezone.now() - timedelta(days=8))
        MissionService.activate(customer.pk, open_mission.pk)

        assert MissionService.expire_overdue() == 1
        assert UserMission.objects.get(mission=mission).status == UserMissionStatus.EXPIRED
        assert UserMission.objects.get(mission=open_mission).status == UserMissionStatus.ACTIVE

    def test_eligible_bonus_sums_missions(self, customer, haircut, mission, open_mission):
        MissionService.activate(customer.pk, mission.pk)
        MissionService.activate(customer.pk, open_mission.pk)

        qualifying, bonus = MissionService.eligible_bonus(
            customer, [mission.pk, open_mission.pk], [haircut.pk]
        )

        assert bonus == 70
        assert {um.mission_id for um in qualifying} == {mission.pk, open_mission.pk}

    def test_no_missions(self, customer, haircut):
        assert MissionService.eligible_bonus(customer, [], [haircut.pk]) == ([], 0)
