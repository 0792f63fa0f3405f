"""Management command to expire overdue vouchers and missions."""

from django.core.management.base import BaseCommand
from django.utils import timezone

from louva.models import RedemptionStatus, RewardRedemption, UserMission, UserMissionStatus
from louva.services.missions import MissionService
from louva.services.rewards import RewardService


class Command(BaseCommand):
    help = "Mark active vouchers and missions past their expiry as expired"

    def add_arguments(self, parser):
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Report what would expire without writing",
        )

    def handle(self, *args, **options):
        now = timezone.now()

        if options["dry_run"]:
            vouchers = RewardRedemption.objects.filter(
                status=RedemptionStatus.ACTIVE, expiry_date__lt=now
            ).count()
            missions = UserMission.objects.filter(
                status=UserMissionStatus.ACTIVE, expires_at__lt=now
            ).count()
            self.stdout.write(f"Would expire {vouchers} vouchers and {missions} missions.")
            return

        vouchers = RewardService.expire_overdue(now)
        missions = MissionService.expire_overdue(now)
        self.stdout.write(
            self.style.SUCCESS(f"Expired {vouchers} vouchers and {missions} missions.")
        )
