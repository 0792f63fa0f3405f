"""Management command to re-derive membership levels from lifetime points."""

from django.core.management.base import BaseCommand

from louva.services.membership import MembershipService


class Command(BaseCommand):
    help = "Recalculate every customer's membership level from the current tier rules"

    def handle(self, *args, **options):
        changed = MembershipService.recalculate_all()
        self.stdout.write(
            self.style.SUCCESS(f"Recalculated membership for {changed} customers.")
        )
