"""Management command to load the default salon catalog."""

from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from louva.models import (
    MembershipRule,
    PaymentMethod,
    PaymentType,
    Reward,
    Service,
    ServiceCategory,
)
from louva.services.membership import MembershipService

DEFAULT_SERVICES = [
    ("Haircut", ServiceCategory.HAIR, 50000, "1.0", "Basic haircut with styling"),
    ("Hair Color", ServiceCategory.HAIR, 150000, "1.2", "Hair coloring with premium products"),
    ("Hair Treatment", ServiceCategory.HAIR, 100000, "1.1", "Deep conditioning hair treatment"),
    ("Facial", ServiceCategory.TREATMENT, 80000, "1.0", "Basic facial treatment"),
    ("Massage", ServiceCategory.TREATMENT, 120000, "1.1", "Full body relaxation massage"),
    ("Manicure", ServiceCategory.NAIL, 60000, "1.0", "Basic hand nail care"),
    ("Pedicure", ServiceCategory.NAIL, 60000, "1.0", "Basic foot nail care"),
    ("Nail Art", ServiceCategory.NAIL, 100000, "1.2", "Nail art with custom design"),
]

DEFAULT_PAYMENT_METHODS = [
    ("Cash", PaymentType.CASH, ""),
    ("Debit/Credit", PaymentType.CARD, ""),
    ("GoPay", PaymentType.EWALLET, ""),
    ("OVO", PaymentType.EWALLET, ""),
    ("Dana", PaymentType.EWALLET, ""),
    ("ShopeePay", PaymentType.EWALLET, ""),
    ("Bank Transfer", PaymentType.TRANSFER, ""),
    ("Voucher", PaymentType.VOUCHER, ""),
]

DEFAULT_REWARDS = [
    ("Voucher Rp 50.000", 250, "Rp 50.000 off any service"),
    ("20% off Hair Treatment", 300, "One hair treatment at 20% off"),
    ("Free Haircut", 500, "One free haircut"),
    ("Free Manicure & Pedicure", 800, "One free manicure and pedicure"),
    ("VIP Treatment Package", 1500, "Full VIP treatment package"),
]


class Command(BaseCommand):
    help = "Create default services, payment methods, rewards and membership rules"

    def handle(self, *args, **options):
        with transaction.atomic():
            services = 0
            for name, category, price, multiplier, description in DEFAULT_SERVICES:
                _, created = Service.objects.get_or_create(
                    name=name,
                    defaults={
                        "category": category,
                        "min_price": price,
                        "point_multiplier": Decimal(multiplier),
                        "description": description,
                    },
                )
                services += created

            methods = 0
            for name, method_type, bank in DEFAULT_PAYMENT_METHODS:
                _, created = PaymentMethod.objects.get_or_create(
                    name=name,
                    defaults={"type": method_type, "bank": bank},
                )
                methods += created

            rewards = 0
            for name, points, description in DEFAULT_REWARDS:
                _, created = Reward.objects.get_or_create(
                    name=name,
                    defaults={"points_required": points, "description": description},
                )
                rewards += created

            rules = 0
            if not MembershipRule.objects.exists():
                for rule in MembershipService.rules():
                    MembershipRule.objects.create(
                        level=rule["name"],
                        min_points=rule["min_points"],
                        max_points=rule["max_points"],
                        multiplier=Decimal(str(rule["multiplier"])),
                        color=rule["color"],
                        benefits=rule["benefits"],
                    )
                    rules += 1

        self.stdout.write(
            self.style.SUCCESS(
                f"Seeded {services} services, {methods} payment methods, "
                f"{rewards} rewards, {rules} membership rules."
            )
        )
