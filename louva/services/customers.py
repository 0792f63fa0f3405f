"""Customer service - lookup, signup, profile and QR issue."""

import logging
import re

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.db.models import Count, Q
from django.utils import timezone

from louva import qr
from louva.conf import louva_settings
from louva.exceptions import LouvaError
from louva.models import Customer, MembershipLevel
from louva.signals import customer_created

logger = logging.getLogger(__name__)


def fetch_customer(customer_id, *, for_update: bool = False) -> Customer:
    """
    Load an active customer or raise CUSTOMER_NOT_FOUND.

    With for_update=True the row is locked; MUST be called inside
    transaction.atomic().
    """
    qs = Customer.objects.filter(is_active=True)
    if for_update:
        qs = qs.select_for_update()
    try:
        return qs.get(pk=customer_id)
    except (Customer.DoesNotExist, ValidationError, ValueError):
        raise LouvaError("CUSTOMER_NOT_FOUND", customer_id=str(customer_id))


def static_qr_code(email: str, now=None) -> str:
    """Permanent member-card code: LOUVA_<EMAIL ALNUM>_<unix millis>."""
    handle = re.sub(r"[^a-zA-Z0-9]", "", email).upper()
    return qr.build_legacy_token(handle, now or timezone.now())


class CustomerService:
    """
    Service for customer operations.

    Uses @classmethod for extensibility (consistent with other services).
    """

    PROFILE_FIELDS = {"full_name", "email", "phone"}

    @classmethod
    def get(cls, customer_id) -> Customer:
        return fetch_customer(customer_id)

    @classmethod
    def create(cls, data) -> Customer:
        """
        Sign up a customer at Bronze with 0 points.

        Args:
            data: CustomerCreate payload

        Raises:
            LouvaError: VALIDATION_ERROR if email or phone is already registered
        """
        exists = Customer.objects.filter(
            Q(email__iexact=data.email) | Q(phone=data.phone)
        ).exists()
        if exists:
            raise LouvaError(
                "VALIDATION_ERROR",
                message="Customer with this email or phone already exists",
            )

        try:
            with transaction.atomic():
                customer = Customer.objects.create(
                    full_name=data.full_name,
                    email=data.email,
                    phone=data.phone,
                    membership_level=MembershipLevel.BRONZE,
                    total_points=0,
                    qr_code=static_qr_code(data.email),
                )
        except IntegrityError:
            raise LouvaError("PERSISTENCE_FAILURE", message="Failed to create customer")

        logger.info("Customer %s created", customer.pk)
        customer_created.send(sender=Customer, customer=customer)
        return customer

    @classmethod
    def update_profile(cls, customer_id, update) -> Customer:
        """Update whitelisted profile fields (ProfileUpdate payload)."""
        customer = fetch_customer(customer_id)
        changes = {k: v for k, v in update.changes().items() if k in cls.PROFILE_FIELDS}

        if "email" in changes:
            changes["email"] = changes["email"].lower()
            taken = Customer.objects.filter(email__iexact=changes["email"]).exclude(pk=customer.pk)
            if changes["email"] and taken.exists():
                raise LouvaError("VALIDATION_ERROR", message="Email already registered", field="email")

        for key, value in changes.items():
            setattr(customer, key, value)
        customer.save(update_fields=[*changes, "updated_at"])
        return customer

    @classmethod
    def search(
        cls,
        query: str | None = None,
        membership: str | None = None,
        offset: int = 0,
        limit: int = 50,
    ) -> list[Customer]:
        """Search by name, email or phone; optionally filter by tier."""
        qs = Customer.objects.filter(is_active=True).order_by("-created_at")

        if query:
            qs = qs.filter(
                Q(full_name__icontains=query)
                | Q(email__icontains=query)
                | Q(phone__icontains=query)
            )

        if membership and membership != "all":
            qs = qs.filter(membership_level__iexact=membership)

        return list(qs[offset:offset + limit])

    @classmethod
    def membership_stats(cls) -> dict:
        """Customer count per tier."""
        counts = {
            row["membership_level"]: row["total"]
            for row in Customer.objects.filter(is_active=True)
            .order_by()
            .values("membership_level")
            .annotate(total=Count("id"))
        }
        stats = {level.lower(): counts.get(level, 0) for level in MembershipLevel.values}
        stats["total"] = sum(counts.values())
        return stats

    @classmethod
    def issue_qr(cls, customer_id, now=None) -> dict:
        """Time-stamped check-in payload for the customer's QR screen."""
        customer = fetch_customer(customer_id)
        now = now or timezone.now()
        return {
            "payload": qr.build_payload(customer.pk, now),
            "issued_at": qr.format_timestamp(now),
            "valid_for_seconds": louva_settings.QR_VALIDITY_SECONDS,
        }

    @staticmethod
    def serialize(customer: Customer) -> dict:
        return {
            "id": str(customer.pk),
            "full_name": customer.full_name,
            "email": customer.email,
            "phone": customer.phone,
            "qr_code": customer.qr_code,
            "total_points": customer.total_points,
            "lifetime_points": customer.lifetime_points,
            "membership_level": customer.membership_level,
            "total_visits": customer.total_visits,
            "total_spent": customer.total_spent,
            "created_at": customer.created_at.isoformat() if customer.created_at else None,
            "updated_at": customer.updated_at.isoformat() if customer.updated_at else None,
        }
