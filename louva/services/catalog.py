"""Catalog service - salon services and payment methods."""

import logging

from django.db import transaction

from louva.exceptions import LouvaError
from louva.models import PaymentMethod, Service

logger = logging.getLogger(__name__)


class CatalogService:
    """
    Service for the admin-managed catalog.

    Uses @classmethod for extensibility (consistent with other services).
    """

    # ======================================================================
    # Services
    # ======================================================================

    @classmethod
    def services(cls, category: str | None = None, include_inactive: bool = False) -> list[Service]:
        qs = Service.objects.all()
        if not include_inactive:
            qs = qs.filter(is_active=True)
        if category and category != "all":
            qs = qs.filter(category=category)
        return list(qs.order_by("category", "name"))

    @classmethod
    def services_by_category(cls, category: str | None = None) -> dict[str, list[dict]]:
        grouped: dict[str, list[dict]] = {}
        for service in cls.services(category):
            grouped.setdefault(service.category, []).append(cls.serialize_service(service))
        return grouped

    @classmethod
    def get_service(cls, service_id) -> Service:
        try:
            return Service.objects.get(pk=service_id)
        except (Service.DoesNotExist, ValueError):
            raise LouvaError("SERVICE_NOT_FOUND", service_id=service_id)

    @classmethod
    def create_service(cls, payload) -> Service:
        """Create from a ServicePayload."""
        service = Service.objects.create(**payload.fields)
        logger.info("Service %s created: %s", service.pk, service.name)
        return service

    @classmethod
    def update_service(cls, payload) -> Service:
        """Apply the fields of a partial ServicePayload."""
        with transaction.atomic():
            service = cls.get_service(payload.id)
            for key, value in payload.fields.items():
                setattr(service, key, value)
            if service.max_price is not None and service.max_price < service.min_price:
                raise LouvaError(
                    "VALIDATION_ERROR",
                    message="max_price must be >= min_price",
                    field="max_price",
                )
            service.save()
        return service

    @classmethod
    def delete_service(cls, service_id) -> bool:
        """
        Remove a service.

        A service referenced by past transactions is deactivated instead
        so the ledger keeps its lines.

        Returns:
            True if the row was deleted, False if it was deactivated
        """
        service = cls.get_service(service_id)
        if service.transaction_lines.exists():
            service.is_active = False
            service.save(update_fields=["is_active", "updated_at"])
            logger.info("Service %s deactivated (has transactions)", service.pk)
            return False

        service.delete()
        logger.info("Service %s deleted", service_id)
        return True

    # ======================================================================
    # Payment methods
    # ======================================================================

    @classmethod
    def payment_methods(cls, include_inactive: bool = False) -> list[PaymentMethod]:
        qs = PaymentMethod.objects.all()
        if not include_inactive:
            qs = qs.filter(is_active=True)
        return list(qs.order_by("name"))

    @classmethod
    def create_payment_method(cls, payload) -> PaymentMethod:
        method = PaymentMethod.objects.create(
            name=payload.name,
            type=payload.type,
            bank=payload.bank,
            is_active=payload.is_active,
        )
        logger.info("Payment method %s created: %s", method.pk, method.name)
        return method

    @staticmethod
    def serialize_service(service: Service) -> dict:
        return {
            "id": service.pk,
            "name": service.name,
            "category": service.category,
            "description": service.description,
            "min_price": service.min_price,
            "max_price": service.max_price,
            "price_label": service.price_label,
            "point_multiplier": float(service.point_multiplier),
            "is_active": service.is_active,
        }

    @staticmethod
    def serialize_payment_method(method: PaymentMethod) -> dict:
        return {
            "id": method.pk,
            "name": method.name,
            "type": method.type,
            "bank": method.bank,
            "is_active": method.is_active,
        }
