"""
Louva JSON API.

Every view resolves the request Principal from headers, parses the body
into a typed payload (louva.schemas) and calls one service. LouvaError
becomes {"error", "code", "data"} with the code's HTTP status; anything
else is logged and returned as 500.
"""

from __future__ import annotations

import json
import logging

from django.http import JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from louva.exceptions import LouvaError
from louva.principal import resolve_principal
from louva.schemas import (
    CustomerCreate,
    MembershipRulePayload,
    MissionRequest,
    PaymentMethodPayload,
    ProfileUpdate,
    RedemptionRequest,
    ScanRequest,
    ServicePayload,
    TransactionRequest,
    VoucherUseRequest,
    as_int,
    as_uuid,
)
from louva.services.catalog import CatalogService
from louva.services.customers import CustomerService
from louva.services.membership import MembershipService
from louva.services.missions import MissionService
from louva.services.points import PointsService
from louva.services.reports import ReportService
from louva.services.rewards import RewardService
from louva.services.scan import ScanService
from louva.services.transactions import TransactionService

logger = logging.getLogger("louva.api")


def error_response(exc: LouvaError) -> JsonResponse:
    return JsonResponse(
        {"error": exc.message, "code": exc.code, "data": exc.data},
        status=exc.http_status,
    )


@method_decorator(csrf_exempt, name="dispatch")
class LouvaView(View):
    """
    Base JSON view.

    Set staff_only = True for admin, scan and checkout endpoints.
    """

    staff_only = False

    def dispatch(self, request, *args, **kwargs):
        self.principal = resolve_principal(request)
        try:
            if self.staff_only:
                self.principal.require_staff()
            return super().dispatch(request, *args, **kwargs)
        except LouvaError as exc:
            if exc.http_status >= 500:
                logger.error("%s %s: %s", request.method, request.path, exc)
            else:
                logger.info("%s %s: %s", request.method, request.path, exc)
            return error_response(exc)
        except Exception:
            logger.exception("%s %s failed", request.method, request.path)
            return JsonResponse({"error": "Internal error"}, status=500)

    def payload(self, request) -> dict:
        """Decoded JSON object body."""
        try:
            data = json.loads(request.body or b"{}")
        except (json.JSONDecodeError, ValueError):
            raise LouvaError("VALIDATION_ERROR", message="Invalid JSON")
        if not isinstance(data, dict):
            raise LouvaError("VALIDATION_ERROR", message="JSON body must be an object")
        return data

    def target_customer(self, request, customer_id: str | None = None) -> str:
        """
        Customer a request acts on.

        Staff may name any customer (customer_id from a parsed payload, or
        customer_id / user_id in the query); customers always act on
        themselves.
        """
        if self.principal.is_staff:
            if customer_id:
                return customer_id
            given = request.GET.get("customer_id") or request.GET.get("user_id")
            if given:
                return as_uuid(given, "customer_id")
        return self.principal.require_customer()

    def query_int(self, request, name: str, default: int, maximum: int | None = None) -> int:
        raw = request.GET.get(name)
        if raw in (None, ""):
            return default
        value = as_int(raw, name)
        return min(value, maximum) if maximum is not None else value


# =============================================================================
# Customer endpoints
# =============================================================================


class ProfileView(LouvaView):
    def get(self, request):
        customer = CustomerService.get(self.target_customer(request))
        return JsonResponse(CustomerService.serialize(customer))

    def put(self, request):
        update = ProfileUpdate.from_payload(self.payload(request))
        customer = CustomerService.update_profile(self.target_customer(request), update)
        return JsonResponse(CustomerService.serialize(customer))


class ProfileQRView(LouvaView):
    def get(self, request):
        return JsonResponse(CustomerService.issue_qr(self.target_customer(request)))


class PointsView(LouvaView):
    def get(self, request):
        limit = self.query_int(request, "limit", 0, maximum=100)
        return JsonResponse(PointsService.summary(self.target_customer(request), limit or None))


class ServicesView(LouvaView):
    def get(self, request):
        category = request.GET.get("category")
        services = CatalogService.services(category)
        return JsonResponse({
            "services": [CatalogService.serialize_service(s) for s in services],
            "by_category": CatalogService.services_by_category(category),
        })


class RewardsView(LouvaView):
    def get(self, request):
        rewards = [RewardService.serialize_reward(r) for r in RewardService.catalog()]
        data = {"rewards": rewards}
        named = request.GET.get("customer_id") or request.GET.get("user_id")
        if self.principal.customer_id or named:
            customer = CustomerService.get(self.target_customer(request))
            data["current_points"] = customer.total_points
        return JsonResponse(data)

    def post(self, request):
        payload = self.payload(request)
        redemption_request = RedemptionRequest.from_payload(payload)
        redemption = RewardService.redeem(
            self.target_customer(request, redemption_request.customer_id),
            redemption_request.reward_id,
            principal=self.principal,
        )
        return JsonResponse(
            {
                "success": True,
                "voucher_code": redemption.voucher_code,
                "new_balance": redemption.customer.total_points,
                "redemption": RewardService.serialize_redemption(redemption),
            },
            status=201,
        )


class RewardHistoryView(LouvaView):
    def get(self, request):
        redemptions = RewardService.history(self.target_customer(request))
        return JsonResponse({
            "redemptions": [RewardService.serialize_redemption(r) for r in redemptions],
        })


class TransactionsView(LouvaView):
    def get(self, request):
        limit = self.query_int(request, "limit", 0, maximum=100)
        transactions = TransactionService.history(self.target_customer(request), limit or None)
        return JsonResponse({
            "transactions": [TransactionService.serialize(t) for t in transactions],
        })

    def post(self, request):
        self.principal.require_staff()
        transaction_request = TransactionRequest.from_payload(self.payload(request))
        result = TransactionService.record(transaction_request, self.principal)
        return JsonResponse(result.as_dict(), status=201)


class MissionsView(LouvaView):
    def get(self, request):
        return JsonResponse({"missions": MissionService.catalog(self.target_customer(request))})

    def post(self, request):
        payload = self.payload(request)
        mission_request = MissionRequest.from_payload(payload)
        user_mission = MissionService.activate(
            self.target_customer(request, mission_request.customer_id),
            mission_request.mission_id,
        )
        return JsonResponse(
            {"success": True, "mission": MissionService.serialize_user_mission(user_mission)},
            status=201,
        )

    def put(self, request):
        payload = self.payload(request)
        mission_request = MissionRequest.from_payload(payload)
        user_mission = MissionService.complete(
            self.target_customer(request, mission_request.customer_id),
            mission_request.mission_id,
        )
        return JsonResponse(
            {"success": True, "mission": MissionService.serialize_user_mission(user_mission)}
        )


# =============================================================================
# Staff endpoints
# =============================================================================


class ScanVerifyView(LouvaView):
    staff_only = True

    def post(self, request):
        scan = ScanRequest.from_payload(self.payload(request))
        return JsonResponse(ScanService.verify(scan.qr_code).as_dict())


class ScanCustomerRewardsView(LouvaView):
    staff_only = True

    def get(self, request):
        customer_id = request.GET.get("customer_id") or request.GET.get("customerId")
        if not customer_id:
            raise LouvaError("VALIDATION_ERROR", message="Customer ID required", field="customer_id")
        return JsonResponse(ScanService.customer_rewards(customer_id))


class VoucherUseView(LouvaView):
    staff_only = True

    def post(self, request):
        voucher = VoucherUseRequest.from_payload(self.payload(request))
        redemption = RewardService.use_voucher(voucher.voucher_code, self.principal)
        return JsonResponse(
            {"success": True, "redemption": RewardService.serialize_redemption(redemption)}
        )


class AdminCustomersView(LouvaView):
    staff_only = True

    def get(self, request):
        customers = CustomerService.search(
            query=request.GET.get("search") or request.GET.get("q"),
            membership=request.GET.get("membership"),
            offset=self.query_int(request, "offset", 0),
            limit=self.query_int(request, "limit", 50, maximum=200),
        )
        return JsonResponse({
            "customers": [CustomerService.serialize(c) for c in customers],
            "stats": CustomerService.membership_stats(),
        })

    def post(self, request):
        data = CustomerCreate.from_payload(self.payload(request))
        customer = CustomerService.create(data)
        return JsonResponse(CustomerService.serialize(customer), status=201)


class AdminDashboardView(LouvaView):
    staff_only = True

    def get(self, request):
        return JsonResponse(ReportService.dashboard(request.GET.get("period") or "today"))


class AdminTopServicesView(LouvaView):
    staff_only = True

    def get(self, request):
        return JsonResponse(ReportService.top_services(request.GET.get("period") or "today"))


class AdminMembershipView(LouvaView):
    staff_only = True

    def get(self, request):
        return JsonResponse({"rules": MembershipService.rules()})

    def put(self, request):
        rules = MembershipRulePayload.list_from_payload(self.payload(request))
        return JsonResponse({"success": True, "rules": MembershipService.replace_rules(rules)})


class AdminServicesView(LouvaView):
    staff_only = True

    def get(self, request):
        include_inactive = request.GET.get("include_inactive") in ("1", "true")
        services = CatalogService.services(request.GET.get("category"), include_inactive)
        return JsonResponse({"services": [CatalogService.serialize_service(s) for s in services]})

    def post(self, request):
        service = CatalogService.create_service(ServicePayload.from_payload(self.payload(request)))
        return JsonResponse(CatalogService.serialize_service(service), status=201)

    def put(self, request):
        payload = ServicePayload.from_payload(self.payload(request), partial=True)
        service = CatalogService.update_service(payload)
        return JsonResponse(CatalogService.serialize_service(service))

    def delete(self, request):
        service_id = request.GET.get("id")
        if not service_id and request.body:
            service_id = self.payload(request).get("id")
        if not service_id:
            raise LouvaError("VALIDATION_ERROR", message="Service ID is required", field="id")
        deleted = CatalogService.delete_service(as_int(service_id, "id", minimum=1))
        return JsonResponse({"success": True, "deleted": deleted, "deactivated": not deleted})


class AdminPaymentMethodsView(LouvaView):
    staff_only = True

    def get(self, request):
        include_inactive = request.GET.get("include_inactive") in ("1", "true")
        methods = CatalogService.payment_methods(include_inactive)
        return JsonResponse({
            "payment_methods": [CatalogService.serialize_payment_method(m) for m in methods],
        })

    def post(self, request):
        method = CatalogService.create_payment_method(
            PaymentMethodPayload.from_payload(self.payload(request))
        )
        return JsonResponse(CatalogService.serialize_payment_method(method), status=201)
