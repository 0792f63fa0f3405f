"""Tests for request payload parsing."""

import pytest

from louva.exceptions import LouvaError
from louva.schemas import (
    MissionRequest,
    ProfileUpdate,
    RedemptionRequest,
    ScanRequest,
    ServicePayload,
    TransactionRequest,
    VoucherUseRequest,
)

CUSTOMER_ID = "3f2b8a1e-6c4d-4e5f-9a7b-1c2d3e4f5a6b"


class TestTransactionRequest:
    def test_parses_aliases(self):
        request = TransactionRequest.from_payload({
            "user_id": CUSTOMER_ID,
            "service_ids": [1, "2"],
            "service_prices": [None, 175000],
            "payment_method_id": 3,
            "mission_id": 7,
            "active_missions": [{"mission_id": 7}, {"mission_id": 8}],
        })

        assert request.customer_id == CUSTOMER_ID
        assert request.service_ids == (1, 2)
        assert request.price_override(0) is None
        assert request.price_override(1) == 175000
        assert request.mission_ids == (7, 8)

    @pytest.mark.parametrize("payload,field", [
        ({"service_ids": [1], "payment_method_id": 1}, "customer_id"),
        ({"customer_id": "nope", "service_ids": [1], "payment_method_id": 1}, "customer_id"),
        ({"customer_id": CUSTOMER_ID, "service_ids": [], "payment_method_id": 1}, "service_ids"),
        ({"customer_id": CUSTOMER_ID, "service_ids": [1], "payment_method_id": True}, "payment_method_id"),
        ({"customer_id": CUSTOMER_ID, "service_ids": [1], "payment_method_id": 1,
          "service_prices": [-5]}, "service_prices"),
        ({"customer_id": CUSTOMER_ID, "service_ids": [1], "payment_method_id": 1,
          "service_prices": [1, 2]}, "service_prices"),
    ])
    def test_rejects(self, payload, field):
        with pytest.raises(LouvaError) as exc:
            TransactionRequest.from_payload(payload)

        assert exc.value.code == "VALIDATION_ERROR"
        assert exc.value.data == {"field": field}


def test_profile_update_needs_a_field():
    with pytest.raises(LouvaError) as exc:
        ProfileUpdate.from_payload({"total_points": 10})
    assert exc.value.message == "Nothing to update"


def test_voucher_code_normalized():
    assert VoucherUseRequest.from_payload({"code": " louva-abc123 "}).voucher_code == "LOUVA-ABC123"


def test_scan_request_requires_code():
    with pytest.raises(LouvaError) as exc:
        ScanRequest.from_payload({"qr_code": 42})
    assert exc.value.code == "QR_INVALID"


def test_service_multiplier_minimum():
    with pytest.raises(LouvaError) as exc:
        ServicePayload.from_payload(
            {"name": "Trim", "category": "Hair", "min_price": 30000, "point_multiplier": "0.5"}
        )
    assert exc.value.data == {"field": "point_multiplier"}


@pytest.mark.parametrize("schema,extra", [
    (RedemptionRequest, {"reward_id": 3}),
    (MissionRequest, {"mission_id": 3}),
])
def test_user_id_alias(schema, extra):
    assert schema.from_payload({"user_id": CUSTOMER_ID, **extra}).customer_id == CUSTOMER_ID
    assert schema.from_payload(extra).customer_id is None
