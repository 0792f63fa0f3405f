"""Tests for QR token formats."""

import json
from datetime import datetime, timedelta, timezone as dt_timezone

from louva import qr

T = datetime(2026, 3, 1, 9, 30, 15, 123456, tzinfo=dt_timezone.utc)
CUSTOMER_ID = "8d3f2c1e-5b4a-4e8f-9a7b-1c2d3e4f5a6b"


class TestPayload:
    def test_bit_exact_format(self):
        assert qr.build_payload(CUSTOMER_ID, T) == (
            '{"type":"loyalty","customerId":"8d3f2c1e-5b4a-4e8f-9a7b-1c2d3e4f5a6b",'
            '"timestamp":"2026-03-01T09:30:15.123Z"}'
        )

    def test_parse_roundtrip(self):
        token = qr.parse_payload(qr.build_payload(CUSTOMER_ID, T))
        assert token.customer_id == CUSTOMER_ID
        assert token.issued_at == T.replace(microsecond=123000)
        assert token.format == qr.TokenFormat.JSON

    def test_parse_offset_timestamp(self):
        raw = json.dumps({
            "type": "loyalty",
            "customerId": CUSTOMER_ID,
            "timestamp": "2026-03-01T16:30:15+07:00",
        })
        token = qr.parse_payload(raw)
        assert token.issued_at == datetime(2026, 3, 1, 9, 30, 15, tzinfo=dt_timezone.utc)

    def test_wrong_type_ignored(self):
        raw = json.dumps({"type": "coupon", "customerId": CUSTOMER_ID, "timestamp": "2026-03-01T09:30:15Z"})
        assert qr.parse_payload(raw) is None

    def test_non_json_ignored(self):
        assert qr.parse_payload("LOUVA_abc_123") is None
        assert qr.parse_payload("[1, 2]") is None

    def test_bad_timestamp_ignored(self):
        raw = json.dumps({"type": "loyalty", "customerId": CUSTOMER_ID, "timestamp": "yesterday"})
        assert qr.parse_payload(raw) is None

    def test_missing_customer_ignored(self):
        raw = json.dumps({"type": "loyalty", "timestamp": "2026-03-01T09:30:15Z"})
        assert qr.parse_payload(raw) is None


class TestLegacyToken:
    def test_build(self):
        assert qr.build_legacy_token("abc", T) == "LOUVA_abc_1772357415123"

    def test_parse(self):
        token = qr.parse_legacy_token("LOUVA_abc_1772357415123")
        assert token.customer_id == "abc"
        assert token.issued_at == T.replace(microsecond=123000)
        assert token.format == qr.TokenFormat.LEGACY

    def test_id_may_contain_underscores(self):
        token = qr.parse_legacy_token("LOUVA_a_b_c_1000")
        assert token.customer_id == "a_b_c"

    def test_non_matching(self):
        assert qr.parse_legacy_token("LOUVA-ABC123") is None
        assert qr.parse_legacy_token("LOUVA_abc_notanumber") is None


class TestFreshness:
    def test_boundary_inclusive(self):
        assert qr.is_fresh(T, T + timedelta(milliseconds=300_000)) is True

    def test_one_millisecond_past_boundary(self):
        assert qr.is_fresh(T, T + timedelta(milliseconds=300_001)) is False

    def test_299_and_301_seconds(self):
        assert qr.is_fresh(T, T + timedelta(seconds=299)) is True
        assert qr.is_fresh(T, T + timedelta(seconds=301)) is False

    def test_custom_window(self):
        assert qr.is_fresh(T, T + timedelta(seconds=90), validity_seconds=60) is False

    def test_future_within_skew(self):
        assert qr.is_from_future(T + timedelta(seconds=60), T) is False

    def test_future_beyond_skew(self):
        assert qr.is_from_future(T + timedelta(seconds=61), T) is True
        assert qr.is_from_future(T + timedelta(days=365), T, skew_seconds=0) is True
