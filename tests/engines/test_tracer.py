"""Tests for SALES_ENGINE_TRACE emission (sales_engines/tracer.py)."""

from decimal import Decimal

from sales_engines.refund_limits import RefundedLine, aggregate_refunded_quantities
from sales_engines.shipping import ShippingTaxMode
from sales_engines.tracer import compute_input_fingerprint, traced_engine


@traced_engine("double", "2.1", fingerprint_fields=("qty", "mode"))
def _double(qty, mode=ShippingTaxMode.EXCLUDING_TAX):
    return qty * 2


class TestFingerprint:

    def test_deterministic(self):
        args = {"lines": (RefundedLine(order_item_id=1, qty=Decimal("2")),)}
        assert compute_input_fingerprint(("lines",), args) == compute_input_fingerprint(
            ("lines",), dict(args)
        )

    def test_equal_quantities_share_fingerprint(self):
        assert compute_input_fingerprint(("q",), {"q": Decimal("2.50")}) == (
            compute_input_fingerprint(("q",), {"q": Decimal("2.5")})
        )

    def test_mapping_key_order_ignored(self):
        first = compute_input_fingerprint(("m",), {"m": {"a": 1, "b": 2}})
        second = compute_input_fingerprint(("m",), {"m": {"b": 2, "a": 1}})
        assert first == second

    def test_different_inputs_differ(self):
        assert compute_input_fingerprint(("q",), {"q": 1}) != compute_input_fingerprint(
            ("q",), {"q": 2}
        )

    def test_missing_field_hashed_as_null(self):
        assert compute_input_fingerprint(("q",), {}) == compute_input_fingerprint(
            ("q",), {"q": None}
        )


class TestTracedEngine:

    def test_result_passed_through(self):
        assert _double(Decimal("3")) == Decimal("6")

    def test_positional_and_keyword_calls_match(self, captured_logs):
        _double(Decimal("3"))
        _double(qty=Decimal("3"), mode=ShippingTaxMode.EXCLUDING_TAX)

        traces = [r for r in captured_logs() if r["message"] == "SALES_ENGINE_TRACE"]
        assert len(traces) == 2
        assert traces[0]["input_fingerprint"] == traces[1]["input_fingerprint"]

    def test_trace_fields(self, captured_logs):
        _double(Decimal("1"))

        trace = [r for r in captured_logs() if r["message"] == "SALES_ENGINE_TRACE"][0]
        assert trace["engine_name"] == "double"
        assert trace["engine_version"] == "2.1"
        assert trace["function"] == "_double"
        assert trace["duration_ms"] >= 0
        assert trace["logger"] == "sales_kernel.engines.tracer"

    def test_engine_metadata_exposed(self):
        assert aggregate_refunded_quantities.engine_name == "refund_limits"
        assert _double.engine_version == "2.1"
