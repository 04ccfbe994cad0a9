"""Tests for quantity and amount coercion (sales_kernel/values.py)."""

from decimal import Decimal

import pytest

from sales_kernel.values import (
    coerce_amount,
    non_negative,
    to_amount,
    to_quantity,
    truncate_quantity,
)


class TestToQuantity:

    @pytest.mark.parametrize(
        "raw, expected",
        [
            (3, Decimal("3")),
            ("2.50", Decimal("2.50")),
            (0.1, Decimal("0.1")),
            (Decimal("7"), Decimal("7")),
            (" 4 ", Decimal("4")),
        ],
    )
    def test_numeric_inputs(self, raw, expected):
        assert to_quantity(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "abc", True, float("nan"), "Infinity", [1]])
    def test_non_numeric_becomes_zero(self, raw):
        assert to_quantity(raw) == Decimal("0")


class TestToAmount:

    def test_numeric(self):
        assert to_amount("12.30") == Decimal("12.30")

    def test_non_numeric_rejected(self):
        with pytest.raises(ValueError):
            to_amount("twelve")


class TestCoerceAmount:

    def test_numeric(self):
        assert coerce_amount("4.10") == Decimal("4.10")
        assert coerce_amount(3) == Decimal("3")

    @pytest.mark.parametrize("raw", ["n/a", "", True, float("inf")])
    def test_non_numeric_becomes_zero(self, raw):
        assert coerce_amount(raw) == Decimal("0")


class TestClamping:

    def test_truncate_toward_zero(self):
        assert truncate_quantity(Decimal("2.9")) == Decimal("2")
        assert truncate_quantity(Decimal("-2.9")) == Decimal("-2")

    def test_non_negative(self):
        assert non_negative(Decimal("-1")) == Decimal("0")
        assert non_negative(Decimal("1.5")) == Decimal("1.5")
