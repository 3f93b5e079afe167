"""
Unit tests for billing.money.

Bill totals must never drift by a cent: every figure is a quantized Decimal.
"""
from decimal import Decimal
from types import SimpleNamespace

import pytest

from billing.money import (
    amounts_match,
    compute_bill,
    format_amount,
    quantize,
    subtotal_of,
    to_decimal,
)
from core_backend.exceptions import ValidationFailure


def line(price, quantity):
    return SimpleNamespace(price=Decimal(price), quantity=quantity)


class TestToDecimal:

    def test_float_goes_through_str(self):
        assert to_decimal(0.1) == Decimal("0.1")

    def test_decimal_is_returned_untouched(self):
        value = Decimal("1.005")
        assert to_decimal(value) is value

    @pytest.mark.parametrize("value", ["abc", None, ""])
    def test_garbage_is_rejected(self, value):
        with pytest.raises(ValidationFailure):
            to_decimal(value)


class TestQuantize:

    def test_rounds_half_to_even(self):
        assert quantize("10.125") == Decimal("10.12")
        assert quantize("10.135") == Decimal("10.14")

    def test_format_amount(self):
        assert format_amount(497) == "497.00"
        assert format_amount("24.845") == "24.84"


class TestComputeBill:

    def test_subtotal_is_sum_of_lines(self):
        assert subtotal_of([line("199.00", 2), line("99.00", 1)]) == Decimal("497.00")

    def test_tax_and_total(self):
        totals = compute_bill([line("199.00", 2), line("99.00", 1)])

        assert totals.subtotal == Decimal("497.00")
        assert totals.tax == Decimal("24.85")
        assert totals.discount == Decimal("0.00")
        assert totals.total == Decimal("521.85")

    def test_discount_is_subtracted(self):
        totals = compute_bill([line("200.00", 1)], discount="15")

        assert totals.total == Decimal("195.00")

    def test_empty_order_bills_zero(self):
        totals = compute_bill([])

        assert totals.subtotal == Decimal("0.00")
        assert totals.total == Decimal("0.00")


class TestAmountsMatch:

    def test_within_tolerance(self):
        assert amounts_match("210.00", "210.01")

    def test_outside_tolerance(self):
        assert not amounts_match("210.00", "210.02")
