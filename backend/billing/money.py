"""
Monetary helpers for bills and invoices.

All amounts are Decimals quantized to two places with banker's rounding
(ROUND_HALF_EVEN). Floats are converted through str() before use.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_EVEN
from typing import Iterable, Union

from core_backend.exceptions import ValidationFailure

TWO_PLACES = Decimal("0.01")

# Fixed tax rate applied to every bill.
TAX_RATE = Decimal("0.05")

# Allowed absolute difference between split payments and the bill total.
SPLIT_TOLERANCE = Decimal("0.01")

Amount = Union[Decimal, str, int, float]


def to_decimal(value: Amount) -> Decimal:
    """
    Convert any numeric input into a Decimal.

    Raises:
        ValidationFailure: If the value is not a number.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        value = str(value)
    try:
        return Decimal(str(value).strip())
    except (InvalidOperation, AttributeError, TypeError):
        raise ValidationFailure(f"'{value}' is not a valid amount.")


def quantize(amount: Amount) -> Decimal:
    """
    Round to two decimal places using banker's rounding.

    Examples:
        >>> quantize("10.127")
        Decimal('10.13')
        >>> quantize("10.125")
        Decimal('10.12')
    """
    return to_decimal(amount).quantize(TWO_PLACES, rounding=ROUND_HALF_EVEN)


def format_amount(amount: Amount) -> str:
    """Render an amount as a fixed two-decimal string, e.g. '497.00'."""
    return f"{quantize(amount):.2f}"


def line_total(price: Amount, quantity: int) -> Decimal:
    return to_decimal(price) * quantity


def subtotal_of(lines: Iterable) -> Decimal:
    """Sum of price x quantity over objects exposing `price` and `quantity`."""
    return quantize(sum((line_total(line.price, line.quantity) for line in lines), Decimal("0")))


@dataclass(frozen=True)
class BillTotals:
    subtotal: Decimal
    tax: Decimal
    discount: Decimal
    total: Decimal


def compute_bill(lines: Iterable, discount: Amount = Decimal("0")) -> BillTotals:
    """
    Compute the bill for a set of order lines.

    subtotal = sum(price x quantity), tax = subtotal x TAX_RATE,
    total = subtotal + tax - discount. Every figure is quantized.
    """
    subtotal = subtotal_of(lines)
    tax = quantize(subtotal * TAX_RATE)
    discount = quantize(discount)
    total = quantize(subtotal + tax - discount)
    return BillTotals(subtotal=subtotal, tax=tax, discount=discount, total=total)


def amounts_match(left: Amount, right: Amount, tolerance: Decimal = SPLIT_TOLERANCE) -> bool:
    """True when two amounts differ by no more than `tolerance`."""
    return abs(to_decimal(left) - to_decimal(right)) <= tolerance
