"""
Values -- Decimal coercion for quantities and amounts.

Responsibility:
    Normalize caller-supplied numbers (int, str, float, Decimal) into
    ``Decimal`` so every comparison in engines and services is a true
    numeric comparison.

Invariants enforced:
    - Quantities and amounts are always ``Decimal``, never float.
    - Floats are routed through ``str()`` so ``0.1`` becomes ``Decimal("0.1")``.

Failure modes:
    - ``to_amount`` raises ValueError for non-numeric input.
    - ``to_quantity`` and ``coerce_amount`` never raise: non-numeric input
      becomes zero.
"""

from __future__ import annotations

from decimal import ROUND_DOWN, Decimal, InvalidOperation
from typing import Any

from sales_kernel.logging_config import get_logger

logger = get_logger("values")

ZERO = Decimal("0")
ONE = Decimal("1")


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, bool):
        raise InvalidOperation(f"boolean is not a number: {value}")
    elif isinstance(value, (int, float, str)):
        result = Decimal(str(value).strip())
    else:
        raise InvalidOperation(f"unsupported type: {type(value).__name__}")
    if not result.is_finite():
        raise InvalidOperation(f"non-finite value: {value}")
    return result


def to_quantity(value: Any) -> Decimal:
    """
    Coerce a requested quantity to Decimal.

    Non-numeric values (None, empty strings, garbage) become zero so the
    caller's clamping logic excludes them instead of failing.
    """
    try:
        return _to_decimal(value)
    except (InvalidOperation, ValueError):
        logger.debug(
            "quantity_not_numeric",
            extra={"raw_value": repr(value)},
        )
        return ZERO


def to_amount(value: Any) -> Decimal:
    """Coerce a monetary amount to Decimal, rejecting non-numeric input."""
    try:
        return _to_decimal(value)
    except (InvalidOperation, ValueError) as e:
        raise ValueError(f"Invalid amount value: {value!r}") from e


def coerce_amount(value: Any) -> Decimal:
    """
    Lenient amount coercion for request fields.

    Like ``to_quantity``, non-numeric input becomes zero instead of failing.
    """
    try:
        return _to_decimal(value)
    except (InvalidOperation, ValueError):
        logger.debug(
            "amount_not_numeric",
            extra={"raw_value": repr(value)},
        )
        return ZERO


def truncate_quantity(value: Decimal) -> Decimal:
    """Drop the fractional part (toward zero), as an integer cast would."""
    return value.to_integral_value(rounding=ROUND_DOWN)


def non_negative(value: Decimal) -> Decimal:
    """Floor negative quantities to zero."""
    return value if value > ZERO else ZERO
