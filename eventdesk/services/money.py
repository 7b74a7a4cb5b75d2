"""Decimal helpers for monetary aggregates."""
from decimal import Decimal
from typing import Any

ZERO = Decimal("0")


def to_decimal(value: Any) -> Decimal:
    """Coerce a DB aggregate to Decimal, treating NULL as zero."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def percentage(numerator: Decimal, denominator: Decimal) -> Decimal:
    """numerator / denominator * 100, or 0 when the denominator is zero."""
    if not denominator:
        return ZERO
    return numerator / denominator * 100
