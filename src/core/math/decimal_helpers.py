"""
Decimal Helpers — Safe Decimal Primitives

Ergonomic, exact helpers shared by every calculator:
- Coercion of loose inputs (int/str/float/None) into Decimal
- Safe division with a zero-divisor guard
- Percentage and period conversions
- Sign checks, aggregation, rounding and clamping

CRITICAL INVARIANTS:
1. Division by zero never happens (0 is returned instead)
2. Floats never survive past ensure_decimal (converted via shortest repr)
3. All operations are deterministic and reproducible
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Final, Iterable

# =============================================================================
# CONSTANTS
# =============================================================================

ZERO: Final[Decimal] = Decimal("0")
ONE: Final[Decimal] = Decimal("1")
HUNDRED: Final[Decimal] = Decimal("100")
TWELVE: Final[Decimal] = Decimal("12")


# =============================================================================
# COERCION
# =============================================================================


def ensure_decimal(value: Decimal | int | str | float | None) -> Decimal:
    """
    Coerce a loose numeric value into Decimal.

    Args:
        value: Decimal, int, numeric string, float or None

    Returns:
        Decimal value (None → 0)

    Raises:
        TypeError: for bool or any other non-numeric type
        decimal.InvalidOperation: for a non-numeric string

    Examples:
        >>> ensure_decimal(42)
        Decimal('42')
        >>> ensure_decimal("100.50")
        Decimal('100.50')
        >>> ensure_decimal(0.1)
        Decimal('0.1')
        >>> ensure_decimal(None)
        Decimal('0')
    """
    if isinstance(value, Decimal):
        return value
    if value is None:
        return ZERO
    if isinstance(value, bool):
        raise TypeError("bool is not a monetary value")
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        # repr() gives the shortest round-tripping literal: 0.1 → Decimal('0.1')
        return Decimal(repr(value))
    if isinstance(value, str):
        return Decimal(value.strip())
    raise TypeError(f"Cannot convert {type(value).__name__} to Decimal")


# =============================================================================
# SIGN CHECKS
# =============================================================================


def is_positive(value: Decimal | int | str | None) -> bool:
    """value > 0"""
    return ensure_decimal(value) > ZERO


def is_negative(value: Decimal | int | str | None) -> bool:
    """value < 0"""
    return ensure_decimal(value) < ZERO


def is_zero(value: Decimal | int | str | None) -> bool:
    """value == 0 (any exponent: 0, 0.00, -0)"""
    return ensure_decimal(value) == ZERO


# =============================================================================
# SAFE DIVISION
# =============================================================================


def safe_divide(dividend: Decimal | int | str, divisor: Decimal | int | str) -> Decimal:
    """
    Division that returns 0 when the divisor is zero.

    Examples:
        >>> safe_divide(Decimal("10"), Decimal("2"))
        Decimal('5')
        >>> safe_divide(Decimal("10"), Decimal("0"))
        Decimal('0')
    """
    dividend = ensure_decimal(dividend)
    divisor = ensure_decimal(divisor)

    if divisor == ZERO:
        return ZERO

    return dividend / divisor


# =============================================================================
# CONVERSIONS
# =============================================================================


def to_percentage(value: Decimal | int | str) -> Decimal:
    """0.075 → 7.5"""
    return ensure_decimal(value) * HUNDRED


def from_percentage(value: Decimal | int | str) -> Decimal:
    """7.5 → 0.075"""
    return ensure_decimal(value) / HUNDRED


def monthly_to_annual(value: Decimal | int | str) -> Decimal:
    return ensure_decimal(value) * TWELVE


def annual_to_monthly(value: Decimal | int | str) -> Decimal:
    return ensure_decimal(value) / TWELVE


def percentage_change(start: Decimal | int | str, end: Decimal | int | str) -> Decimal:
    """
    Percentage change from ``start`` to ``end``.

    Returns 0 when ``start`` is zero.

    Examples:
        >>> percentage_change(Decimal("100"), Decimal("110"))
        Decimal('10.0')
        >>> percentage_change(Decimal("100"), Decimal("90"))
        Decimal('-10.0')
    """
    start = ensure_decimal(start)
    end = ensure_decimal(end)

    if start == ZERO:
        return ZERO

    return to_percentage((end - start) / start)


# =============================================================================
# AGGREGATION
# =============================================================================


def decimal_sum(values: Iterable[Decimal | int | str | None]) -> Decimal:
    """Sum of values; empty input → 0."""
    total = ZERO
    for value in values:
        total += ensure_decimal(value)
    return total


def average(values: Iterable[Decimal | int | str | None]) -> Decimal:
    """Arithmetic mean; empty input → 0."""
    items = [ensure_decimal(v) for v in values]
    if not items:
        return ZERO
    return decimal_sum(items) / Decimal(len(items))


# =============================================================================
# ROUNDING & BOUNDS
# =============================================================================


def round_to(value: Decimal | int | str, places: int = 2) -> Decimal:
    """
    Round half away from zero to ``places`` decimal places.

    Examples:
        >>> round_to(Decimal("10.12345"), 2)
        Decimal('10.12')
        >>> round_to(Decimal("2.345"), 2)
        Decimal('2.35')
    """
    exponent = Decimal(1).scaleb(-places)
    return ensure_decimal(value).quantize(exponent, rounding=ROUND_HALF_UP)


def decimal_max(a: Decimal | int | str, b: Decimal | int | str) -> Decimal:
    a = ensure_decimal(a)
    b = ensure_decimal(b)
    return a if a > b else b


def decimal_min(a: Decimal | int | str, b: Decimal | int | str) -> Decimal:
    a = ensure_decimal(a)
    b = ensure_decimal(b)
    return a if a < b else b


def clamp(
    value: Decimal | int | str,
    min_value: Decimal | int | str | None = None,
    max_value: Decimal | int | str | None = None,
) -> Decimal:
    """
    Limit a value to the range [min_value, max_value].

    Examples:
        >>> clamp(Decimal("150"), 0, 100)
        Decimal('100')
        >>> clamp(Decimal("-3"), 0, 100)
        Decimal('0')
    """
    result = ensure_decimal(value)

    if min_value is not None:
        result = decimal_max(result, min_value)

    if max_value is not None:
        result = decimal_min(result, max_value)

    return result
