"""
Decimal Math — Power, Roots, Transcendentals & Compound Growth

Every money-facing value in the engine is a Decimal. Transcendental work
(non-trivial powers, roots, exp, ln) is delegated to IEEE-754 doubles and
converted back, and this module is the ONLY place where that happens.

PRECISION CONTRACT:
    Results that go through the float path carry ~15-17 significant decimal
    digits (FLOAT_PATH_SIGNIFICANT_DIGITS). Digits beyond that are noise.
    Exact fast paths (0, 1, exponent 0/1, rate 0) never touch floats.
    Replacing _to_float/_from_float with an arbitrary-precision algorithm is
    the single change needed for tighter guarantees.

FORMULAS:
    compound_growth       = P × (1 + r)^n
    future_value_annuity  = PMT × ((1 + r)^n − 1) / r
    present_value         = FV / (1 + r)^n
    continuous_compound   = P × e^(r·t)
    effective_annual_rate = (1 + r/n)^n − 1
    cagr                  = (end / begin)^(1/years) − 1
    rule_of_72            = 72 / (r × 100)
"""

import math
from decimal import Decimal
from typing import Final

from src.core.math.decimal_helpers import ONE, ZERO, ensure_decimal

# =============================================================================
# CONSTANTS
# =============================================================================

# Significant digits guaranteed by the float path (IEEE-754 double)
FLOAT_PATH_SIGNIFICANT_DIGITS: Final[int] = 15

# Fixed iteration budget of binary_search_nth_root (guarantees termination)
BINARY_SEARCH_ITERATIONS_DEFAULT: Final[int] = 20

RULE_OF_72_NUMERATOR: Final[Decimal] = Decimal("72")

_TWO: Final[Decimal] = Decimal("2")
_HUNDRED: Final[Decimal] = Decimal("100")

Number = Decimal | int | str


# =============================================================================
# FLOAT BOUNDARY
# =============================================================================


def _to_float(value: Decimal) -> float:
    return float(value)


def _from_float(value: float) -> Decimal:
    """Shortest round-tripping Decimal for a finite double."""
    if math.isnan(value) or math.isinf(value):
        raise OverflowError(f"Result is not representable as a finite Decimal: {value}")
    return Decimal(repr(value))


def _is_integral(value: Decimal) -> bool:
    return value.is_finite() and value == value.to_integral_value()


# =============================================================================
# POWER & ROOTS
# =============================================================================


def power(base: Number, exponent: int | Number) -> Decimal:
    """
    base ** exponent.

    Fast paths: base 0 → 0, exponent 0 → 1, exponent 1 → base.
    Negative integer exponents return the reciprocal of the positive power.
    Everything else goes through the float path (see PRECISION CONTRACT).

    Args:
        base: Decimal base
        exponent: int, or Decimal for fractional powers

    Returns:
        Decimal result

    Raises:
        ZeroDivisionError: base 0 with a negative exponent
        ValueError: negative base with a fractional exponent

    Examples:
        >>> power(Decimal("2"), 3)
        Decimal('8.0')
        >>> power(Decimal("1.05"), 10).quantize(Decimal("0.0001"))
        Decimal('1.6289')
        >>> power(Decimal("2"), -2)
        Decimal('0.25')
    """
    base = ensure_decimal(base)

    if isinstance(exponent, bool):
        raise TypeError("bool is not a valid exponent")

    if not isinstance(exponent, int):
        exponent = ensure_decimal(exponent)
        if _is_integral(exponent):
            return power(base, int(exponent))
        if base == ZERO:
            if exponent < ZERO:
                raise ZeroDivisionError("0 cannot be raised to a negative power")
            return ZERO
        return _from_float(math.pow(_to_float(base), _to_float(exponent)))

    if exponent < 0:
        return ONE / power(base, -exponent)

    if base == ZERO:
        return ZERO

    if exponent == 0:
        return ONE

    if exponent == 1:
        return base

    return _from_float(math.pow(_to_float(base), exponent))


def nth_root(value: Number, n: int | Number) -> Decimal:
    """
    n-th root via the float path: value ** (1/n).

    Odd integer roots of negative values are real and supported.

    Raises:
        ValueError: n <= 0, or an even/fractional root of a negative value

    Examples:
        >>> nth_root(Decimal("8"), 3)
        Decimal('2.0')
        >>> nth_root(Decimal("100"), 2)
        Decimal('10.0')
        >>> nth_root(Decimal("-8"), 3)
        Decimal('-2.0')
    """
    value = ensure_decimal(value)
    degree = Decimal(n) if isinstance(n, int) else ensure_decimal(n)

    if degree <= ZERO:
        raise ValueError(f"Root degree must be positive, got {n}")

    if value == ZERO:
        return ZERO

    if degree == ONE:
        return value

    if value < ZERO:
        if not (_is_integral(degree) and int(degree) % 2 == 1):
            raise ValueError(f"Even or fractional root of a negative value: {value}, n={n}")
        return -nth_root(-value, degree)

    return _from_float(math.pow(_to_float(value), 1.0 / _to_float(degree)))


def binary_search_nth_root(
    target: Number,
    n: int,
    iterations: int = BINARY_SEARCH_ITERATIONS_DEFAULT,
) -> Decimal:
    """
    n-th root by bisection over a Decimal bracket.

    The bracket is [target, 1] for target < 1 and [1, target] otherwise.
    Each step halves it; the loop stops on an exact match or when the fixed
    iteration budget is exhausted, so termination never depends on precision.
    After k iterations the error is at most |high − low| / 2^k.

    Args:
        target: non-negative Decimal
        n: integer root degree (>= 1)
        iterations: bisection budget (default: 20)

    Raises:
        ValueError: negative target, n < 1 or negative budget

    Examples:
        >>> binary_search_nth_root(Decimal("8"), 3).quantize(Decimal("0.01"))
        Decimal('2.00')
    """
    target = ensure_decimal(target)

    if target < ZERO:
        raise ValueError(f"target must be non-negative, got {target}")
    if n < 1:
        raise ValueError(f"n must be >= 1, got {n}")
    if iterations < 0:
        raise ValueError(f"iterations must be non-negative, got {iterations}")

    low = target if target < ONE else ONE
    high = target if target > ONE else ONE

    for _ in range(iterations):
        mid = (low + high) / _TWO
        mid_power = power(mid, n)

        if mid_power == target:
            return mid
        if mid_power > target:
            high = mid
        else:
            low = mid

    return (low + high) / _TWO


# =============================================================================
# TRANSCENDENTALS
# =============================================================================


def exp(x: Number) -> Decimal:
    """
    e ** x (float path).

    Examples:
        >>> exp(Decimal("1")).quantize(Decimal("0.001"))
        Decimal('2.718')
    """
    return _from_float(math.exp(_to_float(ensure_decimal(x))))


def ln(x: Number) -> Decimal:
    """
    Natural logarithm (float path).

    Raises:
        ValueError: x <= 0
    """
    x = ensure_decimal(x)
    if x <= ZERO:
        raise ValueError(f"ln is undefined for non-positive values, got {x}")
    return _from_float(math.log(_to_float(x)))


# =============================================================================
# COMPOUND GROWTH
# =============================================================================


def compound_growth(principal: Number, rate: Number, periods: int | Number) -> Decimal:
    """
    principal × (1 + rate)^periods. A zero rate returns principal untouched.

    Examples:
        >>> compound_growth(Decimal("1000"), Decimal("0.05"), 10).quantize(Decimal("0.01"))
        Decimal('1628.89')
    """
    principal = ensure_decimal(principal)
    rate = ensure_decimal(rate)

    if rate == ZERO:
        return principal

    return principal * power(ONE + rate, periods)


def future_value_annuity(payment: Number, rate: Number, periods: int) -> Decimal:
    """
    Future value of ``periods`` equal end-of-period payments.

    A zero rate degenerates to payment × periods.

    Examples:
        >>> future_value_annuity(Decimal("100"), Decimal("0.05"), 12).quantize(Decimal("0.01"))
        Decimal('1591.71')
    """
    payment = ensure_decimal(payment)
    rate = ensure_decimal(rate)

    if rate == ZERO:
        return payment * Decimal(periods)

    growth = power(ONE + rate, periods) - ONE
    return payment * (growth / rate)


def present_value(future_value: Number, rate: Number, periods: int | Number) -> Decimal:
    """
    future_value discounted over ``periods``. A zero rate returns future_value.

    Examples:
        >>> present_value(Decimal("1000"), Decimal("0.05"), 10).quantize(Decimal("0.01"))
        Decimal('613.91')
    """
    future_value = ensure_decimal(future_value)
    rate = ensure_decimal(rate)

    if rate == ZERO:
        return future_value

    return future_value / power(ONE + rate, periods)


def continuous_compound(principal: Number, rate: Number, time: Number) -> Decimal:
    """
    principal × e^(rate × time).

    Examples:
        >>> continuous_compound(Decimal("1000"), Decimal("0.05"), 10).quantize(Decimal("0.01"))
        Decimal('1648.72')
    """
    principal = ensure_decimal(principal)
    exponent = ensure_decimal(rate) * ensure_decimal(time)
    return principal * exp(exponent)


def effective_annual_rate(nominal_rate: Number, periods: int) -> Decimal:
    """
    Effective annual rate for a nominal rate compounded ``periods`` times a year.

    Zero periods or a zero nominal rate → 0.

    Examples:
        >>> effective_annual_rate(Decimal("0.12"), 12).quantize(Decimal("0.0001"))
        Decimal('0.1268')
    """
    nominal_rate = ensure_decimal(nominal_rate)

    if periods == 0 or nominal_rate == ZERO:
        return ZERO

    period_rate = nominal_rate / Decimal(periods)
    return power(ONE + period_rate, periods) - ONE


def cagr(beginning_value: Number, ending_value: Number, years: int | Number) -> Decimal:
    """
    Compound Annual Growth Rate.

    Returns 0 instead of dividing by zero when beginning_value <= 0 or
    years <= 0.

    Examples:
        >>> cagr(Decimal("1000"), Decimal("2000"), 10).quantize(Decimal("0.0001"))
        Decimal('0.0718')
        >>> cagr(Decimal("0"), Decimal("2000"), 10)
        Decimal('0')
    """
    beginning_value = ensure_decimal(beginning_value)
    ending_value = ensure_decimal(ending_value)
    years_dec = Decimal(years) if isinstance(years, int) else ensure_decimal(years)

    if beginning_value <= ZERO or years_dec <= ZERO:
        return ZERO

    ratio = ending_value / beginning_value
    return nth_root(ratio, years_dec) - ONE


def rule_of_72(annual_rate: Number) -> Decimal:
    """
    Approximate years to double at ``annual_rate``.

    A non-positive rate never doubles: Decimal('Infinity').

    Examples:
        >>> rule_of_72(Decimal("0.06"))
        Decimal('12')
    """
    annual_rate = ensure_decimal(annual_rate)

    if annual_rate <= ZERO:
        return Decimal("Infinity")

    return RULE_OF_72_NUMERATOR / (annual_rate * _HUNDRED)
