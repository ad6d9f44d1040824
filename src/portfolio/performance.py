"""
Performance Returns — Time-weighted, money-weighted and rolling returns

Three views of how a portfolio performed over time. All percentages are
returned in percent (10 = 10%).

TIME-WEIGHTED RETURN (TWR):
    Valuation points (date, value, cash_flow) sorted by date split the
    history into sub-periods. A cash flow recorded on a point is already
    included in that point's value and is removed before measuring growth:

        r_i = (V_i − CF_i) / V_{i−1} − 1
        TWR = (Π (1 + r_i) − 1) × 100

    Deposit/withdrawal timing has no effect, so TWR rates the investments
    rather than the investor.

MONEY-WEIGHTED RETURN (MWR):
    Annualized internal rate of return of dated cash flows, investor view:
    contributions negative, withdrawals and the final value positive.

        Σ CF_i / (1 + irr)^(t_i) = 0,   t_i = days since first flow / 365
        MWR = irr × 100, rounded to 4 places

    Solved by bisection over [IRR_LOWER_BOUND, IRR_UPPER_BOUND].

ROLLING RETURNS:
    Every window of ``period_months`` consecutive monthly returns is
    compounded and annualized:

        growth     = Π (1 + r_m / 100)
        annualized = (growth^(12 / period_months) − 1) × 100, rounded to 4 places

Results are plain Decimals, which is what ResultCache stores under the
``twr`` and ``mwr`` calculation names.
"""

import logging
from datetime import date as Date
from decimal import Decimal
from typing import Any, Final, Iterable, Mapping, Sequence

from pydantic import BaseModel, Field, ValidationError

from src.core.math.decimal_helpers import (
    HUNDRED,
    ONE,
    TWELVE,
    ZERO,
    average,
    decimal_sum,
    round_to,
)
from src.core.math.decimal_math import nth_root, power
from src.core.result import Err, Ok, PerformanceError, Result

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

DAYS_PER_YEAR: Final[Decimal] = Decimal("365")

# IRR search bracket (annual rates, as fractions)
IRR_LOWER_BOUND: Final[Decimal] = Decimal("-0.9999")
IRR_UPPER_BOUND: Final[Decimal] = Decimal("100")
IRR_TOLERANCE: Final[Decimal] = Decimal("1E-10")
IRR_MAX_ITERATIONS: Final[int] = 200

RETURN_PLACES: Final[int] = 4

_TWO: Final[Decimal] = Decimal("2")


# =============================================================================
# MODELS
# =============================================================================


class ValuationPoint(BaseModel):
    """Portfolio market value on a date, after that day's external flow."""

    date: Date
    value: Decimal = Field(..., ge=0, description="Market value including cash_flow")
    cash_flow: Decimal = Field(
        default=ZERO,
        description="External flow on this date: deposit positive, withdrawal negative",
    )

    model_config = {"frozen": True}


class CashFlow(BaseModel):
    """Dated investor cash flow: contribution negative, withdrawal/final value positive."""

    date: Date
    amount: Decimal

    model_config = {"frozen": True}


class MonthlyReturn(BaseModel):
    """One month's return in percent; accepts ``return`` as the field name too."""

    date: Date
    return_pct: Decimal = Field(..., ge=-100, alias="return")

    model_config = {"frozen": True, "populate_by_name": True}


class RollingReturn(BaseModel):
    period_start: Date
    period_end: Date
    annualized_return: Decimal

    model_config = {"frozen": True}


class RollingReturnAnalysis(BaseModel):
    """Spread of a rolling-return series."""

    best_period: RollingReturn
    worst_period: RollingReturn
    average_return: Decimal
    volatility: Decimal = Field(..., ge=0, description="Sample standard deviation of annualized returns")
    period_count: int = Field(..., ge=1)

    model_config = {"frozen": True}


def _parse_rows(model: type[BaseModel], rows: Any) -> list | None:
    if isinstance(rows, (str, bytes, Mapping)) or not isinstance(rows, Iterable):
        return None
    parsed = []
    try:
        for row in rows:
            parsed.append(row if isinstance(row, model) else model.model_validate(row))
    except ValidationError as exc:
        logger.debug("Rejected %s rows: %d errors", model.__name__, exc.error_count())
        return None
    return parsed


# =============================================================================
# TIME-WEIGHTED RETURN
# =============================================================================


def _sub_period_growth(points: Sequence[ValuationPoint]) -> list[Decimal] | None:
    """(V_i − CF_i) / V_{i−1} for each consecutive pair; None on a zero start."""
    factors = []
    for previous, current in zip(points, points[1:]):
        if previous.value == ZERO:
            return None
        factors.append((current.value - current.cash_flow) / previous.value)
    return factors


def calculate_time_weighted_return(
    valuations: Iterable[ValuationPoint | Mapping[str, Any]],
) -> Result[Decimal, PerformanceError]:
    """
    Time-weighted return in percent over the valuation history.

    Errors:
        insufficient_data: fewer than two valuation points
        invalid_valuation_data: malformed point
        zero_start_value: a sub-period starts at value 0

    Examples:
        >>> calculate_time_weighted_return([
        ...     {"date": "2024-01-01", "value": "1000"},
        ...     {"date": "2024-06-30", "value": "1600", "cash_flow": "500"},
        ...     {"date": "2024-12-31", "value": "1920"},
        ... ]).value
        Decimal('32.00')
    """
    points = _parse_rows(ValuationPoint, valuations)
    if points is None:
        logger.warning("TWR failed: %s", PerformanceError.INVALID_VALUATION_DATA.value)
        return Err(PerformanceError.INVALID_VALUATION_DATA)

    logger.debug("Calculating TWR for %d valuation points", len(points))

    if len(points) < 2:
        logger.warning("TWR failed: %s", PerformanceError.INSUFFICIENT_DATA.value)
        return Err(PerformanceError.INSUFFICIENT_DATA)

    points.sort(key=lambda p: p.date)

    factors = _sub_period_growth(points)
    if factors is None:
        logger.warning("TWR failed: %s", PerformanceError.ZERO_START_VALUE.value)
        return Err(PerformanceError.ZERO_START_VALUE)

    growth = ONE
    for factor in factors:
        growth *= factor

    twr = (growth - ONE) * HUNDRED
    logger.debug("TWR over %d sub-periods: %s%%", len(factors), twr)
    return Ok(twr)


# =============================================================================
# MONEY-WEIGHTED RETURN
# =============================================================================


def _net_present_value(flows: Sequence[tuple[Decimal, Decimal]], rate: Decimal) -> Decimal:
    base = ONE + rate
    return decimal_sum(amount / power(base, years) for amount, years in flows)


def _solve_irr(flows: Sequence[tuple[Decimal, Decimal]]) -> Decimal | None:
    """Bisection root of the NPV; None when the bracket holds no sign change."""
    low, high = IRR_LOWER_BOUND, IRR_UPPER_BOUND
    npv_low = _net_present_value(flows, low)
    npv_high = _net_present_value(flows, high)

    if npv_low == ZERO:
        return low
    if npv_high == ZERO:
        return high
    if (npv_low > ZERO) == (npv_high > ZERO):
        return None

    mid = (low + high) / _TWO
    for _ in range(IRR_MAX_ITERATIONS):
        mid = (low + high) / _TWO
        npv_mid = _net_present_value(flows, mid)
        if npv_mid == ZERO or (high - low) / _TWO < IRR_TOLERANCE:
            break
        if (npv_mid > ZERO) == (npv_low > ZERO):
            low, npv_low = mid, npv_mid
        else:
            high = mid
    return mid


def calculate_money_weighted_return(
    cash_flows: Iterable[CashFlow | Mapping[str, Any]],
) -> Result[Decimal, PerformanceError]:
    """
    Annualized money-weighted return (IRR) in percent.

    Errors:
        empty_cash_flow_list: no flows
        invalid_cash_flow_structure: malformed flow
        zero_initial_investment: no contribution (negative flow)
        negative_irr: nothing ever came back (no positive flow)
        irr_not_found: no rate in the search bracket zeroes the NPV

    Examples:
        >>> calculate_money_weighted_return([
        ...     {"date": "2023-01-01", "amount": "-1000"},
        ...     {"date": "2024-01-01", "amount": "1100"},
        ... ]).value
        Decimal('10.0000')
    """
    flows = _parse_rows(CashFlow, cash_flows)
    if flows is None:
        logger.warning("MWR failed: %s", PerformanceError.INVALID_CASH_FLOW_STRUCTURE.value)
        return Err(PerformanceError.INVALID_CASH_FLOW_STRUCTURE)

    logger.debug("Calculating MWR for %d cash flows", len(flows))

    error: PerformanceError | None = None
    if not flows:
        error = PerformanceError.EMPTY_CASH_FLOW_LIST
    elif not any(f.amount < ZERO for f in flows):
        error = PerformanceError.ZERO_INITIAL_INVESTMENT
    elif not any(f.amount > ZERO for f in flows):
        error = PerformanceError.NEGATIVE_IRR

    if error is not None:
        logger.warning("MWR failed: %s", error.value)
        return Err(error)

    first_date = min(f.date for f in flows)
    timed = [(f.amount, Decimal((f.date - first_date).days) / DAYS_PER_YEAR) for f in flows]

    try:
        irr = _solve_irr(timed)
    except ArithmeticError as exc:
        # Discount factors beyond float range at the bracket edges
        logger.warning("MWR failed: %s (%s)", PerformanceError.IRR_NOT_FOUND.value, exc)
        return Err(PerformanceError.IRR_NOT_FOUND)

    if irr is None:
        logger.warning("MWR failed: %s", PerformanceError.IRR_NOT_FOUND.value)
        return Err(PerformanceError.IRR_NOT_FOUND)

    mwr = round_to(irr * HUNDRED, RETURN_PLACES)
    logger.debug("MWR over %d cash flows: %s%%", len(flows), mwr)
    return Ok(mwr)


# =============================================================================
# ROLLING RETURNS
# =============================================================================


def _annualize(window: Sequence[MonthlyReturn]) -> Decimal:
    growth = ONE
    for month in window:
        growth *= ONE + month.return_pct / HUNDRED
    exponent = TWELVE / Decimal(len(window))
    return round_to((power(growth, exponent) - ONE) * HUNDRED, RETURN_PLACES)


def calculate_rolling_returns(
    monthly_data: Iterable[MonthlyReturn | Mapping[str, Any]],
    period_months: int = 12,
) -> Result[list[RollingReturn], PerformanceError]:
    """
    Annualized return of every ``period_months`` window, oldest first.

    Errors:
        invalid_period: period_months is not a positive int
        invalid_return_data: malformed monthly row
        insufficient_periods: fewer months than one window
    """
    if isinstance(period_months, bool) or not isinstance(period_months, int) or period_months < 1:
        logger.warning("Rolling returns failed: %s", PerformanceError.INVALID_PERIOD.value)
        return Err(PerformanceError.INVALID_PERIOD)

    months = _parse_rows(MonthlyReturn, monthly_data)
    if months is None:
        logger.warning("Rolling returns failed: %s", PerformanceError.INVALID_RETURN_DATA.value)
        return Err(PerformanceError.INVALID_RETURN_DATA)

    logger.debug("Calculating %d-month rolling returns for %d months", period_months, len(months))

    if len(months) < period_months:
        logger.warning("Rolling returns failed: %s", PerformanceError.INSUFFICIENT_PERIODS.value)
        return Err(PerformanceError.INSUFFICIENT_PERIODS)

    months.sort(key=lambda m: m.date)

    rolling = []
    for start in range(len(months) - period_months + 1):
        window = months[start : start + period_months]
        rolling.append(
            RollingReturn(
                period_start=window[0].date,
                period_end=window[-1].date,
                annualized_return=_annualize(window),
            )
        )
    return Ok(rolling)


def analyze_rolling_returns(
    rolling: Sequence[RollingReturn],
) -> Result[RollingReturnAnalysis, PerformanceError]:
    """
    Best/worst window, mean and volatility of a rolling-return series.

    Ties go to the earliest window. Volatility is the sample standard
    deviation (0 for a single window).
    """
    if not rolling:
        logger.warning("Rolling return analysis failed: %s", PerformanceError.INSUFFICIENT_PERIODS.value)
        return Err(PerformanceError.INSUFFICIENT_PERIODS)

    values = [r.annualized_return for r in rolling]
    mean = average(values)

    volatility = ZERO
    if len(values) > 1:
        variance = decimal_sum((v - mean) * (v - mean) for v in values) / Decimal(len(values) - 1)
        volatility = nth_root(variance, 2)

    return Ok(
        RollingReturnAnalysis(
            best_period=max(rolling, key=lambda r: r.annualized_return),
            worst_period=min(rolling, key=lambda r: r.annualized_return),
            average_return=round_to(mean, RETURN_PLACES),
            volatility=round_to(volatility, RETURN_PLACES),
            period_count=len(rolling),
        )
    )
