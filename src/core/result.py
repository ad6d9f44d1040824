"""
Result — explicit success/failure values for calculator operations

Calculators never raise for domain failures (zero income, short return
series, unsupported benchmark, upstream price failure). They return either
``Ok(value)`` or ``Err(error)``, where ``error`` is a member of a closed
``(str, Enum)`` set defined per operation, or the unchanged failure object
handed back by an external collaborator.

Exceptions stay reserved for programmer errors (wrong types, impossible
parameters) and propagate normally.

Usage:
    >>> result = calculate_savings_ratio(profile, Decimal("10000"))
    >>> if is_ok(result):
    ...     ratio = result.value
    ... else:
    ...     handle(result.error)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")


# =============================================================================
# RESULT TYPES
# =============================================================================


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful calculation carrying its value."""

    value: T


@dataclass(frozen=True)
class Err(Generic[E]):
    """Failed calculation carrying an error value."""

    error: E


Result = Union[Ok[T], Err[E]]


def is_ok(result: Any) -> bool:
    """True for ``Ok`` results."""
    return isinstance(result, Ok)


def is_err(result: Any) -> bool:
    """True for ``Err`` results."""
    return isinstance(result, Err)


# =============================================================================
# ERROR SETS
# =============================================================================


class RatioError(str, Enum):
    """Failures of money-ratio calculations."""

    ZERO_INCOME = "zero_income"


class BetaError(str, Enum):
    """Failures of beta/correlation statistics."""

    INSUFFICIENT_PORTFOLIO_DATA = "insufficient_portfolio_data"
    INSUFFICIENT_BENCHMARK_DATA = "insufficient_benchmark_data"
    MISMATCHED_LENGTHS = "mismatched_return_periods"


class BenchmarkError(str, Enum):
    """Input validation failures of benchmark comparisons."""

    INVALID_PORTFOLIO_VALUES = "invalid_portfolio_values"
    INVALID_START_VALUE = "invalid_start_value"
    INVALID_END_VALUE = "invalid_end_value"
    INVALID_DAYS = "invalid_days"
    UNSUPPORTED_BENCHMARK = "unsupported_benchmark"
    INVALID_PORTFOLIOS = "invalid_portfolios_format"


class PerformanceError(str, Enum):
    """Failures of time/money-weighted and rolling return calculations."""

    INSUFFICIENT_DATA = "insufficient_data"
    INVALID_VALUATION_DATA = "invalid_valuation_data"
    ZERO_START_VALUE = "zero_start_value"
    EMPTY_CASH_FLOW_LIST = "empty_cash_flow_list"
    INVALID_CASH_FLOW_STRUCTURE = "invalid_cash_flow_structure"
    ZERO_INITIAL_INVESTMENT = "zero_initial_investment"
    NEGATIVE_IRR = "negative_irr"
    IRR_NOT_FOUND = "irr_not_found"
    INVALID_RETURN_DATA = "invalid_return_data"
    INVALID_PERIOD = "invalid_period"
    INSUFFICIENT_PERIODS = "insufficient_periods"
