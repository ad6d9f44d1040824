"""
Money Ratios — Income-relative financial health ratios

All four ratios divide by gross annual income; a zero income makes them
meaningless, so each returns ``Err(RatioError.ZERO_INCOME)`` instead of a
number.

RATIOS:
    capital   = (net_worth − primary_residence) / income   higher is better, age target
    savings   = annual_savings / income                    target 0.12, below → behind
    mortgage  = mortgage_balance / income                  lower is better, age ceiling
    education = student_loan_balance / income              ceiling 1.0, above → behind

STATUS (higher is better): current > target → ahead, == → on_track, < → behind
OVERALL (by number of ratios behind): 0 excellent | 1 on_track | 2 needs_attention | 3+ critical
"""

import logging
from datetime import date as Date
from decimal import Decimal
from typing import Final

from src.core.domain.ratios import (
    MoneyRatios,
    OverallStatus,
    RatioKind,
    RatioProfile,
    RatioResult,
    RatioStatus,
)
from src.core.math.decimal_helpers import ZERO, ensure_decimal
from src.core.result import Err, Ok, RatioError, Result
from src.ratios.benchmarks import (
    RatioConfig,
    capital_target_for_age,
    mortgage_target_for_age,
    resolve_age,
)

logger = logging.getLogger(__name__)


RECOMMENDATIONS: Final[dict[RatioKind, str]] = {
    RatioKind.CAPITAL: "Increase retirement savings to reach capital-to-income target",
    RatioKind.SAVINGS: "Boost annual savings rate to meet 12% target",
    RatioKind.MORTGAGE: "Consider accelerating mortgage payments",
    RatioKind.EDUCATION: "Focus on paying down student loans",
}

ALL_ON_TRACK_MESSAGE: Final[str] = (
    "Excellent work! All ratios are on track. Continue your current financial strategy."
)


# =============================================================================
# STATUS
# =============================================================================


def determine_status(current: Decimal, target: Decimal, lower_is_better: bool = False) -> RatioStatus:
    """Status of ``current`` against ``target``."""
    if lower_is_better:
        return RatioStatus.BEHIND if current > target else RatioStatus.ON_TRACK

    if current > target:
        return RatioStatus.AHEAD
    if current == target:
        return RatioStatus.ON_TRACK
    return RatioStatus.BEHIND


def determine_overall_status(statuses: list[RatioStatus]) -> OverallStatus:
    behind = sum(1 for s in statuses if s == RatioStatus.BEHIND)
    if behind == 0:
        return OverallStatus.EXCELLENT
    if behind == 1:
        return OverallStatus.ON_TRACK
    if behind == 2:
        return OverallStatus.NEEDS_ATTENTION
    return OverallStatus.CRITICAL


def _zero_income(profile: RatioProfile, kind: RatioKind) -> bool:
    if profile.gross_annual_income == ZERO:
        logger.warning("%s ratio unavailable: zero income", kind.value)
        return True
    return False


# =============================================================================
# RATIOS
# =============================================================================


def calculate_capital_ratio(
    profile: RatioProfile,
    net_worth: Decimal | int | str,
    exclude_residence: bool = True,
    today: Date | None = None,
    config: RatioConfig | None = None,
) -> Result[RatioResult, RatioError]:
    """
    Invested capital as a multiple of income against the age target.

    Args:
        profile: income, age and residence value
        net_worth: total net worth
        exclude_residence: subtract the primary residence value (default: True)
    """
    if _zero_income(profile, RatioKind.CAPITAL):
        return Err(RatioError.ZERO_INCOME)

    capital = ensure_decimal(net_worth)
    if exclude_residence:
        capital -= profile.primary_residence_value

    current = capital / profile.gross_annual_income
    target = capital_target_for_age(resolve_age(profile, today, config))

    return Ok(RatioResult(current_ratio=current, target_ratio=target, status=determine_status(current, target)))


def calculate_savings_ratio(
    profile: RatioProfile,
    annual_savings: Decimal | int | str,
    config: RatioConfig | None = None,
) -> Result[RatioResult, RatioError]:
    """
    Annual savings rate against the fixed savings target.

    Examples:
        >>> calculate_savings_ratio(RatioProfile(gross_annual_income=100000), 10000).value.status
        <RatioStatus.BEHIND: 'behind'>
    """
    config = config or RatioConfig()
    if _zero_income(profile, RatioKind.SAVINGS):
        return Err(RatioError.ZERO_INCOME)

    current = ensure_decimal(annual_savings) / profile.gross_annual_income
    target = config.savings_target
    status = RatioStatus.BEHIND if current < target else RatioStatus.ON_TRACK

    return Ok(RatioResult(current_ratio=current, target_ratio=target, status=status))


def calculate_mortgage_ratio(
    profile: RatioProfile,
    today: Date | None = None,
    config: RatioConfig | None = None,
) -> Result[RatioResult, RatioError]:
    """Mortgage balance as a multiple of income against the age ceiling."""
    if _zero_income(profile, RatioKind.MORTGAGE):
        return Err(RatioError.ZERO_INCOME)

    current = profile.mortgage_balance / profile.gross_annual_income
    target = mortgage_target_for_age(resolve_age(profile, today, config))
    status = determine_status(current, target, lower_is_better=True)

    return Ok(RatioResult(current_ratio=current, target_ratio=target, status=status))


def calculate_education_ratio(
    profile: RatioProfile,
    config: RatioConfig | None = None,
) -> Result[RatioResult, RatioError]:
    """Student loan balance as a multiple of income; above the ceiling is behind."""
    config = config or RatioConfig()
    if _zero_income(profile, RatioKind.EDUCATION):
        return Err(RatioError.ZERO_INCOME)

    current = profile.student_loan_balance / profile.gross_annual_income
    target = config.education_target
    status = RatioStatus.BEHIND if current > target else RatioStatus.ON_TRACK

    return Ok(RatioResult(current_ratio=current, target_ratio=target, status=status))


def calculate_all_ratios(
    profile: RatioProfile,
    net_worth: Decimal | int | str,
    annual_savings: Decimal | int | str,
    today: Date | None = None,
    config: RatioConfig | None = None,
) -> Result[MoneyRatios, RatioError]:
    """All four ratios plus the overall status; the first error short-circuits."""
    results = (
        calculate_capital_ratio(profile, net_worth, today=today, config=config),
        calculate_savings_ratio(profile, annual_savings, config=config),
        calculate_mortgage_ratio(profile, today=today, config=config),
        calculate_education_ratio(profile, config=config),
    )
    for result in results:
        if isinstance(result, Err):
            return result

    capital, savings, mortgage, education = (r.value for r in results)
    ratios = MoneyRatios(
        capital_ratio=capital,
        savings_ratio=savings,
        mortgage_ratio=mortgage,
        education_ratio=education,
        overall_status=determine_overall_status(
            [capital.status, savings.status, mortgage.status, education.status]
        ),
    )
    logger.debug("Money ratios: overall=%s behind=%s", ratios.overall_status.value, ratios.behind())
    return Ok(ratios)


def get_recommendations(ratios: MoneyRatios) -> list[str]:
    """One line per ratio behind target, or a single all-clear message."""
    recommendations = [RECOMMENDATIONS[kind] for kind in ratios.behind()]
    return recommendations or [ALL_ON_TRACK_MESSAGE]
