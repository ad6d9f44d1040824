"""
Beta Statistics — Covariance, beta and correlation of paired return series

FORMULAS (sample estimators, n − 1 denominator):
    p̄, b̄          = arithmetic means
    covariance    = Σ (p_i − p̄)(b_i − b̄) / (n − 1)
    var_p, var_b  = Σ (x_i − x̄)² / (n − 1)
    beta          = covariance / var_b              (1.0 when var_b == 0)
    correlation   = covariance / (σ_p × σ_b)        (0 when var_p or var_b == 0)
    r_squared     = correlation²

ROUNDING (half up):
    beta, correlation, r_squared                 → 3 places
    covariance, portfolio/benchmark variance     → 6 places

Sums, means and variances are exact Decimal arithmetic; only the two square
roots in the correlation denominator cross the float boundary.
"""

import logging
from decimal import Decimal
from typing import Final, Sequence

from pydantic import BaseModel, Field

from src.core.math.decimal_helpers import ONE, ZERO, decimal_sum, ensure_decimal, round_to
from src.core.math.decimal_math import nth_root
from src.core.result import BetaError, Err, Ok, Result

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

MIN_SAMPLE_SIZE_DEFAULT: Final[int] = 5

RATIO_PLACES: Final[int] = 3
MOMENT_PLACES: Final[int] = 6

# Beta reported when the benchmark never moves
MARKET_BETA: Final[Decimal] = Decimal("1.0")


# =============================================================================
# RESULT MODEL
# =============================================================================


class BetaStatistics(BaseModel):
    """Beta/correlation of a portfolio against a benchmark."""

    beta: Decimal = Field(..., description="Sensitivity to benchmark moves")
    correlation: Decimal = Field(..., ge=-1, le=1, description="Pearson correlation")
    r_squared: Decimal = Field(..., ge=0, le=1, description="correlation²")
    covariance: Decimal
    portfolio_variance: Decimal = Field(..., ge=0)
    benchmark_variance: Decimal = Field(..., ge=0)
    sample_size: int = Field(..., ge=2)

    model_config = {"frozen": True}


# =============================================================================
# MOMENTS
# =============================================================================


def mean(values: Sequence[Decimal]) -> Decimal:
    if not values:
        return ZERO
    return decimal_sum(values) / Decimal(len(values))


def sample_variance(values: Sequence[Decimal], center: Decimal) -> Decimal:
    if len(values) < 2:
        return ZERO
    total = decimal_sum((v - center) * (v - center) for v in values)
    return total / Decimal(len(values) - 1)


def sample_covariance(
    xs: Sequence[Decimal],
    ys: Sequence[Decimal],
    x_mean: Decimal,
    y_mean: Decimal,
) -> Decimal:
    if len(xs) < 2:
        return ZERO
    total = decimal_sum((x - x_mean) * (y - y_mean) for x, y in zip(xs, ys))
    return total / Decimal(len(xs) - 1)


# =============================================================================
# BETA
# =============================================================================


def validate_return_series(
    portfolio_returns: Sequence[object],
    benchmark_returns: Sequence[object],
    min_sample_size: int = MIN_SAMPLE_SIZE_DEFAULT,
) -> BetaError | None:
    """First problem found with the two series, or None."""
    if len(portfolio_returns) < min_sample_size:
        return BetaError.INSUFFICIENT_PORTFOLIO_DATA
    if len(benchmark_returns) < min_sample_size:
        return BetaError.INSUFFICIENT_BENCHMARK_DATA
    if len(portfolio_returns) != len(benchmark_returns):
        return BetaError.MISMATCHED_LENGTHS
    return None


def calculate_beta(
    portfolio_returns: Sequence[Decimal | int | str],
    benchmark_returns: Sequence[Decimal | int | str],
    min_sample_size: int = MIN_SAMPLE_SIZE_DEFAULT,
) -> Result[BetaStatistics, BetaError]:
    """
    Beta, correlation and r² of ``portfolio_returns`` against ``benchmark_returns``.

    Both series must hold at least ``min_sample_size`` periodic returns and
    be of equal length; element i of each must cover the same period.

    Args:
        portfolio_returns: periodic portfolio returns as fractions
        benchmark_returns: benchmark returns over the same periods
        min_sample_size: minimum length of each series (default: 5)

    Returns:
        Ok(BetaStatistics) or Err(BetaError)

    Examples:
        >>> series = [Decimal("0.01"), Decimal("-0.02"), Decimal("0.03"), Decimal("0.00"), Decimal("0.015")]
        >>> calculate_beta(series, series).value.beta
        Decimal('1.000')
    """
    error = validate_return_series(portfolio_returns, benchmark_returns, min_sample_size)
    if error is not None:
        logger.warning(
            "Beta calculation rejected (%d portfolio / %d benchmark returns): %s",
            len(portfolio_returns),
            len(benchmark_returns),
            error.value,
        )
        return Err(error)

    p = [ensure_decimal(r) for r in portfolio_returns]
    b = [ensure_decimal(r) for r in benchmark_returns]

    p_mean = mean(p)
    b_mean = mean(b)

    covariance = sample_covariance(p, b, p_mean, b_mean)
    portfolio_variance = sample_variance(p, p_mean)
    benchmark_variance = sample_variance(b, b_mean)

    if benchmark_variance == ZERO:
        beta = MARKET_BETA
    else:
        beta = covariance / benchmark_variance

    if portfolio_variance == ZERO or benchmark_variance == ZERO:
        correlation = ZERO
    else:
        denominator = nth_root(portfolio_variance, 2) * nth_root(benchmark_variance, 2)
        correlation = covariance / denominator
        # Float-path roots can overshoot |ρ| = 1 by an ulp
        correlation = max(-ONE, min(ONE, correlation))

    r_squared = correlation * correlation

    stats = BetaStatistics(
        beta=round_to(beta, RATIO_PLACES),
        correlation=round_to(correlation, RATIO_PLACES),
        r_squared=round_to(r_squared, RATIO_PLACES),
        covariance=round_to(covariance, MOMENT_PLACES),
        portfolio_variance=round_to(portfolio_variance, MOMENT_PLACES),
        benchmark_variance=round_to(benchmark_variance, MOMENT_PLACES),
        sample_size=len(p),
    )
    logger.debug(
        "Beta over %d periods: beta=%s correlation=%s r2=%s",
        stats.sample_size,
        stats.beta,
        stats.correlation,
        stats.r_squared,
    )
    return Ok(stats)
