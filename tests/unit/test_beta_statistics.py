"""
Tests for Beta Statistics

Checked invariants:
1. Sample (n − 1) moments, exact Decimal sums
2. beta = 1.0 when the benchmark never moves; correlation = 0 then
3. |correlation| <= 1, r_squared = correlation²
4. Ratios rounded to 3 places, moments to 6
5. Short or mismatched series are rejected in a fixed order
"""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from src.benchmark.statistics import (
    BetaStatistics,
    calculate_beta,
    mean,
    sample_covariance,
    sample_variance,
    validate_return_series,
)
from src.core.result import BetaError, Err, Ok


def d(*values):
    return [Decimal(v) for v in values]


SERIES = d("0.01", "-0.02", "0.03", "0.00", "0.015")


# =============================================================================
# MOMENTS
# =============================================================================


class TestMoments:
    def test_mean(self):
        assert mean(SERIES) == Decimal("0.007")
        assert mean([]) == Decimal("0")

    def test_sample_variance(self):
        assert sample_variance(SERIES, mean(SERIES)) == Decimal("0.000345")

    def test_variance_of_single_value_is_zero(self):
        assert sample_variance(d("0.05"), Decimal("0.05")) == Decimal("0")

    def test_covariance_with_itself_is_variance(self):
        m = mean(SERIES)
        assert sample_covariance(SERIES, SERIES, m, m) == sample_variance(SERIES, m)


# =============================================================================
# VALIDATION
# =============================================================================


class TestValidation:
    def test_short_portfolio_series(self):
        result = calculate_beta(SERIES[:4], SERIES)
        assert result == Err(BetaError.INSUFFICIENT_PORTFOLIO_DATA)

    def test_short_benchmark_series(self):
        result = calculate_beta(SERIES, SERIES[:4])
        assert result == Err(BetaError.INSUFFICIENT_BENCHMARK_DATA)

    def test_mismatched_lengths(self):
        result = calculate_beta(SERIES, SERIES + d("0.01"))
        assert result == Err(BetaError.MISMATCHED_LENGTHS)
        assert result.error.value == "mismatched_return_periods"

    def test_portfolio_checked_first(self):
        assert validate_return_series([], []) == BetaError.INSUFFICIENT_PORTFOLIO_DATA

    def test_custom_min_sample_size(self):
        assert validate_return_series(SERIES[:2], SERIES[:2], min_sample_size=2) is None
        assert isinstance(calculate_beta(SERIES[:2], SERIES[:2], min_sample_size=2), Ok)


# =============================================================================
# BETA / CORRELATION
# =============================================================================


class TestCalculateBeta:
    def test_identical_series(self):
        stats = calculate_beta(SERIES, SERIES).value

        assert stats.beta == Decimal("1")
        assert stats.correlation == Decimal("1")
        assert stats.r_squared == Decimal("1")
        assert stats.portfolio_variance == stats.benchmark_variance == Decimal("0.000345")
        assert stats.sample_size == 5

    def test_double_leverage(self):
        stats = calculate_beta([2 * r for r in SERIES], SERIES).value
        assert stats.beta == Decimal("2")
        assert stats.correlation == Decimal("1")

    def test_inverse_series(self):
        stats = calculate_beta([-r for r in SERIES], SERIES).value
        assert stats.beta == Decimal("-1")
        assert stats.correlation == Decimal("-1")
        assert stats.r_squared == Decimal("1")

    def test_constant_benchmark(self):
        stats = calculate_beta(SERIES, d("0.01", "0.01", "0.01", "0.01", "0.01")).value
        assert stats.beta == Decimal("1")
        assert stats.correlation == Decimal("0")
        assert stats.r_squared == Decimal("0")
        assert stats.benchmark_variance == Decimal("0")

    def test_constant_portfolio(self):
        stats = calculate_beta(d("0.02", "0.02", "0.02", "0.02", "0.02"), SERIES).value
        assert stats.beta == Decimal("0")
        assert stats.correlation == Decimal("0")

    def test_known_values(self):
        portfolio = d("0.02", "0.01", "-0.01", "0.03", "0.00")
        benchmark = d("0.01", "0.01", "-0.02", "0.02", "0.00")

        stats = calculate_beta(portfolio, benchmark).value

        # cov 0.000225, var_p 0.00025, var_b 0.00023
        assert stats.covariance == Decimal("0.000225")
        assert stats.portfolio_variance == Decimal("0.00025")
        assert stats.benchmark_variance == Decimal("0.00023")
        assert stats.beta == Decimal("0.978")
        assert stats.correlation == Decimal("0.938")
        assert stats.r_squared == Decimal("0.880")

    def test_rounding_places(self):
        portfolio = d("0.02", "0.01", "-0.01", "0.03", "0.00")
        benchmark = d("0.01", "0.01", "-0.02", "0.02", "0.00")

        stats = calculate_beta(portfolio, benchmark).value

        assert str(stats.beta) == "0.978"
        assert str(stats.covariance) == "0.000225"
        assert str(stats.benchmark_variance) == "0.000230"

    def test_accepts_strings_and_ints(self):
        result = calculate_beta(["0.01", "0.02", 0, "-0.01", "0.03"], ["0.01", "0.02", 0, "-0.01", "0.03"])
        assert result.value.beta == Decimal("1")

    @pytest.mark.parametrize("scale", ["0.5", "1", "3"])
    def test_correlation_bounded(self, scale):
        noisy = [r * Decimal(scale) + Decimal("0.001") * i for i, r in enumerate(SERIES)]
        stats = calculate_beta(noisy, SERIES).value
        assert Decimal("-1") <= stats.correlation <= Decimal("1")
        assert Decimal("0") <= stats.r_squared <= Decimal("1")

    def test_result_is_frozen_model(self):
        stats = calculate_beta(SERIES, SERIES).value
        assert isinstance(stats, BetaStatistics)
        with pytest.raises(ValidationError):
            stats.beta = Decimal("2")
