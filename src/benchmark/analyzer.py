"""
Benchmark Analyzer — Portfolio performance against market benchmarks

Compares a portfolio's period return with a benchmark's and derives the
excess return (alpha). Beta/correlation come from paired return series
(see ``src.benchmark.statistics``).

FORMULAS:
    portfolio_return     = end_value / start_value − 1
    relative_performance = portfolio_return − benchmark_return
    alpha                = relative_performance × 100, rounded to 2 places
    outperformed         = portfolio_return > benchmark_return

VALIDATION (returned as Err, never raised):
    start_value, end_value finite numbers (else invalid_portfolio_values),
    start_value > 0, end_value > 0, 1 <= days <= max_days (3650),
    benchmark in {sp500, total_market, international}

Benchmark quotes and period returns come from a BenchmarkDataProvider; the
analyzer itself performs no I/O and passes provider failures through as-is.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Callable, Final, Iterable, Mapping, Sequence

from pydantic import BaseModel, Field, ValidationError

from src.benchmark.statistics import BetaStatistics
from src.benchmark.statistics import calculate_beta as _calculate_beta
from src.core.config import EngineSettings, get_settings
from src.core.contracts.providers import BenchmarkDataProvider
from src.core.math.decimal_helpers import ONE, ZERO, ensure_decimal, round_to, to_percentage
from src.core.result import BenchmarkError, BetaError, Err, Ok, Result

logger = logging.getLogger(__name__)


# =============================================================================
# BENCHMARKS
# =============================================================================


class Benchmark(str, Enum):
    """Supported market benchmarks"""

    SP500 = "sp500"
    TOTAL_MARKET = "total_market"
    INTERNATIONAL = "international"

    @property
    def symbol(self) -> str:
        return BENCHMARK_SYMBOLS[self]


BENCHMARK_SYMBOLS: Final[dict[Benchmark, str]] = {
    Benchmark.SP500: "SPY",
    Benchmark.TOTAL_MARKET: "VTI",
    Benchmark.INTERNATIONAL: "VTIAX",
}

ALPHA_PLACES: Final[int] = 2


def resolve_benchmark(benchmark: Benchmark | str) -> Result[Benchmark, BenchmarkError]:
    """Benchmark enum for an identifier such as ``"sp500"``."""
    try:
        return Ok(Benchmark(benchmark))
    except ValueError:
        return Err(BenchmarkError.UNSUPPORTED_BENCHMARK)


# =============================================================================
# RESULT MODELS
# =============================================================================


class BenchmarkAnalysis(BaseModel):
    """Single portfolio period return against one benchmark."""

    portfolio_return: Decimal = Field(..., description="end / start − 1")
    benchmark_return: Decimal = Field(..., description="Benchmark return over the period")
    benchmark_symbol: str = Field(..., min_length=1)
    relative_performance: Decimal = Field(..., description="portfolio − benchmark")
    alpha: Decimal = Field(..., description="Excess return in percentage points")
    period_days: int = Field(..., ge=1)
    outperformed: bool

    model_config = {"frozen": True}


class BenchmarkData(BaseModel):
    benchmark: Benchmark
    symbol: str
    current_price: Decimal
    period_return: Decimal
    period_days: int = Field(..., ge=1)
    last_updated: datetime

    model_config = {"frozen": True}


class PortfolioSnapshot(BaseModel):
    """Input row of a multi-portfolio comparison."""

    label: str
    start_value: Decimal = Field(..., gt=0)
    end_value: Decimal = Field(..., gt=0)

    model_config = {"frozen": True}


class PortfolioAnalysis(BaseModel):
    label: str
    portfolio_return: Decimal
    relative_performance: Decimal
    alpha: Decimal
    outperformed: bool

    model_config = {"frozen": True}


class PortfolioComparison(BaseModel):
    """Several portfolios measured against the same benchmark return."""

    benchmark: Benchmark
    benchmark_symbol: str
    benchmark_return: Decimal
    portfolio_analyses: list[PortfolioAnalysis]
    period_days: int = Field(..., ge=1)
    best_performer: PortfolioAnalysis
    worst_performer: PortfolioAnalysis

    model_config = {"frozen": True}


# =============================================================================
# CONFIG
# =============================================================================


@dataclass(frozen=True)
class BenchmarkConfig:
    """Validation limits of the benchmark analyzer."""

    max_days: int = 3650
    min_sample_size: int = 5

    @classmethod
    def from_settings(cls, settings: EngineSettings | None = None) -> "BenchmarkConfig":
        settings = settings or get_settings()
        return cls(
            max_days=settings.benchmark_max_days,
            min_sample_size=settings.beta_min_sample_size,
        )


# =============================================================================
# HELPERS
# =============================================================================


def portfolio_return(start_value: Decimal, end_value: Decimal) -> Decimal:
    """end / start − 1 (a fraction, 0.07 = 7%)."""
    return end_value / start_value - ONE


def _coerce_portfolio_value(value: Any) -> Decimal | None:
    """Decimal for a finite numeric input, None for anything else."""
    try:
        value = ensure_decimal(value)
    except (InvalidOperation, TypeError):
        return None
    return value if value.is_finite() else None


def _relative(portfolio_ret: Decimal, benchmark_ret: Decimal) -> tuple[Decimal, Decimal, bool]:
    relative = portfolio_ret - benchmark_ret
    alpha = round_to(to_percentage(relative), ALPHA_PLACES)
    return relative, alpha, portfolio_ret > benchmark_ret


# =============================================================================
# ANALYZER
# =============================================================================


class BenchmarkAnalyzer:
    """
    Portfolio vs benchmark comparisons.

    Every public method returns ``Ok(model)`` or ``Err(error)``; errors are
    either a BenchmarkError/BetaError member or the provider's own failure
    value, unchanged.
    """

    def __init__(
        self,
        provider: BenchmarkDataProvider,
        config: BenchmarkConfig | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        """
        Args:
            provider: source of benchmark quotes and returns
            config: validation limits (default: BenchmarkConfig())
            clock: timestamp source for BenchmarkData (default: UTC now)
        """
        self.provider = provider
        self.config = config or BenchmarkConfig()
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    # -------------------------------------------------------------------------
    # validation
    # -------------------------------------------------------------------------

    def _validate_days(self, days: Any) -> BenchmarkError | None:
        if isinstance(days, bool) or not isinstance(days, int):
            return BenchmarkError.INVALID_DAYS
        if days < 1 or days > self.config.max_days:
            return BenchmarkError.INVALID_DAYS
        return None

    def _benchmark_return(self, symbol: str, days: int) -> Result[Decimal, Any]:
        result = self.provider.fetch_period_return(symbol, days)
        if isinstance(result, Ok):
            return Ok(ensure_decimal(result.value))
        return result

    # -------------------------------------------------------------------------
    # operations
    # -------------------------------------------------------------------------

    def analyze_vs_benchmark(
        self,
        start_value: Decimal | int | str,
        end_value: Decimal | int | str,
        days: int,
        benchmark: Benchmark | str = Benchmark.SP500,
    ) -> Result[BenchmarkAnalysis, Any]:
        """
        Portfolio return over ``days`` against ``benchmark``.

        Examples:
            >>> from src.core.contracts.providers import EstimatedBenchmarkProvider
            >>> from src.core.result import Ok
            >>> analyzer = BenchmarkAnalyzer(EstimatedBenchmarkProvider(lambda symbol: Ok(Decimal("500"))))
            >>> analyzer.analyze_vs_benchmark(Decimal("100000"), Decimal("107000"), 365).value.alpha
            Decimal('-3.00')
        """
        logger.debug("Analyzing portfolio vs %s over %s days", benchmark, days)

        start_value = _coerce_portfolio_value(start_value)
        end_value = _coerce_portfolio_value(end_value)

        error: Any = None
        if start_value is None or end_value is None:
            error = BenchmarkError.INVALID_PORTFOLIO_VALUES
        elif start_value <= ZERO:
            error = BenchmarkError.INVALID_START_VALUE
        elif end_value <= ZERO:
            error = BenchmarkError.INVALID_END_VALUE
        else:
            error = self._validate_days(days)

        if error is not None:
            logger.warning("Benchmark analysis failed: %s", error.value)
            return Err(error)

        resolved = resolve_benchmark(benchmark)
        if isinstance(resolved, Err):
            logger.warning("Benchmark analysis failed: unsupported benchmark %r", benchmark)
            return resolved

        symbol = resolved.value.symbol
        bench = self._benchmark_return(symbol, days)
        if isinstance(bench, Err):
            logger.warning("Benchmark analysis failed: %s", bench.error)
            return bench

        port_ret = portfolio_return(start_value, end_value)
        relative, alpha, outperformed = _relative(port_ret, bench.value)

        analysis = BenchmarkAnalysis(
            portfolio_return=port_ret,
            benchmark_return=bench.value,
            benchmark_symbol=symbol,
            relative_performance=relative,
            alpha=alpha,
            period_days=days,
            outperformed=outperformed,
        )
        logger.debug("Benchmark analysis complete: alpha=%s%%", analysis.alpha)
        return Ok(analysis)

    def calculate_beta(
        self,
        portfolio_returns: Sequence[Decimal | int | str],
        benchmark_returns: Sequence[Decimal | int | str],
    ) -> Result[BetaStatistics, BetaError]:
        """Beta/correlation of paired return series (see statistics.calculate_beta)."""
        return _calculate_beta(
            portfolio_returns,
            benchmark_returns,
            min_sample_size=self.config.min_sample_size,
        )

    def get_benchmark_data(
        self,
        benchmark: Benchmark | str = Benchmark.SP500,
        days: int = 365,
    ) -> Result[BenchmarkData, Any]:
        """Current quote and period return of a benchmark."""
        logger.debug("Retrieving %s benchmark data for %s days", benchmark, days)

        days_error = self._validate_days(days)
        if days_error is not None:
            logger.warning("Failed to retrieve benchmark data: %s", days_error.value)
            return Err(days_error)

        resolved = resolve_benchmark(benchmark)
        if isinstance(resolved, Err):
            logger.warning("Failed to retrieve benchmark data: unsupported benchmark %r", benchmark)
            return resolved

        symbol = resolved.value.symbol
        price = self.provider.fetch_price(symbol)
        if isinstance(price, Err):
            logger.warning("Failed to retrieve benchmark data: %s", price.error)
            return price

        period = self._benchmark_return(symbol, days)
        if isinstance(period, Err):
            logger.warning("Failed to retrieve benchmark data: %s", period.error)
            return period

        return Ok(
            BenchmarkData(
                benchmark=resolved.value,
                symbol=symbol,
                current_price=ensure_decimal(price.value),
                period_return=period.value,
                period_days=days,
                last_updated=self._clock(),
            )
        )

    def compare_multiple_portfolios(
        self,
        portfolios: Iterable[PortfolioSnapshot | Mapping[str, Any]],
        benchmark: Benchmark | str = Benchmark.SP500,
        days: int = 365,
    ) -> Result[PortfolioComparison, Any]:
        """
        Several portfolios against one benchmark return.

        Each entry needs ``label``, ``start_value`` and ``end_value`` (> 0).
        Best/worst performer are picked by raw portfolio return; ties go to
        the earliest entry.
        """
        snapshots: list[PortfolioSnapshot] = []
        try:
            for item in portfolios:
                if isinstance(item, PortfolioSnapshot):
                    snapshots.append(item)
                else:
                    snapshots.append(PortfolioSnapshot.model_validate(item))
        except ValidationError as exc:
            logger.warning("Multi-portfolio comparison failed: %s", exc.error_count())
            return Err(BenchmarkError.INVALID_PORTFOLIOS)

        if not snapshots:
            logger.warning("Multi-portfolio comparison failed: no portfolios")
            return Err(BenchmarkError.INVALID_PORTFOLIOS)

        logger.debug("Comparing %d portfolios vs %s benchmark", len(snapshots), benchmark)

        days_error = self._validate_days(days)
        if days_error is not None:
            logger.warning("Multi-portfolio comparison failed: %s", days_error.value)
            return Err(days_error)

        resolved = resolve_benchmark(benchmark)
        if isinstance(resolved, Err):
            logger.warning("Multi-portfolio comparison failed: unsupported benchmark %r", benchmark)
            return resolved

        symbol = resolved.value.symbol
        bench = self._benchmark_return(symbol, days)
        if isinstance(bench, Err):
            logger.warning("Multi-portfolio comparison failed: %s", bench.error)
            return bench

        analyses = []
        for snap in snapshots:
            port_ret = portfolio_return(snap.start_value, snap.end_value)
            relative, alpha, outperformed = _relative(port_ret, bench.value)
            analyses.append(
                PortfolioAnalysis(
                    label=snap.label,
                    portfolio_return=port_ret,
                    relative_performance=relative,
                    alpha=alpha,
                    outperformed=outperformed,
                )
            )

        comparison = PortfolioComparison(
            benchmark=resolved.value,
            benchmark_symbol=symbol,
            benchmark_return=bench.value,
            portfolio_analyses=analyses,
            period_days=days,
            best_performer=max(analyses, key=lambda a: a.portfolio_return),
            worst_performer=min(analyses, key=lambda a: a.portfolio_return),
        )
        logger.debug(
            "Multi-portfolio comparison complete: best=%s worst=%s",
            comparison.best_performer.label,
            comparison.worst_performer.label,
        )
        return Ok(comparison)
