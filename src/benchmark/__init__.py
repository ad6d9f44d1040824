"""Benchmark — portfolio performance against market benchmarks.

- Period return vs benchmark return (alpha, outperformance)
- Beta/correlation from paired return series
- Multi-portfolio comparison against one benchmark
"""

from .analyzer import (
    BENCHMARK_SYMBOLS,
    Benchmark,
    BenchmarkAnalysis,
    BenchmarkAnalyzer,
    BenchmarkConfig,
    BenchmarkData,
    PortfolioAnalysis,
    PortfolioComparison,
    PortfolioSnapshot,
    resolve_benchmark,
)
from .statistics import BetaStatistics, calculate_beta

__all__ = [
    "Benchmark",
    "BENCHMARK_SYMBOLS",
    "BenchmarkAnalysis",
    "BenchmarkAnalyzer",
    "BenchmarkConfig",
    "BenchmarkData",
    "BetaStatistics",
    "PortfolioAnalysis",
    "PortfolioComparison",
    "PortfolioSnapshot",
    "calculate_beta",
    "resolve_benchmark",
]
