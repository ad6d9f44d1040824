"""
Contract Module

Collaborator ports (price lookup, benchmark data) and JSON Schema output
contracts of the calculation engine.
"""

from .providers import (
    DEFAULT_ESTIMATED_RETURN,
    ESTIMATED_ANNUAL_RETURNS,
    BenchmarkDataProvider,
    EstimatedBenchmarkProvider,
    PriceLookup,
)
from .validators import (
    BenchmarkAnalysisValidator,
    BetaStatisticsValidator,
    ContractValidator,
    HoldingPnLValidator,
    PortfolioReturnSummaryValidator,
    RatioResultValidator,
    SchemaLoader,
    validate_benchmark_analysis,
    validate_beta_statistics,
    validate_holding_pnl,
    validate_portfolio_return_summary,
    validate_ratio_result,
)

__all__ = [
    # Ports
    "PriceLookup",
    "BenchmarkDataProvider",
    "EstimatedBenchmarkProvider",
    "ESTIMATED_ANNUAL_RETURNS",
    "DEFAULT_ESTIMATED_RETURN",
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "HoldingPnLValidator",
    "PortfolioReturnSummaryValidator",
    "BenchmarkAnalysisValidator",
    "BetaStatisticsValidator",
    "RatioResultValidator",
    # Functions
    "validate_holding_pnl",
    "validate_portfolio_return_summary",
    "validate_benchmark_analysis",
    "validate_beta_statistics",
    "validate_ratio_result",
]
