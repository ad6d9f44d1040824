"""
Domain models and value objects.

Input records (transactions, accounts, ratio profiles) and the immutable
results derived from them (holdings, P&L, ratios).
"""

from src.core.domain.account import CASH_ACCOUNT_TYPES, Account, AccountType
from src.core.domain.holding import (
    HoldingPnL,
    HoldingsSummary,
    HoldingState,
    PortfolioReturnSummary,
    PositionReturn,
)
from src.core.domain.ratios import (
    AcceleratedTimeline,
    LifeStage,
    LifeStageAnalysis,
    MoneyRatios,
    OverallStatus,
    RatioKind,
    RatioProfile,
    RatioResult,
    RatioStatus,
    ReadinessAssessment,
    ReadinessScore,
)
from src.core.domain.transaction import (
    POSITION_TRANSACTION_TYPES,
    TransactionRecord,
    TransactionType,
)

__all__ = [
    # Transactions
    "TransactionRecord",
    "TransactionType",
    "POSITION_TRANSACTION_TYPES",
    # Accounts
    "Account",
    "AccountType",
    "CASH_ACCOUNT_TYPES",
    # Holdings
    "HoldingState",
    "HoldingPnL",
    "PositionReturn",
    "PortfolioReturnSummary",
    "HoldingsSummary",
    # Ratios
    "RatioProfile",
    "RatioResult",
    "RatioStatus",
    "RatioKind",
    "MoneyRatios",
    "OverallStatus",
    "LifeStage",
    "LifeStageAnalysis",
    "ReadinessAssessment",
    "ReadinessScore",
    "AcceleratedTimeline",
]
