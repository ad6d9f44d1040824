"""Portfolio — cost basis, holding P&L and portfolio rollups.

- Proportional cost-basis fold over a per-symbol transaction stream
- Unrealized P&L at a current price (failed lookups propagated)
- Portfolio/account totals with account exclusion applied once
- Time-weighted, money-weighted and rolling returns
"""

from .aggregator import (
    active_accounts,
    calculate_account_value,
    calculate_holdings_summary,
    calculate_portfolio_value,
    calculate_position_returns,
    calculate_simple_return,
    calculate_total_cost_basis,
    calculate_total_return,
    value_holdings,
)
from .cost_basis import (
    apply_transaction,
    calculate_cost_basis,
    calculate_holding_pnl,
    group_transactions_by_symbol,
    value_holding,
)
from .performance import (
    CashFlow,
    MonthlyReturn,
    RollingReturn,
    RollingReturnAnalysis,
    ValuationPoint,
    analyze_rolling_returns,
    calculate_money_weighted_return,
    calculate_rolling_returns,
    calculate_time_weighted_return,
)

__all__ = [
    # Cost basis
    "apply_transaction",
    "calculate_cost_basis",
    "calculate_holding_pnl",
    "group_transactions_by_symbol",
    "value_holding",
    # Aggregation
    "active_accounts",
    "calculate_account_value",
    "calculate_holdings_summary",
    "calculate_portfolio_value",
    "calculate_position_returns",
    "calculate_simple_return",
    "calculate_total_cost_basis",
    "calculate_total_return",
    "value_holdings",
    # Performance
    "CashFlow",
    "MonthlyReturn",
    "RollingReturn",
    "RollingReturnAnalysis",
    "ValuationPoint",
    "analyze_rolling_returns",
    "calculate_money_weighted_return",
    "calculate_rolling_returns",
    "calculate_time_weighted_return",
]
