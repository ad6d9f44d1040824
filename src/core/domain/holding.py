"""
Holdings — Derived position and portfolio valuation models

Immutable Pydantic models produced by the cost-basis engine and the
portfolio aggregator. None of them is persisted by the engine; each is
recomputed from a transaction sequence on demand.

All numeric fields are Decimal. ``model_dump(mode="json")`` renders them as
strings, which is the shape the output contracts expect.
"""

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field


# =============================================================================
# HOLDING STATE
# =============================================================================


class HoldingState(BaseModel):
    """
    Running quantity/cost-basis of one instrument after folding its transactions.

    ``oversold`` flags source data in which a sell exceeded the quantity held
    at the time; quantity/total_cost are then not meaningful.
    """

    symbol: str = Field(default="", description="Instrument ticker")
    quantity: Decimal = Field(default=Decimal("0"), description="Units held")
    total_cost: Decimal = Field(default=Decimal("0"), description="Remaining cost basis")
    average_cost: Decimal = Field(default=Decimal("0"), description="total_cost / quantity")
    oversold: bool = Field(default=False, description="A sell exceeded held quantity")

    model_config = {"frozen": True}


# =============================================================================
# HOLDING P&L
# =============================================================================


class HoldingPnL(BaseModel):
    """
    Unrealized profit/loss of one holding at a current price.

    ``current_price`` is None when no quote is available; ``current_value``
    is then 0 and ``price_error`` carries the upstream failure, unchanged.
    """

    symbol: str = Field(default="", description="Instrument ticker")
    quantity: Decimal = Field(..., description="Units held")
    current_price: Decimal | None = Field(default=None, description="Latest quote")
    current_value: Decimal = Field(..., description="quantity × current_price")
    cost_basis: Decimal = Field(..., description="Remaining cost basis")
    average_cost: Decimal = Field(default=Decimal("0"), description="Average unit cost")
    unrealized_pnl: Decimal = Field(..., description="current_value − cost_basis")
    unrealized_pnl_pct: Decimal = Field(..., description="unrealized_pnl / cost_basis × 100")
    price_error: Any = Field(default=None, exclude=True, description="Upstream lookup failure")

    model_config = {"frozen": True}

    @property
    def has_price(self) -> bool:
        return self.current_price is not None


class PositionReturn(BaseModel):
    """Per-symbol gain/loss line of a portfolio."""

    symbol: str
    quantity: Decimal
    current_price: Decimal | None = None
    current_value: Decimal
    cost_basis: Decimal
    return_percentage: Decimal
    dollar_return: Decimal

    model_config = {"frozen": True}


# =============================================================================
# PORTFOLIO SUMMARIES
# =============================================================================


class PortfolioReturnSummary(BaseModel):
    """Total value, cost and simple return of a set of holdings."""

    total_value: Decimal = Field(..., description="Sum of current values")
    cost_basis: Decimal = Field(..., description="Sum of cost bases")
    return_percentage: Decimal = Field(..., description="Simple return in percent")
    dollar_return: Decimal = Field(..., description="total_value − cost_basis")

    model_config = {"frozen": True}


class HoldingsSummary(BaseModel):
    """Holdings of all non-excluded accounts with portfolio totals."""

    holdings: list[HoldingPnL] = Field(default_factory=list)
    total_value: Decimal = Decimal("0")
    total_cost_basis: Decimal = Decimal("0")
    total_pnl: Decimal = Decimal("0")
    total_pnl_pct: Decimal = Decimal("0")
    holdings_count: int = Field(default=0, ge=0)

    model_config = {"frozen": True}
