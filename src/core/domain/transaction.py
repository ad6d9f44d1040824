"""
TransactionRecord — Immutable input record for cost-basis accounting

Immutable Pydantic model, one per brokerage/cash event. The persistence layer
hands ordered lists of these to the cost-basis engine; nothing in the engine
mutates them.

Sign convention: sell quantities may arrive negative (ledger style) or
positive; the engine always uses the absolute value.
"""

from datetime import date as Date
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field, field_validator


# =============================================================================
# ENUMS
# =============================================================================


class TransactionType(str, Enum):
    """Transaction kind"""

    BUY = "buy"
    SELL = "sell"
    DIVIDEND = "dividend"
    FEE = "fee"
    INTEREST = "interest"


# Types that change quantity/cost-basis
POSITION_TRANSACTION_TYPES: frozenset[TransactionType] = frozenset(
    {TransactionType.BUY, TransactionType.SELL}
)


# =============================================================================
# TRANSACTION MODEL
# =============================================================================


class TransactionRecord(BaseModel):
    """
    A single dated transaction against one instrument.

    Immutable model (frozen=True). ``symbol`` and ``account_id`` are optional
    so that a single-symbol stream can be built without them; grouping and
    cache invalidation use them when present.
    """

    type: TransactionType = Field(..., description="buy | sell | dividend | fee | interest")
    quantity: Decimal = Field(..., description="Units traded (sells may be negative)")
    unit_price: Decimal = Field(default=Decimal("0"), ge=0, description="Price per unit")
    fee: Decimal = Field(default=Decimal("0"), ge=0, description="Commission/fee paid")
    date: Date = Field(..., description="Trade date")

    symbol: str | None = Field(default=None, min_length=1, description="Instrument ticker")
    account_id: str | None = Field(default=None, min_length=1, description="Owning account")
    id: str | None = Field(default=None, description="Persistence identifier")

    model_config = {"frozen": True}

    @field_validator("symbol")
    @classmethod
    def normalize_symbol(cls, v: str | None) -> str | None:
        """Tickers are compared case-insensitively."""
        return v.strip().upper() if v is not None else v

    @property
    def abs_quantity(self) -> Decimal:
        return abs(self.quantity)

    @property
    def gross_amount(self) -> Decimal:
        """|quantity| × unit_price, before fees."""
        return self.abs_quantity * self.unit_price

    def affects_position(self) -> bool:
        """True for buys and sells."""
        return self.type in POSITION_TRANSACTION_TYPES
