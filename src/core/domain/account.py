"""
Account — Input model for account-level aggregation
"""

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field


class AccountType(str, Enum):
    """Kind of account; cash-like accounts are valued at their balance."""

    INVESTMENT = "investment"
    CHECKING = "checking"
    SAVINGS = "savings"
    MONEY_MARKET = "money_market"
    CD = "cd"


CASH_ACCOUNT_TYPES: frozenset[AccountType] = frozenset(
    {AccountType.CHECKING, AccountType.SAVINGS, AccountType.MONEY_MARKET, AccountType.CD}
)


class Account(BaseModel):
    """
    Brokerage or cash account.

    Excluded accounts (``is_excluded=True``) are dropped once, at the top of
    every aggregation call.
    """

    id: str = Field(..., min_length=1, description="Account identifier")
    name: str = Field(default="", description="Display name")
    balance: Decimal = Field(default=Decimal("0"), description="Cash balance")
    is_excluded: bool = Field(default=False, description="Exclude from portfolio totals")
    account_type: AccountType = Field(default=AccountType.INVESTMENT)

    model_config = {"frozen": True}

    @property
    def is_cash(self) -> bool:
        return self.account_type in CASH_ACCOUNT_TYPES
