"""
Portfolio Aggregator — Account and portfolio level value/return rollups

Rolls per-holding results up into portfolio totals.

FORMULAS:
    portfolio_value = Σ current_value
    simple_return   = (current_value − cost_basis) / cost_basis × 100
                      (0 when cost_basis == 0: no gain/loss, never an error)
    dollar_return   = total_value − cost_basis

Account exclusion is applied exactly once, by ``active_accounts`` at the top
of each account-aware call; the per-holding math never looks at accounts.
"""

import logging
from decimal import Decimal
from typing import Iterable, Sequence

from src.core.contracts.providers import PriceLookup
from src.core.domain.account import Account
from src.core.domain.holding import (
    HoldingPnL,
    HoldingsSummary,
    PortfolioReturnSummary,
    PositionReturn,
)
from src.core.domain.transaction import TransactionRecord
from src.core.math.decimal_helpers import HUNDRED, ZERO, decimal_sum, ensure_decimal
from src.portfolio.cost_basis import group_transactions_by_symbol, value_holding

logger = logging.getLogger(__name__)


# =============================================================================
# HOLDING ROLLUPS
# =============================================================================


def calculate_portfolio_value(holdings: Iterable[HoldingPnL]) -> Decimal:
    """Sum of each holding's current value."""
    return decimal_sum(h.current_value for h in holdings)


def calculate_total_cost_basis(holdings: Iterable[HoldingPnL]) -> Decimal:
    return decimal_sum(h.cost_basis for h in holdings)


def calculate_simple_return(
    current_value: Decimal | int | str,
    cost_basis: Decimal | int | str,
) -> Decimal:
    """
    Simple return in percent.

    Examples:
        >>> calculate_simple_return(Decimal("1500"), Decimal("1000"))
        Decimal('50.0')
        >>> calculate_simple_return(Decimal("800"), Decimal("1000"))
        Decimal('-20.0')
        >>> calculate_simple_return(Decimal("800"), Decimal("0"))
        Decimal('0')
    """
    current_value = ensure_decimal(current_value)
    cost_basis = ensure_decimal(cost_basis)

    if cost_basis == ZERO:
        return ZERO

    return (current_value - cost_basis) / cost_basis * HUNDRED


def calculate_position_returns(holdings: Iterable[HoldingPnL]) -> list[PositionReturn]:
    """
    Per-symbol gain/loss lines.

    Holdings whose quantity is exactly zero (fully sold) are left out.
    """
    positions = [
        PositionReturn(
            symbol=h.symbol,
            quantity=h.quantity,
            current_price=h.current_price,
            current_value=h.current_value,
            cost_basis=h.cost_basis,
            return_percentage=calculate_simple_return(h.current_value, h.cost_basis),
            dollar_return=h.current_value - h.cost_basis,
        )
        for h in holdings
        if h.quantity != ZERO
    ]
    logger.debug("Calculated %d position returns", len(positions))
    return positions


def calculate_total_return(holdings: Iterable[HoldingPnL]) -> PortfolioReturnSummary:
    """Total value, cost basis and simple return of ``holdings``."""
    holdings = list(holdings)

    total_value = calculate_portfolio_value(holdings)
    cost_basis = calculate_total_cost_basis(holdings)

    summary = PortfolioReturnSummary(
        total_value=total_value,
        cost_basis=cost_basis,
        return_percentage=calculate_simple_return(total_value, cost_basis),
        dollar_return=total_value - cost_basis,
    )
    logger.debug(
        "Total return: value=%s cost=%s return=%s%%",
        summary.total_value,
        summary.cost_basis,
        summary.return_percentage,
    )
    return summary


# =============================================================================
# ACCOUNT AWARE AGGREGATION
# =============================================================================


def active_accounts(accounts: Iterable[Account]) -> list[Account]:
    """Accounts that count toward portfolio totals (``is_excluded`` is False)."""
    return [a for a in accounts if not a.is_excluded]


def value_holdings(
    transactions: Iterable[TransactionRecord],
    fetch_price: PriceLookup,
) -> list[HoldingPnL]:
    """Value every symbol present in ``transactions``, one price lookup per symbol."""
    grouped = group_transactions_by_symbol(transactions)
    return [value_holding(symbol, txs, fetch_price) for symbol, txs in grouped.items()]


def calculate_holdings_summary(
    accounts: Sequence[Account],
    transactions: Iterable[TransactionRecord],
    fetch_price: PriceLookup,
) -> HoldingsSummary:
    """
    Holdings across all non-excluded accounts with portfolio totals.

    Only transactions whose ``account_id`` belongs to an active account are
    used; records without an account are ignored. Fully sold holdings are
    dropped before totals are taken.

    Args:
        accounts: all accounts, excluded ones included
        transactions: transactions of any of those accounts, any order
        fetch_price: price lookup, called once per symbol

    Returns:
        HoldingsSummary
    """
    active = active_accounts(accounts)
    if not active:
        logger.debug("No active accounts found")
        return HoldingsSummary()

    active_ids = {a.id for a in active}
    relevant = [tx for tx in transactions if tx.account_id in active_ids]

    holdings = [h for h in value_holdings(relevant, fetch_price) if h.quantity != ZERO]
    totals = calculate_total_return(holdings)

    summary = HoldingsSummary(
        holdings=holdings,
        total_value=totals.total_value,
        total_cost_basis=totals.cost_basis,
        total_pnl=totals.dollar_return,
        total_pnl_pct=totals.return_percentage,
        holdings_count=len(holdings),
    )
    logger.debug(
        "Holdings summary: %d holdings across %d/%d accounts, total value %s",
        summary.holdings_count,
        len(active),
        len(accounts),
        summary.total_value,
    )
    return summary


def calculate_account_value(
    account: Account,
    transactions: Iterable[TransactionRecord],
    fetch_price: PriceLookup,
) -> Decimal:
    """
    Current value of a single account.

    Cash-like accounts are worth their balance; investment accounts are
    worth the market value of the holdings built from their own
    transactions. An excluded account still has a value; exclusion only
    matters for portfolio totals.
    """
    if account.is_cash:
        return account.balance

    own = [tx for tx in transactions if tx.account_id == account.id]
    if not own:
        return ZERO

    value = calculate_portfolio_value(value_holdings(own, fetch_price))
    logger.debug("Account %s portfolio value: %s", account.id, value)
    return value
