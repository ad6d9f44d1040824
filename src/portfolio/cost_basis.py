"""
Cost Basis Engine — Running quantity/cost and per-holding P&L

Folds a chronologically ordered transaction stream for one instrument into a
HoldingState, then values it at a current price.

METHOD (simplified, NOT per-lot FIFO):
    buy:   quantity   += q
           total_cost += q × unit_price + fee
    sell:  quantity == 0        → no-op
           sell_ratio  = |q| / quantity
           total_cost -= total_cost × sell_ratio
           quantity   -= |q|
    dividend / fee / interest   → no effect on quantity or cost

    average_cost = total_cost / quantity   (0 when quantity <= 0)

    Remaining cost is reduced proportionally, so with lots bought at
    different prices the remaining basis is the blended average rather than
    the basis of the unsold lots.

P&L:
    current_value      = quantity × current_price   (0 without a price)
    unrealized_pnl     = current_value − cost_basis
    unrealized_pnl_pct = unrealized_pnl / cost_basis × 100   (0 when cost_basis == 0)

A sell larger than the quantity held makes the state meaningless; it is
applied as written and flagged with ``oversold=True``.
"""

import logging
from collections import defaultdict
from decimal import Decimal
from typing import Any, Iterable, Sequence

from src.core.contracts.providers import PriceLookup
from src.core.domain.holding import HoldingPnL, HoldingState
from src.core.domain.transaction import TransactionRecord, TransactionType
from src.core.math.decimal_helpers import HUNDRED, ZERO, ensure_decimal, safe_divide
from src.core.result import Err

logger = logging.getLogger(__name__)


# =============================================================================
# COST BASIS FOLD
# =============================================================================


def _average_cost(quantity: Decimal, total_cost: Decimal) -> Decimal:
    if quantity <= ZERO:
        return ZERO
    return total_cost / quantity


def apply_transaction(state: HoldingState, tx: TransactionRecord) -> HoldingState:
    """
    One step of the cost-basis fold.

    Args:
        state: HoldingState before ``tx``
        tx: next transaction in date order

    Returns:
        New HoldingState (``state`` is not modified)
    """
    quantity = state.quantity
    total_cost = state.total_cost
    oversold = state.oversold

    if tx.type == TransactionType.BUY:
        quantity += tx.abs_quantity
        total_cost += tx.gross_amount + tx.fee

    elif tx.type == TransactionType.SELL:
        sell_qty = tx.abs_quantity

        if sell_qty > quantity:
            oversold = True
            logger.warning(
                "Sell of %s %s exceeds held quantity %s on %s",
                sell_qty,
                state.symbol or tx.symbol or "?",
                quantity,
                tx.date,
            )

        if quantity != ZERO:
            sell_ratio = sell_qty / quantity
            total_cost -= total_cost * sell_ratio
            quantity -= sell_qty

    else:
        return state

    return HoldingState(
        symbol=state.symbol,
        quantity=quantity,
        total_cost=total_cost,
        average_cost=_average_cost(quantity, total_cost),
        oversold=oversold,
    )


def calculate_cost_basis(
    transactions: Iterable[TransactionRecord],
    symbol: str = "",
) -> HoldingState:
    """
    Fold ``transactions`` (already in date order) into a HoldingState.

    Examples:
        >>> from datetime import date
        >>> state = calculate_cost_basis([
        ...     TransactionRecord(type="buy", quantity=10, unit_price=100, date=date(2024, 1, 2)),
        ...     TransactionRecord(type="buy", quantity=10, unit_price=150, date=date(2024, 2, 1)),
        ...     TransactionRecord(type="sell", quantity=-5, unit_price=160, date=date(2024, 3, 1)),
        ... ])
        >>> state.quantity, state.total_cost
        (Decimal('15'), Decimal('1875.00'))
    """
    state = HoldingState(symbol=symbol)
    count = 0
    for tx in transactions:
        state = apply_transaction(state, tx)
        count += 1

    logger.debug(
        "Cost basis for %s over %d transactions: qty=%s cost=%s avg=%s",
        symbol or "?",
        count,
        state.quantity,
        state.total_cost,
        state.average_cost,
    )
    return state


# =============================================================================
# PROFIT / LOSS
# =============================================================================


def calculate_holding_pnl(
    quantity: Decimal | int | str,
    current_price: Decimal | int | str | None,
    cost_basis: Decimal | int | str,
    symbol: str = "",
    average_cost: Decimal | int | str = ZERO,
    price_error: Any = None,
) -> HoldingPnL:
    """
    Unrealized P&L of a holding at ``current_price``.

    ``current_price=None`` means no quote is available: current_value is 0
    and the loss equals the full cost basis. Pass the upstream failure as
    ``price_error`` so callers can tell this apart from a real zero.

    Examples:
        >>> pnl = calculate_holding_pnl(Decimal("20"), Decimal("200"), Decimal("2500"))
        >>> pnl.current_value, pnl.unrealized_pnl, pnl.unrealized_pnl_pct
        (Decimal('4000'), Decimal('1500'), Decimal('60.0'))
    """
    quantity = ensure_decimal(quantity)
    cost_basis = ensure_decimal(cost_basis)
    price = ensure_decimal(current_price) if current_price is not None else None

    current_value = quantity * price if price is not None else ZERO
    unrealized_pnl = current_value - cost_basis
    unrealized_pnl_pct = safe_divide(unrealized_pnl, cost_basis) * HUNDRED

    return HoldingPnL(
        symbol=symbol,
        quantity=quantity,
        current_price=price,
        current_value=current_value,
        cost_basis=cost_basis,
        average_cost=ensure_decimal(average_cost),
        unrealized_pnl=unrealized_pnl,
        unrealized_pnl_pct=unrealized_pnl_pct,
        price_error=price_error,
    )


# =============================================================================
# PIPELINE
# =============================================================================


def group_transactions_by_symbol(
    transactions: Iterable[TransactionRecord],
) -> dict[str, list[TransactionRecord]]:
    """
    Split a mixed transaction list into per-symbol streams sorted by date.

    The sort is stable, so same-day transactions keep their input order.
    Records without a symbol are skipped.
    """
    grouped: dict[str, list[TransactionRecord]] = defaultdict(list)
    for tx in transactions:
        if tx.symbol is None:
            continue
        grouped[tx.symbol].append(tx)

    return {symbol: sorted(txs, key=lambda t: t.date) for symbol, txs in grouped.items()}


def value_holding(
    symbol: str,
    transactions: Sequence[TransactionRecord],
    fetch_price: PriceLookup,
) -> HoldingPnL:
    """
    Cost basis → price lookup → HoldingPnL for one symbol.

    A failed lookup is not retried and no price is guessed: the result has
    ``current_price=None`` and ``price_error`` set to the provider's reason.
    """
    state = calculate_cost_basis(transactions, symbol=symbol)

    quote = fetch_price(symbol)
    if isinstance(quote, Err):
        logger.warning("No current price for %s: %s", symbol, quote.error)
        return calculate_holding_pnl(
            state.quantity,
            None,
            state.total_cost,
            symbol=symbol,
            average_cost=state.average_cost,
            price_error=quote.error,
        )

    return calculate_holding_pnl(
        state.quantity,
        quote.value,
        state.total_cost,
        symbol=symbol,
        average_cost=state.average_cost,
    )
