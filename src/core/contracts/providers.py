"""
Collaborator Ports — Price lookup and benchmark data

The engine performs no I/O. Market data reaches it through these two
interfaces, and every failure they report comes back as ``Err(reason)``,
which the calculators propagate unchanged (no retry, no substitute value).
"""

import logging
from decimal import Decimal
from typing import Any, Callable, Final, Protocol

from src.core.result import Err, Ok, Result

logger = logging.getLogger(__name__)

# fetch_price(symbol) -> Ok(Decimal) | Err(reason)
PriceLookup = Callable[[str], Result[Decimal, Any]]


class BenchmarkDataProvider(Protocol):
    """Source of benchmark quotes and period returns."""

    def fetch_price(self, symbol: str) -> Result[Decimal, Any]:
        """Current quote for ``symbol``."""
        ...

    def fetch_period_return(self, symbol: str, days: int) -> Result[Decimal, Any]:
        """Return of ``symbol`` over the last ``days`` as a fraction (0.10 = 10%)."""
        ...


# =============================================================================
# ESTIMATED RETURNS
# =============================================================================

# Long-run average annual returns, used when no return history is available
ESTIMATED_ANNUAL_RETURNS: Final[dict[str, Decimal]] = {
    "SPY": Decimal("0.10"),
    "VTI": Decimal("0.09"),
    "VTIAX": Decimal("0.07"),
}
DEFAULT_ESTIMATED_RETURN: Final[Decimal] = Decimal("0.08")


class EstimatedBenchmarkProvider:
    """
    Benchmark provider backed by a plain price lookup.

    Confirms the benchmark is quotable, then answers with its long-run
    average return instead of a measured one. The period length does not
    change the estimate.
    """

    def __init__(self, fetch_price: PriceLookup):
        self._fetch_price = fetch_price

    def fetch_price(self, symbol: str) -> Result[Decimal, Any]:
        return self._fetch_price(symbol)

    def fetch_period_return(self, symbol: str, days: int) -> Result[Decimal, Any]:
        quote = self._fetch_price(symbol)
        if isinstance(quote, Err):
            logger.warning("Benchmark quote for %s unavailable: %s", symbol, quote.error)
            return quote

        estimate = ESTIMATED_ANNUAL_RETURNS.get(symbol, DEFAULT_ESTIMATED_RETURN)
        logger.debug("Estimated %s return over %d days: %s", symbol, days, estimate)
        return Ok(estimate)
