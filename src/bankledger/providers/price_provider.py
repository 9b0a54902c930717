"""Price provider protocol."""

from decimal import Decimal
from typing import Protocol


class PriceProvider(Protocol):
    """
    Protocol for sources of current investment prices.

    The ledger never fetches prices itself; buy and sell prices are always
    supplied by the caller. Providers only feed the current-price column
    used for valuation.
    """

    def next_price(self, symbol: str, current_price: Decimal) -> Decimal:
        """Return the new current price for ``symbol``."""
        ...
