"""Price feed service: applies current-price updates to holdings."""

import logging
from decimal import Decimal
from typing import Optional

from bankledger.core.money import Numeric, require_positive
from bankledger.domain.models import Holding
from bankledger.domain.views import PriceUpdate
from bankledger.providers.price_provider import PriceProvider
from bankledger.repositories.protocols import HoldingBook

logger = logging.getLogger(__name__)


class PriceFeedService:
    """
    Collaborator that keeps ``Holding.current_price`` up to date.

    Purchase price and balances are never touched here; only valuation
    changes.
    """

    def __init__(self, holding_book: HoldingBook, provider: PriceProvider):
        self._holdings = holding_book
        self._provider = provider

    def set_current_price(self, holding_id: str, price: Numeric) -> Holding:
        """Set the current price of one holding."""
        price = require_positive("price", price)
        return self._holdings.set_current_price(holding_id, price)

    def refresh_prices(self, account_id: str) -> list[PriceUpdate]:
        """
        Ask the provider for a new price for every holding of an account.

        Lots of the same symbol move together within one refresh.
        """
        updates: list[PriceUpdate] = []
        quoted: dict[str, Decimal] = {}

        for holding in self._holdings.list_by_account(account_id):
            new_price: Optional[Decimal] = quoted.get(holding.symbol)
            if new_price is None:
                new_price = self._provider.next_price(holding.symbol, holding.current_price)
                quoted[holding.symbol] = new_price
            if new_price == holding.current_price:
                continue
            self._holdings.set_current_price(holding.holding_id, new_price)
            updates.append(
                PriceUpdate(
                    holding_id=holding.holding_id,
                    symbol=holding.symbol,
                    old_price=holding.current_price,
                    new_price=new_price,
                )
            )

        logger.debug("Refreshed %d holding prices for %s", len(updates), account_id)
        return updates
