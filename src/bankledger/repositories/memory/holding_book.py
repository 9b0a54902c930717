"""In-memory implementation of HoldingBook."""

import threading
from dataclasses import replace
from decimal import Decimal
from typing import Optional

from bankledger.core.exceptions import InsufficientSharesError, NotFoundError
from bankledger.domain.models import Holding


class InMemoryHoldingBook:
    """Thread-safe holding book backed by a dict."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._holdings: dict[str, Holding] = {}

    def create(self, holding: Holding) -> str:
        with self._lock:
            self._holdings[holding.holding_id] = replace(holding)
        return holding.holding_id

    def get(self, holding_id: str) -> Optional[Holding]:
        with self._lock:
            holding = self._holdings.get(holding_id)
            return replace(holding) if holding else None

    def list_by_account(self, account_id: str) -> list[Holding]:
        with self._lock:
            holdings = [replace(h) for h in self._holdings.values() if h.account_id == account_id]
        # newest insert first so equal timestamps stay newest-first after the stable sort
        holdings.reverse()
        holdings.sort(key=lambda h: h.purchased_at, reverse=True)
        return holdings

    def reduce_or_close(self, holding_id: str, shares: Decimal) -> Decimal:
        with self._lock:
            holding = self._holdings.get(holding_id)
            if holding is None:
                raise NotFoundError("Holding", holding_id)
            if shares > holding.shares:
                raise InsufficientSharesError(holding.symbol, str(shares), str(holding.shares))
            remaining = holding.shares - shares
            if remaining == 0:
                del self._holdings[holding_id]
            else:
                holding.shares = remaining
            return remaining

    def reinstate(self, holding: Holding, shares: Decimal) -> None:
        with self._lock:
            existing = self._holdings.get(holding.holding_id)
            if existing is not None:
                existing.shares += shares
            else:
                self._holdings[holding.holding_id] = replace(holding, shares=shares)

    def set_current_price(self, holding_id: str, price: Decimal) -> Holding:
        with self._lock:
            holding = self._holdings.get(holding_id)
            if holding is None:
                raise NotFoundError("Holding", holding_id)
            holding.current_price = price
            return replace(holding)
