"""Holding book protocol."""

from decimal import Decimal
from typing import Protocol, Optional

from bankledger.domain.models import Holding


class HoldingBook(Protocol):
    """Interface for per-account investment lots."""

    def create(self, holding: Holding) -> str:
        """Persist a new lot; returns its holding_id."""
        ...

    def get(self, holding_id: str) -> Optional[Holding]:
        """Retrieve a holding by ID."""
        ...

    def list_by_account(self, account_id: str) -> list[Holding]:
        """List open holdings for an account, newest purchase first."""
        ...

    def reduce_or_close(self, holding_id: str, shares: Decimal) -> Decimal:
        """
        Remove ``shares`` from a holding.

        Deletes the row when all shares are removed. Raises NotFoundError if
        absent and InsufficientSharesError (holding untouched) when ``shares``
        exceeds the holding. Returns remaining shares.
        """
        ...

    def reinstate(self, holding: Holding, shares: Decimal) -> None:
        """
        Give ``shares`` back to a lot that was reduced or closed.

        Re-inserts ``holding`` with ``shares`` if its row no longer exists.
        """
        ...

    def set_current_price(self, holding_id: str, price: Decimal) -> Holding:
        """Update the current price of a holding."""
        ...
