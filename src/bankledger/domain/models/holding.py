"""Holding domain model."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from bankledger.domain.models.enums import InstrumentKind


@dataclass
class Holding:
    """
    A single purchased lot of an investment instrument.

    Lots are never merged: buying the same symbol twice yields two holdings.
    A holding exists only while ``shares > 0``; selling the last share
    removes the row.
    """

    holding_id: str
    account_id: str
    instrument_kind: InstrumentKind
    symbol: str
    shares: Decimal
    purchase_price: Decimal
    current_price: Decimal
    purchased_at: Optional[datetime] = field(default=None)

    def __post_init__(self) -> None:
        if isinstance(self.instrument_kind, str):
            self.instrument_kind = InstrumentKind(self.instrument_kind)

    @property
    def market_value(self) -> Decimal:
        return self.shares * self.current_price

    @property
    def cost_basis(self) -> Decimal:
        return self.shares * self.purchase_price

    @property
    def unrealized_gain(self) -> Decimal:
        """Market value minus cost basis."""
        return self.market_value - self.cost_basis
