"""Result and view models returned by the services."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from bankledger.domain.models import Holding, TransactionRecord


@dataclass
class BalanceChange:
    """Outcome of a deposit or withdrawal."""

    account_id: str
    new_balance: Decimal
    transaction: TransactionRecord


@dataclass
class TransferResult:
    """Outcome of a transfer: sender balance plus both linked legs."""

    from_account_id: str
    to_account_id: str
    new_balance: Decimal
    debit_leg: TransactionRecord
    credit_leg: TransactionRecord


@dataclass
class PurchaseResult:
    """Outcome of an investment purchase."""

    new_balance: Decimal
    cost: Decimal
    holding: Holding
    transaction: TransactionRecord


@dataclass
class SaleResult:
    """Outcome of an investment sale."""

    new_balance: Decimal
    proceeds: Decimal
    remaining_shares: Decimal
    transaction: TransactionRecord

    @property
    def holding_closed(self) -> bool:
        return self.remaining_shares == Decimal("0")


@dataclass
class HoldingView:
    """Holding with valuation figures."""

    holding: Holding
    market_value: Decimal
    cost_basis: Decimal
    gain: Decimal
    gain_percent: Optional[Decimal] = None


@dataclass
class PortfolioSummary:
    """Cash plus investment totals for one account."""

    account_id: str
    cash_balance: Decimal
    holdings: list[HoldingView] = field(default_factory=list)
    holdings_value: Decimal = field(default_factory=lambda: Decimal("0"))
    cost_basis: Decimal = field(default_factory=lambda: Decimal("0"))
    total_gain: Decimal = field(default_factory=lambda: Decimal("0"))
    total_gain_percent: Optional[Decimal] = None
    total_value: Decimal = field(default_factory=lambda: Decimal("0"))
    as_of: Optional[datetime] = None


@dataclass
class PriceUpdate:
    """A current-price change applied to a holding."""

    holding_id: str
    symbol: str
    old_price: Decimal
    new_price: Decimal
