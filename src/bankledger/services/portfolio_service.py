"""Portfolio service for holding valuation."""

from decimal import Decimal
from typing import Optional

from bankledger.core.exceptions import NotFoundError
from bankledger.core.timezone import now_utc
from bankledger.domain.models import Holding
from bankledger.domain.views import HoldingView, PortfolioSummary
from bankledger.repositories.protocols import AccountStore, HoldingBook

_CENT = Decimal("0.01")


class PortfolioService:
    """
    Read-side service for an account's investments.

    Values holdings at their current price. Lots are reported individually,
    never merged by symbol.
    """

    def __init__(self, account_store: AccountStore, holding_book: HoldingBook):
        self._accounts = account_store
        self._holdings = holding_book

    def list_holdings(self, account_id: str) -> list[Holding]:
        """Open holdings for an account, newest purchase first."""
        self._require_account(account_id)
        return self._holdings.list_by_account(account_id)

    def get_holding(self, holding_id: str, account_id: Optional[str] = None) -> Holding:
        """Get a holding, optionally checking it belongs to ``account_id``."""
        holding = self._holdings.get(holding_id)
        if holding is None or (account_id is not None and holding.account_id != account_id):
            raise NotFoundError("Holding", holding_id)
        return holding

    def value_holding(self, holding: Holding) -> HoldingView:
        """
        Valuation figures for one lot.

        gain = shares x (current_price - purchase_price); gain_percent is
        relative to cost basis and None for a zero cost basis.
        """
        market_value = holding.market_value.quantize(_CENT)
        cost_basis = holding.cost_basis.quantize(_CENT)
        gain = market_value - cost_basis
        gain_percent: Optional[Decimal] = None
        if cost_basis != Decimal("0"):
            gain_percent = (gain / cost_basis * 100).quantize(_CENT)
        return HoldingView(
            holding=holding,
            market_value=market_value,
            cost_basis=cost_basis,
            gain=gain,
            gain_percent=gain_percent,
        )

    def get_summary(self, account_id: str) -> PortfolioSummary:
        """Cash balance, holdings value and total gain for one account."""
        cash_balance = self._accounts.get_balance(account_id)
        views = [self.value_holding(h) for h in self._holdings.list_by_account(account_id)]

        holdings_value = sum((v.market_value for v in views), Decimal("0"))
        cost_basis = sum((v.cost_basis for v in views), Decimal("0"))
        total_gain = holdings_value - cost_basis
        total_gain_percent: Optional[Decimal] = None
        if cost_basis != Decimal("0"):
            total_gain_percent = (total_gain / cost_basis * 100).quantize(_CENT)

        return PortfolioSummary(
            account_id=account_id,
            cash_balance=cash_balance,
            holdings=views,
            holdings_value=holdings_value,
            cost_basis=cost_basis,
            total_gain=total_gain,
            total_gain_percent=total_gain_percent,
            total_value=cash_balance + holdings_value,
            as_of=now_utc(),
        )

    def _require_account(self, account_id: str) -> None:
        if self._accounts.get_by_id(account_id) is None:
            raise NotFoundError("Account", account_id)
