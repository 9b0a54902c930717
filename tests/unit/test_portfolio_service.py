"""
Unit tests for PortfolioService.

Tests cover:
- Listing holdings (lots kept separate, newest first)
- Per-holding valuation and gain percentages
- Portfolio summary totals
"""

import pytest
from datetime import timedelta
from decimal import Decimal

from bankledger.services import PortfolioService
from bankledger.core.exceptions import NotFoundError


class TestListHoldings:
    """Tests for listing holdings."""

    def test_lots_listed_separately_newest_first(
        self,
        portfolio_service: PortfolioService,
        account_factory,
        holding_factory,
        fixed_now,
    ):
        """
        GIVEN two AAPL lots bought a day apart
        WHEN I list holdings
        THEN both lots are returned, newest first
        """
        account = account_factory()
        older = holding_factory(account.account_id, purchased_at=fixed_now - timedelta(days=1))
        newer = holding_factory(account.account_id, purchased_at=fixed_now)

        holdings = portfolio_service.list_holdings(account.account_id)

        assert [h.holding_id for h in holdings] == [newer.holding_id, older.holding_id]

    def test_list_holdings_unknown_account(self, portfolio_service: PortfolioService):
        """
        GIVEN no accounts
        WHEN I list holdings of an unknown account
        THEN NotFoundError is raised
        """
        with pytest.raises(NotFoundError):
            portfolio_service.list_holdings("missing")

    def test_get_holding_checks_owner(
        self,
        portfolio_service: PortfolioService,
        account_factory,
        holding_factory,
    ):
        """
        GIVEN a holding owned by account A
        WHEN I get it on behalf of account B
        THEN NotFoundError is raised
        """
        a = account_factory()
        b = account_factory()
        holding = holding_factory(a.account_id)

        assert portfolio_service.get_holding(holding.holding_id).holding_id == holding.holding_id
        assert portfolio_service.get_holding(holding.holding_id, a.account_id).symbol == "AAPL"
        with pytest.raises(NotFoundError):
            portfolio_service.get_holding(holding.holding_id, b.account_id)


class TestValuation:
    """Tests for holding valuation."""

    def test_value_holding_gain(
        self,
        portfolio_service: PortfolioService,
        account_factory,
        holding_factory,
    ):
        """
        GIVEN 10 shares bought at 150.00 now priced at 165.00
        WHEN I value the holding
        THEN market value 1650.00, cost 1500.00, gain 150.00 (10.00%)
        """
        account = account_factory()
        holding = holding_factory(
            account.account_id,
            shares=Decimal("10"),
            purchase_price=Decimal("150.00"),
            current_price=Decimal("165.00"),
        )

        view = portfolio_service.value_holding(holding)

        assert view.market_value == Decimal("1650.00")
        assert view.cost_basis == Decimal("1500.00")
        assert view.gain == Decimal("150.00")
        assert view.gain_percent == Decimal("10.00")

    def test_value_holding_loss(
        self,
        portfolio_service: PortfolioService,
        account_factory,
        holding_factory,
    ):
        """
        GIVEN 3 shares bought at 10.00 now priced at 9.00
        WHEN I value the holding
        THEN the gain is -3.00 (-10.00%)
        """
        account = account_factory()
        holding = holding_factory(
            account.account_id,
            symbol="MSFT",
            shares=Decimal("3"),
            purchase_price=Decimal("10.00"),
            current_price=Decimal("9.00"),
        )

        view = portfolio_service.value_holding(holding)

        assert view.gain == Decimal("-3.00")
        assert view.gain_percent == Decimal("-10.00")


class TestSummary:
    """Tests for the portfolio summary."""

    def test_summary_totals(
        self,
        portfolio_service: PortfolioService,
        account_factory,
        holding_factory,
    ):
        """
        GIVEN cash 500.00 and two lots (gain 100.00 and loss 20.00)
        WHEN I get the summary
        THEN holdings value, cost basis, gain and total value add up
        """
        account = account_factory(balance=Decimal("500.00"))
        holding_factory(
            account.account_id,
            shares=Decimal("10"),
            purchase_price=Decimal("100.00"),
            current_price=Decimal("110.00"),
        )
        holding_factory(
            account.account_id,
            symbol="MSFT",
            shares=Decimal("2"),
            purchase_price=Decimal("200.00"),
            current_price=Decimal("190.00"),
        )

        summary = portfolio_service.get_summary(account.account_id)

        assert summary.cash_balance == Decimal("500.00")
        assert len(summary.holdings) == 2
        assert summary.holdings_value == Decimal("1480.00")
        assert summary.cost_basis == Decimal("1400.00")
        assert summary.total_gain == Decimal("80.00")
        assert summary.total_gain_percent == Decimal("5.71")
        assert summary.total_value == Decimal("1980.00")
        assert summary.as_of is not None

    def test_summary_without_holdings(
        self,
        portfolio_service: PortfolioService,
        account_factory,
    ):
        """
        GIVEN an account with cash only
        WHEN I get the summary
        THEN holdings are empty and the gain percent is undefined
        """
        account = account_factory(balance=Decimal("12.00"))

        summary = portfolio_service.get_summary(account.account_id)

        assert summary.holdings == []
        assert summary.holdings_value == Decimal("0")
        assert summary.total_gain_percent is None
        assert summary.total_value == Decimal("12.00")

    def test_summary_unknown_account(self, portfolio_service: PortfolioService):
        """
        GIVEN no accounts
        WHEN I get a summary for an unknown account
        THEN NotFoundError is raised
        """
        with pytest.raises(NotFoundError):
            portfolio_service.get_summary("missing")
