#!/usr/bin/env python3
"""
Seed a data directory with demo accounts and activity.
Creates a checking and an investment account for one owner, moves money
between them, buys a few lots and sells part of one.

Usage: ./venv/bin/python scripts/seed_demo_data.py [data_dir]
"""

import random
import sys
from decimal import Decimal
from pathlib import Path

from bankledger.app_context import AppContext
from bankledger.config.logging_config import setup_logging
from bankledger.domain.models import AccountKind, InstrumentKind

OWNER_ID = "demo-user"

STOCKS = [
    ("AAPL", Decimal("180.00")),
    ("MSFT", Decimal("420.00")),
    ("GOOGL", Decimal("160.00")),
    ("NVDA", Decimal("500.00")),
]


def seed(data_dir: Path) -> None:
    """Create demo accounts and run a handful of operations."""
    ctx = AppContext()
    ctx.initialize(data_dir)
    try:
        checking = ctx.accounts.open_account(OWNER_ID, AccountKind.CHECKING)
        investing = ctx.accounts.open_account(OWNER_ID, AccountKind.INVESTMENT)
        print(f"✓ Checking account {checking.account_number}")
        print(f"✓ Investment account {investing.account_number}")

        ctx.engine.deposit(checking.account_id, Decimal("25000.00"), "Initial funding")
        ctx.engine.withdraw(checking.account_id, Decimal("300.00"), "ATM")
        ctx.engine.transfer(
            checking.account_id,
            investing.account_number,
            Decimal("15000.00"),
            "Fund brokerage",
        )
        print("✓ Cash activity recorded")

        rng = random.Random(42)
        lots = []
        for symbol, price in STOCKS:
            shares = Decimal(rng.randint(3, 15))
            result = ctx.engine.purchase_investment(
                investing.account_id, InstrumentKind.STOCK, symbol, shares, price
            )
            lots.append(result.holding)
            print(f"✓ Bought {shares} {symbol} @ {price}")

        first = lots[0]
        sale = ctx.engine.sell_investment(
            first.holding_id,
            investing.account_id,
            Decimal("2"),
            first.purchase_price + Decimal("5.00"),
        )
        print(f"✓ Sold 2 {first.symbol}, proceeds {sale.proceeds}")

        ctx.prices.refresh_prices(investing.account_id)
        summary = ctx.portfolio.get_summary(investing.account_id)
        print("=" * 60)
        print(f"Cash:     {summary.cash_balance}")
        print(f"Holdings: {summary.holdings_value}")
        print(f"Total:    {summary.total_value}")
    finally:
        ctx.close()


def main() -> int:
    setup_logging()
    data_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else Path.cwd() / "demo-data"
    seed(data_dir)
    return 0


if __name__ == "__main__":
    sys.exit(main())
