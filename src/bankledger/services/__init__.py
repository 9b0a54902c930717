"""Service layer - business logic orchestration."""

from bankledger.services.ledger_engine import LedgerEngine
from bankledger.services.account_service import AccountService
from bankledger.services.portfolio_service import PortfolioService
from bankledger.services.price_feed_service import PriceFeedService

__all__ = [
    "LedgerEngine",
    "AccountService",
    "PortfolioService",
    "PriceFeedService",
]
