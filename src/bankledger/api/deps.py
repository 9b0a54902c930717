"""Dependency injection for FastAPI."""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from bankledger.config.settings import get_settings
from bankledger.providers.price_provider import PriceProvider
from bankledger.providers.stub_provider import SimulatedPriceProvider
from bankledger.repositories.sqlalchemy.database import get_db
from bankledger.repositories.sqlalchemy import (
    SqlAlchemyAccountStore,
    SqlAlchemyTransactionLog,
    SqlAlchemyHoldingBook,
)
from bankledger.services import (
    LedgerEngine,
    AccountService,
    PortfolioService,
    PriceFeedService,
)


def get_account_store(db: Session = Depends(get_db)) -> SqlAlchemyAccountStore:
    """Provide AccountStore instance."""
    return SqlAlchemyAccountStore(db)


def get_transaction_log(db: Session = Depends(get_db)) -> SqlAlchemyTransactionLog:
    """Provide TransactionLog instance."""
    return SqlAlchemyTransactionLog(db)


def get_holding_book(db: Session = Depends(get_db)) -> SqlAlchemyHoldingBook:
    """Provide HoldingBook instance."""
    return SqlAlchemyHoldingBook(db)


@lru_cache
def get_price_provider() -> PriceProvider:
    """Provide the process-wide simulated price provider."""
    settings = get_settings()
    return SimulatedPriceProvider(
        seed=settings.price_feed_seed,
        max_move_percent=settings.price_move_max_percent,
    )


def get_ledger_engine(
    account_store: SqlAlchemyAccountStore = Depends(get_account_store),
    transaction_log: SqlAlchemyTransactionLog = Depends(get_transaction_log),
    holding_book: SqlAlchemyHoldingBook = Depends(get_holding_book),
) -> LedgerEngine:
    """Provide LedgerEngine instance."""
    settings = get_settings()
    return LedgerEngine(
        account_store=account_store,
        transaction_log=transaction_log,
        holding_book=holding_book,
        max_retries=settings.balance_update_max_retries,
        backoff_seconds=settings.balance_update_backoff_seconds,
    )


def get_account_service(
    account_store: SqlAlchemyAccountStore = Depends(get_account_store),
    transaction_log: SqlAlchemyTransactionLog = Depends(get_transaction_log),
) -> AccountService:
    """Provide AccountService instance."""
    return AccountService(
        account_store=account_store,
        transaction_log=transaction_log,
        default_query_limit=get_settings().transaction_query_default_limit,
    )


def get_portfolio_service(
    account_store: SqlAlchemyAccountStore = Depends(get_account_store),
    holding_book: SqlAlchemyHoldingBook = Depends(get_holding_book),
) -> PortfolioService:
    """Provide PortfolioService instance."""
    return PortfolioService(account_store=account_store, holding_book=holding_book)


def get_price_feed_service(
    holding_book: SqlAlchemyHoldingBook = Depends(get_holding_book),
    provider: PriceProvider = Depends(get_price_provider),
) -> PriceFeedService:
    """Provide PriceFeedService instance."""
    return PriceFeedService(holding_book=holding_book, provider=provider)
