"""
Pytest configuration and fixtures for the bank ledger tests.

This module provides:
- In-memory SQLite database fixtures
- Store fixtures parametrized over the in-memory and SQLAlchemy backends
- Faulty store wrappers for compensation and retry tests
- Factory helpers for accounts and holdings
- Service fixtures and the FastAPI test client
"""

import itertools
import uuid
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Callable, Optional

import pytest
from sqlalchemy import create_engine, StaticPool
from sqlalchemy.orm import sessionmaker, Session
from fastapi.testclient import TestClient

from bankledger.main import app
from bankledger.api.deps import get_price_provider
from bankledger.config.settings import Settings, set_settings, reset_settings
from bankledger.core.exceptions import ConflictError, StorageError
from bankledger.core.timezone import UTC
from bankledger.domain.models import (
    Account,
    AccountKind,
    Holding,
    InstrumentKind,
    TransactionRecord,
)
from bankledger.providers.stub_provider import FixedPriceProvider
from bankledger.repositories.memory import (
    InMemoryAccountStore,
    InMemoryTransactionLog,
    InMemoryHoldingBook,
)
from bankledger.repositories.sqlalchemy.database import Base, get_db, reset_database
# Import ORM models to register them with Base before creating tables
from bankledger.repositories.sqlalchemy import orm_models  # noqa: F401
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


# =============================================================================
# TIME HELPERS
# =============================================================================


def utc_datetime(
    year: int,
    month: int,
    day: int,
    hour: int = 10,
    minute: int = 0,
    second: int = 0,
) -> datetime:
    """Create a UTC-aware datetime."""
    return UTC.localize(datetime(year, month, day, hour, minute, second))


@pytest.fixture
def fixed_now() -> datetime:
    """Fixed 'now' timestamp for deterministic tests."""
    return utc_datetime(2024, 6, 15, 14, 30, 0)


class TickingClock:
    """Clock that advances one second per call, starting at ``start``."""

    def __init__(self, start: datetime):
        self._ticks = itertools.count()
        self._start = start

    def __call__(self) -> datetime:
        return self._start + timedelta(seconds=next(self._ticks))


# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest.fixture(scope="function")
def test_engine():
    """Create test database engine with shared in-memory SQLite."""
    reset_settings()

    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def test_session(test_engine) -> Session:
    """Create test database session."""
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()


# =============================================================================
# STORE FIXTURES
# =============================================================================


@pytest.fixture(params=["memory", "sqlalchemy"])
def backend(request) -> str:
    """Run the requesting test once per store backend."""
    return request.param


@pytest.fixture
def account_store(backend, request):
    """Provide an AccountStore for the current backend."""
    if backend == "memory":
        return InMemoryAccountStore()
    return SqlAlchemyAccountStore(request.getfixturevalue("test_session"))


@pytest.fixture
def transaction_log(backend, request):
    """Provide a TransactionLog for the current backend."""
    if backend == "memory":
        return InMemoryTransactionLog()
    return SqlAlchemyTransactionLog(request.getfixturevalue("test_session"))


@pytest.fixture
def holding_book(backend, request):
    """Provide a HoldingBook for the current backend."""
    if backend == "memory":
        return InMemoryHoldingBook()
    return SqlAlchemyHoldingBook(request.getfixturevalue("test_session"))


@pytest.fixture
def sql_account_store(test_session) -> SqlAlchemyAccountStore:
    """Provide a SQLAlchemy AccountStore regardless of backend."""
    return SqlAlchemyAccountStore(test_session)


@pytest.fixture
def sql_transaction_log(test_session) -> SqlAlchemyTransactionLog:
    """Provide a SQLAlchemy TransactionLog regardless of backend."""
    return SqlAlchemyTransactionLog(test_session)


@pytest.fixture
def sql_holding_book(test_session) -> SqlAlchemyHoldingBook:
    """Provide a SQLAlchemy HoldingBook regardless of backend."""
    return SqlAlchemyHoldingBook(test_session)


# =============================================================================
# FAULTY STORES
# =============================================================================


class FailingTransactionLog:
    """
    TransactionLog wrapper whose appends always fail.

    Reads go to the wrapped log so tests can assert nothing was written.
    """

    def __init__(self, inner):
        self._inner = inner
        self.append_calls = 0

    def append(self, record: TransactionRecord) -> str:
        self.append_calls += 1
        raise StorageError("Failed to append transaction: disk full")

    def append_linked(self, first: TransactionRecord, second: TransactionRecord):
        self.append_calls += 1
        raise StorageError("Failed to append transfer legs: disk full")

    def get_by_id(self, txn_id: str) -> Optional[TransactionRecord]:
        return self._inner.get_by_id(txn_id)

    def query(self, account_id, start=None, end=None, limit=None):
        return self._inner.query(account_id, start=start, end=end, limit=limit)


class FaultyAccountStore:
    """
    AccountStore wrapper that injects faults into ``apply_balance_delta``.

    The first ``conflicts`` calls raise ConflictError without touching the
    wrapped store. Calls for an account in ``fail_accounts`` raise
    StorageError once ``fail_after`` successful writes have happened.
    """

    def __init__(
        self,
        inner,
        conflicts: int = 0,
        fail_accounts: tuple[str, ...] = (),
        fail_after: int = 0,
    ):
        self._inner = inner
        self._conflicts = conflicts
        self._fail_accounts = set(fail_accounts)
        self._fail_after = fail_after
        self.writes = 0
        self.attempts = 0

    def __getattr__(self, name):
        return getattr(self._inner, name)

    def apply_balance_delta(self, account_id: str, delta: Decimal, expected_balance: Decimal) -> Decimal:
        self.attempts += 1
        if self._conflicts > 0:
            self._conflicts -= 1
            raise ConflictError(account_id, str(expected_balance), "changed")
        if account_id in self._fail_accounts and self.writes >= self._fail_after:
            raise StorageError(f"Failed to update balance of {account_id}")
        result = self._inner.apply_balance_delta(account_id, delta, expected_balance)
        self.writes += 1
        return result


class FailingHoldingBook:
    """HoldingBook wrapper whose ``create`` always fails."""

    def __init__(self, inner):
        self._inner = inner

    def __getattr__(self, name):
        return getattr(self._inner, name)

    def create(self, holding: Holding) -> str:
        raise StorageError("Failed to create holding: constraint violated")


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def ledger_engine(account_store, transaction_log, holding_book, fixed_now) -> LedgerEngine:
    """Provide a LedgerEngine with a ticking clock and no retry backoff."""
    return LedgerEngine(
        account_store=account_store,
        transaction_log=transaction_log,
        holding_book=holding_book,
        max_retries=3,
        backoff_seconds=0,
        clock=TickingClock(fixed_now),
    )


@pytest.fixture
def account_service(account_store, transaction_log) -> AccountService:
    """Provide test AccountService."""
    return AccountService(
        account_store=account_store,
        transaction_log=transaction_log,
        default_query_limit=50,
    )


@pytest.fixture
def portfolio_service(account_store, holding_book) -> PortfolioService:
    """Provide test PortfolioService."""
    return PortfolioService(account_store=account_store, holding_book=holding_book)


@pytest.fixture
def fixed_prices() -> FixedPriceProvider:
    """Deterministic price provider."""
    return FixedPriceProvider({
        "AAPL": Decimal("190.00"),
        "MSFT": Decimal("400.00"),
    })


@pytest.fixture
def price_feed_service(holding_book, fixed_prices) -> PriceFeedService:
    """Provide test PriceFeedService with fixed prices."""
    return PriceFeedService(holding_book=holding_book, provider=fixed_prices)


# =============================================================================
# FACTORY FIXTURES
# =============================================================================


@pytest.fixture
def account_factory(account_store, fixed_now) -> Callable[..., Account]:
    """Factory for accounts with a preset balance, written straight to the store."""
    numbers = itertools.count(1000000001)

    def _create_account(
        balance: Decimal = Decimal("0.00"),
        account_id: Optional[str] = None,
        account_number: Optional[str] = None,
        owner_id: str = "user-1",
        kind: AccountKind = AccountKind.CHECKING,
    ) -> Account:
        return account_store.create(Account(
            account_id=account_id or str(uuid.uuid4()),
            account_number=account_number or str(next(numbers)),
            owner_id=owner_id,
            kind=kind,
            balance=Decimal(balance),
            created_at=fixed_now,
        ))

    return _create_account


@pytest.fixture
def holding_factory(holding_book, fixed_now) -> Callable[..., Holding]:
    """Factory for holdings written straight to the book."""

    def _create_holding(
        account_id: str,
        symbol: str = "AAPL",
        shares: Decimal = Decimal("10"),
        purchase_price: Decimal = Decimal("150.00"),
        current_price: Optional[Decimal] = None,
        purchased_at: Optional[datetime] = None,
        instrument_kind: InstrumentKind = InstrumentKind.STOCK,
    ) -> Holding:
        holding = Holding(
            holding_id=str(uuid.uuid4()),
            account_id=account_id,
            instrument_kind=instrument_kind,
            symbol=symbol,
            shares=Decimal(shares),
            purchase_price=Decimal(purchase_price),
            current_price=Decimal(current_price if current_price is not None else purchase_price),
            purchased_at=purchased_at or fixed_now,
        )
        holding_book.create(holding)
        return holding

    return _create_holding


# =============================================================================
# API TEST CLIENT FIXTURE
# =============================================================================


@pytest.fixture
def client(test_engine, tmp_path) -> TestClient:
    """Provide FastAPI test client with test database and fixed prices."""
    reset_database()
    set_settings(Settings(data_dir=tmp_path, balance_update_backoff_seconds=0))
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

    def override_get_db():
        session = TestSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_price_provider] = lambda: FixedPriceProvider({
        "AAPL": Decimal("200.00"),
    })
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
    reset_database()
    reset_settings()


# =============================================================================
# HELPER FUNCTIONS (exported for use in tests)
# =============================================================================


def record_count(transaction_log, account_id: str) -> int:
    """Number of ledger records for an account, ignoring the default limit."""
    return len(transaction_log.query(account_id))
