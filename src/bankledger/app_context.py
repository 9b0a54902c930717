"""Application context for in-process service management.

Wires the SQLAlchemy stores, the ledger engine and the read-side services
together without HTTP. Used by scripts and other embedders.
"""

from pathlib import Path
from typing import Optional

from sqlalchemy.orm import Session

from bankledger.config.settings import Settings, set_settings, get_settings
from bankledger.repositories.sqlalchemy.database import (
    init_db_with_path,
    reset_database,
    get_session,
)
from bankledger.repositories.sqlalchemy import (
    SqlAlchemyAccountStore,
    SqlAlchemyTransactionLog,
    SqlAlchemyHoldingBook,
)
from bankledger.providers.price_provider import PriceProvider
from bankledger.providers.stub_provider import SimulatedPriceProvider
from bankledger.services import (
    LedgerEngine,
    AccountService,
    PortfolioService,
    PriceFeedService,
)


class AppContext:
    """
    Application context providing in-process access to all services.

    Services are created lazily and share one database session.
    """

    def __init__(
        self,
        data_dir: Optional[Path] = None,
        price_provider: Optional[PriceProvider] = None,
    ):
        self._data_dir = data_dir
        self._price_provider = price_provider
        self._session: Optional[Session] = None

        self._engine: Optional[LedgerEngine] = None
        self._account_service: Optional[AccountService] = None
        self._portfolio_service: Optional[PortfolioService] = None
        self._price_feed_service: Optional[PriceFeedService] = None

    def initialize(self, data_dir: Optional[Path] = None) -> None:
        """
        Initialize or reinitialize the application with a data directory.

        Args:
            data_dir: Data directory path. Uses default if not provided.
        """
        if data_dir:
            self._data_dir = data_dir

        settings = Settings(data_dir=self._data_dir)
        set_settings(settings)

        reset_database()
        init_db_with_path(settings.get_data_dir() / "ledger.db")

        self._reset_services()

    def _get_session(self) -> Session:
        if self._session is None:
            self._session = get_session()
        return self._session

    def _reset_services(self) -> None:
        if self._session is not None:
            self._session.close()
        self._session = None
        self._engine = None
        self._account_service = None
        self._portfolio_service = None
        self._price_feed_service = None

    @property
    def engine(self) -> LedgerEngine:
        """Get the LedgerEngine instance."""
        if self._engine is None:
            settings = get_settings()
            session = self._get_session()
            self._engine = LedgerEngine(
                account_store=SqlAlchemyAccountStore(session),
                transaction_log=SqlAlchemyTransactionLog(session),
                holding_book=SqlAlchemyHoldingBook(session),
                max_retries=settings.balance_update_max_retries,
                backoff_seconds=settings.balance_update_backoff_seconds,
            )
        return self._engine

    @property
    def accounts(self) -> AccountService:
        """Get the AccountService instance."""
        if self._account_service is None:
            session = self._get_session()
            self._account_service = AccountService(
                account_store=SqlAlchemyAccountStore(session),
                transaction_log=SqlAlchemyTransactionLog(session),
                default_query_limit=get_settings().transaction_query_default_limit,
            )
        return self._account_service

    @property
    def portfolio(self) -> PortfolioService:
        """Get the PortfolioService instance."""
        if self._portfolio_service is None:
            session = self._get_session()
            self._portfolio_service = PortfolioService(
                account_store=SqlAlchemyAccountStore(session),
                holding_book=SqlAlchemyHoldingBook(session),
            )
        return self._portfolio_service

    @property
    def prices(self) -> PriceFeedService:
        """Get the PriceFeedService instance."""
        if self._price_feed_service is None:
            if self._price_provider is None:
                settings = get_settings()
                self._price_provider = SimulatedPriceProvider(
                    seed=settings.price_feed_seed,
                    max_move_percent=settings.price_move_max_percent,
                )
            self._price_feed_service = PriceFeedService(
                holding_book=SqlAlchemyHoldingBook(self._get_session()),
                provider=self._price_provider,
            )
        return self._price_feed_service

    def close(self) -> None:
        """Clean up resources."""
        self._reset_services()

