"""SQLAlchemy store implementations."""

from bankledger.repositories.sqlalchemy.database import (
    get_engine,
    get_session_factory,
    get_db,
    get_session,
    init_db,
    init_db_with_path,
    reset_database,
    storage_guard,
    Base,
)
from bankledger.repositories.sqlalchemy.account_store import SqlAlchemyAccountStore
from bankledger.repositories.sqlalchemy.transaction_log import SqlAlchemyTransactionLog
from bankledger.repositories.sqlalchemy.holding_book import SqlAlchemyHoldingBook

__all__ = [
    "get_engine",
    "get_session_factory",
    "get_db",
    "get_session",
    "init_db",
    "init_db_with_path",
    "reset_database",
    "storage_guard",
    "Base",
    "SqlAlchemyAccountStore",
    "SqlAlchemyTransactionLog",
    "SqlAlchemyHoldingBook",
]
