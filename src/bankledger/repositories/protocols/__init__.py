"""Store protocol definitions (interfaces)."""

from bankledger.repositories.protocols.account_store import AccountStore
from bankledger.repositories.protocols.transaction_log import TransactionLog
from bankledger.repositories.protocols.holding_book import HoldingBook

__all__ = [
    "AccountStore",
    "TransactionLog",
    "HoldingBook",
]
