"""In-memory store implementations (tests, demos, single-process use)."""

from bankledger.repositories.memory.account_store import InMemoryAccountStore
from bankledger.repositories.memory.transaction_log import InMemoryTransactionLog
from bankledger.repositories.memory.holding_book import InMemoryHoldingBook

__all__ = [
    "InMemoryAccountStore",
    "InMemoryTransactionLog",
    "InMemoryHoldingBook",
]
