"""Repository layer - store abstractions and implementations."""

from bankledger.repositories.protocols import (
    AccountStore,
    TransactionLog,
    HoldingBook,
)

__all__ = [
    "AccountStore",
    "TransactionLog",
    "HoldingBook",
]
