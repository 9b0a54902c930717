"""Domain layer - pure business models with no external dependencies."""

from bankledger.domain.models import (
    Account,
    TransactionRecord,
    Holding,
    AccountKind,
    TransactionKind,
    InstrumentKind,
)

__all__ = [
    "Account",
    "TransactionRecord",
    "Holding",
    "AccountKind",
    "TransactionKind",
    "InstrumentKind",
]
