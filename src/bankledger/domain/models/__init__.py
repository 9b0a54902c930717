"""Domain models package."""

from bankledger.domain.models.enums import AccountKind, TransactionKind, InstrumentKind
from bankledger.domain.models.account import Account
from bankledger.domain.models.transaction import TransactionRecord
from bankledger.domain.models.holding import Holding

__all__ = [
    "AccountKind",
    "TransactionKind",
    "InstrumentKind",
    "Account",
    "TransactionRecord",
    "Holding",
]
