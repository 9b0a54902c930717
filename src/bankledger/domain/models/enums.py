"""Enumerations for domain models."""

from enum import Enum


class AccountKind(str, Enum):
    """Kinds of customer account."""

    CHECKING = "checking"
    SAVINGS = "savings"
    INVESTMENT = "investment"


class TransactionKind(str, Enum):
    """Kinds of money movement recorded in the ledger."""

    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    TRANSFER = "transfer"
    INVESTMENT = "investment"


class InstrumentKind(str, Enum):
    """Investment instrument kinds."""

    STOCK = "stock"
    BOND = "bond"
    MUTUAL_FUND = "mutual_fund"
    ETF = "etf"
