"""Core utilities and shared functionality."""

from bankledger.core.timezone import (
    now_utc,
    to_utc,
    parse_datetime_utc,
    to_naive_utc,
    UTC,
)
from bankledger.core.exceptions import (
    AppError,
    ValidationError,
    InvalidAmountError,
    NotFoundError,
    RecipientNotFoundError,
    InsufficientFundsError,
    InsufficientSharesError,
    ConflictError,
    UnavailableError,
    StorageError,
)

__all__ = [
    "now_utc",
    "to_utc",
    "parse_datetime_utc",
    "to_naive_utc",
    "UTC",
    "AppError",
    "ValidationError",
    "InvalidAmountError",
    "NotFoundError",
    "RecipientNotFoundError",
    "InsufficientFundsError",
    "InsufficientSharesError",
    "ConflictError",
    "UnavailableError",
    "StorageError",
]
