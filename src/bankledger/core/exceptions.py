"""Application-level exceptions."""


class AppError(Exception):
    """Base exception for application errors."""

    def __init__(self, message: str, code: str = "APP_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class ValidationError(AppError):
    """Raised when input validation fails."""

    def __init__(self, message: str):
        super().__init__(message, code="VALIDATION_ERROR")


class InvalidAmountError(AppError):
    """Raised for a non-positive or malformed amount, share count or price."""

    def __init__(self, field: str, value: object):
        super().__init__(f"Invalid {field}: {value}", code="INVALID_AMOUNT")
        self.field = field


class NotFoundError(AppError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str, code: str = "NOT_FOUND"):
        super().__init__(f"{resource} not found: {identifier}", code=code)
        self.resource = resource
        self.identifier = identifier


class RecipientNotFoundError(NotFoundError):
    """Raised when a transfer's destination account number does not resolve."""

    def __init__(self, account_number: str):
        super().__init__("Recipient account", account_number, code="RECIPIENT_NOT_FOUND")


class InsufficientFundsError(AppError):
    """Raised when a debit would take an account balance below zero."""

    def __init__(self, requested: str, available: str):
        super().__init__(
            f"Insufficient funds: requested {requested}, available {available}",
            code="INSUFFICIENT_FUNDS",
        )


class InsufficientSharesError(AppError):
    """Raised when attempting to sell more shares than a holding contains."""

    def __init__(self, symbol: str, requested: str, available: str):
        super().__init__(
            f"Insufficient shares of {symbol}: requested {requested}, available {available}",
            code="INSUFFICIENT_SHARES",
        )


class ConflictError(AppError):
    """
    Raised by a conditional write when the stored value changed underneath it.

    Transient: the engine retries with a fresh read and only surfaces
    UnavailableError once its retry budget is spent.
    """

    def __init__(
        self,
        identifier: str,
        expected: str,
        actual: str,
        resource: str = "Balance of account",
    ):
        super().__init__(
            f"{resource} {identifier} changed: expected {expected}, found {actual}",
            code="CONFLICT",
        )
        self.identifier = identifier
        self.resource = resource


class UnavailableError(AppError):
    """Raised when an operation keeps conflicting and gives up."""

    def __init__(self, message: str):
        super().__init__(message, code="UNAVAILABLE")


class StorageError(AppError):
    """Raised when the underlying store fails."""

    def __init__(self, message: str):
        super().__init__(message, code="STORAGE_ERROR")
