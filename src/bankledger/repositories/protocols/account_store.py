"""Account store protocol."""

from decimal import Decimal
from typing import Protocol, Optional

from bankledger.domain.models import Account


class AccountStore(Protocol):
    """Interface for account data access and conditional balance writes."""

    def create(self, account: Account) -> Account:
        """Persist a new account."""
        ...

    def get_by_id(self, account_id: str) -> Optional[Account]:
        """Retrieve account by ID."""
        ...

    def get_by_number(self, account_number: str) -> Optional[Account]:
        """Retrieve account by its external account number."""
        ...

    def list_by_owner(self, owner_id: str) -> list[Account]:
        """List all accounts belonging to an owner."""
        ...

    def resolve_account_number(self, account_number: str) -> Optional[str]:
        """Return the account ID for an account number, or None."""
        ...

    def get_balance(self, account_id: str) -> Decimal:
        """
        Read the current balance.

        Raises NotFoundError if the account does not exist.
        """
        ...

    def apply_balance_delta(
        self,
        account_id: str,
        delta: Decimal,
        expected_balance: Decimal,
    ) -> Decimal:
        """
        Conditionally set balance to ``expected_balance + delta``.

        Raises ConflictError if the stored balance no longer equals
        ``expected_balance``, NotFoundError if the account is unknown and
        InsufficientFundsError if the new balance would be negative.
        Returns the new balance.
        """
        ...
