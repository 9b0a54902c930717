"""In-memory implementation of AccountStore."""

import threading
from dataclasses import replace
from decimal import Decimal
from typing import Optional

from bankledger.core.exceptions import (
    ConflictError,
    InsufficientFundsError,
    NotFoundError,
    ValidationError,
)
from bankledger.domain.models import Account


class InMemoryAccountStore:
    """
    Thread-safe account store backed by a dict.

    Each primitive holds the store lock only for its own duration, so the
    compare-and-swap in ``apply_balance_delta`` is what serializes writers.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._accounts: dict[str, Account] = {}
        self._by_number: dict[str, str] = {}

    def create(self, account: Account) -> Account:
        with self._lock:
            if account.account_id in self._accounts:
                raise ValidationError(f"Account already exists: {account.account_id}")
            if account.account_number in self._by_number:
                raise ValidationError(f"Account number already in use: {account.account_number}")
            self._accounts[account.account_id] = replace(account)
            self._by_number[account.account_number] = account.account_id
            return replace(account)

    def get_by_id(self, account_id: str) -> Optional[Account]:
        with self._lock:
            account = self._accounts.get(account_id)
            return replace(account) if account else None

    def get_by_number(self, account_number: str) -> Optional[Account]:
        with self._lock:
            account_id = self._by_number.get(account_number)
            return replace(self._accounts[account_id]) if account_id else None

    def list_by_owner(self, owner_id: str) -> list[Account]:
        with self._lock:
            return [replace(a) for a in self._accounts.values() if a.owner_id == owner_id]

    def resolve_account_number(self, account_number: str) -> Optional[str]:
        with self._lock:
            return self._by_number.get(account_number)

    def get_balance(self, account_id: str) -> Decimal:
        with self._lock:
            account = self._accounts.get(account_id)
            if account is None:
                raise NotFoundError("Account", account_id)
            return account.balance

    def apply_balance_delta(
        self,
        account_id: str,
        delta: Decimal,
        expected_balance: Decimal,
    ) -> Decimal:
        with self._lock:
            account = self._accounts.get(account_id)
            if account is None:
                raise NotFoundError("Account", account_id)
            if account.balance != expected_balance:
                raise ConflictError(account_id, str(expected_balance), str(account.balance))
            new_balance = expected_balance + delta
            if new_balance < 0:
                raise InsufficientFundsError(str(-delta), str(expected_balance))
            account.balance = new_balance
            return new_balance
