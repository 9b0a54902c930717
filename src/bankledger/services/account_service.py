"""Account service: opening accounts and reading balances and history."""

import logging
import secrets
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional, Union

from bankledger.core.exceptions import NotFoundError, ValidationError
from bankledger.core.timezone import now_utc, parse_datetime_utc, to_utc
from bankledger.domain.models import Account, AccountKind, TransactionRecord
from bankledger.repositories.protocols import AccountStore, TransactionLog

logger = logging.getLogger(__name__)

ACCOUNT_NUMBER_LENGTH = 10
_MAX_NUMBER_ATTEMPTS = 10


class AccountService:
    """
    Service for account lifecycle and read-side queries.

    Accounts always open with a zero balance; money only enters through
    LedgerEngine.deposit so that every cent has a ledger record.
    """

    def __init__(
        self,
        account_store: AccountStore,
        transaction_log: TransactionLog,
        default_query_limit: int = 50,
    ):
        self._accounts = account_store
        self._log = transaction_log
        self._default_limit = default_query_limit

    def open_account(
        self,
        owner_id: str,
        kind: Union[AccountKind, str] = AccountKind.CHECKING,
        credential_hash: Optional[str] = None,
        account_number: Optional[str] = None,
    ) -> Account:
        """
        Open a new account for ``owner_id``.

        Args:
            owner_id: Reference to the owning user
            kind: checking (default), savings or investment
            credential_hash: Opaque PIN hash managed by the auth layer
            account_number: Explicit number; generated when omitted

        Returns:
            Created Account instance
        """
        if not owner_id or not owner_id.strip():
            raise ValidationError("Account requires an owner")
        try:
            kind = AccountKind(kind)
        except ValueError:
            raise ValidationError(f"Unknown account kind: {kind}")

        if account_number is not None:
            if not account_number.isdigit():
                raise ValidationError("Account number must contain only digits")
            if self._accounts.get_by_number(account_number):
                raise ValidationError(f"Account number {account_number} already exists")
        else:
            account_number = self._generate_account_number()

        account = Account(
            account_id=str(uuid.uuid4()),
            account_number=account_number,
            owner_id=owner_id.strip(),
            kind=kind,
            balance=Decimal("0.00"),
            credential_hash=credential_hash,
            created_at=now_utc(),
        )
        created = self._accounts.create(account)
        logger.info("Opened %s account %s for %s", kind.value, account_number, owner_id)
        return created

    def get_account(self, account_id: str) -> Account:
        """Get account by ID."""
        account = self._accounts.get_by_id(account_id)
        if not account:
            raise NotFoundError("Account", account_id)
        return account

    def get_account_by_number(self, account_number: str) -> Account:
        """Get account by account number."""
        account = self._accounts.get_by_number(account_number)
        if not account:
            raise NotFoundError("Account", account_number)
        return account

    def list_accounts(self, owner_id: str) -> list[Account]:
        """List an owner's accounts."""
        return self._accounts.list_by_owner(owner_id)

    def get_balance(self, account_id: str) -> Decimal:
        """Current balance, read straight from the store."""
        return self._accounts.get_balance(account_id)

    def get_transactions(
        self,
        account_id: str,
        start: Optional[Union[datetime, str]] = None,
        end: Optional[Union[datetime, str]] = None,
        limit: Optional[int] = None,
    ) -> list[TransactionRecord]:
        """
        Ledger records for an account, newest first.

        With a date range and no explicit limit every matching record is
        returned (statement view); otherwise the default limit applies
        (recent activity view). Range bounds may be datetimes or date
        strings; naive values are read as UTC.
        """
        self.get_account(account_id)
        start = self._parse_bound("start", start)
        end = self._parse_bound("end", end)
        if start and end and start > end:
            raise ValidationError("Start of range must not be after its end")
        if limit is not None and limit <= 0:
            raise ValidationError("Limit must be positive")
        if limit is None and not (start or end):
            limit = self._default_limit
        return self._log.query(account_id, start=start, end=end, limit=limit)

    @staticmethod
    def _parse_bound(name: str, value: Optional[Union[datetime, str]]) -> Optional[datetime]:
        if value is None or isinstance(value, datetime):
            return to_utc(value) if value else None
        try:
            return parse_datetime_utc(value)
        except (ValueError, OverflowError):
            raise ValidationError(f"Invalid {name} of range: {value}")

    def _generate_account_number(self) -> str:
        for _ in range(_MAX_NUMBER_ATTEMPTS):
            number = "".join(secrets.choice("0123456789") for _ in range(ACCOUNT_NUMBER_LENGTH))
            if number[0] != "0" and self._accounts.get_by_number(number) is None:
                return number
        raise ValidationError("Could not allocate a unique account number")
