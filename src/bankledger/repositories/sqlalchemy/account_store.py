"""SQLAlchemy implementation of AccountStore."""

from decimal import Decimal
from typing import Optional

from sqlalchemy import update
from sqlalchemy.orm import Session

from bankledger.core.exceptions import (
    ConflictError,
    InsufficientFundsError,
    NotFoundError,
)
from bankledger.core.timezone import to_naive_utc, to_utc
from bankledger.domain.models import Account
from bankledger.repositories.sqlalchemy.database import storage_guard
from bankledger.repositories.sqlalchemy.orm_models import AccountORM


class SqlAlchemyAccountStore:
    """
    SQLAlchemy-backed account store.

    Balance writes are compare-and-swap:
    ``UPDATE accounts SET balance = :new WHERE account_id = :id AND balance = :expected``.
    """

    def __init__(self, db: Session):
        self._db = db

    def create(self, account: Account) -> Account:
        """Persist a new account."""
        orm_account = AccountORM(
            account_id=account.account_id,
            account_number=account.account_number,
            owner_id=account.owner_id,
            kind=account.kind,
            balance=account.balance,
            credential_hash=account.credential_hash,
            created_at=to_naive_utc(account.created_at),
        )
        with storage_guard(self._db, "create account"):
            self._db.add(orm_account)
            self._db.commit()
            self._db.refresh(orm_account)
        return self._to_domain(orm_account)

    def get_by_id(self, account_id: str) -> Optional[Account]:
        """Retrieve account by ID."""
        with storage_guard(self._db, "read account"):
            orm_account = self._db.query(AccountORM).filter(
                AccountORM.account_id == account_id
            ).first()
        return self._to_domain(orm_account) if orm_account else None

    def get_by_number(self, account_number: str) -> Optional[Account]:
        """Retrieve account by account number."""
        with storage_guard(self._db, "read account"):
            orm_account = self._db.query(AccountORM).filter(
                AccountORM.account_number == account_number
            ).first()
        return self._to_domain(orm_account) if orm_account else None

    def list_by_owner(self, owner_id: str) -> list[Account]:
        """List all accounts of an owner."""
        with storage_guard(self._db, "list accounts"):
            orm_accounts = (
                self._db.query(AccountORM)
                .filter(AccountORM.owner_id == owner_id)
                .order_by(AccountORM.created_at, AccountORM.account_number)
                .all()
            )
        return [self._to_domain(a) for a in orm_accounts]

    def resolve_account_number(self, account_number: str) -> Optional[str]:
        """Return the account ID for an account number."""
        with storage_guard(self._db, "resolve account number"):
            return self._db.query(AccountORM.account_id).filter(
                AccountORM.account_number == account_number
            ).scalar()

    def get_balance(self, account_id: str) -> Decimal:
        """Read the current balance straight from the database."""
        with storage_guard(self._db, "read balance"):
            balance = self._db.query(AccountORM.balance).filter(
                AccountORM.account_id == account_id
            ).scalar()
        if balance is None:
            raise NotFoundError("Account", account_id)
        return Decimal(str(balance))

    def apply_balance_delta(
        self,
        account_id: str,
        delta: Decimal,
        expected_balance: Decimal,
    ) -> Decimal:
        """Conditionally write ``expected_balance + delta``."""
        new_balance = expected_balance + delta
        if new_balance < 0:
            raise InsufficientFundsError(str(-delta), str(expected_balance))

        stmt = (
            update(AccountORM)
            .where(
                AccountORM.account_id == account_id,
                AccountORM.balance == expected_balance,
            )
            .values(balance=new_balance)
            .execution_options(synchronize_session=False)
        )
        with storage_guard(self._db, "update balance"):
            result = self._db.execute(stmt)
            if result.rowcount == 1:
                self._db.commit()
                return new_balance
            self._db.rollback()

        # Nothing matched: either the account is gone or someone wrote first
        actual = self.get_balance(account_id)
        raise ConflictError(account_id, str(expected_balance), str(actual))

    @staticmethod
    def _to_domain(orm: AccountORM) -> Account:
        """Convert ORM model to domain model."""
        return Account(
            account_id=orm.account_id,
            account_number=orm.account_number,
            owner_id=orm.owner_id,
            kind=orm.kind,
            balance=Decimal(str(orm.balance)) if orm.balance is not None else Decimal("0.00"),
            credential_hash=orm.credential_hash,
            created_at=to_utc(orm.created_at) if orm.created_at else None,
        )
