"""SQLAlchemy implementation of HoldingBook."""

from decimal import Decimal
from typing import Optional

from sqlalchemy import delete, update
from sqlalchemy.orm import Session

from bankledger.core.exceptions import (
    ConflictError,
    InsufficientSharesError,
    NotFoundError,
)
from bankledger.core.timezone import to_naive_utc, to_utc
from bankledger.domain.models import Holding
from bankledger.repositories.sqlalchemy.database import storage_guard
from bankledger.repositories.sqlalchemy.orm_models import HoldingORM

# Attempts at a share-count compare-and-swap before giving up
_MAX_SHARE_CAS_ATTEMPTS = 3


class SqlAlchemyHoldingBook:
    """SQLAlchemy-backed holding book."""

    def __init__(self, db: Session):
        self._db = db

    def create(self, holding: Holding) -> str:
        """Persist a new lot."""
        with storage_guard(self._db, "create holding"):
            self._db.add(self._to_orm(holding))
            self._db.commit()
        return holding.holding_id

    def get(self, holding_id: str) -> Optional[Holding]:
        """Retrieve holding by ID."""
        with storage_guard(self._db, "read holding"):
            orm_holding = self._db.query(HoldingORM).filter(
                HoldingORM.holding_id == holding_id
            ).first()
        return self._to_domain(orm_holding) if orm_holding else None

    def list_by_account(self, account_id: str) -> list[Holding]:
        """List open lots for an account, newest purchase first."""
        with storage_guard(self._db, "list holdings"):
            orm_holdings = (
                self._db.query(HoldingORM)
                .filter(HoldingORM.account_id == account_id)
                .order_by(HoldingORM.purchased_at.desc())
                .all()
            )
        return [self._to_domain(h) for h in orm_holdings]

    def reduce_or_close(self, holding_id: str, shares: Decimal) -> Decimal:
        """Remove shares from a lot, deleting it when nothing is left."""
        for _ in range(_MAX_SHARE_CAS_ATTEMPTS):
            row = self._read_shares(holding_id)
            if row is None:
                raise NotFoundError("Holding", holding_id)

            symbol, current = row.symbol, Decimal(str(row.shares))
            if shares > current:
                raise InsufficientSharesError(symbol, str(shares), str(current))

            remaining = current - shares
            if remaining == 0:
                stmt = delete(HoldingORM).where(
                    HoldingORM.holding_id == holding_id,
                    HoldingORM.shares == current,
                )
            else:
                stmt = (
                    update(HoldingORM)
                    .where(
                        HoldingORM.holding_id == holding_id,
                        HoldingORM.shares == current,
                    )
                    .values(shares=remaining)
                )
            if self._execute_cas(stmt, "reduce holding"):
                return remaining

        raise ConflictError(holding_id, str(shares), "a concurrent update", resource="Shares of holding")

    def reinstate(self, holding: Holding, shares: Decimal) -> None:
        """Give shares back to a lot, re-creating it if it was closed."""
        for _ in range(_MAX_SHARE_CAS_ATTEMPTS):
            row = self._read_shares(holding.holding_id)
            if row is None:
                with storage_guard(self._db, "reinstate holding"):
                    orm_holding = self._to_orm(holding)
                    orm_holding.shares = shares
                    self._db.add(orm_holding)
                    self._db.commit()
                return

            # The sum is computed in Decimal; SQLite would add the column in floating point
            current = Decimal(str(row.shares))
            stmt = (
                update(HoldingORM)
                .where(
                    HoldingORM.holding_id == holding.holding_id,
                    HoldingORM.shares == current,
                )
                .values(shares=current + shares)
            )
            if self._execute_cas(stmt, "reinstate holding"):
                return

        raise ConflictError(
            holding.holding_id, str(shares), "a concurrent update", resource="Shares of holding"
        )

    def set_current_price(self, holding_id: str, price: Decimal) -> Holding:
        """Update the current price of a lot."""
        with storage_guard(self._db, "update holding price"):
            orm_holding = self._db.query(HoldingORM).filter(
                HoldingORM.holding_id == holding_id
            ).first()
            if not orm_holding:
                raise NotFoundError("Holding", holding_id)
            orm_holding.current_price = price
            self._db.commit()
            self._db.refresh(orm_holding)
        return self._to_domain(orm_holding)

    def _read_shares(self, holding_id: str):
        with storage_guard(self._db, "read holding shares"):
            return self._db.query(HoldingORM.symbol, HoldingORM.shares).filter(
                HoldingORM.holding_id == holding_id
            ).first()

    def _execute_cas(self, stmt, operation: str) -> bool:
        """Run a share-count conditional write; False when the row changed first."""
        stmt = stmt.execution_options(synchronize_session=False)
        with storage_guard(self._db, operation):
            result = self._db.execute(stmt)
            if result.rowcount == 1:
                self._db.commit()
                return True
            self._db.rollback()
        return False

    @staticmethod
    def _to_orm(holding: Holding) -> HoldingORM:
        """Convert domain model to ORM model."""
        return HoldingORM(
            holding_id=holding.holding_id,
            account_id=holding.account_id,
            instrument_kind=holding.instrument_kind,
            symbol=holding.symbol,
            shares=holding.shares,
            purchase_price=holding.purchase_price,
            current_price=holding.current_price,
            purchased_at=to_naive_utc(holding.purchased_at),
        )

    @staticmethod
    def _to_domain(orm: HoldingORM) -> Holding:
        """Convert ORM model to domain model."""
        return Holding(
            holding_id=orm.holding_id,
            account_id=orm.account_id,
            instrument_kind=orm.instrument_kind,
            symbol=orm.symbol,
            shares=Decimal(str(orm.shares)),
            purchase_price=Decimal(str(orm.purchase_price)),
            current_price=Decimal(str(orm.current_price)),
            purchased_at=to_utc(orm.purchased_at) if orm.purchased_at else None,
        )
