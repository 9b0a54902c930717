"""SQLAlchemy implementation of TransactionLog."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import and_
from sqlalchemy.orm import Session

from bankledger.core.timezone import to_naive_utc, to_utc
from bankledger.domain.models import TransactionRecord
from bankledger.repositories.sqlalchemy.database import storage_guard
from bankledger.repositories.sqlalchemy.orm_models import TransactionORM


class SqlAlchemyTransactionLog:
    """SQLAlchemy-backed append-only transaction log."""

    def __init__(self, db: Session):
        self._db = db

    def append(self, record: TransactionRecord) -> str:
        """Persist a new record."""
        with storage_guard(self._db, "append transaction"):
            self._db.add(self._to_orm(record))
            self._db.commit()
        return record.txn_id

    def append_linked(
        self,
        first: TransactionRecord,
        second: TransactionRecord,
    ) -> tuple[str, str]:
        """Persist both transfer legs in a single database transaction."""
        with storage_guard(self._db, "append transfer legs"):
            self._db.add(self._to_orm(first))
            # flush keeps the debit leg ahead of the credit leg in append order
            self._db.flush()
            self._db.add(self._to_orm(second))
            self._db.commit()
        return first.txn_id, second.txn_id

    def get_by_id(self, txn_id: str) -> Optional[TransactionRecord]:
        """Retrieve record by ID."""
        with storage_guard(self._db, "read transaction"):
            orm_txn = self._db.query(TransactionORM).filter(
                TransactionORM.txn_id == txn_id
            ).first()
        return self._to_domain(orm_txn) if orm_txn else None

    def query(
        self,
        account_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> list[TransactionRecord]:
        """Records for an account, newest first."""
        conditions = [TransactionORM.account_id == account_id]
        if start:
            conditions.append(TransactionORM.created_at >= to_naive_utc(start))
        if end:
            conditions.append(TransactionORM.created_at <= to_naive_utc(end))

        query = (
            self._db.query(TransactionORM)
            .filter(and_(*conditions))
            .order_by(TransactionORM.created_at.desc(), TransactionORM.seq.desc())
        )
        if limit:
            query = query.limit(limit)

        with storage_guard(self._db, "query transactions"):
            rows = query.all()
        return [self._to_domain(t) for t in rows]

    @staticmethod
    def _to_orm(record: TransactionRecord) -> TransactionORM:
        """Convert domain model to ORM model."""
        return TransactionORM(
            txn_id=record.txn_id,
            account_id=record.account_id,
            kind=record.kind,
            amount=record.amount,
            description=record.description,
            reference_id=record.reference_id,
            created_at=to_naive_utc(record.created_at),
        )

    @staticmethod
    def _to_domain(orm: TransactionORM) -> TransactionRecord:
        """Convert ORM model to domain model."""
        return TransactionRecord(
            txn_id=orm.txn_id,
            account_id=orm.account_id,
            kind=orm.kind,
            amount=Decimal(str(orm.amount)),
            description=orm.description or "",
            reference_id=orm.reference_id,
            created_at=to_utc(orm.created_at) if orm.created_at else None,
        )
