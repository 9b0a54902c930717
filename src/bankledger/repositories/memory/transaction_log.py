"""In-memory implementation of TransactionLog."""

import itertools
import threading
from datetime import datetime
from typing import Optional

from bankledger.core.exceptions import ValidationError
from bankledger.core.timezone import to_utc
from bankledger.domain.models import TransactionRecord


class InMemoryTransactionLog:
    """Thread-safe append-only log. Records are frozen dataclasses."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._seq = itertools.count()
        self._records: list[tuple[int, TransactionRecord]] = []
        self._by_id: dict[str, TransactionRecord] = {}

    def append(self, record: TransactionRecord) -> str:
        with self._lock:
            self._store(record)
        return record.txn_id

    def append_linked(
        self,
        first: TransactionRecord,
        second: TransactionRecord,
    ) -> tuple[str, str]:
        with self._lock:
            if second.txn_id in self._by_id or first.txn_id == second.txn_id:
                raise ValidationError(f"Duplicate transaction id: {second.txn_id}")
            self._store(first)
            self._store(second)
        return first.txn_id, second.txn_id

    def get_by_id(self, txn_id: str) -> Optional[TransactionRecord]:
        with self._lock:
            return self._by_id.get(txn_id)

    def query(
        self,
        account_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> list[TransactionRecord]:
        start = to_utc(start) if start else None
        end = to_utc(end) if end else None
        with self._lock:
            matches = [
                (seq, r)
                for seq, r in self._records
                if r.account_id == account_id
                and (start is None or r.created_at >= start)
                and (end is None or r.created_at <= end)
            ]
        matches.sort(key=lambda item: (item[1].created_at, item[0]), reverse=True)
        records = [r for _, r in matches]
        return records[:limit] if limit else records

    def _store(self, record: TransactionRecord) -> None:
        if record.txn_id in self._by_id:
            raise ValidationError(f"Duplicate transaction id: {record.txn_id}")
        self._records.append((next(self._seq), record))
        self._by_id[record.txn_id] = record
