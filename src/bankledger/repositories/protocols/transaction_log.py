"""Transaction log protocol."""

from datetime import datetime
from typing import Protocol, Optional

from bankledger.domain.models import TransactionRecord


class TransactionLog(Protocol):
    """Append-only ledger of money movements. There is no update or delete."""

    def append(self, record: TransactionRecord) -> str:
        """Persist a new record; returns its txn_id."""
        ...

    def append_linked(
        self,
        first: TransactionRecord,
        second: TransactionRecord,
    ) -> tuple[str, str]:
        """Persist two transfer legs together: both are stored or neither is."""
        ...

    def get_by_id(self, txn_id: str) -> Optional[TransactionRecord]:
        """Retrieve a record by ID."""
        ...

    def query(
        self,
        account_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> list[TransactionRecord]:
        """Records for an account within [start, end], newest first."""
        ...
