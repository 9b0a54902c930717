"""TransactionRecord domain model."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from bankledger.domain.models.enums import TransactionKind


@dataclass(frozen=True)
class TransactionRecord:
    """
    Ledger entry for one money movement (append-only, never edited).

    ``amount`` is always positive; direction follows from ``kind`` and
    ``description``. Transfer legs point at each other through
    ``reference_id``.
    """

    txn_id: str
    account_id: str
    kind: TransactionKind
    amount: Decimal
    description: str = ""
    reference_id: Optional[str] = None
    created_at: Optional[datetime] = field(default=None)

    def __post_init__(self) -> None:
        if isinstance(self.kind, str):
            object.__setattr__(self, "kind", TransactionKind(self.kind))

    @property
    def is_transfer_leg(self) -> bool:
        """Return True if this record is one side of a transfer."""
        return self.kind == TransactionKind.TRANSFER and self.reference_id is not None
