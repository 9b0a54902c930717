"""Account domain model."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from bankledger.domain.models.enums import AccountKind


@dataclass
class Account:
    """
    Customer account holding a cash balance.

    The balance is only ever changed through the ledger engine, using a
    conditional write against the balance it last observed.
    ``credential_hash`` is opaque here; PIN checks belong to the auth layer.
    """

    account_id: str
    account_number: str
    owner_id: str
    kind: AccountKind = AccountKind.CHECKING
    balance: Decimal = field(default_factory=lambda: Decimal("0.00"))
    credential_hash: Optional[str] = None
    created_at: Optional[datetime] = field(default=None)

    def __post_init__(self) -> None:
        if isinstance(self.kind, str):
            self.kind = AccountKind(self.kind)
