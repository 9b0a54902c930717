"""Pydantic schemas for account endpoints."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from bankledger.domain.models.enums import AccountKind


class AccountCreate(BaseModel):
    """Request schema for opening an account."""

    owner_id: str = Field(..., min_length=1, max_length=64, description="Owning user reference")
    kind: AccountKind = Field(default=AccountKind.CHECKING, description="Account kind")
    credential_hash: Optional[str] = Field(
        default=None,
        max_length=255,
        description="Opaque PIN hash produced by the auth layer",
    )


class AccountResponse(BaseModel):
    """Response schema for a single account (credential hash is never exposed)."""

    model_config = {"from_attributes": True}

    account_id: str
    account_number: str
    owner_id: str
    kind: AccountKind
    balance: Decimal
    created_at: Optional[datetime] = None


class AccountListResponse(BaseModel):
    """Response schema for listing accounts."""

    accounts: list[AccountResponse]
    count: int
