"""Pydantic schemas for transaction endpoints."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from bankledger.domain.models.enums import TransactionKind


class DepositRequest(BaseModel):
    """Request schema for a deposit."""

    account_id: str = Field(..., description="Authenticated account ID")
    amount: Decimal = Field(..., gt=0, decimal_places=2, description="Amount to deposit")
    description: str = Field(default="Deposit", max_length=500)


class WithdrawRequest(BaseModel):
    """Request schema for a withdrawal."""

    account_id: str = Field(..., description="Authenticated account ID")
    amount: Decimal = Field(..., gt=0, decimal_places=2, description="Amount to withdraw")
    description: str = Field(default="Withdrawal", max_length=500)


class TransferRequest(BaseModel):
    """Request schema for a transfer to another account number."""

    from_account_id: str = Field(..., description="Authenticated sender account ID")
    to_account_number: str = Field(..., min_length=1, max_length=20, description="Recipient account number")
    amount: Decimal = Field(..., gt=0, decimal_places=2, description="Amount to transfer")
    description: str = Field(default="Transfer", max_length=500)


class TransactionResponse(BaseModel):
    """Response schema for a single ledger record."""

    model_config = {"from_attributes": True}

    txn_id: str
    account_id: str
    kind: TransactionKind
    amount: Decimal
    description: str
    reference_id: Optional[str] = None
    created_at: Optional[datetime] = None


class TransactionListResponse(BaseModel):
    """Response schema for listing ledger records."""

    transactions: list[TransactionResponse]
    count: int


class BalanceChangeResponse(BaseModel):
    """Response schema for deposits and withdrawals."""

    account_id: str
    new_balance: Decimal
    transaction: TransactionResponse


class TransferResponse(BaseModel):
    """Response schema for a completed transfer."""

    from_account_id: str
    to_account_id: str
    new_balance: Decimal
    debit_leg: TransactionResponse
    credit_leg: TransactionResponse
