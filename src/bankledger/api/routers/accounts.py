"""Account endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from bankledger.api.deps import get_account_service
from bankledger.api.schemas import (
    AccountCreate,
    AccountResponse,
    AccountListResponse,
    TransactionResponse,
    TransactionListResponse,
)
from bankledger.services import AccountService

router = APIRouter(prefix="/accounts", tags=["accounts"])


@router.post("/", response_model=AccountResponse, status_code=201)
def open_account(
    data: AccountCreate,
    service: AccountService = Depends(get_account_service),
) -> AccountResponse:
    """Open a new account with a zero balance."""
    account = service.open_account(
        owner_id=data.owner_id,
        kind=data.kind,
        credential_hash=data.credential_hash,
    )
    return AccountResponse.model_validate(account)


@router.get("/", response_model=AccountListResponse)
def list_accounts(
    owner_id: str = Query(..., min_length=1, description="Owner whose accounts to list"),
    service: AccountService = Depends(get_account_service),
) -> AccountListResponse:
    """List an owner's accounts."""
    accounts = service.list_accounts(owner_id)
    return AccountListResponse(
        accounts=[AccountResponse.model_validate(a) for a in accounts],
        count=len(accounts),
    )


@router.get("/{account_id}", response_model=AccountResponse)
def get_account(
    account_id: str,
    service: AccountService = Depends(get_account_service),
) -> AccountResponse:
    """Get a single account with its current balance."""
    return AccountResponse.model_validate(service.get_account(account_id))


@router.get("/{account_id}/transactions", response_model=TransactionListResponse)
def list_transactions(
    account_id: str,
    start: Optional[str] = Query(None, description="Range start (inclusive), ISO date or datetime"),
    end: Optional[str] = Query(None, description="Range end (inclusive), ISO date or datetime"),
    limit: Optional[int] = Query(None, ge=1, le=1000, description="Maximum records"),
    service: AccountService = Depends(get_account_service),
) -> TransactionListResponse:
    """Ledger records for an account, newest first."""
    records = service.get_transactions(account_id, start=start, end=end, limit=limit)
    return TransactionListResponse(
        transactions=[TransactionResponse.model_validate(r) for r in records],
        count=len(records),
    )


@router.get("/by-number/{account_number}", response_model=AccountResponse)
def get_account_by_number(
    account_number: str,
    service: AccountService = Depends(get_account_service),
) -> AccountResponse:
    """Look up an account by its account number."""
    return AccountResponse.model_validate(service.get_account_by_number(account_number))
