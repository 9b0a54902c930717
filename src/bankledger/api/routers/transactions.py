"""Money movement endpoints: deposit, withdraw, transfer."""

from fastapi import APIRouter, Depends

from bankledger.api.deps import get_ledger_engine
from bankledger.api.schemas import (
    DepositRequest,
    WithdrawRequest,
    TransferRequest,
    TransactionResponse,
    BalanceChangeResponse,
    TransferResponse,
)
from bankledger.domain.views import BalanceChange
from bankledger.services import LedgerEngine

router = APIRouter(prefix="/transactions", tags=["transactions"])


def _balance_change_response(result: BalanceChange) -> BalanceChangeResponse:
    return BalanceChangeResponse(
        account_id=result.account_id,
        new_balance=result.new_balance,
        transaction=TransactionResponse.model_validate(result.transaction),
    )


@router.post("/deposit", response_model=BalanceChangeResponse, status_code=201)
def deposit(
    data: DepositRequest,
    engine: LedgerEngine = Depends(get_ledger_engine),
) -> BalanceChangeResponse:
    """Deposit cash into an account."""
    result = engine.deposit(data.account_id, data.amount, data.description)
    return _balance_change_response(result)


@router.post("/withdraw", response_model=BalanceChangeResponse, status_code=201)
def withdraw(
    data: WithdrawRequest,
    engine: LedgerEngine = Depends(get_ledger_engine),
) -> BalanceChangeResponse:
    """Withdraw cash from an account."""
    result = engine.withdraw(data.account_id, data.amount, data.description)
    return _balance_change_response(result)


@router.post("/transfer", response_model=TransferResponse, status_code=201)
def transfer(
    data: TransferRequest,
    engine: LedgerEngine = Depends(get_ledger_engine),
) -> TransferResponse:
    """Transfer cash to another account by account number."""
    result = engine.transfer(
        data.from_account_id,
        data.to_account_number,
        data.amount,
        data.description,
    )
    return TransferResponse(
        from_account_id=result.from_account_id,
        to_account_id=result.to_account_id,
        new_balance=result.new_balance,
        debit_leg=TransactionResponse.model_validate(result.debit_leg),
        credit_leg=TransactionResponse.model_validate(result.credit_leg),
    )
