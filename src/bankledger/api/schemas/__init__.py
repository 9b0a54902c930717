"""Pydantic schemas for API request/response."""

from bankledger.api.schemas.account import (
    AccountCreate,
    AccountResponse,
    AccountListResponse,
)
from bankledger.api.schemas.transaction import (
    DepositRequest,
    WithdrawRequest,
    TransferRequest,
    TransactionResponse,
    TransactionListResponse,
    BalanceChangeResponse,
    TransferResponse,
)
from bankledger.api.schemas.investment import (
    PurchaseRequest,
    SellRequest,
    PriceUpdateRequest,
    HoldingResponse,
    HoldingListResponse,
    PortfolioSummaryResponse,
    PurchaseResponse,
    SaleResponse,
    PriceUpdateResponse,
    PriceRefreshResponse,
)

__all__ = [
    "AccountCreate",
    "AccountResponse",
    "AccountListResponse",
    "DepositRequest",
    "WithdrawRequest",
    "TransferRequest",
    "TransactionResponse",
    "TransactionListResponse",
    "BalanceChangeResponse",
    "TransferResponse",
    "PurchaseRequest",
    "SellRequest",
    "PriceUpdateRequest",
    "HoldingResponse",
    "HoldingListResponse",
    "PortfolioSummaryResponse",
    "PurchaseResponse",
    "SaleResponse",
    "PriceUpdateResponse",
    "PriceRefreshResponse",
]
