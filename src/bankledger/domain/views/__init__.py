"""View models for service outputs."""

from bankledger.domain.views.ledger import (
    BalanceChange,
    TransferResult,
    PurchaseResult,
    SaleResult,
    HoldingView,
    PortfolioSummary,
    PriceUpdate,
)

__all__ = [
    "BalanceChange",
    "TransferResult",
    "PurchaseResult",
    "SaleResult",
    "HoldingView",
    "PortfolioSummary",
    "PriceUpdate",
]
