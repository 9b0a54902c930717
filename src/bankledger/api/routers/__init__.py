"""API routers package."""

from bankledger.api.routers.accounts import router as accounts_router
from bankledger.api.routers.transactions import router as transactions_router
from bankledger.api.routers.investments import router as investments_router

__all__ = [
    "accounts_router",
    "transactions_router",
    "investments_router",
]
