"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from bankledger import __version__
from bankledger.config.settings import get_settings
from bankledger.config.logging_config import setup_logging
from bankledger.repositories.sqlalchemy.database import init_db
from bankledger.api.routers import accounts_router, transactions_router, investments_router
from bankledger.core.exceptions import AppError

_STATUS_BY_CODE = {
    "NOT_FOUND": 404,
    "RECIPIENT_NOT_FOUND": 404,
    "UNAVAILABLE": 503,
    "STORAGE_ERROR": 500,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    setup_logging()
    init_db()
    yield


settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    description="Bank account ledger with cash transfers and investment holdings",
    version=__version__,
    lifespan=lifespan,
)

app.include_router(accounts_router)
app.include_router(transactions_router)
app.include_router(investments_router)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Global handler for application errors."""
    return JSONResponse(
        status_code=_STATUS_BY_CODE.get(exc.code, 400),
        content={"error": exc.code, "message": exc.message},
    )


@app.get("/health")
def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/")
def root() -> dict[str, str]:
    """Root endpoint with API info."""
    return {
        "app": settings.app_name,
        "version": __version__,
        "docs": "/docs",
    }
