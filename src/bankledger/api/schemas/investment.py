"""Pydantic schemas for investment endpoints."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from bankledger.api.schemas.transaction import TransactionResponse
from bankledger.domain.models.enums import InstrumentKind


class PurchaseRequest(BaseModel):
    """Request schema for buying a new lot."""

    account_id: str
    instrument_kind: InstrumentKind = Field(default=InstrumentKind.STOCK)
    symbol: str = Field(..., min_length=1, max_length=20)
    shares: Decimal = Field(..., gt=0)
    price: Decimal = Field(..., gt=0, description="Price per share")

    @field_validator("symbol")
    @classmethod
    def uppercase_symbol(cls, v: str) -> str:
        return v.strip().upper()


class SellRequest(BaseModel):
    """Request schema for selling from a lot."""

    holding_id: str
    account_id: str
    shares_to_sell: Decimal = Field(..., gt=0)
    selling_price: Decimal = Field(..., gt=0)


class PriceUpdateRequest(BaseModel):
    """Request schema for setting a holding's current price."""

    price: Decimal = Field(..., gt=0)


class HoldingResponse(BaseModel):
    """Response schema for a holding with valuation."""

    holding_id: str
    account_id: str
    instrument_kind: InstrumentKind
    symbol: str
    shares: Decimal
    purchase_price: Decimal
    current_price: Decimal
    purchased_at: Optional[datetime] = None
    market_value: Decimal
    cost_basis: Decimal
    gain: Decimal
    gain_percent: Optional[Decimal] = None


class HoldingListResponse(BaseModel):
    """Response schema for listing holdings."""

    holdings: list[HoldingResponse]
    count: int


class PortfolioSummaryResponse(BaseModel):
    """Response schema for an account's portfolio summary."""

    account_id: str
    cash_balance: Decimal
    holdings_value: Decimal
    cost_basis: Decimal
    total_gain: Decimal
    total_gain_percent: Optional[Decimal] = None
    total_value: Decimal
    holdings: list[HoldingResponse]
    as_of: Optional[datetime] = None


class PurchaseResponse(BaseModel):
    """Response schema for a completed purchase."""

    new_balance: Decimal
    cost: Decimal
    holding: HoldingResponse
    transaction: TransactionResponse


class SaleResponse(BaseModel):
    """Response schema for a completed sale."""

    new_balance: Decimal
    proceeds: Decimal
    remaining_shares: Decimal
    holding_closed: bool
    transaction: TransactionResponse


class PriceUpdateResponse(BaseModel):
    """Response schema for one price change."""

    holding_id: str
    symbol: str
    old_price: Decimal
    new_price: Decimal


class PriceRefreshResponse(BaseModel):
    """Response schema for a price refresh."""

    updates: list[PriceUpdateResponse]
    count: int
