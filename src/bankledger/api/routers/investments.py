"""Investment endpoints."""

from fastapi import APIRouter, Depends

from bankledger.api.deps import (
    get_ledger_engine,
    get_portfolio_service,
    get_price_feed_service,
)
from bankledger.api.schemas import (
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
    TransactionResponse,
)
from bankledger.domain.views import HoldingView
from bankledger.services import LedgerEngine, PortfolioService, PriceFeedService

router = APIRouter(prefix="/investments", tags=["investments"])


def _holding_response(view: HoldingView) -> HoldingResponse:
    h = view.holding
    return HoldingResponse(
        holding_id=h.holding_id,
        account_id=h.account_id,
        instrument_kind=h.instrument_kind,
        symbol=h.symbol,
        shares=h.shares,
        purchase_price=h.purchase_price,
        current_price=h.current_price,
        purchased_at=h.purchased_at,
        market_value=view.market_value,
        cost_basis=view.cost_basis,
        gain=view.gain,
        gain_percent=view.gain_percent,
    )


@router.get("/holdings/{holding_id}", response_model=HoldingResponse)
def get_holding(
    holding_id: str,
    portfolio: PortfolioService = Depends(get_portfolio_service),
) -> HoldingResponse:
    """Get a single holding with its valuation."""
    return _holding_response(portfolio.value_holding(portfolio.get_holding(holding_id)))


@router.get("/{account_id}", response_model=HoldingListResponse)
def list_holdings(
    account_id: str,
    portfolio: PortfolioService = Depends(get_portfolio_service),
) -> HoldingListResponse:
    """Open holdings of an account, newest first."""
    holdings = portfolio.list_holdings(account_id)
    return HoldingListResponse(
        holdings=[_holding_response(portfolio.value_holding(h)) for h in holdings],
        count=len(holdings),
    )


@router.get("/{account_id}/summary", response_model=PortfolioSummaryResponse)
def get_summary(
    account_id: str,
    portfolio: PortfolioService = Depends(get_portfolio_service),
) -> PortfolioSummaryResponse:
    """Cash, holdings value and gains for an account."""
    summary = portfolio.get_summary(account_id)
    return PortfolioSummaryResponse(
        account_id=summary.account_id,
        cash_balance=summary.cash_balance,
        holdings_value=summary.holdings_value,
        cost_basis=summary.cost_basis,
        total_gain=summary.total_gain,
        total_gain_percent=summary.total_gain_percent,
        total_value=summary.total_value,
        holdings=[_holding_response(v) for v in summary.holdings],
        as_of=summary.as_of,
    )


@router.post("/purchase", response_model=PurchaseResponse, status_code=201)
def purchase(
    data: PurchaseRequest,
    engine: LedgerEngine = Depends(get_ledger_engine),
    portfolio: PortfolioService = Depends(get_portfolio_service),
) -> PurchaseResponse:
    """Buy a new lot with the account's cash."""
    result = engine.purchase_investment(
        data.account_id,
        data.instrument_kind,
        data.symbol,
        data.shares,
        data.price,
    )
    return PurchaseResponse(
        new_balance=result.new_balance,
        cost=result.cost,
        holding=_holding_response(portfolio.value_holding(result.holding)),
        transaction=TransactionResponse.model_validate(result.transaction),
    )


@router.post("/sell", response_model=SaleResponse, status_code=201)
def sell(
    data: SellRequest,
    engine: LedgerEngine = Depends(get_ledger_engine),
) -> SaleResponse:
    """Sell shares from a lot and credit the proceeds."""
    result = engine.sell_investment(
        data.holding_id,
        data.account_id,
        data.shares_to_sell,
        data.selling_price,
    )
    return SaleResponse(
        new_balance=result.new_balance,
        proceeds=result.proceeds,
        remaining_shares=result.remaining_shares,
        holding_closed=result.holding_closed,
        transaction=TransactionResponse.model_validate(result.transaction),
    )


@router.put("/holdings/{holding_id}/price", response_model=HoldingResponse)
def set_current_price(
    holding_id: str,
    data: PriceUpdateRequest,
    feed: PriceFeedService = Depends(get_price_feed_service),
    portfolio: PortfolioService = Depends(get_portfolio_service),
) -> HoldingResponse:
    """Set a holding's current price."""
    holding = feed.set_current_price(holding_id, data.price)
    return _holding_response(portfolio.value_holding(holding))


@router.post("/{account_id}/refresh-prices", response_model=PriceRefreshResponse)
def refresh_prices(
    account_id: str,
    feed: PriceFeedService = Depends(get_price_feed_service),
    portfolio: PortfolioService = Depends(get_portfolio_service),
) -> PriceRefreshResponse:
    """Move every holding of the account to a new simulated price."""
    portfolio.list_holdings(account_id)  # 404 for unknown accounts
    updates = feed.refresh_prices(account_id)
    return PriceRefreshResponse(
        updates=[
            PriceUpdateResponse(
                holding_id=u.holding_id,
                symbol=u.symbol,
                old_price=u.old_price,
                new_price=u.new_price,
            )
            for u in updates
        ],
        count=len(updates),
    )
