"""Fundamentals lookup endpoint."""

from fastapi import APIRouter, Depends, Query, Request

from ...config.logging import get_logger
from ...services.market_data import MarketDataService, normalize_tickers
from ..dependencies import get_market_data_service
from ..exceptions import ValidationException
from ..models.responses import MarketDataItem, MarketDataResponse

logger = get_logger(__name__)

router = APIRouter(tags=["Market Data"])

MAX_TICKERS = 50


@router.get(
    "/market-data",
    response_model=MarketDataResponse,
    summary="Get fundamentals",
    description="Fundamentals for up to 50 comma separated tickers. Live "
    "providers are used when configured, mock data otherwise.",
)
async def get_market_data(
    request: Request,
    tickers: str = Query(..., description="Comma separated symbols, e.g. AAPL,MSFT"),
    service: MarketDataService = Depends(get_market_data_service),
) -> MarketDataResponse:
    request_id = request.state.request_id
    symbols = normalize_tickers(tickers, limit=MAX_TICKERS)
    if not symbols:
        raise ValidationException(
            message="At least one ticker is required",
            field_errors={"tickers": "No valid symbols supplied"},
            request_id=request_id,
        )

    use_live = service.live_enabled
    fetched = await service.get_universe_data(symbols, use_live)

    logger.info(
        "Market data served",
        tickers=len(symbols),
        live=use_live,
        request_id=request_id,
    )

    return MarketDataResponse(
        request_id=request_id,
        data_source=service.data_source(use_live),
        data=[
            MarketDataItem(
                ticker=r.ticker,
                origin=r.origin.value,
                error=r.error,
                fundamentals=r.fundamentals.to_dict(),
            )
            for r in fetched
        ],
    )
