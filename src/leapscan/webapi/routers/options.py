"""LEAPS chain, analysis and single-option pricing endpoints."""

import random

from fastapi import APIRouter, Depends, Path, Request

from ...config.logging import get_logger
from ...core.chain import SpotPrice
from ...core.models import to_plain
from ...core.pricer import price_option
from ...core.strategies import analyze_leaps
from ...services.market_data import MarketDataService
from ...services.options_data import OptionsDataService
from ..dependencies import get_market_data_service, get_options_data_service
from ..models.requests import OptionQuoteRequest
from ..models.responses import StatusResponse

logger = get_logger(__name__)

router = APIRouter(prefix="/options", tags=["Options"])

TICKER_PATTERN = r"^[A-Za-z][A-Za-z0-9.\-]{0,9}$"


@router.get(
    "/{ticker}/leaps",
    response_model=StatusResponse,
    summary="LEAPS chain set",
    description="Synthesized call and put chains for up to four LEAPS expirations",
)
async def get_leaps_chains(
    request: Request,
    ticker: str = Path(..., pattern=TICKER_PATTERN),
    service: OptionsDataService = Depends(get_options_data_service),
) -> StatusResponse:
    request_id = request.state.request_id
    chain_set = await service.get_leaps_chains(ticker.upper())

    logger.info(
        "LEAPS chains served",
        ticker=chain_set.ticker,
        expirations=chain_set.total_expirations,
        provenance=chain_set.provenance.value,
        request_id=request_id,
    )
    return StatusResponse.create(data=chain_set.to_dict(), request_id=request_id)


@router.get(
    "/{ticker}/analysis",
    response_model=StatusResponse,
    summary="LEAPS strategy analysis",
    description="Fundamentals, chain set and ranked strategy recommendations",
)
async def get_leaps_analysis(
    request: Request,
    ticker: str = Path(..., pattern=TICKER_PATTERN),
    market_data: MarketDataService = Depends(get_market_data_service),
    options_data: OptionsDataService = Depends(get_options_data_service),
) -> StatusResponse:
    """
    Analyze one ticker end to end.

    The chain set is priced around the fundamentals close so strategy
    economics and the stock record agree on spot.
    """
    request_id = request.state.request_id
    symbol = ticker.upper()

    use_live = market_data.live_enabled
    (fundamentals_result,) = await market_data.get_universe_data([symbol], use_live)
    fundamentals = fundamentals_result.fundamentals

    chain_set = await options_data.get_leaps_chains(
        symbol, spot=SpotPrice(fundamentals.close)
    )
    analysis = analyze_leaps(fundamentals, chain_set)

    logger.info(
        "LEAPS analysis served",
        ticker=symbol,
        viable=analysis.total_recommendations,
        data_origin=fundamentals_result.origin.value,
        request_id=request_id,
    )
    return StatusResponse.create(
        data={
            "fundamentals": fundamentals.to_dict(),
            "data_origin": fundamentals_result.origin.value,
            "chains": chain_set.to_dict(),
            "analysis": analysis.to_dict(),
        },
        request_id=request_id,
    )


@router.post(
    "/quote",
    response_model=StatusResponse,
    summary="Price one option",
    description="Price a call or put with the synthetic model. Supply a seed "
    "for a reproducible quote.",
)
async def quote_option(request: Request, body: OptionQuoteRequest) -> StatusResponse:
    request_id = request.state.request_id
    rng = random.Random(body.seed) if body.seed is not None else None

    quote = price_option(
        body.option_type, body.strike, body.spot, body.days_to_expiry, rng=rng
    )

    logger.debug(
        "Option priced",
        option_type=quote.option_type.value,
        strike=quote.strike,
        spot=body.spot,
        request_id=request_id,
    )
    return StatusResponse.create(data=to_plain(quote), request_id=request_id)
