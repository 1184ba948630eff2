"""Screening endpoint."""

from fastapi import APIRouter, Depends, Request

from ...config.logging import get_logger
from ...services.screening import ScreeningService
from ..dependencies import get_screening_service
from ..models.requests import ScreenerRequest
from ..models.responses import ScreenerResponse

logger = get_logger(__name__)

router = APIRouter(tags=["Screener"])


@router.post(
    "/screener",
    response_model=ScreenerResponse,
    response_model_by_alias=True,
    summary="Screen for LEAPS candidates",
    description="Filter the ticker universe on fundamentals and optionally "
    "run LEAPS strategy analysis on the top results",
)
async def run_screener(
    request: Request,
    body: ScreenerRequest,
    service: ScreeningService = Depends(get_screening_service),
) -> ScreenerResponse:
    request_id = request.state.request_id
    criteria = body.criteria.to_criteria()

    logger.info(
        "Screening requested",
        strategy=criteria.strategy,
        use_live_data=body.use_live_data,
        include_leaps=body.include_leaps,
        profile=body.profile,
        universe=body.universe,
        request_id=request_id,
    )

    result = await service.screen(
        criteria=criteria,
        use_live_data=body.use_live_data,
        include_leaps=body.include_leaps,
        profile=body.profile,
        universe_name=body.universe,
    )

    return ScreenerResponse(
        request_id=request_id,
        data_source=result.data_source,
        profile=result.profile.name,
        criteria=result.criteria.to_dict(),
        total_results=result.total_results,
        results=[stock.to_dict() for stock in result.results],
        strategies=result.strategy_counts,
        strategy_results={
            name: [stock.to_dict() for stock in stocks]
            for name, stocks in result.strategy_results.items()
        },
        leaps_analysis=result.leaps_to_dict(),
        fallback_tickers=result.fallback_tickers,
    )
