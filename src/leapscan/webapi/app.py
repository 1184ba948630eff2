"""FastAPI application for the leapscan screener."""

import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..config.logging import get_logger, setup_logging
from ..config.settings import get_settings
from .exceptions import setup_exception_handlers
from .health import router as health_router
from .models.responses import StatusResponse
from .routers import market_data_router, options_router, screener_router

logger = get_logger(__name__)

API_PREFIX = "/api"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging on startup and report provider configuration."""
    settings = get_settings()
    setup_logging(
        level=settings.log_level,
        format_type=settings.log_format,
        file_enabled=settings.log_file_enabled,
        file_path=settings.log_file_path,
        max_file_size=settings.log_max_file_size,
        backup_count=settings.log_backup_count,
    )

    logger.info(
        "Starting leapscan API",
        version=__version__,
        environment=settings.environment,
        live_market_data=settings.has_live_market_data(),
        polygon_configured=bool(settings.polygon_api_key),
        screening_profile=settings.screening_profile,
    )

    yield

    logger.info("leapscan API shutdown completed")


async def add_request_id_middleware(request: Request, call_next):
    """Add unique request ID to each request for tracking."""
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id

    logger.info(
        "Request started",
        request_id=request_id,
        method=request.method,
        path=request.url.path,
        query_params=str(request.query_params),
        user_agent=request.headers.get("user-agent"),
        remote_addr=request.client.host if request.client else None,
    )

    response = await call_next(request)

    response.headers["X-Request-ID"] = request_id

    logger.info(
        "Request completed",
        request_id=request_id,
        status_code=response.status_code,
        method=request.method,
        path=request.url.path,
    )

    return response


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="leapscan API",
        description="""
        LEAPS opportunity screener.

        ## Features

        * **Screening**: Filter a stock universe on fundamentals with
          strict, moderate or lenient guard rails
        * **LEAPS chains**: Synthesized call and put chains for expirations
          more than nine months out
        * **Strategy analysis**: Stock replacement, poor man's covered call,
          growth, value and protective put evaluations with ranked picks
        * **Option pricing**: Single-option quotes from the synthetic model
        """,
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    app.middleware("http")(add_request_id_middleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    setup_exception_handlers(app)

    app.include_router(health_router, prefix=API_PREFIX, tags=["Health & Status"])
    app.include_router(screener_router, prefix=API_PREFIX)
    app.include_router(market_data_router, prefix=API_PREFIX)
    app.include_router(options_router, prefix=API_PREFIX)

    @app.get(
        "/",
        response_model=StatusResponse,
        summary="API Root Endpoint",
        description="Basic API information with navigation links",
    )
    async def root(request: Request) -> StatusResponse:
        return StatusResponse.create(
            data={
                "name": "leapscan",
                "version": __version__,
                "endpoints": {
                    "health": f"{API_PREFIX}/health",
                    "screener": f"{API_PREFIX}/screener",
                    "market_data": f"{API_PREFIX}/market-data",
                    "leaps": f"{API_PREFIX}/options/{{ticker}}/leaps",
                    "analysis": f"{API_PREFIX}/options/{{ticker}}/analysis",
                    "quote": f"{API_PREFIX}/options/quote",
                    "docs": "/docs",
                },
            },
            request_id=request.state.request_id,
        )

    logger.info("FastAPI application created")
    return app


# Create the app instance
app = create_app()
