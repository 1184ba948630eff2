"""API routers for leapscan."""

from .market_data import router as market_data_router
from .options import router as options_router
from .screener import router as screener_router

__all__ = ["screener_router", "market_data_router", "options_router"]
