"""Service providers for the API routers.

Each provider returns one shared instance so the TTL caches survive across
requests. Tests swap them through ``app.dependency_overrides``.
"""

from functools import lru_cache

from ..services.market_data import MarketDataService
from ..services.options_data import OptionsDataService
from ..services.screening import ScreeningService


@lru_cache()
def get_market_data_service() -> MarketDataService:
    return MarketDataService()


@lru_cache()
def get_options_data_service() -> OptionsDataService:
    return OptionsDataService()


@lru_cache()
def get_screening_service() -> ScreeningService:
    """Screening service wired to the shared data services."""
    return ScreeningService(
        market_data=get_market_data_service(),
        options_data=get_options_data_service(),
    )


def reset_services() -> None:
    """Drop the shared instances, e.g. after settings change."""
    get_screening_service.cache_clear()
    get_options_data_service.cache_clear()
    get_market_data_service.cache_clear()
