"""Request and response models for the leapscan API."""

from .requests import CriteriaRequest, OptionQuoteRequest, ScreenerRequest
from .responses import (
    BaseResponse,
    ErrorResponse,
    HealthResponse,
    HealthStatus,
    MarketDataItem,
    MarketDataResponse,
    ScreenerResponse,
    StatusResponse,
    SuccessResponse,
)

__all__ = [
    "CriteriaRequest",
    "OptionQuoteRequest",
    "ScreenerRequest",
    "BaseResponse",
    "ErrorResponse",
    "HealthResponse",
    "HealthStatus",
    "MarketDataItem",
    "MarketDataResponse",
    "ScreenerResponse",
    "StatusResponse",
    "SuccessResponse",
]
