"""Response models for the leapscan API."""

from datetime import datetime, timezone
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel

T = TypeVar("T")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class BaseResponse(BaseModel):
    """Base response model for all API responses."""

    success: bool = Field(..., description="Whether the request was successful")
    timestamp: datetime = Field(default_factory=utc_now, description="Response timestamp")
    request_id: Optional[str] = Field(
        None, description="Unique request identifier for tracking"
    )

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )

    @field_serializer("timestamp")
    def serialize_timestamp(self, dt: datetime) -> str:
        """Serialize datetime to ISO format with Z suffix."""
        return dt.astimezone(timezone.utc).replace(tzinfo=None).isoformat() + "Z"


class SuccessResponse(BaseResponse, Generic[T]):
    """Generic success response with typed data."""

    success: bool = Field(True, description="Always true for success responses")
    data: T = Field(..., description="Response data")
    message: Optional[str] = Field(None, description="Optional success message")


class ErrorResponse(BaseResponse):
    """Error response model."""

    success: bool = Field(False, description="Always false for error responses")
    error: Dict[str, Any] = Field(..., description="Error details")


class HealthStatus(BaseModel):
    """Health status model."""

    status: str = Field(
        ..., description="Overall health status: healthy, degraded, unhealthy"
    )
    services: Dict[str, Dict[str, Any]] = Field(
        default_factory=dict, description="Individual service statuses"
    )
    uptime_seconds: float = Field(..., description="Application uptime in seconds")
    version: Optional[str] = Field(None, description="Application version")

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class HealthResponse(BaseResponse):
    """Health check response."""

    success: bool = Field(True, description="Always true for health responses")
    health: HealthStatus = Field(..., description="Detailed health information")


class ScreenerResponse(BaseResponse):
    """Screening results with per-strategy breakdowns."""

    success: bool = Field(True)
    data_source: str = Field(..., description="live or mock")
    profile: str = Field(..., description="Threshold profile applied")
    criteria: Dict[str, Any] = Field(..., description="Criteria actually applied")
    total_results: int = Field(..., ge=0, description="Stocks matching before the cut")
    results: List[Dict[str, Any]] = Field(default_factory=list)
    strategies: Dict[str, int] = Field(
        default_factory=dict, description="Candidate count per strategy plus 'all'"
    )
    strategy_results: Dict[str, List[Dict[str, Any]]] = Field(default_factory=dict)
    leaps_analysis: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
    fallback_tickers: List[str] = Field(
        default_factory=list, description="Tickers served from fallback data"
    )


class MarketDataItem(BaseModel):
    """Fundamentals for one ticker with its origin."""

    ticker: str
    origin: str
    error: Optional[str] = None
    fundamentals: Dict[str, Any]

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MarketDataResponse(SuccessResponse[List[MarketDataItem]]):
    """Response model for fundamentals lookups."""

    data: List[MarketDataItem] = Field(..., description="One entry per ticker")
    data_source: str = Field(..., description="live or mock")


class StatusResponse(SuccessResponse[Dict[str, Any]]):
    """Generic status response."""

    data: Dict[str, Any] = Field(..., description="Status data")

    @classmethod
    def create(
        cls,
        data: Dict[str, Any],
        message: Optional[str] = None,
        request_id: Optional[str] = None,
    ) -> "StatusResponse":
        """Create a status response."""
        return cls(success=True, data=data, message=message, request_id=request_id)
