"""Health check endpoints for the leapscan API."""

import platform
import time
from typing import Any, Dict

from fastapi import APIRouter

from .. import __version__
from ..config.logging import get_logger
from ..config.settings import get_settings
from .models.responses import HealthResponse, HealthStatus

logger = get_logger(__name__)
router = APIRouter()

# Track application start time for uptime calculation
_app_start_time = time.time()


def get_system_info() -> Dict[str, Any]:
    return {
        "platform": platform.platform(),
        "python_version": platform.python_version(),
    }


def check_configuration_health() -> Dict[str, Any]:
    """Check application configuration health."""
    try:
        settings = get_settings()

        checks = {
            "log_level_valid": settings.log_level
            in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
            "screening_profile": settings.screening_profile,
        }

        # Missing provider keys only mean mock data is served
        optional_checks = {
            "alpha_vantage_configured": bool(settings.alpha_vantage_api_key),
            "twelve_data_configured": bool(settings.twelve_data_api_key),
            "polygon_configured": bool(settings.polygon_api_key),
        }

        return {
            "status": "healthy",
            "checks": {**checks, **optional_checks},
            "live_market_data": settings.has_live_market_data(),
            "optional_checks_passed": all(optional_checks.values()),
        }

    except Exception as e:
        logger.error("Configuration health check failed", error=str(e), exc_info=True)
        return {
            "status": "unhealthy",
            "error": str(e),
        }


@router.get("/health", response_model=HealthResponse, summary="Health Check")
async def health_check():
    """
    Report service health.

    Includes overall status, uptime, version, provider configuration and
    basic system information.
    """
    uptime_seconds = time.time() - _app_start_time
    configuration = check_configuration_health()

    services = {
        "configuration": configuration,
        "system": {"status": "healthy", **get_system_info()},
    }

    health_status = HealthStatus(
        status=configuration["status"],
        services=services,
        uptime_seconds=uptime_seconds,
        version=__version__,
    )

    logger.debug("Health check completed", status=health_status.status)
    return HealthResponse(success=True, health=health_status)


@router.get("/health/live", summary="Liveness Probe")
async def liveness_probe():
    """Kubernetes-style liveness probe."""
    return {"status": "alive", "timestamp": time.time()}
