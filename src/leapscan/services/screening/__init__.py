"""Screening service module."""

from .filters import apply_screening_filters, passes_thresholds, strategy_candidates
from .models import (
    PROFILES,
    ScreenedStock,
    ScreeningCriteria,
    ScreeningResult,
    ThresholdProfile,
)
from .service import ScreeningService

__all__ = [
    "ScreeningService",
    "ScreeningCriteria",
    "ScreeningResult",
    "ScreenedStock",
    "ThresholdProfile",
    "PROFILES",
    "apply_screening_filters",
    "passes_thresholds",
    "strategy_candidates",
]
