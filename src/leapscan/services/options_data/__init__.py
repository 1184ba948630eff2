"""Options data service module."""

from .client import OptionsDataClient
from .models import OptionsDataError, RawOptionsData
from .service import OptionsDataService

__all__ = [
    "OptionsDataService",
    "OptionsDataClient",
    "OptionsDataError",
    "RawOptionsData",
]
