"""Error kinds raised by the pricing and strategy core."""

from typing import Any, Optional


class LeapscanError(Exception):
    """Base exception for the leapscan core."""


class InvalidInputError(LeapscanError, ValueError):
    """Raised when a numeric input cannot produce a meaningful quote."""

    def __init__(self, field: str, value: Any, message: Optional[str] = None):
        self.field = field
        self.value = value
        self.message = message or f"Invalid value for '{field}': {value!r}"
        super().__init__(self.message)


class UpstreamShapeUnrecognizedError(LeapscanError):
    """Raised when a raw options blob matches none of the known layouts."""

    def __init__(self, shape: str):
        self.shape = shape
        super().__init__(f"Unrecognized options data shape: {shape}")
