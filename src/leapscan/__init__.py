"""leapscan - LEAPS opportunity screener."""

__version__ = "1.0.0"
