"""Time-bucketed cache keys.

Keys embed the start of the current window so entries roll over on their
own when the window advances; storage lives with the caller.
"""

from datetime import datetime, timezone
from typing import Optional

MARKET_DATA_WINDOW_SECONDS = 300
OPTIONS_WINDOW_SECONDS = 600


def bucket_start_ms(now: datetime, window_seconds: int) -> int:
    """Epoch milliseconds of the window containing ``now``."""
    if window_seconds <= 0:
        raise ValueError("window_seconds must be positive")
    window_ms = window_seconds * 1000
    now_ms = int(now.timestamp() * 1000)
    return now_ms - (now_ms % window_ms)


def cache_key(
    kind: str,
    identity: str,
    window_seconds: int,
    now: Optional[datetime] = None,
) -> str:
    """
    Build a cache key such as ``leaps_AAPL_1718000400000``.

    Args:
        kind: Namespace for the cached value (e.g. 'stock', 'leaps')
        identity: Ticker or other identity of the cached value
        window_seconds: Bucket width
        now: Clock override, defaults to the current UTC time
    """
    now = now or datetime.now(timezone.utc)
    return f"{kind}_{identity.upper()}_{bucket_start_ms(now, window_seconds)}"
