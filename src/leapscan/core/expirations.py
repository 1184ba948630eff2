"""LEAPS expiration selection from heterogeneous upstream option blobs."""

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Any, Iterable, List, Optional

from ..config.logging import get_logger
from .exceptions import UpstreamShapeUnrecognizedError

logger = get_logger(__name__)

# Nine months approximated as 9 x 30 days
LEAPS_THRESHOLD_DAYS = 270
MAX_EXPIRATIONS = 4

FALLBACK_UNRECOGNIZED = "unrecognized_shape"
FALLBACK_EMPTY = "no_leaps_expirations"


@dataclass(frozen=True)
class ExpirationSelection:
    """Chosen expirations and, when synthesized, why."""

    expirations: List[datetime]
    fallback_reason: Optional[str] = None

    @property
    def is_fallback(self) -> bool:
        return self.fallback_reason is not None


def utc_now(now: Optional[datetime] = None) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now


def leaps_threshold(now: Optional[datetime] = None) -> datetime:
    return utc_now(now) + timedelta(days=LEAPS_THRESHOLD_DAYS)


def _midnight_utc(day: date) -> datetime:
    return datetime(day.year, day.month, day.day, tzinfo=timezone.utc)


def _timestamp_keys(raw: dict) -> Iterable[Any]:
    dates = raw.get("expirationDates")
    if dates:
        if not isinstance(dates, (list, tuple)):
            raise UpstreamShapeUnrecognizedError(f"expirationDates:{type(dates).__name__}")
        return dates

    options = raw.get("options") or {}
    if isinstance(options, dict):
        return options.keys()
    if not isinstance(options, (list, tuple)):
        raise UpstreamShapeUnrecognizedError(f"options:{type(options).__name__}")
    # Yahoo v7 returns a list of per-expiration blocks
    return [block.get("expirationDate") for block in options if isinstance(block, dict)]


def _from_timestamp_keys(raw: dict, threshold: datetime) -> List[datetime]:
    parsed = set()
    for key in _timestamp_keys(raw):
        try:
            parsed.add(datetime.fromtimestamp(int(key), tz=timezone.utc))
        except (TypeError, ValueError, OverflowError, OSError):
            logger.debug("Skipping unparseable expiration key", key=key)

    return sorted(d for d in parsed if d > threshold)[:MAX_EXPIRATIONS]


def _from_contracts(contracts: list, threshold: datetime) -> List[datetime]:
    by_label = {}
    for contract in contracts:
        if not isinstance(contract, dict):
            continue
        label = contract.get("expiration_date")
        if not label or label in by_label:
            continue
        try:
            expiration = _midnight_utc(date.fromisoformat(str(label)[:10]))
        except ValueError:
            logger.debug("Skipping unparseable expiration date", value=label)
            continue
        if expiration > threshold:
            by_label[label] = expiration

    # ISO-8601 labels sort chronologically
    return [by_label[label] for label in sorted(by_label)[:MAX_EXPIRATIONS]]


def select_expirations(raw: Any, now: Optional[datetime] = None) -> List[datetime]:
    """
    Extract up to four LEAPS expirations from a raw options blob.

    Two layouts are understood: a mapping with ``expirationDates`` or
    ``options`` keyed by unix timestamps (seconds), and a list of contracts
    carrying ISO ``expiration_date`` strings.

    Returns:
        Ascending expirations strictly later than now + 270 days

    Raises:
        UpstreamShapeUnrecognizedError: If the blob matches neither layout
    """
    threshold = leaps_threshold(now)

    if isinstance(raw, dict) and ("expirationDates" in raw or "options" in raw):
        return _from_timestamp_keys(raw, threshold)
    if isinstance(raw, list):
        return _from_contracts(raw, threshold)

    raise UpstreamShapeUnrecognizedError(type(raw).__name__)


def synthetic_schedule(now: Optional[datetime] = None) -> List[datetime]:
    """January and June 15th of the next two years, beyond the LEAPS threshold."""
    now = utc_now(now)
    threshold = leaps_threshold(now)
    candidates = [
        datetime(now.year + 1, 1, 15, tzinfo=timezone.utc),
        datetime(now.year + 1, 6, 15, tzinfo=timezone.utc),
        datetime(now.year + 2, 1, 15, tzinfo=timezone.utc),
        datetime(now.year + 2, 6, 15, tzinfo=timezone.utc),
    ]
    return [d for d in candidates if d > threshold]


def select_or_default(raw: Any, now: Optional[datetime] = None) -> ExpirationSelection:
    """Select expirations, falling back to the synthetic schedule."""
    try:
        expirations = select_expirations(raw, now)
    except UpstreamShapeUnrecognizedError as e:
        logger.warning(
            "Options data shape not recognized, using synthetic expirations",
            shape=e.shape,
        )
        return ExpirationSelection(synthetic_schedule(now), FALLBACK_UNRECOGNIZED)

    if not expirations:
        logger.info("No LEAPS expirations upstream, using synthetic expirations")
        return ExpirationSelection(synthetic_schedule(now), FALLBACK_EMPTY)

    return ExpirationSelection(expirations)
