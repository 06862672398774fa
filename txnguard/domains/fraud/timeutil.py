"""Timestamp normalization and hour-of-day extraction."""

from datetime import UTC, datetime
from functools import lru_cache
from zoneinfo import ZoneInfo


def ensure_utc(value: datetime) -> datetime:
    """Return an aware datetime; naive values are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


@lru_cache(maxsize=32)
def _zone(name: str) -> ZoneInfo:
    return ZoneInfo(name)


def hour_of_day(value: datetime, timezone: str = "UTC") -> int:
    return ensure_utc(value).astimezone(_zone(timezone)).hour
