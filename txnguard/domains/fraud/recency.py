"""Rolling-window retrieval of a user's recent transactions."""

from datetime import datetime, timedelta

from .models import FrequencyRule, Transaction
from .store import ProfileStore
from .timeutil import ensure_utc


def recency_window(rule: FrequencyRule, now: datetime) -> tuple[datetime, datetime]:
    """Return the inclusive (since, until) bounds of the frequency window ending at now."""
    now = ensure_utc(now)
    return now - timedelta(hours=rule.window_hours), now


def within_window(
    transactions: list[Transaction], since: datetime, until: datetime
) -> list[Transaction]:
    return [t for t in transactions if since <= t.timestamp <= until]


async def find_recent_transactions(
    store: ProfileStore,
    user_id: str,
    rule: FrequencyRule,
    now: datetime,
) -> list[Transaction]:
    """Fetch the user's stored transactions inside the profile's current window.

    The store answers an open-ended "since" query; transactions stamped after
    now are dropped here.
    """
    since, until = recency_window(rule, now)
    candidates = await store.find_transactions_since(user_id, since)
    return within_window(candidates, since, until)
