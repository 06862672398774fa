"""Profile store interface and the in-process implementation."""

import uuid
from collections import defaultdict
from datetime import datetime
from typing import Protocol

from .config import FraudConfig, default_config
from .models import Transaction, UserProfile
from .timeutil import ensure_utc


class ProfileStore(Protocol):
    """Persistence collaborator for profiles and the transaction log."""

    async def get_or_create_profile(self, user_id: str) -> UserProfile: ...

    async def get_profile(self, user_id: str) -> UserProfile | None: ...

    async def find_transactions_since(
        self, user_id: str, since: datetime
    ) -> list[Transaction]: ...

    async def list_transactions(self, user_id: str, limit: int) -> list[Transaction]: ...

    async def save_profile(self, profile: UserProfile) -> None: ...

    async def record_scored_transaction(
        self, transaction: Transaction, profile: UserProfile
    ) -> Transaction:
        """Store a scored transaction and the profile adapted from it, both or neither."""
        ...


class InMemoryProfileStore:
    """Dict-backed store for offline replay and tests.

    Values are copied in and out so callers never share state with the store.
    """

    def __init__(self, config: FraudConfig | None = None) -> None:
        self._config = config or default_config
        self._profiles: dict[str, UserProfile] = {}
        self._transactions: dict[str, list[Transaction]] = defaultdict(list)

    async def get_or_create_profile(self, user_id: str) -> UserProfile:
        if user_id not in self._profiles:
            self._profiles[user_id] = UserProfile.with_defaults(user_id, self._config)
        return self._profiles[user_id].model_copy(deep=True)

    async def get_profile(self, user_id: str) -> UserProfile | None:
        profile = self._profiles.get(user_id)
        return profile.model_copy(deep=True) if profile is not None else None

    async def find_transactions_since(self, user_id: str, since: datetime) -> list[Transaction]:
        since = ensure_utc(since)
        return [
            t.model_copy(deep=True)
            for t in self._transactions.get(user_id, [])
            if t.timestamp >= since
        ]

    async def list_transactions(self, user_id: str, limit: int) -> list[Transaction]:
        rows = sorted(
            self._transactions.get(user_id, []), key=lambda t: t.timestamp, reverse=True
        )
        return [t.model_copy(deep=True) for t in rows[:limit]]

    async def save_profile(self, profile: UserProfile) -> None:
        self._profiles[profile.user_id] = profile.model_copy(deep=True)

    async def record_scored_transaction(
        self, transaction: Transaction, profile: UserProfile
    ) -> Transaction:
        saved = transaction.model_copy(
            update={"transaction_id": transaction.transaction_id or uuid.uuid4().hex},
            deep=True,
        )
        stored_profile = profile.model_copy(deep=True)
        # Both copies exist before either write
        self._transactions[saved.user_id].append(saved)
        self._profiles[stored_profile.user_id] = stored_profile
        return saved.model_copy(deep=True)
