"""Fraud scoring pipeline: validate -> profile -> rules -> adapt -> persist."""

import uuid
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any

import pydantic
import structlog

from .config import FraudConfig, default_config
from .errors import NotFoundError, ValidationError
from .locks import UserLockRegistry
from .models import RiskProfileUpdate, Transaction, TransactionRequest, TransactionRisk, UserProfile
from .profile import ProfileAdapter, merge_risk_profile
from .recency import find_recent_transactions
from .rules_engine import RiskEvaluator
from .store import ProfileStore

logger = structlog.get_logger()


def _describe(exc: pydantic.ValidationError, subject: str) -> str:
    fields = sorted({".".join(str(p) for p in err["loc"]) for err in exc.errors() if err["loc"]})
    if not fields:
        return f"Invalid {subject} payload"
    return f"Missing or malformed {subject} fields: {', '.join(fields)}"


def validate_transaction(payload: TransactionRequest | Mapping[str, Any]) -> TransactionRequest:
    if isinstance(payload, TransactionRequest):
        return payload
    try:
        return TransactionRequest.model_validate(payload)
    except pydantic.ValidationError as exc:
        raise ValidationError(_describe(exc, "transaction")) from exc


def validate_profile_update(payload: RiskProfileUpdate | Mapping[str, Any]) -> RiskProfileUpdate:
    if isinstance(payload, RiskProfileUpdate):
        return payload
    try:
        return RiskProfileUpdate.model_validate(payload)
    except pydantic.ValidationError as exc:
        raise ValidationError(_describe(exc, "risk profile")) from exc


class FraudScorer:
    """Orchestrates scoring and profile maintenance for one process.

    Work for the same user is serialized through a lock registry so the
    running mean is never computed from a stale profile; different users
    proceed independently.
    """

    def __init__(
        self,
        config: FraudConfig | None = None,
        locks: UserLockRegistry | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._config = config or default_config
        self._evaluator = RiskEvaluator(config=self._config)
        self._adapter = ProfileAdapter(config=self._config)
        self._locks = locks or UserLockRegistry()
        self._clock = clock or (lambda: datetime.now(UTC))

    async def score_transaction(
        self,
        payload: TransactionRequest | Mapping[str, Any],
        store: ProfileStore,
    ) -> Transaction:
        """Score, persist and learn from one transaction.

        Returns the stored transaction carrying its id, status and risk. A
        store failure propagates and no verdict is returned.
        """
        request = validate_transaction(payload)
        transaction = Transaction.from_request(request, now=self._clock())
        user_id = transaction.user_id

        async with self._locks.hold(user_id):
            # 1. Current baseline (created on first sight) and recent history
            profile = await store.get_or_create_profile(user_id)
            recent = await find_recent_transactions(
                store, user_id, profile.frequency_rule, transaction.timestamp
            )

            # 2. Evaluate rules against the pre-transaction profile
            assessment, rule_results = self._evaluator.evaluate(transaction, profile, recent)
            evaluated = transaction.model_copy(
                update={
                    "transaction_id": uuid.uuid4().hex,
                    "status": assessment.status,
                    "risk": TransactionRisk(score=assessment.score, factors=assessment.factors),
                }
            )

            # 3. Fold the decision into the baseline and persist both together
            adapted = self._adapter.apply(profile, evaluated)
            saved = await store.record_scored_transaction(evaluated, adapted)

        logger.info(
            "transaction_scored",
            transaction_id=saved.transaction_id,
            user_id=user_id,
            score=assessment.score,
            status=assessment.status.value,
            factors=[f.value for f in assessment.factors],
            rules_triggered=[r.rule_name for r in rule_results if r.triggered],
        )

        return saved

    async def update_risk_profile(
        self,
        user_id: str,
        payload: RiskProfileUpdate | Mapping[str, Any],
        store: ProfileStore,
    ) -> UserProfile:
        """Partially update a known user's threshold and frequency rule."""
        update = validate_profile_update(payload)

        async with self._locks.hold(user_id):
            profile = await store.get_profile(user_id)
            if profile is None:
                raise NotFoundError(f"User {user_id} not found")
            updated = merge_risk_profile(profile, update)
            await store.save_profile(updated)

        logger.info(
            "risk_profile_updated",
            user_id=user_id,
            high_amount_threshold=updated.high_amount_threshold,
            frequency_count=updated.frequency_rule.count,
            frequency_window_hours=updated.frequency_rule.window_hours,
        )
        return updated

    async def transaction_history(
        self,
        user_id: str,
        store: ProfileStore,
        limit: int = 20,
    ) -> list[Transaction]:
        """Latest transactions for a user, newest first."""
        if limit < 1:
            raise ValidationError("limit must be a positive integer")
        return await store.list_transactions(user_id, limit)
