"""PostgreSQL-backed profile store."""

import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from txnguard.db.models import TransactionDB, UserProfileDB

from .config import FraudConfig, default_config
from .errors import PersistenceError
from .models import (
    FrequencyRule,
    RiskFactor,
    Transaction,
    TransactionRisk,
    TransactionStatus,
    UserProfile,
)
from .timeutil import ensure_utc

logger = structlog.get_logger()


def profile_from_row(row: UserProfileDB) -> UserProfile:
    return UserProfile(
        user_id=row.user_id,
        usual_transaction_hours=set(row.usual_transaction_hours or []),
        usual_countries=set(row.usual_countries or []),
        average_transaction_amount=row.average_transaction_amount,
        transaction_count=row.transaction_count,
        high_amount_threshold=row.high_amount_threshold,
        frequency_rule=FrequencyRule(
            count=row.frequency_count,
            window_hours=row.frequency_window_hours,
        ),
    )


def _copy_profile_to_row(profile: UserProfile, row: UserProfileDB) -> None:
    row.usual_transaction_hours = sorted(profile.usual_transaction_hours)
    row.usual_countries = sorted(profile.usual_countries)
    row.average_transaction_amount = profile.average_transaction_amount
    row.transaction_count = profile.transaction_count
    row.high_amount_threshold = profile.high_amount_threshold
    row.frequency_count = profile.frequency_rule.count
    row.frequency_window_hours = profile.frequency_rule.window_hours


def transaction_from_row(row: TransactionDB) -> Transaction:
    risk = None
    if row.risk_score is not None:
        risk = TransactionRisk(
            score=row.risk_score,
            factors=[RiskFactor(f) for f in row.risk_factors or []],
        )
    return Transaction(
        transaction_id=row.transaction_id,
        user_id=row.user_id,
        amount=row.amount,
        receiver_address=row.receiver_address,
        country=row.country,
        timestamp=row.timestamp,
        status=TransactionStatus(row.status),
        risk=risk,
    )


def _transaction_to_row(transaction: Transaction) -> TransactionDB:
    risk = transaction.risk
    return TransactionDB(
        transaction_id=transaction.transaction_id,
        user_id=transaction.user_id,
        amount=transaction.amount,
        receiver_address=transaction.receiver_address,
        country=transaction.country,
        timestamp=transaction.timestamp,
        status=transaction.status.value,
        risk_score=risk.score if risk else None,
        risk_factors=[f.value for f in risk.factors] if risk else [],
    )


class SqlProfileStore:
    """Profile store over one AsyncSession.

    Every write commits. SQLAlchemy failures roll the session back and
    surface as PersistenceError.
    """

    def __init__(self, session: AsyncSession, config: FraudConfig | None = None) -> None:
        self._session = session
        self._config = config or default_config

    @asynccontextmanager
    async def _persistence(self, operation: str, user_id: str) -> AsyncIterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            await self._session.rollback()
            logger.error(
                "store_operation_failed", operation=operation, user_id=user_id, error=str(exc)
            )
            raise PersistenceError(f"{operation} failed for user {user_id}") from exc

    async def _profile_row(self, user_id: str) -> UserProfileDB | None:
        stmt = select(UserProfileDB).where(UserProfileDB.user_id == user_id)
        async with self._persistence("read_profile", user_id):
            result = await self._session.execute(stmt)
            return result.scalar_one_or_none()

    async def get_profile(self, user_id: str) -> UserProfile | None:
        row = await self._profile_row(user_id)
        return profile_from_row(row) if row is not None else None

    async def get_or_create_profile(self, user_id: str) -> UserProfile:
        row = await self._profile_row(user_id)
        if row is not None:
            return profile_from_row(row)

        profile = UserProfile.with_defaults(user_id, self._config)
        row = UserProfileDB(user_id=user_id)
        _copy_profile_to_row(profile, row)
        self._session.add(row)
        try:
            await self._session.commit()
        except IntegrityError:
            # Another writer created the profile first; use theirs
            await self._session.rollback()
            existing = await self._profile_row(user_id)
            if existing is None:
                raise PersistenceError(f"create_profile failed for user {user_id}") from None
            logger.info("profile_create_raced", user_id=user_id)
            return profile_from_row(existing)
        except SQLAlchemyError as exc:
            await self._session.rollback()
            logger.error("store_operation_failed", operation="create_profile", user_id=user_id)
            raise PersistenceError(f"create_profile failed for user {user_id}") from exc

        logger.info("profile_created", user_id=user_id)
        return profile

    async def find_transactions_since(self, user_id: str, since: datetime) -> list[Transaction]:
        stmt = (
            select(TransactionDB)
            .where(
                TransactionDB.user_id == user_id,
                TransactionDB.timestamp >= ensure_utc(since),
            )
            .order_by(TransactionDB.timestamp.asc())
        )
        async with self._persistence("find_transactions_since", user_id):
            result = await self._session.execute(stmt)
            rows = result.scalars().all()
        return [transaction_from_row(r) for r in rows]

    async def list_transactions(self, user_id: str, limit: int) -> list[Transaction]:
        stmt = (
            select(TransactionDB)
            .where(TransactionDB.user_id == user_id)
            .order_by(TransactionDB.timestamp.desc())
            .limit(limit)
        )
        async with self._persistence("list_transactions", user_id):
            result = await self._session.execute(stmt)
            rows = result.scalars().all()
        return [transaction_from_row(r) for r in rows]

    async def _stage_profile(self, profile: UserProfile) -> None:
        row = await self._profile_row(profile.user_id)
        if row is None:
            row = UserProfileDB(user_id=profile.user_id)
            self._session.add(row)
        _copy_profile_to_row(profile, row)

    async def save_profile(self, profile: UserProfile) -> None:
        await self._stage_profile(profile)
        async with self._persistence("save_profile", profile.user_id):
            await self._session.commit()

    async def record_scored_transaction(
        self, transaction: Transaction, profile: UserProfile
    ) -> Transaction:
        """Insert the transaction and update the profile in one commit."""
        saved = transaction.model_copy(
            update={"transaction_id": transaction.transaction_id or uuid.uuid4().hex}
        )
        await self._stage_profile(profile)
        async with self._persistence("record_scored_transaction", saved.user_id):
            self._session.add(_transaction_to_row(saved))
            await self._session.commit()
        return saved
