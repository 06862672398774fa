"""Unit tests for the PostgreSQL profile store against a mocked session."""

from datetime import UTC, datetime
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from txnguard.db.models import TransactionDB, UserProfileDB
from txnguard.domains.fraud.errors import PersistenceError
from txnguard.domains.fraud.models import (
    FrequencyRule,
    RiskFactor,
    Transaction,
    TransactionRisk,
    TransactionStatus,
    UserProfile,
)
from txnguard.domains.fraud.sql_store import SqlProfileStore

NOW = datetime(2026, 1, 15, 14, 0, 0, tzinfo=UTC)


def _result(row=None, rows=None):
    result = MagicMock()
    result.scalar_one_or_none.return_value = row
    result.scalars.return_value = MagicMock(all=MagicMock(return_value=rows or []))
    return result


def _profile_row(**kwargs) -> UserProfileDB:
    defaults = {
        "user_id": "user-1",
        "usual_transaction_hours": [3, 14],
        "usual_countries": ["FR", "US"],
        "average_transaction_amount": 250.0,
        "transaction_count": 4,
        "high_amount_threshold": 1000.0,
        "frequency_count": 3,
        "frequency_window_hours": 24.0,
    }
    defaults.update(kwargs)
    return UserProfileDB(**defaults)


def _transaction_row(**kwargs) -> TransactionDB:
    defaults = {
        "transaction_id": "txn-1",
        "user_id": "user-1",
        "amount": 99.0,
        "receiver_address": "acct-1",
        "country": "US",
        "timestamp": NOW,
        "status": "flagged",
        "risk_score": 45,
        "risk_factors": ["high_amount", "unusual_time"],
    }
    defaults.update(kwargs)
    return TransactionDB(**defaults)


class TestProfiles:
    async def test_existing_profile(self, mock_db_session):
        mock_db_session.execute.return_value = _result(row=_profile_row())
        store = SqlProfileStore(mock_db_session)

        profile = await store.get_or_create_profile("user-1")

        assert profile.usual_transaction_hours == {3, 14}
        assert profile.usual_countries == {"FR", "US"}
        assert profile.transaction_count == 4
        mock_db_session.add.assert_not_called()
        mock_db_session.commit.assert_not_awaited()

    async def test_creates_missing_profile(self, mock_db_session):
        mock_db_session.execute.return_value = _result(row=None)
        store = SqlProfileStore(mock_db_session)

        profile = await store.get_or_create_profile("user-1")

        assert profile == UserProfile(user_id="user-1")
        added = mock_db_session.add.call_args.args[0]
        assert isinstance(added, UserProfileDB)
        assert added.user_id == "user-1"
        assert added.usual_countries == []
        assert added.frequency_count == 3
        mock_db_session.commit.assert_awaited_once()

    async def test_create_race_reads_winner(self, mock_db_session):
        mock_db_session.execute.side_effect = [
            _result(row=None),
            _result(row=_profile_row(transaction_count=1)),
        ]
        mock_db_session.commit.side_effect = IntegrityError(
            "INSERT", {}, Exception("duplicate key")
        )
        store = SqlProfileStore(mock_db_session)

        profile = await store.get_or_create_profile("user-1")

        assert profile.transaction_count == 1
        mock_db_session.rollback.assert_awaited_once()

    async def test_get_profile_missing(self, mock_db_session):
        mock_db_session.execute.return_value = _result(row=None)
        assert await SqlProfileStore(mock_db_session).get_profile("ghost") is None
        mock_db_session.add.assert_not_called()

    async def test_read_failure(self, mock_db_session):
        mock_db_session.execute.side_effect = OperationalError(
            "SELECT", {}, Exception("connection refused")
        )
        store = SqlProfileStore(mock_db_session)

        with pytest.raises(PersistenceError):
            await store.get_or_create_profile("user-1")
        mock_db_session.rollback.assert_awaited_once()

    async def test_save_profile_updates_row(self, mock_db_session):
        row = _profile_row()
        mock_db_session.execute.return_value = _result(row=row)
        store = SqlProfileStore(mock_db_session)

        await store.save_profile(
            UserProfile(
                user_id="user-1",
                usual_transaction_hours={14, 3, 7},
                usual_countries={"US", "FR", "DE"},
                average_transaction_amount=300.0,
                transaction_count=5,
                frequency_rule=FrequencyRule(count=4, window_hours=12),
            )
        )

        assert row.usual_transaction_hours == [3, 7, 14]
        assert row.usual_countries == ["DE", "FR", "US"]
        assert row.transaction_count == 5
        assert row.frequency_count == 4
        assert row.frequency_window_hours == 12.0
        mock_db_session.commit.assert_awaited_once()

    async def test_save_profile_commit_failure(self, mock_db_session):
        mock_db_session.execute.return_value = _result(row=_profile_row())
        mock_db_session.commit.side_effect = OperationalError("UPDATE", {}, Exception("gone"))
        store = SqlProfileStore(mock_db_session)

        with pytest.raises(PersistenceError):
            await store.save_profile(UserProfile(user_id="user-1"))
        mock_db_session.rollback.assert_awaited_once()


class TestTransactions:
    def _scored(self, **kwargs) -> Transaction:
        defaults = {
            "user_id": "user-1",
            "amount": 1500.0,
            "receiver_address": "acct-1",
            "country": "FR",
            "timestamp": NOW,
            "status": TransactionStatus.COMPLETED,
            "risk": TransactionRisk(score=30, factors=[RiskFactor.HIGH_AMOUNT]),
        }
        defaults.update(kwargs)
        return Transaction(**defaults)

    async def test_record_single_commit(self, mock_db_session):
        profile_row = _profile_row()
        mock_db_session.execute.return_value = _result(row=profile_row)
        store = SqlProfileStore(mock_db_session)

        saved = await store.record_scored_transaction(
            self._scored(), UserProfile(user_id="user-1", transaction_count=5)
        )

        assert saved.transaction_id
        row = mock_db_session.add.call_args.args[0]
        assert isinstance(row, TransactionDB)
        assert row.transaction_id == saved.transaction_id
        assert row.status == "completed"
        assert row.risk_score == 30
        assert row.risk_factors == ["high_amount"]
        assert profile_row.transaction_count == 5
        mock_db_session.commit.assert_awaited_once()

    async def test_record_creates_missing_profile_row(self, mock_db_session):
        mock_db_session.execute.return_value = _result(row=None)
        store = SqlProfileStore(mock_db_session)

        await store.record_scored_transaction(self._scored(), UserProfile(user_id="user-1"))

        added = [c.args[0] for c in mock_db_session.add.call_args_list]
        assert [type(a) for a in added] == [UserProfileDB, TransactionDB]
        mock_db_session.commit.assert_awaited_once()

    async def test_record_failure_rolls_back_both(self, mock_db_session):
        mock_db_session.execute.return_value = _result(row=_profile_row())
        mock_db_session.commit.side_effect = OperationalError("UPDATE", {}, Exception("disk"))
        store = SqlProfileStore(mock_db_session)

        with pytest.raises(PersistenceError):
            await store.record_scored_transaction(
                self._scored(), UserProfile(user_id="user-1", transaction_count=5)
            )

        mock_db_session.commit.assert_awaited_once()
        mock_db_session.rollback.assert_awaited_once()

    async def test_find_transactions_since(self, mock_db_session):
        mock_db_session.execute.return_value = _result(rows=[_transaction_row()])
        store = SqlProfileStore(mock_db_session)

        [transaction] = await store.find_transactions_since("user-1", NOW)

        assert transaction.transaction_id == "txn-1"
        assert transaction.status == TransactionStatus.FLAGGED
        assert transaction.risk.factors == [RiskFactor.HIGH_AMOUNT, RiskFactor.UNUSUAL_TIME]
        mock_db_session.execute.assert_awaited_once()

    async def test_list_transactions_pending_row(self, mock_db_session):
        row = _transaction_row(status="pending", risk_score=None, risk_factors=[])
        mock_db_session.execute.return_value = _result(rows=[row])
        store = SqlProfileStore(mock_db_session)

        [transaction] = await store.list_transactions("user-1", limit=20)
        assert transaction.risk is None
        assert transaction.status == TransactionStatus.PENDING

