"""FastAPI dependencies shared by the routers."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from txnguard.db.database import get_session
from txnguard.domains.fraud.config import FraudConfig
from txnguard.domains.fraud.scorer import FraudScorer
from txnguard.domains.fraud.sql_store import SqlProfileStore
from txnguard.domains.fraud.store import ProfileStore

fraud_config = FraudConfig.from_env()

# One scorer per process so per-user locks are shared across requests
_scorer = FraudScorer(config=fraud_config)


def get_scorer() -> FraudScorer:
    return _scorer


async def get_profile_store(
    session: AsyncSession = Depends(get_session),  # noqa: B008
) -> ProfileStore:
    return SqlProfileStore(session, config=fraud_config)
