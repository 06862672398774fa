"""User risk-profile endpoints."""

from fastapi import APIRouter, Depends

from txnguard.api.dependencies import get_profile_store, get_scorer
from txnguard.domains.fraud.models import RiskProfileUpdate
from txnguard.domains.fraud.scorer import FraudScorer
from txnguard.domains.fraud.store import ProfileStore

router = APIRouter(prefix="/users", tags=["users"])


@router.patch("/{user_id}/risk-profile")
async def update_risk_profile(
    user_id: str,
    update: RiskProfileUpdate,
    store: ProfileStore = Depends(get_profile_store),  # noqa: B008
    scorer: FraudScorer = Depends(get_scorer),  # noqa: B008
) -> dict:
    profile = await scorer.update_risk_profile(user_id, update, store)
    return {
        "status": "success",
        "message": "Risk profile updated",
        "user": profile.model_dump(mode="json"),
    }
