"""Transaction scoring and history endpoints."""

from fastapi import APIRouter, Depends, Query

from txnguard.api.dependencies import get_profile_store, get_scorer
from txnguard.config import settings
from txnguard.domains.fraud.models import Transaction, TransactionRequest
from txnguard.domains.fraud.scorer import FraudScorer
from txnguard.domains.fraud.store import ProfileStore

router = APIRouter(prefix="/transactions", tags=["transactions"])


def _summary(transaction: Transaction) -> dict:
    risk = transaction.risk
    return {
        "id": transaction.transaction_id,
        "amount": transaction.amount,
        "status": transaction.status.value,
        "risk": {
            "score": risk.score if risk else 0,
            "factors": [f.value for f in risk.factors] if risk else [],
        },
    }


@router.post("/analyze")
async def analyze_transaction(
    request: TransactionRequest,
    store: ProfileStore = Depends(get_profile_store),  # noqa: B008
    scorer: FraudScorer = Depends(get_scorer),  # noqa: B008
) -> dict:
    transaction = await scorer.score_transaction(request, store)
    return {"status": "success", "transaction": _summary(transaction)}


@router.get("/{user_id}")
async def transaction_history(
    user_id: str,
    limit: int = Query(
        default=settings.history_default_limit, ge=1, le=settings.history_max_limit
    ),
    store: ProfileStore = Depends(get_profile_store),  # noqa: B008
    scorer: FraudScorer = Depends(get_scorer),  # noqa: B008
) -> dict:
    transactions = await scorer.transaction_history(user_id, store, limit=limit)
    return {
        "status": "success",
        "transactions": [t.model_dump(mode="json") for t in transactions],
    }
