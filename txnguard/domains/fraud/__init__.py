"""Fraud detection domain."""

from .errors import FraudServiceError, NotFoundError, PersistenceError, ValidationError
from .locks import UserLockRegistry
from .models import (
    FrequencyRule,
    RiskAssessment,
    RiskFactor,
    RiskProfileUpdate,
    RuleResult,
    Transaction,
    TransactionRequest,
    TransactionRisk,
    TransactionStatus,
    UserProfile,
)
from .profile import ProfileAdapter
from .recency import find_recent_transactions, recency_window
from .rules import ALL_RULES
from .rules_engine import RiskEvaluator, classify_status
from .scorer import FraudScorer
from .store import InMemoryProfileStore, ProfileStore

__all__ = [
    "ALL_RULES",
    "FraudScorer",
    "FraudServiceError",
    "FrequencyRule",
    "InMemoryProfileStore",
    "NotFoundError",
    "PersistenceError",
    "ProfileAdapter",
    "ProfileStore",
    "RiskAssessment",
    "RiskEvaluator",
    "RiskFactor",
    "RiskProfileUpdate",
    "RuleResult",
    "Transaction",
    "TransactionRequest",
    "TransactionRisk",
    "TransactionStatus",
    "UserLockRegistry",
    "UserProfile",
    "ValidationError",
    "classify_status",
    "find_recent_transactions",
    "recency_window",
]
