"""Rule-based risk evaluator with additive scoring."""

import structlog

from .config import FraudConfig, default_config
from .models import (
    RiskAssessment,
    RuleResult,
    Transaction,
    TransactionStatus,
    UserProfile,
)
from .rules import ALL_RULES, FraudRule

logger = structlog.get_logger()


def classify_status(score: int, config: FraudConfig | None = None) -> TransactionStatus:
    cfg = config or default_config
    if score >= cfg.status.reject_min:
        return TransactionStatus.REJECTED
    if score >= cfg.status.flag_min:
        return TransactionStatus.FLAGGED
    return TransactionStatus.COMPLETED


class RiskEvaluator:
    """Scores a transaction against the user's profile and recent history.

    Scoring is a plain sum:
    1. Run every rule -> list[RuleResult]
    2. Score = sum of points of triggered rules (each rule at most once)
    3. Status from the score via reject/flag thresholds

    Evaluation does no I/O; recent transactions are fetched by the caller.
    """

    def __init__(
        self,
        config: FraudConfig | None = None,
        rules: list[FraudRule] | None = None,
    ) -> None:
        self._config = config or default_config
        self._rules = list(rules if rules is not None else ALL_RULES)

    @property
    def rules(self) -> list[FraudRule]:
        return list(self._rules)

    def evaluate(
        self,
        transaction: Transaction,
        profile: UserProfile,
        recent: list[Transaction],
    ) -> tuple[RiskAssessment, list[RuleResult]]:
        """Evaluate a transaction against all rules. Returns assessment and results."""
        results = [
            rule.evaluate(transaction, profile, recent, self._config) for rule in self._rules
        ]
        triggered = [r for r in results if r.triggered]

        score = sum(r.points for r in triggered)
        factors = []
        for r in triggered:
            if r.risk_factor is not None and r.risk_factor not in factors:
                factors.append(r.risk_factor)

        status = classify_status(score, self._config)

        logger.debug(
            "rules_evaluated",
            user_id=transaction.user_id,
            score=score,
            status=status.value,
            factors=[f.value for f in factors],
            recent_count=len(recent),
        )

        return RiskAssessment(score=score, factors=factors, status=status), results
