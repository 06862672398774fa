"""Abstract base class for fraud detection rules."""

from abc import ABC, abstractmethod

from ..config import FraudConfig
from ..models import RiskFactor, RuleResult, Transaction, UserProfile


class FraudRule(ABC):
    """Base class for all fraud rules.

    Rules are pure: they see the transaction being scored, the user's profile
    as it was before this transaction, and the user's recent transactions.
    A triggered rule always contributes its full fixed points.
    """

    rule_id: str
    category: str  # "amount" | "geo" | "velocity"
    risk_factor: RiskFactor

    @abstractmethod
    def evaluate(
        self,
        transaction: Transaction,
        profile: UserProfile,
        recent: list[Transaction],
        config: FraudConfig,
    ) -> RuleResult:
        """Evaluate this rule and return a RuleResult."""
        ...

    @abstractmethod
    def points(self, config: FraudConfig) -> int:
        """Points this rule adds when triggered."""
        ...

    def _not_triggered(self) -> RuleResult:
        """Convenience: return a non-triggered result for this rule."""
        return RuleResult(
            rule_name=self.rule_id,
            triggered=False,
            category=self.category,
        )

    def _triggered(
        self,
        config: FraudConfig,
        details: str,
        evidence: dict | None = None,
    ) -> RuleResult:
        """Convenience: return a triggered result for this rule."""
        return RuleResult(
            rule_name=self.rule_id,
            triggered=True,
            points=self.points(config),
            risk_factor=self.risk_factor,
            details=details,
            evidence=evidence or {},
            category=self.category,
        )
