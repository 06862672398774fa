"""Amount-based fraud detection rules."""

from ..config import FraudConfig
from ..models import RiskFactor, RuleResult, Transaction, UserProfile
from .base import FraudRule


class HighAmountRule(FraudRule):
    """Triggers when the amount exceeds the user's high-amount threshold."""

    rule_id = "high_amount"
    category = "amount"
    risk_factor = RiskFactor.HIGH_AMOUNT

    def points(self, config: FraudConfig) -> int:
        return config.points.high_amount

    def evaluate(
        self,
        transaction: Transaction,
        profile: UserProfile,
        recent: list[Transaction],
        config: FraudConfig,
    ) -> RuleResult:
        amount = transaction.amount
        threshold = profile.high_amount_threshold

        if amount <= threshold:
            return self._not_triggered()

        return self._triggered(
            config,
            details=f"Amount ${amount:,.2f} above threshold ${threshold:,.2f}",
            evidence={"amount": amount, "threshold": threshold},
        )
