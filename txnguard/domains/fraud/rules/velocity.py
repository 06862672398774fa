"""Time and frequency based fraud detection rules."""

from ..config import FraudConfig
from ..models import RiskFactor, RuleResult, Transaction, UserProfile
from ..timeutil import hour_of_day
from .base import FraudRule


class UnusualTimeRule(FraudRule):
    """Triggers for transactions at an hour the user has never transacted.

    Never fires until at least one hour has been learned.
    """

    rule_id = "unusual_time"
    category = "velocity"
    risk_factor = RiskFactor.UNUSUAL_TIME

    def points(self, config: FraudConfig) -> int:
        return config.points.unusual_time

    def evaluate(
        self,
        transaction: Transaction,
        profile: UserProfile,
        recent: list[Transaction],
        config: FraudConfig,
    ) -> RuleResult:
        known = profile.usual_transaction_hours
        if not known:
            return self._not_triggered()

        hour = hour_of_day(transaction.timestamp, config.hour_timezone)
        if hour in known:
            return self._not_triggered()

        return self._triggered(
            config,
            details=f"Transaction at unusual hour: {hour}:00 {config.hour_timezone}",
            evidence={"hour": hour, "usual_hours": sorted(known)},
        )


class HighFrequencyLargeAmountsRule(FraudRule):
    """Triggers on a burst of recent transactions with several large amounts.

    "Large" is relative to the user's running average before the current
    transaction is folded in.
    """

    rule_id = "high_frequency_large_amounts"
    category = "velocity"
    risk_factor = RiskFactor.HIGH_FREQUENCY_LARGE_AMOUNTS

    def points(self, config: FraudConfig) -> int:
        return config.points.high_frequency_large_amounts

    def evaluate(
        self,
        transaction: Transaction,
        profile: UserProfile,
        recent: list[Transaction],
        config: FraudConfig,
    ) -> RuleResult:
        rule = profile.frequency_rule
        if len(recent) < rule.count:
            return self._not_triggered()

        cutoff = profile.average_transaction_amount * config.frequency.large_amount_multiplier
        large = sum(1 for t in recent if t.amount > cutoff)
        if large < config.frequency.min_large_recent:
            return self._not_triggered()

        return self._triggered(
            config,
            details=(
                f"{len(recent)} transactions in {rule.window_hours:g}h, "
                f"{large} above ${cutoff:,.2f}"
            ),
            evidence={
                "recent_count": len(recent),
                "large_count": large,
                "large_cutoff": cutoff,
                "window_hours": rule.window_hours,
                "count_threshold": rule.count,
            },
        )
