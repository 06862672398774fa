"""Geography-based fraud detection rules."""

from ..config import FraudConfig
from ..models import RiskFactor, RuleResult, Transaction, UserProfile
from .base import FraudRule


class UnusualCountryRule(FraudRule):
    """Triggers when the user transacts from a country outside their baseline.

    Never fires until at least one country has been learned.
    """

    rule_id = "unusual_country"
    category = "geo"
    risk_factor = RiskFactor.UNUSUAL_COUNTRY

    def points(self, config: FraudConfig) -> int:
        return config.points.unusual_country

    def evaluate(
        self,
        transaction: Transaction,
        profile: UserProfile,
        recent: list[Transaction],
        config: FraudConfig,
    ) -> RuleResult:
        known = profile.usual_countries
        if not known or transaction.country in known:
            return self._not_triggered()

        return self._triggered(
            config,
            details=f"Transaction from unusual country: {transaction.country}",
            evidence={"country": transaction.country, "usual_countries": sorted(known)},
        )
