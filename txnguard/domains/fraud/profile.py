"""Online adaptation of a user's behavioral baseline.

After every evaluated transaction the profile absorbs it: the running mean
amount is updated and the transaction's hour and country join the learned
sets. Learned hours and countries are never removed.
"""

import structlog

from .config import FraudConfig, default_config
from .models import RiskProfileUpdate, Transaction, TransactionStatus, UserProfile
from .timeutil import hour_of_day

logger = structlog.get_logger()


class ProfileAdapter:
    """Folds evaluated transactions into user profiles."""

    def __init__(self, config: FraudConfig | None = None) -> None:
        self._config = config or default_config

    def apply(self, profile: UserProfile, transaction: Transaction) -> UserProfile:
        """Return the profile updated with one transaction; the input is left untouched."""
        count = profile.transaction_count
        new_average = (profile.average_transaction_amount * count + transaction.amount) / (
            count + 1
        )

        hours = set(profile.usual_transaction_hours)
        hours.add(hour_of_day(transaction.timestamp, self._config.hour_timezone))

        countries = set(profile.usual_countries)
        countries.add(transaction.country)

        updated = profile.model_copy(
            update={
                "average_transaction_amount": new_average,
                "transaction_count": count + 1,
                "usual_transaction_hours": hours,
                "usual_countries": countries,
            },
            deep=True,
        )

        if transaction.status == TransactionStatus.REJECTED:
            # Rejected transactions still shape the baseline
            logger.warning(
                "profile_adapted_from_rejected",
                user_id=profile.user_id,
                transaction_id=transaction.transaction_id,
                country=transaction.country,
            )

        return updated


def merge_risk_profile(profile: UserProfile, update: RiskProfileUpdate) -> UserProfile:
    """Apply a partial risk-profile update; unset fields keep their values."""
    changes: dict = {}
    if update.high_amount_threshold is not None:
        changes["high_amount_threshold"] = update.high_amount_threshold
    if update.frequency_rule is not None:
        rule_changes = update.frequency_rule.model_dump(exclude_none=True)
        if rule_changes:
            changes["frequency_rule"] = profile.frequency_rule.model_copy(update=rule_changes)
    return profile.model_copy(update=changes, deep=True)
