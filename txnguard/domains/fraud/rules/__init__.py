"""Fraud detection rules package.

Exports ALL_RULES (list of all rule instances) and individual rule classes
for direct use.
"""

from .amount import HighAmountRule
from .base import FraudRule
from .geo import UnusualCountryRule
from .velocity import HighFrequencyLargeAmountsRule, UnusualTimeRule

# All rule instances in evaluation order
ALL_RULES: list[FraudRule] = [
    HighAmountRule(),
    UnusualCountryRule(),
    UnusualTimeRule(),
    HighFrequencyLargeAmountsRule(),
]

__all__ = [
    "ALL_RULES",
    "FraudRule",
    "HighAmountRule",
    "UnusualCountryRule",
    "UnusualTimeRule",
    "HighFrequencyLargeAmountsRule",
]
