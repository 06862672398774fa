"""Fraud scoring configuration with sensible defaults."""

import os
from dataclasses import dataclass, field
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


@dataclass
class RulePoints:
    high_amount: int = 30
    unusual_country: int = 25
    unusual_time: int = 15
    high_frequency_large_amounts: int = 30


@dataclass
class FrequencyThresholds:
    # A recent transaction is "large" above this multiple of the user's average
    large_amount_multiplier: float = 1.5
    # Minimum number of large recent transactions for the frequency rule
    min_large_recent: int = 2


@dataclass
class StatusThresholds:
    flag_min: int = 40
    reject_min: int = 70

    def __post_init__(self) -> None:
        if self.flag_min > self.reject_min:
            raise ValueError(
                f"flag threshold ({self.flag_min}) must not exceed "
                f"reject threshold ({self.reject_min})"
            )


@dataclass
class ProfileDefaults:
    """Values a lazily-created user profile starts with."""

    high_amount_threshold: float = 1000.0
    frequency_count: int = 3
    frequency_window_hours: float = 24.0


def _check_timezone(name: str) -> None:
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError) as exc:
        raise ValueError(f"unknown hour timezone: {name!r}") from exc


@dataclass
class FraudConfig:
    points: RulePoints = field(default_factory=RulePoints)
    frequency: FrequencyThresholds = field(default_factory=FrequencyThresholds)
    status: StatusThresholds = field(default_factory=StatusThresholds)
    profile_defaults: ProfileDefaults = field(default_factory=ProfileDefaults)
    # Timezone in which hour-of-day is learned and compared
    hour_timezone: str = "UTC"

    def __post_init__(self) -> None:
        _check_timezone(self.hour_timezone)

    @classmethod
    def from_env(cls) -> "FraudConfig":
        """Load config with env var overrides. Env vars use FRAUD_ prefix."""
        config = cls()

        # Rule points
        if v := os.getenv("FRAUD_POINTS_HIGH_AMOUNT"):
            config.points.high_amount = int(v)
        if v := os.getenv("FRAUD_POINTS_UNUSUAL_COUNTRY"):
            config.points.unusual_country = int(v)
        if v := os.getenv("FRAUD_POINTS_UNUSUAL_TIME"):
            config.points.unusual_time = int(v)
        if v := os.getenv("FRAUD_POINTS_HIGH_FREQUENCY"):
            config.points.high_frequency_large_amounts = int(v)

        # Frequency rule
        if v := os.getenv("FRAUD_LARGE_AMOUNT_MULTIPLIER"):
            config.frequency.large_amount_multiplier = float(v)
        if v := os.getenv("FRAUD_MIN_LARGE_RECENT"):
            config.frequency.min_large_recent = int(v)

        # Status thresholds
        if v := os.getenv("FRAUD_FLAG_THRESHOLD"):
            config.status.flag_min = int(v)
        if v := os.getenv("FRAUD_REJECT_THRESHOLD"):
            config.status.reject_min = int(v)
        config.status.__post_init__()

        # Profile defaults
        if v := os.getenv("FRAUD_DEFAULT_HIGH_AMOUNT_THRESHOLD"):
            config.profile_defaults.high_amount_threshold = float(v)
        if v := os.getenv("FRAUD_DEFAULT_FREQUENCY_COUNT"):
            config.profile_defaults.frequency_count = int(v)
        if v := os.getenv("FRAUD_DEFAULT_FREQUENCY_WINDOW_HOURS"):
            config.profile_defaults.frequency_window_hours = float(v)

        if v := os.getenv("FRAUD_HOUR_TIMEZONE"):
            _check_timezone(v)
            config.hour_timezone = v

        return config


# Module-level default instance
default_config = FraudConfig()
