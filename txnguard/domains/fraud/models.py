"""Pydantic models for the fraud domain."""

from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
)

from .config import FraudConfig
from .timeutil import ensure_utc


class TransactionStatus(StrEnum):
    PENDING = "pending"
    COMPLETED = "completed"
    FLAGGED = "flagged"
    REJECTED = "rejected"


class RiskFactor(StrEnum):
    HIGH_AMOUNT = "high_amount"
    UNUSUAL_COUNTRY = "unusual_country"
    UNUSUAL_TIME = "unusual_time"
    HIGH_FREQUENCY_LARGE_AMOUNTS = "high_frequency_large_amounts"


class RuleResult(BaseModel):
    rule_name: str
    triggered: bool
    points: int = 0
    risk_factor: RiskFactor | None = None
    details: str = ""
    category: str = ""
    evidence: dict = Field(default_factory=dict)


class FrequencyRule(BaseModel):
    """How many transactions within how many hours count as elevated frequency."""

    count: int = Field(default=3, gt=0)
    window_hours: float = Field(default=24.0, gt=0, allow_inf_nan=False)


class UserProfile(BaseModel):
    user_id: str
    usual_transaction_hours: set[int] = Field(default_factory=set)
    usual_countries: set[str] = Field(default_factory=set)
    average_transaction_amount: float = Field(default=0.0, ge=0)
    transaction_count: int = Field(default=0, ge=0)
    high_amount_threshold: float = Field(default=1000.0, gt=0, allow_inf_nan=False)
    frequency_rule: FrequencyRule = Field(default_factory=FrequencyRule)

    @field_validator("usual_transaction_hours")
    @classmethod
    def _hours_in_range(cls, hours: set[int]) -> set[int]:
        bad = [h for h in hours if not 0 <= h <= 23]
        if bad:
            raise ValueError(f"hours must be within 0-23, got {sorted(bad)}")
        return hours

    @field_serializer("usual_transaction_hours", "usual_countries")
    def _sorted(self, values: set) -> list:
        return sorted(values)

    @classmethod
    def with_defaults(cls, user_id: str, config: FraudConfig) -> "UserProfile":
        defaults = config.profile_defaults
        return cls(
            user_id=user_id,
            high_amount_threshold=defaults.high_amount_threshold,
            frequency_rule=FrequencyRule(
                count=defaults.frequency_count,
                window_hours=defaults.frequency_window_hours,
            ),
        )


class TransactionRequest(BaseModel):
    """Caller-supplied transaction fields, validated before scoring."""

    model_config = ConfigDict(str_strip_whitespace=True)

    user_id: str = Field(min_length=1, validation_alias=AliasChoices("user_id", "userId"))
    amount: float = Field(ge=0, allow_inf_nan=False)
    receiver_address: str = Field(
        min_length=1, validation_alias=AliasChoices("receiver_address", "receiverAddress")
    )
    country: str = Field(min_length=1)
    timestamp: datetime | None = None

    @field_validator("amount", mode="before")
    @classmethod
    def _numeric_amount(cls, value: Any) -> Any:
        # JSON numbers only; numeric strings and booleans are rejected
        if isinstance(value, bool | str | bytes):
            raise ValueError("amount must be a number")
        return value

    @field_validator("timestamp")
    @classmethod
    def _aware_timestamp(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value) if value is not None else None


class TransactionRisk(BaseModel):
    score: int = Field(ge=0)
    factors: list[RiskFactor] = []


class Transaction(BaseModel):
    transaction_id: str | None = None
    user_id: str
    amount: float = Field(ge=0)
    receiver_address: str
    country: str
    timestamp: datetime
    status: TransactionStatus = TransactionStatus.PENDING
    risk: TransactionRisk | None = None

    @field_validator("timestamp")
    @classmethod
    def _aware_timestamp(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    @classmethod
    def from_request(cls, request: TransactionRequest, now: datetime) -> "Transaction":
        return cls(
            user_id=request.user_id,
            amount=request.amount,
            receiver_address=request.receiver_address,
            country=request.country,
            timestamp=request.timestamp or now,
        )


class RiskAssessment(BaseModel):
    score: int = Field(ge=0)
    factors: list[RiskFactor] = []
    status: TransactionStatus


class FrequencyRuleUpdate(BaseModel):
    count: int | None = Field(default=None, gt=0)
    window_hours: float | None = Field(
        default=None,
        gt=0,
        allow_inf_nan=False,
        validation_alias=AliasChoices("window_hours", "timeWindowHours"),
    )


class RiskProfileUpdate(BaseModel):
    """Partial update of the user-tunable parts of a profile."""

    high_amount_threshold: float | None = Field(
        default=None,
        gt=0,
        allow_inf_nan=False,
        validation_alias=AliasChoices("high_amount_threshold", "highRiskThreshold"),
    )
    frequency_rule: FrequencyRuleUpdate | None = Field(
        default=None, validation_alias=AliasChoices("frequency_rule", "frequencyThreshold")
    )
