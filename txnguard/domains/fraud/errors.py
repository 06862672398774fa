"""Exceptions raised by the fraud scoring service."""


class FraudServiceError(Exception):
    """Base exception for fraud scoring errors."""

    kind = "fraud_service_error"


class ValidationError(FraudServiceError, ValueError):
    """Missing or malformed transaction or profile-update fields."""

    kind = "validation_error"


class NotFoundError(FraudServiceError, LookupError):
    """Profile update requested for a user that has never been scored."""

    kind = "not_found"


class PersistenceError(FraudServiceError):
    """Profile store read or write failure."""

    kind = "persistence_error"
