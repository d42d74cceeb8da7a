"""Exception types for the notification scheduler."""

from core.exceptions.scheduler_exceptions import (
    ConfigurationError,
    FatalSchedulerError,
    PushSubscriptionGoneError,
    QueryError,
    SchedulerError,
    TransientDeliveryError,
)

__all__ = [
    "ConfigurationError",
    "FatalSchedulerError",
    "PushSubscriptionGoneError",
    "QueryError",
    "SchedulerError",
    "TransientDeliveryError",
]
