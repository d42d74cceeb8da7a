"""Custom exceptions for the notification scheduler."""


class SchedulerError(Exception):
    """Base exception for notification scheduler errors."""

    def __init__(self, message: str, user_id: str | None = None):
        """Initialize scheduler error.

        Args:
            message: Error message
            user_id: User the failing unit of work belonged to, if any
        """
        self.user_id = user_id
        super().__init__(message)


class ConfigurationError(SchedulerError):
    """A stored preference value is malformed and was replaced by a default."""

    def __init__(self, field: str, value: object, user_id: str | None = None):
        """Initialize configuration error.

        Args:
            field: Name of the malformed preference field
            value: The rejected value
            user_id: Owner of the preference record
        """
        self.field = field
        self.value = value
        super().__init__(
            message=f"Invalid value for {field}: {value!r}",
            user_id=user_id,
        )


class TransientDeliveryError(SchedulerError):
    """One delivery target rejected a notification (push endpoint, SMTP)."""

    def __init__(
        self,
        message: str,
        target: str | None = None,
        status_code: int | None = None,
    ):
        """Initialize delivery error.

        Args:
            message: Error message
            target: Identifier of the failing target (endpoint, token, address)
            status_code: HTTP status code if applicable
        """
        self.target = target
        self.status_code = status_code
        super().__init__(message)


class PushSubscriptionGoneError(TransientDeliveryError):
    """Push target is expired or unregistered and should be removed (404/410)."""

    def __init__(self, target: str, status_code: int | None = 410):
        """Initialize gone error.

        Args:
            target: Endpoint or token that is no longer valid
            status_code: HTTP status code reported by the push service
        """
        super().__init__(
            message=f"Push target is no longer registered: {target}",
            target=target,
            status_code=status_code,
        )


class QueryError(SchedulerError):
    """A data-store read for one user or one threshold failed."""

    def __init__(self, message: str, user_id: str | None = None, scope: str = ""):
        """Initialize query error.

        Args:
            message: Error message
            user_id: User whose data was being read
            scope: Which subset failed (e.g. ``threshold:3`` or ``expired``)
        """
        self.scope = scope
        super().__init__(message=message, user_id=user_id)


class FatalSchedulerError(SchedulerError):
    """The cadence driver cannot be started (e.g. invalid interval config)."""
