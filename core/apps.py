"""Django application configuration for core."""

import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class CoreConfig(AppConfig):
    """Configuration class for the core application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "core"
    verbose_name = "Expiry notifications"

    def ready(self) -> None:
        """Log once the app registry has loaded the scheduler models."""
        logger.debug("Core app ready")
