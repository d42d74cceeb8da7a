"""Test-specific Django settings."""

from django.db.models.signals import class_prepared

from .settings import *

# Use SQLite for faster tests
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

# Disable debug for tests
DEBUG = False

# Use local cache for tests
CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
    }
}

# Suppress logs during tests (only show CRITICAL errors)
LOGGING_CONFIG = "logging.config.dictConfig"
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "handlers": {
        "null": {
            "class": "logging.NullHandler",
        },
    },
    "root": {
        "handlers": ["null"],
        "level": "CRITICAL",
    },
    "loggers": {
        "django": {
            "handlers": ["null"],
            "level": "CRITICAL",
            "propagate": False,
        },
        "core": {
            "handlers": ["null"],
            "level": "CRITICAL",
            "propagate": False,
        },
    },
}

# Deterministic delivery settings
EMAIL_ENABLED = True
EMAIL_HOST = "localhost"
EMAIL_PORT = 25
EMAIL_USE_TLS = False
VAPID_PRIVATE_KEY = "test-private-key"
EXPO_PUSH_URL = "https://exp.host/--/api/v2/push/send"
PUSH_MAX_WORKERS = 4
DEFAULT_TIMEZONE = "America/Los_Angeles"

# Test-specific settings
TEST_MODE = True

# Force unmanaged models to be managed ONLY for tests
# The inventory, preference and log tables are owned by the main application
# database schema, so their models are unmanaged. We need the tables created
# for tests.


def make_unmanaged_models_managed(sender, **_kwargs):
    """Signal handler to make unmanaged models managed during tests.

    This fires when each model class is prepared by Django.
    """
    if not sender._meta.managed:
        sender._meta.managed = True


# Connect the signal - this will fire for each model as it's loaded
class_prepared.connect(make_unmanaged_models_managed)
