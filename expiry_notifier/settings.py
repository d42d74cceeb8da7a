"""Django settings for the expiry notifier service.

All deployment-specific values are read from environment variables so the
same settings module serves local development, containers and production.
The service owns no HTTP surface; it runs the notification scheduler as a
long-lived process started with ``python manage.py runscheduler``.
"""

import os
from pathlib import Path


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "insecure-development-key")

DEBUG = _env_bool("DJANGO_DEBUG")

ALLOWED_HOSTS: list[str] = []

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "core.apps.CoreConfig",
]

MIDDLEWARE: list[str] = []

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {"context_processors": []},
    },
]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": os.getenv("DATABASE_NAME", "trackabite"),
        "USER": os.getenv("DATABASE_USER", "postgres"),
        "PASSWORD": os.getenv("DATABASE_PASSWORD", ""),
        "HOST": os.getenv("DATABASE_HOST", "localhost"),
        "PORT": os.getenv("DATABASE_PORT", "5432"),
        "CONN_MAX_AGE": int(os.getenv("DATABASE_CONN_MAX_AGE", "60")),
    }
}

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

LANGUAGE_CODE = "en-us"
TIME_ZONE = os.getenv("SERVER_TIME_ZONE", "UTC")
USE_I18N = False
USE_TZ = True

# Scheduler cadence
DEFAULT_TIMEZONE = os.getenv("DEFAULT_TIMEZONE", "America/Los_Angeles")
DAILY_SWEEP_CRON = os.getenv("DAILY_SWEEP_CRON", "0 9 * * *")
FINE_SWEEP_MINUTES = int(os.getenv("FINE_SWEEP_MINUTES", "30"))
# Fine ticks fire at this minute past the hour and every interval after it
FINE_SWEEP_OFFSET_MINUTES = int(os.getenv("FINE_SWEEP_OFFSET_MINUTES", "15"))
SCHEDULER_MAX_INSTANCES = int(os.getenv("SCHEDULER_MAX_INSTANCES", "3"))
SCHEDULER_RUN_ON_START = _env_bool("SCHEDULER_RUN_ON_START")

# Push delivery
PUSH_MAX_WORKERS = int(os.getenv("PUSH_MAX_WORKERS", "8"))
PUSH_TIMEOUT_SECONDS = int(os.getenv("PUSH_TIMEOUT_SECONDS", "10"))
VAPID_PUBLIC_KEY = os.getenv("VAPID_PUBLIC_KEY", "")
VAPID_PRIVATE_KEY = os.getenv("VAPID_PRIVATE_KEY", "")
VAPID_SUBJECT = os.getenv("VAPID_SUBJECT", "mailto:notifications@trackabite.app")
EXPO_ACCESS_TOKEN = os.getenv("EXPO_ACCESS_TOKEN", "")
EXPO_PUSH_URL = os.getenv("EXPO_PUSH_URL", "https://exp.host/--/api/v2/push/send")

# Email delivery
EMAIL_ENABLED = _env_bool("EMAIL_ENABLED")
EMAIL_HOST = os.getenv("EMAIL_HOST", "localhost")
EMAIL_PORT = int(os.getenv("EMAIL_PORT", "587"))
EMAIL_HOST_USER = os.getenv("EMAIL_HOST_USER", "")
EMAIL_HOST_PASSWORD = os.getenv("EMAIL_HOST_PASSWORD", "")
EMAIL_USE_TLS = _env_bool("EMAIL_USE_TLS", "true")
DEFAULT_FROM_EMAIL = os.getenv("DEFAULT_FROM_EMAIL", "notifications@trackabite.app")
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")

# Logging is configured by core.logging.setup_logging() at process start;
# Django's own dictConfig stays out of the way.
LOGGING_CONFIG = None
