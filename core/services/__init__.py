"""Services for the core app."""

from core.services.dedup_guard import DedupGuard
from core.services.delivery_logger import DeliveryLogger
from core.services.email_service import EmailService
from core.services.expiry_notification_service import ExpiryNotificationService
from core.services.expiry_query import ExpiryWindow, ExpiryWindowQuery
from core.services.push import PushService
from core.services.single_flight import SingleFlight
from core.services.timezone_resolver import resolve_local_clock

__all__ = [
    "DedupGuard",
    "DeliveryLogger",
    "EmailService",
    "ExpiryNotificationService",
    "ExpiryWindow",
    "ExpiryWindowQuery",
    "PushService",
    "SingleFlight",
    "resolve_local_clock",
]
