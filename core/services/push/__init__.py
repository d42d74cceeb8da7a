"""Push delivery clients and the per-user fan-out service."""

from core.services.push.expo_push_client import ExpoPushClient, is_expo_push_token
from core.services.push.push_service import PushService
from core.services.push.web_push_client import WebPushClient

__all__ = [
    "ExpoPushClient",
    "PushService",
    "WebPushClient",
    "is_expo_push_token",
]
