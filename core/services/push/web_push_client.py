"""Client for browser push subscriptions (Web Push protocol with VAPID)."""

from django.conf import settings

import structlog
from pywebpush import WebPushException, webpush

from core.enums import PushTargetKind
from core.exceptions import PushSubscriptionGoneError, TransientDeliveryError
from core.models import PushSubscription
from core.schemas import DeliveryResult, PushPayload

logger = structlog.get_logger(__name__)

# Push services keep undelivered messages for at most this long
WEB_PUSH_TTL_SECONDS = 86400


class WebPushClient:
    """Sends push messages to browser subscriptions via pywebpush."""

    def __init__(
        self,
        vapid_private_key: str | None = None,
        vapid_subject: str | None = None,
    ):
        """Initialize web push client with VAPID credentials."""
        self.vapid_private_key = (
            vapid_private_key
            if vapid_private_key is not None
            else settings.VAPID_PRIVATE_KEY
        )
        self.vapid_claims = {"sub": vapid_subject or settings.VAPID_SUBJECT}
        self.timeout = settings.PUSH_TIMEOUT_SECONDS

    def send(self, subscription: PushSubscription, payload: PushPayload) -> None:
        """Deliver one payload to one subscription.

        Args:
            subscription: Target browser subscription
            payload: Notification to send

        Raises:
            PushSubscriptionGoneError: The push service answered 404 or 410
            TransientDeliveryError: Any other delivery failure
        """
        try:
            webpush(
                subscription_info=subscription.subscription_info(),
                data=payload.to_json(),
                vapid_private_key=self.vapid_private_key,
                vapid_claims=dict(self.vapid_claims),
                ttl=WEB_PUSH_TTL_SECONDS,
                timeout=self.timeout,
            )
        except WebPushException as e:
            status_code = e.response.status_code if e.response is not None else None
            if status_code in (404, 410):
                raise PushSubscriptionGoneError(
                    subscription.endpoint, status_code=status_code
                ) from e
            raise TransientDeliveryError(
                str(e), target=subscription.endpoint, status_code=status_code
            ) from e
        except Exception as e:
            # Malformed keys or VAPID configuration surface as plain exceptions
            raise TransientDeliveryError(str(e), target=subscription.endpoint) from e

    def send_safely(
        self, subscription: PushSubscription, payload: PushPayload
    ) -> DeliveryResult:
        """Deliver and convert the outcome into a DeliveryResult."""
        try:
            self.send(subscription, payload)
        except PushSubscriptionGoneError as e:
            logger.info(
                "Web push subscription gone",
                subscription_id=str(subscription.id),
                status_code=e.status_code,
            )
            return DeliveryResult(
                target_id=str(subscription.id),
                target_kind=PushTargetKind.WEB,
                success=False,
                error=str(e),
                gone=True,
            )
        except TransientDeliveryError as e:
            logger.warning(
                "Web push delivery failed",
                subscription_id=str(subscription.id),
                endpoint=subscription.endpoint[:60],
                error=str(e),
            )
            return DeliveryResult(
                target_id=str(subscription.id),
                target_kind=PushTargetKind.WEB,
                success=False,
                error=str(e),
            )
        return DeliveryResult(
            target_id=str(subscription.id),
            target_kind=PushTargetKind.WEB,
            success=True,
        )
