"""Multi-device push fan-out.

Sends one logical notification to every push target a user has registered
(browser subscriptions and Expo tokens) and returns only once every target
has reported an outcome, so the delivery log always reflects the full
result set.
"""

from concurrent.futures import Future, ThreadPoolExecutor
from uuid import UUID

from django.conf import settings

import structlog

from core.enums import PushTargetKind
from core.repositories import PushTargetRepository
from core.schemas import DeliveryResult, DispatchSummary, PushPayload
from core.services.push.expo_push_client import ExpoPushClient, chunk_tokens
from core.services.push.web_push_client import WebPushClient

logger = structlog.get_logger(__name__)


class PushService:
    """Fans a payload out to all registered devices of one user.

    Worker threads only perform provider calls; all database access
    (loading targets, pruning gone ones) happens on the calling thread.
    """

    def __init__(
        self,
        web_client: WebPushClient | None = None,
        expo_client: ExpoPushClient | None = None,
        targets: type[PushTargetRepository] = PushTargetRepository,
        max_workers: int | None = None,
    ) -> None:
        """Initialize push service.

        Args:
            web_client: Browser push client (defaults to a VAPID client)
            expo_client: Expo client (defaults to settings-configured client)
            targets: Repository for subscription/token rows
            max_workers: Upper bound on concurrent provider calls
        """
        self.web_client = web_client or WebPushClient()
        self.expo_client = expo_client or ExpoPushClient()
        self.targets = targets
        self.max_workers = max_workers or settings.PUSH_MAX_WORKERS

    def send_to_user(self, user_id: UUID, payload: PushPayload) -> DispatchSummary:
        """Send a payload to every registered push target of a user.

        A failure on one target never prevents attempts on the others.

        Args:
            user_id: UUID of the recipient
            payload: Notification to deliver

        Returns:
            DispatchSummary with one result per target
        """
        subscriptions = self.targets.get_web_subscriptions(user_id)
        tokens = self.targets.get_mobile_tokens(user_id)

        if not subscriptions and not tokens:
            logger.info("No push targets for user", user_id=str(user_id), tag=payload.tag)
            return DispatchSummary()

        results = self._fan_out(subscriptions, tokens, payload)
        summary = DispatchSummary(results=results)
        self._prune_gone_targets(user_id, results)

        logger.info(
            "Push fan-out complete",
            user_id=str(user_id),
            tag=payload.tag,
            targets=len(results),
            succeeded=summary.success_count,
            failed=summary.failure_count,
        )
        return summary

    def _fan_out(self, subscriptions, tokens, payload: PushPayload) -> list[DeliveryResult]:
        futures: list[Future] = []
        # Leaving the executor block waits for every submitted call
        with ThreadPoolExecutor(
            max_workers=self.max_workers, thread_name_prefix="push"
        ) as executor:
            for subscription in subscriptions:
                futures.append(
                    executor.submit(self.web_client.send_safely, subscription, payload)
                )
            for chunk in chunk_tokens(tokens):
                futures.append(
                    executor.submit(self.expo_client.send_chunk, chunk, payload)
                )

        results: list[DeliveryResult] = []
        for future in futures:
            outcome = future.result()
            if isinstance(outcome, list):
                results.extend(outcome)
            else:
                results.append(outcome)
        return results

    def _prune_gone_targets(self, user_id: UUID, results: list[DeliveryResult]) -> None:
        gone_web = [
            r.target_id for r in results if r.gone and r.target_kind == PushTargetKind.WEB
        ]
        gone_expo = [
            r.target_id
            for r in results
            if r.gone and r.target_kind == PushTargetKind.EXPO
        ]
        if gone_web:
            removed = self.targets.delete_web_subscriptions(gone_web)
            logger.info(
                "Removed expired web push subscriptions", user_id=str(user_id), count=removed
            )
        if gone_expo:
            removed = self.targets.delete_mobile_tokens(gone_expo)
            logger.info("Removed unregistered Expo tokens", user_id=str(user_id), count=removed)
