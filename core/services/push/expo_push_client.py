"""Client for the Expo push notification service (mobile app tokens)."""

import re
from typing import Any

from django.conf import settings

import structlog

from core.enums import PushTargetKind
from core.exceptions import TransientDeliveryError
from core.models import MobilePushToken
from core.schemas import DeliveryResult, PushPayload
from core.services.push.base_push_client import BasePushClient

logger = structlog.get_logger(__name__)

# Expo rejects requests with more than 100 messages
EXPO_CHUNK_SIZE = 100

_EXPO_TOKEN_PATTERN = re.compile(r"^Expo(nent)?PushToken\[.+\]$")


def is_expo_push_token(token: str) -> bool:
    """Return True if the string looks like an Expo push token."""
    return bool(token) and bool(_EXPO_TOKEN_PATTERN.match(token))


def chunk_tokens(
    tokens: list[MobilePushToken], size: int = EXPO_CHUNK_SIZE
) -> list[list[MobilePushToken]]:
    """Split tokens into request-sized chunks."""
    return [tokens[i : i + size] for i in range(0, len(tokens), size)]


class ExpoPushClient(BasePushClient):
    """Sends push messages to mobile devices through Expo's HTTP API."""

    def __init__(self, push_url: str | None = None, access_token: str | None = None):
        """Initialize Expo client with service configuration."""
        super().__init__(
            provider_name="expo",
            access_token=access_token
            if access_token is not None
            else settings.EXPO_ACCESS_TOKEN,
        )
        self.push_url = push_url or settings.EXPO_PUSH_URL

    def build_message(self, token: str, payload: PushPayload) -> dict:
        """Translate a push payload into one Expo message."""
        return {
            "to": token,
            "title": payload.title,
            "body": payload.body,
            "data": payload.data,
            "sound": "default",
            "badge": 1,
            "channelId": "default",
            "priority": "high" if payload.require_interaction else "default",
        }

    def send_chunk(
        self, tokens: list[MobilePushToken], payload: PushPayload
    ) -> list[DeliveryResult]:
        """Send one chunk and map each ticket to a per-device result.

        Never raises: a request-level failure marks every token in the chunk
        as failed.

        Args:
            tokens: At most EXPO_CHUNK_SIZE token rows
            payload: Notification to send

        Returns:
            One DeliveryResult per token, in input order
        """
        valid = [token for token in tokens if is_expo_push_token(token.expo_token)]
        results = [
            DeliveryResult(
                target_id=str(token.id),
                target_kind=PushTargetKind.EXPO,
                success=False,
                error="Invalid Expo push token",
                gone=True,
            )
            for token in tokens
            if not is_expo_push_token(token.expo_token)
        ]
        if not valid:
            return results

        messages = [self.build_message(token.expo_token, payload) for token in valid]

        try:
            response = self._post(self.push_url, messages)
            body = response.json()
            tickets = (body.get("data") if isinstance(body, dict) else None) or []
        except (TransientDeliveryError, ValueError) as e:
            logger.warning(
                "Expo push chunk failed",
                token_count=len(valid),
                error=str(e),
            )
            return results + [
                DeliveryResult(
                    target_id=str(token.id),
                    target_kind=PushTargetKind.EXPO,
                    success=False,
                    error=str(e),
                )
                for token in valid
            ]

        for index, token in enumerate(valid):
            ticket = tickets[index] if index < len(tickets) else {}
            results.append(self._ticket_to_result(token, ticket))
        return results

    def _ticket_to_result(self, token: MobilePushToken, ticket: Any) -> DeliveryResult:
        if not isinstance(ticket, dict):
            ticket = {}
        if ticket.get("status") == "ok":
            return DeliveryResult(
                target_id=str(token.id),
                target_kind=PushTargetKind.EXPO,
                success=True,
            )

        details = ticket.get("details")
        error_code = details.get("error") if isinstance(details, dict) else None
        return DeliveryResult(
            target_id=str(token.id),
            target_kind=PushTargetKind.EXPO,
            success=False,
            error=error_code or ticket.get("message") or "Missing push ticket",
            gone=error_code == "DeviceNotRegistered",
        )
