"""Base client for HTTP push provider APIs."""

from typing import Any

from django.conf import settings

import requests
import structlog

from core.exceptions import TransientDeliveryError

logger = structlog.get_logger(__name__)


class BasePushClient:
    """Base class for push provider HTTP clients.

    Maps transport failures and error statuses to TransientDeliveryError so
    callers only have to handle one exception family per target.
    """

    def __init__(self, provider_name: str, access_token: str | None = None):
        """Initialize base push client.

        Args:
            provider_name: Name of the push provider (for logging/errors)
            access_token: Optional bearer token for the provider API
        """
        self.provider_name = provider_name
        self.access_token = access_token
        self.timeout = settings.PUSH_TIMEOUT_SECONDS

    def _get_headers(self) -> dict[str, str]:
        """Get common HTTP headers for provider requests."""
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Accept-Encoding": "gzip, deflate",
        }
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        return headers

    def _post(self, url: str, json_data: Any) -> requests.Response:
        """POST to the provider with error handling.

        Args:
            url: Full URL for the request
            json_data: JSON body

        Returns:
            Response object for a 2xx reply

        Raises:
            TransientDeliveryError: For timeouts, connection failures and
                4xx/5xx responses
        """
        try:
            response = requests.post(
                url,
                headers=self._get_headers(),
                json=json_data,
                timeout=self.timeout,
            )
        except requests.Timeout as e:
            logger.error(
                "Push provider request timed out",
                provider=self.provider_name,
                url=url,
                timeout=self.timeout,
            )
            raise TransientDeliveryError(
                f"{self.provider_name} request timed out"
            ) from e
        except requests.ConnectionError as e:
            logger.error(
                "Push provider unreachable",
                provider=self.provider_name,
                url=url,
                error=str(e),
            )
            raise TransientDeliveryError(
                f"Failed to connect to {self.provider_name}: {e}"
            ) from e

        if response.status_code >= 400:
            logger.error(
                "Push provider returned error response",
                provider=self.provider_name,
                status_code=response.status_code,
                response_text=response.text[:500],
            )
            raise TransientDeliveryError(
                f"{self.provider_name} returned {response.status_code}",
                status_code=response.status_code,
            )

        return response
