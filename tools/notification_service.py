"""
Notification Channel Tool
One-way, best-effort delivery of reminder notifications

Delivery is fire-and-forget: nothing is acknowledged back to the scheduler
and a lost notification is not retried.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

import httpx

from config import settings


logger = logging.getLogger(__name__)


class NotificationChannel(ABC):
    """Delivers a titled message to the user"""

    name: str = "base"

    @abstractmethod
    async def notify(self, title: str, message: str) -> None:
        """Send a notification. Implementations must not raise."""

    async def close(self) -> None:
        """Release any held resources"""


class LoggingNotificationChannel(NotificationChannel):
    """Writes notifications to the application log"""

    name = "log"

    async def notify(self, title: str, message: str) -> None:
        logger.info(f"[NOTIFY] {title}: {message}")


class WebhookNotificationChannel(NotificationChannel):
    """POSTs notifications as JSON to a webhook"""

    name = "webhook"

    def __init__(
        self,
        url: str,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.url = url
        self.timeout = timeout or settings.NOTIFICATION_TIMEOUT_SECONDS
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client"""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport,
                headers={"Content-Type": "application/json"}
            )
        return self._client

    async def close(self):
        """Close the HTTP client"""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def notify(self, title: str, message: str) -> None:
        try:
            client = await self._get_client()
            response = await client.post(self.url, json={"title": title, "message": message})
            response.raise_for_status()
            logger.info(f"[NOTIFY] {title}: delivered to webhook")
        except httpx.HTTPError as e:
            logger.error(f"Webhook notification failed: {e}")


def get_notification_channel() -> NotificationChannel:
    """Pick the channel from settings"""
    if settings.NOTIFICATION_WEBHOOK_URL:
        return WebhookNotificationChannel(settings.NOTIFICATION_WEBHOOK_URL)
    return LoggingNotificationChannel()
