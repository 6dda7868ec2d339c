# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Client for the notification-service.
Handles HTTP calls to the notification-service with timeout & fault tolerance.
"""

import httpx

from selection_service.core.config import settings
from selection_service.core.logging import get_logger
from selection_service.metrics.prometheus import NOTIFICATIONS_SENT

logger = get_logger(__name__)


class NotificationClient:
    """Fire-and-forget notification sender via notification-service."""

    def __init__(self, channel: str | None = None) -> None:
        self._channel = channel or settings.NOTIFICATION_CHANNEL

    def send(
        self,
        recipient: str,
        message: str,
        reference_id: str = "N/A",
        notification_type: str = "selection_process_completed",
    ) -> None:
        """Send a notification. Failures are logged but never raised."""
        try:
            with httpx.Client(timeout=settings.NOTIFICATION_TIMEOUT) as client:
                resp = client.post(
                    f"{settings.NOTIFICATION_SERVICE_URL}/api/v1/notify",
                    json={
                        "channel": self._channel,
                        "recipient": recipient,
                        "message": message,
                        "type": notification_type,
                        "entity_type": "selection_process",
                        "entity_id": reference_id,
                    },
                )
            NOTIFICATIONS_SENT.labels(channel=self._channel).inc()
            logger.info(
                "Notification sent: recipient=%s, channel=%s, status=%d",
                recipient,
                self._channel,
                resp.status_code,
            )
        except Exception as exc:
            logger.warning("Notification failed: %s", exc)
