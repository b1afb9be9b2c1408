"""
Webhook delivery service.

Posts Discord-style embed payloads describing admin events to the
webhook configured in the service settings.
"""
import logging
from datetime import datetime
from typing import Any, Dict

import requests

from core.metrics import webhook_deliveries_total

logger = logging.getLogger(__name__)

USER_AGENT = "LicenseValidationService-Webhook/1.0"
DEFAULT_TIMEOUT = 10

# Embed colours per event category
CATEGORY_COLOURS = {
    "license_creations": 0x2ECC71,
    "license_updates": 0x3498DB,
    "blacklist_actions": 0xE74C3C,
    "bot_commands": 0x9B59B6,
}
DEFAULT_COLOUR = 0x95A5A6


class WebhookDeliveryError(Exception):
    """Raised when the webhook endpoint rejects or fails a delivery."""


class WebhookDeliveryService:
    """Builds and delivers webhook payloads."""

    @staticmethod
    def build_payload(
        event_type: str,
        category: str,
        subject: str,
        details: Dict[str, Any],
        occurred_at: datetime,
    ) -> Dict[str, Any]:
        """
        Build an embed payload for an event.

        Args:
            event_type: Event class name, e.g. "LicenseIssued"
            category: Event category, selects the embed colour
            subject: What the event is about (license key, Discord id)
            details: Event payload; rendered as embed fields
            occurred_at: Event time

        Returns:
            JSON-serializable webhook body
        """
        fields = [
            {"name": name, "value": str(value) if value not in (None, "") else "N/A", "inline": True}
            for name, value in details.items()
        ]
        return {
            "embeds": [
                {
                    "title": event_type,
                    "description": subject,
                    "color": CATEGORY_COLOURS.get(category, DEFAULT_COLOUR),
                    "fields": fields[:25],
                    "timestamp": occurred_at.isoformat(),
                }
            ]
        }

    @staticmethod
    def deliver(url: str, payload: Dict[str, Any], timeout: int = DEFAULT_TIMEOUT) -> None:
        """
        Deliver a payload.

        Args:
            url: Webhook URL
            payload: Webhook body

        Raises:
            WebhookDeliveryError: If the request fails or is rejected
        """
        try:
            response = requests.post(
                url,
                json=payload,
                headers={"User-Agent": USER_AGENT},
                timeout=timeout,
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            webhook_deliveries_total.labels(result="failure").inc()
            logger.warning("Webhook delivery failed: %s", e)
            raise WebhookDeliveryError(str(e)) from e

        webhook_deliveries_total.labels(result="success").inc()
        logger.info("Webhook delivered", extra={"status_code": response.status_code})
