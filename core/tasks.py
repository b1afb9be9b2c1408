"""
Celery tasks for background processing.
"""
import logging

from LicenseValidationService.celery import app

from core.infrastructure.webhooks import WebhookDeliveryError, WebhookDeliveryService

logger = logging.getLogger(__name__)


@app.task(bind=True, max_retries=3)
def deliver_webhook_task(self, url: str, payload: dict):
    """
    Celery task for webhook delivery, retried with exponential backoff.

    Args:
        url: Webhook URL
        payload: Webhook body
    """
    try:
        WebhookDeliveryService.deliver(url, payload)
    except WebhookDeliveryError as exc:
        if self.request.retries >= self.max_retries:
            logger.error("Webhook delivery abandoned after %s retries", self.max_retries)
            return
        raise self.retry(exc=exc, countdown=2 ** self.request.retries)
