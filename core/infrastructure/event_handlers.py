"""
Event handlers for domain events.

These handlers process domain events for side effects: the audit trail
of administrative changes and webhook notifications.
"""

import logging
from typing import Optional

from asgiref.sync import sync_to_async

from audit.domain.entries import AuditEvent
from audit.infrastructure.repositories.record_store_audit_log_repository import (
    RecordStoreAuditLogRepository,
)
from audit.ports.audit_log_repository import AuditLogRepository
from blacklist.domain.events import BlacklistEvent
from core.domain.events import DomainEvent, EventHandler
from core.infrastructure.repositories.record_store_settings_repository import (
    RecordStoreSettingsRepository,
)
from core.infrastructure.webhooks import WebhookDeliveryService
from licenses.domain.events import LicenseEvent

logger = logging.getLogger(__name__)


class AuditEventHandler(EventHandler):
    """Appends an AuditEvent entry for each administrative change."""

    def __init__(self, audit_log_repository: Optional[AuditLogRepository] = None):
        self.audit_log_repository = audit_log_repository or RecordStoreAuditLogRepository()

    async def handle(self, event: DomainEvent) -> None:
        entry = AuditEvent(
            event_type=event.event_type,
            subject=str(event.aggregate_id),
            timestamp=event.occurred_at,
            details=event.payload(),
        )
        await self.audit_log_repository.append_event(entry)
        logger.info(
            "Audit log: %s - %s",
            event.event_type,
            event.aggregate_id,
            extra={"event_id": str(event.event_id), "event_type": event.event_type},
        )


class WebhookNotificationHandler(EventHandler):
    """
    Queues a webhook delivery when the event's category is switched on
    in the service settings.
    """

    def __init__(self, settings_repository: Optional[RecordStoreSettingsRepository] = None):
        self.settings_repository = settings_repository or RecordStoreSettingsRepository()

    async def handle(self, event: DomainEvent) -> None:
        category = getattr(event, "category", None)
        service_settings = await self.settings_repository.get()
        if not category or not service_settings.webhook_enabled_for(category):
            logger.debug("Webhook skipped for %s", event.event_type)
            return

        from core.tasks import deliver_webhook_task

        payload = WebhookDeliveryService.build_payload(
            event_type=event.event_type,
            category=category,
            subject=str(event.aggregate_id),
            details=event.payload(),
            occurred_at=event.occurred_at,
        )
        await sync_to_async(deliver_webhook_task.delay)(service_settings.webhook_url, payload)
        logger.info("Webhook queued for %s", event.event_type)


def register_event_handlers():
    """Register all event handlers with the event bus."""
    from core.infrastructure.events import event_bus

    audit_handler = AuditEventHandler()
    event_bus.subscribe(LicenseEvent, audit_handler)
    event_bus.subscribe(BlacklistEvent, audit_handler)
    event_bus.subscribe(DomainEvent, WebhookNotificationHandler())

    logger.info("Event handlers registered")
