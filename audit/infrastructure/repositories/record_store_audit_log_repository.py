"""
Record store implementation of AuditLogRepository port.

Validation logs, admin events and bot command usage live in the ``logs``,
``auditEvents`` and ``botLogs`` collections.
"""
from typing import Any, Dict, List, Optional

from asgiref.sync import sync_to_async
from django.conf import settings

from audit.domain.entries import (
    NOT_AVAILABLE,
    AuditEvent,
    CommandUsage,
    Location,
    ValidationLog,
)
from audit.ports.audit_log_repository import AuditLogRepository
from core.domain.value_objects import ValidationOutcome, ValidationReason
from core.infrastructure.record_store import RecordStore, get_record_store
from core.infrastructure.serialization import parse_instant, to_iso

VALIDATION_LOG_COLLECTION = "logs"
AUDIT_EVENT_COLLECTION = "auditEvents"
COMMAND_USAGE_COLLECTION = "botLogs"


def validation_log_to_record(entry: ValidationLog) -> Dict[str, Any]:
    record = {
        "id": entry.id,
        "timestamp": to_iso(entry.timestamp),
        "licenseKey": entry.license_key,
        "status": entry.status.value,
        "ipAddress": entry.ip_address,
        "hwid": entry.hwid,
        "discordId": entry.discord_id,
        "productName": entry.product_name,
        "location": entry.location.to_record() if entry.location else None,
    }
    if entry.reason is not None:
        record["reason"] = entry.reason.value
    return record


def validation_log_from_record(record: Dict[str, Any]) -> ValidationLog:
    reason = record.get("reason")
    return ValidationLog(
        id=record["id"],
        timestamp=parse_instant(record["timestamp"]),
        license_key=record.get("licenseKey") or NOT_AVAILABLE,
        status=ValidationOutcome(record["status"]),
        reason=ValidationReason(reason) if reason else None,
        ip_address=record.get("ipAddress"),
        hwid=record.get("hwid"),
        discord_id=record.get("discordId") or NOT_AVAILABLE,
        product_name=record.get("productName") or NOT_AVAILABLE,
        location=Location.from_record(record.get("location")),
    )


def audit_event_to_record(entry: AuditEvent) -> Dict[str, Any]:
    return {
        "id": entry.id,
        "timestamp": to_iso(entry.timestamp),
        "eventType": entry.event_type,
        "subject": entry.subject,
        "details": entry.details,
    }


def audit_event_from_record(record: Dict[str, Any]) -> AuditEvent:
    return AuditEvent(
        id=record["id"],
        timestamp=parse_instant(record["timestamp"]),
        event_type=record["eventType"],
        subject=record.get("subject") or "",
        details=record.get("details") or {},
    )


def command_usage_to_record(entry: CommandUsage) -> Dict[str, Any]:
    return {
        "command": entry.command,
        "userId": entry.user_id,
        "timestamp": to_iso(entry.timestamp),
    }


def command_usage_from_record(record: Dict[str, Any]) -> CommandUsage:
    return CommandUsage(
        command=record["command"],
        user_id=record["userId"],
        timestamp=parse_instant(record["timestamp"]),
    )


class RecordStoreAuditLogRepository(AuditLogRepository):
    """Record store implementation of AuditLogRepository."""

    def __init__(self, store: Optional[RecordStore] = None):
        self._store = store

    @property
    def store(self) -> RecordStore:
        return self._store or get_record_store()

    async def _append(self, collection: str, record: Dict[str, Any], retention_setting: str, default: int):
        limit = getattr(settings, retention_setting, default)
        await sync_to_async(self.store.append)(collection, record, limit)

    async def _list(self, collection: str, convert) -> List:
        records = await sync_to_async(self.store.read)(collection)
        return [convert(r) for r in records]

    async def append_validation(self, entry: ValidationLog) -> ValidationLog:
        await self._append(
            VALIDATION_LOG_COLLECTION,
            validation_log_to_record(entry),
            "VALIDATION_LOG_RETENTION",
            500,
        )
        return entry

    async def list_validations(self) -> List[ValidationLog]:
        return await self._list(VALIDATION_LOG_COLLECTION, validation_log_from_record)

    async def append_event(self, entry: AuditEvent) -> AuditEvent:
        await self._append(
            AUDIT_EVENT_COLLECTION,
            audit_event_to_record(entry),
            "AUDIT_EVENT_RETENTION",
            1000,
        )
        return entry

    async def list_events(self) -> List[AuditEvent]:
        return await self._list(AUDIT_EVENT_COLLECTION, audit_event_from_record)

    async def append_command_usage(self, entry: CommandUsage) -> CommandUsage:
        await self._append(
            COMMAND_USAGE_COLLECTION,
            command_usage_to_record(entry),
            "COMMAND_LOG_RETENTION",
            1000,
        )
        return entry

    async def list_command_usage(self) -> List[CommandUsage]:
        return await self._list(COMMAND_USAGE_COLLECTION, command_usage_from_record)
