"""
Audit log entries.

Append-only records: one ValidationLog per validation attempt, one
AuditEvent per administrative change, one CommandUsage per chat-bot
command reported by the bot.
"""
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

from core.domain.value_objects import ValidationOutcome, ValidationReason

NOT_AVAILABLE = "N/A"


@dataclass(frozen=True)
class Location:
    """Approximate location of a requesting address."""

    city: Optional[str] = None
    country: Optional[str] = None
    country_code: Optional[str] = None
    coordinates: Optional[Tuple[float, float]] = None

    def to_record(self) -> Dict[str, Any]:
        return {
            "city": self.city,
            "country": self.country,
            "countryCode": self.country_code,
            "coordinates": list(self.coordinates) if self.coordinates else None,
        }

    @classmethod
    def from_record(cls, record: Optional[Dict[str, Any]]) -> Optional["Location"]:
        if not record:
            return None
        coordinates = record.get("coordinates")
        return cls(
            city=record.get("city"),
            country=record.get("country"),
            country_code=record.get("countryCode"),
            coordinates=tuple(coordinates) if coordinates else None,
        )


@dataclass(frozen=True)
class ValidationLog:
    """Outcome of one validation attempt."""

    license_key: str
    status: ValidationOutcome
    timestamp: datetime
    reason: Optional[ValidationReason] = None
    ip_address: Optional[str] = None
    hwid: Optional[str] = None
    discord_id: str = NOT_AVAILABLE
    product_name: str = NOT_AVAILABLE
    location: Optional[Location] = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __post_init__(self):
        """Validate log entry."""
        if self.status == ValidationOutcome.SUCCESS and self.reason is not None:
            raise ValueError("Successful validations carry no reason")
        if self.status == ValidationOutcome.FAILURE and self.reason is None:
            raise ValueError("Failed validations need a reason")

    @classmethod
    def success(cls, **kwargs) -> "ValidationLog":
        return cls(status=ValidationOutcome.SUCCESS, timestamp=_now(), **kwargs)

    @classmethod
    def failure(cls, reason: ValidationReason, **kwargs) -> "ValidationLog":
        return cls(status=ValidationOutcome.FAILURE, reason=reason, timestamp=_now(), **kwargs)


@dataclass(frozen=True)
class AuditEvent:
    """Administrative change, derived from a domain event."""

    event_type: str
    subject: str
    timestamp: datetime
    details: Dict[str, Any] = field(default_factory=dict)
    id: str = field(default_factory=lambda: str(uuid.uuid4()))


@dataclass(frozen=True)
class CommandUsage:
    """A chat-bot command invocation."""

    command: str
    user_id: str
    timestamp: datetime = field(default_factory=lambda: _now())


def _now() -> datetime:
    return datetime.now(timezone.utc)
