"""
Blacklist domain events.
"""
from datetime import datetime
from typing import Any, Dict, Iterable, Optional

from core.domain.events import DomainEvent


class BlacklistEvent(DomainEvent):
    """Base class for blacklist changes."""

    category = "blacklist_actions"


class BlacklistEntryEvent(BlacklistEvent):
    """Base class for single-entry changes made by hand."""

    def __init__(self, entry_type: str, value: str, occurred_at: Optional[datetime] = None):
        super().__init__(aggregate_id=value, occurred_at=occurred_at)
        self.entry_type = entry_type
        self.value = value

    def payload(self) -> Dict[str, Any]:
        return {"type": self.entry_type, "value": self.value}


class BlacklistEntryAdded(BlacklistEntryEvent):
    """Event raised when an entry is added."""


class BlacklistEntryRemoved(BlacklistEntryEvent):
    """Event raised when an entry is removed."""


class UserBlacklistEvent(BlacklistEvent):
    """Base class for whole-user blacklist changes."""

    def __init__(
        self,
        discord_id: str,
        license_keys: Iterable[str] = (),
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(aggregate_id=discord_id, occurred_at=occurred_at)
        self.discord_id = discord_id
        self.license_keys = list(license_keys)

    def payload(self) -> Dict[str, Any]:
        return {"discordId": self.discord_id, "licenseKeys": self.license_keys}


class UserBlacklisted(UserBlacklistEvent):
    """Event raised when a user and their bound identifiers are blacklisted."""


class UserUnblacklisted(UserBlacklistEvent):
    """Event raised when a user is removed from the blacklist."""


class LicenseIdentifiersBlacklisted(BlacklistEvent):
    """Event raised when every IP and HWID bound to a license is blacklisted."""

    def __init__(self, license_key: str, occurred_at: Optional[datetime] = None):
        super().__init__(aggregate_id=license_key, occurred_at=occurred_at)
        self.license_key = license_key
