"""
License domain events.

Domain events represent something that happened in the license domain.
Each event names the webhook category it is reported under.
"""
from datetime import datetime
from typing import Any, Dict, Optional

from core.domain.events import DomainEvent


class LicenseEvent(DomainEvent):
    """Base class for events about a single license, keyed by license key."""

    category = "license_updates"

    def __init__(self, license_key: str, occurred_at: Optional[datetime] = None):
        super().__init__(aggregate_id=license_key, occurred_at=occurred_at)
        self.license_key = license_key


class LicenseIssued(LicenseEvent):
    """Event raised when a license is issued."""

    category = "license_creations"

    def __init__(
        self,
        license_key: str,
        product_id: str,
        discord_id: str,
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize LicenseIssued event.

        Args:
            license_key: Issued key
            product_id: Product the license grants
            discord_id: Owning identity
            occurred_at: When the event occurred
        """
        super().__init__(license_key, occurred_at)
        self.product_id = product_id
        self.discord_id = discord_id

    def payload(self) -> Dict[str, Any]:
        return {"productId": self.product_id, "discordId": self.discord_id}


class LicenseRenewed(LicenseEvent):
    """Event raised when a license is renewed."""

    def __init__(
        self,
        license_key: str,
        new_expiration: datetime,
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(license_key, occurred_at)
        self.new_expiration = new_expiration

    def payload(self) -> Dict[str, Any]:
        return {"expiresAt": self.new_expiration.isoformat()}


class LicenseStatusChanged(LicenseEvent):
    """Event raised when an administrator overwrites a license status."""

    def __init__(self, license_key: str, status: str, occurred_at: Optional[datetime] = None):
        super().__init__(license_key, occurred_at)
        self.status = status

    def payload(self) -> Dict[str, Any]:
        return {"status": self.status}


class LicenseDeleted(LicenseEvent):
    """Event raised when a license is deleted."""


class LicenseIdentitiesPatched(LicenseEvent):
    """Event raised when an administrator binds an IP or HWID."""

    def __init__(
        self,
        license_key: str,
        ip: Optional[str] = None,
        hwid: Optional[str] = None,
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(license_key, occurred_at)
        self.ip = ip
        self.hwid = hwid

    def payload(self) -> Dict[str, Any]:
        return {"ip": self.ip, "hwid": self.hwid}


class SubUserEvent(LicenseEvent):
    """Base class for sub-user membership changes."""

    def __init__(self, license_key: str, discord_id: str, occurred_at: Optional[datetime] = None):
        super().__init__(license_key, occurred_at)
        self.discord_id = discord_id

    def payload(self) -> Dict[str, Any]:
        return {"discordId": self.discord_id}


class SubUserAdded(SubUserEvent):
    """Event raised when a sub-user is added to a license."""


class SubUserRemoved(SubUserEvent):
    """Event raised when a sub-user is removed from a license."""
