"""
License domain entity.

This is the core domain entity representing a license.
It contains business logic and is independent of infrastructure.
"""
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Dict, Iterable, Optional, Tuple

from core.domain.exceptions import (
    DuplicateSubUserError,
    LicenseExpiredError,
    LicenseInactiveError,
    OwnerAsSubUserError,
    SubUserNotFoundError,
)
from core.domain.value_objects import Capacity, EvidenceKind, LicenseStatus


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def generate_license_key() -> str:
    """
    Generate a license key in format: LF-XXXXXXXX-XXXX-XXXX-XXXX-XXXXXXXXXXXX.

    Returns:
        Generated license key string
    """
    return f"LF-{str(uuid.uuid4()).upper()}"


@dataclass(frozen=True)
class License:
    """
    License domain entity.

    Grants an owning identity (a Discord user id) the right to use a
    product, binding at most ``max_ips`` addresses and ``max_hwids``
    hardware ids. Status and expiry are kept as two separate signals:
    an expired license keeps its status and is simply not usable.
    This is an immutable value object; every mutation returns a new
    instance with a refreshed ``updated_at``.
    """

    id: str
    key: str
    product_id: str
    discord_id: str
    status: LicenseStatus
    max_ips: Capacity
    max_hwids: Capacity
    created_at: datetime
    updated_at: datetime
    expires_at: Optional[datetime] = None
    discord_username: Optional[str] = None
    email: Optional[str] = None
    platform: str = "custom"
    platform_user_id: Optional[str] = None
    sub_user_discord_ids: Tuple[str, ...] = field(default_factory=tuple)
    allowed_ips: Tuple[str, ...] = field(default_factory=tuple)
    allowed_hwids: Tuple[str, ...] = field(default_factory=tuple)
    validations: int = 0

    def __post_init__(self):
        """Validate license entity."""
        if not self.key or not self.key.strip():
            raise ValueError("License key cannot be empty")
        if not self.product_id:
            raise ValueError("Product ID is required")
        if not self.discord_id:
            raise ValueError("Owner Discord ID is required")
        if self.discord_id in self.sub_user_discord_ids:
            raise ValueError("Owner cannot be a sub-user of their own license")
        if self.validations < 0:
            raise ValueError("Validation count cannot be negative")

    @classmethod
    def create(
        cls,
        product_id: str,
        discord_id: str,
        max_ips: Capacity,
        max_hwids: Capacity,
        expires_at: Optional[datetime] = None,
        discord_username: Optional[str] = None,
        email: Optional[str] = None,
        platform: str = "custom",
        platform_user_id: Optional[str] = None,
        sub_user_discord_ids: Iterable[str] = (),
        key: Optional[str] = None,
        license_id: Optional[str] = None,
    ) -> "License":
        """
        Create a new, active License with empty allow-lists.

        Args:
            product_id: Product the license grants
            discord_id: Owning identity
            max_ips: IP capacity
            max_hwids: HWID capacity
            expires_at: Optional expiration datetime
            discord_username: Optional cached owner name
            email: Optional owner email
            platform: Purchase platform
            platform_user_id: Buyer id on the purchase platform
            sub_user_discord_ids: Initial delegated identities (owner dropped)
            key: Optional key (generated if not provided)
            license_id: Optional id (generated if not provided)

        Returns:
            License entity instance
        """
        now = utcnow()
        sub_users = []
        for identity in sub_user_discord_ids:
            if identity and identity != discord_id and identity not in sub_users:
                sub_users.append(identity)
        return cls(
            id=license_id or str(uuid.uuid4()),
            key=key or generate_license_key(),
            product_id=product_id,
            discord_id=discord_id,
            discord_username=discord_username,
            email=email,
            platform=platform,
            platform_user_id=platform_user_id,
            sub_user_discord_ids=tuple(sub_users),
            status=LicenseStatus.ACTIVE,
            expires_at=expires_at,
            max_ips=max_ips,
            max_hwids=max_hwids,
            created_at=now,
            updated_at=now,
        )

    def is_expired(self, current_time: Optional[datetime] = None) -> bool:
        """True once ``expires_at`` is in the past."""
        if self.expires_at is None:
            return False
        return self.expires_at <= (current_time or utcnow())

    def is_usable(self, current_time: Optional[datetime] = None) -> bool:
        """
        Check if the license can currently be validated.

        Args:
            current_time: Current time (defaults to now)

        Returns:
            True if the license is active and not expired
        """
        return self.status == LicenseStatus.ACTIVE and not self.is_expired(current_time)

    def ensure_usable(self, current_time: Optional[datetime] = None) -> None:
        """
        Raise if the license can not be validated.

        Expiry is checked before status so an expired active license reports
        ``expired`` rather than ``inactive``.

        Raises:
            LicenseExpiredError: If the license has expired
            LicenseInactiveError: If the license is not active
        """
        if self.is_expired(current_time):
            raise LicenseExpiredError()
        if self.status != LicenseStatus.ACTIVE:
            raise LicenseInactiveError(
                f"License is not active. Current status: {self.status.value}"
            )

    def is_authorized(self, identity: str) -> bool:
        """True if ``identity`` owns the license or is one of its sub-users."""
        return identity == self.discord_id or identity in self.sub_user_discord_ids

    def evidence(self, kind: EvidenceKind) -> Tuple[str, ...]:
        """Values already bound for an evidence kind."""
        return self.allowed_ips if kind == EvidenceKind.IP else self.allowed_hwids

    def capacity(self, kind: EvidenceKind) -> Capacity:
        """Capacity configured for an evidence kind."""
        return self.max_ips if kind == EvidenceKind.IP else self.max_hwids

    def renew(self, new_expiration: datetime) -> "License":
        """
        Create a new License instance with a new expiration, forced active.

        Args:
            new_expiration: New expiration datetime

        Returns:
            New License instance
        """
        return replace(
            self,
            expires_at=new_expiration,
            status=LicenseStatus.ACTIVE,
            updated_at=utcnow(),
        )

    def with_status(self, status: LicenseStatus) -> "License":
        """Create a new License instance with ``status``; expiry is untouched."""
        return replace(self, status=status, updated_at=utcnow())

    def add_sub_user(self, identity: str) -> "License":
        """
        Create a new License instance with an extra sub-user.

        Raises:
            OwnerAsSubUserError: If ``identity`` is the owner
            DuplicateSubUserError: If ``identity`` is already a sub-user
        """
        if identity == self.discord_id:
            raise OwnerAsSubUserError()
        if identity in self.sub_user_discord_ids:
            raise DuplicateSubUserError()
        return replace(
            self,
            sub_user_discord_ids=self.sub_user_discord_ids + (identity,),
            updated_at=utcnow(),
        )

    def remove_sub_user(self, identity: str) -> "License":
        """
        Create a new License instance without ``identity`` as sub-user.

        Raises:
            SubUserNotFoundError: If ``identity`` is not a sub-user
        """
        if identity not in self.sub_user_discord_ids:
            raise SubUserNotFoundError()
        return replace(
            self,
            sub_user_discord_ids=tuple(i for i in self.sub_user_discord_ids if i != identity),
            updated_at=utcnow(),
        )

    def with_evidence(self, admitted: Dict[EvidenceKind, str]) -> "License":
        """
        Create a new License instance with newly admitted evidence appended.

        Args:
            admitted: Evidence values the capacity policy admitted

        Returns:
            New License instance (or self if nothing was admitted)
        """
        if not admitted:
            return self
        return replace(
            self,
            allowed_ips=self.allowed_ips + _extra(admitted, EvidenceKind.IP),
            allowed_hwids=self.allowed_hwids + _extra(admitted, EvidenceKind.HWID),
            updated_at=utcnow(),
        )

    def record_validation(self) -> "License":
        """Create a new License instance with the validation counter bumped."""
        return replace(self, validations=self.validations + 1, updated_at=utcnow())


def _extra(admitted: Dict[EvidenceKind, str], kind: EvidenceKind) -> Tuple[str, ...]:
    value = admitted.get(kind)
    return (value,) if value is not None else ()
