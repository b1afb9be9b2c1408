"""
License DTOs for API responses.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from licenses.domain.license import License

UNKNOWN_PRODUCT_NAME = "N/A"


@dataclass
class LicenseDTO:
    """DTO for license information."""

    id: str
    key: str
    product_id: str
    product_name: str
    discord_id: str
    discord_username: Optional[str]
    email: Optional[str]
    platform: str
    platform_user_id: Optional[str]
    sub_user_discord_ids: List[str]
    status: str
    expires_at: Optional[datetime]
    is_expired: bool
    allowed_ips: List[str]
    max_ips: int
    allowed_hwids: List[str]
    max_hwids: int
    validations: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, license: License, product_name: Optional[str] = None) -> "LicenseDTO":
        """
        Build a DTO from a License entity.

        Capacities are reported in their sentinel form (-1 unlimited,
        -2 untracked).
        """
        return cls(
            id=license.id,
            key=license.key,
            product_id=license.product_id,
            product_name=product_name or UNKNOWN_PRODUCT_NAME,
            discord_id=license.discord_id,
            discord_username=license.discord_username,
            email=license.email,
            platform=license.platform,
            platform_user_id=license.platform_user_id,
            sub_user_discord_ids=list(license.sub_user_discord_ids),
            status=license.status.value,
            expires_at=license.expires_at,
            is_expired=license.is_expired(),
            allowed_ips=list(license.allowed_ips),
            max_ips=license.max_ips.to_sentinel(),
            allowed_hwids=list(license.allowed_hwids),
            max_hwids=license.max_hwids.to_sentinel(),
            validations=license.validations,
            created_at=license.created_at,
            updated_at=license.updated_at,
        )
