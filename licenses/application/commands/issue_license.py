"""
IssueLicenseCommand.

Command to issue a new license for a product.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from core.domain.value_objects import Capacity


@dataclass
class IssueLicenseCommand:
    """Command to issue a license to an owning identity."""

    product_id: str
    discord_id: str
    max_ips: Capacity = field(default_factory=lambda: Capacity.bounded(1))
    max_hwids: Capacity = field(default_factory=lambda: Capacity.bounded(1))
    discord_username: Optional[str] = None
    email: Optional[str] = None
    expires_at: Optional[datetime] = None
    platform: str = "custom"
    platform_user_id: Optional[str] = None
    sub_user_discord_ids: List[str] = field(default_factory=list)
