"""
PatchIdentitiesCommand.

Command to bind an IP and/or HWID to a license by hand.
"""
from dataclasses import dataclass
from typing import Optional


@dataclass
class PatchIdentitiesCommand:
    """Command to add evidence to a license's allow-lists."""

    key: str
    ip: Optional[str] = None
    hwid: Optional[str] = None
