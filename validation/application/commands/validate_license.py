"""
ValidateLicenseCommand.

Command to validate a license key for a requesting identity.
"""
from dataclasses import dataclass
from typing import Optional


@dataclass
class ValidateLicenseCommand:
    """
    Validation request.

    The identity is supplied by the caller; the engine never parses
    transport credentials.
    """

    key: Optional[str]
    discord_id: Optional[str] = None
    ip: Optional[str] = None
    hwid: Optional[str] = None
