"""
Blacklist commands.
"""
from dataclasses import dataclass

from blacklist.domain.blacklist import BlacklistEntryType


@dataclass
class AddBlacklistEntryCommand:
    """Command to add a single value to the blacklist."""

    entry_type: BlacklistEntryType
    value: str


@dataclass
class RemoveBlacklistEntryCommand:
    """Command to remove a single value from the blacklist."""

    entry_type: BlacklistEntryType
    value: str


@dataclass
class BlacklistUserCommand:
    """Command to blacklist a user together with their bound identifiers."""

    discord_id: str


@dataclass
class UnblacklistUserCommand:
    """Command to lift a user blacklist."""

    discord_id: str


@dataclass
class BlacklistLicenseIdentifiersCommand:
    """Command to blacklist every IP and HWID bound to a license."""

    key: str
