"""
Sub-user commands.

Commands to grant or revoke delegated access to a license.
"""
from dataclasses import dataclass


@dataclass
class AddSubUserCommand:
    """Command to add a sub-user to a license."""

    key: str
    discord_id: str


@dataclass
class RemoveSubUserCommand:
    """Command to remove a sub-user from a license."""

    key: str
    discord_id: str
