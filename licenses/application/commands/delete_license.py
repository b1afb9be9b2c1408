"""
DeleteLicenseCommand.
"""
from dataclasses import dataclass


@dataclass
class DeleteLicenseCommand:
    """Command to permanently remove a license."""

    key: str
