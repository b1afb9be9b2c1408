"""
SetLicenseStatusCommand.

Command to overwrite the status of a license.
"""
from dataclasses import dataclass

from core.domain.value_objects import LicenseStatus


@dataclass
class SetLicenseStatusCommand:
    """Command to set a license active or inactive."""

    key: str
    status: LicenseStatus
