"""
Analytics DTOs for API responses.
"""
from dataclasses import dataclass
from typing import Dict, List

from audit.domain.analytics import DailyCommandCount, DailyValidationCount, DashboardStats


@dataclass
class DashboardStatsDTO:
    """DTO for the admin dashboard."""

    totals: DashboardStats
    daily_validations: List[DailyValidationCount]
    validations_by_country: Dict[str, int]
    daily_command_usage: List[DailyCommandCount]
