"""
Analytics handlers.

Gather snapshots from the repositories and hand them to the pure
aggregation functions in audit.domain.analytics.
"""
from datetime import datetime, timezone
from typing import Optional

from audit.application.dto.stats_dto import DashboardStatsDTO
from audit.domain import analytics
from audit.ports.audit_log_repository import AuditLogRepository
from licenses.ports.license_repository import LicenseRepository
from products.ports.product_repository import ProductRepository


class GetDashboardStatsHandler:
    """Builds the dashboard statistics."""

    def __init__(
        self,
        audit_log_repository: AuditLogRepository,
        license_repository: LicenseRepository,
        product_repository: ProductRepository,
    ):
        """Initialize handler with repositories."""
        self.audit_log_repository = audit_log_repository
        self.license_repository = license_repository
        self.product_repository = product_repository

    async def handle(self, now: Optional[datetime] = None) -> DashboardStatsDTO:
        """
        Compute dashboard statistics.

        Args:
            now: Reference time (defaults to now, UTC)

        Returns:
            DashboardStatsDTO
        """
        now = now or datetime.now(timezone.utc)
        products = await self.product_repository.list_all()
        licenses = await self.license_repository.list_all()
        logs = await self.audit_log_repository.list_validations()
        usage = await self.audit_log_repository.list_command_usage()

        return DashboardStatsDTO(
            totals=analytics.dashboard_stats(len(products), licenses, logs, now),
            daily_validations=analytics.daily_validation_counts(logs, now),
            validations_by_country=analytics.validations_by_country(logs),
            daily_command_usage=analytics.daily_command_usage(usage, now),
        )


class GetIpUsageHandler:
    """IP usage summary over the licenses an identity owns."""

    def __init__(self, license_repository: LicenseRepository):
        """Initialize handler with repository."""
        self.license_repository = license_repository

    async def handle(self, discord_id: str) -> analytics.IpUsage:
        licenses = await self.license_repository.find_by_owner(discord_id)
        return analytics.ip_usage_summary(licenses)
