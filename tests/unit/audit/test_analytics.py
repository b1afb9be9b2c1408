"""
Unit tests for the audit analytics functions.
"""
from datetime import date, datetime, timedelta, timezone

from audit.domain import analytics
from audit.domain.entries import CommandUsage, Location, ValidationLog
from core.domain.value_objects import Capacity, LicenseStatus, ValidationOutcome, ValidationReason
from licenses.domain.license import License

NOW = datetime(2024, 5, 15, 12, 0, tzinfo=timezone.utc)


def log(days_ago=0, success=True, country=None):
    return ValidationLog(
        license_key="LF-1",
        status=ValidationOutcome.SUCCESS if success else ValidationOutcome.FAILURE,
        reason=None if success else ValidationReason.EXPIRED,
        timestamp=NOW - timedelta(days=days_ago),
        location=Location(country=country) if country else None,
    )


def license(max_ips, ips=(), status=LicenseStatus.ACTIVE, expires_in_days=30):
    return License(
        id="lic",
        key="LF-1",
        product_id="prod",
        discord_id="1",
        status=status,
        expires_at=NOW + timedelta(days=expires_in_days),
        max_ips=max_ips,
        max_hwids=Capacity.bounded(1),
        created_at=NOW - timedelta(days=60),
        updated_at=NOW - timedelta(days=60),
        allowed_ips=tuple(ips),
    )


class TestDailyCounts:
    """Tests for the per-day series."""

    def test_daily_validation_counts(self):
        """Test seven days oldest first, old logs ignored."""
        logs = [log(0), log(0, success=False), log(2), log(10)]

        series = analytics.daily_validation_counts(logs, NOW)

        assert [entry.day for entry in series] == [
            date(2024, 5, 9) + timedelta(days=n) for n in range(7)
        ]
        assert series[-1] == analytics.DailyValidationCount(date(2024, 5, 15), 1, 1)
        assert series[-3].success == 1
        assert sum(entry.success + entry.failure for entry in series) == 3

    def test_daily_command_usage(self):
        """Test bot commands per day."""
        usage = [
            CommandUsage("license", "1", NOW),
            CommandUsage("license", "2", NOW - timedelta(hours=1)),
            CommandUsage("renew", "1", NOW - timedelta(days=1)),
        ]

        series = analytics.daily_command_usage(usage, NOW, days=3)

        assert [entry.commands for entry in series] == [0, 1, 2]


class TestValidationsByCountry:
    """Tests for validations_by_country."""

    def test_counts_resolved_countries(self):
        """Test unresolved attempts are left out."""
        logs = [log(country="Germany"), log(country="France"), log(country="Germany"), log()]

        assert analytics.validations_by_country(logs) == {"Germany": 2, "France": 1}


class TestDashboardStats:
    """Tests for dashboard_stats."""

    def test_totals(self):
        """Test the headline counts."""
        licenses = [
            license(Capacity.bounded(1)),
            license(Capacity.bounded(1), status=LicenseStatus.INACTIVE),
            license(Capacity.bounded(1), expires_in_days=-1),
        ]
        logs = [log(0), log(1, success=False)]

        stats = analytics.dashboard_stats(3, licenses, logs, NOW)

        assert stats.total_products == 3
        assert stats.total_licenses == 3
        assert stats.active_licenses == 1
        assert stats.total_validations == 2
        assert stats.successful_validations == 1

    def test_change_percent(self):
        """Test the week-over-week change."""
        logs = [log(1), log(2), log(3), log(8), log(9)]

        assert analytics.dashboard_stats(0, [], logs, NOW).validation_change_percent == 50.0

    def test_change_percent_without_previous_week(self):
        """Test the change is 100 when only the current week has activity."""
        assert analytics.dashboard_stats(0, [], [log(0)], NOW).validation_change_percent == 100.0
        assert analytics.dashboard_stats(0, [], [], NOW).validation_change_percent == 0.0


class TestIpUsageSummary:
    """Tests for ip_usage_summary."""

    def test_bounded(self):
        """Test distinct addresses over summed slots."""
        usage = analytics.ip_usage_summary(
            [
                license(Capacity.bounded(2), ips=["1.1.1.1", "2.2.2.2"]),
                license(Capacity.bounded(3), ips=["2.2.2.2"]),
            ]
        )
        assert usage == analytics.IpUsage(used=2, total=5)

    def test_unlimited_has_no_total(self):
        """Test one unlimited license removes the total."""
        usage = analytics.ip_usage_summary(
            [license(Capacity.bounded(2), ips=["1.1.1.1"]), license(Capacity.unlimited())]
        )
        assert usage == analytics.IpUsage(used=1, total=None)

    def test_untracked_is_skipped(self):
        """Test untracked licenses add neither addresses nor slots."""
        usage = analytics.ip_usage_summary(
            [license(Capacity.bounded(2)), license(Capacity.untracked())]
        )
        assert usage == analytics.IpUsage(used=0, total=2)
