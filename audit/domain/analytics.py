"""
Read-side aggregation over the audit logs and the license collection.

All functions are pure; callers pass snapshots and the current time.
"""
from collections import Counter
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Dict, Iterable, List, Optional

from audit.domain.entries import CommandUsage, ValidationLog
from core.domain.value_objects import ValidationOutcome
from licenses.domain.license import License


@dataclass(frozen=True)
class DailyValidationCount:
    day: date
    success: int
    failure: int


@dataclass(frozen=True)
class DailyCommandCount:
    day: date
    commands: int


@dataclass(frozen=True)
class DashboardStats:
    total_products: int
    total_licenses: int
    active_licenses: int
    total_validations: int
    successful_validations: int
    validation_change_percent: float


@dataclass(frozen=True)
class IpUsage:
    """
    Distinct addresses bound across a set of licenses.

    ``total`` is None when any license has unlimited IP capacity.
    """

    used: int
    total: Optional[int]


def _window(now: datetime, days: int) -> List[date]:
    today = now.date()
    return [today - timedelta(days=offset) for offset in range(days - 1, -1, -1)]


def _start_of(day: date, now: datetime) -> datetime:
    return datetime.combine(day, time.min, tzinfo=now.tzinfo)


def daily_validation_counts(
    logs: Iterable[ValidationLog], now: datetime, days: int = 7
) -> List[DailyValidationCount]:
    """Success and failure counts per calendar day, oldest day first."""
    window = _window(now, days)
    success: Counter = Counter()
    failure: Counter = Counter()
    for log in logs:
        day = log.timestamp.astimezone(now.tzinfo).date()
        if log.status == ValidationOutcome.SUCCESS:
            success[day] += 1
        else:
            failure[day] += 1
    return [DailyValidationCount(day, success[day], failure[day]) for day in window]


def validations_by_country(logs: Iterable[ValidationLog]) -> Dict[str, int]:
    """Number of validation attempts per resolved country."""
    counts: Counter = Counter()
    for log in logs:
        if log.location and log.location.country:
            counts[log.location.country] += 1
    return dict(counts.most_common())


def daily_command_usage(
    usage: Iterable[CommandUsage], now: datetime, days: int = 7
) -> List[DailyCommandCount]:
    """Bot command invocations per calendar day, oldest day first."""
    window = _window(now, days)
    counts = Counter(entry.timestamp.astimezone(now.tzinfo).date() for entry in usage)
    return [DailyCommandCount(day, counts[day]) for day in window]


def dashboard_stats(
    total_products: int,
    licenses: List[License],
    logs: List[ValidationLog],
    now: datetime,
) -> DashboardStats:
    """
    Headline numbers for the admin dashboard.

    The change percentage compares the last seven days with the seven
    before; it is 100 when there was no previous activity but some now.
    """
    current_start = _start_of(now.date() - timedelta(days=6), now)
    previous_start = _start_of(now.date() - timedelta(days=13), now)

    last_7 = sum(1 for log in logs if log.timestamp >= current_start)
    previous_7 = sum(1 for log in logs if previous_start <= log.timestamp < current_start)

    if previous_7 > 0:
        change = (last_7 - previous_7) / previous_7 * 100
    elif last_7 > 0:
        change = 100.0
    else:
        change = 0.0

    return DashboardStats(
        total_products=total_products,
        total_licenses=len(licenses),
        active_licenses=sum(1 for lic in licenses if lic.is_usable(now)),
        total_validations=len(logs),
        successful_validations=sum(
            1 for log in logs if log.status == ValidationOutcome.SUCCESS
        ),
        validation_change_percent=change,
    )


def ip_usage_summary(licenses: Iterable[License]) -> IpUsage:
    """
    Summarize IP usage over a set of licenses.

    Licenses with untracked IPs contribute neither addresses nor slots.
    """
    used = set()
    total: Optional[int] = 0
    for license in licenses:
        if license.max_ips.is_untracked:
            continue
        used.update(license.allowed_ips)
        if license.max_ips.is_unlimited:
            total = None
        elif total is not None:
            total += license.max_ips.limit
    return IpUsage(used=len(used), total=total)
