"""
Month boundary resolution.

Turns a reference instant and a timezone into the MonthContext every other
pacing calculation is anchored to.
"""

from datetime import date, datetime, timedelta
from typing import Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from budget_pacer.models.pacing import MonthContext

DEFAULT_TIMEZONE = "UTC"


def get_zone(timezone: Union[str, ZoneInfo, None]) -> ZoneInfo:
    """
    Look up a timezone by IANA name.

    Raises:
        ValueError: If the zone name is unknown
    """
    if isinstance(timezone, ZoneInfo):
        return timezone
    name = (timezone or DEFAULT_TIMEZONE).strip()
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValueError(f"Unknown timezone: {name!r}") from e


def local_date(reference: Union[date, datetime, None], timezone: Union[str, ZoneInfo, None]) -> date:
    """
    Calendar date of the reference instant as seen in the given timezone.

    Naive datetimes are taken to already be local to the timezone; plain
    dates are used as-is.
    """
    zone = get_zone(timezone)
    if reference is None:
        return datetime.now(zone).date()
    if isinstance(reference, datetime):
        if reference.tzinfo is None:
            return reference.date()
        return reference.astimezone(zone).date()
    return reference


def days_in_month(year: int, month: int) -> int:
    """Day count of a month: first day of the next month minus one day."""
    first_of_next = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
    return (first_of_next - timedelta(days=1)).day


def resolve_month_context(
    reference: Union[date, datetime, None] = None,
    timezone: Union[str, ZoneInfo, None] = DEFAULT_TIMEZONE
) -> MonthContext:
    """
    Resolve the month boundaries for a reference instant.

    Args:
        reference: Instant or date to pace against (default: now)
        timezone: IANA zone name or ZoneInfo the month is read in

    Returns:
        MonthContext with days_elapsed clamped to [1, days_in_month]
    """
    zone = get_zone(timezone)
    today = local_date(reference, zone)
    total_days = days_in_month(today.year, today.month)
    elapsed = min(max(today.day, 1), total_days)

    return MonthContext(
        year=today.year,
        month=today.month,
        days_in_month=total_days,
        days_elapsed=elapsed,
        timezone=str(zone.key),
    )

