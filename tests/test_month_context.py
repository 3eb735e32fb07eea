"""
Unit tests for month boundary resolution.
"""

import pytest
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo
from budget_pacer.analyzers.month_context import (
    days_in_month,
    get_zone,
    local_date,
    resolve_month_context,
)


class TestDaysInMonth:
    """Test month lengths."""

    @pytest.mark.parametrize("year,month,expected", [
        (2024, 1, 31),
        (2024, 2, 29),
        (2023, 2, 28),
        (2024, 4, 30),
        (2024, 12, 31),
        (2000, 2, 29),
        (1900, 2, 28),
    ])
    def test_days_in_month(self, year, month, expected):
        """Test day counts including leap years and December rollover."""
        assert days_in_month(year, month) == expected


class TestResolveMonthContext:
    """Test resolve_month_context."""

    def test_leap_february(self):
        """Test February 2024 has 29 days."""
        context = resolve_month_context(date(2024, 2, 15))

        assert context.year == 2024
        assert context.month == 2
        assert context.days_in_month == 29
        assert context.days_elapsed == 15

    def test_last_day_of_month(self):
        """Test the last day counts as fully elapsed."""
        context = resolve_month_context(date(2023, 2, 28))

        assert context.days_in_month == 28
        assert context.days_elapsed == 28
        assert context.remaining_days == 0

    def test_first_day_of_month(self):
        """Test day 1 is elapsed on the 1st."""
        context = resolve_month_context(date(2024, 5, 1))
        assert context.days_elapsed == 1

    def test_aware_instant_read_in_zone(self):
        """Test an instant just after UTC midnight is still last month in New York."""
        instant = datetime(2024, 3, 1, 3, 0, tzinfo=timezone.utc)

        new_york = resolve_month_context(instant, "America/New_York")
        utc = resolve_month_context(instant, "UTC")

        assert (new_york.month, new_york.days_elapsed) == (2, 29)
        assert (utc.month, utc.days_elapsed) == (3, 1)
        assert new_york.timezone == "America/New_York"

    def test_naive_datetime_is_local(self):
        """Test naive datetimes are not shifted."""
        context = resolve_month_context(datetime(2024, 3, 1, 3, 0), "America/New_York")

        assert context.month == 3
        assert context.days_elapsed == 1

    def test_default_reference_is_now(self):
        """Test omitting the reference resolves the current month."""
        context = resolve_month_context(timezone="Europe/Berlin")

        assert 1 <= context.days_elapsed <= context.days_in_month
        assert context.timezone == "Europe/Berlin"

    def test_unknown_timezone(self):
        """Test unknown zone names raise ValueError."""
        with pytest.raises(ValueError, match="Unknown timezone"):
            resolve_month_context(date(2024, 4, 10), "Mars/Olympus_Mons")


class TestZoneHelpers:
    """Test get_zone and local_date."""

    def test_get_zone_accepts_zoneinfo(self):
        """Test ZoneInfo objects pass through."""
        zone = ZoneInfo("Asia/Tokyo")
        assert get_zone(zone) is zone

    def test_get_zone_defaults_to_utc(self):
        """Test None means UTC."""
        assert get_zone(None).key == "UTC"

    def test_local_date_plain_date(self):
        """Test plain dates are used as-is."""
        assert local_date(date(2024, 4, 10), "Australia/Sydney") == date(2024, 4, 10)
