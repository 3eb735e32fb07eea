"""
Unit tests for data models.

Tests MonthContext, DailyObservation, DayRow, AccountResult and BatchReport.
"""

import pytest
from datetime import date, datetime
from budget_pacer.models.pacing import (
    AccountPacingSummary,
    AccountResult,
    BatchReport,
    DailyObservation,
    DayRow,
    MonthContext,
    TimezoneMode,
)


def create_summary(
    account_id: str = "1234567890",
    trend_label: str = "On Target",
    pace_delta_pct: float = 0.0
) -> AccountPacingSummary:
    """Helper to create AccountPacingSummary for testing."""
    return AccountPacingSummary(
        account_id=account_id,
        account_name="Acme Retail",
        currency="USD",
        monthly_budget=3000.0,
        spend_mtd=1000.0,
        available_remaining=2000.0,
        target_spend_to_date=1000.0,
        pace_vs_target=0.0,
        pct_budget_spent=1 / 3,
        projected_eom_spend=3000.0,
        recommended_daily_spend=100.0,
        pace_delta_pct=pace_delta_pct,
        trend_label=trend_label,
        status="green",
        days_in_month=30,
        days_elapsed=10,
        remaining_days=20,
        wma_daily=100.0,
        wma_window_days=7,
        timezone="UTC",
    )


class TestMonthContext:
    """Test MonthContext model."""

    def test_properties(self):
        """Test derived dates and counts."""
        context = MonthContext(year=2024, month=2, days_in_month=29, days_elapsed=10)

        assert context.zero_based_month == 1
        assert context.first_day == date(2024, 2, 1)
        assert context.last_day == date(2024, 2, 29)
        assert context.reference_date == date(2024, 2, 10)
        assert context.remaining_days == 19

    def test_date_for_day(self):
        """Test 1-based day numbers map to calendar dates."""
        context = MonthContext(year=2024, month=2, days_in_month=29, days_elapsed=10)

        assert context.date_for_day(1) == date(2024, 2, 1)
        assert context.date_for_day(29) == date(2024, 2, 29)

    def test_contains(self):
        """Test month membership check."""
        context = MonthContext(year=2024, month=4, days_in_month=30, days_elapsed=1)

        assert context.contains(date(2024, 4, 30))
        assert not context.contains(date(2024, 5, 1))
        assert not context.contains(date(2023, 4, 15))

    def test_last_day_has_no_remaining_days(self):
        """Test remaining_days is 0 on the final day."""
        context = MonthContext(year=2024, month=4, days_in_month=30, days_elapsed=30)
        assert context.remaining_days == 0

    @pytest.mark.parametrize("kwargs", [
        {"year": 2024, "month": 4, "days_in_month": 30, "days_elapsed": 31},
        {"year": 2024, "month": 4, "days_in_month": 30, "days_elapsed": -1},
        {"year": 2024, "month": 13, "days_in_month": 31, "days_elapsed": 1},
        {"year": 2024, "month": 0, "days_in_month": 31, "days_elapsed": 1},
    ])
    def test_invalid_context_rejected(self, kwargs):
        """Test out-of-range month or elapsed days raise ValueError."""
        with pytest.raises(ValueError):
            MonthContext(**kwargs)

    def test_zero_length_month_allowed(self):
        """Test an empty month constructs with nothing remaining."""
        context = MonthContext(year=2024, month=4, days_in_month=0, days_elapsed=0)
        assert context.remaining_days == 0


class TestDailyObservation:
    """Test DailyObservation model."""

    def test_from_raw_string_date(self):
        """Test parsing a report row with string fields."""
        obs = DailyObservation.from_raw("2024-04-03", "1,234.50")

        assert obs.date == date(2024, 4, 3)
        assert obs.cost == 1234.5

    def test_from_raw_datetime(self):
        """Test datetimes are reduced to their date."""
        obs = DailyObservation.from_raw(datetime(2024, 4, 3, 18, 30), 12)
        assert obs.date == date(2024, 4, 3)

    @pytest.mark.parametrize("raw_cost", [None, "", "  ", "n/a"])
    def test_missing_cost_is_zero(self, raw_cost):
        """Test missing or unparsable cost defaults to 0."""
        obs = DailyObservation.from_raw(date(2024, 4, 3), raw_cost)
        assert obs.cost == 0.0

    @pytest.mark.parametrize("raw_cost", ["nan", "inf", "-inf", "Infinity", float("nan"), float("inf")])
    def test_non_finite_cost_is_zero(self, raw_cost):
        """Test NaN and infinite report costs count as zero spend."""
        obs = DailyObservation.from_raw(date(2024, 4, 3), raw_cost)
        assert obs.cost == 0.0

    @pytest.mark.parametrize("cost", [float("nan"), float("inf")])
    def test_non_finite_cost_rejected(self, cost):
        """Test direct construction with a non-finite cost raises ValueError."""
        with pytest.raises(ValueError, match="finite"):
            DailyObservation(date=date(2024, 4, 3), cost=cost)

    def test_negative_cost_rejected(self):
        """Test negative cost raises ValueError."""
        with pytest.raises(ValueError, match="negative"):
            DailyObservation(date=date(2024, 4, 3), cost=-1.0)


class TestDayRow:
    """Test DayRow model."""

    def test_with_forecast_returns_new_row(self):
        """Test forecast fields are set on a copy, not the original."""
        row = DayRow(
            day=1, date=date(2024, 4, 1), cost=100.0, cum_spend=100.0,
            target_daily=100.0, cum_target=100.0, gap=0.0, cum_gap=0.0,
            running_pace_pct=1 / 30, rec_daily=100.0
        )
        forecast = row.with_forecast(100.0, 3000.0)

        assert not row.has_forecast
        assert forecast.has_forecast
        assert forecast.cum_forecast_wma == 100.0
        assert forecast.projected_eom_wma_at_day == 3000.0
        assert forecast.cum_spend == row.cum_spend

    def test_to_dict(self):
        """Test conversion to dictionary."""
        row = DayRow(
            day=2, date=date(2024, 4, 2), cost=50.0, cum_spend=150.0,
            target_daily=100.0, cum_target=200.0, gap=-50.0, cum_gap=-50.0,
            running_pace_pct=0.05, rec_daily=101.79
        )
        data = row.to_dict()

        assert data["date"] == "2024-04-02"
        assert data["cum_gap"] == -50.0
        assert data["cum_forecast_wma"] is None


class TestAccountPacingSummary:
    """Test AccountPacingSummary model."""

    def test_trend_properties(self):
        """Test on/over/under classification follows the trend label."""
        on_target = create_summary()
        over = create_summary(trend_label="Over 12%", pace_delta_pct=0.12)
        under = create_summary(trend_label="Under 30%", pace_delta_pct=-0.30)

        assert on_target.is_on_target
        assert not on_target.is_over_pace and not on_target.is_under_pace
        assert over.is_over_pace
        assert under.is_under_pace

    def test_overview_row_excludes_per_day(self):
        """Test overview row is flat."""
        row = create_summary().to_overview_row()

        assert "per_day" not in row
        assert row["trend_label"] == "On Target"
        assert row["projected_eom_spend"] == 3000.0

    def test_str(self):
        """Test string representation."""
        text = str(create_summary())

        assert "1234567890" in text
        assert "On Target" in text


class TestAccountResult:
    """Test AccountResult model."""

    def test_success(self):
        """Test a successful result carries the summary."""
        result = AccountResult.success(create_summary())

        assert result.ok
        assert result.account_id == "1234567890"
        assert result.error_message is None

    def test_failure(self):
        """Test a failed result records the error."""
        result = AccountResult.failure("555", ConnectionError("timeout"), account_name="Broken")

        assert not result.ok
        assert result.error_type == "ConnectionError"
        assert result.error_message == "timeout"
        assert result.to_dict()["summary"] is None


class TestBatchReport:
    """Test BatchReport model."""

    def test_totals(self):
        """Test processed/skipped/errors counts."""
        report = BatchReport(reference_date=date(2024, 4, 10))
        report.add(AccountResult.success(create_summary("1")))
        report.add(AccountResult.success(create_summary("2")))
        report.add(AccountResult.failure("3", ValueError("bad")))
        report.skipped.append("4")

        assert report.totals() == {"processed": 2, "skipped": 1, "errors": 1}
        assert len(report.summaries) == 2
        assert report.failures[0].account_id == "3"

    def test_to_dict(self):
        """Test serialization."""
        report = BatchReport(reference_date=date(2024, 4, 10))
        data = report.to_dict()

        assert data["reference_date"] == "2024-04-10"
        assert data["totals"]["processed"] == 0


class TestEnums:
    """Test enum values."""

    def test_timezone_mode_values(self):
        """Test TimezoneMode values."""
        assert TimezoneMode.FIXED_ZONE.value == "fixed-zone"
        assert TimezoneMode.USE_ACCOUNT_ZONE.value == "use-account-zone"
