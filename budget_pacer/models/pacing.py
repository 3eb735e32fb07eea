"""
Data models for monthly budget pacing.

This module defines the core data structures used throughout the Budget Pacer:
- MonthContext for the boundaries of the month being paced
- DailyObservation for raw daily spend rows from the ads platform
- DayRow for one calendar day of the pacing series (actuals + forecast)
- AccountPacingSummary for the per-account record consumed by the dashboard
- AccountConfig, AccountResult and BatchReport for batch runs
"""

import math
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class TimezoneMode(Enum):
    """How the reporting timezone is chosen for each account."""
    FIXED_ZONE = "fixed-zone"
    USE_ACCOUNT_ZONE = "use-account-zone"


@dataclass(frozen=True)
class MonthContext:
    """
    Boundaries of the month being paced, resolved in a single timezone.

    Construction enforces 0 <= days_elapsed <= days_in_month. Contexts from
    resolve_month_context() always have days_elapsed >= 1; a zero-length
    month is accepted so rate calculations can resolve to 0 instead of
    dividing by zero.
    """
    year: int
    month: int  # 1-12
    days_in_month: int
    days_elapsed: int
    timezone: str = "UTC"

    def __post_init__(self):
        if not 1 <= self.month <= 12:
            raise ValueError(f"Month must be 1-12, got {self.month}")
        if not 0 <= self.days_elapsed <= self.days_in_month:
            raise ValueError(
                f"days_elapsed must be within 0..{self.days_in_month}, got {self.days_elapsed}"
            )

    @property
    def zero_based_month(self) -> int:
        return self.month - 1

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def last_day(self) -> date:
        return date(self.year, self.month, self.days_in_month)

    @property
    def reference_date(self) -> date:
        """Calendar date of the last elapsed day ("today")."""
        return date(self.year, self.month, self.days_elapsed)

    @property
    def remaining_days(self) -> int:
        return max(self.days_in_month - self.days_elapsed, 0)

    def date_for_day(self, day: int) -> date:
        """Calendar date for a 1-based day number of this month."""
        return self.first_day + timedelta(days=day - 1)

    def contains(self, value: date) -> bool:
        """Check if a date falls inside this month."""
        return value.year == self.year and value.month == self.month


def _coerce_cost(raw: Any) -> float:
    """Missing, blank, unparsable or non-finite costs count as zero spend."""
    if raw is None:
        return 0.0
    if isinstance(raw, str):
        raw = raw.replace(",", "").strip()
        if not raw:
            return 0.0
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return 0.0
    return value if math.isfinite(value) else 0.0


@dataclass(frozen=True)
class DailyObservation:
    """
    Single (date, cost) row from the ads platform daily report.

    Cost is in account currency and never negative. Several observations
    may share a date; they are summed when the daily series is built.
    """
    date: date
    cost: float = 0.0

    def __post_init__(self):
        if not math.isfinite(self.cost):
            raise ValueError(f"Daily cost must be finite, got {self.cost} on {self.date}")
        if self.cost < 0:
            raise ValueError(f"Daily cost cannot be negative, got {self.cost} on {self.date}")

    @classmethod
    def from_raw(cls, raw_date: Any, raw_cost: Any) -> "DailyObservation":
        """
        Build an observation from a loosely typed report row.

        Args:
            raw_date: date, datetime or 'YYYY-MM-DD' string
            raw_cost: number, numeric string, blank or None

        Returns:
            DailyObservation with cost defaulted to 0.0 when missing
        """
        if isinstance(raw_date, datetime):
            day = raw_date.date()
        elif isinstance(raw_date, date):
            day = raw_date
        else:
            day = datetime.strptime(str(raw_date).strip(), "%Y-%m-%d").date()
        return cls(date=day, cost=_coerce_cost(raw_cost))


@dataclass(frozen=True)
class DayRow:
    """
    One calendar day of the pacing series.

    Actual fields are fixed at construction. Forecast fields are None until
    the forecast projector builds a new row through with_forecast().
    """
    day: int
    date: date
    cost: float
    cum_spend: float
    target_daily: float
    cum_target: float
    gap: float
    cum_gap: float
    running_pace_pct: float
    rec_daily: float  # what the recommendation was as of this day
    cum_forecast_wma: Optional[float] = None
    projected_eom_wma_at_day: Optional[float] = None

    @property
    def has_forecast(self) -> bool:
        return self.cum_forecast_wma is not None and self.projected_eom_wma_at_day is not None

    def with_forecast(self, cum_forecast_wma: float, projected_eom_wma_at_day: float) -> "DayRow":
        """Return a copy of this row carrying the forecast fields."""
        return replace(
            self,
            cum_forecast_wma=cum_forecast_wma,
            projected_eom_wma_at_day=projected_eom_wma_at_day,
        )

    def to_dict(self) -> Dict:
        """Convert to dictionary for serialization."""
        return {
            "day": self.day,
            "date": self.date.isoformat(),
            "cost": self.cost,
            "cum_spend": self.cum_spend,
            "target_daily": self.target_daily,
            "cum_target": self.cum_target,
            "gap": self.gap,
            "cum_gap": self.cum_gap,
            "running_pace_pct": self.running_pace_pct,
            "rec_daily": self.rec_daily,
            "cum_forecast_wma": self.cum_forecast_wma,
            "projected_eom_wma_at_day": self.projected_eom_wma_at_day,
        }


@dataclass(frozen=True)
class AccountPacingSummary:
    """
    Monthly pacing record for one account.

    This is the one row the dashboard overview consumes, plus the per-day
    series for the account's own table and chart. Built fresh each run and
    never mutated.
    """
    account_id: str
    account_name: str
    currency: str
    monthly_budget: float
    spend_mtd: float
    available_remaining: float
    target_spend_to_date: float
    pace_vs_target: float
    pct_budget_spent: float
    projected_eom_spend: float
    recommended_daily_spend: float
    pace_delta_pct: float
    trend_label: str
    status: str  # "green" | "yellow" | "red"
    days_in_month: int
    days_elapsed: int
    remaining_days: int
    wma_daily: float
    wma_window_days: int
    timezone: str
    per_day: Tuple[DayRow, ...] = ()

    @property
    def is_on_target(self) -> bool:
        return self.trend_label == "On Target"

    @property
    def is_over_pace(self) -> bool:
        return not self.is_on_target and self.pace_delta_pct > 0

    @property
    def is_under_pace(self) -> bool:
        return not self.is_on_target and self.pace_delta_pct < 0

    def to_overview_row(self) -> Dict:
        """Flat overview fields, without the per-day series."""
        return {
            "account_id": self.account_id,
            "account_name": self.account_name,
            "currency": self.currency,
            "monthly_budget": self.monthly_budget,
            "spend_mtd": self.spend_mtd,
            "available_remaining": self.available_remaining,
            "target_spend_to_date": self.target_spend_to_date,
            "pace_vs_target": self.pace_vs_target,
            "pct_budget_spent": self.pct_budget_spent,
            "projected_eom_spend": self.projected_eom_spend,
            "recommended_daily_spend": self.recommended_daily_spend,
            "pace_delta_pct": self.pace_delta_pct,
            "trend_label": self.trend_label,
            "status": self.status,
            "days_in_month": self.days_in_month,
            "days_elapsed": self.days_elapsed,
            "remaining_days": self.remaining_days,
            "wma_daily": self.wma_daily,
            "wma_window_days": self.wma_window_days,
            "timezone": self.timezone,
        }

    def to_dict(self) -> Dict:
        """Convert to dictionary for serialization."""
        data = self.to_overview_row()
        data["per_day"] = [row.to_dict() for row in self.per_day]
        return data

    def __str__(self) -> str:
        return (
            f"AccountPacingSummary(account={self.account_id}, "
            f"spend={self.spend_mtd:,.2f}/{self.monthly_budget:,.2f} {self.currency}, "
            f"trend={self.trend_label})"
        )


@dataclass(frozen=True)
class AccountConfig:
    """Validated budget configuration row for one account."""
    account_id: str
    account_name: str
    monthly_budget: float
    include: bool = True


@dataclass(frozen=True)
class AccountResult:
    """
    Outcome of processing one account in a batch run.

    Exactly one of summary or error_message is set.
    """
    account_id: str
    account_name: str = ""
    summary: Optional[AccountPacingSummary] = None
    error_type: Optional[str] = None
    error_message: Optional[str] = None

    @classmethod
    def success(cls, summary: AccountPacingSummary) -> "AccountResult":
        return cls(
            account_id=summary.account_id,
            account_name=summary.account_name,
            summary=summary,
        )

    @classmethod
    def failure(cls, account_id: str, error: Exception, account_name: str = "") -> "AccountResult":
        return cls(
            account_id=account_id,
            account_name=account_name,
            error_type=type(error).__name__,
            error_message=str(error),
        )

    @property
    def ok(self) -> bool:
        return self.summary is not None

    def to_dict(self) -> Dict:
        return {
            "account_id": self.account_id,
            "account_name": self.account_name,
            "ok": self.ok,
            "error_type": self.error_type,
            "error_message": self.error_message,
            "summary": self.summary.to_dict() if self.summary else None,
        }


@dataclass
class BatchReport:
    """Per-account results of one pacing run."""
    reference_date: Optional[date] = None
    results: List[AccountResult] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)

    def add(self, result: AccountResult):
        self.results.append(result)

    @property
    def summaries(self) -> List[AccountPacingSummary]:
        return [r.summary for r in self.results if r.ok]

    @property
    def failures(self) -> List[AccountResult]:
        return [r for r in self.results if not r.ok]

    @property
    def processed(self) -> int:
        return len(self.summaries)

    @property
    def errors(self) -> int:
        return len(self.failures)

    def totals(self) -> Dict[str, int]:
        return {
            "processed": self.processed,
            "skipped": len(self.skipped),
            "errors": self.errors,
        }

    def to_dict(self) -> Dict:
        return {
            "reference_date": self.reference_date.isoformat() if self.reference_date else None,
            "totals": self.totals(),
            "skipped": list(self.skipped),
            "results": [r.to_dict() for r in self.results],
        }
