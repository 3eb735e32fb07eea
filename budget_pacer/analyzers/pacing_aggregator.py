"""
Account pacing aggregator.

Combines one account's budget, month-to-date spend and forecast into the
AccountPacingSummary shown on the dashboard overview, and classifies the
pace into a trend label and a traffic-light status.
"""

import math
from typing import Dict

from budget_pacer.analyzers.forecast_projector import ForecastResult
from budget_pacer.models.pacing import AccountPacingSummary, MonthContext


class PacingAggregator:
    """
    Stateless per-account pacing summary.

    Trend classification:
    - On Target: |pace delta| <= 5% (inclusive)
    - Under N% / Over N%: outside the band, N = rounded |pace delta| in percent

    Status (traffic light):
    - green: |pace delta| <= 5%
    - yellow: 5% < |pace delta| < 10%
    - red: |pace delta| >= 10%
    """

    ON_TARGET_BAND = 0.05
    WARNING_BAND = 0.10

    def __init__(
        self,
        on_target_band: float = ON_TARGET_BAND,
        warning_band: float = WARNING_BAND
    ):
        """
        Initialize aggregator with configurable bands.

        Args:
            on_target_band: Maximum |pace delta| (fraction) counted as on target
            warning_band: |pace delta| at or above which status is red
        """
        if on_target_band < 0 or warning_band < on_target_band:
            raise ValueError(
                f"Bands must satisfy 0 <= on_target_band <= warning_band, "
                f"got {on_target_band} and {warning_band}"
            )
        self.on_target_band = on_target_band
        self.warning_band = warning_band

    def summarize(
        self,
        account_id: str,
        account_name: str,
        currency: str,
        monthly_budget: float,
        spend_mtd: float,
        context: MonthContext,
        forecast: ForecastResult,
        wma_window_days: int = 7
    ) -> AccountPacingSummary:
        """
        Build the pacing summary for one account.

        Args:
            account_id: Ads account identifier (digits only)
            account_name: Human-readable account name
            currency: ISO currency code, passed through
            monthly_budget: Monthly budget cap
            spend_mtd: Month-to-date actual spend
            context: Month being paced
            forecast: Output of ForecastProjector.project()
            wma_window_days: Window used for forecast.wma_daily

        Returns:
            AccountPacingSummary
        """
        target_to_date = self.target_spend_to_date(monthly_budget, context)
        pace_delta = self.pace_delta_pct(spend_mtd, target_to_date)

        return AccountPacingSummary(
            account_id=account_id,
            account_name=account_name,
            currency=currency,
            monthly_budget=monthly_budget,
            spend_mtd=spend_mtd,
            available_remaining=max(monthly_budget - spend_mtd, 0.0),
            target_spend_to_date=target_to_date,
            pace_vs_target=spend_mtd - target_to_date,
            pct_budget_spent=spend_mtd / monthly_budget if monthly_budget > 0 else 0.0,
            projected_eom_spend=forecast.projected_eom_spend,
            recommended_daily_spend=forecast.recommended_daily_spend,
            pace_delta_pct=pace_delta,
            trend_label=self.trend_label(pace_delta),
            status=self.status(pace_delta),
            days_in_month=context.days_in_month,
            days_elapsed=context.days_elapsed,
            remaining_days=forecast.remaining_days,
            wma_daily=forecast.wma_daily,
            wma_window_days=wma_window_days,
            timezone=context.timezone,
            per_day=forecast.per_day,
        )

    @staticmethod
    def target_spend_to_date(monthly_budget: float, context: MonthContext) -> float:
        if context.days_in_month <= 0:
            return 0.0
        return monthly_budget * (context.days_elapsed / context.days_in_month)

    @staticmethod
    def pace_delta_pct(spend_mtd: float, target_to_date: float) -> float:
        """Relative pace vs straight-line target; 0 when the target is 0."""
        if target_to_date <= 0:
            return 0.0
        return spend_mtd / target_to_date - 1

    def trend_label(self, pace_delta_pct: float) -> str:
        """
        Human-readable trend bucket.

        Args:
            pace_delta_pct: Relative pace (0.12 means 12% ahead of target)

        Returns:
            "On Target", "Under N%" or "Over N%"
        """
        magnitude = abs(pace_delta_pct)
        if magnitude <= self.on_target_band:
            return "On Target"

        # Half-up rounding: 12.5% reads as 13%
        pct = int(math.floor(magnitude * 100 + 0.5))
        return f"Under {pct}%" if pace_delta_pct < 0 else f"Over {pct}%"

    def status(self, pace_delta_pct: float) -> str:
        """Traffic-light status: "green" | "yellow" | "red"."""
        magnitude = abs(pace_delta_pct)
        if magnitude <= self.on_target_band:
            return "green"
        if magnitude < self.warning_band:
            return "yellow"
        return "red"

    def to_dict(self) -> Dict[str, float]:
        """Export aggregator configuration."""
        return {
            "on_target_band": self.on_target_band,
            "warning_band": self.warning_band,
        }
