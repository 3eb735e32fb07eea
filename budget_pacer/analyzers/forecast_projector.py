"""
End-of-month forecast projection.

Extends the daily series into a forecasted cumulative-spend curve at the
recent weighted rate, and computes the month's projected end spend and the
daily budget that would land spend exactly on the monthly budget.
"""

from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from budget_pacer.models.pacing import DayRow, MonthContext


@dataclass(frozen=True)
class ForecastResult:
    """Per-day forecast series plus month-level projections."""
    per_day: Tuple[DayRow, ...]
    wma_daily: float
    remaining_days: int
    projected_eom_spend: float
    recommended_daily_spend: float

    def to_dict(self) -> Dict:
        return {
            "wma_daily": self.wma_daily,
            "remaining_days": self.remaining_days,
            "projected_eom_spend": self.projected_eom_spend,
            "recommended_daily_spend": self.recommended_daily_spend,
        }


class ForecastProjector:
    """
    Linear projection of month-end spend at the weighted recent rate.

    Elapsed days reproduce actual cumulative spend exactly. Later days
    continue from the month-to-date total, which is authoritative for
    "today" even when it differs slightly from the summed daily report.
    """

    def project(
        self,
        rows: Sequence[DayRow],
        context: MonthContext,
        monthly_budget: float,
        spend_mtd: float,
        wma_daily: float
    ) -> ForecastResult:
        """
        Build forecast rows and month-level projections.

        Args:
            rows: Base per-day series from DailySeriesBuilder
            context: Month being paced
            monthly_budget: Monthly budget cap
            spend_mtd: Month-to-date actual spend
            wma_daily: Weighted recent daily spend

        Returns:
            ForecastResult with new DayRow objects carrying forecast fields
        """
        per_day = tuple(self.forecast_rows(rows, context, spend_mtd, wma_daily))
        remaining_days = max(context.days_in_month - context.days_elapsed, 0)

        return ForecastResult(
            per_day=per_day,
            wma_daily=wma_daily,
            remaining_days=remaining_days,
            projected_eom_spend=spend_mtd + wma_daily * remaining_days,
            recommended_daily_spend=self.recommended_daily_spend(
                monthly_budget, spend_mtd, remaining_days
            ),
        )

    def forecast_rows(
        self,
        rows: Sequence[DayRow],
        context: MonthContext,
        spend_mtd: float,
        wma_daily: float
    ) -> List[DayRow]:
        """Copy each row with its cumulative forecast and anchored EoM projection."""
        forecast = []
        for row in rows:
            if row.day <= context.days_elapsed:
                cum_forecast = row.cum_spend
            else:
                cum_forecast = spend_mtd + wma_daily * (row.day - context.days_elapsed)

            # "If today were this day, where would the month end?"
            projected_eom = row.cum_spend + wma_daily * (context.days_in_month - row.day)
            forecast.append(row.with_forecast(cum_forecast, projected_eom))
        return forecast

    @staticmethod
    def recommended_daily_spend(monthly_budget: float, spend_mtd: float, remaining_days: int) -> float:
        """Daily spend that uses up the remaining budget; 0 once no days remain."""
        if remaining_days <= 0:
            return 0.0
        return max((monthly_budget - spend_mtd) / remaining_days, 0.0)
