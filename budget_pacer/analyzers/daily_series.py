"""
Daily pacing series builder.

Merges raw daily spend observations into one row per calendar day of the
month (zero-filled for days with no spend, including future days) and
computes each day's target and gap metrics against a flat daily target.
"""

import math
from collections import defaultdict
from typing import Dict, Iterable, List

from budget_pacer.models.pacing import DailyObservation, DayRow, MonthContext


class DailySeriesBuilder:
    """
    Build the base per-day series for one account and month.

    Rows are returned in ascending date order, one per day 1..days_in_month.
    Consumers index them by day number, so the sequence is always contiguous.
    """

    def build(
        self,
        monthly_budget: float,
        context: MonthContext,
        observations: Iterable[DailyObservation]
    ) -> List[DayRow]:
        """
        Build the per-day rows.

        Args:
            monthly_budget: Monthly budget cap (>= 0)
            context: Month being paced
            observations: Daily (date, cost) rows, any order, duplicates allowed

        Returns:
            List of DayRow without forecast fields

        Raises:
            ValueError: If monthly_budget is negative or not finite
        """
        if not math.isfinite(monthly_budget):
            raise ValueError(f"Monthly budget must be finite, got {monthly_budget}")
        if monthly_budget < 0:
            raise ValueError(f"Monthly budget cannot be negative, got {monthly_budget}")

        cost_by_day = self.merge_by_day(observations, context)
        total_days = context.days_in_month
        target_daily = monthly_budget / total_days if total_days > 0 else 0.0

        rows = []
        cum_spend = 0.0
        for day in range(1, total_days + 1):
            cost = cost_by_day.get(day, 0.0)
            cum_spend += cost
            cum_target = target_daily * day
            remaining = total_days - day

            rows.append(DayRow(
                day=day,
                date=context.date_for_day(day),
                cost=cost,
                cum_spend=cum_spend,
                target_daily=target_daily,
                cum_target=cum_target,
                gap=cost - target_daily,
                cum_gap=cum_spend - cum_target,
                running_pace_pct=cum_spend / monthly_budget if monthly_budget > 0 else 0.0,
                rec_daily=max((monthly_budget - cum_spend) / remaining, 0.0) if remaining > 0 else 0.0,
            ))

        return rows

    def merge_by_day(
        self,
        observations: Iterable[DailyObservation],
        context: MonthContext
    ) -> Dict[int, float]:
        """
        Sum observation costs per day-of-month.

        Observations dated outside the context month are ignored.
        """
        cost_by_day = defaultdict(float)
        for observation in observations:
            if not context.contains(observation.date):
                continue
            day = observation.date.day
            if 1 <= day <= context.days_in_month:
                cost_by_day[day] += observation.cost
        return dict(cost_by_day)
