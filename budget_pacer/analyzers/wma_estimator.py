"""
Weighted moving average of recent daily spend.

The forecast runs at this rate: a linearly recency-weighted mean of the
last N elapsed days, so a recent spike or drop moves it more than an older
one would. This is not a simple moving average.
"""

from typing import Dict, Sequence

from budget_pacer.models.pacing import DayRow


class WmaEstimator:
    """
    Recency-weighted average daily spend over the most recent elapsed days.

    With a window of n days the newest day gets weight n, the day before it
    n-1, down to weight 1 for the oldest day in the window.
    """

    DEFAULT_WINDOW_DAYS = 7

    def __init__(self, window_days: int = DEFAULT_WINDOW_DAYS):
        """
        Initialize estimator.

        Args:
            window_days: Lookback window in days (>= 1)
        """
        if window_days < 1:
            raise ValueError(f"WMA window must be at least 1 day, got {window_days}")
        self.window_days = window_days

    def effective_window(self, days_elapsed: int) -> int:
        """Number of days actually averaged: the window, capped at days elapsed."""
        return min(self.window_days, max(days_elapsed, 0))

    def weights(self, days_elapsed: int) -> Dict[int, int]:
        """Map day number -> weight for the days inside the window."""
        n = self.effective_window(days_elapsed)
        return {days_elapsed - i: n - i for i in range(n) if days_elapsed - i >= 1}

    def estimate(self, rows: Sequence[DayRow], days_elapsed: int) -> float:
        """
        Compute the weighted average daily spend.

        Args:
            rows: Per-day series, rows[d - 1] is day d
            days_elapsed: Days of the month that have occurred

        Returns:
            Weighted average (0.0 when no day has elapsed)
        """
        weights = self.weights(min(days_elapsed, len(rows)))
        total_weight = sum(weights.values())
        if total_weight == 0:
            return 0.0

        weighted_sum = sum(weight * rows[day - 1].cost for day, weight in weights.items())
        return weighted_sum / total_weight

    def to_dict(self) -> Dict[str, int]:
        """Export estimator configuration."""
        return {"window_days": self.window_days}
