"""Pacing and forecasting engine."""

from budget_pacer.analyzers.month_context import resolve_month_context
from budget_pacer.analyzers.daily_series import DailySeriesBuilder
from budget_pacer.analyzers.wma_estimator import WmaEstimator
from budget_pacer.analyzers.forecast_projector import ForecastProjector, ForecastResult
from budget_pacer.analyzers.pacing_aggregator import PacingAggregator

__all__ = [
    "resolve_month_context",
    "DailySeriesBuilder",
    "WmaEstimator",
    "ForecastProjector",
    "ForecastResult",
    "PacingAggregator",
]
