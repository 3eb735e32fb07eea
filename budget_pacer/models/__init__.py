"""Data models for monthly budget pacing."""

from budget_pacer.models.pacing import (
    TimezoneMode,
    MonthContext,
    DailyObservation,
    DayRow,
    AccountPacingSummary,
    AccountConfig,
    AccountResult,
    BatchReport,
)

__all__ = [
    "TimezoneMode",
    "MonthContext",
    "DailyObservation",
    "DayRow",
    "AccountPacingSummary",
    "AccountConfig",
    "AccountResult",
    "BatchReport",
]
