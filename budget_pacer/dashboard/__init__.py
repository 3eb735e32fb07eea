"""Dashboard tables and charts for pacing summaries."""

from budget_pacer.dashboard.tables import (
    overview_frame,
    per_day_frame,
    kpi_rows,
    make_account_tab_name,
)
from budget_pacer.dashboard.charts import (
    create_pacing_chart,
    create_progress_chart,
    create_pace_delta_chart,
)

__all__ = [
    "overview_frame",
    "per_day_frame",
    "kpi_rows",
    "make_account_tab_name",
    "create_pacing_chart",
    "create_progress_chart",
    "create_pace_delta_chart",
]
