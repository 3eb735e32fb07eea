"""
Dashboard tables.

Lays pacing summaries out as the overview table, the per-account KPI block
and the per-day table. Presentation only: numbers are passed through as
computed.
"""

import re
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

import pandas as pd

from budget_pacer.models.pacing import AccountPacingSummary

OVERVIEW_COLUMNS = [
    "Account Name", "Account ID",
    "Budget Cap", "Spend to Date",
    "Trend (vs Target)",
    "Pace Delta % (vs Target)",
    "Available Budget Remaining",
    "Days in Month", "Days Elapsed",
    "Target Spend To Date",
    "Pace vs Target",
    "Percentage Budget Spent",
    "Projected EoM Spend",
    "Recommended Daily Spend to 100%",
    "Account Currency",
]

PER_DAY_COLUMNS = [
    "Date", "Cost (Day)", "Cumulative Spend", "Target Daily Spend",
    "Cumulative Forecast", "Daily Gap (vs Target Daily)", "Cumulative Gap (vs Target)",
    "Running Pace %", "Projected EoM Spend", "Recommended Daily Budget",
]

STATUS_COLORS = {
    "green": "#D5F5E3",
    "yellow": "#FDEBD0",
    "red": "#FADBD8",
}

MAX_TAB_NAME = 80


def make_account_tab_name(account_name: str, account_id: str) -> str:
    """Sheet-safe tab label: '<name> - <id>' with []:?*/\\ blanked out."""
    clean = re.sub(r"[\[\]:?*/\\]", " ", account_name or "")
    if len(clean) > MAX_TAB_NAME:
        clean = clean[:MAX_TAB_NAME].strip()
    return f"{clean} - {account_id}"


def overview_frame(summaries: Iterable[AccountPacingSummary]) -> pd.DataFrame:
    """
    One overview row per account, ordered by account name.

    Args:
        summaries: Account pacing summaries from a batch run

    Returns:
        DataFrame with OVERVIEW_COLUMNS plus a hidden "Status" column
    """
    rows = []
    for s in sorted(summaries, key=lambda s: s.account_name.lower()):
        rows.append({
            "Account Name": s.account_name,
            "Account ID": s.account_id,
            "Budget Cap": s.monthly_budget,
            "Spend to Date": s.spend_mtd,
            "Trend (vs Target)": s.trend_label,
            "Pace Delta % (vs Target)": s.pace_delta_pct,
            "Available Budget Remaining": s.available_remaining,
            "Days in Month": s.days_in_month,
            "Days Elapsed": s.days_elapsed,
            "Target Spend To Date": s.target_spend_to_date,
            "Pace vs Target": s.pace_vs_target,
            "Percentage Budget Spent": s.pct_budget_spent,
            "Projected EoM Spend": s.projected_eom_spend,
            "Recommended Daily Spend to 100%": s.recommended_daily_spend,
            "Account Currency": s.currency,
            "Status": s.status,
        })
    return pd.DataFrame(rows, columns=OVERVIEW_COLUMNS + ["Status"])


def per_day_frame(summary: AccountPacingSummary) -> pd.DataFrame:
    """Per-day table for one account, one row per calendar day."""
    rows = [
        {
            "Date": r.date,
            "Cost (Day)": r.cost,
            "Cumulative Spend": r.cum_spend,
            "Target Daily Spend": r.target_daily,
            "Cumulative Forecast": r.cum_forecast_wma,
            "Daily Gap (vs Target Daily)": r.gap,
            "Cumulative Gap (vs Target)": r.cum_gap,
            "Running Pace %": r.running_pace_pct,
            "Projected EoM Spend": r.projected_eom_wma_at_day,
            "Recommended Daily Budget": r.rec_daily,
        }
        for r in summary.per_day
    ]
    return pd.DataFrame(rows, columns=PER_DAY_COLUMNS)


def kpi_rows(
    summary: AccountPacingSummary,
    updated_at: Optional[datetime] = None
) -> List[Tuple[str, object]]:
    """
    Label/value KPI block shown above an account's chart.

    Args:
        summary: Account pacing summary
        updated_at: Time the run happened (shown as "Last Updated")
    """
    updated = updated_at.strftime("%Y-%m-%d %H:%M:%S") if updated_at else ""
    return [
        ("Last Updated", f"{updated} ({summary.timezone})".strip()),
        ("Account Name", summary.account_name),
        ("Account ID", summary.account_id),
        ("Account Currency", summary.currency),
        ("Budget Cap", summary.monthly_budget),
        ("Spend to Date", summary.spend_mtd),
        ("Available Budget Remaining", summary.available_remaining),
        ("Days in Month", summary.days_in_month),
        ("Days Elapsed", summary.days_elapsed),
        ("Target Spend To Date", summary.target_spend_to_date),
        ("Pace vs Target", summary.pace_vs_target),
        ("Percentage Budget Spent", summary.pct_budget_spent),
        ("Projected EoM Spend", summary.projected_eom_spend),
        ("Recommended Daily Spend to 100%", summary.recommended_daily_spend),
        (f"Recent Daily Avg (last {summary.wma_window_days} d)", summary.wma_daily),
    ]


def status_style(row: pd.Series) -> List[str]:
    """pandas Styler row function: background color from the Status column."""
    color = STATUS_COLORS.get(row.get("Status"), "")
    return [f"background-color: {color}" if color else ""] * len(row)
