"""
Dashboard charts built with plotly.
"""

from datetime import date
from typing import Iterable, List

import plotly.graph_objects as go

from budget_pacer.analyzers.pacing_aggregator import PacingAggregator
from budget_pacer.models.pacing import AccountPacingSummary

STATUS_LINE_COLORS = {
    "green": "#2ecc71",
    "yellow": "#f39c12",
    "red": "#e74c3c",
}


def weekly_ticks(days: List[date]) -> List[date]:
    """Every seventh day from the 1st, plus the last day of the series."""
    if not days:
        return []
    ticks = days[::7]
    if ticks[-1] != days[-1]:
        ticks.append(days[-1])
    return ticks


def create_pacing_chart(summary: AccountPacingSummary) -> go.Figure:
    """
    Cumulative spend vs cumulative forecast for one account's month.

    Actual spend stops at the last elapsed day; the forecast and the
    straight-line target run to month end.
    """
    dates = [r.date for r in summary.per_day]
    elapsed = [r for r in summary.per_day if r.day <= summary.days_elapsed]

    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=[r.date for r in elapsed],
        y=[r.cum_spend for r in elapsed],
        mode="lines+markers",
        name="Cumulative Spend",
        line=dict(color="#1f77b4", width=3)
    ))
    fig.add_trace(go.Scatter(
        x=dates,
        y=[r.cum_forecast_wma for r in summary.per_day],
        mode="lines",
        name="Cumulative Forecast",
        line=dict(color=STATUS_LINE_COLORS.get(summary.status, "#7f7f7f"), dash="dot")
    ))
    fig.add_trace(go.Scatter(
        x=dates,
        y=[r.cum_target for r in summary.per_day],
        mode="lines",
        name="Target",
        line=dict(color="#95a5a6", dash="dash")
    ))

    fig.add_hline(
        y=summary.monthly_budget,
        line_dash="dash",
        line_color="#34495e",
        annotation_text="Budget Cap"
    )
    fig.update_layout(
        title=f"Pacing: Spend vs Forecast ({summary.account_name})",
        xaxis=dict(tickformat="%b %d", tickvals=weekly_ticks(dates)),
        yaxis_title=summary.currency,
        legend=dict(orientation="v", x=1.02, y=1),
        height=360
    )
    return fig


def create_progress_chart(summaries: Iterable[AccountPacingSummary]) -> go.Figure:
    """Horizontal bars of spend to date against each account's budget cap."""
    summaries = sorted(summaries, key=lambda s: s.account_name.lower())
    names = [s.account_name for s in summaries]

    fig = go.Figure()
    fig.add_trace(go.Bar(
        y=names,
        x=[s.monthly_budget for s in summaries],
        orientation="h",
        name="Budget Cap",
        marker_color="#eaf3ec"
    ))
    fig.add_trace(go.Bar(
        y=names,
        x=[s.spend_mtd for s in summaries],
        orientation="h",
        name="Spend to Date",
        marker_color=[STATUS_LINE_COLORS.get(s.status, "#7f7f7f") for s in summaries]
    ))
    fig.update_layout(
        title="Budget Progress",
        barmode="overlay",
        height=max(300, 40 * len(names))
    )
    return fig


def create_pace_delta_chart(
    summaries: Iterable[AccountPacingSummary],
    on_target_band: float = PacingAggregator.ON_TARGET_BAND
) -> go.Figure:
    """Pace delta % per account with the on-target band (a fraction) shaded."""
    summaries = sorted(summaries, key=lambda s: s.pace_delta_pct)

    fig = go.Figure(data=[go.Bar(
        x=[s.account_name for s in summaries],
        y=[s.pace_delta_pct * 100 for s in summaries],
        marker_color=[STATUS_LINE_COLORS.get(s.status, "#7f7f7f") for s in summaries],
        text=[s.trend_label for s in summaries],
        textposition="outside"
    )])
    band_pct = on_target_band * 100
    fig.add_hrect(y0=-band_pct, y1=band_pct, fillcolor="#2ecc71", opacity=0.12, line_width=0)
    fig.update_layout(
        title="Pace Delta vs Target (%)",
        yaxis_title="%",
        height=400
    )
    return fig
