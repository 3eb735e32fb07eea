"""
Streamlit dashboard for the Budget Pacer.

Runs the pacer against mock accounts and shows the overview table, the
per-account KPI block, the spend vs forecast chart and the per-day table.
"""

import streamlit as st
import pandas as pd
from datetime import datetime, date, timezone

from budget_pacer.analyzers.pacing_aggregator import PacingAggregator
from budget_pacer.api.budget_config import BudgetConfig
from budget_pacer.api.mock_ads_api import MockAdsAPI
from budget_pacer.config import PacingSettings
from budget_pacer.dashboard.charts import (
    create_pacing_chart,
    create_progress_chart,
    create_pace_delta_chart,
)
from budget_pacer.dashboard.tables import (
    kpi_rows,
    make_account_tab_name,
    overview_frame,
    per_day_frame,
    status_style,
)
from budget_pacer.models.pacing import TimezoneMode
from budget_pacer.orchestrator import PacingOrchestrator
from budget_pacer.utils.audit_logger import AuditLogger
from budget_pacer.utils.results_tracker import ResultsTracker


# Page configuration
st.set_page_config(
    page_title="Budget Pacer",
    page_icon="📈",
    layout="wide",
    initial_sidebar_state="expanded"
)

TIMEZONE_CHOICES = ["Account zone", "UTC", "America/New_York", "Europe/London", "Europe/Berlin", "Asia/Tokyo"]
AUDIT_LOG_FILE = "streamlit_audit.jsonl"


def initialize_session_state():
    """Initialize Streamlit session state."""
    if 'report' not in st.session_state:
        st.session_state.report = None
    if 'run_config' not in st.session_state:
        st.session_state.run_config = {}
    if 'updated_at' not in st.session_state:
        st.session_state.updated_at = None
    if 'results_saved' not in st.session_state:
        st.session_state.results_saved = False


def run_pacer(num_accounts, seed, wma_window_days, on_target_band, timezone_choice, reference):
    """Run the pacer over a fresh set of mock accounts."""
    if timezone_choice == "Account zone":
        settings = PacingSettings(
            timezone_mode=TimezoneMode.USE_ACCOUNT_ZONE,
            wma_window_days=wma_window_days,
            on_target_band=on_target_band,
            warning_band=max(on_target_band, PacingAggregator.WARNING_BAND),
            audit_log_file=AUDIT_LOG_FILE
        )
    else:
        settings = PacingSettings(
            timezone_mode=TimezoneMode.FIXED_ZONE,
            fixed_timezone=timezone_choice,
            wma_window_days=wma_window_days,
            on_target_band=on_target_band,
            warning_band=max(on_target_band, PacingAggregator.WARNING_BAND),
            audit_log_file=AUDIT_LOG_FILE
        )

    with st.spinner("Pacing accounts..."):
        provider = MockAdsAPI(num_accounts=num_accounts, seed=seed)
        budget_config = BudgetConfig()
        budget_config.bulk_set_budgets(provider.suggested_budgets())

        orchestrator = PacingOrchestrator(
            provider=provider,
            budget_config=budget_config,
            settings=settings,
            audit_logger=AuditLogger(log_file=settings.audit_log_file)
        )
        report = orchestrator.run(reference=reference)

    return report, settings.to_dict()


def show_account(summary, updated_at):
    """KPI block, chart and per-day table for one account."""
    st.markdown(f"#### {make_account_tab_name(summary.account_name, summary.account_id)}")

    col1, col2 = st.columns([1, 2])

    with col1:
        kpis = pd.DataFrame(kpi_rows(summary, updated_at), columns=["KPI", "Value"])
        kpis["Value"] = kpis["Value"].astype(str)
        st.dataframe(kpis, use_container_width=True, hide_index=True, height=560)

    with col2:
        st.plotly_chart(create_pacing_chart(summary), use_container_width=True)

    st.markdown("**Per-Day Detail**")
    st.dataframe(
        per_day_frame(summary).style.format({
            "Running Pace %": "{:.1%}",
            "Cost (Day)": "{:,.2f}",
            "Cumulative Spend": "{:,.2f}",
            "Target Daily Spend": "{:,.2f}",
            "Cumulative Forecast": "{:,.2f}",
            "Daily Gap (vs Target Daily)": "{:,.2f}",
            "Cumulative Gap (vs Target)": "{:,.2f}",
            "Projected EoM Spend": "{:,.2f}",
            "Recommended Daily Budget": "{:,.2f}",
        }),
        use_container_width=True,
        hide_index=True
    )


def show_audit_sidebar():
    """Audit trail stats with export and clear actions."""
    audit_logger = AuditLogger(log_file=AUDIT_LOG_FILE)
    stats = audit_logger.get_summary_stats()

    st.sidebar.markdown("---")
    st.sidebar.subheader("🧾 Audit Trail")
    st.sidebar.caption(f"{stats['total_events']} events in {AUDIT_LOG_FILE}")

    col1, col2 = st.sidebar.columns(2)
    with col1:
        if st.button("📤 Export", disabled=stats["total_events"] == 0):
            output_file = f"audit_export_{datetime.now().strftime('%Y%m%d_%H%M%S')}.json"
            count = audit_logger.export_to_json(output_file)
            st.sidebar.success(f"Exported {count} events to {output_file}")
    with col2:
        if st.button("🗑️ Clear", disabled=stats["total_events"] == 0):
            audit_logger.clear_log()
            st.sidebar.success("Audit log cleared")


def main():
    """Main Streamlit app."""
    initialize_session_state()

    # Header
    st.title("📈 Budget Pacer")
    st.markdown("**Monthly budget pacing and end-of-month forecasting**")

    # Sidebar - Configuration
    st.sidebar.header("⚙️ Configuration")

    num_accounts = st.sidebar.slider(
        "Number of Accounts",
        min_value=3,
        max_value=50,
        value=10,
        step=1
    )

    seed = st.sidebar.number_input(
        "Random Seed (for reproducibility)",
        min_value=1,
        max_value=1000,
        value=42
    )

    st.sidebar.markdown("---")
    st.sidebar.subheader("🎚️ Pacing Settings")

    wma_window_days = st.sidebar.slider(
        "WMA Window (days)",
        min_value=1,
        max_value=14,
        value=7,
        help="Recent days averaged, newest weighted highest"
    )

    on_target_band = st.sidebar.slider(
        "On-Target Band (%)",
        min_value=1,
        max_value=20,
        value=5,
        step=1,
        help="Max |pace delta| still counted as On Target"
    ) / 100

    timezone_choice = st.sidebar.selectbox(
        "Timezone",
        TIMEZONE_CHOICES,
        help="Account zone resolves each account's own timezone"
    )

    reference_day = st.sidebar.date_input(
        "Reference Date",
        value=date.today(),
        help="Day to pace against; the month is taken from this date"
    )

    if st.sidebar.button("🚀 Run Pacer", type="primary"):
        report, run_config = run_pacer(
            num_accounts,
            int(seed),
            wma_window_days,
            on_target_band,
            timezone_choice,
            reference_day
        )
        run_config.update({"num_accounts": num_accounts, "seed": int(seed)})
        st.session_state.report = report
        st.session_state.run_config = run_config
        st.session_state.updated_at = datetime.now(timezone.utc)
        st.session_state.results_saved = False

    # Save results button
    if st.session_state.report and not st.session_state.results_saved:
        st.sidebar.markdown("---")
        run_name = st.sidebar.text_input("Run Name", value=f"Run_{datetime.now().strftime('%Y%m%d_%H%M')}")
        notes = st.sidebar.text_area("Notes", placeholder="Optional notes about this run...")

        if st.sidebar.button("💾 Save Results"):
            tracker = ResultsTracker()
            filepath = tracker.save_run(
                st.session_state.report, st.session_state.run_config, run_name, notes
            )
            st.sidebar.success(f"Saved to {filepath}")
            st.session_state.results_saved = True

    show_audit_sidebar()

    report = st.session_state.report

    if report is None:
        # Welcome screen
        st.info("👈 Configure settings in the sidebar and click 'Run Pacer' to start")

        st.markdown("### 📊 Previous Runs")
        runs = ResultsTracker().list_runs()
        if runs:
            st.dataframe(pd.DataFrame(runs), use_container_width=True)
        else:
            st.info("No previous runs found. Run the pacer to create your first results!")
        return

    summaries = report.summaries
    totals = report.totals()

    # Summary metrics
    st.markdown("### 📊 Summary Metrics")
    col1, col2, col3, col4, col5 = st.columns(5)

    with col1:
        st.metric("Processed", totals["processed"], help="Accounts paced successfully")
    with col2:
        st.metric("On Target", sum(1 for s in summaries if s.is_on_target))
    with col3:
        st.metric("Under Pace", sum(1 for s in summaries if s.is_under_pace))
    with col4:
        st.metric("Over Pace", sum(1 for s in summaries if s.is_over_pace))
    with col5:
        st.metric("Errors / Skipped", f"{totals['errors']} / {totals['skipped']}")

    for failure in report.failures:
        st.error(f"{failure.account_id}: {failure.error_type}: {failure.error_message}")

    if not summaries:
        st.warning("No accounts were paced.")
        return

    # Overview table
    st.markdown("---")
    st.markdown("### 📋 Overview")
    overview = overview_frame(summaries)
    st.dataframe(
        overview.style.apply(status_style, axis=1).format({
            "Pace Delta % (vs Target)": "{:.1%}",
            "Pace vs Target": "{:.1%}",
            "Percentage Budget Spent": "{:.1%}",
        }),
        use_container_width=True,
        hide_index=True
    )

    # Charts
    st.markdown("---")
    col1, col2 = st.columns(2)
    with col1:
        st.plotly_chart(create_progress_chart(summaries), use_container_width=True)
    with col2:
        st.plotly_chart(create_pace_delta_chart(
            summaries, st.session_state.run_config.get("on_target_band", PacingAggregator.ON_TARGET_BAND)
        ), use_container_width=True)

    # Detailed view
    st.markdown("---")
    st.markdown("### 🔍 Account Detail")

    by_label = {
        make_account_tab_name(s.account_name, s.account_id): s
        for s in sorted(summaries, key=lambda s: s.account_name.lower())
    }
    selected = st.selectbox("Select Account", list(by_label.keys()))
    show_account(by_label[selected], st.session_state.updated_at)


if __name__ == "__main__":
    main()
