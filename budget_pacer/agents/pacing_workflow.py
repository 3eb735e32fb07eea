"""
PacingWorkflow: LangGraph-based per-account pacing pipeline.

Each account runs through a small state machine: fetch spend, build the
daily series, estimate the weighted recent rate, project the month end,
summarize, then route on-target and off-target accounts to different
follow-up actions.
"""

from datetime import date, datetime
from typing import Any, List, Literal, Optional, TypedDict, Union

from langgraph.graph import END, StateGraph

from budget_pacer.analyzers.daily_series import DailySeriesBuilder
from budget_pacer.analyzers.forecast_projector import ForecastProjector, ForecastResult
from budget_pacer.analyzers.month_context import resolve_month_context
from budget_pacer.analyzers.pacing_aggregator import PacingAggregator
from budget_pacer.analyzers.wma_estimator import WmaEstimator
from budget_pacer.models.pacing import (
    AccountConfig,
    AccountPacingSummary,
    AccountResult,
    DailyObservation,
    DayRow,
    MonthContext,
)
from budget_pacer.utils.audit_logger import AuditLogger
from budget_pacer.utils.slack_notifier import SlackNotifier


class PacingState(TypedDict):
    """
    State passed between nodes in the LangGraph workflow.

    Each node fills in the fields its successors need.
    """
    account_id: str
    account_name: str
    monthly_budget: float
    timezone: str
    reference: Any
    month_context: Optional[MonthContext]
    currency: str
    observations: List[DailyObservation]
    spend_mtd: float
    base_rows: List[DayRow]
    wma_daily: float
    forecast: Optional[ForecastResult]
    summary: Optional[AccountPacingSummary]
    action_taken: str


class PacingWorkflow:
    """
    Per-account pacing pipeline as a LangGraph state graph.

    Workflow:
    1. Fetch month context, currency, daily spend and month-to-date spend
    2. Build the zero-filled daily series
    3. Estimate the weighted recent daily spend
    4. Project the cumulative forecast and month-end figures
    5. Summarize into an AccountPacingSummary
    6. Route: on-target accounts are logged, off-target accounts are flagged
       (and alerted on Slack when a notifier is configured)
    """

    def __init__(
        self,
        provider,
        audit_logger: Optional[AuditLogger] = None,
        slack_notifier: Optional[SlackNotifier] = None,
        wma_window_days: int = WmaEstimator.DEFAULT_WINDOW_DAYS,
        on_target_band: float = PacingAggregator.ON_TARGET_BAND,
        warning_band: float = PacingAggregator.WARNING_BAND
    ):
        """
        Initialize workflow.

        Args:
            provider: Spend data provider (MockAdsAPI or real client)
            audit_logger: Optional AuditLogger instance
            slack_notifier: Optional SlackNotifier for off-pace alerts
            wma_window_days: Lookback window for the weighted average
            on_target_band: Max |pace delta| counted as on target
            warning_band: |pace delta| at or above which status is red
        """
        self.provider = provider
        self.audit_logger = audit_logger or AuditLogger()
        self.slack_notifier = slack_notifier

        self.series_builder = DailySeriesBuilder()
        self.wma_estimator = WmaEstimator(window_days=wma_window_days)
        self.projector = ForecastProjector()
        self.aggregator = PacingAggregator(on_target_band=on_target_band, warning_band=warning_band)

        self.graph = self._build_graph()

    def _build_graph(self):
        """
        Construct the LangGraph state machine.

        Returns:
            Compiled graph ready for execution
        """
        workflow = StateGraph(PacingState)

        workflow.add_node("fetch_spend", self.fetch_spend)
        workflow.add_node("build_series", self.build_series)
        workflow.add_node("estimate_wma", self.estimate_wma)
        workflow.add_node("project_forecast", self.project_forecast)
        workflow.add_node("summarize", self.summarize)
        workflow.add_node("log_on_target", self.log_on_target)
        workflow.add_node("flag_off_pace", self.flag_off_pace)

        workflow.set_entry_point("fetch_spend")

        workflow.add_edge("fetch_spend", "build_series")
        workflow.add_edge("build_series", "estimate_wma")
        workflow.add_edge("estimate_wma", "project_forecast")
        workflow.add_edge("project_forecast", "summarize")

        workflow.add_conditional_edges(
            "summarize",
            self.route_by_pace,
            {
                "on_target": "log_on_target",
                "off_target": "flag_off_pace"
            }
        )

        workflow.add_edge("log_on_target", END)
        workflow.add_edge("flag_off_pace", END)

        return workflow.compile()

    # ===================
    # Node Implementations
    # ===================

    def fetch_spend(self, state: PacingState) -> PacingState:
        """Resolve the month and pull currency, daily spend and MTD spend."""
        account_id = state["account_id"]
        context = resolve_month_context(state["reference"], state["timezone"])

        state["month_context"] = context
        state["account_name"] = self.provider.get_account_name(account_id) or state["account_name"]
        state["currency"] = self.provider.get_currency_code(account_id)
        state["observations"] = list(self.provider.get_daily_spend(account_id, context))
        state["spend_mtd"] = float(self.provider.get_month_to_date_spend(account_id, context=context))
        return state

    def build_series(self, state: PacingState) -> PacingState:
        state["base_rows"] = self.series_builder.build(
            state["monthly_budget"],
            state["month_context"],
            state["observations"]
        )
        return state

    def estimate_wma(self, state: PacingState) -> PacingState:
        state["wma_daily"] = self.wma_estimator.estimate(
            state["base_rows"],
            state["month_context"].days_elapsed
        )
        return state

    def project_forecast(self, state: PacingState) -> PacingState:
        state["forecast"] = self.projector.project(
            state["base_rows"],
            state["month_context"],
            state["monthly_budget"],
            state["spend_mtd"],
            state["wma_daily"]
        )
        return state

    def summarize(self, state: PacingState) -> PacingState:
        summary = self.aggregator.summarize(
            account_id=state["account_id"],
            account_name=state["account_name"],
            currency=state["currency"],
            monthly_budget=state["monthly_budget"],
            spend_mtd=state["spend_mtd"],
            context=state["month_context"],
            forecast=state["forecast"],
            wma_window_days=self.wma_estimator.window_days
        )
        state["summary"] = summary
        self.audit_logger.log_account_summary(summary)
        return state

    # ================
    # Routing Functions
    # ================

    def route_by_pace(self, state: PacingState) -> Literal["on_target", "off_target"]:
        if state["summary"].is_on_target:
            return "on_target"
        return "off_target"

    # =============
    # Action Nodes
    # =============

    def log_on_target(self, state: PacingState) -> PacingState:
        state["action_taken"] = "logged_on_target"
        return state

    def flag_off_pace(self, state: PacingState) -> PacingState:
        """Off target: record the flag and alert Slack if configured."""
        summary = state["summary"]
        details = {
            "trend_label": summary.trend_label,
            "pace_delta_pct": summary.pace_delta_pct,
            "recommended_daily_spend": summary.recommended_daily_spend,
        }
        self.audit_logger.log_action(summary.account_id, "flag_off_pace", True, details)
        state["action_taken"] = "flagged_off_pace"

        if self.slack_notifier:
            sent = self.slack_notifier.send_pacing_alert(summary)
            self.audit_logger.log_action(summary.account_id, "slack_alert", sent)
            if sent:
                state["action_taken"] = "alert_sent"

        return state

    # ===========
    # Entry Point
    # ===========

    def initial_state(
        self,
        config: AccountConfig,
        reference: Union[date, datetime, None],
        timezone: str
    ) -> PacingState:
        return {
            "account_id": config.account_id,
            "account_name": config.account_name,
            "monthly_budget": config.monthly_budget,
            "timezone": timezone,
            "reference": reference,
            "month_context": None,
            "currency": "",
            "observations": [],
            "spend_mtd": 0.0,
            "base_rows": [],
            "wma_daily": 0.0,
            "forecast": None,
            "summary": None,
            "action_taken": "none",
        }

    def run(
        self,
        config: AccountConfig,
        reference: Union[date, datetime, None] = None,
        timezone: str = "UTC"
    ) -> AccountResult:
        """
        Run the pacing workflow for one account.

        Any exception (provider outage, malformed data) is caught here and
        returned as a failed AccountResult, so one account never stops a batch.

        Args:
            config: Validated budget config row
            reference: Instant to pace against (default: now)
            timezone: IANA zone the month is read in

        Returns:
            AccountResult with the summary, or the failure reason
        """
        try:
            final_state = self.graph.invoke(self.initial_state(config, reference, timezone))
        except Exception as e:
            self.audit_logger.log_error(
                error_type=type(e).__name__,
                error_message=str(e),
                account_id=config.account_id,
                context={"timezone": timezone}
            )
            return AccountResult.failure(config.account_id, e, account_name=config.account_name)

        return AccountResult.success(final_state["summary"])
