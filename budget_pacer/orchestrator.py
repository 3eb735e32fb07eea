"""
Main orchestrator for running the Budget Pacer.

This module provides the entry point for pacing every configured account
under a manager account and collecting the results into a batch report.
"""

import os
from datetime import date, datetime, timezone
from typing import Dict, Optional, Union

from budget_pacer.agents.pacing_workflow import PacingWorkflow
from budget_pacer.api.budget_config import BudgetConfig
from budget_pacer.api.mock_ads_api import MockAdsAPI
from budget_pacer.config import PacingSettings
from budget_pacer.models.pacing import AccountResult, BatchReport, TimezoneMode
from budget_pacer.utils.audit_logger import AuditLogger
from budget_pacer.utils.slack_notifier import SlackNotifier

BANNER_WIDTH = 69


def banner_log(title: str, data: Optional[Dict] = None):
    """Print a run-boundary banner with one line per key."""
    border = "=" * BANNER_WIDTH
    print(border)
    print(f"[{title}]")
    for key, value in (data or {}).items():
        print(f" - {key}: {value}")
    print(border)


class PacingOrchestrator:
    """
    Orchestrates budget pacing across all configured accounts.

    Responsibilities:
    - Merge the provider's account list into the budget config
    - Read valid, included budget rows
    - Run the PacingWorkflow per account, in chunks
    - Keep one account's failure from stopping the others
    - Report totals and optionally post a Slack summary
    """

    def __init__(
        self,
        provider,
        budget_config: Optional[BudgetConfig] = None,
        settings: Optional[PacingSettings] = None,
        audit_logger: Optional[AuditLogger] = None
    ):
        """
        Initialize orchestrator.

        Args:
            provider: Spend data provider (MockAdsAPI or real client)
            budget_config: Budget config store (default: empty, seeded on run)
            settings: Run settings (default: PacingSettings())
            audit_logger: Optional AuditLogger instance
        """
        self.provider = provider
        self.settings = settings or PacingSettings()
        self.budget_config = budget_config if budget_config is not None else BudgetConfig()
        self.audit_logger = audit_logger or AuditLogger(log_file=self.settings.audit_log_file)

        self.slack_notifier = (
            SlackNotifier(self.settings.slack_webhook) if self.settings.slack_webhook else None
        )

        self.workflow = PacingWorkflow(
            provider=self.provider,
            audit_logger=self.audit_logger,
            slack_notifier=self.slack_notifier,
            wma_window_days=self.settings.wma_window_days,
            on_target_band=self.settings.on_target_band,
            warning_band=self.settings.warning_band
        )

    def run(self, reference: Union[date, datetime, None] = None) -> BatchReport:
        """
        Pace every configured account.

        Args:
            reference: Instant to pace against (default: now)

        Returns:
            BatchReport with one AccountResult per processed account
        """
        if reference is None:
            reference = datetime.now(timezone.utc)

        run_info = {
            "timezone_mode": self.settings.timezone_mode.value,
            "timezone": self._timezone_label(),
            "reference": reference.isoformat(),
            "wma_window_days": self.settings.wma_window_days,
        }
        banner_log("START RUN", run_info)
        self.audit_logger.log_run("start", run_info)

        seed = self.budget_config.seed_from_accounts(self.provider)
        print(
            f"🌱 Config seeded/merged: added: {seed['added']}, "
            f"names updated: {seed['names_updated']}, total rows: {seed['total_rows']}"
        )
        self.audit_logger.log_config_seed(**seed)

        configs = self.budget_config.read_config()
        print(f"⚙️  Config rows (valid & included): {len(configs)}")

        report = BatchReport(reference_date=reference.date() if isinstance(reference, datetime) else reference)
        if not configs:
            print("ℹ️  Fill in monthly budgets in the config and re-run.")
            self.audit_logger.log_run("end", report.totals())
            return report

        known_ids = set(self.provider.list_account_ids())
        chunk_size = self.settings.chunk_size
        print(f"🔀 Processing {len(configs)} account(s) in chunks of {chunk_size}…")

        for start in range(0, len(configs), chunk_size):
            for config in configs[start:start + chunk_size]:
                if config.account_id not in known_ids:
                    report.skipped.append(config.account_id)
                    continue

                result = self.run_account(config, reference)
                report.add(result)
                self._print_result(result)

        banner_log("END RUN", report.totals())
        self.audit_logger.log_run("end", report.totals())

        if self.slack_notifier:
            self._send_summary(report)

        return report

    def run_account(self, config, reference: Union[date, datetime, None] = None) -> AccountResult:
        """
        Pace a single account.

        Timezone lookup failures count as that account's failure.
        """
        try:
            tz = self.settings.timezone_for(self.provider, config.account_id)
        except Exception as e:
            self.audit_logger.log_error(
                error_type=type(e).__name__,
                error_message=str(e),
                account_id=config.account_id,
                context={"stage": "timezone_lookup"}
            )
            return AccountResult.failure(config.account_id, e, account_name=config.account_name)

        return self.workflow.run(config, reference=reference, timezone=tz)

    def _timezone_label(self) -> str:
        if self.settings.timezone_mode == TimezoneMode.USE_ACCOUNT_ZONE:
            return "account zone"
        return self.settings.fixed_timezone

    def _print_result(self, result: AccountResult):
        if result.ok:
            summary = result.summary
            emoji = {"green": "✅", "yellow": "⚠️", "red": "🚨"}.get(summary.status, "❓")
            print(
                f"   {emoji} {summary.account_name} ({summary.account_id}): "
                f"{summary.trend_label}, {summary.spend_mtd:,.2f}/{summary.monthly_budget:,.2f} "
                f"{summary.currency}"
            )
        else:
            print(f"   ❌ Error processing {result.account_id}: {result.error_message}")

    def _send_summary(self, report: BatchReport):
        summaries = report.summaries
        self.slack_notifier.send_summary(
            total_accounts=len(summaries),
            on_target_count=sum(1 for s in summaries if s.is_on_target),
            under_count=sum(1 for s in summaries if s.is_under_pace),
            over_count=sum(1 for s in summaries if s.is_over_pace),
            error_count=report.errors
        )


def main():
    """
    Main entry point for running the Budget Pacer against mock accounts.

    Usage:
        python -m budget_pacer.orchestrator
    """
    settings = PacingSettings.from_env()
    provider = MockAdsAPI(num_accounts=10, seed=42)

    if settings.budget_config_file and os.path.exists(settings.budget_config_file):
        budget_config = BudgetConfig.from_csv(settings.budget_config_file)
    elif settings.budget_config_file:
        # First run: write a seeded config with blank budgets to fill in
        budget_config = BudgetConfig()
    else:
        budget_config = BudgetConfig()
        budget_config.bulk_set_budgets(provider.suggested_budgets())

    orchestrator = PacingOrchestrator(
        provider=provider,
        budget_config=budget_config,
        settings=settings
    )
    orchestrator.run()

    if settings.budget_config_file:
        budget_config.to_csv(settings.budget_config_file)


if __name__ == "__main__":
    main()
