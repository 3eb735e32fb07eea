"""
Slack notification utility.

Sends formatted pacing alerts and run summaries to Slack via webhook.
"""

from datetime import datetime, timezone
from typing import Dict, List

import requests


def _generated_at() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")


class SlackNotifier:
    """
    Send formatted Slack notifications for off-pace accounts.

    Messages use blocks with the account's budget, spend, trend, projection
    and recommended daily budget.
    """

    STATUS_EMOJI = {
        "green": "✅",
        "yellow": "⚠️",
        "red": "🚨",
    }

    def __init__(self, webhook_url: str, timeout: int = 10):
        """
        Initialize Slack notifier with webhook URL.

        Args:
            webhook_url: Slack incoming webhook URL
            timeout: Request timeout in seconds
        """
        self.webhook_url = webhook_url
        self.timeout = timeout

    def _post(self, message: Dict, what: str) -> bool:
        try:
            response = requests.post(
                self.webhook_url,
                json=message,
                timeout=self.timeout
            )
            response.raise_for_status()
            return True
        except requests.exceptions.RequestException as e:
            print(f"Failed to send Slack {what}: {e}")
            return False

    def send_pacing_alert(self, summary) -> bool:
        """
        Send a pacing alert for one account.

        Args:
            summary: AccountPacingSummary of an off-target account

        Returns:
            True if message sent successfully, False otherwise
        """
        emoji = self.STATUS_EMOJI.get(summary.status, "❓")
        message = {
            "text": f"{emoji} Budget Pacing {summary.trend_label}: {summary.account_name}",
            "blocks": self._build_alert_blocks(summary, emoji),
        }
        return self._post(message, "alert")

    def _build_alert_blocks(self, summary, emoji: str) -> List[Dict]:
        """Build Slack message blocks."""
        currency = summary.currency

        return [
            {
                "type": "header",
                "text": {
                    "type": "plain_text",
                    "text": f"{emoji} Budget Pacing {summary.trend_label}",
                    "emoji": True
                }
            },
            {"type": "divider"},
            {
                "type": "section",
                "fields": [
                    {"type": "mrkdwn", "text": f"*Account:*\n{summary.account_name}"},
                    {"type": "mrkdwn", "text": f"*Account ID:*\n`{summary.account_id}`"},
                    {
                        "type": "mrkdwn",
                        "text": f"*Spend to Date:*\n{summary.spend_mtd:,.2f} / {summary.monthly_budget:,.2f} {currency}"
                    },
                    {
                        "type": "mrkdwn",
                        "text": f"*Pace vs Target:*\n{summary.pace_vs_target:+,.2f} {currency} ({summary.pace_delta_pct:+.1%})"
                    },
                    {
                        "type": "mrkdwn",
                        "text": f"*Projected EoM:*\n{summary.projected_eom_spend:,.2f} {currency}"
                    },
                    {
                        "type": "mrkdwn",
                        "text": f"*Recommended Daily:*\n{summary.recommended_daily_spend:,.2f} {currency}"
                    },
                ]
            },
            {"type": "divider"},
            {
                "type": "context",
                "elements": [
                    {
                        "type": "mrkdwn",
                        "text": (
                            f"Day {summary.days_elapsed} of {summary.days_in_month} "
                            f"({summary.timezone}) | Generated at {_generated_at()}"
                        )
                    }
                ]
            }
        ]

    def send_summary(
        self,
        total_accounts: int,
        on_target_count: int,
        under_count: int,
        over_count: int,
        error_count: int
    ) -> bool:
        """
        Send a summary report of a pacing run.

        Args:
            total_accounts: Accounts processed
            on_target_count: Accounts within the on-target band
            under_count: Accounts under-pacing
            over_count: Accounts over-pacing
            error_count: Accounts that failed to process

        Returns:
            True if message sent successfully
        """
        message = {
            "text": "Budget Pacing Summary",
            "blocks": [
                {
                    "type": "header",
                    "text": {
                        "type": "plain_text",
                        "text": "📊 Budget Pacing Summary",
                        "emoji": True
                    }
                },
                {"type": "divider"},
                {
                    "type": "section",
                    "fields": [
                        {"type": "mrkdwn", "text": f"*Total Accounts:*\n{total_accounts}"},
                        {"type": "mrkdwn", "text": f"*On Target:*\n✅ {on_target_count}"},
                        {"type": "mrkdwn", "text": f"*Under Pace:*\n🔻 {under_count}"},
                        {"type": "mrkdwn", "text": f"*Over Pace:*\n🔺 {over_count}"},
                        {"type": "mrkdwn", "text": f"*Errors:*\n❌ {error_count}"},
                    ]
                },
                {"type": "divider"},
                {
                    "type": "context",
                    "elements": [
                        {"type": "mrkdwn", "text": f"Generated at {_generated_at()}"}
                    ]
                }
            ]
        }
        return self._post(message, "summary")

    def test_connection(self) -> bool:
        """
        Test Slack webhook connection.

        Returns:
            True if connection successful
        """
        message = {
            "text": "Budget Pacer - Test Message",
            "blocks": [
                {
                    "type": "section",
                    "text": {
                        "type": "mrkdwn",
                        "text": "Budget Pacer webhook test successful! :white_check_mark:"
                    }
                }
            ]
        }
        ok = self._post(message, "test message")
        print("✅ Slack webhook connection successful" if ok else "❌ Slack webhook connection failed")
        return ok
