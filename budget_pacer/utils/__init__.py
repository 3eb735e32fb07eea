"""Utility modules for notifications, logging and saved runs."""

from budget_pacer.utils.slack_notifier import SlackNotifier
from budget_pacer.utils.audit_logger import AuditLogger
from budget_pacer.utils.results_tracker import ResultsTracker

__all__ = [
    "SlackNotifier",
    "AuditLogger",
    "ResultsTracker",
]
