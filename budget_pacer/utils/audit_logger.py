"""
Audit logging utility.

Logs every pacing run, config merge, account summary, action and error as
JSON lines for later review.
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional


def _utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class AuditLogger:
    """
    Log pacing runs and their outcomes for an audit trail.

    Maintains a record of:
    - Run start/end with totals
    - Budget config seeding (accounts added, names refreshed)
    - Per-account pacing summaries
    - Actions taken (alerts sent, off-pace flags)
    - Per-account errors
    """

    def __init__(
        self,
        log_file: str = "audit_log.jsonl",
        log_dir: Optional[str] = None
    ):
        """
        Initialize audit logger.

        Args:
            log_file: Name of log file (JSONL format)
            log_dir: Directory for log files (default: current directory)
        """
        if log_dir:
            self.log_dir = Path(log_dir)
            self.log_dir.mkdir(parents=True, exist_ok=True)
            self.log_path = self.log_dir / log_file
        else:
            self.log_path = Path(log_file)

    def log_event(self, event: Dict[str, Any]):
        """
        Log a generic event.

        Args:
            event: Event dictionary with arbitrary fields
        """
        if "timestamp" not in event:
            event["timestamp"] = _utcnow_iso()

        with open(self.log_path, "a") as f:
            f.write(json.dumps(event, default=str) + "\n")

    def log_run(self, phase: str, details: Optional[Dict[str, Any]] = None):
        """
        Log a run boundary.

        Args:
            phase: "start" or "end"
            details: Timezone, reference date, totals, ...
        """
        self.log_event({
            "event_type": "run",
            "phase": phase,
            "details": details or {},
        })

    def log_config_seed(self, added: int, names_updated: int, total_rows: int):
        """Log the result of merging the account list into the budget config."""
        self.log_event({
            "event_type": "config_seed",
            "added": added,
            "names_updated": names_updated,
            "total_rows": total_rows,
        })

    def log_account_summary(self, summary):
        """
        Log an account pacing summary.

        Args:
            summary: AccountPacingSummary object
        """
        event = {"event_type": "account_summary"}
        event.update(summary.to_overview_row())
        self.log_event(event)

    def log_action(
        self,
        account_id: str,
        action_type: str,
        success: bool,
        details: Optional[Dict] = None
    ):
        """
        Log an action taken for an account.

        Args:
            account_id: Account identifier
            action_type: Type of action (flag_off_pace, slack_alert, ...)
            success: Whether action succeeded
            details: Optional additional details
        """
        self.log_event({
            "event_type": "action",
            "account_id": account_id,
            "action_type": action_type,
            "success": success,
            "details": details or {},
        })

    def log_error(
        self,
        error_type: str,
        error_message: str,
        account_id: Optional[str] = None,
        context: Optional[Dict] = None
    ):
        """
        Log an error.

        Args:
            error_type: Type/category of error
            error_message: Error description
            account_id: Optional account identifier
            context: Optional context information
        """
        self.log_event({
            "event_type": "error",
            "error_type": error_type,
            "error_message": error_message,
            "account_id": account_id,
            "context": context or {},
        })

    def get_events(
        self,
        event_type: Optional[str] = None,
        account_id: Optional[str] = None,
        limit: Optional[int] = None
    ) -> List[Dict]:
        """
        Retrieve events from log file.

        Args:
            event_type: Filter by event type
            account_id: Filter by account ID
            limit: Maximum number of events to return

        Returns:
            List of event dictionaries
        """
        if not self.log_path.exists():
            return []

        events = []
        with open(self.log_path, "r") as f:
            for line in f:
                try:
                    event = json.loads(line.strip())
                except json.JSONDecodeError:
                    continue

                if event_type and event.get("event_type") != event_type:
                    continue
                if account_id and event.get("account_id") != account_id:
                    continue

                events.append(event)
                if limit and len(events) >= limit:
                    break

        return events

    def get_summary_stats(self) -> Dict[str, Any]:
        """
        Get summary statistics from audit log.

        Returns:
            Dictionary with aggregated statistics
        """
        if not self.log_path.exists():
            return {
                "total_events": 0,
                "event_types": {},
                "summaries_by_trend": {},
                "actions_by_type": {},
            }

        events = self.get_events()
        event_types = {}
        summaries_by_trend = {}
        actions_by_type = {}

        for event in events:
            event_type = event.get("event_type", "unknown")
            event_types[event_type] = event_types.get(event_type, 0) + 1

            if event_type == "account_summary":
                trend = event.get("trend_label", "unknown")
                summaries_by_trend[trend] = summaries_by_trend.get(trend, 0) + 1

            if event_type == "action":
                action = event.get("action_type", "unknown")
                actions_by_type[action] = actions_by_type.get(action, 0) + 1

        return {
            "total_events": len(events),
            "event_types": event_types,
            "summaries_by_trend": summaries_by_trend,
            "actions_by_type": actions_by_type,
            "log_file": str(self.log_path),
            "log_size_bytes": self.log_path.stat().st_size,
        }

    def clear_log(self):
        """
        Clear the audit log file.

        WARNING: This will delete all audit records.
        """
        if self.log_path.exists():
            self.log_path.unlink()
        print(f"✅ Cleared audit log: {self.log_path}")

    def export_to_json(self, output_file: str, event_type: Optional[str] = None) -> int:
        """
        Export audit events to a formatted JSON file.

        Args:
            output_file: Output JSON file path
            event_type: Only export events of this type

        Returns:
            Number of events written
        """
        events = self.get_events(event_type=event_type)
        with open(output_file, "w") as f:
            json.dump(events, f, indent=2)
        print(f"✅ Exported {len(events)} events to {output_file}")
        return len(events)
