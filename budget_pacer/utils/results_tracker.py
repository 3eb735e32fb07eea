"""
Results tracker for saving pacing run snapshots.

This module allows you to:
- Save a batch run's overview and per-day series with a timestamp
- List and reload saved runs for the dashboard's history view
- Export a run's overview table to CSV
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd


class ResultsTracker:
    """
    Save pacing runs as JSON snapshots.

    Each file holds:
    - Run metadata (timestamp, name, notes, reference date)
    - Configuration used (timezone mode, WMA window, bands)
    - Summary statistics (on target / under / over / errors)
    - Per-account results including the per-day series

    Snapshots are write-once records for review; pacing never reads them back.
    """

    def __init__(self, results_dir: str = "results"):
        """
        Initialize results tracker.

        Args:
            results_dir: Directory to store results files
        """
        self.results_dir = Path(results_dir)
        self.results_dir.mkdir(parents=True, exist_ok=True)

    def save_run(
        self,
        report,
        config: Dict[str, Any],
        run_name: Optional[str] = None,
        notes: Optional[str] = None
    ) -> str:
        """
        Save a complete pacing run.

        Args:
            report: BatchReport from the orchestrator
            config: Configuration used for the run
            run_name: Optional name for this run
            notes: Optional notes about this run

        Returns:
            Path to saved results file
        """
        timestamp = datetime.now(timezone.utc)
        run_id = timestamp.strftime("%Y%m%d_%H%M%S_%f")

        summaries = report.summaries
        total = len(summaries)
        on_target = sum(1 for s in summaries if s.is_on_target)
        under = sum(1 for s in summaries if s.is_under_pace)
        over = sum(1 for s in summaries if s.is_over_pace)
        total_budget = sum(s.monthly_budget for s in summaries)
        total_spend = sum(s.spend_mtd for s in summaries)

        results = {
            "run_metadata": {
                "run_id": run_id,
                "run_name": run_name or f"Run_{run_id}",
                "timestamp": timestamp.isoformat(),
                "notes": notes,
                "reference_date": report.reference_date.isoformat() if report.reference_date else None,
                "total_accounts": total,
            },
            "configuration": config,
            "summary_statistics": {
                "total_accounts": total,
                "on_target": on_target,
                "under_pace": under,
                "over_pace": over,
                "errors": report.errors,
                "skipped": len(report.skipped),
                "on_target_pct": (on_target / total * 100) if total > 0 else 0,
                "total_monthly_budget": total_budget,
                "total_spend_mtd": total_spend,
            },
            "account_results": [r.to_dict() for r in report.results],
        }

        filepath = self.results_dir / f"run_{run_id}.json"
        with open(filepath, "w") as f:
            json.dump(results, f, indent=2, default=str)

        print(f"Results saved to: {filepath}")
        return str(filepath)

    def _path_for(self, run_id: str) -> Path:
        if not run_id.endswith(".json"):
            run_id = f"run_{run_id}.json"
        return self.results_dir / run_id

    def load_run(self, run_id: str) -> Dict[str, Any]:
        """
        Load results from a previous run.

        Args:
            run_id: Run ID or filename

        Returns:
            Results dictionary
        """
        with open(self._path_for(run_id), "r") as f:
            return json.load(f)

    def list_runs(self) -> List[Dict[str, Any]]:
        """
        List all saved runs.

        Returns:
            List of dictionaries with run metadata, oldest first
        """
        runs = []
        for filepath in sorted(self.results_dir.glob("run_*.json")):
            with open(filepath, "r") as f:
                data = json.load(f)
            meta = data["run_metadata"]
            runs.append({
                "run_id": meta["run_id"],
                "run_name": meta["run_name"],
                "timestamp": meta["timestamp"],
                "reference_date": meta["reference_date"],
                "total_accounts": meta["total_accounts"],
                "filepath": str(filepath),
            })
        return runs

    def get_latest_run(self) -> Optional[Dict[str, Any]]:
        """Get the most recent run."""
        runs = self.list_runs()
        if runs:
            return self.load_run(runs[-1]["run_id"])
        return None

    def export_overview_csv(self, run_id: str, output_file: str) -> int:
        """
        Export a saved run's overview rows to CSV.

        Args:
            run_id: Run ID or filename
            output_file: Output CSV file path

        Returns:
            Number of rows written
        """
        run = self.load_run(run_id)
        rows = []
        for result in run["account_results"]:
            if result["summary"]:
                row = dict(result["summary"])
                row.pop("per_day", None)
                rows.append(row)

        pd.DataFrame(rows).to_csv(output_file, index=False)
        print(f"Overview exported to: {output_file}")
        return len(rows)

    def delete_run(self, run_id: str) -> bool:
        """Delete a saved run."""
        filepath = self._path_for(run_id)
        if filepath.exists():
            filepath.unlink()
            print(f"Deleted run: {filepath.name}")
            return True
        print(f"Run not found: {filepath.name}")
        return False
