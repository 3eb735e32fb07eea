"""
Budget configuration store.

Holds the per-account monthly budget and include flag the pacing run reads.
In production this is a shared sheet or table edited by account managers;
here it is an in-memory table that can be persisted to CSV.
"""

import math
from typing import Any, Dict, List, Optional

import pandas as pd

from budget_pacer.models.pacing import AccountConfig

CONFIG_COLUMNS = ["account_id", "account_name", "monthly_budget", "include"]


def normalize_account_id(raw: Any) -> str:
    """Strip whitespace and dashes: '123-456-7890' -> '1234567890'."""
    if raw is None:
        return ""
    return str(raw).strip().replace("-", "")


def parse_include(raw: Any) -> bool:
    """Include defaults to True; only an explicit False/"FALSE" excludes."""
    if raw is False:
        return False
    if isinstance(raw, str) and raw.strip().upper() == "FALSE":
        return False
    return True


def parse_budget(raw: Any) -> float:
    """Blank, unparsable or non-finite budgets count as 0 (not configured)."""
    if raw is None:
        return 0.0
    if isinstance(raw, str):
        raw = raw.replace(",", "").strip()
        if not raw:
            return 0.0
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return 0.0
    # NaN from empty CSV cells
    return value if math.isfinite(value) else 0.0


class BudgetConfig:
    """
    Per-account budget configuration.

    Rows are kept in insertion order as raw dicts with CONFIG_COLUMNS keys,
    so a hand-edited table with bad ids or blank budgets can be loaded and
    reported on instead of rejected outright.
    """

    def __init__(self, rows: Optional[List[Dict[str, Any]]] = None):
        """
        Initialize config with optional raw rows.

        Args:
            rows: Optional list of dicts with CONFIG_COLUMNS keys
        """
        self.rows = [self._complete(row) for row in (rows or [])]

    @staticmethod
    def _complete(row: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "account_id": row.get("account_id", ""),
            "account_name": row.get("account_name", "") or "",
            "monthly_budget": row.get("monthly_budget"),
            "include": row.get("include", True),
        }

    def _find_row(self, account_id: str) -> Optional[Dict[str, Any]]:
        account_id = normalize_account_id(account_id)
        return next(
            (r for r in self.rows if normalize_account_id(r["account_id"]) == account_id),
            None
        )

    def set_budget(
        self,
        account_id: str,
        monthly_budget: float,
        account_name: Optional[str] = None,
        include: bool = True
    ):
        """
        Set the monthly budget for an account, adding the row if needed.

        Args:
            account_id: Account identifier (dashes allowed)
            monthly_budget: Monthly budget in account currency
            account_name: Optional name label
            include: Whether the account is paced
        """
        row = self._find_row(account_id)
        if row is None:
            row = self._complete({"account_id": normalize_account_id(account_id)})
            self.rows.append(row)

        row["monthly_budget"] = monthly_budget
        row["include"] = include
        if account_name is not None:
            row["account_name"] = account_name

    def bulk_set_budgets(self, budgets: Dict[str, float]):
        """
        Set multiple budgets at once.

        Args:
            budgets: Dictionary mapping account_id to monthly budget
        """
        for account_id, monthly_budget in budgets.items():
            self.set_budget(account_id, monthly_budget)

    def seed_from_accounts(self, provider) -> Dict[str, int]:
        """
        Merge the provider's account list into the config.

        New accounts are appended with a blank budget and include=True, so
        they show up for someone to fill in. Existing rows get their name
        refreshed when the platform name changed.

        Args:
            provider: Spend data provider exposing list_accounts()

        Returns:
            Counts: added, names_updated, total_rows
        """
        added = 0
        names_updated = 0

        for account in provider.list_accounts():
            account_id = normalize_account_id(account["account_id"])
            name = account.get("account_name", "")
            row = self._find_row(account_id)

            if row is None:
                self.rows.append(self._complete({
                    "account_id": account_id,
                    "account_name": name,
                    "monthly_budget": None,
                    "include": True,
                }))
                added += 1
            elif name and row["account_name"] != name:
                row["account_name"] = name
                names_updated += 1

        return {
            "added": added,
            "names_updated": names_updated,
            "total_rows": len(self.rows),
        }

    def read_config(self) -> List[AccountConfig]:
        """
        Validated, included rows in table order.

        Skips rows whose id is not all digits, rows excluded via the include
        flag, and rows with no positive budget. When an id repeats, the first
        valid row wins.

        Returns:
            List of AccountConfig
        """
        configs = []
        seen = set()

        for row in self.rows:
            raw_id = "" if row["account_id"] is None else str(row["account_id"]).strip()
            account_id = normalize_account_id(raw_id)

            if not account_id or not account_id.isdigit():
                if raw_id:
                    print(f"⚠️  Bad account ID: {raw_id}")
                continue
            if account_id in seen:
                print(f"⚠️  Duplicate account ID, keeping first: {account_id}")
                continue

            include = parse_include(row["include"])
            monthly_budget = parse_budget(row["monthly_budget"])
            if not include or monthly_budget <= 0:
                continue

            seen.add(account_id)
            configs.append(AccountConfig(
                account_id=account_id,
                account_name=str(row["account_name"] or "").strip(),
                monthly_budget=monthly_budget,
                include=True,
            ))

        return configs

    def index(self) -> Dict[str, AccountConfig]:
        """Valid config rows keyed by account_id."""
        return {c.account_id: c for c in self.read_config()}

    def has_account(self, account_id: str) -> bool:
        return self._find_row(account_id) is not None

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(self.rows, columns=CONFIG_COLUMNS)

    def to_csv(self, path: str):
        """Write the config table to CSV."""
        self.to_frame().to_csv(path, index=False)

    @classmethod
    def from_csv(cls, path: str) -> "BudgetConfig":
        """
        Load a config table from CSV.

        Account ids are read as text so leading zeros and dashes survive;
        empty cells come back as blanks.
        """
        frame = pd.read_csv(path, dtype=str, keep_default_na=False)
        missing = [c for c in CONFIG_COLUMNS if c not in frame.columns]
        if missing:
            raise ValueError(f"Budget config {path} is missing columns: {missing}")
        return cls(frame[CONFIG_COLUMNS].to_dict(orient="records"))

    def get_summary(self) -> Dict[str, Any]:
        """
        Get summary statistics for the configured budgets.

        Returns:
            Dictionary with aggregated stats
        """
        configs = self.read_config()
        total_budget = sum(c.monthly_budget for c in configs)

        return {
            "total_rows": len(self.rows),
            "valid_rows": len(configs),
            "total_monthly_budget": total_budget,
            "account_ids": [c.account_id for c in configs],
        }
