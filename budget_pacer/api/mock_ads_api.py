"""
Mock Ads Platform API.

Simulates a manager account's client accounts with realistic daily spend
patterns for testing the budget pacer without real API credentials.
"""

import random
from datetime import date
from typing import Any, Dict, List, Optional

from budget_pacer.analyzers.month_context import resolve_month_context
from budget_pacer.api.budget_config import normalize_account_id
from budget_pacer.models.pacing import DailyObservation, MonthContext


class MockAdsAPI:
    """
    Simulated spend data provider with realistic behavior.

    Generates mock accounts with varying pacing patterns:
    - On-target accounts (daily spend close to budget / days in month)
    - Under-pacing and over-pacing accounts
    - Accounts whose spend stopped part-way through the month
    - Accounts with a recent spend spike

    Daily reports come back unsorted and occasionally split one day across
    two rows, as real reports sometimes do.
    """

    # Daily spend factor relative to the straight-line daily target
    PACE_SCENARIOS = {
        "on_target": [0.96, 0.98, 1.00, 1.02, 1.04],
        "under": [0.60, 0.70, 0.80],
        "over": [1.15, 1.25, 1.40],
        "stalled": [1.00],
        "spike": [0.90],
    }

    CURRENCIES = ["USD", "EUR", "GBP", "CAD", "AUD"]
    TIMEZONES = ["America/New_York", "Europe/London", "Europe/Berlin", "America/Los_Angeles", "Australia/Sydney"]
    BRANDS = ["Northwind", "Contoso", "Fabrikam", "Tailspin", "Wingtip", "Litware", "Adatum"]
    VERTICALS = ["Retail", "Travel", "SaaS", "Finance", "Home"]

    def __init__(self, num_accounts: int = 10, seed: Optional[int] = None):
        """
        Initialize mock API.

        Args:
            num_accounts: Number of mock client accounts to generate
            seed: Random seed for reproducibility
        """
        self.num_accounts = num_accounts
        self.seed = seed
        self.rng = random.Random(seed)
        self.failing_accounts = set()

        self.accounts = self._generate_mock_accounts()

    def _generate_mock_accounts(self) -> List[Dict]:
        """
        Generate client accounts with budgets and pacing scenarios.

        Returns:
            List of account dictionaries
        """
        accounts = []

        scenario_distribution = (
            ["on_target"] * 4 +
            ["under", "over"] * 2 +
            ["stalled", "spike"]
        )

        for i in range(self.num_accounts):
            scenario = self.rng.choice(scenario_distribution)
            digits = f"{self.rng.randint(100, 999)}{self.rng.randint(100, 999)}{i:04d}"

            accounts.append({
                "customer_id": f"{digits[:3]}-{digits[3:6]}-{digits[6:]}",
                "account_id": digits,
                "account_name": self._generate_account_name(i),
                "currency": self.rng.choice(self.CURRENCIES),
                "timezone": self.rng.choice(self.TIMEZONES),
                "suggested_budget": float(self.rng.randrange(3000, 60000, 500)),
                "scenario": scenario,
                "pace_factor": self.rng.choice(self.PACE_SCENARIOS[scenario]),
            })

        return accounts

    def _generate_account_name(self, index: int) -> str:
        brand = self.rng.choice(self.BRANDS)
        vertical = self.rng.choice(self.VERTICALS)
        market = self.rng.choice(["US", "UK", "DE", "CA", "AU"])
        return f"{brand} {vertical} - {market} {index:02d}"

    def _get_account(self, account_id: str) -> Dict:
        account_id = normalize_account_id(account_id)
        account = next(
            (a for a in self.accounts if a["account_id"] == account_id),
            None
        )
        if not account:
            raise ValueError(f"Account {account_id} not found")
        return account

    def _check_available(self, account_id: str):
        if normalize_account_id(account_id) in self.failing_accounts:
            raise ConnectionError(f"Reporting API unavailable for account {account_id}")

    def _daily_costs(self, account: Dict, context: MonthContext) -> Dict[int, float]:
        """
        Deterministic daily cost per elapsed day for one account and month.

        Seeded per account and month so repeated calls agree with each other.
        """
        rng = random.Random(f"{self.seed}-{account['account_id']}-{context.year}-{context.month}")
        target_daily = account["suggested_budget"] / context.days_in_month
        scenario = account["scenario"]
        stall_day = max(context.days_elapsed // 2, 1)

        costs = {}
        for day in range(1, context.days_elapsed + 1):
            factor = account["pace_factor"] * rng.uniform(0.85, 1.15)
            if scenario == "stalled" and day > stall_day:
                factor = 0.0
            elif scenario == "spike" and day > context.days_elapsed - 3:
                factor *= 2.5
            costs[day] = round(target_daily * factor, 2)
        return costs

    def list_accounts(self) -> List[Dict]:
        """
        List client accounts under the manager account.

        Returns:
            List of dicts with account_id, customer_id and account_name
        """
        return [
            {
                "account_id": a["account_id"],
                "customer_id": a["customer_id"],
                "account_name": a["account_name"],
            }
            for a in self.accounts
        ]

    def list_account_ids(self) -> List[str]:
        return [a["account_id"] for a in self.accounts]

    def get_account_name(self, account_id: str) -> str:
        return self._get_account(account_id)["account_name"]

    def get_currency_code(self, account_id: str) -> str:
        return self._get_account(account_id)["currency"]

    def get_timezone(self, account_id: str) -> str:
        return self._get_account(account_id)["timezone"]

    def get_daily_spend(self, account_id: str, context: MonthContext) -> List[DailyObservation]:
        """
        Fetch this month's daily spend report.

        Args:
            account_id: Account identifier
            context: Month window to report on

        Returns:
            Unsorted list of DailyObservation, one or two rows per elapsed day

        Raises:
            ValueError: If account not found
            ConnectionError: If the account is marked as failing
        """
        account = self._get_account(account_id)
        self._check_available(account_id)

        rows = []
        for day, cost in self._daily_costs(account, context).items():
            report_date = context.date_for_day(day)
            if day % 5 == 0 and cost > 0:
                # Same day reported in two parts
                first = round(cost * 0.4, 2)
                rows.append(DailyObservation.from_raw(report_date.isoformat(), str(first)))
                rows.append(DailyObservation.from_raw(report_date.isoformat(), str(round(cost - first, 2))))
            else:
                rows.append(DailyObservation.from_raw(report_date.isoformat(), str(cost)))

        random.Random(account_id).shuffle(rows)
        return rows

    def get_month_to_date_spend(self, account_id: str, context: Optional[MonthContext] = None) -> float:
        """
        Fetch month-to-date total spend.

        Args:
            account_id: Account identifier
            context: Month window (default: current month in the account zone)

        Returns:
            Total spend this month
        """
        account = self._get_account(account_id)
        self._check_available(account_id)

        if context is None:
            context = resolve_month_context(date.today(), account["timezone"])
        return round(sum(self._daily_costs(account, context).values()), 2)

    def set_failing(self, account_id: str, failing: bool = True):
        """
        Make reporting calls for an account raise (mock outage).

        Args:
            account_id: Account identifier
            failing: True to fail, False to restore
        """
        account_id = normalize_account_id(account_id)
        if failing:
            self.failing_accounts.add(account_id)
        else:
            self.failing_accounts.discard(account_id)

    def rename_account(self, account_id: str, new_name: str) -> bool:
        """
        Rename an account (mock action).

        Returns:
            True if renamed, False if not found
        """
        account_id = normalize_account_id(account_id)
        account = next((a for a in self.accounts if a["account_id"] == account_id), None)
        if account:
            account["account_name"] = new_name
            return True
        return False

    def suggested_budgets(self) -> Dict[str, float]:
        """Monthly budgets matching each account's generated spend level."""
        return {a["account_id"]: a["suggested_budget"] for a in self.accounts}

    def get_summary_stats(self) -> Dict[str, Any]:
        """
        Get summary statistics for all accounts.

        Returns:
            Dictionary with aggregated stats
        """
        scenario_counts = {}
        for a in self.accounts:
            scenario_counts[a["scenario"]] = scenario_counts.get(a["scenario"], 0) + 1

        return {
            "total_accounts": self.num_accounts,
            "failing_accounts": len(self.failing_accounts),
            "total_suggested_budget": sum(a["suggested_budget"] for a in self.accounts),
            "scenario_distribution": scenario_counts,
        }
