"""
Unit tests for MockAdsAPI.
"""

import pytest
from datetime import date
from budget_pacer.analyzers.month_context import resolve_month_context
from budget_pacer.api.mock_ads_api import MockAdsAPI


class TestMockAdsAPI:
    """Test MockAdsAPI."""

    @pytest.fixture
    def api(self):
        """Create mock API with fixed seed."""
        return MockAdsAPI(num_accounts=5, seed=42)

    @pytest.fixture
    def context(self):
        """April 2024, ten days elapsed."""
        return resolve_month_context(date(2024, 4, 10))

    def test_initialization(self, api):
        """Test API initialization."""
        assert api.num_accounts == 5
        assert len(api.accounts) == 5

    def test_account_generation(self, api):
        """Test that accounts are generated correctly."""
        for account in api.accounts:
            assert account["account_id"].isdigit()
            assert account["customer_id"].replace("-", "") == account["account_id"]
            assert account["scenario"] in MockAdsAPI.PACE_SCENARIOS
            assert account["currency"] in MockAdsAPI.CURRENCIES
            assert account["suggested_budget"] > 0

    def test_seed_reproducible(self):
        """Test the same seed generates the same accounts."""
        first = MockAdsAPI(num_accounts=3, seed=7).list_account_ids()
        second = MockAdsAPI(num_accounts=3, seed=7).list_account_ids()
        assert first == second

    def test_list_accounts(self, api):
        """Test account listing fields."""
        accounts = api.list_accounts()

        assert len(accounts) == 5
        assert set(accounts[0]) == {"account_id", "customer_id", "account_name"}

    def test_account_lookups(self, api):
        """Test name, currency and timezone lookups."""
        account_id = api.list_account_ids()[0]

        assert api.get_account_name(account_id)
        assert api.get_currency_code(account_id) in MockAdsAPI.CURRENCIES
        assert api.get_timezone(account_id) in MockAdsAPI.TIMEZONES

    def test_lookup_accepts_dashed_id(self, api):
        """Test dashed customer ids resolve."""
        account = api.accounts[0]
        assert api.get_account_name(account["customer_id"]) == account["account_name"]

    def test_account_not_found(self, api, context):
        """Test error when account not found."""
        with pytest.raises(ValueError, match="not found"):
            api.get_daily_spend("999", context)

    def test_daily_spend_within_month(self, api, context):
        """Test daily rows only cover elapsed days of the month."""
        account_id = api.list_account_ids()[0]
        observations = api.get_daily_spend(account_id, context)

        assert observations
        for obs in observations:
            assert context.contains(obs.date)
            assert obs.date.day <= context.days_elapsed
            assert obs.cost >= 0

    def test_daily_spend_matches_mtd(self, api, context):
        """Test summed daily rows agree with month-to-date spend."""
        for account_id in api.list_account_ids():
            total = sum(o.cost for o in api.get_daily_spend(account_id, context))
            mtd = api.get_month_to_date_spend(account_id, context)
            assert total == pytest.approx(mtd, abs=0.05)

    def test_spend_is_deterministic(self, api, context):
        """Test repeated calls return the same month-to-date spend."""
        account_id = api.list_account_ids()[0]
        assert api.get_month_to_date_spend(account_id, context) == api.get_month_to_date_spend(account_id, context)

    def test_failing_account(self, api, context):
        """Test mock outage raises ConnectionError until restored."""
        account_id = api.list_account_ids()[0]
        api.set_failing(account_id)

        with pytest.raises(ConnectionError):
            api.get_daily_spend(account_id, context)
        with pytest.raises(ConnectionError):
            api.get_month_to_date_spend(account_id, context)

        api.set_failing(account_id, failing=False)
        assert api.get_month_to_date_spend(account_id, context) >= 0

    def test_rename_account(self, api):
        """Test renaming an account."""
        account_id = api.list_account_ids()[0]

        assert api.rename_account(account_id, "Renamed") is True
        assert api.get_account_name(account_id) == "Renamed"
        assert api.rename_account("999", "Nope") is False

    def test_suggested_budgets(self, api):
        """Test every account has a suggested budget."""
        budgets = api.suggested_budgets()
        assert set(budgets) == set(api.list_account_ids())

    def test_summary_stats(self, api):
        """Test summary statistics."""
        stats = api.get_summary_stats()

        assert stats["total_accounts"] == 5
        assert sum(stats["scenario_distribution"].values()) == 5
