"""API clients for account spend data and budget configuration."""

from budget_pacer.api.mock_ads_api import MockAdsAPI
from budget_pacer.api.budget_config import BudgetConfig

__all__ = [
    "MockAdsAPI",
    "BudgetConfig",
]
