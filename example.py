"""
Quick example demonstrating the Budget Pacer.

Run this to see pacing for a handful of mock accounts.
"""

from datetime import date

from budget_pacer.api.budget_config import BudgetConfig
from budget_pacer.api.mock_ads_api import MockAdsAPI
from budget_pacer.config import PacingSettings
from budget_pacer.orchestrator import PacingOrchestrator


def main():
    print("\n" + "=" * 70)
    print(" BUDGET PACER - DEMO")
    print("=" * 70 + "\n")

    provider = MockAdsAPI(num_accounts=6, seed=42)

    # Budgets come from the config; new accounts land with a blank budget
    budget_config = BudgetConfig()
    budget_config.bulk_set_budgets(provider.suggested_budgets())

    orchestrator = PacingOrchestrator(
        provider=provider,
        budget_config=budget_config,
        settings=PacingSettings(wma_window_days=7)
    )

    report = orchestrator.run(reference=date(2024, 4, 10))

    print("\n" + "=" * 70)
    print(" DETAILED RESULTS (First 3 Accounts)")
    print("=" * 70 + "\n")

    for summary in report.summaries[:3]:
        print(summary)
        print(f"  Target to Date:     {summary.target_spend_to_date:,.2f}")
        print(f"  Pace Delta:         {summary.pace_delta_pct:+.1%}")
        print(f"  Projected EoM:      {summary.projected_eom_spend:,.2f}")
        print(f"  Recommended Daily:  {summary.recommended_daily_spend:,.2f}")
        print(f"  Status:             {summary.status}")
        print()

    print("\n" + "=" * 70)
    print(" END OF DEMO")
    print("=" * 70 + "\n")

    print("✅ Check 'audit_log.jsonl' for full audit trail")


if __name__ == "__main__":
    main()
