"""
Budget Pacer

Monthly budget pacing for ad accounts: compares spend to date against a
straight-line target, forecasts end-of-month spend from a weighted moving
average of recent days, and recommends the daily spend that lands on budget.
"""

__version__ = "0.1.0"
