"""
Run settings for the budget pacer.

Defaults live on PacingSettings; deployments override them through
environment variables via PacingSettings.from_env().
"""

import os
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from budget_pacer.analyzers.month_context import DEFAULT_TIMEZONE, get_zone
from budget_pacer.models.pacing import TimezoneMode

# TIMEZONE values that mean "use each account's own zone"
ACCOUNT_ZONE_ALIASES = {"MCC", "AUTO", "ACCOUNT"}


@dataclass
class PacingSettings:
    """
    Settings for one pacing run.

    Attributes:
        timezone_mode: Fixed zone for every account, or each account's zone
        fixed_timezone: IANA zone used in fixed-zone mode
        wma_window_days: Lookback window for the weighted recent average
        on_target_band: Max |pace delta| counted as on target
        warning_band: |pace delta| at or above which status is red
        chunk_size: Accounts fetched per batch
        slack_webhook: Optional Slack webhook for alerts and summaries
        audit_log_file: JSONL audit trail path
        budget_config_file: Optional CSV with per-account budgets
    """
    timezone_mode: TimezoneMode = TimezoneMode.FIXED_ZONE
    fixed_timezone: str = DEFAULT_TIMEZONE
    wma_window_days: int = 7
    on_target_band: float = 0.05
    warning_band: float = 0.10
    chunk_size: int = 50
    slack_webhook: Optional[str] = None
    audit_log_file: str = "audit_log.jsonl"
    budget_config_file: Optional[str] = None

    def __post_init__(self):
        if isinstance(self.timezone_mode, str):
            self.timezone_mode = TimezoneMode(self.timezone_mode)
        if self.wma_window_days < 1:
            raise ValueError(f"wma_window_days must be >= 1, got {self.wma_window_days}")
        if self.chunk_size < 1:
            raise ValueError(f"chunk_size must be >= 1, got {self.chunk_size}")
        if self.on_target_band < 0:
            raise ValueError(f"on_target_band must be >= 0, got {self.on_target_band}")
        if self.warning_band < self.on_target_band:
            raise ValueError(
                f"warning_band must be >= on_target_band, "
                f"got {self.warning_band} and {self.on_target_band}"
            )
        if self.timezone_mode == TimezoneMode.FIXED_ZONE:
            get_zone(self.fixed_timezone)

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> "PacingSettings":
        """
        Load settings from environment variables.

        PACING_TIMEZONE accepts an IANA zone name, or MCC/AUTO/ACCOUNT to
        use each account's own zone.
        """
        env = os.environ if environ is None else environ

        timezone = env.get("PACING_TIMEZONE", DEFAULT_TIMEZONE).strip() or DEFAULT_TIMEZONE
        if timezone.upper() in ACCOUNT_ZONE_ALIASES:
            mode = TimezoneMode.USE_ACCOUNT_ZONE
            timezone = DEFAULT_TIMEZONE
        else:
            mode = TimezoneMode.FIXED_ZONE

        return cls(
            timezone_mode=mode,
            fixed_timezone=timezone,
            wma_window_days=int(env.get("WMA_WINDOW_DAYS", "7")),
            on_target_band=float(env.get("ON_TARGET_BAND", "0.05")),
            warning_band=float(env.get("WARNING_BAND", "0.10")),
            chunk_size=int(env.get("ACCOUNT_CHUNK_SIZE", "50")),
            slack_webhook=env.get("SLACK_WEBHOOK_URL") or None,
            audit_log_file=env.get("AUDIT_LOG_FILE", "audit_log.jsonl"),
            budget_config_file=env.get("BUDGET_CONFIG_FILE") or None,
        )

    def timezone_for(self, provider, account_id: str) -> str:
        """Zone a given account is paced in."""
        if self.timezone_mode == TimezoneMode.USE_ACCOUNT_ZONE:
            return provider.get_timezone(account_id)
        return self.fixed_timezone

    def to_dict(self) -> Dict[str, Any]:
        """Export settings, without the webhook secret."""
        data = asdict(self)
        data["timezone_mode"] = self.timezone_mode.value
        data["slack_webhook"] = bool(self.slack_webhook)
        return data
