"""
Unit tests for PacingSettings.
"""

import pytest
from budget_pacer.api.mock_ads_api import MockAdsAPI
from budget_pacer.config import PacingSettings
from budget_pacer.models.pacing import TimezoneMode
from budget_pacer.orchestrator import PacingOrchestrator


class TestDefaults:
    """Test default settings."""

    def test_defaults(self):
        """Test defaults match the documented values."""
        settings = PacingSettings()

        assert settings.timezone_mode == TimezoneMode.FIXED_ZONE
        assert settings.fixed_timezone == "UTC"
        assert settings.wma_window_days == 7
        assert settings.on_target_band == 0.05
        assert settings.warning_band == 0.10
        assert settings.chunk_size == 50
        assert settings.slack_webhook is None

    def test_mode_from_string(self):
        """Test the mode accepts its string value."""
        settings = PacingSettings(timezone_mode="use-account-zone")
        assert settings.timezone_mode == TimezoneMode.USE_ACCOUNT_ZONE

    @pytest.mark.parametrize("kwargs", [
        {"wma_window_days": 0},
        {"chunk_size": 0},
        {"on_target_band": -0.01},
        {"on_target_band": 0.15},
        {"on_target_band": 0.05, "warning_band": 0.04},
        {"fixed_timezone": "Not/AZone"},
    ])
    def test_invalid_values(self, kwargs):
        """Test invalid settings raise ValueError."""
        with pytest.raises(ValueError):
            PacingSettings(**kwargs)


class TestWideOnTargetBand:
    """Test on-target bands wider than the default warning band."""

    def test_wide_band_error_names_both_bands(self):
        """Test the error is raised by the settings, not later in the run."""
        with pytest.raises(ValueError, match="warning_band must be >= on_target_band"):
            PacingSettings(on_target_band=0.15)

    def test_wide_band_with_raised_warning_band(self):
        """Test an orchestrator builds and uses both bands."""
        settings = PacingSettings(on_target_band=0.15, warning_band=0.25)
        orchestrator = PacingOrchestrator(provider=MockAdsAPI(num_accounts=2, seed=1), settings=settings)
        aggregator = orchestrator.workflow.aggregator

        assert aggregator.on_target_band == pytest.approx(0.15)
        assert aggregator.warning_band == pytest.approx(0.25)
        assert aggregator.trend_label(0.12) == "On Target"
        assert aggregator.status(0.2) == "yellow"
        assert aggregator.status(0.25) == "red"

    def test_wide_band_from_env(self):
        """Test both bands can be raised through the environment."""
        settings = PacingSettings.from_env({"ON_TARGET_BAND": "0.15", "WARNING_BAND": "0.3"})

        assert settings.on_target_band == 0.15
        assert settings.warning_band == 0.3


class TestFromEnv:
    """Test loading settings from the environment."""

    def test_empty_environment(self):
        """Test no variables gives defaults."""
        assert PacingSettings.from_env({}) == PacingSettings()

    @pytest.mark.parametrize("value", ["MCC", "auto", "Account"])
    def test_account_zone_aliases(self, value):
        """Test MCC/AUTO/ACCOUNT select each account's zone."""
        settings = PacingSettings.from_env({"PACING_TIMEZONE": value})
        assert settings.timezone_mode == TimezoneMode.USE_ACCOUNT_ZONE

    def test_fixed_zone_and_overrides(self):
        """Test explicit values are parsed."""
        settings = PacingSettings.from_env({
            "PACING_TIMEZONE": "Europe/Berlin",
            "WMA_WINDOW_DAYS": "5",
            "ON_TARGET_BAND": "0.08",
            "WARNING_BAND": "0.2",
            "ACCOUNT_CHUNK_SIZE": "20",
            "SLACK_WEBHOOK_URL": "https://hooks.slack.com/services/test",
            "BUDGET_CONFIG_FILE": "budgets.csv",
        })

        assert settings.timezone_mode == TimezoneMode.FIXED_ZONE
        assert settings.fixed_timezone == "Europe/Berlin"
        assert settings.wma_window_days == 5
        assert settings.on_target_band == 0.08
        assert settings.warning_band == 0.2
        assert settings.chunk_size == 20
        assert settings.slack_webhook.startswith("https://")
        assert settings.budget_config_file == "budgets.csv"

    def test_reads_os_environ(self, monkeypatch):
        """Test os.environ is used by default."""
        monkeypatch.setenv("PACING_TIMEZONE", "Asia/Tokyo")
        assert PacingSettings.from_env().fixed_timezone == "Asia/Tokyo"

    def test_unknown_zone(self):
        """Test an unknown zone name fails at load time."""
        with pytest.raises(ValueError, match="Unknown timezone"):
            PacingSettings.from_env({"PACING_TIMEZONE": "Nowhere/Land"})


class TestTimezoneFor:
    """Test per-account zone selection."""

    def test_fixed_zone(self):
        """Test fixed mode ignores the account zone."""
        api = MockAdsAPI(num_accounts=2, seed=1)
        settings = PacingSettings(fixed_timezone="Europe/London")

        assert settings.timezone_for(api, api.list_account_ids()[0]) == "Europe/London"

    def test_account_zone(self):
        """Test account mode asks the provider."""
        api = MockAdsAPI(num_accounts=2, seed=1)
        account_id = api.list_account_ids()[0]
        settings = PacingSettings(timezone_mode=TimezoneMode.USE_ACCOUNT_ZONE)

        assert settings.timezone_for(api, account_id) == api.get_timezone(account_id)

    def test_to_dict_hides_webhook(self):
        """Test the webhook URL is not exported."""
        data = PacingSettings(slack_webhook="https://hooks.slack.com/secret").to_dict()

        assert data["slack_webhook"] is True
        assert data["timezone_mode"] == "fixed-zone"
