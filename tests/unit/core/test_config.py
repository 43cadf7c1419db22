"""Test settings loading from defaults, TOML and the environment."""

import pytest

from trade_behavior.core.config import AnalyticsSettings, load_settings
from trade_behavior.core.enums import OversellPolicy
from trade_behavior.core.errors import AnalyticsError, ConfigError


class TestDefaults:
    def test_default_settings(self):
        settings = AnalyticsSettings()
        assert settings.realized.oversell_policy == OversellPolicy.WARN
        assert settings.technique.feature_mint_count == 8
        assert settings.entry_style.twap_min_buys == 3
        assert settings.entry_style.twap_max_cv == 0.10
        assert settings.entry_style.cluster_gap_mins == 15.0

    def test_curve_and_chart_defaults(self):
        settings = AnalyticsSettings()
        assert settings.curve.volatility_window_days == 30
        assert settings.curve.annualization_days == 365
        assert settings.curve.baseline_value == 100.0
        assert settings.chart.major_run_pct == 40.0
        assert settings.chart.catastrophic_nuke_pct == -70.0

    def test_outcomes_defaults(self):
        settings = AnalyticsSettings()
        assert settings.outcomes.loss_threshold_pct == -10.0
        assert settings.outcomes.spike_threshold_pct == 200.0


class TestLoadSettings:
    def test_no_file(self):
        assert load_settings().technique.feature_mint_count == 8

    def test_missing_file_ignored(self, tmp_path):
        settings = load_settings(tmp_path / "absent.toml")
        assert settings.technique.feature_mint_count == 8

    def test_toml_file(self, tmp_path):
        path = tmp_path / "analytics.toml"
        path.write_text(
            '[realized]\noversell_policy = "reject"\n\n'
            "[technique]\nfeature_mint_count = 3\n"
        )
        settings = load_settings(path)
        assert settings.realized.oversell_policy == OversellPolicy.REJECT
        assert settings.technique.feature_mint_count == 3

    def test_overrides(self):
        settings = load_settings(overrides={"chart": {"trend_window": 10}})
        assert settings.chart.trend_window == 10

    def test_env_var(self, monkeypatch):
        monkeypatch.setenv("TRADE_BEHAVIOR_TECHNIQUE__FEATURE_MINT_COUNT", "12")
        assert load_settings().technique.feature_mint_count == 12

    def test_invalid_toml(self, tmp_path):
        path = tmp_path / "bad.toml"
        path.write_text("[technique\nfeature_mint_count = ")
        with pytest.raises(ConfigError, match="Invalid TOML"):
            load_settings(path)

    def test_invalid_value(self):
        with pytest.raises(ConfigError):
            load_settings(overrides={"realized": {"oversell_policy": "ignore"}})

    def test_config_error_is_analytics_error(self):
        assert issubclass(ConfigError, AnalyticsError)
