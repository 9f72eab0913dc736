"""
Tests for insight generation settings.
"""

import logging

import pytest
from pydantic import ValidationError

from tradeclarity.config.logging import _HANDLER_MARK, StructuredFormatter
from tradeclarity.config.settings import (
    CONFIG_ENV_VAR,
    LOG_LEVEL_ENV_VAR,
    GenerationSettings,
    InsightSettings,
    LoggingSettings,
    configure_logging_from_settings,
    get_settings,
    load_settings,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep environment overrides out of these tests."""
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    monkeypatch.delenv(LOG_LEVEL_ENV_VAR, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestGenerationSettings:
    """Tests for GenerationSettings."""

    def test_defaults(self):
        """Test default thresholds."""
        settings = GenerationSettings()
        assert settings.low_activity_max_trades == 30
        assert settings.symbol_focus_min_savings == 100
        assert settings.stop_loss_target_percent == 0.02
        assert settings.combined_max_insights == 5

    @pytest.mark.parametrize(
        "total_pnl, expected",
        [(500, 20), (1000, 20), (1000.01, 50), (-2000, 20)],
    )
    def test_min_savings_for(self, total_pnl, expected):
        """Test the savings floor scales with account size."""
        assert GenerationSettings().min_savings_for(total_pnl) == expected

    def test_frozen(self):
        """Test settings are immutable."""
        settings = GenerationSettings()
        with pytest.raises(ValidationError):
            settings.combined_max_insights = 10

    def test_invalid_stop_loss(self):
        """Test the stop-loss target must be a fraction."""
        with pytest.raises(ValidationError):
            GenerationSettings(stop_loss_target_percent=2)


class TestLoadSettings:
    """Tests for load_settings."""

    def test_no_file(self):
        """Test defaults without a settings file."""
        settings = load_settings()
        assert isinstance(settings, InsightSettings)
        assert settings.logging.level == "INFO"

    def test_yaml_file(self, tmp_path):
        """Test values are read from YAML."""
        config_file = tmp_path / "insights.yaml"
        config_file.write_text(
            "generation:\n"
            "  combined_max_insights: 3\n"
            "  low_activity_max_trades: 25\n"
            "logging:\n"
            "  json_format: true\n"
        )
        settings = load_settings(config_file)
        assert settings.generation.combined_max_insights == 3
        assert settings.generation.low_activity_max_trades == 25
        assert settings.logging.json_format is True

    def test_env_var_path(self, tmp_path, monkeypatch):
        """Test the settings path can come from the environment."""
        config_file = tmp_path / "insights.yaml"
        config_file.write_text("generation:\n  strength_win_rate: 65\n")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(config_file))
        assert load_settings().generation.strength_win_rate == 65

    def test_missing_file_uses_defaults(self, tmp_path):
        """Test a missing file falls back to defaults."""
        settings = load_settings(tmp_path / "absent.yaml")
        assert settings.generation.combined_max_insights == 5

    def test_log_level_override(self, monkeypatch):
        """Test the log level environment override."""
        monkeypatch.setenv(LOG_LEVEL_ENV_VAR, "debug")
        assert load_settings().logging.level == "DEBUG"

    def test_non_mapping_rejected(self, tmp_path):
        """Test a YAML list is rejected."""
        config_file = tmp_path / "insights.yaml"
        config_file.write_text("- a\n- b\n")
        with pytest.raises(ValueError):
            load_settings(config_file)

    def test_get_settings_cached(self):
        """Test get_settings returns the same object."""
        assert get_settings() is get_settings()


class TestLoggingFromSettings:
    """Tests for applying logging preferences."""

    def installed_handlers(self):
        return [h for h in logging.getLogger().handlers if getattr(h, _HANDLER_MARK, False)]

    def test_env_level_reaches_root_logger(self, monkeypatch):
        """Test the log level override is applied by get_settings."""
        monkeypatch.setenv(LOG_LEVEL_ENV_VAR, "DEBUG")
        get_settings()
        assert logging.getLogger().level == logging.DEBUG

    def test_json_format_from_file(self, tmp_path, monkeypatch):
        """Test json_format from the settings file selects structured output."""
        config_file = tmp_path / "insights.yaml"
        config_file.write_text("logging:\n  json_format: true\n  level: WARNING\n")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(config_file))

        get_settings()

        assert logging.getLogger().level == logging.WARNING
        (handler,) = self.installed_handlers()
        assert isinstance(handler.formatter, StructuredFormatter)

    def test_configured_once(self, monkeypatch):
        """Test cached calls do not reconfigure logging."""
        get_settings()
        logging.getLogger().setLevel(logging.ERROR)
        monkeypatch.setenv(LOG_LEVEL_ENV_VAR, "DEBUG")
        get_settings()
        assert logging.getLogger().level == logging.ERROR

    def test_log_file(self, tmp_path):
        """Test log_file adds a file handler."""
        log_file = tmp_path / "insights.log"
        configure_logging_from_settings(LoggingSettings(log_file=str(log_file)))
        handlers = self.installed_handlers()
        assert len(handlers) == 2
        logging.getLogger("tradeclarity.test").warning("written")
        for handler in handlers:
            handler.flush()
        assert "written" in log_file.read_text()
