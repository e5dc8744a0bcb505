"""Tests for environment configuration and validation"""
import importlib

import pytest

from habit_engine import config
from habit_engine.exceptions import ConfigurationError


@pytest.fixture
def reload_config(monkeypatch):
    """Reload habit_engine.config after changing the environment"""
    def _reload(**env):
        for key, value in env.items():
            monkeypatch.setenv(key, value)
        return importlib.reload(config)

    yield _reload

    monkeypatch.undo()
    importlib.reload(config)


class TestConfigDefaults:
    """Test default values"""

    def test_defaults(self, reload_config, monkeypatch):
        """Test defaults when nothing is set in the environment"""
        for key in (
            "MINIMUM_JUMPS", "CHALLENGE_OVERSHOOT", "DEFAULT_NOTIFICATION_HOURS", "HISTORY_MATURITY_THRESHOLD",
            "RETRY_OFFSET_MINUTES", "REPETITION_LABEL", "DETECTION_CONFIDENCE",
        ):
            monkeypatch.delenv(key, raising=False)
        cfg = reload_config()

        assert cfg.MINIMUM_JUMPS == 20
        assert cfg.CHALLENGE_OVERSHOOT == 1.2
        assert cfg.DEFAULT_NOTIFICATION_HOURS == [8, 10, 12, 16, 20]
        assert cfg.HISTORY_MATURITY_THRESHOLD == 10
        assert cfg.RETRY_OFFSET_MINUTES == 10
        assert cfg.REPETITION_LABEL == "Jumping Jacks"
        assert cfg.DETECTION_CONFIDENCE == 0.85

    def test_notification_hours_from_environment(self, reload_config):
        """Test comma separated notification hours are parsed"""
        cfg = reload_config(DEFAULT_NOTIFICATION_HOURS="7, 13,19,")

        assert cfg.DEFAULT_NOTIFICATION_HOURS == [7, 13, 19]

    def test_numeric_overrides(self, reload_config):
        """Test numeric settings are read from the environment"""
        cfg = reload_config(MINIMUM_JUMPS="30", CHALLENGE_OVERSHOOT="1.5")

        assert cfg.MINIMUM_JUMPS == 30
        assert cfg.CHALLENGE_OVERSHOOT == 1.5


class TestParseWindow:
    """Test HH:MM-HH:MM parsing"""

    def test_parse_window(self):
        assert config.parse_window("9:00-10:00") == (9, 0, 10, 0)
        assert config.parse_window("22:30-01:15") == (22, 30, 1, 15)

    @pytest.mark.parametrize("value", ["9-10", "nine:00-10:00", "9:00", ""])
    def test_parse_window_invalid(self, value):
        """Test malformed windows raise ConfigurationError"""
        with pytest.raises(ConfigurationError) as exc_info:
            config.parse_window(value)

        assert exc_info.value.config_key == "DEFAULT_WINDOW"


class TestValidateConfig:
    """Test validate_config()"""

    def test_valid_configuration(self):
        """Test the defaults pass validation"""
        config.validate_config()

    @pytest.mark.parametrize("key,value", [
        ("DATABASE_URL", ""),
        ("MINIMUM_JUMPS", 0),
        ("CHALLENGE_OVERSHOOT", 0.8),
        ("MAX_NOTIFICATION_COUNT", 0),
        ("DEFAULT_NOTIFICATION_HOURS", [8, 25]),
        ("DEFAULT_NOTIFICATION_HOURS", []),
        ("DETECTION_CONFIDENCE", 1.2),
        ("DEFAULT_WINDOW", "morning"),
    ])
    def test_invalid_values(self, monkeypatch, key, value):
        """Test invalid values raise ConfigurationError"""
        monkeypatch.setattr(config, key, value)

        with pytest.raises(ConfigurationError):
            config.validate_config()


class TestWindowRanges:
    """Test hour and minute bounds of configured windows"""

    @pytest.mark.parametrize("value", ["25:99-26:00", "24:00-10:00", "9:60-10:00", "9:00-10:75"])
    def test_parse_window_out_of_range(self, value):
        """Test out-of-range hours or minutes raise ConfigurationError"""
        with pytest.raises(ConfigurationError) as exc_info:
            config.parse_window(value)

        assert exc_info.value.config_key == "DEFAULT_WINDOW"

    def test_parse_window_bounds_accepted(self):
        assert config.parse_window("0:00-23:59") == (0, 0, 23, 59)

    def test_validate_config_rejects_out_of_range_window(self, monkeypatch):
        """Test an out-of-range default window fails validation at startup"""
        monkeypatch.setattr(config, "DEFAULT_WINDOW", "25:99-26:00")

        with pytest.raises(ConfigurationError):
            config.validate_config()
