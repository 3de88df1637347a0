"""
Unit tests for configuration module.

Tests defaults, validation of module and intake settings, and loading a
robot configuration from JSON.
"""

import json
import math
import pytest

from robot_subsystems.config import (
    IntakeSettings, ModuleSettings, PositionGains, RateGains, RobotConfig,
    load_robot_config,
)
from robot_subsystems.errors import ConfigurationError


class TestGains:
    """Tests for gain dataclasses."""

    def test_default_gains(self):
        """Default gains should be valid."""
        assert PositionGains().max_rate > 0
        assert RateGains().max_voltage == 12.0

    def test_non_positive_limits_rejected(self):
        """Output limits must be positive."""
        with pytest.raises(ConfigurationError):
            PositionGains(max_rate=0.0)
        with pytest.raises(ConfigurationError):
            RateGains(max_voltage=-1.0)

    def test_non_finite_gain_rejected(self):
        """Gains must be finite numbers."""
        with pytest.raises(ConfigurationError):
            RateGains(kp=float("nan"))
        with pytest.raises(ConfigurationError):
            PositionGains(kp=float("inf"))
        with pytest.raises(ConfigurationError):
            RateGains(kff="fast")

    def test_configuration_error_is_value_error(self):
        """ConfigurationError should be catchable as ValueError."""
        with pytest.raises(ValueError):
            RateGains(max_voltage=0.0)


class TestModuleSettings:
    """Tests for ModuleSettings validation."""

    def test_defaults(self):
        """Only a name should be required."""
        settings = ModuleSettings(name="fl")

        assert settings.translation == (0.0, 0.0)
        assert settings.wheel_radius > 0

    @pytest.mark.parametrize("radius", [0.0, -0.05, float("nan")])
    def test_bad_wheel_radius(self, radius):
        """Wheel radius must be positive and finite."""
        with pytest.raises(ConfigurationError):
            ModuleSettings(name="fl", wheel_radius=radius)

    def test_zero_drive_ratio(self):
        """A zero gear ratio should be rejected."""
        with pytest.raises(ConfigurationError):
            ModuleSettings(name="fl", drive_ratio=0.0)

    def test_empty_name(self):
        """Module name must not be empty."""
        with pytest.raises(ConfigurationError):
            ModuleSettings(name="")

    def test_bad_translation(self):
        """Translation must be an (x, y) pair."""
        with pytest.raises(ConfigurationError):
            ModuleSettings(name="fl", translation=(1.0,))

    def test_wrong_gain_type(self):
        """Gains must be the matching dataclass."""
        with pytest.raises(ConfigurationError):
            ModuleSettings(name="fl", angle_rate_gains=PositionGains())

    def test_translation_list_normalized(self):
        """A list translation should be stored as a tuple."""
        settings = ModuleSettings(name="fl", translation=[0.3, -0.3])

        assert settings.translation == (0.3, -0.3)

    def test_motor_to_distance_ratio(self):
        """Ratio should be drive_ratio * 2 * pi * wheel_radius."""
        settings = ModuleSettings(name="fl", drive_ratio=0.5, wheel_radius=0.1)

        assert settings.motor_to_distance_ratio == pytest.approx(0.1 * math.pi)

    def test_from_dict_nested_gains(self):
        """from_dict should build nested gain objects."""
        settings = ModuleSettings.from_dict({
            "name": "fr",
            "angle_position_gains": {"kp": 5.0},
            "drive_rate_gains": {"kp": 1.0, "kff": 2.0},
        })

        assert settings.angle_position_gains.kp == 5.0
        assert settings.drive_rate_gains.kff == 2.0

    def test_from_dict_unknown_key(self):
        """Unknown keys should be rejected."""
        with pytest.raises(ConfigurationError, match="wheel_diameter"):
            ModuleSettings.from_dict({"name": "fr", "wheel_diameter": 0.1})


class TestIntakeSettings:
    """Tests for IntakeSettings."""

    def test_defaults(self):
        """Default intake settings should be full > slow."""
        settings = IntakeSettings()

        assert settings.full_speed > settings.slow_speed

    def test_non_finite_rejected(self):
        """Voltages must be finite."""
        with pytest.raises(ConfigurationError):
            IntakeSettings(full_speed=float("inf"))


class TestRobotConfig:
    """Tests for RobotConfig and JSON loading."""

    def test_default_four_modules(self):
        """Default robot should have four uniquely named modules."""
        config = RobotConfig.default()

        assert len(config.modules) == 4
        assert len({m.name for m in config.modules}) == 4

    def test_duplicate_names_rejected(self):
        """Module names must be unique."""
        with pytest.raises(ConfigurationError):
            RobotConfig(modules=(ModuleSettings(name="a"), ModuleSettings(name="a")))

    def test_bad_period(self):
        """Period must be positive."""
        with pytest.raises(ConfigurationError):
            RobotConfig(period_s=0.0)

    def test_load_json(self, tmp_path):
        """load_robot_config should build validated settings from JSON."""
        path = tmp_path / "robot.json"
        path.write_text(json.dumps({
            "period_s": 0.01,
            "intake": {"full_speed": 10.0, "slow_speed": 4.0},
            "modules": [
                {"name": "fl", "translation": [0.3, 0.3]},
                {"name": "fr", "translation": [0.3, -0.3], "wheel_radius": 0.04},
            ],
        }))

        config = load_robot_config(path)

        assert config.period_s == 0.01
        assert config.intake.slow_speed == 4.0
        assert [m.name for m in config.modules] == ["fl", "fr"]
        assert config.modules[1].wheel_radius == 0.04

    def test_load_invalid_settings(self, tmp_path):
        """Invalid settings in the file should raise ConfigurationError."""
        path = tmp_path / "robot.json"
        path.write_text(json.dumps({"modules": [{"name": "fl", "wheel_radius": 0}]}))

        with pytest.raises(ConfigurationError):
            load_robot_config(path)

    def test_load_invalid_json(self, tmp_path):
        """Malformed JSON should raise ConfigurationError."""
        path = tmp_path / "robot.json"
        path.write_text("{not json")

        with pytest.raises(ConfigurationError):
            load_robot_config(path)
