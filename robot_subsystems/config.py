"""
Subsystem Configuration
=======================

Settings objects for swerve modules and intake stages.

All settings are frozen dataclasses validated on construction, so a bad
value (zero wheel radius, zero gear ratio, negative output limit) is
rejected before a controller exists rather than on the first cycle.
"""

import json
import math
import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

from .errors import ConfigurationError

logger = logging.getLogger(__name__)


def _require_finite(owner: str, name: str, value: float):
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        raise ConfigurationError(f"{owner}.{name} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise ConfigurationError(f"{owner}.{name} must be finite, got {value!r}")


def _require_positive(owner: str, name: str, value: float):
    _require_finite(owner, name, value)
    if value <= 0:
        raise ConfigurationError(f"{owner}.{name} must be positive, got {value!r}")


def _build(cls, data: Dict[str, Any]):
    """Construct a settings dataclass from a dict, rejecting unknown keys."""
    if not isinstance(data, dict):
        raise ConfigurationError(f"{cls.__name__} expects a mapping, got {type(data).__name__}")
    known = {f.name for f in fields(cls)}
    unknown = set(data) - known
    if unknown:
        raise ConfigurationError(
            f"Unknown {cls.__name__} keys: {', '.join(sorted(unknown))}"
        )
    try:
        return cls(**data)
    except TypeError as e:
        raise ConfigurationError(f"Invalid {cls.__name__}: {e}") from e


@dataclass(frozen=True)
class PositionGains:
    """Gains for a position stage (position error -> target rate)."""
    kp: float = 10.0                # (deg/s) per degree of error
    max_rate: float = 720.0         # deg/s output clamp
    continuous: bool = True         # Wrap error into (-180, 180]

    def __post_init__(self):
        _require_finite("PositionGains", "kp", self.kp)
        _require_positive("PositionGains", "max_rate", self.max_rate)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PositionGains":
        return _build(cls, data)


@dataclass(frozen=True)
class RateGains:
    """Gains for a rate stage (rate error -> voltage)."""
    kp: float = 0.01                # volts per unit of rate error
    kff: float = 0.0                # volts per unit of target rate
    max_voltage: float = 12.0       # output clamp (volts)

    def __post_init__(self):
        _require_finite("RateGains", "kp", self.kp)
        _require_finite("RateGains", "kff", self.kff)
        _require_positive("RateGains", "max_voltage", self.max_voltage)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RateGains":
        return _build(cls, data)


@dataclass(frozen=True)
class ModuleSettings:
    """
    Swerve module settings.

    Attributes:
        name: Human friendly module name (used for logs and telemetry)
        translation: Module position relative to robot centre (x, y) in metres
        drive_ratio: Wheel rotations per drive motor rotation
        wheel_radius: Drive wheel radius in metres
        angle_position_gains: Angle position stage gains
        angle_rate_gains: Angle rate stage gains
        drive_rate_gains: Drive rate stage gains
    """
    name: str
    translation: Tuple[float, float] = (0.0, 0.0)
    drive_ratio: float = 1.0 / 6.75
    wheel_radius: float = 0.0508
    angle_position_gains: PositionGains = field(default_factory=PositionGains)
    angle_rate_gains: RateGains = field(default_factory=lambda: RateGains(kp=0.02, kff=0.01))
    drive_rate_gains: RateGains = field(default_factory=lambda: RateGains(kp=0.5, kff=2.5))

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name:
            raise ConfigurationError("ModuleSettings.name must be a non-empty string")

        owner = f"ModuleSettings[{self.name}]"
        if not isinstance(self.translation, (tuple, list)) or len(self.translation) != 2:
            raise ConfigurationError(f"{owner}.translation must be an (x, y) pair")
        for value in self.translation:
            _require_finite(owner, "translation", value)
        # Frozen: normalise lists from JSON into a tuple
        object.__setattr__(self, "translation", tuple(float(v) for v in self.translation))

        _require_finite(owner, "drive_ratio", self.drive_ratio)
        if self.drive_ratio == 0:
            raise ConfigurationError(f"{owner}.drive_ratio must be non-zero")
        _require_positive(owner, "wheel_radius", self.wheel_radius)

        for name, expected in (("angle_position_gains", PositionGains),
                               ("angle_rate_gains", RateGains),
                               ("drive_rate_gains", RateGains)):
            if not isinstance(getattr(self, name), expected):
                raise ConfigurationError(
                    f"{owner}.{name} must be {expected.__name__}, "
                    f"got {type(getattr(self, name)).__name__}"
                )

    @property
    def motor_to_distance_ratio(self) -> float:
        """Metres travelled per drive motor rotation."""
        return self.drive_ratio * 2 * math.pi * self.wheel_radius

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ModuleSettings":
        data = dict(data)
        if "angle_position_gains" in data:
            data["angle_position_gains"] = PositionGains.from_dict(data["angle_position_gains"])
        for key in ("angle_rate_gains", "drive_rate_gains"):
            if key in data:
                data[key] = RateGains.from_dict(data[key])
        return _build(cls, data)


@dataclass(frozen=True)
class IntakeSettings:
    """Intake stage settings."""
    full_speed: float = 8.0         # Full speed voltage
    slow_speed: float = 3.0         # Slowdown voltage

    def __post_init__(self):
        _require_finite("IntakeSettings", "full_speed", self.full_speed)
        _require_finite("IntakeSettings", "slow_speed", self.slow_speed)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "IntakeSettings":
        return _build(cls, data)


@dataclass(frozen=True)
class RobotConfig:
    """Top-level configuration for a robot built from these subsystems."""
    modules: Tuple[ModuleSettings, ...] = ()
    intake: IntakeSettings = field(default_factory=IntakeSettings)
    period_s: float = 0.02          # Control cycle period (50Hz)

    def __post_init__(self):
        _require_positive("RobotConfig", "period_s", self.period_s)
        object.__setattr__(self, "modules", tuple(self.modules))
        names = [m.name for m in self.modules]
        if len(names) != len(set(names)):
            raise ConfigurationError(f"Duplicate module names: {names}")

    @classmethod
    def default(cls) -> "RobotConfig":
        """Four-module square chassis, 0.3m from centre on each axis."""
        offsets = {
            "front_left": (0.3, 0.3),
            "front_right": (0.3, -0.3),
            "back_left": (-0.3, 0.3),
            "back_right": (-0.3, -0.3),
        }
        return cls(modules=tuple(
            ModuleSettings(name=name, translation=offset)
            for name, offset in offsets.items()
        ))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RobotConfig":
        data = dict(data)
        modules: List[ModuleSettings] = [
            ModuleSettings.from_dict(m) for m in data.pop("modules", [])
        ]
        if "intake" in data:
            data["intake"] = IntakeSettings.from_dict(data["intake"])
        data["modules"] = tuple(modules)
        return _build(cls, data)


def load_robot_config(path: Union[str, Path]) -> RobotConfig:
    """
    Load robot configuration from a JSON file.

    Args:
        path: Path to JSON document

    Returns:
        Validated RobotConfig

    Raises:
        ConfigurationError: If the file is not valid JSON or holds invalid settings
    """
    path = Path(path)
    try:
        with open(path) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in {path}: {e}") from e

    config = RobotConfig.from_dict(data)
    logger.info(f"Loaded config from {path}: {len(config.modules)} modules")
    return config
