"""
Shared test fixtures for subsystem unit tests.
"""

import pytest
from unittest.mock import Mock

from robot_subsystems.config import (
    IntakeSettings, ModuleSettings, PositionGains, RateGains,
)
from robot_subsystems.hardware.interfaces import IntakeStageHardware, SwerveModuleHardware
from robot_subsystems.hardware.mock import MockIntakeStageHardware, MockSwerveModuleHardware
from robot_subsystems.telemetry import RecordingTelemetrySink


class PassThroughStage:
    """Feedback stage returning its target unchanged."""

    def __init__(self):
        self.calls = []

    def update(self, current_position, current_rate, target):
        self.calls.append((current_position, current_rate, target))
        return target


@pytest.fixture
def module_settings():
    """Front-left module settings with explicit gains."""
    return ModuleSettings(
        name="front_left",
        translation=(0.3, 0.3),
        drive_ratio=0.148,
        wheel_radius=0.05,
        angle_position_gains=PositionGains(kp=10.0, max_rate=720.0),
        angle_rate_gains=RateGains(kp=0.02, kff=0.01, max_voltage=12.0),
        drive_rate_gains=RateGains(kp=0.5, kff=2.5, max_voltage=12.0),
    )


@pytest.fixture
def intake_settings():
    """Intake stage settings: 8V full, 3V slow."""
    return IntakeSettings(full_speed=8.0, slow_speed=3.0)


@pytest.fixture
def swerve_hardware():
    """Mock swerve adapter with all measurements at zero."""
    hw = Mock(spec=SwerveModuleHardware)
    hw.get_angle_position.return_value = 0.0
    hw.get_angle_rate.return_value = 0.0
    hw.get_angle_voltage.return_value = 0.0
    hw.get_drive_position.return_value = 0.0
    hw.get_drive_rate.return_value = 0.0
    hw.get_drive_voltage.return_value = 0.0
    return hw


@pytest.fixture
def intake_hardware():
    """Mock intake adapter: piece available, nothing staged, no slowdown sensor."""
    hw = Mock(spec=IntakeStageHardware)
    hw.is_infeed_ready.return_value = True
    hw.is_outfeed_ready.return_value = False
    hw.at_outfeed_stop.return_value = False
    hw.at_slowdown.return_value = None
    hw.get_voltage.return_value = 0.0
    hw.get_current.return_value = 0.0
    return hw


@pytest.fixture
def simulated_module():
    """Simulated swerve module hardware."""
    return MockSwerveModuleHardware(dt=0.02)


@pytest.fixture
def simulated_intake():
    """Simulated intake stage hardware with a slowdown sensor."""
    return MockIntakeStageHardware(dt=0.02)


@pytest.fixture
def telemetry():
    """In-memory telemetry sink."""
    return RecordingTelemetrySink()


@pytest.fixture
def pass_through_stage():
    return PassThroughStage
