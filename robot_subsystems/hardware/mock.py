"""
Mock Hardware
=============

Simulated adapters for running the control core without a robot.

Each mock integrates the last commanded voltage into a simple first-order
motor model when ``periodic()`` is called, so registering a mock with the
scheduler after its controller closes the loop once per cycle.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..control.angle_optimizer import normalize_degrees
from .interfaces import IntakeStageHardware, SwerveModuleHardware

logger = logging.getLogger(__name__)


@dataclass
class MotorModelConfig:
    """First-order motor model: rate approaches gain * volts with time constant tau."""
    rate_per_volt: float = 1.0      # Steady-state rate per volt
    time_constant_s: float = 0.05   # Response time constant
    max_voltage: float = 12.0       # Supply clamp


class _MotorModel:
    """Rate and position of one simulated motor axis."""

    def __init__(self, config: MotorModelConfig):
        self.config = config
        self.voltage = 0.0
        self.rate = 0.0
        self.position = 0.0

    def command(self, voltage: float):
        self.voltage = float(np.clip(voltage, -self.config.max_voltage, self.config.max_voltage))

    def step(self, dt: float):
        target_rate = self.voltage * self.config.rate_per_volt
        alpha = min(1.0, dt / self.config.time_constant_s)
        self.rate += (target_rate - self.rate) * alpha
        self.position += self.rate * dt


class MockSwerveModuleHardware(SwerveModuleHardware):
    """
    Simulated swerve module.

    Args:
        angle_model: Angle motor model (rate in deg/s per volt)
        drive_model: Drive motor model (speed in m/s per volt)
        dt: Simulation step per ``periodic()`` call (seconds)
        initial_angle: Starting heading (degrees)
    """

    def __init__(self, angle_model: Optional[MotorModelConfig] = None,
                 drive_model: Optional[MotorModelConfig] = None,
                 dt: float = 0.02, initial_angle: float = 0.0):
        self.dt = dt
        self._angle = _MotorModel(angle_model or MotorModelConfig(rate_per_volt=90.0))
        self._drive = _MotorModel(drive_model or MotorModelConfig(rate_per_volt=0.4))
        self._angle.position = normalize_degrees(initial_angle)
        self._commands_received = 0

    def get_angle_position(self) -> float:
        return self._angle.position

    def get_angle_rate(self) -> float:
        return self._angle.rate

    def get_angle_voltage(self) -> float:
        return self._angle.voltage

    def get_drive_position(self) -> float:
        return self._drive.position

    def get_drive_rate(self) -> float:
        return self._drive.rate

    def get_drive_voltage(self) -> float:
        return self._drive.voltage

    def set_angle_voltage(self, voltage: float) -> None:
        self._angle.command(voltage)
        self._commands_received += 1

    def set_drive_voltage(self, voltage: float) -> None:
        self._drive.command(voltage)
        self._commands_received += 1

    def periodic(self):
        """Advance the simulation by one step."""
        self._angle.step(self.dt)
        self._angle.position = normalize_degrees(self._angle.position)
        self._drive.step(self.dt)

    @property
    def commands_received(self) -> int:
        return self._commands_received


@dataclass
class IntakeTrackConfig:
    """Geometry of a simulated intake stage (metres along the track)."""
    slowdown_position: Optional[float] = 0.25   # None for no slowdown sensor
    stop_position: float = 0.35
    metres_per_volt_s: float = 0.1              # Piece speed per volt
    amps_per_volt: float = 0.8                  # Motor current per volt


class MockIntakeStageHardware(IntakeStageHardware):
    """
    Simulated intake stage carrying one game piece along a track.

    ``load_piece()`` puts a piece at the infeed, ``remove_piece()`` hands it
    off to the next stage. ``outfeed_ready`` models the next stage.
    """

    def __init__(self, config: Optional[IntakeTrackConfig] = None, dt: float = 0.02):
        self.config = config or IntakeTrackConfig()
        self.dt = dt
        self.outfeed_ready = False
        self._voltage = 0.0
        self._piece_position: Optional[float] = None

    def load_piece(self):
        """Place a game piece at the infeed."""
        self._piece_position = 0.0
        logger.debug("Mock intake: piece loaded")

    def remove_piece(self):
        """Hand the game piece off to the next stage."""
        self._piece_position = None
        logger.debug("Mock intake: piece removed")

    @property
    def piece_position(self) -> Optional[float]:
        return self._piece_position

    def is_infeed_ready(self) -> bool:
        return self._piece_position is not None

    def is_outfeed_ready(self) -> bool:
        return self.outfeed_ready

    def at_outfeed_stop(self) -> bool:
        return (self._piece_position is not None
                and self._piece_position >= self.config.stop_position)

    def at_slowdown(self) -> Optional[bool]:
        if self.config.slowdown_position is None:
            return None
        return (self._piece_position is not None
                and self._piece_position >= self.config.slowdown_position)

    def get_voltage(self) -> float:
        return self._voltage

    def get_current(self) -> float:
        return abs(self._voltage) * self.config.amps_per_volt

    def set_voltage(self, voltage: float) -> None:
        self._voltage = float(voltage)

    def periodic(self):
        """Advance the piece by one step."""
        if self._piece_position is None:
            return
        moved = self._piece_position + self._voltage * self.config.metres_per_volt_s * self.dt
        # A piece past the stop sensor is held by the next stage's rollers
        self._piece_position = float(np.clip(moved, 0.0, self.config.stop_position))
