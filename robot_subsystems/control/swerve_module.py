"""
Swerve Module Controller
========================

Per-cycle control of one steerable drive module.

Each cycle:
    1. Snapshot the desired state and read measurements from the adapter
    2. Optimize the desired heading against the measured heading
    3. Angle cascade (position -> rate -> volts) toward the optimized heading
    4. Drive rate loop toward the optimized speed
    5. Write both voltages to the adapter and publish telemetry

There is no manual mode for a swerve module; it always runs automatically.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Union

from ..config import ModuleSettings
from ..errors import ConfigurationError
from ..hardware.interfaces import SwerveModuleHardware
from ..telemetry import AxisTelemetry, NullTelemetrySink, TelemetrySink
from .angle_optimizer import normalize_degrees, optimize_module_state
from .cascade import CascadeController, FeedbackStage, PositionStage, RateLoop, RateStage
from .mode_arbiter import AutomaticMode, ModeArbiter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DesiredModuleState:
    """Target heading (degrees) and linear speed (m/s) for a module."""
    angle: float = 0.0
    speed: float = 0.0

    def optimized(self, current_angle: float) -> "DesiredModuleState":
        """Equivalent state needing at most 90° of rotation from current_angle."""
        angle, speed = optimize_module_state(current_angle, self.angle, self.speed)
        return DesiredModuleState(angle=angle, speed=speed)


@dataclass(frozen=True)
class MeasuredModuleState:
    """Module measurements read once at the start of a cycle."""
    angle: float = 0.0              # degrees
    angle_rate: float = 0.0         # deg/s
    drive_position: float = 0.0     # metres
    drive_rate: float = 0.0         # m/s
    angle_voltage: float = 0.0
    drive_voltage: float = 0.0

    @classmethod
    def from_hardware(cls, hardware: SwerveModuleHardware) -> "MeasuredModuleState":
        return cls(
            angle=hardware.get_angle_position(),
            angle_rate=hardware.get_angle_rate(),
            drive_position=hardware.get_drive_position(),
            drive_rate=hardware.get_drive_rate(),
            angle_voltage=hardware.get_angle_voltage(),
            drive_voltage=hardware.get_drive_voltage(),
        )


@dataclass(frozen=True)
class ModulePosition:
    """Odometry view of a module."""
    distance: float = 0.0           # metres
    angle: float = 0.0              # degrees


@dataclass(frozen=True)
class ModuleState:
    """Velocity view of a module."""
    speed: float = 0.0              # m/s
    angle: float = 0.0              # degrees


@dataclass(frozen=True)
class SwerveCommand:
    """Voltages emitted by one cycle, plus the optimized target they track."""
    mode: str = AutomaticMode.name
    angle_voltage: float = 0.0
    drive_voltage: float = 0.0
    target_angle: float = 0.0
    target_speed: float = 0.0


class SwerveModuleController:
    """
    Control core for one swerve module.

    Args:
        settings: Module settings (validated on construction)
        hardware: Adapter for the module's motors and sensors
        telemetry: Telemetry sink (defaults to discarding)
        angle_position_stage: Override for the angle position stage
        angle_rate_stage: Override for the angle rate stage
        drive_rate_stage: Override for the drive rate stage

    Stage overrides replace the reference stages built from the settings
    gains with any object implementing ``FeedbackStage``.
    """

    def __init__(self, settings: ModuleSettings,
                 hardware: SwerveModuleHardware,
                 telemetry: Optional[TelemetrySink] = None,
                 angle_position_stage: Optional[FeedbackStage] = None,
                 angle_rate_stage: Optional[FeedbackStage] = None,
                 drive_rate_stage: Optional[FeedbackStage] = None):
        if not isinstance(settings, ModuleSettings):
            raise ConfigurationError(
                f"settings must be ModuleSettings, got {type(settings).__name__}"
            )
        if not isinstance(hardware, SwerveModuleHardware):
            raise ConfigurationError(
                f"hardware must implement SwerveModuleHardware, got {type(hardware).__name__}"
            )

        self.settings = settings
        self.hardware = hardware
        self.telemetry = telemetry if telemetry is not None else NullTelemetrySink()

        if angle_position_stage is None:
            angle_position_stage = PositionStage(settings.angle_position_gains)
        if angle_rate_stage is None:
            angle_rate_stage = RateStage(settings.angle_rate_gains)
        if drive_rate_stage is None:
            drive_rate_stage = RateStage(settings.drive_rate_gains)

        self._angle_ctrl = CascadeController(angle_position_stage, angle_rate_stage)
        self._drive_ctrl = RateLoop(drive_rate_stage)

        self._modes = ModeArbiter(settings.name, allow_manual=False)
        self._desired = DesiredModuleState()
        self._last_command = SwerveCommand()
        self._cycle_count = 0

        logger.info(f"Swerve module '{settings.name}' created at {settings.translation}")

    @property
    def name(self) -> str:
        return self.settings.name

    def set_desired_state(self, state: Union[DesiredModuleState, float],
                          speed: Optional[float] = None):
        """
        Replace the desired module state.

        Accepts either a ``DesiredModuleState`` or ``(angle, speed)``.
        The whole state is replaced at once; the next cycle uses it.
        """
        if isinstance(state, DesiredModuleState):
            if speed is not None:
                raise TypeError("speed must not be given with a DesiredModuleState")
            self._desired = state
        else:
            self._desired = DesiredModuleState(angle=float(state), speed=float(speed or 0.0))

    def get_desired_state(self) -> DesiredModuleState:
        return self._desired

    def activate_auto(self):
        """Run automatically (the only mode a swerve module has)."""
        self._modes.activate_auto()

    def get_position(self) -> ModulePosition:
        """Current drive distance and heading, read from the adapter."""
        return ModulePosition(
            distance=self.hardware.get_drive_position(),
            angle=self.hardware.get_angle_position(),
        )

    def get_state(self) -> ModuleState:
        """Current drive speed and heading, read from the adapter."""
        return ModuleState(
            speed=self.hardware.get_drive_rate(),
            angle=self.hardware.get_angle_position(),
        )

    def motor_to_distance_ratio(self) -> float:
        """Metres travelled per drive motor rotation."""
        return self.settings.motor_to_distance_ratio

    def periodic(self) -> SwerveCommand:
        """
        Run one control cycle.

        Returns:
            The voltages written to the adapter this cycle
        """
        mode = self._modes.latch()
        desired = self._desired
        measured = MeasuredModuleState.from_hardware(self.hardware)

        target = desired.optimized(measured.angle)
        angle_volts = self._update_angle(measured, target.angle)
        drive_volts = self._update_drive(measured, target.speed)

        self.hardware.set_angle_voltage(angle_volts)
        self.hardware.set_drive_voltage(drive_volts)

        self._publish(measured, target, angle_volts, drive_volts)

        self._cycle_count += 1
        self._last_command = SwerveCommand(
            mode=mode.name,
            angle_voltage=angle_volts,
            drive_voltage=drive_volts,
            target_angle=target.angle,
            target_speed=target.speed,
        )
        return self._last_command

    def _update_angle(self, measured: MeasuredModuleState, target_angle: float) -> float:
        return self._angle_ctrl.update(measured.angle, measured.angle_rate, target_angle)

    def _update_drive(self, measured: MeasuredModuleState, target_speed: float) -> float:
        return self._drive_ctrl.update(measured.drive_rate, target_speed)

    def _publish(self, measured: MeasuredModuleState, target: DesiredModuleState,
                 angle_volts: float, drive_volts: float):
        self.telemetry.publish(self.name, "angle", AxisTelemetry(
            target=target.angle,
            current=measured.angle,
            error=normalize_degrees(target.angle - measured.angle),
            voltage=angle_volts,
        ))
        self.telemetry.publish(self.name, "drive", AxisTelemetry(
            target=target.speed,
            current=measured.drive_rate,
            error=target.speed - measured.drive_rate,
            voltage=drive_volts,
        ))

    @property
    def last_command(self) -> SwerveCommand:
        return self._last_command

    @property
    def stats(self) -> dict:
        return {
            "name": self.name,
            "cycles": self._cycle_count,
            "angle_voltage": self._last_command.angle_voltage,
            "drive_voltage": self._last_command.drive_voltage,
            "target_rate": self._angle_ctrl.last_target_rate,
            **self._modes.stats,
        }
