"""
Intake Stage Sequencer
======================

Per-cycle control of one game piece stage of an intake.

Automatic mode runs the stage while a piece is available and nothing is
at the outfeed stop. If a slowdown checkpoint is installed and the piece
has reached it while the next stage is not ready, the stage runs at slow
speed. A stage without a slowdown sensor simply never slows down.

Manual mode runs at full or slow speed, forward or reverse, as set by
the operator.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..config import IntakeSettings
from ..errors import ConfigurationError
from ..hardware.interfaces import IntakeStageHardware
from ..telemetry import AxisTelemetry, NullTelemetrySink, TelemetrySink
from .mode_arbiter import AutomaticMode, ManualMode, ModeArbiter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IntakeSensorSnapshot:
    """Intake sensor readings taken once per cycle."""
    infeed_ready: bool = False
    outfeed_ready: bool = False
    at_outfeed_stop: bool = False
    at_slowdown: Optional[bool] = None      # None: no slowdown checkpoint

    @classmethod
    def from_hardware(cls, hardware: IntakeStageHardware) -> "IntakeSensorSnapshot":
        return cls(
            infeed_ready=bool(hardware.is_infeed_ready()),
            outfeed_ready=bool(hardware.is_outfeed_ready()),
            at_outfeed_stop=bool(hardware.at_outfeed_stop()),
            at_slowdown=hardware.at_slowdown(),
        )


@dataclass(frozen=True)
class CycleResult:
    """Outcome of one intake cycle."""
    mode: str
    voltage: float
    complete: bool = False


def automatic_voltage(sensors: IntakeSensorSnapshot, settings: IntakeSettings) -> float:
    """Voltage for automatic sequencing given this cycle's sensor readings."""
    run_stage = not sensors.at_outfeed_stop and sensors.infeed_ready
    slow_down = (sensors.at_slowdown is not None
                 and sensors.at_slowdown
                 and not sensors.outfeed_ready)

    if not run_stage:
        return 0.0
    return settings.slow_speed if slow_down else settings.full_speed


def automatic_complete(sensors: IntakeSensorSnapshot) -> bool:
    """True once a piece is staged at the outfeed stop."""
    return sensors.at_outfeed_stop


def manual_voltage(mode: ManualMode, settings: IntakeSettings) -> float:
    """Voltage for manual control."""
    voltage = settings.slow_speed if mode.slowdown else settings.full_speed
    return voltage if mode.forward else -voltage


class IntakeStage:
    """
    Control core for one intake stage.

    Args:
        name: Stage name for logs and telemetry
        settings: Stage voltages
        hardware: Adapter for the stage motor and sensors
        telemetry: Telemetry sink (defaults to discarding)
    """

    def __init__(self, name: str, settings: IntakeSettings,
                 hardware: IntakeStageHardware,
                 telemetry: Optional[TelemetrySink] = None):
        if not isinstance(name, str) or not name:
            raise ConfigurationError("IntakeStage name must be a non-empty string")
        if not isinstance(settings, IntakeSettings):
            raise ConfigurationError(
                f"settings must be IntakeSettings, got {type(settings).__name__}"
            )
        if not isinstance(hardware, IntakeStageHardware):
            raise ConfigurationError(
                f"hardware must implement IntakeStageHardware, got {type(hardware).__name__}"
            )

        self.name = name
        self.settings = settings
        self.hardware = hardware
        self.telemetry = telemetry if telemetry is not None else NullTelemetrySink()

        self._modes = ModeArbiter(name)
        self._last_result = CycleResult(mode=AutomaticMode.name, voltage=0.0)

        logger.info(
            f"Intake stage '{name}' created: full={settings.full_speed:.1f}V "
            f"slow={settings.slow_speed:.1f}V"
        )

    def activate_manual(self, forward: bool = True, slowdown: bool = False):
        """Run manually from the next cycle."""
        self._modes.activate_manual(forward, slowdown)

    def activate_auto(self):
        """Cancel manual control and run automatically from the next cycle."""
        self._modes.activate_auto()

    def set_manual_parameters(self, forward: bool, slowdown: bool):
        """Change manual direction and speed without changing mode."""
        self._modes.set_manual_parameters(forward, slowdown)

    def read_sensors(self) -> IntakeSensorSnapshot:
        return IntakeSensorSnapshot.from_hardware(self.hardware)

    def periodic(self) -> CycleResult:
        """
        Run one control cycle.

        Only the latched mode's decision function runs; sensors are not
        read in manual mode.
        """
        mode = self._modes.latch()

        if isinstance(mode, ManualMode):
            voltage = manual_voltage(mode, self.settings)
            result = CycleResult(mode=mode.name, voltage=voltage)
        else:
            sensors = self.read_sensors()
            voltage = automatic_voltage(sensors, self.settings)
            result = CycleResult(
                mode=mode.name,
                voltage=voltage,
                complete=automatic_complete(sensors),
            )
            if result.complete and not self._last_result.complete:
                logger.debug(f"{self.name}: piece staged at outfeed")

        applied = self.hardware.get_voltage()
        self.hardware.set_voltage(voltage)
        self.telemetry.publish(self.name, "roller", AxisTelemetry(
            target=voltage,
            current=applied,
            error=voltage - applied,
            voltage=voltage,
        ))

        self._last_result = result
        return result

    def is_cycle_complete(self) -> bool:
        """True if the last automatic cycle found a piece at the outfeed stop."""
        return self._last_result.complete

    @property
    def mode(self):
        return self._modes.active_mode

    @property
    def arbiter(self) -> ModeArbiter:
        return self._modes

    @property
    def last_result(self) -> CycleResult:
        return self._last_result

    @property
    def stats(self) -> dict:
        return {
            "name": self.name,
            "voltage": self._last_result.voltage,
            "current": self.hardware.get_current(),
            "complete": self._last_result.complete,
            **self._modes.stats,
        }
