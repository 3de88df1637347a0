"""
Simulated Robot
===============

Entry point that runs the swerve modules and intake stage against mock
hardware on the cycle scheduler.
"""

import sys
import json
import signal
import argparse
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from .config import RobotConfig, load_robot_config
from .control.intake_stage import IntakeStage
from .control.swerve_module import SwerveModuleController
from .errors import ConfigurationError
from .hardware.mock import MockIntakeStageHardware, MockSwerveModuleHardware
from .scheduler import CycleScheduler
from .telemetry import LoggingTelemetrySink, TelemetrySink

logger = logging.getLogger(__name__)


@dataclass
class SimulationConfig:
    """Simulation run parameters."""
    cycles: int = 250               # 5s at 50Hz
    heading: float = 0.0            # Desired module heading (degrees)
    speed: float = 0.0              # Desired module speed (m/s)
    manual: Optional[str] = None    # "forward" / "reverse" for manual intake
    slow: bool = False              # Manual slowdown
    realtime: bool = False          # Sleep between cycles


class SimulatedRobot:
    """
    Swerve modules and one intake stage wired to mock hardware.

    Controllers are registered with the scheduler ahead of the mocks so each
    mock integrates the voltages commanded in the same cycle.
    """

    def __init__(self, config: RobotConfig, telemetry: Optional[TelemetrySink] = None):
        self.config = config
        self.telemetry = telemetry if telemetry is not None else LoggingTelemetrySink()

        self.module_hardware: Dict[str, MockSwerveModuleHardware] = {}
        self.modules: List[SwerveModuleController] = []
        for settings in config.modules:
            hardware = MockSwerveModuleHardware(dt=config.period_s)
            self.module_hardware[settings.name] = hardware
            self.modules.append(SwerveModuleController(settings, hardware, self.telemetry))

        self.intake_hardware = MockIntakeStageHardware(dt=config.period_s)
        self.intake = IntakeStage("intake", config.intake, self.intake_hardware, self.telemetry)

        self.scheduler = CycleScheduler(period_s=config.period_s)
        self.scheduler.register(*self.modules, self.intake)
        self.scheduler.register(*self.module_hardware.values(), self.intake_hardware)

    def drive(self, heading: float, speed: float):
        """Point every module at the same heading and speed."""
        for module in self.modules:
            module.set_desired_state(heading, speed)

    def run(self, sim: SimulationConfig):
        if sim.manual is not None:
            self.intake.activate_manual(forward=sim.manual == "forward", slowdown=sim.slow)
        else:
            self.intake_hardware.load_piece()

        self.drive(sim.heading, sim.speed)

        if sim.realtime:
            self.scheduler.run(cycles=sim.cycles)
        else:
            for _ in range(sim.cycles):
                self.scheduler.run_once()

    def stop(self):
        self.scheduler.stop()
        for module in self.modules:
            module.hardware.set_angle_voltage(0.0)
            module.hardware.set_drive_voltage(0.0)
        self.intake_hardware.set_voltage(0.0)
        logger.info("Simulated robot stopped")

    @property
    def status(self) -> dict:
        return {
            "scheduler": self.scheduler.stats,
            "modules": {
                m.name: {
                    "angle": round(m.get_state().angle, 2),
                    "speed": round(m.get_state().speed, 3),
                    "distance": round(m.get_position().distance, 3),
                }
                for m in self.modules
            },
            "intake": {
                **self.intake.stats,
                "piece_position": self.intake_hardware.piece_position,
            },
        }


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Swerve and intake control simulator")
    parser.add_argument("--config", "-c", default=None,
                       help="Path to robot config JSON (default: four-module chassis)")
    parser.add_argument("--cycles", "-n", type=int, default=250,
                       help="Number of cycles to run")
    parser.add_argument("--heading", type=float, default=135.0,
                       help="Desired module heading (degrees)")
    parser.add_argument("--speed", type=float, default=1.0,
                       help="Desired module speed (m/s)")
    parser.add_argument("--manual", choices=["forward", "reverse"], default=None,
                       help="Run intake in manual mode")
    parser.add_argument("--slow", action="store_true",
                       help="Manual intake at slow speed")
    parser.add_argument("--realtime", action="store_true",
                       help="Run at the configured period instead of as fast as possible")
    parser.add_argument("--verbose", "-v", action="store_true",
                       help="Verbose logging")

    args = parser.parse_args(argv)

    # Setup logging
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        config = load_robot_config(args.config) if args.config else RobotConfig.default()
        robot = SimulatedRobot(config)
    except (ConfigurationError, OSError) as e:
        logger.error(f"Failed to build robot: {e}")
        sys.exit(1)

    def signal_handler(sig, frame):
        logger.info("Shutdown signal received")
        robot.stop()

    if args.realtime:
        signal.signal(signal.SIGINT, signal_handler)
        signal.signal(signal.SIGTERM, signal_handler)

    robot.run(SimulationConfig(
        cycles=args.cycles,
        heading=args.heading,
        speed=args.speed,
        manual=args.manual,
        slow=args.slow,
        realtime=args.realtime,
    ))
    robot.stop()

    print(json.dumps(robot.status, indent=2))


if __name__ == "__main__":
    main()
