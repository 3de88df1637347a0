"""
Integration tests for the simulated robot and CLI entry point.
"""

import json
import pytest

from robot_subsystems.config import RobotConfig
from robot_subsystems.control.angle_optimizer import shortest_rotation
from robot_subsystems.main import SimulatedRobot, SimulationConfig, main
from robot_subsystems.telemetry import RecordingTelemetrySink


class TestSimulatedRobot:
    """Tests for SimulatedRobot."""

    def test_builds_default_robot(self):
        """Default config should build four modules and one intake."""
        robot = SimulatedRobot(RobotConfig.default(), RecordingTelemetrySink())

        assert len(robot.modules) == 4
        assert robot.scheduler.stats["subsystems"] == 10

    def test_keeps_empty_sink(self):
        """An empty recording sink should reach every subsystem."""
        sink = RecordingTelemetrySink()
        robot = SimulatedRobot(RobotConfig.default(), sink)

        assert robot.telemetry is sink
        assert robot.intake.telemetry is sink
        assert all(module.telemetry is sink for module in robot.modules)

    def test_drive_and_intake(self):
        """Modules should reach the heading and the intake should stage its piece."""
        telemetry = RecordingTelemetrySink(maxlen=None)
        robot = SimulatedRobot(RobotConfig.default(), telemetry)

        robot.run(SimulationConfig(cycles=150, heading=45.0, speed=0.5))

        for module in robot.modules:
            state = module.get_state()
            assert abs(shortest_rotation(state.angle, 45.0)) < 1.0
            assert state.speed == pytest.approx(0.5, abs=0.05)
        assert robot.intake.is_cycle_complete()
        assert robot.scheduler.stats["cycles"] == 150
        # 4 modules x 2 axes + 1 intake axis per cycle
        assert len(telemetry) == 150 * 9

    def test_manual_intake(self):
        """Manual reverse should drive the intake backwards every cycle."""
        robot = SimulatedRobot(RobotConfig.default(), RecordingTelemetrySink())

        robot.run(SimulationConfig(cycles=5, manual="reverse", slow=True))

        assert robot.intake.last_result.voltage == -robot.config.intake.slow_speed

    def test_stop_zeroes_outputs(self):
        """stop() should leave every motor at zero volts."""
        robot = SimulatedRobot(RobotConfig.default(), RecordingTelemetrySink())
        robot.run(SimulationConfig(cycles=10, heading=90.0, speed=1.0))

        robot.stop()

        for hardware in robot.module_hardware.values():
            assert hardware.get_angle_voltage() == 0.0
            assert hardware.get_drive_voltage() == 0.0
        assert robot.intake_hardware.get_voltage() == 0.0


class TestMain:
    """Tests for the CLI."""

    def test_main_prints_status(self, capsys):
        """main should run and print a JSON status."""
        main(["--cycles", "20", "--heading", "30", "--speed", "0.5"])

        status = json.loads(capsys.readouterr().out)
        assert status["scheduler"]["cycles"] == 20
        assert set(status["modules"]) == {"front_left", "front_right", "back_left", "back_right"}

    def test_main_with_config(self, tmp_path, capsys):
        """main should load modules from a config file."""
        path = tmp_path / "robot.json"
        path.write_text(json.dumps({"modules": [{"name": "solo"}]}))

        main(["--config", str(path), "--cycles", "5"])

        status = json.loads(capsys.readouterr().out)
        assert list(status["modules"]) == ["solo"]

    def test_main_bad_config_exits(self, tmp_path):
        """An invalid config should exit with status 1."""
        path = tmp_path / "robot.json"
        path.write_text(json.dumps({"modules": [{"name": "bad", "drive_ratio": 0}]}))

        with pytest.raises(SystemExit) as exc:
            main(["--config", str(path)])
        assert exc.value.code == 1
