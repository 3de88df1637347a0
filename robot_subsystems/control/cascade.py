"""
Cascade Controller
==================

Wiring of single-axis feedback stages into the loops a swerve module
runs each cycle.

Angle axis (two stages):

    target angle --> [position stage] --> target rate --> [rate stage] --> volts
                          ^                                    ^
                  measured angle/rate                  measured angle/rate

Drive axis (one stage):

    target speed --> [rate stage] --> volts
                          ^
                  measured drive rate

The inner stage is always fed the measured rate, never the rate the outer
stage asked for.

The control law inside each stage is pluggable through ``FeedbackStage``.
``PositionStage`` and ``RateStage`` are small reference implementations
used by default and by the simulator.
"""

import math
import logging
from typing import Optional, Protocol, runtime_checkable

from ..config import PositionGains, RateGains
from ..errors import ConfigurationError
from .angle_optimizer import normalize_degrees

logger = logging.getLogger(__name__)


@runtime_checkable
class FeedbackStage(Protocol):
    """Single-input single-output feedback stage."""

    def update(self, current_position: float, current_rate: float,
               target: float) -> float:
        """Return the stage output for one cycle."""
        ...


def _clamp(value: float, limit: float) -> float:
    return max(-limit, min(limit, value))


class PositionStage:
    """Proportional position stage with rate limiting: error -> target rate."""

    def __init__(self, gains: Optional[PositionGains] = None):
        self.gains = gains or PositionGains()

    def update(self, current_position: float, current_rate: float,
               target: float) -> float:
        error = target - current_position
        if self.gains.continuous:
            error = normalize_degrees(error)
        return _clamp(self.gains.kp * error, self.gains.max_rate)


class RateStage:
    """Feed-forward plus proportional rate stage: rate error -> voltage."""

    def __init__(self, gains: Optional[RateGains] = None):
        self.gains = gains or RateGains()

    def update(self, current_position: float, current_rate: float,
               target: float) -> float:
        volts = self.gains.kff * target + self.gains.kp * (target - current_rate)
        return _clamp(volts, self.gains.max_voltage)


def _check_stage(stage, role: str):
    if not isinstance(stage, FeedbackStage):
        raise ConfigurationError(
            f"{role} stage must provide update(current_position, current_rate, target), "
            f"got {type(stage).__name__}"
        )


class CascadeController:
    """
    Outer position stage chained into an inner rate stage.

    Args:
        outer: Stage mapping (position, rate, target position) -> target rate
        inner: Stage mapping (position, rate, target rate) -> command
    """

    def __init__(self, outer: FeedbackStage, inner: FeedbackStage):
        _check_stage(outer, "Outer")
        _check_stage(inner, "Inner")
        self.outer = outer
        self.inner = inner
        self.last_target_rate = 0.0

    def update(self, current_position: float, current_rate: float,
               target_position: float) -> float:
        """
        Run both stages for one cycle.

        Returns:
            Command value (volts) from the inner stage
        """
        target_rate = self.outer.update(current_position, current_rate, target_position)
        self.last_target_rate = target_rate
        command = self.inner.update(current_position, current_rate, target_rate)

        if not math.isfinite(command):
            logger.warning(f"Non-finite cascade output {command}, commanding 0V")
            return 0.0
        return command


class RateLoop:
    """
    Single rate stage for an axis with no position loop.

    The stage is given 0 as its position since only the rate is
    controlled.
    """

    def __init__(self, stage: FeedbackStage):
        _check_stage(stage, "Rate")
        self.stage = stage

    def update(self, current_rate: float, target_rate: float) -> float:
        command = self.stage.update(0.0, current_rate, target_rate)
        if not math.isfinite(command):
            logger.warning(f"Non-finite rate loop output {command}, commanding 0V")
            return 0.0
        return command
