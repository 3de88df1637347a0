"""
Cycle Scheduler
===============

Fixed-period driver that calls ``periodic()`` on each registered subsystem
exactly once per cycle, in registration order.

Register controllers before the hardware they command so simulated
hardware advances after it has received the cycle's voltages.
"""

import time
import logging
from typing import Callable, List, Optional, Protocol

from .errors import ConfigurationError

logger = logging.getLogger(__name__)


class Periodic(Protocol):
    def periodic(self): ...


class CycleScheduler:
    """
    Fixed-period cooperative scheduler.

    Args:
        period_s: Cycle period in seconds (default 20ms)
        clock: Monotonic time source
        sleep: Sleep function (injectable for tests)
    """

    def __init__(self, period_s: float = 0.02,
                 clock: Callable[[], float] = time.monotonic,
                 sleep: Callable[[float], None] = time.sleep):
        if not period_s > 0:
            raise ConfigurationError(f"period_s must be positive, got {period_s!r}")
        self.period_s = period_s
        self._clock = clock
        self._sleep = sleep
        self._subsystems: List[Periodic] = []
        self._running = False
        self._in_cycle = False

        # Statistics
        self._cycle_count = 0
        self._overrun_count = 0

    def register(self, *subsystems: Periodic):
        """Add subsystems to the end of the cycle order."""
        for subsystem in subsystems:
            if not callable(getattr(subsystem, "periodic", None)):
                raise TypeError(f"{type(subsystem).__name__} has no periodic() method")
            self._subsystems.append(subsystem)

    def run_once(self):
        """Advance every subsystem by one cycle."""
        if self._in_cycle:
            raise RuntimeError("run_once() called while a cycle is in progress")

        self._in_cycle = True
        try:
            for subsystem in self._subsystems:
                try:
                    subsystem.periodic()
                except Exception:
                    logger.exception(f"Cycle {self._cycle_count}: "
                                     f"{type(subsystem).__name__}.periodic() failed")
                    raise
            self._cycle_count += 1
        finally:
            self._in_cycle = False

    def run(self, cycles: Optional[int] = None):
        """
        Run cycles at the configured period until stopped.

        Args:
            cycles: Number of cycles to run, or None to run until ``stop()``
        """
        self._running = True
        logger.info(f"Scheduler running at {1.0 / self.period_s:.0f}Hz "
                    f"with {len(self._subsystems)} subsystems")

        next_cycle = self._clock()
        completed = 0
        try:
            while self._running and (cycles is None or completed < cycles):
                self.run_once()
                completed += 1

                next_cycle += self.period_s
                remaining = next_cycle - self._clock()
                if remaining > 0:
                    self._sleep(remaining)
                else:
                    self._overrun_count += 1
                    logger.warning(f"Cycle overrun by {-remaining * 1000:.1f}ms")
                    next_cycle = self._clock()
        finally:
            self._running = False

    def stop(self):
        """Stop after the current cycle."""
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def stats(self) -> dict:
        return {
            "cycles": self._cycle_count,
            "overruns": self._overrun_count,
            "subsystems": len(self._subsystems),
        }
