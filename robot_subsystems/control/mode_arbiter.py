"""
Mode Arbiter
============

Selects which control source drives a subsystem each cycle.

Two modes exist:
    - AUTOMATIC: the subsystem's sensor-driven decision function (default)
    - MANUAL: operator override with direction and slowdown parameters

Requests from the planner or operator may arrive at any time. They replace
the requested mode by reference; ``latch()`` is called once at the start of
every cycle and fixes the mode for that whole cycle, so a request made
mid-cycle only takes effect on the next one.
"""

import logging
from dataclasses import dataclass
from typing import Callable, ClassVar, List, Union

from ..errors import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AutomaticMode:
    """Sensor-driven sequencing."""
    name: ClassVar[str] = "AUTOMATIC"


@dataclass(frozen=True)
class ManualMode:
    """Operator override."""
    forward: bool = True            # Run forward if True, reverse if False
    slowdown: bool = False          # Slow speed if True, full speed if False
    name: ClassVar[str] = "MANUAL"

    def describe(self) -> str:
        direction = "forward" if self.forward else "reverse"
        speed = "slow" if self.slowdown else "full"
        return f"{self.name} {direction} {speed}"


Mode = Union[AutomaticMode, ManualMode]

AUTOMATIC = AutomaticMode()


class ModeArbiter:
    """
    Mutually exclusive mode selection for one subsystem.

    Args:
        owner: Subsystem name, used in log messages
        allow_manual: False for subsystems that only run automatically
    """

    def __init__(self, owner: str, allow_manual: bool = True):
        self.owner = owner
        self.allow_manual = allow_manual

        self._requested: Mode = AUTOMATIC
        self._active: Mode = AUTOMATIC
        self._manual = ManualMode()
        self._callbacks: List[Callable[[Mode, Mode], None]] = []

        # Statistics
        self._cycles_in_mode = 0
        self._cancel_count = 0

    def activate_manual(self, forward: bool = True, slowdown: bool = False):
        """
        Switch to manual control.

        If manual control is already requested only its parameters change;
        the mode is not restarted.
        """
        if not self.allow_manual:
            raise ConfigurationError(f"{self.owner} has no manual mode")

        self._manual = ManualMode(forward=bool(forward), slowdown=bool(slowdown))
        if isinstance(self._requested, ManualMode):
            self._requested = self._manual
            logger.debug(f"{self.owner}: manual parameters updated ({self._manual.describe()})")
            return

        self._change(self._manual)

    def set_manual_parameters(self, forward: bool, slowdown: bool):
        """
        Update manual parameters without changing mode.

        Takes effect next cycle when manual control is active. Otherwise
        the parameters are kept for ``resume_manual()``.
        """
        self._manual = ManualMode(forward=bool(forward), slowdown=bool(slowdown))
        if isinstance(self._requested, ManualMode):
            self._requested = self._manual

    def resume_manual(self):
        """Switch to manual control with the last stored parameters."""
        self.activate_manual(self._manual.forward, self._manual.slowdown)

    def activate_auto(self):
        """Cancel any non-default mode and return to automatic control."""
        if isinstance(self._requested, AutomaticMode):
            return
        self._cancel_count += 1
        logger.info(f"{self.owner}: cancelling {self._requested.name}")
        self._change(AUTOMATIC)

    def latch(self) -> Mode:
        """
        Fix the mode for the cycle that is starting.

        Returns:
            Mode whose decision function runs this cycle
        """
        mode = self._requested
        if type(mode) is not type(self._active):
            self._cycles_in_mode = 0
        self._active = mode
        self._cycles_in_mode += 1
        return mode

    def _change(self, mode: Mode):
        old = self._requested
        self._requested = mode
        logger.info(f"{self.owner}: mode change {old.name} → {mode.name}")

        for callback in self._callbacks:
            try:
                callback(old, mode)
            except Exception as e:
                logger.warning(f"Mode callback error: {e}")

    def add_callback(self, callback: Callable[[Mode, Mode], None]):
        """Register callback for mode changes, called with (old, new)."""
        self._callbacks.append(callback)

    @property
    def active_mode(self) -> Mode:
        """Mode latched for the current (or most recent) cycle."""
        return self._active

    @property
    def requested_mode(self) -> Mode:
        """Mode that will be latched next cycle."""
        return self._requested

    @property
    def manual_parameters(self) -> ManualMode:
        """Most recently set manual parameters."""
        return self._manual

    @property
    def is_manual(self) -> bool:
        return isinstance(self._active, ManualMode)

    @property
    def stats(self) -> dict:
        return {
            "mode": self._active.name,
            "cycles_in_mode": self._cycles_in_mode,
            "cancellations": self._cancel_count,
        }
