"""
Telemetry
=========

One-way telemetry output from the control core.

Each cycle a subsystem publishes one ``AxisTelemetry`` snapshot per
controlled axis. The core writes to a sink and never reads from it.
"""

import logging
from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Optional, Protocol, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AxisTelemetry:
    """Per-cycle snapshot of one controlled axis."""
    target: float = 0.0
    current: float = 0.0
    error: float = 0.0
    voltage: float = 0.0


class TelemetrySink(Protocol):
    """Destination for per-cycle telemetry."""

    def publish(self, subsystem: str, axis: str, snapshot: AxisTelemetry) -> None:
        ...


class NullTelemetrySink:
    """Discards everything."""

    def publish(self, subsystem: str, axis: str, snapshot: AxisTelemetry) -> None:
        pass


class LoggingTelemetrySink:
    """Writes snapshots to the debug log."""

    def __init__(self, level: int = logging.DEBUG):
        self.level = level

    def publish(self, subsystem: str, axis: str, snapshot: AxisTelemetry) -> None:
        if logger.isEnabledFor(self.level):
            logger.log(
                self.level,
                f"{subsystem}/{axis}: target={snapshot.target:.2f} "
                f"current={snapshot.current:.2f} error={snapshot.error:.2f} "
                f"voltage={snapshot.voltage:.2f}"
            )


class RecordingTelemetrySink:
    """
    Keeps the most recent snapshots in memory.

    Args:
        maxlen: Number of snapshots retained (oldest dropped first)
    """

    def __init__(self, maxlen: Optional[int] = 1000):
        self._records: Deque[Tuple[str, str, AxisTelemetry]] = deque(maxlen=maxlen)

    def publish(self, subsystem: str, axis: str, snapshot: AxisTelemetry) -> None:
        self._records.append((subsystem, axis, snapshot))

    def records(self, subsystem: Optional[str] = None,
                axis: Optional[str] = None) -> List[AxisTelemetry]:
        """Snapshots in publish order, optionally filtered."""
        return [
            snap for sub, ax, snap in self._records
            if (subsystem is None or sub == subsystem) and (axis is None or ax == axis)
        ]

    def latest(self, subsystem: str, axis: str) -> Optional[AxisTelemetry]:
        """Most recent snapshot for an axis, or None if never published."""
        for sub, ax, snap in reversed(self._records):
            if sub == subsystem and ax == axis:
                return snap
        return None

    def clear(self):
        self._records.clear()

    def __len__(self) -> int:
        return len(self._records)
