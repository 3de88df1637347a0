"""
Hardware Adapter Interfaces
===========================

Contracts between the control core and hardware-specific motor, encoder and
sensor code. A robot provides one adapter per physical module or stage and
injects it into the matching controller.

Adapters own all bus I/O. Voltage writes are fire-and-forget from the
controller's point of view: write failures are the adapter's to handle.
"""

from abc import ABC, abstractmethod
from typing import Optional


class SwerveModuleHardware(ABC):
    """Motors and sensors of one swerve module."""

    @abstractmethod
    def get_angle_position(self) -> float:
        """Current module heading (degrees)."""

    @abstractmethod
    def get_angle_rate(self) -> float:
        """Current module heading rate (deg/s)."""

    @abstractmethod
    def get_angle_voltage(self) -> float:
        """Voltage currently applied to the angle motor."""

    @abstractmethod
    def get_drive_position(self) -> float:
        """Distance travelled by the drive wheel (metres)."""

    @abstractmethod
    def get_drive_rate(self) -> float:
        """Drive wheel linear speed (m/s)."""

    @abstractmethod
    def get_drive_voltage(self) -> float:
        """Voltage currently applied to the drive motor."""

    @abstractmethod
    def set_angle_voltage(self, voltage: float) -> None:
        """Command the angle motor voltage."""

    @abstractmethod
    def set_drive_voltage(self, voltage: float) -> None:
        """Command the drive motor voltage."""


class IntakeStageHardware(ABC):
    """Motor and game piece sensors of one intake stage."""

    @abstractmethod
    def is_infeed_ready(self) -> bool:
        """True if the stage is ready to take in a game piece."""

    @abstractmethod
    def is_outfeed_ready(self) -> bool:
        """True if the next stage is ready to receive a game piece."""

    @abstractmethod
    def at_outfeed_stop(self) -> bool:
        """True if a game piece is at the outfeed stop position."""

    def at_slowdown(self) -> Optional[bool]:
        """
        Whether a game piece is at the slowdown checkpoint.

        Returns:
            None when the stage has no slowdown sensor installed
        """
        return None

    @abstractmethod
    def get_voltage(self) -> float:
        """Voltage currently applied to the stage motor."""

    @abstractmethod
    def get_current(self) -> float:
        """Current drawn by the stage motor (amps)."""

    @abstractmethod
    def set_voltage(self, voltage: float) -> None:
        """Command the stage motor voltage."""
