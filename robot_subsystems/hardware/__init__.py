"""
Hardware Adapters
=================

Adapter interfaces implemented by robot-specific hardware code, and
simulated implementations for running without a robot.
"""

from .interfaces import (
    SwerveModuleHardware,
    IntakeStageHardware,
)

from .mock import (
    MockSwerveModuleHardware,
    MockIntakeStageHardware,
    MotorModelConfig,
    IntakeTrackConfig,
)

__all__ = [
    'SwerveModuleHardware',
    'IntakeStageHardware',
    'MockSwerveModuleHardware',
    'MockIntakeStageHardware',
    'MotorModelConfig',
    'IntakeTrackConfig',
]
