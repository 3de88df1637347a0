"""
Control Modules
===============

Decision logic run once per cycle by each subsystem.

Components:
    - optimize_module_state: Swerve heading/speed optimization
    - CascadeController / RateLoop: Feedback stage wiring
    - SwerveModuleController: Swerve module cycle
    - IntakeStage: Intake stage cycle
    - ModeArbiter: Automatic/manual mode selection
"""

from .angle_optimizer import (
    normalize_degrees,
    shortest_rotation,
    optimize_module_state,
)

from .cascade import (
    FeedbackStage,
    PositionStage,
    RateStage,
    CascadeController,
    RateLoop,
)

from .mode_arbiter import (
    ModeArbiter,
    AutomaticMode,
    ManualMode,
    AUTOMATIC,
)

from .swerve_module import (
    SwerveModuleController,
    DesiredModuleState,
    MeasuredModuleState,
    ModulePosition,
    ModuleState,
    SwerveCommand,
)

from .intake_stage import (
    IntakeStage,
    IntakeSensorSnapshot,
    CycleResult,
    automatic_voltage,
    automatic_complete,
    manual_voltage,
)

__all__ = [
    'normalize_degrees',
    'shortest_rotation',
    'optimize_module_state',
    'FeedbackStage',
    'PositionStage',
    'RateStage',
    'CascadeController',
    'RateLoop',
    'ModeArbiter',
    'AutomaticMode',
    'ManualMode',
    'AUTOMATIC',
    'SwerveModuleController',
    'DesiredModuleState',
    'MeasuredModuleState',
    'ModulePosition',
    'ModuleState',
    'SwerveCommand',
    'IntakeStage',
    'IntakeSensorSnapshot',
    'CycleResult',
    'automatic_voltage',
    'automatic_complete',
    'manual_voltage',
]
