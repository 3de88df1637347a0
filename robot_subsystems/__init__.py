"""
Robot Subsystems
================

Per-cycle control core for swerve drive modules and intake stages.

Hardware-specific adapters implement the interfaces in ``hardware`` and are
injected into the controllers in ``control``; a host scheduler calls each
controller's ``periodic()`` once per fixed period.
"""

__version__ = "0.1.0"
