"""
Error Types
===========

Exceptions raised by the subsystem control core.
"""


class ConfigurationError(ValueError):
    """Invalid settings detected while constructing a subsystem.

    Raised before any control cycle runs; a subsystem that constructed
    successfully never raises this from ``periodic()``.
    """
