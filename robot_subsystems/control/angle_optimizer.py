"""
Angle Optimizer
===============

Reduces the rotation a swerve module needs to reach a desired heading.

A wheel pointing at θ and driving forward moves the robot the same way as
the wheel pointing at θ+180° driving backwards. When the desired heading
is more than 90° away, the flipped heading is closer, so the module turns
to that instead and reverses its speed.
"""

import math
from typing import Tuple


def normalize_degrees(angle: float) -> float:
    """Wrap an angle into (-180, 180]."""
    wrapped = math.fmod(angle, 360.0)
    if wrapped > 180.0:
        wrapped -= 360.0
    elif wrapped <= -180.0:
        wrapped += 360.0
    return wrapped


def shortest_rotation(current_angle: float, target_angle: float) -> float:
    """Signed shortest rotation (degrees) from current to target."""
    return normalize_degrees(target_angle - current_angle)


def optimize_module_state(current_angle: float, target_angle: float,
                          speed: float) -> Tuple[float, float]:
    """
    Optimize a desired module state against the current heading.

    Args:
        current_angle: Current module heading (degrees)
        target_angle: Desired module heading (degrees)
        speed: Desired wheel speed (m/s)

    Returns:
        (angle, speed) needing at most 90° of rotation. The input pair is
        returned unchanged when it already satisfies that.
    """
    delta = shortest_rotation(current_angle, target_angle)
    if abs(delta) <= 90.0:
        return target_angle, speed

    if delta > 0:
        flipped = current_angle + delta - 180.0
    else:
        flipped = current_angle + delta + 180.0
    return normalize_degrees(flipped), -speed
