"""
Mathematical utility functions for wheel odometry.
"""

import math
import numpy as np

from .constants import TWO_PI, TIMESTAMP_MODULUS

def normalize_angle(angle):
    """
    Normalize angle to the (-pi, pi] range.

    Uses a single fmod reduction instead of repeated add/subtract loops, so
    the cost does not depend on how far the input is from the range.
    Non-finite angles are returned unchanged.

    Args:
        angle (float): Angle in radians

    Returns:
        float: Normalized angle in (-pi, pi]
    """
    if not math.isfinite(angle):
        return angle

    wrapped = math.fmod(angle + math.pi, TWO_PI)
    if wrapped <= 0.0:
        wrapped += TWO_PI
    normalized = wrapped - math.pi

    # Rounding can land a value just above -pi exactly on -pi
    if normalized <= -math.pi:
        normalized = math.pi
    return normalized

def ieee_divide(numerator, denominator):
    """
    Floating-point division with IEEE 754 results.

    A zero denominator gives +/-inf (nan for 0/0) and overflow gives inf,
    instead of raising.

    Args:
        numerator (float): Dividend
        denominator (float): Divisor

    Returns:
        float: numerator / denominator
    """
    with np.errstate(all='ignore'):
        return float(np.float64(numerator) / np.float64(denominator))

def timestamp_delta(new_timestamp, old_timestamp, modulus=TIMESTAMP_MODULUS):
    """
    Elapsed ticks between two readings of a wrapping counter.

    Only valid if the counter wrapped at most once between the two readings.

    Args:
        new_timestamp (int): Latest counter value
        old_timestamp (int): Previous counter value
        modulus (int): Counter period (2**16 for a 16-bit counter)

    Returns:
        int: Elapsed ticks in [0, modulus)
    """
    return (int(new_timestamp) - int(old_timestamp)) % modulus
