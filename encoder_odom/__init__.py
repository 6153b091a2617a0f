"""
Wheel encoder odometry for differential-drive platforms.

This module provides platform-independent implementations of:
- Rollover-aware encoder delta tracking
- Encoder angle to wheel distance conversion
- Differential-drive pose and velocity estimation
- Mathematical utilities
"""

__version__ = "1.1.0"
__author__ = "DR Vehicle Team"

from .encoders import Motor, WheelGeometry
from .odometry import OdometryProcessor, OdometryState, Pose, Velocity, Distance, advance
from .math import normalize_angle

__all__ = [
    "Motor",
    "WheelGeometry",
    "OdometryProcessor",
    "OdometryState",
    "Pose",
    "Velocity",
    "Distance",
    "advance",
    "normalize_angle"
]
