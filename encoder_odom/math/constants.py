"""
Mathematical and physical constants for wheel odometry.
"""

import math

# Mathematical constants
TWO_PI = 2 * math.pi

# Conversion factors
DEGREES_PER_REVOLUTION = 360.0
MS_PER_SECOND = 1000.0

# Encoder timestamps arrive as a 16-bit wrapping counter (milliseconds)
TIMESTAMP_MODULUS = 1 << 16

# Kinematics
SMALL_ANGLE_THRESHOLD_RAD = 0.01  # ~0.57 deg, below this the midpoint update is used

# Frames discarded after construction or reset
STABILIZATION_FRAMES = 3

# Default wheel geometry (will be tuned per platform)
DEFAULT_WHEEL_CIRCUMFERENCE_M = 1.0373
DEFAULT_WHEEL_BASE_M = 0.5065
DEFAULT_GEAR_RATIO = 2.38462
DEFAULT_ROLLOVER_THRESHOLD_DEG = 100.0
