"""
Mathematical utilities for wheel odometry calculations.
"""

from .utils import normalize_angle, ieee_divide, timestamp_delta
from .constants import *

__all__ = ["normalize_angle", "ieee_divide", "timestamp_delta"]
