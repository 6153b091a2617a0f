"""
Encoder angle tracking and wheel distance conversion.
"""

from .encoder import (Motor, MotorPair, EncoderState, EncoderDeltaTracker,
                      angle_delta, push_reading, track_delta)
from .distance import WheelGeometry, WheelDistanceConverter, degrees_to_meters, convert_frame

__all__ = [
    "Motor",
    "MotorPair",
    "EncoderState",
    "EncoderDeltaTracker",
    "WheelGeometry",
    "WheelDistanceConverter",
    "angle_delta",
    "push_reading",
    "track_delta",
    "degrees_to_meters",
    "convert_frame",
]
