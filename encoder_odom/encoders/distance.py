"""
Wheel geometry and encoder angle to wheel distance conversion.
"""

import math
from dataclasses import dataclass, replace

from .encoder import Motor, MotorPair, EncoderState
from ..math.constants import DEGREES_PER_REVOLUTION
from ..math.utils import ieee_divide

@dataclass(frozen=True)
class WheelGeometry:
    """
    Fixed drive geometry of a differential-drive platform.

    Attributes:
        wheel_circumference: Wheel circumference in meters (> 0)
        wheel_base: Distance between wheel centers in meters (> 0)
        gear_ratio: Encoder degrees per wheel degree (!= 0). An encoder mounted
            directly on the wheel has a ratio of 1.0
        rollover_threshold: Delta that indicates an encoder rollover, in
            degrees (0 < threshold < 180)
        right_forward_increases: Right encoder reading increases when driving
            forward
        left_forward_increases: Left encoder reading increases when driving
            forward
    """

    wheel_circumference: float
    wheel_base: float
    gear_ratio: float
    rollover_threshold: float
    right_forward_increases: bool = True
    left_forward_increases: bool = True

    def direction_sign(self, motor: Motor) -> float:
        """Return +1.0 if a rising reading means forward travel, else -1.0."""
        if motor is Motor.LEFT:
            return 1.0 if self.left_forward_increases else -1.0
        return 1.0 if self.right_forward_increases else -1.0

    def validate(self) -> None:
        """
        Check the geometry preconditions.

        The odometry pipeline itself never checks these; invalid values just
        propagate NaN/Inf. Call this when building geometry from user input.

        Raises:
            ValueError: If any parameter is out of range
        """
        values = (self.wheel_circumference, self.wheel_base,
                  self.gear_ratio, self.rollover_threshold)
        if not all(math.isfinite(v) for v in values):
            raise ValueError("Wheel geometry values must be finite")
        if self.wheel_circumference <= 0:
            raise ValueError(f"Wheel circumference must be positive, got {self.wheel_circumference}")
        if self.wheel_base <= 0:
            raise ValueError(f"Wheel base must be positive, got {self.wheel_base}")
        if self.gear_ratio == 0:
            raise ValueError("Gear ratio must be non-zero")
        if not 0 < self.rollover_threshold < 180:
            raise ValueError(
                f"Rollover threshold must be in (0, 180) degrees, got {self.rollover_threshold}")

    @property
    def meters_per_encoder_degree(self) -> float:
        """Wheel travel for one degree of encoder rotation."""
        return ieee_divide(self.wheel_circumference, DEGREES_PER_REVOLUTION * self.gear_ratio)

def degrees_to_meters(delta_degrees: float, geometry: WheelGeometry, motor: Motor) -> float:
    """
    Convert an encoder angle delta into signed wheel travel.

    Args:
        delta_degrees: Encoder delta for the frame (degrees)
        geometry: Platform geometry
        motor: Motor the encoder belongs to

    Returns:
        Distance traveled by the wheel in meters, positive when forward.
        A zero gear ratio gives inf or nan rather than an error.
    """
    signed_delta = delta_degrees * geometry.direction_sign(motor)

    encoder_rotations = signed_delta / DEGREES_PER_REVOLUTION
    wheel_rotations = ieee_divide(encoder_rotations, geometry.gear_ratio)
    return wheel_rotations * geometry.wheel_circumference

def convert_frame(state: EncoderState, geometry: WheelGeometry, motor: Motor) -> EncoderState:
    """Set the frame distance from the frame delta and accumulate the total."""
    meters = degrees_to_meters(state.degrees_in_frame, geometry, motor)
    return replace(state,
                   meters_in_frame=meters,
                   total_meters=state.total_meters + meters)

class WheelDistanceConverter:
    """
    Converts per-frame encoder deltas into wheel travel for both motors.
    """

    def __init__(self, geometry: WheelGeometry):
        self.geometry = geometry

    def convert(self, encoders: MotorPair) -> MotorPair:
        """Fill in frame and total meters for both motors."""
        return encoders.map(lambda motor, state: convert_frame(state, self.geometry, motor))
