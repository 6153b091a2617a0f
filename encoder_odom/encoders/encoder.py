"""
Per-motor encoder angle tracking with rollover handling.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

from ..math.constants import DEGREES_PER_REVOLUTION

class Motor(Enum):
    """Drive motor an encoder is attached to."""
    LEFT = "left"
    RIGHT = "right"

@dataclass(frozen=True)
class MotorPair:
    """
    Fixed two-slot container holding one value per drive motor.

    Indexed by :class:`Motor`; ``with_value`` returns a new pair with one
    slot replaced.
    """

    left: Any
    right: Any

    def __getitem__(self, motor: Motor) -> Any:
        if motor is Motor.LEFT:
            return self.left
        if motor is Motor.RIGHT:
            return self.right
        raise KeyError(motor)

    def with_value(self, motor: Motor, value: Any) -> 'MotorPair':
        """Return a copy with the slot for ``motor`` set to ``value``."""
        if motor is Motor.LEFT:
            return replace(self, left=value)
        if motor is Motor.RIGHT:
            return replace(self, right=value)
        raise KeyError(motor)

    def map(self, func) -> 'MotorPair':
        """Apply ``func(motor, value)`` to both slots."""
        return MotorPair(left=func(Motor.LEFT, self.left),
                         right=func(Motor.RIGHT, self.right))

@dataclass(frozen=True)
class EncoderState:
    """
    Angle and distance bookkeeping for a single encoder.

    Angles are in degrees, distances in meters. ``*_in_frame`` values hold
    the most recent processed frame, ``total_*`` values accumulate since the
    last reset.
    """

    current_angle: float = 0.0
    previous_angle: float = 0.0
    degrees_in_frame: float = 0.0
    total_degrees: float = 0.0
    meters_in_frame: float = 0.0
    total_meters: float = 0.0

    def __str__(self) -> str:
        return (
            f"EncoderState(angle={self.current_angle:.1f} (prev {self.previous_angle:.1f}), "
            f"frame={self.degrees_in_frame:.1f}deg/{self.meters_in_frame:.4f}m, "
            f"total={self.total_degrees:.1f}deg/{self.total_meters:.4f}m)"
        )

def angle_delta(current: float, previous: float, rollover_threshold: float) -> float:
    """
    Signed angular change between two absolute encoder readings.

    A raw jump larger than ``rollover_threshold`` is taken to be a wrap
    through 0/360 degrees. At most one wrap per frame can be detected, so the
    threshold must exceed the largest real per-frame travel and stay below
    180 degrees.

    Args:
        current: Latest encoder reading (degrees)
        previous: Prior encoder reading (degrees)
        rollover_threshold: Jump size that indicates a rollover (degrees)

    Returns:
        Delta in degrees
    """
    raw = current - previous

    if raw > rollover_threshold:
        # Wrapped downward through 0 (e.g. 10 -> 300)
        return raw - DEGREES_PER_REVOLUTION
    if raw < -rollover_threshold:
        # Wrapped upward through 360 (e.g. 300 -> 10)
        return raw + DEGREES_PER_REVOLUTION
    return raw

def push_reading(state: EncoderState, angle_degrees: float) -> EncoderState:
    """Shift the current reading into previous and store a new one."""
    return replace(state, previous_angle=state.current_angle, current_angle=angle_degrees)

def track_delta(state: EncoderState, rollover_threshold: float) -> EncoderState:
    """Record the frame delta and add it to the running total."""
    delta = angle_delta(state.current_angle, state.previous_angle, rollover_threshold)
    return replace(state,
                   degrees_in_frame=delta,
                   total_degrees=state.total_degrees + delta)

class EncoderDeltaTracker:
    """
    Rollover-aware delta tracking for both drive encoders.
    """

    def __init__(self, rollover_threshold: float):
        """
        Args:
            rollover_threshold: Jump size that indicates a rollover (degrees)
        """
        self.rollover_threshold = rollover_threshold

    def track(self, encoders: MotorPair) -> MotorPair:
        """Compute the frame delta for both motors."""
        return encoders.map(lambda motor, state: track_delta(state, self.rollover_threshold))
