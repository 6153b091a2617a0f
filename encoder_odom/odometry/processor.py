"""
Odometry processor: sequences the encoder, distance, velocity and pose
stages once per frame.

The pipeline is written as pure transitions over :class:`OdometryState`.
:func:`advance` runs one complete frame; :class:`OdometryProcessor` wraps the
same transitions behind a stateful, per-call API for drivers that receive
left and right samples separately.
"""

from dataclasses import replace
from typing import Dict, Any

from .state import OdometryState, Pose, Velocity, Distance
from .models import PoseIntegrator, VelocityEstimator
from ..encoders import (Motor, EncoderState, WheelGeometry, EncoderDeltaTracker,
                        WheelDistanceConverter, push_reading)
from ..math.utils import timestamp_delta

def update_encoder_reading(state: OdometryState, motor: Motor, angle_degrees: float) -> OdometryState:
    """Store a new raw angle for ``motor``. Nothing is computed."""
    encoder = push_reading(state.encoders[motor], angle_degrees)
    return replace(state, encoders=state.encoders.with_value(motor, encoder))

def update_timestamp(state: OdometryState, timestamp: int) -> OdometryState:
    """Store a new 16-bit timestamp and the elapsed milliseconds since the last one."""
    return replace(state,
                   delta_time=timestamp_delta(timestamp, state.timestamp),
                   timestamp=timestamp)

def process_frame(state: OdometryState) -> OdometryState:
    """
    Run one frame of the odometry pipeline.

    The first frames after construction or reset only advance the
    stabilization gate. Afterwards the order is fixed: encoder deltas, wheel
    distances, velocity, then pose, with velocity and pose sharing the same
    heading change.
    """
    gate, ready = state.gate.step()
    if not ready:
        return replace(state, gate=gate)

    geometry = state.geometry
    encoders = EncoderDeltaTracker(geometry.rollover_threshold).track(state.encoders)
    encoders = WheelDistanceConverter(geometry).convert(encoders)

    left_meters = encoders.left.meters_in_frame
    right_meters = encoders.right.meters_in_frame

    frame_distance = PoseIntegrator.frame_distance(left_meters, right_meters)
    delta_theta = PoseIntegrator.heading_change(left_meters, right_meters, geometry.wheel_base)

    velocity = VelocityEstimator.estimate(frame_distance, delta_theta, state.delta_time)
    pose = PoseIntegrator.integrate(state.pose, frame_distance, delta_theta)

    distance = Distance(frame_distance=frame_distance,
                        total_distance=state.distance.total_distance + frame_distance)

    return replace(state,
                   encoders=encoders,
                   pose=pose,
                   velocity=velocity,
                   distance=distance,
                   gate=gate,
                   frames_processed=state.frames_processed + 1)

def advance(state: OdometryState, left_angle: float, right_angle: float,
            timestamp: int) -> OdometryState:
    """
    Feed one complete frame (both encoder samples plus timestamp) and process it.

    Args:
        state: Current odometry state
        left_angle: Raw left encoder angle (degrees)
        right_angle: Raw right encoder angle (degrees)
        timestamp: 16-bit timestamp of the samples (milliseconds)

    Returns:
        New odometry state
    """
    state = update_encoder_reading(state, Motor.LEFT, left_angle)
    state = update_encoder_reading(state, Motor.RIGHT, right_angle)
    state = update_timestamp(state, timestamp)
    return process_frame(state)

def reset_position(state: OdometryState) -> OdometryState:
    return replace(state, pose=Pose())

def reset_distance(state: OdometryState) -> OdometryState:
    return replace(state, distance=Distance())

def reset_total_degrees_traveled(state: OdometryState) -> OdometryState:
    return replace(state, encoders=state.encoders.map(
        lambda motor, encoder: replace(encoder, total_degrees=0.0)))

def reset_total_meters_traveled(state: OdometryState) -> OdometryState:
    return replace(state, encoders=state.encoders.map(
        lambda motor, encoder: replace(encoder, total_meters=0.0)))

class OdometryProcessor:
    """
    Converts raw encoder angles from two drive motors into pose, velocity
    and distance for a differential-drive platform.

    Per frame the caller must push both encoder readings and one timestamp
    before calling :meth:`process_data`. Calling it without fresh readings
    reuses the stale values. The processor is not thread-safe; guard a full
    update-then-process sequence with an external lock if shared.
    """

    def __init__(self, wheel_circumference: float, wheel_base: float,
                 gear_ratio: float, rollover_threshold: float,
                 right_forward_increases: bool = True,
                 left_forward_increases: bool = True):
        """
        Initialize the odometry processor.

        Geometry is not validated here; use :meth:`WheelGeometry.validate`
        on user supplied values.

        Args:
            wheel_circumference: Wheel circumference in meters
            wheel_base: Distance between wheel centers in meters
            gear_ratio: Encoder degrees per wheel degree (1.0 for an encoder
                mounted directly on the wheel)
            rollover_threshold: Delta that indicates an encoder rollover (degrees)
            right_forward_increases: Right reading increases when driving forward
            left_forward_increases: Left reading increases when driving forward
        """
        self.geometry = WheelGeometry(
            wheel_circumference=wheel_circumference,
            wheel_base=wheel_base,
            gear_ratio=gear_ratio,
            rollover_threshold=rollover_threshold,
            right_forward_increases=right_forward_increases,
            left_forward_increases=left_forward_increases,
        )
        self.state = OdometryState.initial(self.geometry)

    @classmethod
    def from_geometry(cls, geometry: WheelGeometry) -> 'OdometryProcessor':
        return cls(geometry.wheel_circumference, geometry.wheel_base,
                   geometry.gear_ratio, geometry.rollover_threshold,
                   geometry.right_forward_increases, geometry.left_forward_increases)

    # Per-frame updates

    def update_encoder_reading(self, motor: Motor, angle_degrees: float):
        """Store a new raw angle for ``motor``."""
        self.state = update_encoder_reading(self.state, motor, angle_degrees)

    def update_timestamp(self, timestamp: int):
        """Store a new 16-bit millisecond timestamp."""
        self.state = update_timestamp(self.state, timestamp)

    def process_data(self):
        """Process the current frame."""
        self.state = process_frame(self.state)

    def advance(self, left_angle: float, right_angle: float, timestamp: int) -> OdometryState:
        """Push both readings and a timestamp, then process the frame."""
        self.state = advance(self.state, left_angle, right_angle, timestamp)
        return self.state

    # Resets

    def reset(self):
        """Return to the state immediately after construction."""
        self.state = OdometryState.initial(self.geometry)

    def reset_position(self):
        self.state = reset_position(self.state)

    def reset_distance(self):
        self.state = reset_distance(self.state)

    def reset_total_degrees_traveled(self):
        self.state = reset_total_degrees_traveled(self.state)

    def reset_total_meters_traveled(self):
        self.state = reset_total_meters_traveled(self.state)

    # Accessors

    def get_position(self) -> Pose:
        return self.state.pose

    def get_velocity(self) -> Velocity:
        return self.state.velocity

    def get_distance(self) -> Distance:
        return self.state.distance

    def _encoder(self, motor: Motor) -> EncoderState:
        return self.state.encoders[motor]

    def get_total_degrees_traveled(self, motor: Motor) -> float:
        return self._encoder(motor).total_degrees

    def get_total_meters_traveled(self, motor: Motor) -> float:
        return self._encoder(motor).total_meters

    def get_degrees_traveled_in_frame(self, motor: Motor) -> float:
        return self._encoder(motor).degrees_in_frame

    def get_meters_traveled_in_frame(self, motor: Motor) -> float:
        return self._encoder(motor).meters_in_frame

    def get_current_encoder_angle(self, motor: Motor) -> float:
        return self._encoder(motor).current_angle

    def get_previous_encoder_angle(self, motor: Motor) -> float:
        return self._encoder(motor).previous_angle

    def get_delta_time(self) -> int:
        """Milliseconds between the last two timestamps."""
        return self.state.delta_time

    def get_wheel_circumference(self) -> float:
        return self.geometry.wheel_circumference

    def get_wheel_base(self) -> float:
        return self.geometry.wheel_base

    def get_gear_ratio(self) -> float:
        return self.geometry.gear_ratio

    def get_rollover_threshold(self) -> float:
        return self.geometry.rollover_threshold

    def is_settled(self) -> bool:
        """True once the stabilization frames have been discarded."""
        return self.state.settled

    def get_statistics(self) -> Dict[str, Any]:
        """Get processor statistics."""
        return {
            'frames_processed': self.state.frames_processed,
            'settled': self.state.settled,
            'stabilization_remaining': self.state.gate.remaining,
            'total_distance': self.state.distance.total_distance,
            'timestamp': self.state.timestamp,
            'delta_time_ms': self.state.delta_time,
        }
