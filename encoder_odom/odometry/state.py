"""
Pose, velocity and full odometry state representation.
"""

import numpy as np
from dataclasses import dataclass

from .gate import StabilizationGate
from ..encoders import MotorPair, EncoderState, WheelGeometry

@dataclass(frozen=True)
class Pose:
    """
    Planar pose of the platform in the odometry frame.

    - x: Forward distance from the start point in meters
    - y: Lateral distance from the start point in meters (right-hand rule)
    - theta: Heading in radians, always in (-pi, pi]
    """

    x: float = 0.0
    y: float = 0.0
    theta: float = 0.0

    @property
    def pose_vector(self) -> np.ndarray:
        """Get pose as [x, y, theta] vector."""
        return np.array([self.x, self.y, self.theta])

    @property
    def position(self) -> np.ndarray:
        """Get position as [x, y] vector."""
        return np.array([self.x, self.y])

    def __str__(self) -> str:
        return f"Pose(pos=[{self.x:.3f}, {self.y:.3f}], theta={self.theta:.4f})"

@dataclass(frozen=True)
class Velocity:
    """Linear (m/s) and angular (rad/s) velocity over the last frame."""

    linear_x: float = 0.0
    angular_z: float = 0.0

    def __str__(self) -> str:
        return f"Velocity(linear_x={self.linear_x:.3f}, angular_z={self.angular_z:.4f})"

@dataclass(frozen=True)
class Distance:
    """
    Distance traveled by the platform center.

    ``frame_distance`` is the average of both wheels for the last frame;
    ``total_distance`` is the signed running sum, so reversing reduces it.
    """

    frame_distance: float = 0.0
    total_distance: float = 0.0

@dataclass(frozen=True)
class OdometryState:
    """
    Complete state of the odometry pipeline.

    Every processing stage takes an ``OdometryState`` and returns a new one;
    nothing here is mutated in place.
    """

    geometry: WheelGeometry
    encoders: MotorPair = MotorPair(left=EncoderState(), right=EncoderState())
    pose: Pose = Pose()
    velocity: Velocity = Velocity()
    distance: Distance = Distance()

    # 16-bit wrapping timestamp and elapsed milliseconds since the previous one
    timestamp: int = 0
    delta_time: int = 0

    gate: StabilizationGate = StabilizationGate()
    frames_processed: int = 0

    @classmethod
    def initial(cls, geometry: WheelGeometry) -> 'OdometryState':
        """State immediately after construction."""
        return cls(geometry=geometry)

    @property
    def settled(self) -> bool:
        return self.gate.ready

    def __str__(self) -> str:
        return (
            f"OdometryState({self.pose}, {self.velocity}, "
            f"distance={self.distance.total_distance:.3f}, "
            f"dt={self.delta_time}ms, frames={self.frames_processed})"
        )
