"""
Differential-drive kinematics and velocity models.
"""

from typing import Tuple

import numpy as np

from .state import Pose, Velocity
from ..math.utils import normalize_angle, ieee_divide
from ..math.constants import SMALL_ANGLE_THRESHOLD_RAD, MS_PER_SECOND

class PoseIntegrator:
    """
    Differential-drive pose update from per-frame wheel travel.

    Heading change is (right - left) / wheel_base. Position uses the midpoint
    heading for near-straight motion and the exact circular arc about the
    instantaneous center of rotation otherwise.
    """

    @staticmethod
    def frame_distance(left_meters: float, right_meters: float) -> float:
        """Distance traveled by the platform center."""
        return (left_meters + right_meters) / 2.0

    @staticmethod
    def heading_change(left_meters: float, right_meters: float, wheel_base: float) -> float:
        """Heading change in radians (counter-clockwise positive)."""
        return ieee_divide(right_meters - left_meters, wheel_base)

    @staticmethod
    def position_delta(frame_distance: float, delta_theta: float,
                       theta_new: float) -> Tuple[float, float]:
        """
        Position change for one frame.

        Args:
            frame_distance: Center travel over the frame (m)
            delta_theta: Heading change over the frame (rad)
            theta_new: Heading at the end of the frame (rad)

        Returns:
            (dx, dy) in meters, nan when the inputs are not finite
        """
        with np.errstate(all='ignore'):
            if abs(delta_theta) < SMALL_ANGLE_THRESHOLD_RAD:
                mid_theta = theta_new - delta_theta / 2.0
                return (float(frame_distance * np.cos(mid_theta)),
                        float(frame_distance * np.sin(mid_theta)))

            # Exact arc about the instantaneous center of rotation
            radius = ieee_divide(frame_distance, delta_theta)
            prev_theta = theta_new - delta_theta
            dx = radius * (np.sin(theta_new) - np.sin(prev_theta))
            dy = radius * (np.cos(prev_theta) - np.cos(theta_new))
        return float(dx), float(dy)

    @staticmethod
    def integrate(pose: Pose, frame_distance: float, delta_theta: float) -> Pose:
        """
        Apply one frame of motion to a pose.

        Args:
            pose: Pose at the start of the frame
            frame_distance: Center travel over the frame (m)
            delta_theta: Heading change over the frame (rad)

        Returns:
            Pose at the end of the frame
        """
        theta_new = normalize_angle(pose.theta + delta_theta)
        dx, dy = PoseIntegrator.position_delta(frame_distance, delta_theta, theta_new)
        return Pose(x=pose.x + dx, y=pose.y + dy, theta=theta_new)

class VelocityEstimator:
    """Frame velocity from travel, heading change and elapsed time."""

    @staticmethod
    def estimate(frame_distance: float, delta_theta: float, delta_time_ms: float) -> Velocity:
        """
        Args:
            frame_distance: Center travel over the frame (m)
            delta_theta: Heading change over the frame (rad)
            delta_time_ms: Elapsed time in milliseconds

        Returns:
            Velocity, zero in both components if no time has elapsed
        """
        if delta_time_ms <= 0:
            return Velocity()

        dt = delta_time_ms / MS_PER_SECOND
        return Velocity(linear_x=frame_distance / dt, angular_z=delta_theta / dt)
