"""
Differential-drive odometry from wheel encoder angles.
"""

from .state import Pose, Velocity, Distance, OdometryState
from .gate import StabilizationGate
from .models import PoseIntegrator, VelocityEstimator
from .processor import OdometryProcessor, advance

__all__ = [
    "Pose",
    "Velocity",
    "Distance",
    "OdometryState",
    "StabilizationGate",
    "PoseIntegrator",
    "VelocityEstimator",
    "OdometryProcessor",
    "advance",
]
