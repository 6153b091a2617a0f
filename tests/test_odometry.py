#!/usr/bin/env python3
"""
Unit tests for the odometry pipeline stages.
"""

import unittest
import math
import numpy as np
import sys
import os

# Add package modules to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from encoder_odom.math import normalize_angle, ieee_divide, timestamp_delta
from encoder_odom.encoders import (Motor, MotorPair, EncoderState, EncoderDeltaTracker,
                                   WheelGeometry, WheelDistanceConverter, angle_delta,
                                   push_reading, track_delta, degrees_to_meters, convert_frame)
from encoder_odom.odometry import (Pose, Velocity, StabilizationGate, PoseIntegrator,
                                   VelocityEstimator)

class TestAngleMath(unittest.TestCase):
    """Test heading normalization and timestamp arithmetic."""

    def test_normalize_angle_range(self):
        """Test normalized heading always lies in (-pi, pi]."""
        for angle in np.linspace(-50.0, 50.0, 2001):
            result = normalize_angle(angle)
            self.assertGreater(result, -math.pi)
            self.assertLessEqual(result, math.pi)
            # Same direction as the input
            self.assertAlmostEqual(math.cos(result), math.cos(angle), places=9)
            self.assertAlmostEqual(math.sin(result), math.sin(angle), places=9)

    def test_normalize_angle_boundaries(self):
        """Test the half-open boundary maps -pi onto pi."""
        self.assertAlmostEqual(normalize_angle(math.pi), math.pi)
        self.assertAlmostEqual(normalize_angle(-math.pi), math.pi)
        self.assertEqual(normalize_angle(0.0), 0.0)
        self.assertAlmostEqual(normalize_angle(0.5), 0.5)
        self.assertAlmostEqual(normalize_angle(-0.5), -0.5)

    def test_normalize_large_angle(self):
        """Test far out-of-range angles are reduced in one step."""
        result = normalize_angle(1000.0 * math.pi + 0.25)
        self.assertAlmostEqual(result, 0.25, places=6)

    def test_normalize_non_finite(self):
        """Test non-finite headings pass through unchanged."""
        self.assertEqual(normalize_angle(math.inf), math.inf)
        self.assertEqual(normalize_angle(-math.inf), -math.inf)
        self.assertTrue(math.isnan(normalize_angle(math.nan)))

    def test_ieee_divide(self):
        """Test division follows IEEE 754 instead of raising."""
        self.assertEqual(ieee_divide(1.0, 4.0), 0.25)
        self.assertEqual(ieee_divide(1.0, 0.0), math.inf)
        self.assertEqual(ieee_divide(-1.0, 0.0), -math.inf)
        self.assertTrue(math.isnan(ieee_divide(0.0, 0.0)))
        self.assertEqual(ieee_divide(1.0, 1e-310), math.inf)
        self.assertIsInstance(ieee_divide(1.0, 2.0), float)

    def test_timestamp_delta(self):
        """Test modular subtraction of the 16-bit timestamp."""
        self.assertEqual(timestamp_delta(1500, 1000), 500)
        self.assertEqual(timestamp_delta(1000, 1000), 0)
        # Counter wrapped between readings
        self.assertEqual(timestamp_delta(500, 65000), 1036)
        self.assertEqual(timestamp_delta(0, 65535), 1)

class TestEncoderDeltaTracker(unittest.TestCase):
    """Test rollover-aware angle deltas."""

    def test_no_wrap(self):
        """Test plain delta below the threshold."""
        self.assertEqual(angle_delta(90.0, 50.0, 100.0), 40.0)
        self.assertEqual(angle_delta(50.0, 90.0, 100.0), -40.0)

    def test_wrap_through_360(self):
        """Test reading passing 360 -> 0 while increasing."""
        # raw = -290 -> 360 + (-290)
        self.assertEqual(angle_delta(10.0, 300.0, 100.0), 70.0)

    def test_wrap_through_0(self):
        """Test reading passing 0 -> 360 while decreasing."""
        # raw = 290 -> -(360 - 290)
        self.assertEqual(angle_delta(300.0, 10.0, 100.0), -70.0)

    def test_threshold_is_exclusive(self):
        """Test a jump exactly at the threshold is not a rollover."""
        self.assertEqual(angle_delta(150.0, 50.0, 100.0), 100.0)
        self.assertEqual(angle_delta(50.0, 150.0, 100.0), -100.0)

    def test_push_reading_shifts_current(self):
        """Test pushing a reading moves current into previous."""
        state = push_reading(EncoderState(), 120.0)
        self.assertEqual(state.previous_angle, 0.0)
        self.assertEqual(state.current_angle, 120.0)

        state = push_reading(state, 130.0)
        self.assertEqual(state.previous_angle, 120.0)
        self.assertEqual(state.current_angle, 130.0)

    def test_track_delta_accumulates(self):
        """Test frame delta is recorded and added to the total."""
        state = EncoderState(current_angle=350.0, previous_angle=120.0, total_degrees=10.0)
        tracked = track_delta(state, 100.0)

        self.assertEqual(tracked.degrees_in_frame, -130.0)
        self.assertEqual(tracked.total_degrees, -120.0)
        # Input is untouched
        self.assertEqual(state.total_degrees, 10.0)

    def test_tracker_handles_both_motors(self):
        """Test tracker computes an independent delta per motor."""
        encoders = MotorPair(
            left=EncoderState(current_angle=350.0, previous_angle=120.0),
            right=EncoderState(current_angle=50.0, previous_angle=300.0)
        )
        tracked = EncoderDeltaTracker(100.0).track(encoders)

        self.assertEqual(tracked[Motor.LEFT].degrees_in_frame, -130.0)
        self.assertEqual(tracked[Motor.RIGHT].degrees_in_frame, 110.0)

class TestMotorPair(unittest.TestCase):
    """Test the two-slot per-motor container."""

    def test_indexing(self):
        pair = MotorPair(left=1, right=2)
        self.assertEqual(pair[Motor.LEFT], 1)
        self.assertEqual(pair[Motor.RIGHT], 2)

    def test_with_value(self):
        pair = MotorPair(left=1, right=2)
        updated = pair.with_value(Motor.RIGHT, 5)

        self.assertEqual(updated, MotorPair(left=1, right=5))
        self.assertEqual(pair.right, 2)

    def test_invalid_key(self):
        pair = MotorPair(left=1, right=2)
        with self.assertRaises(KeyError):
            pair["left"]

class TestWheelDistanceConverter(unittest.TestCase):
    """Test encoder angle to wheel distance conversion."""

    def setUp(self):
        self.geometry = WheelGeometry(
            wheel_circumference=1.0,
            wheel_base=0.5,
            gear_ratio=2.0,
            rollover_threshold=100.0,
            right_forward_increases=True,
            left_forward_increases=False
        )

    def test_direction_sign(self):
        self.assertEqual(self.geometry.direction_sign(Motor.RIGHT), 1.0)
        self.assertEqual(self.geometry.direction_sign(Motor.LEFT), -1.0)

    def test_one_encoder_rotation(self):
        """Test one encoder rotation is circumference / gear ratio."""
        self.assertAlmostEqual(degrees_to_meters(360.0, self.geometry, Motor.RIGHT), 0.5)
        # Inverted motor: a falling reading is forward travel
        self.assertAlmostEqual(degrees_to_meters(-360.0, self.geometry, Motor.LEFT), 0.5)
        self.assertAlmostEqual(degrees_to_meters(360.0, self.geometry, Motor.LEFT), -0.5)

    def test_meters_per_degree(self):
        self.assertAlmostEqual(self.geometry.meters_per_encoder_degree, 1.0 / 720.0)

    def test_convert_frame_accumulates(self):
        """Test frame meters are set and added to the total."""
        state = EncoderState(degrees_in_frame=90.0, total_meters=1.0)
        converted = convert_frame(state, self.geometry, Motor.RIGHT)

        self.assertAlmostEqual(converted.meters_in_frame, 0.125)
        self.assertAlmostEqual(converted.total_meters, 1.125)

    def test_converter_handles_both_motors(self):
        encoders = MotorPair(left=EncoderState(degrees_in_frame=-180.0),
                             right=EncoderState(degrees_in_frame=180.0))
        converted = WheelDistanceConverter(self.geometry).convert(encoders)

        self.assertAlmostEqual(converted.left.meters_in_frame, 0.25)
        self.assertAlmostEqual(converted.right.meters_in_frame, 0.25)

    def test_zero_gear_ratio_propagates(self):
        """Test a zero gear ratio yields inf/nan instead of an error."""
        geometry = WheelGeometry(1.0, 0.5, 0.0, 100.0)

        self.assertEqual(degrees_to_meters(10.0, geometry, Motor.RIGHT), math.inf)
        self.assertEqual(degrees_to_meters(-10.0, geometry, Motor.RIGHT), -math.inf)
        self.assertTrue(math.isnan(degrees_to_meters(0.0, geometry, Motor.RIGHT)))
        self.assertEqual(geometry.meters_per_encoder_degree, math.inf)

    def test_tiny_gear_ratio_overflows(self):
        """Test an overflowing conversion saturates to inf."""
        geometry = WheelGeometry(1.0, 0.5, 1e-310, 100.0)
        self.assertEqual(degrees_to_meters(90.0, geometry, Motor.RIGHT), math.inf)

    def test_validate(self):
        """Test caller-side geometry validation."""
        self.geometry.validate()

        invalid = [
            WheelGeometry(0.0, 0.5, 2.0, 100.0),
            WheelGeometry(1.0, -0.5, 2.0, 100.0),
            WheelGeometry(1.0, 0.5, 0.0, 100.0),
            WheelGeometry(1.0, 0.5, 2.0, 0.0),
            WheelGeometry(1.0, 0.5, 2.0, 180.0),
            WheelGeometry(float('nan'), 0.5, 2.0, 100.0),
        ]
        for geometry in invalid:
            with self.assertRaises(ValueError):
                geometry.validate()

class TestPoseIntegrator(unittest.TestCase):
    """Test differential-drive kinematics."""

    def test_heading_change_formula(self):
        """Test heading change is (right - left) / wheel base."""
        self.assertAlmostEqual(PoseIntegrator.heading_change(0.1, 0.3, 0.5), 0.4)
        self.assertAlmostEqual(PoseIntegrator.heading_change(0.3, 0.1, 0.5), -0.4)
        self.assertAlmostEqual(PoseIntegrator.frame_distance(0.1, 0.3), 0.2)

    def test_straight_line(self):
        """Test equal wheel travel moves along the heading."""
        pose = PoseIntegrator.integrate(Pose(theta=math.pi / 2), 1.0, 0.0)

        self.assertAlmostEqual(pose.x, 0.0)
        self.assertAlmostEqual(pose.y, 1.0)
        self.assertAlmostEqual(pose.theta, math.pi / 2)

    def test_small_angle_update(self):
        """Test midpoint-heading update below the small-angle threshold."""
        left, right, base = 0.1, 0.102, 0.5
        delta_theta = PoseIntegrator.heading_change(left, right, base)
        distance = PoseIntegrator.frame_distance(left, right)
        self.assertLess(abs(delta_theta), 0.01)

        pose = PoseIntegrator.integrate(Pose(), distance, delta_theta)

        mid = delta_theta / 2.0
        self.assertAlmostEqual(pose.theta, delta_theta, places=12)
        self.assertAlmostEqual(pose.x, distance * math.cos(mid), places=12)
        self.assertAlmostEqual(pose.y, distance * math.sin(mid), places=12)

    def test_exact_arc_update(self):
        """Test circular arc update above the small-angle threshold."""
        start = Pose(x=1.0, y=-2.0, theta=0.3)
        distance, delta_theta = 0.15, 0.2

        pose = PoseIntegrator.integrate(start, distance, delta_theta)

        radius = distance / delta_theta
        theta_new = 0.5
        self.assertAlmostEqual(pose.theta, theta_new, places=12)
        self.assertAlmostEqual(pose.x, 1.0 + radius * (math.sin(theta_new) - math.sin(0.3)), places=12)
        self.assertAlmostEqual(pose.y, -2.0 + radius * (math.cos(0.3) - math.cos(theta_new)), places=12)

    def test_spin_in_place(self):
        """Test opposite wheel travel only changes heading."""
        delta_theta = PoseIntegrator.heading_change(-0.1, 0.1, 0.5)
        pose = PoseIntegrator.integrate(Pose(), 0.0, delta_theta)

        self.assertEqual(pose.x, 0.0)
        self.assertEqual(pose.y, 0.0)
        self.assertAlmostEqual(pose.theta, 0.4)

    def test_arc_follows_circle(self):
        """Test repeated arc updates stay on the true circle."""
        distance, delta_theta = 0.015, 0.02
        radius = distance / delta_theta

        pose = Pose()
        for _ in range(400):
            pose = PoseIntegrator.integrate(pose, distance, delta_theta)

        total = 400 * delta_theta
        self.assertAlmostEqual(pose.x, radius * math.sin(total), places=9)
        self.assertAlmostEqual(pose.y, radius * (1.0 - math.cos(total)), places=9)
        self.assertAlmostEqual(pose.theta, normalize_angle(total), places=9)

    def test_heading_wraps(self):
        """Test heading stays normalized through repeated turning."""
        pose = Pose(theta=3.1)
        pose = PoseIntegrator.integrate(pose, 0.0, 0.1)

        self.assertAlmostEqual(pose.theta, 3.2 - 2 * math.pi)

    def test_pose_vector(self):
        pose = Pose(x=1.0, y=2.0, theta=0.5)
        np.testing.assert_array_equal(pose.pose_vector, np.array([1.0, 2.0, 0.5]))
        np.testing.assert_array_equal(pose.position, np.array([1.0, 2.0]))

    def test_non_finite_motion_propagates(self):
        """Test inf/nan travel reaches the pose without raising."""
        zero_base = PoseIntegrator.heading_change(0.1, 0.3, 0.0)
        self.assertEqual(zero_base, math.inf)

        pose = PoseIntegrator.integrate(Pose(), math.inf, math.inf)
        self.assertEqual(pose.theta, math.inf)
        self.assertTrue(math.isnan(pose.x))
        self.assertTrue(math.isnan(pose.y))

        # An infinite heading stays non-finite on the next small-angle frame
        pose = PoseIntegrator.integrate(pose, 0.1, 0.0)
        self.assertEqual(pose.theta, math.inf)
        self.assertTrue(math.isnan(pose.x))

        pose = PoseIntegrator.integrate(Pose(), math.nan, math.nan)
        self.assertTrue(math.isnan(pose.theta))
        self.assertTrue(math.isnan(pose.x))

class TestVelocityEstimator(unittest.TestCase):
    """Test frame velocity estimation."""

    def test_velocity(self):
        velocity = VelocityEstimator.estimate(0.25, 0.1, 500)

        self.assertAlmostEqual(velocity.linear_x, 0.5)
        self.assertAlmostEqual(velocity.angular_z, 0.2)

    def test_zero_time_guard(self):
        """Test elapsed time <= 0 forces zero velocity."""
        for delta_time in (0, -10):
            velocity = VelocityEstimator.estimate(1.0, 0.5, delta_time)
            self.assertEqual(velocity, Velocity())

class TestStabilizationGate(unittest.TestCase):
    """Test startup frame discarding."""

    def test_discards_three_frames(self):
        gate = StabilizationGate()
        results = []
        for _ in range(5):
            gate, ready = gate.step()
            results.append(ready)

        self.assertEqual(results, [False, False, False, True, True])
        self.assertTrue(gate.ready)

    def test_ready_gate_stays_ready(self):
        gate = StabilizationGate(remaining=0)
        next_gate, ready = gate.step()

        self.assertTrue(ready)
        self.assertIs(next_gate, gate)

if __name__ == '__main__':
    unittest.main(verbosity=2)
