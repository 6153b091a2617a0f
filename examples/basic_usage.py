#!/usr/bin/env python3
"""
Basic usage example of the wheel odometry system.

This example drives a simulated differential-drive platform around a
constant-radius turn, generates the wrapped encoder angles and 16-bit
timestamps a motor controller would report, and compares the odometry
estimate against the true path.
"""

import sys
import os
import numpy as np

# Add package modules to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from encoder_odom import OdometryProcessor, Motor, WheelGeometry
from encoder_odom.odometry import Pose

def simulate_encoder_readings(geometry: WheelGeometry, left_speed=0.4, right_speed=0.5,
                              duration=30.0, dt=0.05):
    """
    Simulate the encoders of a platform driving at constant wheel speeds.

    Args:
        geometry: Platform geometry
        left_speed: Left wheel speed in m/s
        right_speed: Right wheel speed in m/s
        duration: Simulation duration in seconds
        dt: Frame period in seconds

    Yields:
        (time_s, timestamp_ms, left_angle_deg, right_angle_deg, true_pose) tuples
    """
    encoder_deg_per_meter = 360.0 * geometry.gear_ratio / geometry.wheel_circumference

    v = (left_speed + right_speed) / 2.0
    omega = (right_speed - left_speed) / geometry.wheel_base

    # Arbitrary starting angles so the first frames differ from zero
    left_start = 120.0
    right_start = 300.0

    steps = int(round(duration / dt))
    for i in range(steps + 1):
        t = i * dt

        left_deg = left_speed * t * encoder_deg_per_meter * geometry.direction_sign(Motor.LEFT)
        right_deg = right_speed * t * encoder_deg_per_meter * geometry.direction_sign(Motor.RIGHT)

        if abs(omega) < 1e-9:
            true_pose = Pose(x=v * t, y=0.0, theta=0.0)
        else:
            radius = v / omega
            heading = omega * t
            true_pose = Pose(x=radius * np.sin(heading),
                             y=radius * (1.0 - np.cos(heading)),
                             theta=float(np.arctan2(np.sin(heading), np.cos(heading))))

        timestamp_ms = int(round(t * 1000.0)) & 0xFFFF
        yield (t,
               timestamp_ms,
               (left_start + left_deg) % 360.0,
               (right_start + right_deg) % 360.0,
               true_pose)

def main():
    """Main example function."""
    print("Wheel Odometry - Basic Usage Example")
    print("=" * 50)

    geometry = WheelGeometry(
        wheel_circumference=1.0373,
        wheel_base=0.5065,
        gear_ratio=2.38462,
        rollover_threshold=100.0,
        right_forward_increases=True,
        left_forward_increases=False
    )
    geometry.validate()

    processor = OdometryProcessor.from_geometry(geometry)

    print("Initialized odometry processor")
    print(f"Geometry: {geometry}")
    print()

    print("Starting simulation (constant turn, 30 seconds)...")

    last_print_time = -np.inf
    print_interval = 5.0  # Print status every 5 seconds

    # The processor discards the first frames, so start the reference there
    offset = None
    true_pose = Pose()

    for t, timestamp_ms, left_deg, right_deg, true_pose in simulate_encoder_readings(geometry):
        processor.update_encoder_reading(Motor.LEFT, left_deg)
        processor.update_encoder_reading(Motor.RIGHT, right_deg)
        processor.update_timestamp(timestamp_ms)
        processor.process_data()

        if offset is None and processor.is_settled():
            offset = true_pose

        if t - last_print_time >= print_interval:
            print_status(processor, true_pose, t)
            last_print_time = t

    print("\nSimulation completed!")

    final = processor.get_position()
    stats = processor.get_statistics()
    print("\n=== Final Statistics ===")
    print(f"Frames processed: {stats['frames_processed']}")
    print(f"Total distance:   {stats['total_distance']:.3f} m")
    print(f"Left wheel:       {processor.get_total_meters_traveled(Motor.LEFT):.3f} m")
    print(f"Right wheel:      {processor.get_total_meters_traveled(Motor.RIGHT):.3f} m")
    if offset is not None:
        error = final.theta - (true_pose.theta - offset.theta)
        heading_error = np.degrees(np.arctan2(np.sin(error), np.cos(error)))
        print(f"Heading error vs truth: {heading_error:.3f}°")

def print_status(processor: OdometryProcessor, true_pose: Pose, t: float):
    """Print current system status."""
    pose = processor.get_position()
    velocity = processor.get_velocity()

    print(f"Time: {t:.1f}s")
    print(f"  Position: [{pose.x:6.2f}, {pose.y:6.2f}] m   (truth [{true_pose.x:6.2f}, {true_pose.y:6.2f}])")
    print(f"  Velocity: {velocity.linear_x:5.2f} m/s, {velocity.angular_z:6.3f} rad/s")
    print(f"  Heading:  {pose.theta:6.3f} rad ({np.degrees(pose.theta):6.1f}°)")
    print()

if __name__ == "__main__":
    main()
