#!/usr/bin/env python3
"""
Replay a recorded encoder log through the odometry processor.

Input CSV columns (header row required):
    timestamp_ms, left_deg, right_deg

Rows that cannot be parsed or carry non-finite values are skipped. The
resulting trajectory can be written to a CSV file and plotted.

Sample run command:
    python3 tools/replay_encoder_log.py encoders.csv --config odometry_config.json --plot
"""

import argparse
import csv
import os
import sys
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Tuple

import numpy as np

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from encoder_odom.config import Config
from encoder_odom.odometry import OdometryProcessor, OdometryState

@dataclass
class EncoderSample:
    """One frame of raw encoder data."""
    timestamp: int
    left_deg: float
    right_deg: float

def load_samples(csvfile: str) -> List[EncoderSample]:
    """
    Read encoder samples from a CSV log.

    Args:
        csvfile: Path to the log

    Returns:
        Parsed samples in file order
    """
    samples = []
    with open(csvfile, "r", newline="") as f:
        reader = csv.reader(f)
        next(reader, None)  # skip header

        for row in reader:
            if len(row) < 3:
                continue
            try:
                sample = EncoderSample(
                    timestamp=int(float(row[0])) & 0xFFFF,
                    left_deg=float(row[1]),
                    right_deg=float(row[2])
                )
            except (ValueError, OverflowError):
                continue

            # A single nan or inf angle would corrupt every later pose
            if not np.isfinite([sample.left_deg, sample.right_deg]).all():
                continue
            samples.append(sample)
    return samples

def replay_samples(processor: OdometryProcessor,
                   samples: Iterable[EncoderSample]) -> Iterator[Tuple[EncoderSample, OdometryState]]:
    """
    Feed samples through the processor one frame at a time.

    Yields:
        (sample, state after the frame) tuples
    """
    for sample in samples:
        state = processor.advance(sample.left_deg, sample.right_deg, sample.timestamp)
        yield sample, state

def trajectory_array(states: Iterable[OdometryState]) -> np.ndarray:
    """Stack states into an N x 5 array of [x, y, theta, linear_x, angular_z]."""
    rows = [[s.pose.x, s.pose.y, s.pose.theta, s.velocity.linear_x, s.velocity.angular_z]
            for s in states]
    return np.array(rows, dtype=float).reshape(-1, 5)

def write_trajectory(path: str, samples: List[EncoderSample], trajectory: np.ndarray):
    """Write timestamps and the pose trajectory to CSV."""
    with open(path, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["timestamp_ms", "x", "y", "theta", "linear_x", "angular_z"])
        for sample, row in zip(samples, trajectory):
            writer.writerow([sample.timestamp] + [f"{v:.6f}" for v in row])

def plot_trajectory(trajectory: np.ndarray):
    import matplotlib.pyplot as plt

    plt.figure(figsize=(8, 8))
    plt.plot(trajectory[:, 0], trajectory[:, 1], 'b-', label="Wheel odometry", linewidth=2)
    plt.xlabel("x (m)")
    plt.ylabel("y (m)")
    plt.title("Encoder Odometry Trajectory")
    plt.grid(True)
    plt.axis('equal')
    plt.legend()
    plt.tight_layout()
    plt.show()

def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Replay an encoder log through wheel odometry")
    parser.add_argument("logfile", help="CSV with timestamp_ms,left_deg,right_deg rows")
    parser.add_argument("--config", default="odometry_config.json", help="Odometry config file")
    parser.add_argument("--output", help="Write the trajectory to this CSV file")
    parser.add_argument("--save", action="store_true",
                        help="Write the trajectory to the configured trajectory_file")
    parser.add_argument("--show-config", action="store_true", help="Print the configuration")
    parser.add_argument("--plot", action="store_true", help="Plot the trajectory")
    args = parser.parse_args(argv)

    config = Config(args.config)
    if args.show_config:
        config.print_config()

    try:
        processor = config.create_processor()
    except ValueError as e:
        print(f"ERROR: Invalid geometry in {args.config}: {e}")
        return 1

    samples = load_samples(args.logfile)
    if not samples:
        print(f"No encoder samples found in {args.logfile}")
        return 1

    states = [state for _, state in replay_samples(processor, samples)]
    trajectory = trajectory_array(states)

    final = processor.get_position()
    print(f"Replayed {len(samples)} frames ({processor.get_statistics()['frames_processed']} processed)")
    print(f"  Final pose: [{final.x:.3f}, {final.y:.3f}] m, heading {np.degrees(final.theta):.1f} deg")
    print(f"  Distance:   {processor.get_distance().total_distance:.3f} m")

    output = args.output or (config.trajectory_file if args.save else None)
    if output:
        write_trajectory(output, samples, trajectory)
        print(f"Trajectory written to {output}")

    if args.plot:
        plot_trajectory(trajectory)

    return 0

if __name__ == "__main__":
    sys.exit(main())
