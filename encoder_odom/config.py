"""
Configuration manager for the wheel odometry system.
"""

import json
import os
import copy
from typing import Dict, Any

from .encoders import WheelGeometry
from .odometry import OdometryProcessor
from .math.constants import (DEFAULT_WHEEL_CIRCUMFERENCE_M, DEFAULT_WHEEL_BASE_M,
                             DEFAULT_GEAR_RATIO, DEFAULT_ROLLOVER_THRESHOLD_DEG)

class Config:
    """Configuration manager for the odometry system."""

    DEFAULT_CONFIG = {
        # Drive geometry
        "wheel": {
            "circumference_m": DEFAULT_WHEEL_CIRCUMFERENCE_M,
            "base_m": DEFAULT_WHEEL_BASE_M,
            "gear_ratio": DEFAULT_GEAR_RATIO
        },

        # Encoder behaviour
        "encoder": {
            "rollover_threshold_deg": DEFAULT_ROLLOVER_THRESHOLD_DEG,
            "right_forward_increases": True,
            "left_forward_increases": True
        },

        # Trajectory output written by the replay tool
        "trajectory_file": "odometry_trajectory.csv"
    }

    def __init__(self, config_file: str = "odometry_config.json"):
        """
        Initialize configuration.

        Args:
            config_file: Path to configuration file
        """
        self.config_file = config_file
        self.config = copy.deepcopy(self.DEFAULT_CONFIG)

        # Load configuration from file if it exists
        if os.path.exists(config_file):
            self.load_config()
        else:
            print(f"Config file {config_file} not found, using defaults")
            self.save_config()  # Create default config file

    def load_config(self) -> bool:
        """
        Load configuration from file.

        Returns:
            True if loaded successfully
        """
        try:
            with open(self.config_file, 'r') as f:
                file_config = json.load(f)

            # Merge with defaults (file config overrides defaults)
            self._merge_config(self.config, file_config)

            print(f"Configuration loaded from {self.config_file}")
            return True

        except (OSError, ValueError) as e:
            print(f"Failed to load config: {e}")
            return False

    def save_config(self) -> bool:
        """
        Save current configuration to file.

        Returns:
            True if saved successfully
        """
        try:
            with open(self.config_file, 'w') as f:
                json.dump(self.config, f, indent=2)

            print(f"Configuration saved to {self.config_file}")
            return True

        except (OSError, TypeError) as e:
            print(f"Failed to save config: {e}")
            return False

    def _merge_config(self, base: Dict[str, Any], override: Dict[str, Any]):
        """Recursively merge configuration dictionaries."""
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._merge_config(base[key], value)
            else:
                base[key] = value

    def get(self, key: str, default=None):
        """Get configuration value with optional default."""
        keys = key.split('.')
        value = self.config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def set(self, key: str, value: Any):
        """Set configuration value."""
        keys = key.split('.')
        config = self.config

        for k in keys[:-1]:
            if k not in config:
                config[k] = {}
            config = config[k]

        config[keys[-1]] = value

    # Property accessors for common configuration values
    @property
    def wheel_circumference(self) -> float:
        return float(self.config["wheel"]["circumference_m"])

    @property
    def wheel_base(self) -> float:
        return float(self.config["wheel"]["base_m"])

    @property
    def gear_ratio(self) -> float:
        return float(self.config["wheel"]["gear_ratio"])

    @property
    def rollover_threshold(self) -> float:
        return float(self.config["encoder"]["rollover_threshold_deg"])

    @property
    def right_forward_increases(self) -> bool:
        return bool(self.config["encoder"]["right_forward_increases"])

    @property
    def left_forward_increases(self) -> bool:
        return bool(self.config["encoder"]["left_forward_increases"])

    @property
    def trajectory_file(self) -> str:
        return self.config["trajectory_file"]

    def to_geometry(self) -> WheelGeometry:
        """
        Build validated wheel geometry from the configuration.

        Raises:
            ValueError: If the configured geometry is out of range
        """
        geometry = WheelGeometry(
            wheel_circumference=self.wheel_circumference,
            wheel_base=self.wheel_base,
            gear_ratio=self.gear_ratio,
            rollover_threshold=self.rollover_threshold,
            right_forward_increases=self.right_forward_increases,
            left_forward_increases=self.left_forward_increases
        )
        geometry.validate()
        return geometry

    def create_processor(self) -> OdometryProcessor:
        """Create an odometry processor for the configured platform."""
        return OdometryProcessor.from_geometry(self.to_geometry())

    def print_config(self):
        """Print current configuration."""
        print("=== Odometry Configuration ===")
        print(json.dumps(self.config, indent=2))
