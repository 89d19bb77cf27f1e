"""Methods to calculate the global orientation of an IMU from acc and gyr data."""

from meerkatmap.orientation_methods._madgwick import MadgwickAHRS
from meerkatmap.orientation_methods._simple_gyro_integration import SimpleGyroIntegration

__all__ = ["MadgwickAHRS", "SimpleGyroIntegration"]
