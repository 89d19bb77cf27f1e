"""Methods to estimate the locomotion speed from acc and gyr data of padded locomotion bouts."""

from meerkatmap.speed_estimation._bout_speed_estimation import BoutSpeedEstimation, estimate_bout_speeds
from meerkatmap.speed_estimation._strapdown_integration import StrapdownIntegration

__all__ = ["StrapdownIntegration", "BoutSpeedEstimation", "estimate_bout_speeds"]
