"""meerkatmap - Energy expenditure and locomotion speed of meerkats from wearable IMU data."""
__version__ = "0.1.0"
