"""Models to estimate the daily energy expenditure (DEE) from acceleration data."""

from meerkatmap.energy_expenditure._calibration import (
    ACTIREST24_CALIBRATION,
    ACTIWAKE_CALIBRATION,
    CalibrationModel,
    kleiber_resting_metabolic_rate,
)
from meerkatmap.energy_expenditure._day_night import extract_daytime, night_duration_from_sun_times
from meerkatmap.energy_expenditure._dee_models import ActiRest24, ActiWake
from meerkatmap.energy_expenditure._vedba import windowed_vedba

__all__ = [
    "ActiWake",
    "ActiRest24",
    "CalibrationModel",
    "ACTIWAKE_CALIBRATION",
    "ACTIREST24_CALIBRATION",
    "kleiber_resting_metabolic_rate",
    "windowed_vedba",
    "night_duration_from_sun_times",
    "extract_daytime",
]
