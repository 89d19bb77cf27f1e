"""Calibrations between VeDBA and power and the resting metabolic rate."""
from typing import NamedTuple, Union

import numpy as np

from meerkatmap.utils.consts import SECONDS_PER_DAY


class CalibrationModel(NamedTuple):
    """A linear relationship between VeDBA and power: `power = slope * vedba + intercept`.

    The calibrations were obtained with VeDBA calculated in 2 s windows from triaxial acceleration sampled at 50 Hz.
    """

    #: J s / m
    slope: float
    #: J/s
    intercept: float

    def power(self, vedba: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
        """Convert VeDBA (m/s^2) into power (J/s)."""
        return self.slope * vedba + self.intercept


#: Calibration of the ACTIWAKE model (only used for the time between sunrise and sunset)
ACTIWAKE_CALIBRATION = CalibrationModel(slope=0.64118, intercept=6.44339)
#: Calibration of the ACTIREST24 model (used for the full 24 h)
ACTIREST24_CALIBRATION = CalibrationModel(slope=0.90565, intercept=3.10448)


def kleiber_resting_metabolic_rate(body_mass_g: float) -> float:
    """Calculate the resting metabolic rate in J/s according to Kleiber's law.

    `rmr = 300.4 kJ/day * (body_mass_kg) ** 0.75`

    Parameters
    ----------
    body_mass_g
        The body mass of the animal in gram

    Examples
    --------
    >>> kleiber_resting_metabolic_rate(1000)
    3.476851851851852

    """
    if body_mass_g <= 0:
        raise ValueError(f"The body mass must be positive, but it is {body_mass_g} g.")
    return 300.4 * (body_mass_g / 1000) ** 0.75 / SECONDS_PER_DAY * 1000
