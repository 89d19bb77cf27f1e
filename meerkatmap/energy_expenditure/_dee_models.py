"""The ACTIWAKE and ACTIREST24 models to estimate daily energy expenditure."""
from typing import Tuple

import numpy as np
import pandas as pd
from typing_extensions import Self

from meerkatmap.base import BaseEnergyExpenditure
from meerkatmap.energy_expenditure._calibration import (
    ACTIREST24_CALIBRATION,
    ACTIWAKE_CALIBRATION,
    CalibrationModel,
    kleiber_resting_metabolic_rate,
)
from meerkatmap.energy_expenditure._vedba import windowed_vedba
from meerkatmap.utils.consts import SF_ACC
from meerkatmap.utils.datatype_helper import SingleSensorData, is_single_sensor_data
from meerkatmap.utils.exceptions import ValidationError


def _validate_window(window_length_s: float, sampling_rate_hz: float) -> int:
    """Validate the window length and convert it into samples."""
    window_length = round(sampling_rate_hz * window_length_s)
    if window_length < 2:
        raise ValidationError(
            f"The effective window size is smaller than 2 samples (`sampling_rate_hz`={sampling_rate_hz}, "
            f"`window_length_s`={window_length_s}). "
            "Specify a larger window length."
        )
    return window_length


class _WindowedEnergyMixin:
    window_length_s: float
    calibration: CalibrationModel

    def _window_energy(self, data: SingleSensorData, sampling_rate_hz: float) -> Tuple[pd.Series, pd.Series]:
        is_single_sensor_data(data, check_gyr=False, frame="sensor", raise_exception=True)
        window_length = _validate_window(self.window_length_s, sampling_rate_hz)

        slope, intercept = self.calibration
        vedba = windowed_vedba(data[SF_ACC].to_numpy(dtype=float), window_length)
        energy = self.window_length_s * (slope * vedba + intercept)

        index = pd.Index(np.arange(len(vedba)) * window_length, name="window_start")
        return pd.Series(vedba, index=index, name="vedba"), pd.Series(energy, index=index, name="energy")


class ActiWake(BaseEnergyExpenditure, _WindowedEnergyMixin):
    """Estimate the daily energy expenditure with the ACTIWAKE model.

    The animal is assumed to rest throughout the night.
    The energy expended during the night is the resting metabolic rate (Kleiber's law) times the duration of the night.
    During the day (sunrise to sunset) the energy is estimated from acceleration:
    The VeDBA is calculated in non-overlapping windows of `window_length_s`, converted to power using the linear
    `calibration` and multiplied with the window duration.
    Windows with missing values are treated as rest (VeDBA = 0).

    Parameters
    ----------
    window_length_s
        The length of the windows in which the VeDBA is calculated in seconds.
        The calibration is only valid for the window length it was obtained with (2 s).
    calibration
        The linear relationship between VeDBA (m/s^2) and power (J/s) as (slope, intercept).

    Attributes
    ----------
    vedba_
        The VeDBA (m/s^2) of every daytime window.
        The index is the first sample of each window.
    window_energy_
        The energy (J) expended in every daytime window.
    resting_metabolic_rate_
        The resting metabolic rate in J/s
    daytime_energy_
        The energy expended during the day in J
    nighttime_energy_
        The energy expended during the night in J
    dee_
        The daily energy expenditure in kJ

    Other Parameters
    ----------------
    data
        The acceleration (g) between sunrise and sunset
    sampling_rate_hz
        The sampling rate of the data
    body_mass_g
        The body mass of the animal in gram
    night_duration_s
        The duration of the night in seconds

    Examples
    --------
    >>> day_data = extract_daytime(acc_24h, sunrise, sunset)
    >>> dee = ActiWake().estimate(
    ...     day_data,
    ...     sampling_rate_hz=50,
    ...     body_mass_g=750,
    ...     night_duration_s=night_duration_from_sun_times(sunrise, sunset),
    ... )
    >>> dee.dee_

    """

    window_length_s: float
    calibration: CalibrationModel

    data: SingleSensorData
    sampling_rate_hz: float
    body_mass_g: float
    night_duration_s: float

    resting_metabolic_rate_: float
    daytime_energy_: float
    nighttime_energy_: float

    def __init__(self, window_length_s: float = 2.0, calibration: CalibrationModel = ACTIWAKE_CALIBRATION):
        self.window_length_s = window_length_s
        self.calibration = calibration

    def estimate(
        self, data: SingleSensorData, sampling_rate_hz: float, *, body_mass_g: float, night_duration_s: float
    ) -> Self:
        """Estimate the energy expenditure of one day.

        Parameters
        ----------
        data
            The acceleration (g) between sunrise and sunset
        sampling_rate_hz
            The sampling rate of the data
        body_mass_g
            The body mass of the animal in gram
        night_duration_s
            The duration of the night in seconds

        Returns
        -------
        self
            The class instance with all result attributes populated

        """
        self.data = data
        self.sampling_rate_hz = sampling_rate_hz
        self.body_mass_g = body_mass_g
        self.night_duration_s = night_duration_s

        if night_duration_s < 0:
            raise ValueError(f"The night duration can not be negative ({night_duration_s} s).")

        self.resting_metabolic_rate_ = kleiber_resting_metabolic_rate(body_mass_g)
        self.nighttime_energy_ = self.resting_metabolic_rate_ * night_duration_s
        self.vedba_, self.window_energy_ = self._window_energy(data, sampling_rate_hz)
        self.daytime_energy_ = float(self.window_energy_.sum())
        self.dee_ = (self.daytime_energy_ + self.nighttime_energy_) / 1000
        return self


class ActiRest24(BaseEnergyExpenditure, _WindowedEnergyMixin):
    """Estimate the daily energy expenditure with the ACTIREST24 model.

    The VeDBA is calculated in non-overlapping windows of `window_length_s` over the full 24 h of data without
    distinguishing day and night.
    Each window is converted to power using the linear `calibration` and multiplied with the window duration.
    Windows with missing values are treated as rest (VeDBA = 0).

    The recordings usually end one minute before midnight.
    This missing time at the end of the day is assumed to be spent perfectly resting (VeDBA = 0) and contributes
    `intercept * floor(unrecorded_rest_duration_s / window_length_s) * window_length_s` J.

    Parameters
    ----------
    window_length_s
        The length of the windows in which the VeDBA is calculated in seconds.
        The calibration is only valid for the window length it was obtained with (2 s).
    calibration
        The linear relationship between VeDBA (m/s^2) and power (J/s) as (slope, intercept).
    unrecorded_rest_duration_s
        The duration (s) at the end of the day that is not covered by the data and assumed to be spent resting.
        Set it to 0 if the data covers the full day.

    Attributes
    ----------
    vedba_
        The VeDBA (m/s^2) of every window.
        The index is the first sample of each window.
    window_energy_
        The energy (J) expended in every window.
    unrecorded_energy_
        The energy (J) expended in the unrecorded time at the end of the day
    dee_
        The daily energy expenditure in kJ

    Other Parameters
    ----------------
    data
        The acceleration (g) of the full day
    sampling_rate_hz
        The sampling rate of the data

    Examples
    --------
    >>> dee = ActiRest24().estimate(acc_24h, sampling_rate_hz=50)
    >>> dee.dee_

    """

    window_length_s: float
    calibration: CalibrationModel
    unrecorded_rest_duration_s: float

    data: SingleSensorData
    sampling_rate_hz: float

    unrecorded_energy_: float

    def __init__(
        self,
        window_length_s: float = 2.0,
        calibration: CalibrationModel = ACTIREST24_CALIBRATION,
        unrecorded_rest_duration_s: float = 60.0,
    ):
        self.window_length_s = window_length_s
        self.calibration = calibration
        self.unrecorded_rest_duration_s = unrecorded_rest_duration_s

    def estimate(self, data: SingleSensorData, sampling_rate_hz: float) -> Self:
        """Estimate the energy expenditure of one day.

        Parameters
        ----------
        data
            The acceleration (g) of the full day
        sampling_rate_hz
            The sampling rate of the data

        Returns
        -------
        self
            The class instance with all result attributes populated

        """
        self.data = data
        self.sampling_rate_hz = sampling_rate_hz

        if self.unrecorded_rest_duration_s < 0:
            raise ValueError("`unrecorded_rest_duration_s` can not be negative.")

        self.vedba_, self.window_energy_ = self._window_energy(data, sampling_rate_hz)
        _, intercept = self.calibration
        n_rest_windows = np.floor(self.unrecorded_rest_duration_s / self.window_length_s)
        self.unrecorded_energy_ = float(intercept * n_rest_windows * self.window_length_s)
        self.dee_ = (float(self.window_energy_.sum()) + self.unrecorded_energy_) / 1000
        return self
