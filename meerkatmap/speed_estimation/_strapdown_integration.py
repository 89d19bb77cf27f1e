"""Estimate velocity and speed by strapdown integration with a zero-velocity constraint at both ends."""
import numpy as np
import pandas as pd
from numpy.linalg import norm
from scipy.integrate import cumulative_trapezoid
from typing_extensions import Self

from meerkatmap.base import BasePositionMethod
from meerkatmap.utils.consts import GF_ACC, GF_HORIZONTAL_AXIS, GF_POS, GF_VEL
from meerkatmap.utils.datatype_helper import SingleSensorData, is_single_sensor_data
from meerkatmap.utils.exceptions import DegenerateIntervalError


class StrapdownIntegration(BasePositionMethod):
    """Integrate gravity-free global frame acceleration and remove the integration drift linearly.

    .. warning::
       We assume that the acc signal is already gravity-free and converted into the global frame!
       Use :class:`~meerkatmap.gravity_removal.GravityCompensation` to get such data.

    The sensor is assumed to be motionless at the first and the last sample of the data.
    Hence, the velocity at both ends must be zero.
    The velocity is first obtained by cumulative trapezoidal integration, starting with a velocity of 0 at the first
    sample.
    Any non-zero velocity at the last sample is considered integration drift.
    It is removed by subtracting a linear ramp going from 0 at the first sample to the final velocity at the last
    sample from each axis independently.
    The final velocity is then set to exactly 0.

    The speed is the norm of the velocity in the horizontal plane (x and y axis of the global frame).

    This method has no parameters.

    Attributes
    ----------
    velocity_
        The strapped-down velocity in the global frame (m/s).
        The first and the last value are exactly 0 on all axis.
    speed_
        The strapped-down speed in the horizontal plane (m/s).
    position_
        The displacement in the global frame (m) obtained by integrating the strapped-down velocity.
        The position of the first sample is 0.
    raw_velocity_
        The velocity before the drift correction.
        This might be helpful for debugging.

    Other Parameters
    ----------------
    data
        The data passed to the estimate method.
    sampling_rate_hz
        The sampling rate of the data.

    Raises
    ------
    DegenerateIntervalError
        If the data contains less than 2 samples

    Examples
    --------
    >>> strap = StrapdownIntegration().estimate(compensated.acc_global_frame_, sampling_rate_hz=100)
    >>> strap.speed_.mean()

    """

    data: SingleSensorData
    sampling_rate_hz: float

    speed_: pd.Series
    raw_velocity_: pd.DataFrame

    def estimate(self, data: SingleSensorData, sampling_rate_hz: float) -> Self:
        """Estimate the velocity and speed of the sensor based on the provided global frame data.

        Parameters
        ----------
        data
            Gravity-free acc data in the global frame (m/s^2) of exactly the domain of integration
        sampling_rate_hz
            The sampling rate of the data in Hz

        Returns
        -------
        self
            The class instance with all result attributes populated

        """
        self.data = data
        self.sampling_rate_hz = sampling_rate_hz

        is_single_sensor_data(self.data, check_gyr=False, frame="global", raise_exception=True)
        n_samples = len(data)
        if n_samples <= 1:
            raise DegenerateIntervalError(
                f"The domain of integration must contain at least 2 samples, but it contains {n_samples}."
            )

        acc = data[GF_ACC].to_numpy(dtype=float)
        raw_velocity = cumulative_trapezoid(acc, axis=0, initial=0) / sampling_rate_hz
        ramp = np.arange(n_samples) / (n_samples - 1)
        velocity = raw_velocity - raw_velocity[-1] * ramp[:, None]
        # Remove rounding residuals of the division
        velocity[-1] = 0.0
        position = cumulative_trapezoid(velocity, axis=0, initial=0) / sampling_rate_hz

        self.raw_velocity_ = self._to_df(raw_velocity, GF_VEL)
        self.velocity_ = self._to_df(velocity, GF_VEL)
        self.position_ = self._to_df(position, GF_POS)
        self.speed_ = pd.Series(norm(velocity[:, GF_HORIZONTAL_AXIS], axis=1), name="speed")
        self.speed_.index.name = "sample"
        return self

    @staticmethod
    def _to_df(values: np.ndarray, columns) -> pd.DataFrame:
        df = pd.DataFrame(values, columns=columns)
        df.index.name = "sample"
        return df
