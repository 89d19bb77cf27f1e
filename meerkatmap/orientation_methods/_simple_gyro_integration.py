"""Orientation from the gyroscope alone."""
from typing import Optional, Union

import numpy as np
from joblib import Memory
from numba import njit
from scipy.spatial.transform import Rotation
from typing_extensions import Self

from meerkatmap.base import BaseOrientationMethod
from meerkatmap.orientation_methods._initial_orientation import resolve_initial_orientation
from meerkatmap.utils.consts import SF_GYR
from meerkatmap.utils.datatype_helper import SingleSensorData, is_single_sensor_data
from meerkatmap.utils.fast_quaternion_math import normalize, rate_of_change_from_gyro


class SimpleGyroIntegration(BaseOrientationMethod):
    """Integrate the angular rate to an orientation without any correction of the gyro drift.

    The result is the same as that of :class:`~meerkatmap.orientation_methods.MadgwickAHRS` with `beta=0`.
    Over the few seconds of a locomotion bout the drift is small, which makes this method a simple reference for the
    gravity compensation.

    Parameters
    ----------
    initial_orientation : Rotation, (4,) quaternion array or None
        The orientation before the first sample (quaternion order x, y, z, w).
        If None, it is derived from the acc vector of the first sample (see
        :class:`~meerkatmap.orientation_methods.MadgwickAHRS`).
    memory
        Optional `joblib.Memory` to cache the integration.

    Attributes
    ----------
    orientation_
        The len(data) + 1 orientations (initial orientation first) as *SingleSensorOrientationList*
    orientation_object_
        The same orientations as a scipy Rotation object

    Other Parameters
    ----------------
    data
        The data passed to the estimate method
    sampling_rate_hz
        The sampling rate of this data

    """

    initial_orientation: Optional[Union[np.ndarray, Rotation]]
    memory: Optional[Memory]

    data: SingleSensorData
    sampling_rate_hz: float

    def __init__(
        self,
        initial_orientation: Optional[Union[np.ndarray, Rotation]] = None,
        memory: Optional[Memory] = None,
    ):
        self.initial_orientation = initial_orientation
        self.memory = memory

    def estimate(self, data: SingleSensorData, sampling_rate_hz: float) -> Self:
        """Integrate the gyro data sample by sample.

        Parameters
        ----------
        data
            Sensor data with at least the gyro columns in rad/s
        sampling_rate_hz
            The sampling rate of the data in Hz

        Returns
        -------
        self
            The class instance with all result attributes populated

        """
        self.data = data
        self.sampling_rate_hz = sampling_rate_hz

        is_single_sensor_data(data, check_acc=False, frame="sensor", raise_exception=True)
        start = resolve_initial_orientation(self.initial_orientation, data)

        integrate = (self.memory or Memory(None)).cache(_simple_gyro_integration_series)
        quats = integrate(
            gyro=data[SF_GYR].to_numpy(dtype=float), initial_orientation=start, sampling_rate_hz=sampling_rate_hz
        )
        self.orientation_object_ = Rotation.from_quat(quats)
        return self


@njit(cache=True)
def _simple_gyro_integration_series(gyro, initial_orientation, sampling_rate_hz):
    n_samples = gyro.shape[0]
    out = np.empty((n_samples + 1, 4))
    out[0] = initial_orientation
    for i in range(n_samples):
        out[i + 1] = normalize(out[i] + rate_of_change_from_gyro(gyro[i], out[i]) / sampling_rate_hz)
    return out
