"""Implementation of the MadgwickAHRS (IMU variant without magnetometer)."""
from typing import Optional, Union

import numpy as np
from joblib import Memory
from numba import njit
from scipy.spatial.transform import Rotation
from typing_extensions import Self

from meerkatmap.base import BaseOrientationMethod
from meerkatmap.orientation_methods._initial_orientation import resolve_initial_orientation
from meerkatmap.utils.consts import SF_ACC, SF_GYR
from meerkatmap.utils.datatype_helper import SingleSensorData, is_single_sensor_data
from meerkatmap.utils.fast_quaternion_math import normalize, rate_of_change_from_gyro


class MadgwickAHRS(BaseOrientationMethod):
    """Estimate the orientation of an IMU with the gradient descent filter of Madgwick.

    This method applies a gyro integration with an additional correction step that aligns the estimated
    orientation of the global z-axis with the gravity direction measured by the accelerometer.
    This implementation is based on the paper [1]_ (IMU variant, no magnetometer).

    For each sample the rate of change of the orientation quaternion `q` is

    .. math::

        \\dot{q} = \\frac{1}{2} q \\otimes (0, \\omega) - \\beta \\frac{\\nabla f}{\\lVert \\nabla f \\rVert}

    where :math:`\\nabla f = J^T f` is the gradient of the misalignment
    :math:`f = q^{-1} \\otimes (0, 0, 0, 1) \\otimes q - a / \\lVert a \\rVert` between the global z-axis expressed in
    the sensor frame and the normalized acceleration.
    The orientation is then updated by `q = normalize(q + qdot / sampling_rate_hz)`.
    For samples with an acc of exactly 0 the correction is skipped.

    The resulting orientations rotate vectors from the sensor frame into the global frame.
    The global z-axis points along the acceleration measured by a resting sensor.
    As no magnetometer is used, the heading of the global frame is arbitrary and defined by the initial orientation.

    Parameters
    ----------
    beta : float between 0 and 1
        Gain of the accelerometer based correction.
        Large values pull the orientation quickly towards the measured gravity, which is only valid while the
        linear acceleration is small compared to gravity.
        With `beta=0` the gyro is integrated without correction (as
        :class:`~meerkatmap.orientation_methods.SimpleGyroIntegration` does).
    initial_orientation : Rotation, (4,) quaternion array or None
        The orientation before the first sample (quaternion order x, y, z, w).
        As the correction is slow, this should be close to the true orientation.
        If None, the first sample of the data is assumed to be static and the initial orientation is the shortest
        rotation that aligns its acc vector with the global z-axis.
    memory
        Optional `joblib.Memory` to cache the filter run.

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

    Notes
    -----
    The filter loop is compiled with *Numba*.
    The first call in a new environment therefore includes the compilation time.

    .. [1] Madgwick, S. O. H., Harrison, A. J. L., & Vaidyanathan, R. (2011).
           Estimation of IMU and MARG orientation using a gradient descent algorithm. IEEE International Conference on
           Rehabilitation Robotics, 1-7. https://doi.org/10.1109/ICORR.2011.5975346

    Examples
    --------
    Your data must be a pd.DataFrame with columns defined by :obj:`~meerkatmap.utils.consts.SF_COLS`.
    Acc is expected in m/s^2 and gyr in rad/s.

    >>> import pandas as pd
    >>> from meerkatmap.utils.consts import SF_COLS
    >>> data = pd.DataFrame(..., columns=SF_COLS)
    >>> mad = MadgwickAHRS(beta=0.1)
    >>> mad = mad.estimate(data, sampling_rate_hz=100)
    >>> mad.orientation_
    <pd.Dataframe with resulting quaternions>

    """

    initial_orientation: Optional[Union[np.ndarray, Rotation]]
    beta: float
    memory: Optional[Memory]

    data: SingleSensorData
    sampling_rate_hz: float

    def __init__(
        self,
        beta: float = 0.1,
        initial_orientation: Optional[Union[np.ndarray, Rotation]] = None,
        memory: Optional[Memory] = None,
    ):
        self.initial_orientation = initial_orientation
        self.beta = beta
        self.memory = memory

    def estimate(self, data: SingleSensorData, sampling_rate_hz: float) -> Self:
        """Run the filter over all samples of the data.

        Parameters
        ----------
        data
            Sensor data with acc (m/s^2) and gyro (rad/s) columns
        sampling_rate_hz
            The sampling rate of the data in Hz

        Returns
        -------
        self
            The class instance with all result attributes populated

        """
        self.data = data
        self.sampling_rate_hz = sampling_rate_hz

        is_single_sensor_data(data, frame="sensor", raise_exception=True)
        start = resolve_initial_orientation(self.initial_orientation, data)

        filter_series = (self.memory or Memory(None)).cache(_madgwick_update_series)
        quats = filter_series(
            gyro=data[SF_GYR].to_numpy(dtype=float),
            acc=data[SF_ACC].to_numpy(dtype=float),
            initial_orientation=start,
            sampling_rate_hz=sampling_rate_hz,
            beta=self.beta,
        )
        self.orientation_object_ = Rotation.from_quat(quats)
        return self


@njit()
def _gravity_alignment_gradient(q, acc):
    """Gradient J^T f of the misalignment between the global z-axis (in sensor frame) and the normalized acc."""
    qx, qy, qz, qw = q
    ax, ay, az = acc
    f = np.array(
        [
            2.0 * (qx * qz - qw * qy) - ax,
            2.0 * (qw * qx + qy * qz) - ay,
            2.0 * (0.5 - qx * qx - qy * qy) - az,
        ]
    )
    # Columns are ordered x, y, z, w to match the quaternion convention
    jacobian = np.array(
        [
            [2.0 * qz, -2.0 * qw, 2.0 * qx, -2.0 * qy],
            [2.0 * qw, 2.0 * qz, 2.0 * qy, 2.0 * qx],
            [-4.0 * qx, -4.0 * qy, 0.0, 0.0],
        ]
    )
    return np.dot(f, jacobian)


@njit()
def _madgwick_update(gyro, acc, q, sampling_rate_hz, beta):
    qdot = rate_of_change_from_gyro(gyro, q)
    if beta > 0.0 and np.any(acc != 0.0):
        qdot -= beta * normalize(_gravity_alignment_gradient(q, normalize(acc)))
    return normalize(q + qdot / sampling_rate_hz)


@njit(cache=True)
def _madgwick_update_series(gyro, acc, initial_orientation, sampling_rate_hz, beta):
    n_samples = gyro.shape[0]
    out = np.empty((n_samples + 1, 4))
    out[0] = initial_orientation
    for i in range(n_samples):
        out[i + 1] = _madgwick_update(gyro[i], acc[i], out[i], sampling_rate_hz, beta)
    return out
