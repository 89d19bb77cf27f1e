"""Remove gravity from the acceleration using the orientation estimated by an orientation method."""
from typing import Optional

import numpy as np
import pandas as pd
from scipy.spatial.transform import Rotation
from tpcp import cf
from typing_extensions import Self

from meerkatmap.base import BaseGravityRemoval, BaseOrientationMethod
from meerkatmap.orientation_methods import MadgwickAHRS
from meerkatmap.utils.consts import GF_ACC, GRAV_VEC, SF_ACC, SF_GRAV
from meerkatmap.utils.datatype_helper import SingleSensorData, is_single_sensor_data
from meerkatmap.utils.exceptions import ValidationError
from meerkatmap.utils.rotations import rotate_vector_series


class GravityCompensation(BaseGravityRemoval):
    """Remove gravity from the acceleration signal using the orientation of the sensor.

    The orientation of the sensor is estimated for every sample with the provided orientation method.
    The gravity vector of the global frame is then rotated into the sensor frame and subtracted from the raw
    acceleration.
    Finally, the gravity-free acceleration is rotated back into the global frame.

    For the sample `i` with the orientation `R_i` (the orientation after the sample was processed by the orientation
    method) this means:

    - `gravity_sensor_frame_[i] = R_i^-1(gravity)`
    - `acc_sensor_frame_[i] = acc[i] - gravity_sensor_frame_[i]`
    - `acc_global_frame_[i] = R_i(acc_sensor_frame_[i])`

    .. note:: The default orientation method initializes its orientation from the first sample.
              Hence, the data must start with static behaviour.
              Without a magnetometer the heading of the global frame is arbitrary.
              Only the vertical axis and the magnitude of the horizontal plane are meaningful.

    Parameters
    ----------
    ori_method
        An instance of any available orientation method with the desired parameters set.
        This method is called with the input data to estimate the orientation of the sensor.
    gravity
        The gravity vector in the global frame in m/s^2.

    Attributes
    ----------
    acc_global_frame_
        The gravity-free acceleration in the global frame (m/s^2).
    acc_sensor_frame_
        The gravity-free acceleration in the sensor frame (m/s^2).
    gravity_sensor_frame_
        The gravity vector in the sensor frame for each sample (m/s^2).
    orientation_object_
        The orientation of every sample as a scipy Rotation object (one per sample, the initial orientation of the
        orientation method is not included).

    Other Parameters
    ----------------
    data
        The data passed to the compensate method.
        Acc is expected in m/s^2 and gyr in rad/s.
    sampling_rate_hz
        The sampling rate of the data

    Examples
    --------
    >>> comp = GravityCompensation(ori_method=MadgwickAHRS(beta=0.1))
    >>> comp = comp.compensate(data, sampling_rate_hz=100)
    >>> comp.acc_global_frame_
    <pd.Dataframe with the gravity-free acceleration in the global frame>

    """

    ori_method: BaseOrientationMethod
    gravity: Optional[np.ndarray]

    data: SingleSensorData
    sampling_rate_hz: float

    orientation_object_: Rotation

    def __init__(
        self,
        ori_method: BaseOrientationMethod = cf(MadgwickAHRS()),
        gravity: np.ndarray = cf(GRAV_VEC),
    ):
        self.ori_method = ori_method
        self.gravity = gravity

    def compensate(self, data: SingleSensorData, sampling_rate_hz: float) -> Self:
        """Remove gravity from the acceleration data.

        Parameters
        ----------
        data
            Continuous sensor data including acc (m/s^2) and gyr (rad/s) values.
            The first sample(s) should correspond to static behaviour.
        sampling_rate_hz
            The sampling rate of the data in Hz

        Returns
        -------
        self
            The class instance with all result attributes populated

        """
        self.data = data
        self.sampling_rate_hz = sampling_rate_hz

        is_single_sensor_data(self.data, frame="sensor", raise_exception=True)
        if len(data) == 0:
            raise ValidationError("Gravity compensation requires at least one sample.")
        if not isinstance(self.ori_method, BaseOrientationMethod):
            raise ValueError("The provided `ori_method` must be a child class of `BaseOrientationMethod`.")

        ori_method = self.ori_method.clone().estimate(data, sampling_rate_hz=sampling_rate_hz)
        # The first orientation is the initial orientation before the first sample was processed
        self.orientation_object_ = ori_method.orientation_object_[1:]

        acc = data[SF_ACC].to_numpy(dtype=float)
        gravity_sf = rotate_vector_series(np.asarray(self.gravity, dtype=float), self.orientation_object_, inverse=True)
        acc_sf = acc - gravity_sf
        acc_gf = rotate_vector_series(acc_sf, self.orientation_object_)

        self.gravity_sensor_frame_ = pd.DataFrame(gravity_sf, columns=SF_GRAV, index=data.index)
        self.acc_sensor_frame_ = pd.DataFrame(acc_sf, columns=SF_ACC, index=data.index)
        self.acc_global_frame_ = pd.DataFrame(acc_gf, columns=GF_ACC, index=data.index)

        return self
