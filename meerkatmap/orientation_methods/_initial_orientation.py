"""Helper to find the starting orientation of the orientation methods."""
from typing import Optional, Union

import numpy as np
from scipy.spatial.transform import Rotation

from meerkatmap.utils.consts import SF_ACC
from meerkatmap.utils.datatype_helper import SingleSensorData, is_single_sensor_data
from meerkatmap.utils.exceptions import ValidationError
from meerkatmap.utils.rotations import get_gravity_rotation


def resolve_initial_orientation(
    initial_orientation: Optional[Union[np.ndarray, Rotation]], data: SingleSensorData
) -> np.ndarray:
    """Get the initial orientation as (x, y, z, w) quaternion.

    If no initial orientation is provided, the first sample of the data is assumed to be static and the initial
    orientation is the rotation that aligns the acc vector of this sample with the global z-axis.
    """
    if initial_orientation is None:
        is_single_sensor_data(data, check_gyr=False, frame="sensor", raise_exception=True)
        if len(data) == 0:
            raise ValidationError("The initial orientation can not be derived from empty data.")
        first_acc = data[SF_ACC].to_numpy()[0]
        if not np.any(first_acc) or np.isnan(first_acc).any():
            raise ValidationError(
                "The initial orientation can not be derived from the first acc sample ({}). "
                "Provide an explicit `initial_orientation`.".format(first_acc)
            )
        return get_gravity_rotation(first_acc).as_quat()
    if isinstance(initial_orientation, Rotation):
        initial_orientation = initial_orientation.as_quat()
    return np.array(initial_orientation, dtype=float)
