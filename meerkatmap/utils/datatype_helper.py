"""A couple of helper functions that easy the use of the typical data structures of this library.

A *SingleSensorData* object is a :class:`pandas.DataFrame` with a single level of columns that contains the
accelerometer (`acc_x, acc_y, acc_z`) and/or gyroscope (`gyr_x, gyr_y, gyr_z`) axis of one sensor as columns and one
row per sample.
"""
from typing import List, Optional, Sequence

import numpy as np
import pandas as pd

from meerkatmap.utils._types import _DataFrame
from meerkatmap.utils.consts import GF_ACC, SF_ACC, SF_GYR
from meerkatmap.utils.exceptions import MalformedBoutError, ValidationError

SingleSensorData = _DataFrame
SingleSensorOrientationList = _DataFrame
VelocityList = _DataFrame
PositionList = _DataFrame


def _assert_is_dtype(obj, dtype: type) -> None:
    if not isinstance(obj, dtype):
        raise ValidationError(f"The dataobject is expected to be one of ({dtype},). But it is a {type(obj)}")


def _assert_has_columns(df: pd.DataFrame, columns: Sequence[str]) -> None:
    if isinstance(df.columns, pd.MultiIndex):
        raise ValidationError(
            "The dataframe is expected to have a single level of columns. "
            f"But it has a MultiIndex with {df.columns.nlevels} levels."
        )
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise ValidationError(
            f"The dataframe is expected to have columns: {list(columns)}. "
            f"Instead it has the following columns: {list(df.columns)}"
        )


def _get_expected_cols(check_acc: bool, check_gyr: bool, frame: str) -> List[str]:
    if frame not in ("sensor", "global"):
        raise ValueError('`frame` must be one of ["sensor", "global"]')
    cols = []
    if check_acc is True:
        cols.extend(SF_ACC if frame == "sensor" else GF_ACC)
    if check_gyr is True and frame == "sensor":
        cols.extend(SF_GYR)
    return cols


def is_single_sensor_data(
    data: SingleSensorData,
    check_acc: bool = True,
    check_gyr: bool = True,
    frame: str = "sensor",
    raise_exception: bool = False,
) -> Optional[bool]:
    """Check if an object is a valid single sensor data object following all conventions.

    Parameters
    ----------
    data
        Object that should be checked
    check_acc
        If the existence of the correct acc columns should be checked
    check_gyr
        If the existence of the correct gyr columns should be checked.
        Global frame data is never expected to contain gyr columns.
    frame
        The frame the data is expected to be in ("sensor" or "global").
        This changes which columns are checked for.
    raise_exception
        If True an exception is raised if the object does not pass the validation.
        If False, the function will return simply True or False.

    """
    try:
        _assert_is_dtype(data, pd.DataFrame)
        _assert_has_columns(data, _get_expected_cols(check_acc, check_gyr, frame))
    except ValidationError as e:
        if raise_exception is True:
            raise ValidationError(
                "The passed object does not seem to be a SingleSensorData object. "
                "The validation failed with the following error:\n\n{}".format(str(e))
            ) from e
        return False
    return True


def bout_from_arrays(acc: np.ndarray, gyr: np.ndarray) -> SingleSensorData:
    """Combine separate acc and gyr arrays into a single sensor data object.

    Parameters
    ----------
    acc : array with shape (n, 3)
        The acceleration of the bout
    gyr : array with shape (n, 3)
        The angular velocity of the bout

    Returns
    -------
    SingleSensorData
        A dataframe with the acc and gyr columns

    Raises
    ------
    MalformedBoutError
        If the arrays do not have the shape (n, 3) or the number of samples differs

    """
    acc = np.asarray(acc, dtype=float)
    gyr = np.asarray(gyr, dtype=float)
    for name, arr in (("acc", acc), ("gyr", gyr)):
        if arr.ndim != 2 or arr.shape[1] != 3:
            raise MalformedBoutError(f"The {name} data must have the shape (n, 3), but it has the shape {arr.shape}.")
    if len(acc) != len(gyr):
        raise MalformedBoutError(
            f"The acc and gyr data of a bout must have the same length. Got {len(acc)} acc and {len(gyr)} gyr samples."
        )
    return pd.DataFrame(np.hstack([acc, gyr]), columns=[*SF_ACC, *SF_GYR])
