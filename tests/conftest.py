import random
from typing import Any, Dict

import numpy as np
import pandas as pd
import pytest
from numpy.testing import assert_array_almost_equal, assert_array_equal
from scipy.spatial.transform import Rotation
from tpcp import BaseTpcpObject

from meerkatmap.utils.consts import SF_ACC, SF_COLS, SF_GYR

#: Sampling rate of all synthetic bouts
BOUT_SAMPLING_RATE_HZ = 100
#: Samples of static behaviour on each side of the synthetic bouts
BOUT_PADDING = 100
#: Samples of locomotion in the synthetic bouts
BOUT_MOTION = 300


@pytest.fixture(autouse=True)
def reset_random_seed():
    np.random.seed(10)
    random.seed(10)


def create_static_bout(n_samples: int) -> pd.DataFrame:
    """A sensor lying flat and motionless (acc in g, gyr in deg/s)."""
    data = np.zeros((n_samples, 6))
    data[:, 2] = 1.0
    return pd.DataFrame(data, columns=SF_COLS)


def add_sharp_motion(bout: pd.DataFrame, start: int, end: int) -> pd.DataFrame:
    """Overwrite the samples `start:end` with a jerky motion that alternates every 5 samples."""
    bout = bout.copy()
    idx = np.arange(start, end)
    high = ((idx - start) // 5) % 2 == 0
    bout.loc[idx, "acc_z"] = np.where(high, 1.5, 0.5)
    bout.loc[idx, "gyr_x"] = np.where(high, 100.0, 20.0)
    return bout


def create_sharp_bout(padding: int = BOUT_PADDING, motion: int = BOUT_MOTION) -> pd.DataFrame:
    """A bout structured as `{static, locomotion, static}` with an abrupt start and end of the motion."""
    bout = create_static_bout(2 * padding + motion)
    return add_sharp_motion(bout, padding, padding + motion)


def create_sinusoidal_bout(amplitude: float = 1.0, padding: int = BOUT_PADDING, motion: int = BOUT_MOTION):
    """A flat sensor that accelerates and decelerates along its x-axis once while bobbing up and down.

    The horizontal acceleration is `amplitude * sin(2 pi t / T)` (m/s^2) with `T` being the duration of the motion.
    The horizontal speed is therefore `amplitude * T / (2 pi) * (1 - cos(2 pi t / T))`.
    """
    bout = create_static_bout(2 * padding + motion)
    t = np.arange(motion) / BOUT_SAMPLING_RATE_HZ
    duration = motion / BOUT_SAMPLING_RATE_HZ
    idx = np.arange(padding, padding + motion)
    bout.loc[idx, "acc_x"] = amplitude * np.sin(2 * np.pi * t / duration) / 9.81
    bout.loc[idx, "acc_z"] = 1 + 0.3 * np.sin(2 * np.pi * 4 * t)
    return bout


def expected_sinusoidal_speed(samples: np.ndarray, amplitude: float = 1.0, padding: int = BOUT_PADDING):
    duration = BOUT_MOTION / BOUT_SAMPLING_RATE_HZ
    t = np.clip((samples - padding) / BOUT_SAMPLING_RATE_HZ, 0, duration)
    return amplitude * duration / (2 * np.pi) * (1 - np.cos(2 * np.pi * t / duration))


def create_day_of_acc(sampling_rate_hz: float, duration_s: float, start="2022-11-28 00:00") -> pd.DataFrame:
    """A motionless acc recording (g) with a DatetimeIndex."""
    n_samples = int(round(duration_s * sampling_rate_hz))
    acc = np.zeros((n_samples, 3))
    acc[:, 2] = 1.0
    index = pd.date_range(start, periods=n_samples, freq=pd.Timedelta(seconds=1 / sampling_rate_hz))
    return pd.DataFrame(acc, columns=SF_ACC, index=index)


@pytest.fixture()
def sharp_bout():
    return create_sharp_bout()


@pytest.fixture()
def sinusoidal_bout():
    return create_sinusoidal_bout()


@pytest.fixture()
def static_gravity_data():
    """A motionless, tilted sensor with acc in m/s^2 and gyr in rad/s."""
    tilt = Rotation.from_euler("xy", [30, -20], degrees=True)
    acc = tilt.inv().apply(np.array([0, 0, 9.81]))
    data = np.zeros((200, 6))
    data[:, :3] = acc
    return pd.DataFrame(data, columns=[*SF_ACC, *SF_GYR])


def _flat_params(instance: BaseTpcpObject) -> Dict[str, Any]:
    """All (nested) parameters, without the nested algorithm objects themselves."""
    return {k: v for k, v in instance.get_params().items() if not isinstance(v, BaseTpcpObject)}


def compare_algo_objects(a, b):
    a_params = _flat_params(a)
    b_params = _flat_params(b)

    assert a_params.keys() == b_params.keys()
    for name, value in a_params.items():
        compare_val(value, b_params[name], name)


def compare_val(value, other, name):
    if isinstance(value, np.ndarray):
        assert_array_equal(value, other, err_msg=name)
    elif isinstance(value, Rotation):
        # Loading a Rotation normalizes the quaternion again
        assert_array_almost_equal(value.as_quat(), other.as_quat(), err_msg=name)
    elif isinstance(value, (tuple, list)):
        assert len(value) == len(other), name
        for i, (v, o) in enumerate(zip(value, other)):
            compare_val(v, o, f"{name}[{i}]")
    else:
        assert value == other, name
