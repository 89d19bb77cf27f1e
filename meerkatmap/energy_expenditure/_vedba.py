"""Vectorial dynamic body acceleration (VeDBA) in non-overlapping windows."""
import numpy as np
from numpy.linalg import norm

from meerkatmap.utils.array_handling import sliding_window_view
from meerkatmap.utils.consts import GRAV


def windowed_vedba(acc: np.ndarray, window_length: int) -> np.ndarray:
    """Calculate the VeDBA in consecutive non-overlapping windows.

    The signal is split into windows of `window_length` samples starting at the first sample.
    A trailing part of the signal that is shorter than a full window is discarded.

    For each window the per-axis mean (the static acceleration) is subtracted from every sample.
    The VeDBA is the average norm of the remaining dynamic acceleration, converted from g to m/s^2.
    Windows that contain a NaN value in any axis get a VeDBA of 0, i.e. they are treated as if the animal was
    perfectly still.

    Parameters
    ----------
    acc : array with shape (n, 3)
        The acceleration in g
    window_length
        The length of each window in samples

    Returns
    -------
    vedba : array with shape (n // window_length,)
        The VeDBA of each window in m/s^2

    Examples
    --------
    >>> acc = np.zeros((250, 3))
    >>> windowed_vedba(acc, window_length=100)
    array([0., 0.])

    """
    acc = np.asarray(acc, dtype=float)
    if acc.ndim != 2 or acc.shape[1] != 3:
        raise ValueError("Invalid signal dimensions, signal must be of shape (n,3).")

    windows = sliding_window_view(acc, window_length=window_length, overlap=0)
    has_nan = np.isnan(windows).any(axis=(1, 2))
    dynamic = windows - windows.mean(axis=1, keepdims=True)
    vedba = GRAV * norm(dynamic, axis=-1).mean(axis=1)
    vedba[has_nan] = 0.0
    return vedba
