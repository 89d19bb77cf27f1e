"""A set of util functions that help to manipulate arrays."""
import numpy as np
import pandas as pd


def sliding_window_view(arr: np.ndarray, window_length: int, overlap: int) -> np.ndarray:
    """Create a sliding window view of an input array with given window length and overlap.

    Windowing is always performed along axis 0, starting at the first sample.
    A trailing fraction of the input that is shorter than `window_length` is not part of any window.

    .. warning::
       This function returns a view onto your input array, modifying values in your result will directly
       affect your input data which might lead to unexpected behaviour!

    Parameters
    ----------
    arr : array with shape (n,) or (n, m)
        array on which sliding window action should be performed.
    window_length : int
        length of desired window
    overlap : int
        length of desired overlap (must be smaller than window_length)

    Returns
    -------
    windowed view of the input array with shape (n_windows, window_length) or (n_windows, window_length, m).
    If the input is shorter than a single window, `n_windows` is 0.

    Examples
    --------
    >>> data = np.arange(0, 10)
    >>> sliding_window_view(arr=data, window_length=4, overlap=0)
    array([[0, 1, 2, 3],
           [4, 5, 6, 7]])

    """
    if overlap >= window_length:
        raise ValueError("Invalid Input, overlap must be smaller than window length!")

    if window_length < 2:
        raise ValueError("Invalid Input, window_length must be larger than 1!")

    arr = np.asarray(arr)
    if len(arr) < window_length:
        return np.empty((0, window_length, *arr.shape[1:]), dtype=arr.dtype)

    view = np.lib.stride_tricks.sliding_window_view(arr, window_length, axis=0)[:: (window_length - overlap)]
    if arr.ndim == 2:
        # numpy appends the window axis at the end. We want (n_windows, window_length, m)
        view = np.swapaxes(view, 1, 2)
    return view


def moving_std(signal: np.ndarray, window_length: int) -> np.ndarray:
    """Calculate a centered moving standard deviation of a 1D signal.

    For an even `window_length` the window of sample `i` covers `i - window_length // 2` to
    `i + window_length // 2 - 1`.
    At the edges of the signal the window is truncated and only the available samples are used.
    The sample standard deviation (ddof=1) is used and windows with a single sample have a standard deviation of 0.

    Parameters
    ----------
    signal : array with shape (n,)
        The signal
    window_length : int
        The length of the moving window in samples

    Returns
    -------
    array with shape (n,) containing the standard deviation of the window centered around each sample

    Examples
    --------
    >>> moving_std(np.array([0.0, 0.0, 1.0, 1.0]), window_length=2)
    array([0.        , 0.        , 0.70710678, 0.        ])

    """
    if window_length < 1:
        raise ValueError("Invalid Input, window_length must be at least 1!")
    rolling = pd.Series(np.asarray(signal, dtype=float)).rolling(window_length, min_periods=1, center=True)
    return rolling.std().fillna(0.0).to_numpy()
