"""Find the start and end of a locomotion bout using moving standard deviation thresholds."""
from typing import Optional, Tuple

import numpy as np
from numpy.linalg import norm
from typing_extensions import Self

from meerkatmap.base import BaseIntegrationDomainDetection
from meerkatmap.utils.array_handling import moving_std
from meerkatmap.utils.consts import SF_ACC, SF_GYR
from meerkatmap.utils.datatype_helper import SingleSensorData, is_single_sensor_data
from meerkatmap.utils.exceptions import BoundaryNotFoundError, MalformedBoutError, ValidationError


def _to_samples(duration_s: float, sampling_rate_hz: float) -> int:
    return int(round(duration_s * sampling_rate_hz))


def _last_true(mask: np.ndarray) -> Optional[int]:
    idx = np.flatnonzero(mask)
    if len(idx) == 0:
        return None
    return int(idx[-1])


def _first_true(mask: np.ndarray) -> Optional[int]:
    idx = np.flatnonzero(mask)
    if len(idx) == 0:
        return None
    return int(idx[0])


class StdThresholdDomainDetection(BaseIntegrationDomainDetection):
    """Find the domain of integration of a locomotion bout that is padded by static behaviour on both sides.

    The bout is expected to be structured as `{static padding, locomotion, static padding}`, where the padding has
    (at least) the duration `static_padding_s`.
    The labelled transitions between static behaviour and locomotion are only approximate.
    This method refines them by searching for the moments the sensor was truly still.

    A sample is considered still, if the moving standard deviation of the acc norm and the moving standard deviation of
    the gyr norm are both smaller or equal than their thresholds.
    The start of the domain is the **last** still sample within `search_half_width_s` around the end of the leading
    padding.
    The end of the domain is the **first** still sample within `search_half_width_s` around the start of the trailing
    padding.
    Both search windows are applied identically to the acc and the gyr signal.

    Parameters
    ----------
    window_length_s
        The length of the centered window in which the moving standard deviation is calculated in seconds.
        At the edges of the bout the window is truncated.
    acc_std_threshold
        Threshold of the moving std of the acc norm below which the sensor is considered still.
        The unit is the unit of the acc data (g for the raw recordings).
    gyr_std_threshold
        Threshold of the moving std of the gyr norm below which the sensor is considered still.
        The unit is the unit of the gyr data (deg/s for the raw recordings).
    static_padding_s
        The duration of static behaviour on either side of the locomotion bout in seconds.
    search_half_width_s
        Half-length of the search window around the nominal start and end of the locomotion in seconds.
        Must be smaller than `static_padding_s`.
    min_dynamic_duration_s
        The minimal duration of the locomotion bout in seconds.
        Bouts shorter than `2 * static_padding_s + min_dynamic_duration_s` are rejected.

    Attributes
    ----------
    start_
        The index of the first sample of the domain of integration
    end_
        The index of the last sample of the domain of integration (inclusive)
    acc_norm_std_
        The moving std of the acc norm.
        This might be helpful for debugging.
    gyr_norm_std_
        The moving std of the gyr norm.
        This might be helpful for debugging.
    window_length_samples_
        The internally calculated window length in samples.
        This might be helpful for debugging.

    Other Parameters
    ----------------
    data
        The data passed to the detect method
    sampling_rate_hz
        The sampling rate of this data

    Raises
    ------
    MalformedBoutError
        If the bout is too short, the acc or gyr data is missing or contains non-finite values
    BoundaryNotFoundError
        If no still sample is found in one or both of the search windows.
        The attribute `sides` of the error contains the failed side(s).

    Examples
    --------
    >>> detector = StdThresholdDomainDetection(acc_std_threshold=0.02, gyr_std_threshold=5)
    >>> detector = detector.detect(bout_data, sampling_rate_hz=100)
    >>> bout_data.iloc[detector.start_ : detector.end_ + 1]
    <The data within the domain of integration>

    """

    window_length_s: float
    acc_std_threshold: float
    gyr_std_threshold: float
    static_padding_s: float
    search_half_width_s: float
    min_dynamic_duration_s: float

    data: SingleSensorData
    sampling_rate_hz: float

    acc_norm_std_: np.ndarray
    gyr_norm_std_: np.ndarray
    window_length_samples_: int

    def __init__(
        self,
        *,
        window_length_s: float = 0.1,
        acc_std_threshold: float = 0.02,
        gyr_std_threshold: float = 5.0,
        static_padding_s: float = 1.0,
        search_half_width_s: float = 0.5,
        min_dynamic_duration_s: float = 2.0,
    ):
        self.window_length_s = window_length_s
        self.acc_std_threshold = acc_std_threshold
        self.gyr_std_threshold = gyr_std_threshold
        self.static_padding_s = static_padding_s
        self.search_half_width_s = search_half_width_s
        self.min_dynamic_duration_s = min_dynamic_duration_s

    def detect(self, data: SingleSensorData, sampling_rate_hz: float) -> Self:
        """Find the domain of integration within the bout.

        Parameters
        ----------
        data
            The acc and gyr data of the full bout including the static padding
        sampling_rate_hz
            The sampling rate of the data

        Returns
        -------
        self
            The class instance with all result attributes populated

        """
        self.data = data
        self.sampling_rate_hz = sampling_rate_hz

        try:
            is_single_sensor_data(self.data, frame="sensor", raise_exception=True)
        except ValidationError as e:
            raise MalformedBoutError(str(e)) from e
        if not np.isfinite(data[[*SF_ACC, *SF_GYR]].to_numpy(dtype=float)).all():
            raise MalformedBoutError("The bout contains missing (NaN) or infinite acc or gyr values.")

        self.window_length_samples_ = _to_samples(self.window_length_s, sampling_rate_hz)
        if self.window_length_samples_ < 2:
            raise ValidationError(
                f"The effective window size is smaller than 2 samples (`sampling_rate_hz`={sampling_rate_hz}, "
                f"`window_length_s`={self.window_length_s}). "
                "Specify a larger window length."
            )
        padding = _to_samples(self.static_padding_s, sampling_rate_hz)
        half_width = _to_samples(self.search_half_width_s, sampling_rate_hz)
        if not 0 <= half_width < padding:
            raise ValidationError(
                "The search window must fit into the static padding (`0 <= search_half_width_s < static_padding_s`)."
            )
        min_length = 2 * padding + _to_samples(self.min_dynamic_duration_s, sampling_rate_hz)
        n_samples = len(data)
        if n_samples < min_length:
            raise MalformedBoutError(
                f"The bout has {n_samples} samples, but at least {min_length} samples are required "
                f"({self.static_padding_s} s of static padding on each side and {self.min_dynamic_duration_s} s of "
                "locomotion)."
            )

        self.acc_norm_std_ = moving_std(norm(data[SF_ACC].to_numpy(dtype=float), axis=1), self.window_length_samples_)
        self.gyr_norm_std_ = moving_std(norm(data[SF_GYR].to_numpy(dtype=float), axis=1), self.window_length_samples_)
        is_still = (self.acc_norm_std_ <= self.acc_std_threshold) & (self.gyr_norm_std_ <= self.gyr_std_threshold)

        start, end = self._search_boundaries(is_still, padding, half_width)
        missing = [side for side, value in (("start", start), ("end", end)) if value is None]
        if missing:
            raise BoundaryNotFoundError(missing)
        self.start_ = start
        self.end_ = end
        return self

    @staticmethod
    def _search_boundaries(
        is_still: np.ndarray, padding: int, half_width: int
    ) -> Tuple[Optional[int], Optional[int]]:
        n_samples = len(is_still)
        # Last sample of the leading padding and first sample of the trailing padding
        nominal_start = padding - 1
        nominal_end = n_samples - padding

        start_range = slice(nominal_start - half_width, nominal_start + half_width + 1)
        start = _last_true(is_still[start_range])
        if start is not None:
            start += start_range.start

        end_range = slice(nominal_end - half_width, nominal_end + half_width + 1)
        end = _first_true(is_still[end_range])
        if end is not None:
            end += end_range.start
        return start, end
