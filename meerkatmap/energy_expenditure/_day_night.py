"""Helper to split a day of data into the active (daytime) and resting (nighttime) part."""
import pandas as pd

from meerkatmap.utils.consts import SECONDS_PER_DAY
from meerkatmap.utils.datatype_helper import SingleSensorData
from meerkatmap.utils.exceptions import ValidationError


def night_duration_from_sun_times(sunrise, sunset) -> float:
    """Calculate the duration of the night in seconds from the time of sunrise and sunset of the same day.

    The night is the part of the 24 h day that is not between sunrise and sunset.

    Parameters
    ----------
    sunrise
        Time of the sunrise (anything that can be converted into a :class:`pandas.Timestamp`)
    sunset
        Time of the sunset of the same day

    Examples
    --------
    >>> night_duration_from_sun_times("2022-11-28 06:00", "2022-11-28 18:30")
    41400.0

    """
    day_duration_s = (pd.Timestamp(sunset) - pd.Timestamp(sunrise)).total_seconds()
    if not 0 < day_duration_s <= SECONDS_PER_DAY:
        raise ValueError(
            f"The sunset ({sunset}) must be after the sunrise ({sunrise}) and at most 24 h later."
        )
    return float(SECONDS_PER_DAY - day_duration_s)


def extract_daytime(data: SingleSensorData, sunrise, sunset) -> SingleSensorData:
    """Get all samples between sunrise (inclusive) and sunset (exclusive).

    Parameters
    ----------
    data
        Data with a :class:`pandas.DatetimeIndex`
    sunrise
        Time of the sunrise
    sunset
        Time of the sunset

    """
    if not isinstance(data.index, pd.DatetimeIndex):
        raise ValidationError(
            f"The data is expected to have a `pd.DatetimeIndex` to extract the daytime, not {type(data.index)}."
        )
    sunrise = pd.Timestamp(sunrise)
    sunset = pd.Timestamp(sunset)
    return data[(data.index >= sunrise) & (data.index < sunset)]
