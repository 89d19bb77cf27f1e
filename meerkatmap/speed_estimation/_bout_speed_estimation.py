"""Wrapper that combines domain detection, gravity compensation and strapdown integration for full bouts."""
import warnings
from typing import Dict, Mapping, Optional, Tuple

import numpy as np
import pandas as pd
from tpcp import cf
from typing_extensions import Self

from meerkatmap.base import (
    BaseGravityRemoval,
    BaseIntegrationDomainDetection,
    BasePositionMethod,
    BaseSpeedEstimation,
)
from meerkatmap.gravity_removal import GravityCompensation
from meerkatmap.integration_domain import StdThresholdDomainDetection
from meerkatmap.orientation_methods import MadgwickAHRS
from meerkatmap.speed_estimation._strapdown_integration import StrapdownIntegration
from meerkatmap.utils.consts import GRAV, SF_ACC, SF_GYR
from meerkatmap.utils.datatype_helper import SingleSensorData
from meerkatmap.utils.exceptions import BoundaryNotFoundError, DegenerateIntervalError, MalformedBoutError

#: Errors that only invalidate a single bout
BOUT_ERRORS = (MalformedBoutError, BoundaryNotFoundError, DegenerateIntervalError)


class BoutSpeedEstimation(BaseSpeedEstimation):
    """Estimate the horizontal locomotion speed within a bout padded by static behaviour.

    The bout is processed in the following steps:

    1. The domain of integration (the interval between the last still sample before and the first still sample after
       the locomotion) is detected on the raw data using `domain_detector`.
    2. The data within the domain (start and end inclusive) is converted from g to m/s^2 and from deg/s to rad/s.
    3. Gravity is removed with `gravity_compensator`.
       Its orientation method is initialized with the first (still) sample of the domain.
    4. The gravity-free acceleration in the global frame is integrated with `strapdown_method`.

    Errors of the individual steps are not caught.
    Use :func:`~meerkatmap.speed_estimation.estimate_bout_speeds` to process many bouts and skip invalid ones.

    Parameters
    ----------
    domain_detector
        An instance of an integration domain detection method.
        Its thresholds are applied to the raw data (g and deg/s).
    gravity_compensator
        An instance of a gravity removal method.
        The default uses a Madgwick filter with `beta=0.01`.
        During locomotion the horizontal acceleration is sustained over seconds and a larger gain treats it as a
        tilt of the sensor, which removes most of it together with gravity.
        The gain is hence a tuning parameter that trades the correction of gyro drift against this loss.
    strapdown_method
        An instance of a position method that integrates the global frame acceleration.

    Attributes
    ----------
    start_
        The first sample of the domain of integration relative to the start of the bout
    end_
        The last sample of the domain of integration relative to the start of the bout (inclusive)
    acc_global_frame_
        The gravity-free acceleration in the global frame within the domain (m/s^2)
    velocity_
        The strapped-down velocity in the global frame within the domain (m/s)
    speed_
        The strapped-down speed in the horizontal plane within the domain (m/s)
    mean_speed_
        The average of `speed_`
    max_speed_
        The maximum of `speed_`

    Other Parameters
    ----------------
    data
        The raw data of the padded bout with acc in g and gyr in deg/s
    sampling_rate_hz
        The sampling rate of the data

    Examples
    --------
    >>> speed = BoutSpeedEstimation().estimate(bout_data, sampling_rate_hz=100)
    >>> speed.mean_speed_

    """

    domain_detector: BaseIntegrationDomainDetection
    gravity_compensator: BaseGravityRemoval
    strapdown_method: BasePositionMethod

    data: SingleSensorData
    sampling_rate_hz: float

    start_: int
    end_: int
    acc_global_frame_: pd.DataFrame

    def __init__(
        self,
        domain_detector: BaseIntegrationDomainDetection = cf(StdThresholdDomainDetection()),
        gravity_compensator: BaseGravityRemoval = cf(GravityCompensation(ori_method=MadgwickAHRS(beta=0.01))),
        strapdown_method: BasePositionMethod = cf(StrapdownIntegration()),
    ):
        self.domain_detector = domain_detector
        self.gravity_compensator = gravity_compensator
        self.strapdown_method = strapdown_method

    @property
    def mean_speed_(self) -> float:
        """Average horizontal speed within the domain of integration."""
        return float(self.speed_.mean())

    @property
    def max_speed_(self) -> float:
        """Maximal horizontal speed within the domain of integration."""
        return float(self.speed_.max())

    def estimate(self, data: SingleSensorData, sampling_rate_hz: float) -> Self:
        """Estimate the speed within the bout.

        Parameters
        ----------
        data
            The raw data of the padded bout with acc in g and gyr in deg/s
        sampling_rate_hz
            The sampling rate of the data

        Returns
        -------
        self
            The class instance with all result attributes populated

        """
        self.data = data
        self.sampling_rate_hz = sampling_rate_hz

        domain = self.domain_detector.clone().detect(data, sampling_rate_hz=sampling_rate_hz)
        if domain.end_ <= domain.start_:
            raise DegenerateIntervalError(
                f"The domain of integration ({domain.start_}, {domain.end_}) does not contain at least 2 samples."
            )
        self.start_ = domain.start_
        self.end_ = domain.end_

        domain_data = data.iloc[self.start_ : self.end_ + 1]
        converted = pd.DataFrame(
            np.hstack(
                [
                    GRAV * domain_data[SF_ACC].to_numpy(dtype=float),
                    np.deg2rad(domain_data[SF_GYR].to_numpy(dtype=float)),
                ]
            ),
            columns=[*SF_ACC, *SF_GYR],
        )

        compensated = self.gravity_compensator.clone().compensate(converted, sampling_rate_hz=sampling_rate_hz)
        self.acc_global_frame_ = compensated.acc_global_frame_

        strapped = self.strapdown_method.clone().estimate(self.acc_global_frame_, sampling_rate_hz=sampling_rate_hz)
        self.velocity_ = strapped.velocity_
        self.speed_ = strapped.speed_
        return self


def estimate_bout_speeds(
    bouts: Mapping[str, SingleSensorData],
    sampling_rate_hz: float,
    speed_method: Optional[BaseSpeedEstimation] = None,
) -> Tuple[Dict[str, BaseSpeedEstimation], pd.DataFrame]:
    """Estimate the speed for many bouts and skip the bouts that can not be processed.

    Every bout is processed independently with a clone of `speed_method`.
    Bouts that are malformed, have no valid boundaries or a degenerate domain of integration are skipped.
    A warning is raised for each skipped bout and the reason is collected in the returned failure list.
    All other errors are raised.

    Parameters
    ----------
    bouts
        A mapping of bout ids to the raw data of each padded bout
    sampling_rate_hz
        The sampling rate of all bouts
    speed_method
        The method applied to each bout.
        If None, :class:`BoutSpeedEstimation` with its default parameters is used.

    Returns
    -------
    results
        A dictionary with the fitted method instance for every successful bout
    failures
        A dataframe indexed by `bout_id` with the name of the `error` and its `message` for every skipped bout

    Examples
    --------
    >>> results, failures = estimate_bout_speeds({"bout_1": bout_1, "bout_2": bout_2}, sampling_rate_hz=100)
    >>> {bout_id: r.mean_speed_ for bout_id, r in results.items()}

    """
    if speed_method is None:
        speed_method = BoutSpeedEstimation()

    results = {}
    failures = []
    for bout_id, bout in bouts.items():
        try:
            results[bout_id] = speed_method.clone().estimate(bout, sampling_rate_hz=sampling_rate_hz)
        except BOUT_ERRORS as e:
            warnings.warn(f"Bout {bout_id} was skipped: {e}")
            failures.append({"bout_id": bout_id, "error": type(e).__name__, "message": str(e)})

    failures = pd.DataFrame(failures, columns=["bout_id", "error", "message"]).set_index("bout_id")
    return results, failures
