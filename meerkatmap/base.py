"""Base classes for all algorithms and their json export."""

import json
import warnings
from typing import Any, Callable, Dict, Type, TypeVar

import numpy as np
import pandas as pd
import tpcp
from joblib import Memory
from scipy.spatial.transform import Rotation

from meerkatmap.utils.consts import GF_ORI
from meerkatmap.utils.datatype_helper import (
    PositionList,
    SingleSensorData,
    SingleSensorOrientationList,
    VelocityList,
)

BaseType = TypeVar("BaseType", bound="_BaseSerializable")  # noqa: invalid-name

_OBJ_KEY = "_meerkatmap_obj"

# Tag of each non-json type and how it is restored on load
_DECODERS: Dict[str, Callable[[Dict[str, Any]], Any]] = {
    "Tuple": lambda obj: tuple(obj["tuple"]),
    "Array": lambda obj: np.array(obj["array"]),
    "Rotation": lambda obj: Rotation.from_quat(obj["quat"]),
}


def _mark_tuples(value):
    """Wrap all (nested) tuples, as json would otherwise turn them into lists.

    NamedTuples are stored as plain tuples as well.
    """
    if isinstance(value, tuple):
        return {"_obj_type": "Tuple", "tuple": [_mark_tuples(v) for v in value]}
    if isinstance(value, list):
        return [_mark_tuples(v) for v in value]
    if isinstance(value, dict):
        return {k: _mark_tuples(v) for k, v in value.items()}
    return value


class _ParamEncoder(json.JSONEncoder):
    def encode(self, o: Any) -> str:
        return super().encode(_mark_tuples(o))

    def default(self, o):  # noqa: method-hidden
        if isinstance(o, _BaseSerializable):
            return _mark_tuples(o._to_json_dict())
        if isinstance(o, np.ndarray):
            return {"_obj_type": "Array", "array": o.tolist()}
        if isinstance(o, np.generic):
            return o.item()
        if isinstance(o, Rotation):
            return {"_obj_type": "Rotation", "quat": o.as_quat().tolist()}
        if isinstance(o, Memory):
            warnings.warn(
                "A `joblib.Memory` object can not be exported to json and is replaced by `None`. "
                "To use caching again, set it after loading via `instance.set_params(memory=Memory(...))`."
            )
            return None
        return super().default(o)


def _decode_object(json_obj: Dict[str, Any]):
    if _OBJ_KEY in json_obj:
        return _BaseSerializable._find_subclass(json_obj[_OBJ_KEY])._from_json_dict(json_obj)
    if "_obj_type" not in json_obj:
        return json_obj
    try:
        decoder = _DECODERS[json_obj["_obj_type"]]
    except KeyError as e:
        raise ValueError(f"Unknown object type `{json_obj['_obj_type']}` found in the json export.") from e
    return decoder(json_obj)


class _BaseSerializable(tpcp.BaseTpcpObject):
    @classmethod
    def _all_subclasses(cls):
        for subclass in cls.__subclasses__():
            yield subclass
            yield from subclass._all_subclasses()

    @classmethod
    def _find_subclass(cls, name: str) -> Type["_BaseSerializable"]:
        matches = [subclass for subclass in _BaseSerializable._all_subclasses() if subclass.__name__ == name]
        if not matches:
            raise ValueError(f"No algorithm class with name {name} exists.")
        return matches[0]

    @classmethod
    def _from_json_dict(cls: Type[BaseType], json_dict: Dict[str, Any]) -> BaseType:
        params = json_dict["params"]
        return cls(**{k: params[k] for k in tpcp.get_param_names(cls) if k in params})

    def _to_json_dict(self) -> Dict[str, Any]:
        return {_OBJ_KEY: type(self).__name__, "params": self.get_params(deep=False)}

    def to_json(self) -> str:
        """Export the parameters of the object as json.

        Nested algorithms are exported with their parameters.
        The object can be recreated with `from_json` of any meerkatmap algorithm class.

        .. warning:: Only the parameters are exported. Results of a previous action are lost!

        """
        return json.dumps(self._to_json_dict(), indent=4, cls=_ParamEncoder)

    @classmethod
    def from_json(cls: Type[BaseType], json_str: str) -> BaseType:
        """Recreate a meerkatmap object from its json export.

        Parameters
        ----------
        json_str
            The output of `to_json`

        """
        return json.loads(json_str, object_hook=_decode_object)


class BaseAlgorithm(tpcp.Algorithm, _BaseSerializable):
    """Base class for all algorithms.

    Every processing concern has its own subclass that names its action method in `_action_methods` and provides a
    stub of it.
    """


class BaseOrientationMethod(BaseAlgorithm):
    """Base class for the individual Orientation estimation methods that work on pd.DataFrame data."""

    _action_methods = ("estimate",)
    orientation_object_: Rotation

    @property
    def orientation_(self) -> SingleSensorOrientationList:
        """Orientations as pd.DataFrame."""
        df = pd.DataFrame(self.orientation_object_.as_quat(), columns=GF_ORI)
        df.index.name = "sample"
        return df

    def estimate(self: BaseType, data: SingleSensorData, sampling_rate_hz: float) -> BaseType:
        """Estimate the orientation of the sensor based on the input data."""
        raise NotImplementedError("Needs to be implemented by child class.")


class BaseGravityRemoval(BaseAlgorithm):
    """Base class for methods that separate gravity from the measured acceleration."""

    _action_methods = ("compensate",)

    acc_global_frame_: pd.DataFrame
    acc_sensor_frame_: pd.DataFrame
    gravity_sensor_frame_: pd.DataFrame

    def compensate(self: BaseType, data: SingleSensorData, sampling_rate_hz: float) -> BaseType:
        """Remove gravity from the acceleration data."""
        raise NotImplementedError("Needs to be implemented by child class.")


class BaseIntegrationDomainDetection(BaseAlgorithm):
    """Base class for methods that find the region of a bout in which the acceleration is integrated."""

    _action_methods = ("detect",)

    start_: int
    end_: int

    def detect(self: BaseType, data: SingleSensorData, sampling_rate_hz: float) -> BaseType:
        """Find the start and the end of the domain of integration."""
        raise NotImplementedError("Needs to be implemented by child class.")


class BasePositionMethod(BaseAlgorithm):
    """Base class for the individual Position estimation methods that work on pd.DataFrame data."""

    _action_methods = ("estimate",)
    velocity_: VelocityList
    position_: PositionList

    def estimate(self: BaseType, data: SingleSensorData, sampling_rate_hz: float) -> BaseType:
        """Estimate the position of the sensor based on the input data.

        Note that the data is assumed to be in the global-frame (i.e. already rotated)
        """
        raise NotImplementedError("Needs to be implemented by child class.")


class BaseSpeedEstimation(BaseAlgorithm):
    """Base class for methods that estimate the locomotion speed of a full bout."""

    _action_methods = ("estimate",)

    velocity_: VelocityList
    speed_: pd.Series

    def estimate(self: BaseType, data: SingleSensorData, sampling_rate_hz: float) -> BaseType:
        """Estimate the speed within a bout of locomotion."""
        raise NotImplementedError("Needs to be implemented by child class.")


class BaseEnergyExpenditure(BaseAlgorithm):
    """Base class for all daily energy expenditure models."""

    _action_methods = ("estimate",)

    vedba_: pd.Series
    window_energy_: pd.Series
    dee_: float

    def estimate(self: BaseType, data: SingleSensorData, sampling_rate_hz: float, **kwargs) -> BaseType:
        """Estimate the energy expenditure from acceleration data."""
        raise NotImplementedError("Needs to be implemented by child class.")
