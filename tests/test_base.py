"""This tests the json export of the algorithm base class."""
import json

import numpy as np
import pytest
from scipy.spatial.transform import Rotation

from meerkatmap.base import BaseAlgorithm
from meerkatmap.energy_expenditure import ActiRest24, CalibrationModel
from meerkatmap.gravity_removal import GravityCompensation
from meerkatmap.orientation_methods import MadgwickAHRS
from meerkatmap.speed_estimation import BoutSpeedEstimation
from tests.conftest import compare_algo_objects


class TestJsonExport:
    def test_nested_algorithms(self):
        instance = BoutSpeedEstimation(
            gravity_compensator=GravityCompensation(
                ori_method=MadgwickAHRS(beta=0.3, initial_orientation=Rotation.from_euler("x", 10, degrees=True))
            )
        )

        loaded = BoutSpeedEstimation.from_json(instance.to_json())

        assert isinstance(loaded.gravity_compensator.ori_method, MadgwickAHRS)
        assert isinstance(loaded.gravity_compensator.ori_method.initial_orientation, Rotation)
        compare_algo_objects(instance, loaded)

    def test_json_structure(self):
        json_dict = json.loads(MadgwickAHRS(initial_orientation=np.array([0, 0, 0, 1.0])).to_json())

        assert json_dict["_meerkatmap_obj"] == "MadgwickAHRS"
        assert json_dict["params"]["beta"] == 0.1
        assert json_dict["params"]["initial_orientation"] == {"_obj_type": "Array", "array": [0, 0, 0, 1.0]}

    def test_tuple_params(self):
        instance = ActiRest24(calibration=CalibrationModel(1.0, 2.0))

        loaded = ActiRest24.from_json(instance.to_json())

        assert tuple(loaded.calibration) == (1.0, 2.0)

    def test_load_with_base_class(self):
        """Any class can be used to load the json, as the class name is stored within."""
        loaded = BaseAlgorithm.from_json(GravityCompensation().to_json())

        assert isinstance(loaded, GravityCompensation)

    def test_unknown_class(self):
        json_str = json.dumps({"_meerkatmap_obj": "NotAnAlgorithm", "params": {}})

        with pytest.raises(ValueError, match="NotAnAlgorithm"):
            BaseAlgorithm.from_json(json_str)
