import numpy as np
import pandas as pd
import pytest
from scipy.spatial.transform import Rotation

from meerkatmap.base import BaseType
from meerkatmap.gravity_removal import GravityCompensation
from meerkatmap.orientation_methods import MadgwickAHRS, SimpleGyroIntegration
from meerkatmap.utils.consts import GF_ACC, SF_ACC, SF_COLS, SF_GRAV
from meerkatmap.utils.exceptions import ValidationError
from tests.mixins.test_algorithm_mixin import TestAlgorithmMixin


class MetaTestConfig:
    algorithm_class = GravityCompensation

    @pytest.fixture()
    def after_action_instance(self, static_gravity_data) -> BaseType:
        return GravityCompensation().compensate(static_gravity_data.iloc[:20], sampling_rate_hz=100)


class TestMetaFunctionality(MetaTestConfig, TestAlgorithmMixin):
    __test__ = True


class TestGravityCompensation:
    def test_static_sensor(self, static_gravity_data):
        comp = GravityCompensation(ori_method=SimpleGyroIntegration()).compensate(
            static_gravity_data, sampling_rate_hz=100
        )

        np.testing.assert_array_almost_equal(comp.acc_sensor_frame_, 0)
        np.testing.assert_array_almost_equal(comp.acc_global_frame_, 0)
        np.testing.assert_array_almost_equal(np.linalg.norm(comp.gravity_sensor_frame_, axis=1), 9.81)
        np.testing.assert_array_almost_equal(comp.gravity_sensor_frame_, static_gravity_data[SF_ACC])

    def test_output_format(self, static_gravity_data):
        data = static_gravity_data.iloc[:20].copy()
        data.index = data.index + 1000
        comp = GravityCompensation().compensate(data, sampling_rate_hz=100)

        assert list(comp.acc_global_frame_.columns) == GF_ACC
        assert list(comp.acc_sensor_frame_.columns) == SF_ACC
        assert list(comp.gravity_sensor_frame_.columns) == SF_GRAV
        for df in (comp.acc_global_frame_, comp.acc_sensor_frame_, comp.gravity_sensor_frame_):
            pd.testing.assert_index_equal(df.index, data.index)
        # One orientation per sample, the initial orientation is removed
        assert len(comp.orientation_object_) == len(data)

    def test_uses_orientation_after_each_sample(self):
        """The orientation used for a sample already includes the rotation measured in this sample."""
        fs = 10
        data = np.zeros((3, 6))
        data[:, 2] = 9.81
        data[:, 3] = np.pi / 2 * fs
        ori_method = SimpleGyroIntegration(initial_orientation=Rotation.identity())
        comp = GravityCompensation(ori_method=ori_method).compensate(
            pd.DataFrame(data, columns=SF_COLS), sampling_rate_hz=fs
        )

        expected = ori_method.clone().estimate(pd.DataFrame(data, columns=SF_COLS), sampling_rate_hz=fs)
        np.testing.assert_array_almost_equal(
            comp.orientation_object_.as_quat(), expected.orientation_object_[1:].as_quat()
        )
        # After the first sample the sensor is already rotated around x
        np.testing.assert_array_almost_equal(
            comp.gravity_sensor_frame_.iloc[0], expected.orientation_object_[1].inv().apply([0, 0, 9.81])
        )

    def test_moving_sensor_known_orientation(self):
        """Linear acceleration along the global x-axis is recovered for a sensor rotated around the vertical axis."""
        fs = 100
        yaw = Rotation.from_euler("z", 90, degrees=True)
        linear_acc_gf = np.zeros((50, 3))
        linear_acc_gf[:, 0] = np.linspace(0, 2, 50)
        acc_sf = yaw.inv().apply(linear_acc_gf + [0, 0, 9.81])
        data = pd.DataFrame(np.hstack([acc_sf, np.zeros((50, 3))]), columns=SF_COLS)

        comp = GravityCompensation(ori_method=SimpleGyroIntegration(initial_orientation=yaw)).compensate(
            data, sampling_rate_hz=fs
        )

        np.testing.assert_array_almost_equal(comp.acc_global_frame_, linear_acc_gf)

    def test_custom_gravity(self, static_gravity_data):
        data = static_gravity_data / 9.81 * 9.7
        comp = GravityCompensation(ori_method=SimpleGyroIntegration(), gravity=np.array([0, 0, 9.7]))
        comp = comp.compensate(data, sampling_rate_hz=100)

        np.testing.assert_array_almost_equal(comp.acc_global_frame_, 0)

    def test_invalid_ori_method(self, static_gravity_data):
        with pytest.raises(ValueError, match="BaseOrientationMethod"):
            GravityCompensation(ori_method="wrong").compensate(static_gravity_data, sampling_rate_hz=100)

    def test_empty_data(self):
        with pytest.raises(ValidationError):
            GravityCompensation().compensate(pd.DataFrame(columns=SF_COLS), sampling_rate_hz=100)

    def test_missing_columns(self, static_gravity_data):
        with pytest.raises(ValidationError):
            GravityCompensation().compensate(static_gravity_data[SF_ACC], sampling_rate_hz=100)

    def test_static_sensor_madgwick(self, static_gravity_data):
        """The acc correction of Madgwick causes small fluctuations around the true orientation."""
        comp = GravityCompensation(ori_method=MadgwickAHRS(beta=0.1)).compensate(
            static_gravity_data, sampling_rate_hz=100
        )

        np.testing.assert_allclose(comp.acc_global_frame_, 0, atol=0.05)
        np.testing.assert_allclose(comp.gravity_sensor_frame_, static_gravity_data[SF_ACC], atol=0.05)
