import numpy as np
import pandas as pd
import pytest
from scipy.spatial.transform import Rotation

from meerkatmap.base import BaseOrientationMethod, BaseType
from meerkatmap.orientation_methods import MadgwickAHRS
from meerkatmap.orientation_methods._madgwick import _gravity_alignment_gradient, _madgwick_update
from meerkatmap.utils.consts import SF_COLS
from tests.conftest import create_sinusoidal_bout
from tests.mixins.test_algorithm_mixin import TestAlgorithmMixin
from tests.mixins.test_caching_mixin import TestCachingMixin
from tests.test_orientation_methods.test_ori_method_mixin import TestOrientationMethodMixin


class MetaTestConfig:
    algorithm_class = MadgwickAHRS

    @pytest.fixture()
    def after_action_instance(self) -> BaseType:
        data = create_sinusoidal_bout().iloc[:50] * [9.81, 9.81, 9.81, 1, 1, 1]
        return MadgwickAHRS().estimate(data, sampling_rate_hz=100)


class TestMetaFunctionality(MetaTestConfig, TestAlgorithmMixin):
    __test__ = True


class TestCachingFunctionality(MetaTestConfig, TestCachingMixin):
    __test__ = True

    def assert_after_action_instance(self, instance):
        assert len(instance.orientation_object_) == 51


class TestSimpleRotations(TestOrientationMethodMixin):
    __test__ = True

    def init_algo_class(self, **kwargs) -> BaseOrientationMethod:
        return MadgwickAHRS(**kwargs)

    def test_correction_works(self):
        """Madgwick should be able to resist small rotations if acc does not change."""
        ori = np.array([0, 0, 0, 1.0])
        initial_ori = ori
        for _i in range(50):
            ori = _madgwick_update(
                np.array([1, 1, 0.0]), np.array([0, 0.0, 1.0]), q=ori, sampling_rate_hz=50, beta=1.0
            )

        np.testing.assert_array_almost_equal(ori, initial_ori, decimal=2)

    def test_no_correction_with_beta_0(self):
        ori = np.array([0, 0, 0, 1.0])
        for _i in range(50):
            ori = _madgwick_update(
                np.array([1, 0, 0.0]), np.array([0, 0.0, 1.0]), q=ori, sampling_rate_hz=50, beta=0.0
            )

        # One second of 1 rad/s around x
        np.testing.assert_array_almost_equal(Rotation.from_quat(ori).as_rotvec(), [1, 0, 0], decimal=2)

    def test_gradient_zero_when_aligned(self):
        """A rotation around the vertical axis does not change the direction of gravity."""
        q = Rotation.from_euler("z", 40, degrees=True).as_quat()
        np.testing.assert_array_almost_equal(_gravity_alignment_gradient(q, np.array([0, 0, 1.0])), np.zeros(4))

    def test_gradient_points_towards_acc(self):
        """A small step against the gradient reduces the misalignment."""
        q = Rotation.from_euler("x", 10, degrees=True).as_quat()
        acc = np.array([0, 0, 1.0])

        def misalignment(quat):
            return np.linalg.norm(Rotation.from_quat(quat).inv().apply([0, 0, 1]) - acc)

        step = q - 0.01 * _gravity_alignment_gradient(q, acc)
        assert misalignment(step / np.linalg.norm(step)) < misalignment(q)

    def test_yaw_rotation(self):
        """A rotation around the gravity axis is not corrected."""
        fs = 100
        data = np.zeros((fs, 6))
        data[:, 2] = 9.81
        data[:, 5] = np.pi / 2
        ori = MadgwickAHRS(beta=0.5).estimate(pd.DataFrame(data, columns=SF_COLS), sampling_rate_hz=fs)

        final = ori.orientation_object_[-1]
        np.testing.assert_array_almost_equal(final.apply([1, 0, 0]), [0, 1, 0], decimal=2)

    def test_tilt_is_corrected(self):
        """A wrong initial orientation converges towards gravity for a static sensor."""
        fs = 100
        data = np.zeros((10 * fs, 6))
        data[:, 2] = 9.81
        initial = Rotation.from_euler("x", 10, degrees=True)
        ori = MadgwickAHRS(beta=0.1, initial_orientation=initial).estimate(
            pd.DataFrame(data, columns=SF_COLS), sampling_rate_hz=fs
        )

        final = ori.orientation_object_[-1]
        np.testing.assert_array_almost_equal(final.apply([0, 0, 1]), [0, 0, 1], decimal=2)
