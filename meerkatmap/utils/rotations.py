"""Helpers to construct and apply rotations.

Rotations are always represented as :class:`scipy.spatial.transform.Rotation` objects.
"""
from typing import Optional, Union

import numpy as np
from numpy.linalg import norm
from scipy.spatial.transform import Rotation

from meerkatmap.utils.consts import GRAV_VEC
from meerkatmap.utils.vector_math import find_orthogonal, find_unsigned_3d_angle, normalize


def rotation_from_angle(axis: np.ndarray, angle: Union[float, np.ndarray]) -> Rotation:
    """Create rotation(s) from a rotation axis and an angle in rad.

    Parameters
    ----------
    axis : array with shape (3,) or (n, 3)
        Normalized rotation axis or one axis per rotation
    angle : float or array with shape (n,)
        Rotation angle(s) in rad

    Examples
    --------
    >>> rotation_from_angle(np.array([1, 0, 0]), np.pi).as_quat().round(3)
    array([1., 0., 0., 0.])

    """
    rotvec = np.atleast_2d(axis) * np.atleast_2d(angle).T
    return Rotation.from_rotvec(np.squeeze(rotvec))


def find_shortest_rotation(v1: np.ndarray, v2: np.ndarray) -> Rotation:
    """Find the rotation with the smallest angle that turns the unit vector v1 into the unit vector v2.

    Examples
    --------
    >>> rot = find_shortest_rotation(np.array([1, 0, 0]), np.array([0, 0, 1]))
    >>> rot.apply([1, 0, 0]).round(3)
    array([0., 0., 1.])

    """
    if not (np.isclose(norm(v1), 1) and np.isclose(norm(v2), 1)):
        raise ValueError("v1 and v2 must be normalized")
    return rotation_from_angle(find_orthogonal(v1, v2), find_unsigned_3d_angle(v1, v2))


def get_gravity_rotation(gravity_vector: np.ndarray, expected_gravity: Optional[np.ndarray] = GRAV_VEC) -> Rotation:
    """Find the rotation that aligns a measured gravity vector with the global z-axis.

    Applied to sensor-frame vectors, the returned rotation expresses them in a global frame whose z-axis points along
    the measured gravity.
    The heading (rotation around z) of this frame is arbitrary.

    Parameters
    ----------
    gravity_vector : vector with shape (3,)
        The acceleration measured while the sensor is static
    expected_gravity : vector with shape (3,)
        The gravity vector in the global frame

    Examples
    --------
    >>> rot = get_gravity_rotation(np.array([9.81, 0, 0]))
    >>> rot.apply(np.array([1, 0, 0])).round(3)
    array([0., 0., 1.])

    """
    return find_shortest_rotation(normalize(gravity_vector), normalize(expected_gravity))


def rotate_vector_series(vectors: np.ndarray, rotations: Rotation, inverse: bool = False) -> np.ndarray:
    """Rotate a series of vectors using a series of rotations (one per sample).

    Parameters
    ----------
    vectors : array with shape (n, 3) or (3,)
        The vectors to rotate.
        A single vector is rotated by every rotation of the series.
    rotations
        A Rotation object with n rotations
    inverse
        If True, the inverse of each rotation is applied

    Returns
    -------
    rotated vectors : array with shape (n, 3)

    """
    if inverse is True:
        rotations = rotations.inv()
    vectors = np.asarray(vectors, dtype=float)
    if vectors.ndim == 2 and len(vectors) != len(rotations):
        raise ValueError(
            f"The number of rotations ({len(rotations)}) does not match the number of vectors ({len(vectors)})."
        )
    return np.atleast_2d(rotations.apply(vectors))
