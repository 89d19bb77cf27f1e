"""Vector helpers used to construct rotations between measured and expected vectors.

All functions accept a single vector of shape (3,) or a stack of vectors of shape (n, 3), where each row is treated
as an independent vector.
"""
from typing import Union

import numpy as np
from numpy.linalg import norm


def row_wise_dot(v1, v2, squeeze=False):
    """Calculate the dot product of each pair of rows."""
    out = np.einsum("ij,ij->i", *np.atleast_2d(v1, v2))
    return np.squeeze(out) if squeeze else out


def normalize(v: np.ndarray) -> np.ndarray:
    """Scale a vector (or each row of a 2D array) to unit length.

    Examples
    --------
    >>> normalize(np.array([0, 0, 2]))
    array([0., 0., 1.])

    """
    v = np.array(v, dtype=float)
    if not v.any():
        raise ValueError("A vector of only zeros can not be normalized.")
    return v / norm(v, axis=-1, keepdims=True)


def is_almost_parallel_or_antiparallel(
    v1: np.ndarray, v2: np.ndarray, rtol: float = 1.0e-5, atol: float = 1.0e-8
) -> Union[bool, np.ndarray]:
    """Check if two vectors point in the same or in opposite directions.

    Parameters
    ----------
    v1 : array with shape (3,) or (n, 3)
        First vector(s)
    v2 : array with shape (3,) or (n, 3)
        Second vector(s)
    rtol
        Relative tolerance passed to :func:`numpy.isclose`
    atol
        Absolute tolerance passed to :func:`numpy.isclose`

    Examples
    --------
    >>> is_almost_parallel_or_antiparallel(np.array([0, 0, 1]), np.array([0, 0, -1]))
    True

    """
    cos_angle = row_wise_dot(normalize(v1), normalize(v2), squeeze=True)
    return np.isclose(np.abs(cos_angle), 1, rtol=rtol, atol=atol)


def find_orthogonal(v1: np.ndarray, v2: np.ndarray) -> np.ndarray:
    """Find a unit vector perpendicular to the two vectors v1 and v2.

    For (anti)parallel vectors every vector in the plane perpendicular to v1 qualifies.
    In this case the cross product of v1 with the x-axis (or the y-axis, if v1 is parallel to x) is returned.

    Examples
    --------
    >>> find_orthogonal(np.array([1, 0, 0]), np.array([0, 1, 0]))
    array([0., 0., 1.])

    """
    if v1.ndim > 1 or v2.ndim > 1:
        raise ValueError(f"Only single vectors are supported, but got {v1.ndim}D and {v2.ndim}D input.")
    if not is_almost_parallel_or_antiparallel(v1, v2):
        return normalize(np.cross(v1, v2))
    helper_axis = [0, 1, 0] if is_almost_parallel_or_antiparallel(v1, np.array([1.0, 0, 0])) else [1, 0, 0]
    return normalize(np.cross(v1, helper_axis))


def find_unsigned_3d_angle(v1: np.ndarray, v2: np.ndarray) -> Union[np.ndarray, float]:
    """Calculate the angle in rad between two vectors (or each pair of rows).

    Examples
    --------
    >>> find_unsigned_3d_angle(np.array([-1, 0, 0]), np.array([0, 0, 1]))
    1.5707963267948966

    """
    cos_angle = row_wise_dot(*np.atleast_2d(normalize(v1), normalize(v2)))
    out = np.arccos(np.clip(cos_angle, -1.0, 1.0))
    if np.ndim(v1) == 1:
        return float(out[0])
    return out
