"""Methods to separate gravity from the measured acceleration."""

from meerkatmap.gravity_removal._gravity_compensation import GravityCompensation

__all__ = ["GravityCompensation"]
