"""A set of custom exceptions."""
from typing import Sequence


class ValidationError(Exception):
    """An error indicating that data-object does not comply with the guidelines."""


class MalformedBoutError(ValidationError):
    """An error indicating that a bout violates the preconditions of the speed pipeline.

    This is raised for acc and gyr streams of unequal length and for bouts that are too short to contain the static
    padding on both sides and the minimal locomotion duration.
    """


class BoundaryNotFoundError(Exception):
    """An error indicating that no still sample was found in the search window of a bout boundary."""

    def __init__(self, sides: Sequence[str]) -> None:
        self.sides = tuple(sides)
        super().__init__()

    def __str__(self) -> str:
        """Return a string representation of the error."""
        return (
            f"No still sample was found in the search window of the {' and '.join(self.sides)} of the bout. "
            "The bout can not be used for speed estimation."
        )


class DegenerateIntervalError(Exception):
    """An error indicating that the domain of integration is too short to be integrated."""
