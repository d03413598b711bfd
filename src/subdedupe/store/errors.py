"""Store-level exceptions."""

from collections.abc import Sequence

__all__ = ["LoaderError", "PlanValidationError"]


class LoaderError(Exception):
    """Raised when a consistent record snapshot cannot be produced."""


class PlanValidationError(ValueError):
    """Raised when a serialized plan does not match the plan schema.

    Attributes
    ----------
    errors : list[str]
        One message per schema violation.
    """

    def __init__(self, message: str, errors: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.errors = list(errors)
