"""Custom exceptions for project board lookups."""

from projsync.exceptions import NotFoundError


class FieldNotFoundError(NotFoundError):
    """Field with given name does not exist on the project."""


class OptionNotFoundError(NotFoundError):
    """Single-select option with given name does not exist."""


class IterationNotFoundError(NotFoundError):
    """Iteration with given title does not exist."""
