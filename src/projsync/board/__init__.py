"""Project board - snapshot, field resolution and value coercion."""

from projsync.board.board import ProjectBoard
from projsync.board.coercion import TEXT_KEYS, clean_value, coerce_value
from projsync.board.exceptions import (
    FieldNotFoundError,
    IterationNotFoundError,
    OptionNotFoundError,
)
from projsync.board.fields import FieldResolver
from projsync.board.models import (
    BoardSnapshot,
    Field,
    FieldType,
    IssueContent,
    Iteration,
    Option,
    ProjectItem,
)

__all__ = [
    "TEXT_KEYS",
    "BoardSnapshot",
    "Field",
    "FieldNotFoundError",
    "FieldResolver",
    "FieldType",
    "IssueContent",
    "Iteration",
    "IterationNotFoundError",
    "Option",
    "OptionNotFoundError",
    "ProjectBoard",
    "ProjectItem",
    "clean_value",
    "coerce_value",
]
