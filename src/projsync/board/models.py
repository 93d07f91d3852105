"""Data models for a GitHub Project (ProjectsV2) board snapshot."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class FieldType(str, Enum):
    """Project field data types that drive value coercion."""

    NUMBER = "NUMBER"
    DATE = "DATE"
    SINGLE_SELECT = "SINGLE_SELECT"
    ITERATION = "ITERATION"
    TEXT = "TEXT"
    OTHER = "OTHER"

    @classmethod
    def parse(cls, value: str | None) -> FieldType:
        """Map a GraphQL dataType to a FieldType; unknown types become OTHER."""
        try:
            return cls(value)
        except ValueError:
            return cls.OTHER


@dataclass(frozen=True)
class Field:
    """A custom field on the project."""

    id: str
    name: str
    data_type: FieldType


@dataclass(frozen=True)
class Option:
    """One value of a single-select field."""

    id: str
    name: str


@dataclass(frozen=True)
class Iteration:
    """One iteration of an iteration field."""

    id: str
    title: str


@dataclass(frozen=True)
class IssueContent:
    """The issue behind a project item."""

    title: str
    number: int


@dataclass(frozen=True)
class ProjectItem:
    """A row on the board. `content` is None for drafts and pull requests."""

    id: str
    content: IssueContent | None = None

    @classmethod
    def from_node(cls, node: dict[str, Any]) -> ProjectItem:
        content = node.get("content") or {}
        if "title" in content and "number" in content:
            return cls(
                id=node["id"],
                content=IssueContent(title=content["title"], number=int(content["number"])),
            )
        return cls(id=node["id"])


@dataclass(frozen=True)
class BoardSnapshot:
    """Read-only view of a project fetched once at the start of a run."""

    project_id: str
    items: tuple[ProjectItem, ...]
    fields: tuple[Field, ...]
