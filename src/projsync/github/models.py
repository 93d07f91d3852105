"""Data models for GitHub REST resources."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Milestone:
    """A repository milestone."""

    number: int
    title: str
    due_on: str | None = None
    state: str = "open"
    description: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Milestone:
        return cls(
            number=int(data["number"]),
            title=data["title"],
            due_on=data.get("due_on"),
            state=data.get("state", "open"),
            description=data.get("description"),
        )


@dataclass(frozen=True)
class Label:
    """A repository label."""

    name: str
    color: str
    description: str = ""

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Label:
        return cls(
            name=data["name"],
            color=data["color"],
            description=data.get("description") or "",
        )
