"""FieldResolver - maps field, option and iteration names to IDs."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from projsync.board.exceptions import (
    FieldNotFoundError,
    IterationNotFoundError,
    OptionNotFoundError,
)
from projsync.board.models import Field, Iteration, Option

if TYPE_CHECKING:
    from projsync.github import GitHubClient

logger = logging.getLogger("projsync.board")

FIELD_OPTIONS_QUERY = """
query($fieldId: ID!) {
    node(id: $fieldId) {
        ... on ProjectV2SingleSelectField {
            options {
                id
                name
            }
        }
    }
}
"""

FIELD_ITERATIONS_QUERY = """
query($fieldId: ID!) {
    node(id: $fieldId) {
        ... on ProjectV2IterationField {
            configuration {
                iterations {
                    id
                    title
                }
            }
        }
    }
}
"""


class FieldResolver:
    """Resolves symbolic names against one project's field definitions.

    Option and iteration lists are fetched on first use and cached per field
    ID for the lifetime of the resolver.
    """

    def __init__(self, client: GitHubClient, fields: Iterable[Field]) -> None:
        self.client = client
        self._fields: dict[str, Field] = {f.name.strip(): f for f in fields}
        self._options: dict[str, list[Option]] = {}
        self._iterations: dict[str, list[Iteration]] = {}

    @property
    def names(self) -> list[str]:
        return list(self._fields)

    def get(self, name: str) -> Field | None:
        """Look up a field by trimmed, case-sensitive name."""
        return self._fields.get(name.strip())

    def require(self, name: str) -> Field:
        """Look up a field by name.

        Raises:
            FieldNotFoundError: If the project has no such field
        """
        field = self.get(name)
        if field is None:
            raise FieldNotFoundError(f"Field '{name.strip()}' not found in project.")
        return field

    def options(self, field_id: str) -> list[Option]:
        if field_id not in self._options:
            data = self.client.graphql(FIELD_OPTIONS_QUERY, {"fieldId": field_id})
            nodes = (data.get("node") or {}).get("options") or []
            self._options[field_id] = [Option(id=o["id"], name=o["name"]) for o in nodes]
        return self._options[field_id]

    def iterations(self, field_id: str) -> list[Iteration]:
        if field_id not in self._iterations:
            data = self.client.graphql(FIELD_ITERATIONS_QUERY, {"fieldId": field_id})
            config = (data.get("node") or {}).get("configuration") or {}
            self._iterations[field_id] = [
                Iteration(id=i["id"], title=i["title"]) for i in config.get("iterations") or []
            ]
        return self._iterations[field_id]

    def resolve_option(self, field_id: str, name: str) -> str:
        """Get the ID of a single-select option by exact name.

        Raises:
            OptionNotFoundError: If no option has that name
        """
        for option in self.options(field_id):
            if option.name == name:
                return option.id
        raise OptionNotFoundError(f"Option '{name}' not found for select field.")

    def resolve_iteration(self, field_id: str, label: str) -> str:
        """Get the ID of an iteration by exact title.

        Raises:
            IterationNotFoundError: If no iteration has that title
        """
        for iteration in self.iterations(field_id):
            if iteration.title == label:
                return iteration.id
        raise IterationNotFoundError(f"Iteration '{label}' not found.")
