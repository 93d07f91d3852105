"""ProjectBoard - reads a GitHub Project (ProjectsV2) into a snapshot."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from projsync.board.models import BoardSnapshot, Field, FieldType, ProjectItem
from projsync.exceptions import ProjectNotFoundError
from projsync.github.pagination import Page, paginate

if TYPE_CHECKING:
    from projsync.github import GitHubClient

logger = logging.getLogger("projsync.board")

ITEMS_PAGE_SIZE = 100

USER_PROJECTS_QUERY = """
query($login: String!) {
    user(login: $login) {
        projectsV2(first: 50) {
            nodes {
                id
                title
            }
        }
    }
}
"""

PROJECT_ITEMS_QUERY = """
query($projectId: ID!, $first: Int!, $after: String) {
    node(id: $projectId) {
        ... on ProjectV2 {
            items(first: $first, after: $after) {
                pageInfo {
                    hasNextPage
                    endCursor
                }
                nodes {
                    id
                    content {
                        ... on Issue { title number }
                    }
                }
            }
        }
    }
}
"""

PROJECT_FIELDS_QUERY = """
query($projectId: ID!) {
    node(id: $projectId) {
        ... on ProjectV2 {
            fields(first: 50) {
                nodes {
                    ... on ProjectV2FieldCommon {
                        id
                        name
                        dataType
                    }
                }
            }
        }
    }
}
"""


class ProjectBoard:
    """Reads project metadata for one owner.

    Projects are looked up by title among the owner's first 50 user projects.
    """

    def __init__(self, client: GitHubClient, owner: str) -> None:
        self.client = client
        self.owner = owner

    def find_project_id(self, title: str) -> str:
        """Get the node ID of the user project with the given title.

        Raises:
            ProjectNotFoundError: If no project has that title
        """
        data = self.client.graphql(USER_PROJECTS_QUERY, {"login": self.owner})
        nodes = ((data.get("user") or {}).get("projectsV2") or {}).get("nodes") or []
        for node in nodes:
            if node and node.get("title") == title:
                return str(node["id"])
        raise ProjectNotFoundError(f"Project '{title}' not found for user {self.owner}")

    def list_items(self, project_id: str) -> list[ProjectItem]:
        """Fetch every item on the project, following cursors."""

        def fetch(cursor: str | None) -> Page[ProjectItem]:
            data = self.client.graphql(
                PROJECT_ITEMS_QUERY,
                {"projectId": project_id, "first": ITEMS_PAGE_SIZE, "after": cursor},
            )
            page = Page.from_connection(data["node"]["items"])
            return Page(
                items=[ProjectItem.from_node(n) for n in page.items if n],
                has_more=page.has_more,
                next_cursor=page.next_cursor,
            )

        items = paginate(fetch)
        logger.info("Fetched %d project item(s)", len(items))
        return items

    def list_fields(self, project_id: str) -> list[Field]:
        """Fetch field definitions (single page; names trimmed)."""
        data = self.client.graphql(PROJECT_FIELDS_QUERY, {"projectId": project_id})
        nodes = data["node"]["fields"]["nodes"]
        fields = [
            Field(
                id=node["id"],
                name=node["name"].strip(),
                data_type=FieldType.parse(node.get("dataType")),
            )
            for node in nodes
            if node and "id" in node
        ]
        logger.debug("Fetched %d field definition(s)", len(fields))
        return fields

    def snapshot(self, title: str) -> BoardSnapshot:
        """Build a read-only snapshot of the project's items and fields."""
        project_id = self.find_project_id(title)
        return BoardSnapshot(
            project_id=project_id,
            items=tuple(self.list_items(project_id)),
            fields=tuple(self.list_fields(project_id)),
        )
