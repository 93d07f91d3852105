"""Unit tests for ProjectBoard."""

from unittest.mock import MagicMock

import pytest

from projsync.board import Field, FieldType, IssueContent, ProjectBoard, ProjectItem
from projsync.exceptions import ProjectNotFoundError


@pytest.fixture
def client() -> MagicMock:
    """Mock GitHubClient."""
    return MagicMock()


@pytest.fixture
def board(client: MagicMock) -> ProjectBoard:
    return ProjectBoard(client, owner="octo")


def _items_page(nodes: list[dict], has_next: bool, cursor: str | None = None) -> dict:
    return {
        "node": {
            "items": {
                "pageInfo": {"hasNextPage": has_next, "endCursor": cursor},
                "nodes": nodes,
            }
        }
    }


@pytest.mark.unit
class TestFindProjectId:
    def test_matches_title(self, board: ProjectBoard, client: MagicMock) -> None:
        client.graphql.return_value = {
            "user": {
                "projectsV2": {
                    "nodes": [{"id": "PVT_1", "title": "Other"}, {"id": "PVT_2", "title": "new-repo"}]
                }
            }
        }

        assert board.find_project_id("new-repo") == "PVT_2"
        assert client.graphql.call_args.args[1] == {"login": "octo"}

    def test_missing_project_raises(self, board: ProjectBoard, client: MagicMock) -> None:
        client.graphql.return_value = {"user": {"projectsV2": {"nodes": []}}}

        with pytest.raises(ProjectNotFoundError):
            board.find_project_id("new-repo")


@pytest.mark.unit
class TestListItems:
    def test_walks_all_pages(self, board: ProjectBoard, client: MagicMock) -> None:
        client.graphql.side_effect = [
            _items_page([{"id": "I1", "content": {"title": "A", "number": 1}}], True, "c1"),
            _items_page(
                [
                    {"id": "I2", "content": {}},
                    {"id": "I3", "content": {"title": "B", "number": 2}},
                ],
                False,
            ),
        ]

        items = board.list_items("PVT_1")

        assert items == [
            ProjectItem(id="I1", content=IssueContent(title="A", number=1)),
            ProjectItem(id="I2"),
            ProjectItem(id="I3", content=IssueContent(title="B", number=2)),
        ]
        cursors = [c.args[1]["after"] for c in client.graphql.call_args_list]
        assert cursors == [None, "c1"]
        assert client.graphql.call_args.args[1]["first"] == 100

    def test_null_content(self, board: ProjectBoard, client: MagicMock) -> None:
        client.graphql.return_value = _items_page([{"id": "I1", "content": None}], False)

        assert board.list_items("PVT_1") == [ProjectItem(id="I1")]


@pytest.mark.unit
class TestListFields:
    def test_parses_types_and_trims_names(self, board: ProjectBoard, client: MagicMock) -> None:
        client.graphql.return_value = {
            "node": {
                "fields": {
                    "nodes": [
                        {"id": "F1", "name": "Starts ", "dataType": "DATE"},
                        {"id": "F2", "name": "Phase", "dataType": "SINGLE_SELECT"},
                        {"id": "F3", "name": "Title", "dataType": "TITLE"},
                        {},
                    ]
                }
            }
        }

        fields = board.list_fields("PVT_1")

        assert fields == [
            Field(id="F1", name="Starts", data_type=FieldType.DATE),
            Field(id="F2", name="Phase", data_type=FieldType.SINGLE_SELECT),
            Field(id="F3", name="Title", data_type=FieldType.OTHER),
        ]


@pytest.mark.unit
def test_snapshot_combines_items_and_fields(board: ProjectBoard, client: MagicMock) -> None:
    client.graphql.side_effect = [
        {"user": {"projectsV2": {"nodes": [{"id": "PVT_9", "title": "proj"}]}}},
        _items_page([{"id": "I1", "content": {"title": "A", "number": 1}}], False),
        {"node": {"fields": {"nodes": [{"id": "F1", "name": "Due", "dataType": "DATE"}]}}},
    ]

    snapshot = board.snapshot("proj")

    assert snapshot.project_id == "PVT_9"
    assert len(snapshot.items) == 1
    assert snapshot.fields[0].name == "Due"
