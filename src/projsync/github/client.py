"""GitHubClient - GraphQL and REST transport for GitHub."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from projsync.exceptions import IssueNotFoundError
from projsync.github.exceptions import SECONDARY_RATE_LIMIT_MARKER, GitHubError
from projsync.github.models import Label, Milestone
from projsync.logging import sanitize_for_log

logger = logging.getLogger("projsync.github")

REST_PAGE_SIZE = 100

ISSUE_ID_QUERY = """
query($owner: String!, $repo: String!, $number: Int!) {
    repository(owner: $owner, name: $repo) {
        issue(number: $number) {
            id
        }
    }
}
"""

ADD_SUB_ISSUE_MUTATION = """
mutation($input: AddSubIssueInput!) {
    addSubIssue(input: $input) {
        issue { id }
        subIssue { id }
    }
}
"""

VIEWER_QUERY = "query { viewer { login } }"


class GitHubClient:
    """Thin synchronous client over the GitHub GraphQL and REST APIs.

    Every call blocks until the response arrives; callers never have two
    requests in flight.
    """

    def __init__(
        self,
        token: str,
        graphql_url: str = "https://api.github.com/graphql",
        api_url: str = "https://api.github.com",
    ) -> None:
        """Initialize the client.

        Args:
            token: GitHub personal access token with repo and project scopes
            graphql_url: GitHub GraphQL API URL (for testing/enterprise)
            api_url: GitHub REST API base URL (for testing/enterprise)
        """
        self.token = token
        self.graphql_url = graphql_url
        self.api_url = api_url.rstrip("/")
        self._client: httpx.Client | None = None

    @property
    def client(self) -> httpx.Client:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.Client(
                headers={
                    "Authorization": f"Bearer {self.token}",
                    "Accept": "application/vnd.github+json",
                    "X-GitHub-Api-Version": "2022-11-28",
                },
                timeout=30.0,
            )
        return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def graphql(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        """Execute a GraphQL query or mutation.

        Returns:
            The `data` member of the response

        Raises:
            GitHubError: If the request fails or the response carries errors
        """
        payload: dict[str, Any] = {"query": query}
        if variables:
            payload["variables"] = variables

        response = self.client.post(self.graphql_url, json=payload)

        if response.status_code != 200:
            raise GitHubError(
                f"GraphQL request failed: {response.status_code} - {response.text}",
                status_code=response.status_code,
            )

        data = _decode(response, "GraphQL response")
        if not isinstance(data, dict):
            raise GitHubError(
                f"GraphQL response is not an object: {response.text[:200]}",
                status_code=response.status_code,
            )
        if "errors" in data:
            message = f"GraphQL errors: {data['errors']}"
            status = 403 if SECONDARY_RATE_LIMIT_MARKER in message.lower() else None
            raise GitHubError(message, status_code=status)

        if not isinstance(data.get("data"), dict):
            raise GitHubError(
                f"GraphQL response has no data: {response.text[:200]}",
                status_code=response.status_code,
            )
        return dict(data["data"])

    def rest(
        self,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Execute a REST call against the API base URL.

        Returns:
            Decoded JSON body, or None for empty responses

        Raises:
            GitHubError: On any status >= 400 or a body that is not JSON
        """
        url = f"{self.api_url}/{path.lstrip('/')}"
        response = self.client.request(method, url, json=json, params=params)

        if response.status_code >= 400:
            raise GitHubError(
                f"{method} {path} failed: {response.status_code} - {response.text}",
                status_code=response.status_code,
            )
        if response.status_code == 204 or not response.content:
            return None
        return _decode(response, f"{method} {path}")

    def _list_all(self, path: str, params: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        """Collect every page of a page-numbered REST listing."""
        results: list[dict[str, Any]] = []
        page = 1
        while True:
            batch = self.rest(
                "GET", path, params={**(params or {}), "per_page": REST_PAGE_SIZE, "page": page}
            )
            if not batch:
                return results
            results.extend(batch)
            if len(batch) < REST_PAGE_SIZE:
                return results
            page += 1

    # --- GraphQL helpers ---

    def viewer_login(self) -> str:
        """Login of the token owner."""
        data = self.graphql(VIEWER_QUERY)
        return str(data["viewer"]["login"])

    def get_issue_node_id(self, owner: str, repo: str, number: int) -> str:
        """Resolve an issue number to its GraphQL node ID.

        Raises:
            IssueNotFoundError: If the issue does not exist
        """
        data = self.graphql(ISSUE_ID_QUERY, {"owner": owner, "repo": repo, "number": number})
        issue = (data.get("repository") or {}).get("issue")
        if not issue:
            raise IssueNotFoundError(f"Issue #{number} not found in {owner}/{repo}")
        return str(issue["id"])

    def add_sub_issue(self, parent_id: str, child_id: str) -> None:
        """Make `child_id` a sub-issue of `parent_id`."""
        self.graphql(
            ADD_SUB_ISSUE_MUTATION,
            {"input": {"issueId": parent_id, "subIssueId": child_id}},
        )

    # --- REST helpers ---

    def list_milestones(self, owner: str, repo: str, state: str = "open") -> list[Milestone]:
        data = self._list_all(f"repos/{owner}/{repo}/milestones", {"state": state})
        return [Milestone.from_api(m) for m in data]

    def update_milestone(self, owner: str, repo: str, number: int, **fields: Any) -> None:
        self.rest("PATCH", f"repos/{owner}/{repo}/milestones/{number}", json=fields)

    def create_milestone(self, owner: str, repo: str, milestone: Milestone) -> int:
        """Create a milestone and return its number in the target repository."""
        payload: dict[str, Any] = {
            "title": milestone.title,
            "state": milestone.state,
            "description": milestone.description,
        }
        if milestone.due_on:
            payload["due_on"] = milestone.due_on
        created = self.rest("POST", f"repos/{owner}/{repo}/milestones", json=payload)
        return int(created["number"])

    def list_labels(self, owner: str, repo: str) -> list[Label]:
        return [Label.from_api(label) for label in self._list_all(f"repos/{owner}/{repo}/labels")]

    def create_label(self, owner: str, repo: str, label: Label) -> None:
        self.rest(
            "POST",
            f"repos/{owner}/{repo}/labels",
            json={"name": label.name, "color": label.color, "description": label.description},
        )

    def get_repository(self, owner: str, repo: str) -> dict[str, Any]:
        return dict(self.rest("GET", f"repos/{owner}/{repo}"))

    def update_repository(self, owner: str, repo: str, **fields: Any) -> None:
        self.rest("PATCH", f"repos/{owner}/{repo}", json=fields)

    def get_branch_protection(self, owner: str, repo: str, branch: str) -> dict[str, Any]:
        return dict(self.rest("GET", f"repos/{owner}/{repo}/branches/{branch}/protection"))

    def update_branch_protection(
        self, owner: str, repo: str, branch: str, protection: dict[str, Any]
    ) -> None:
        self.rest("PUT", f"repos/{owner}/{repo}/branches/{branch}/protection", json=protection)

    def get_issue(self, owner: str, repo: str, number: int) -> dict[str, Any]:
        return dict(self.rest("GET", f"repos/{owner}/{repo}/issues/{number}"))

    def create_issue(self, owner: str, repo: str, payload: dict[str, Any]) -> dict[str, Any]:
        logger.debug("Creating issue in %s/%s: %s", owner, repo, payload.get("title"))
        return dict(self.rest("POST", f"repos/{owner}/{repo}/issues", json=payload))

    def list_issues_page(
        self, owner: str, repo: str, page: int, state: str = "all"
    ) -> list[dict[str, Any]]:
        """One page of issues (pull requests included, as the REST API returns them)."""
        batch = self.rest(
            "GET",
            f"repos/{owner}/{repo}/issues",
            params={"state": state, "per_page": REST_PAGE_SIZE, "page": page},
        )
        return list(batch or [])

    def update_issue(self, owner: str, repo: str, number: int, **fields: Any) -> None:
        self.rest("PATCH", f"repos/{owner}/{repo}/issues/{number}", json=fields)


def _decode(response: httpx.Response, what: str) -> Any:
    """Parse a JSON body, raising GitHubError on malformed content."""
    try:
        return response.json()
    except ValueError as e:
        raise GitHubError(
            f"{what} returned invalid JSON: {response.status_code} - {response.text[:200]}",
            status_code=response.status_code,
        ) from e


def describe_error(error: Exception) -> str:
    """Render an exception for logs with credentials stripped."""
    return sanitize_for_log(str(error))
