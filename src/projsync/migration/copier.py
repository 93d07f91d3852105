"""MetadataCopier - duplicates settings, labels, milestones and issues."""

from __future__ import annotations

import logging
import re
from functools import partial
from typing import TYPE_CHECKING, Any

import httpx

from projsync.github.client import describe_error
from projsync.github.exceptions import GitHubError
from projsync.sync.models import SyncSummary

if TYPE_CHECKING:
    from projsync.github import GitHubClient
    from projsync.retry import RetryExecutor
    from projsync.tabular import Row, Table

logger = logging.getLogger("projsync.migration.copier")

# Repository settings carried over from the origin
REPO_SETTINGS = (
    "description",
    "homepage",
    "private",
    "has_issues",
    "has_projects",
    "has_wiki",
    "default_branch",
    "allow_squash_merge",
    "allow_merge_commit",
    "allow_rebase_merge",
    "allow_auto_merge",
    "delete_branch_on_merge",
)

_ISSUE_URL_RE = re.compile(r"github\.com/(.+?)/(.+?)/issues/(\d+)")


def protection_to_input(protection: dict[str, Any]) -> dict[str, Any]:
    """Convert a GET branch-protection response into a PUT request body."""
    checks = protection.get("required_status_checks")
    reviews = protection.get("required_pull_request_reviews")
    restrictions = protection.get("restrictions")
    return {
        "required_status_checks": (
            {"strict": checks.get("strict", False), "contexts": checks.get("contexts", [])}
            if checks
            else None
        ),
        "enforce_admins": (protection.get("enforce_admins") or {}).get("enabled", False),
        "required_pull_request_reviews": (
            {
                "dismiss_stale_reviews": reviews.get("dismiss_stale_reviews", False),
                "require_code_owner_reviews": reviews.get("require_code_owner_reviews", False),
                "required_approving_review_count": reviews.get(
                    "required_approving_review_count", 1
                ),
            }
            if reviews
            else None
        ),
        "restrictions": (
            {
                "users": [u["login"] for u in restrictions.get("users", [])],
                "teams": [t["slug"] for t in restrictions.get("teams", [])],
                "apps": [a["slug"] for a in restrictions.get("apps", [])],
            }
            if restrictions
            else None
        ),
    }


class MetadataCopier:
    """Copies repository metadata from `origin` to `target` for one owner."""

    def __init__(
        self,
        client: GitHubClient,
        owner: str,
        origin: str,
        target: str,
        executor: RetryExecutor,
    ) -> None:
        self.client = client
        self.owner = owner
        self.origin = origin
        self.target = target
        self.executor = executor

    def copy_settings(self) -> bool:
        """Copy repository settings and default-branch protection.

        Returns:
            True if both were applied
        """
        logger.info("Copying repository settings...")
        try:
            origin_data = self.client.get_repository(self.owner, self.origin)
            settings = {key: origin_data[key] for key in REPO_SETTINGS if key in origin_data}
            self.client.update_repository(self.owner, self.target, **settings)

            branch = origin_data.get("default_branch", "main")
            protection = self.client.get_branch_protection(self.owner, self.origin, branch)
            self.client.update_branch_protection(
                self.owner, self.target, branch, protection_to_input(protection)
            )
        except (GitHubError, httpx.HTTPError) as e:
            logger.error("Failed to copy settings: %s", describe_error(e))
            return False

        logger.info("Repository settings and branch protection rules copied.")
        return True

    def copy_labels(self) -> SyncSummary:
        summary = SyncSummary(name="labels")
        logger.info("Copying labels...")
        for label in self.client.list_labels(self.owner, self.origin):
            try:
                self.client.create_label(self.owner, self.target, label)
            except GitHubError as e:
                logger.warning(
                    "Label '%s' skipped (possibly exists): %s", label.name, describe_error(e)
                )
                summary.record_skip()
                continue
            logger.info("Created label: %s", label.name)
            summary.record_success()
        return summary

    def copy_milestones(self) -> dict[str, int]:
        """Create every origin milestone in the target.

        Returns:
            Milestone title -> number in the target repository
        """
        logger.info("Copying milestones...")
        milestone_map: dict[str, int] = {}
        for milestone in self.client.list_milestones(self.owner, self.origin, state="all"):
            try:
                number = self.client.create_milestone(self.owner, self.target, milestone)
            except GitHubError as e:
                logger.error(
                    "Failed to create milestone '%s': %s", milestone.title, describe_error(e)
                )
                continue
            logger.info("Created milestone: %s", milestone.title)
            milestone_map[milestone.title] = number
        return milestone_map

    def _original_body(self, url: str) -> str:
        match = _ISSUE_URL_RE.search(url)
        if not match:
            return ""
        owner, repo, number = match.groups()
        try:
            issue = self.client.get_issue(owner, repo, int(number))
        except (GitHubError, httpx.HTTPError) as e:
            logger.warning("Failed to fetch original issue body from %s: %s", url, describe_error(e))
            return ""
        return issue.get("body") or ""

    def issue_payload(self, row: Row, milestone_map: dict[str, int]) -> dict[str, Any]:
        """Build the create-issue request for one row of the update file."""
        url = row.get("URL", "").strip()
        milestone_title = row.get("Milestone", "").strip()
        assignees = row.get("Assignees", "")

        payload: dict[str, Any] = {
            "title": row.get("Title", "").strip(),
            "body": self._original_body(url) if url else "",
            "labels": [row["Labels"]] if row.get("Labels") else [],
            "assignees": [a.strip() for a in assignees.split(",") if a.strip()],
        }
        if milestone_title in milestone_map:
            payload["milestone"] = milestone_map[milestone_title]
        return payload

    def copy_issues(self, table: Table, milestone_map: dict[str, int]) -> SyncSummary:
        summary = SyncSummary(name="issues")
        logger.info("Copying issues from %d row(s)...", len(table))
        for row in table.rows:
            payload = self.issue_payload(row, milestone_map)
            if not payload["title"]:
                logger.warning("Skipping row without a title")
                summary.record_skip()
                continue

            logger.info("Creating issue: %s", payload["title"])
            outcome = self.executor.run(
                partial(self.client.create_issue, self.owner, self.target, payload),
                description=f"create issue '{payload['title']}'",
                fingerprint=f"issue:{self.owner}/{self.target}:{payload['title']}",
            )
            if outcome.ok:
                summary.record_success()
            else:
                summary.record_failure(f"issue '{payload['title']}': {outcome.error}")
        return summary
