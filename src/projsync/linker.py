"""ParentChildLinker - builds the sub-issue hierarchy from a parents file."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from functools import partial
from typing import TYPE_CHECKING

import httpx

from projsync.exceptions import NotFoundError
from projsync.github.client import describe_error
from projsync.github.exceptions import GitHubError
from projsync.sync.models import SyncSummary
from projsync.xref import extract_issue_number

if TYPE_CHECKING:
    from projsync.github import GitHubClient
    from projsync.retry import RetryExecutor
    from projsync.tabular import Row

logger = logging.getLogger("projsync.linker")

CHILD_COLUMN = "URL"
PARENT_COLUMN = "Parent issue"


class ParentChildLinker:
    """Links each row's issue under its parent issue in one repository.

    Rows are independent: a failure on one row is logged and the next row
    is processed.
    """

    def __init__(
        self,
        client: GitHubClient,
        owner: str,
        repo: str,
        executor: RetryExecutor,
    ) -> None:
        self.client = client
        self.owner = owner
        self.repo = repo
        self.executor = executor

    def link_rows(self, rows: Iterable[Row]) -> SyncSummary:
        summary = SyncSummary(name="links")
        for row in rows:
            self.link_row(row, summary)
        logger.info("%s", summary.describe())
        return summary

    def link_row(self, row: Row, summary: SyncSummary) -> None:
        child_url = row.get(CHILD_COLUMN)
        if not child_url:
            logger.warning("Skipping row with missing URL: %s", row.get("Title", row))
            summary.record_skip()
            return

        child_number = extract_issue_number(child_url)
        parent_number = extract_issue_number(row.get(PARENT_COLUMN))

        if child_number is None:
            logger.warning("Skipping row with invalid or missing child issue: %s", child_url)
            summary.record_skip()
            return

        if parent_number is None:
            logger.info("No parent specified for issue #%d, skipping link.", child_number)
            summary.record_skip()
            return

        try:
            child_id = self.client.get_issue_node_id(self.owner, self.repo, child_number)
            parent_id = self.client.get_issue_node_id(self.owner, self.repo, parent_number)
        except (NotFoundError, GitHubError, httpx.HTTPError) as e:
            message = f"Could not link issue #{child_number} to #{parent_number}: {describe_error(e)}"
            logger.error("%s", message)
            summary.record_failure(message)
            return

        outcome = self.executor.run(
            partial(self.client.add_sub_issue, parent_id, child_id),
            description=f"link issue #{child_number} to #{parent_number}",
            fingerprint=f"link:{parent_id}:{child_id}",
        )
        if outcome.ok:
            logger.info("Linked issue #%d as child of #%d", child_number, parent_number)
            summary.record_success()
        else:
            summary.record_failure(
                f"link issue #{child_number} to #{parent_number}: {outcome.error}"
            )
