"""IssueCleaner - strips migration attribution blocks from issue bodies."""

from __future__ import annotations

import logging
import re
from functools import partial
from typing import TYPE_CHECKING

from projsync.sync.models import SyncSummary

if TYPE_CHECKING:
    from projsync.github import GitHubClient
    from projsync.retry import RetryExecutor

logger = logging.getLogger("projsync.migration.cleaner")

ATTRIBUTION_BLOCK = re.compile(
    r"Original issue by @\w+ on \d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}Z\n\n---\n?"
)


def strip_attribution(body: str) -> str:
    """Remove the first attribution block from an issue body."""
    return ATTRIBUTION_BLOCK.sub("", body, count=1)


class IssueCleaner:
    """Rewrites every issue of a repository whose body has an attribution block."""

    def __init__(self, client: GitHubClient, owner: str, executor: RetryExecutor) -> None:
        self.client = client
        self.owner = owner
        self.executor = executor

    def clean(self, repo: str) -> SyncSummary:
        summary = SyncSummary(name="issue bodies")
        page = 1
        while True:
            issues = self.client.list_issues_page(self.owner, repo, page)
            if not issues:
                break

            for issue in issues:
                number = issue["number"]
                body = issue.get("body")
                if not body:
                    summary.record_skip()
                    continue

                cleaned = strip_attribution(body)
                if cleaned == body:
                    logger.debug("No match in issue #%d", number)
                    summary.record_skip()
                    continue

                outcome = self.executor.run(
                    partial(self.client.update_issue, self.owner, repo, number, body=cleaned),
                    description=f"clean issue #{number}",
                )
                if outcome.ok:
                    logger.info("Updated issue #%d", number)
                    summary.record_success()
                else:
                    summary.record_failure(f"issue #{number}: {outcome.error}")

            page += 1

        logger.info("%s", summary.describe())
        return summary
