"""Shifting milestone due dates in the target repository."""

from __future__ import annotations

import logging
from functools import partial
from typing import TYPE_CHECKING

from projsync.schedule import shift_timestamp
from projsync.sync.models import SyncSummary

if TYPE_CHECKING:
    from projsync.github import GitHubClient
    from projsync.retry import RetryExecutor

logger = logging.getLogger("projsync.sync.milestones")


class MilestoneShifter:
    """Moves every open milestone's due date by the run's day offset."""

    def __init__(
        self, client: GitHubClient, owner: str, repo: str, executor: RetryExecutor
    ) -> None:
        self.client = client
        self.owner = owner
        self.repo = repo
        self.executor = executor

    def shift(self, diff_days: int) -> SyncSummary:
        summary = SyncSummary(name="milestones")
        milestones = self.client.list_milestones(self.owner, self.repo, state="open")

        for milestone in milestones:
            if not milestone.due_on:
                summary.record_skip()
                continue
            due_on = shift_timestamp(milestone.due_on, diff_days)
            if due_on is None:
                logger.warning(
                    "Invalid due date '%s' on milestone '%s', skipping.",
                    milestone.due_on,
                    milestone.title,
                )
                summary.record_skip()
                continue

            outcome = self.executor.run(
                partial(
                    self.client.update_milestone,
                    self.owner,
                    self.repo,
                    milestone.number,
                    due_on=due_on,
                ),
                description=f"update milestone '{milestone.title}'",
                fingerprint=f"milestone:{self.owner}/{self.repo}#{milestone.number}",
            )
            if outcome.ok:
                logger.info("Updated milestone '%s' due date to %s", milestone.title, due_on[:10])
                summary.record_success()
            else:
                summary.record_failure(f"milestone '{milestone.title}': {outcome.error}")

        return summary
