"""ProjectFieldSync - applies tabular schedule and field values to a board.

The run is an ordered sequence of stages, each consuming and producing
immutable values:

    snapshot -> shift plan -> milestone shift -> row plans -> field updates

Every network call completes before the next one starts.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from functools import partial
from typing import TYPE_CHECKING

from projsync.board import (
    BoardSnapshot,
    FieldNotFoundError,
    FieldResolver,
    FieldType,
    ProjectBoard,
    clean_value,
    coerce_value,
)
from projsync.exceptions import AmbiguousTitleError, NotFoundError, ValidationError
from projsync.schedule import compute_diff_days, shift_date
from projsync.sync.milestones import MilestoneShifter
from projsync.sync.models import FieldUpdate, RowPlan, ShiftPlan, SyncSummary
from projsync.xref import CrossReferenceResolver

if TYPE_CHECKING:
    from projsync.config import SyncConfig
    from projsync.github import GitHubClient
    from projsync.retry import RetryExecutor
    from projsync.tabular import Row, Table

logger = logging.getLogger("projsync.sync")

UPDATE_FIELD_VALUE_MUTATION = """
mutation($input: UpdateProjectV2ItemFieldValueInput!) {
    updateProjectV2ItemFieldValue(input: $input) {
        projectV2Item {
            id
        }
    }
}
"""


class ProjectFieldSync:
    """Copies schedule and classification columns onto project items.

    The project is looked up by title (by default the target repository
    name). Only columns named in `config.synced_fields` are written; the
    `Title` column is the join key and is never written.
    """

    def __init__(
        self,
        client: GitHubClient,
        config: SyncConfig,
        owner: str,
        repo: str,
        executor: RetryExecutor,
    ) -> None:
        self.client = client
        self.config = config
        self.owner = owner
        self.repo = repo
        self.executor = executor
        self._synced = {name.strip().lower() for name in config.synced_fields}

    # --- Stages ---

    def load_snapshot(self, project_title: str) -> BoardSnapshot:
        """Fetch the project's items and fields once for the run."""
        return ProjectBoard(self.client, self.owner).snapshot(project_title)

    def plan_shift(self, table: Table, baseline: str | None) -> ShiftPlan:
        diff_days = compute_diff_days(baseline, table.rows)
        logger.info("Shifting schedule by %d day(s) (baseline %s)", diff_days, baseline)
        return ShiftPlan(baseline=baseline, diff_days=diff_days)

    def synced_keys(self, headers: Sequence[str]) -> list[str]:
        return [
            key
            for key in headers
            if key.strip().lower() != "title" and key.strip().lower() in self._synced
        ]

    def plan_row(
        self,
        row: Row,
        headers: Sequence[str],
        xref: CrossReferenceResolver,
        resolver: FieldResolver,
        shift: ShiftPlan,
    ) -> RowPlan:
        """Work out which field updates a row produces.

        Raises:
            ItemNotFoundError: If no project item has the row's title
            AmbiguousTitleError: If strict titles are on and the title repeats
        """
        title = row.get("Title", "")
        item = xref.find_item(title)

        keys = self.synced_keys(headers)
        values = {key: xref.rewrite_reference_url(row.get(key, ""), title) for key in keys}

        updates: list[FieldUpdate] = []
        skipped: list[str] = []
        for key in keys:
            value = values[key]
            if not value or not value.strip():
                logger.info("Skipping empty value for '%s' in '%s'", key, title)
                skipped.append(key)
                continue

            try:
                field = resolver.require(key)
            except FieldNotFoundError as e:
                logger.warning("%s", e)
                skipped.append(key)
                continue

            if field.data_type is FieldType.DATE:
                shifted = shift_date(clean_value(value), shift.diff_days)
                if shifted is None:
                    logger.warning("Invalid date for '%s' in '%s', skipping.", key, title)
                    skipped.append(key)
                    continue
                value = shifted

            updates.append(FieldUpdate(row_title=title, key=key, item=item, field=field, value=value))

        return RowPlan(title=title, updates=tuple(updates), skipped=tuple(skipped))

    def apply(
        self,
        update: FieldUpdate,
        snapshot: BoardSnapshot,
        resolver: FieldResolver,
        summary: SyncSummary,
    ) -> None:
        """Coerce one planned value and write it through the retry executor."""
        try:
            payload = coerce_value(update.value, update.field, resolver, update.key)
        except (ValidationError, NotFoundError) as e:
            logger.warning(
                "Failed to prepare value for '%s' with value '%s': %s", update.key, update.value, e
            )
            summary.record_skip()
            return

        outcome = self.executor.run(
            partial(
                self.client.graphql,
                UPDATE_FIELD_VALUE_MUTATION,
                {
                    "input": {
                        "projectId": snapshot.project_id,
                        "itemId": update.item.id,
                        "fieldId": update.field.id,
                        "value": payload,
                    }
                },
            ),
            description=f"update '{update.key}' for '{update.row_title}'",
            fingerprint=update.fingerprint,
        )
        if outcome.ok:
            logger.info("Updated '%s' for '%s' to '%s'", update.key, update.row_title, update.value)
            summary.record_success()
        else:
            summary.record_failure(f"'{update.key}' for '{update.row_title}': {outcome.error}")

    # --- Driver ---

    def run(
        self,
        table: Table,
        baseline: str | None,
        project_title: str | None = None,
    ) -> SyncSummary:
        """Shift milestones, then update every row's synced fields.

        Args:
            table: Parsed update file
            baseline: New project start date (YYYY-MM-DD)
            project_title: Project to update; defaults to the repository name

        Returns:
            Summary of field updates

        Raises:
            ProjectNotFoundError: If the project does not exist
        """
        snapshot = self.load_snapshot(project_title or self.repo)
        resolver = FieldResolver(self.client, snapshot.fields)
        xref = CrossReferenceResolver(
            snapshot.items,
            target_owner=self.owner,
            target_repo=self.repo,
            source_prefix=self.config.source_prefix,
            strict=self.config.strict_titles,
        )
        shift = self.plan_shift(table, baseline)

        milestone_summary = MilestoneShifter(
            self.client, self.owner, self.repo, self.executor
        ).shift(shift.diff_days)
        logger.info("%s", milestone_summary.describe())

        summary = SyncSummary(name="fields")
        for row in table.rows:
            try:
                plan = self.plan_row(row, table.headers, xref, resolver, shift)
            except AmbiguousTitleError as e:
                logger.warning("%s", e)
                summary.record_failure(str(e))
                continue
            except NotFoundError as e:
                logger.warning("%s", e)
                summary.record_skip()
                continue

            summary.record_skip(len(plan.skipped))
            for update in plan.updates:
                self.apply(update, snapshot, resolver, summary)

        logger.info("%s", summary.describe())
        return summary
