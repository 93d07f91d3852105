"""Data models for the field sync pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field

from projsync.board.models import Field, ProjectItem


@dataclass(frozen=True)
class ShiftPlan:
    """Day offset applied to every schedule value in a run.

    Attributes:
        baseline: Requested project start date (YYYY-MM-DD).
        diff_days: Whole days between the baseline and the first row start.
    """

    baseline: str | None
    diff_days: int


@dataclass(frozen=True)
class FieldUpdate:
    """One field mutation planned for a project item."""

    row_title: str
    key: str
    item: ProjectItem
    field: Field
    value: str

    @property
    def fingerprint(self) -> str:
        return f"{self.item.id}:{self.field.id}:{self.value}"


@dataclass(frozen=True)
class RowPlan:
    """Updates planned for a row plus the fields that were skipped."""

    title: str
    updates: tuple[FieldUpdate, ...] = ()
    skipped: tuple[str, ...] = ()


@dataclass
class SyncSummary:
    """Counters for one batch."""

    name: str
    updated: int = 0
    skipped: int = 0
    failed: int = 0
    failures: list[str] = field(default_factory=list)

    def record_success(self) -> None:
        self.updated += 1

    def record_skip(self, count: int = 1) -> None:
        self.skipped += count

    def record_failure(self, message: str) -> None:
        self.failed += 1
        self.failures.append(message)

    def describe(self) -> str:
        return (
            f"{self.name}: {self.updated} updated, {self.skipped} skipped, {self.failed} failed"
        )
