"""Field sync - schedule shifting and field updates on a project board."""

from projsync.sync.milestones import MilestoneShifter
from projsync.sync.models import FieldUpdate, RowPlan, ShiftPlan, SyncSummary
from projsync.sync.pipeline import UPDATE_FIELD_VALUE_MUTATION, ProjectFieldSync

__all__ = [
    "UPDATE_FIELD_VALUE_MUTATION",
    "FieldUpdate",
    "MilestoneShifter",
    "ProjectFieldSync",
    "RowPlan",
    "ShiftPlan",
    "SyncSummary",
]
