"""Uniform date shifting for schedule fields and milestones."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date, datetime, timedelta, timezone


def parse_date(value: str | None) -> date | None:
    """Parse a calendar date or ISO-8601 timestamp.

    Timestamps are normalised to their UTC calendar date.

    Returns:
        The date, or None if the value is empty or unparsable.
    """
    if not value or not isinstance(value, str):
        return None
    value = value.strip()

    try:
        if len(value) == 10:
            return date.fromisoformat(value)
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.date()


def compute_diff_days(
    baseline: str | None,
    rows: Iterable[Mapping[str, str]],
    start_key: str = "Starts",
) -> int:
    """Days between the baseline date and the first scheduled start.

    The anchor is the first row with a non-empty `start_key` value. Returns 0
    when either date is missing or unparsable.
    """
    base = parse_date(baseline)
    anchor_value = next((row.get(start_key) for row in rows if row.get(start_key)), None)
    anchor = parse_date(anchor_value)
    if base is None or anchor is None:
        return 0
    return (base - anchor).days


def shift_date(value: str | None, diff_days: int) -> str | None:
    """Shift a date by whole days, returning YYYY-MM-DD or None if unparsable."""
    parsed = parse_date(value)
    if parsed is None:
        return None
    return (parsed + timedelta(days=diff_days)).isoformat()


def shift_timestamp(value: str | None, diff_days: int) -> str | None:
    """Shift a date and serialize it as a UTC-midnight timestamp."""
    shifted = shift_date(value, diff_days)
    if shifted is None:
        return None
    return f"{shifted}T00:00:00Z"
