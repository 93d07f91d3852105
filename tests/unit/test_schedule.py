"""Unit tests for date shifting."""

from datetime import date

import pytest

from projsync.schedule import compute_diff_days, parse_date, shift_date, shift_timestamp


@pytest.mark.unit
class TestParseDate:
    """Tests for parse_date."""

    def test_plain_date(self) -> None:
        assert parse_date("2024-01-10") == date(2024, 1, 10)

    def test_utc_timestamp(self) -> None:
        assert parse_date("2024-01-15T00:00:00Z") == date(2024, 1, 15)

    def test_offset_timestamp_normalised_to_utc(self) -> None:
        assert parse_date("2024-01-15T23:30:00-02:00") == date(2024, 1, 16)

    @pytest.mark.parametrize("value", ["", None, "soon", "2024-13-45", "10/01/2024"])
    def test_unparsable_returns_none(self, value: str | None) -> None:
        assert parse_date(value) is None


@pytest.mark.unit
class TestShiftDate:
    """Tests for shift_date and shift_timestamp."""

    def test_shift_forward_across_month(self) -> None:
        assert shift_date("2024-01-10", 30) == "2024-02-09"

    def test_shift_backward(self) -> None:
        assert shift_date("2024-03-01", -1) == "2024-02-29"

    def test_zero_shift(self) -> None:
        assert shift_date("2024-01-10", 0) == "2024-01-10"

    def test_invalid_returns_none(self) -> None:
        assert shift_date("not a date", 5) is None

    @pytest.mark.parametrize(("a", "b"), [(30, -30), (7, 400), (-365, 1), (0, 0)])
    def test_shifts_compose(self, a: int, b: int) -> None:
        d = "2023-12-31"
        assert shift_date(shift_date(d, a), b) == shift_date(d, a + b)

    def test_timestamp_shift(self) -> None:
        assert shift_timestamp("2024-01-15T00:00:00Z", 30) == "2024-02-14T00:00:00Z"

    def test_timestamp_invalid(self) -> None:
        assert shift_timestamp("", 30) is None


@pytest.mark.unit
class TestComputeDiffDays:
    """Tests for compute_diff_days."""

    def test_uses_first_row_with_start(self) -> None:
        rows = [
            {"Title": "Planning", "Starts": ""},
            {"Title": "Fix bug", "Starts": "2024-01-10"},
            {"Title": "Later", "Starts": "2023-01-01"},
        ]

        assert compute_diff_days("2024-02-09", rows) == 30

    def test_negative_offset(self) -> None:
        assert compute_diff_days("2024-01-01", [{"Starts": "2024-01-10"}]) == -9

    def test_no_anchor_is_zero(self) -> None:
        assert compute_diff_days("2024-02-09", [{"Title": "x", "Starts": ""}]) == 0

    def test_no_baseline_is_zero(self) -> None:
        assert compute_diff_days(None, [{"Starts": "2024-01-10"}]) == 0

    def test_custom_start_key(self) -> None:
        assert compute_diff_days("2024-01-11", [{"Begin": "2024-01-10"}], start_key="Begin") == 1
