"""Unit tests for the tabular record loader."""

from pathlib import Path

import pytest

from projsync.exceptions import ParseError
from projsync.tabular import load_table, parse_table


@pytest.mark.unit
class TestParseTable:
    """Tests for parse_table."""

    def test_headers_trimmed_and_ordered(self) -> None:
        table = parse_table(" Title \tStarts\t Due\nFix bug\t2024-01-10\t2024-01-20\n")

        assert table.headers == ("Title", "Starts", "Due")

    def test_rows_map_every_header(self) -> None:
        table = parse_table("Title\tStarts\tDue\nFix bug\t 2024-01-10 \t2024-01-20")

        assert table.rows == ({"Title": "Fix bug", "Starts": "2024-01-10", "Due": "2024-01-20"},)

    def test_short_row_fills_missing_cells(self) -> None:
        table = parse_table("Title\tStarts\tDue\nFix bug")

        assert table.rows[0] == {"Title": "Fix bug", "Starts": "", "Due": ""}

    def test_empty_lines_skipped(self) -> None:
        table = parse_table("Title\n\nA\n   \nB\n")

        assert [r["Title"] for r in table.rows] == ["A", "B"]

    def test_crlf_line_endings(self) -> None:
        table = parse_table("Title\tDue\r\nA\t2024-01-01\r\n")

        assert table.rows[0]["Due"] == "2024-01-01"

    def test_header_only(self) -> None:
        table = parse_table("Title\tURL\n")

        assert table.headers == ("Title", "URL")
        assert len(table) == 0

    def test_missing_header_raises(self) -> None:
        with pytest.raises(ParseError):
            parse_table("  \n\n")

    def test_custom_delimiter(self) -> None:
        table = parse_table("Title,Type\nA,Bug", delimiter=",")

        assert table.rows[0]["Type"] == "Bug"


@pytest.mark.unit
class TestLoadTable:
    """Tests for load_table."""

    def test_reads_utf8_file(self, tmp_path: Path) -> None:
        path = tmp_path / "update.tsv"
        path.write_text("Title\tPhase\nCafé ☕\tBuild\n", encoding="utf-8")

        table = load_table(path)

        assert table.rows[0] == {"Title": "Café ☕", "Phase": "Build"}

    def test_missing_file_raises_parse_error(self, tmp_path: Path) -> None:
        with pytest.raises(ParseError) as exc_info:
            load_table(tmp_path / "nope.tsv")

        assert "nope.tsv" in str(exc_info.value)
