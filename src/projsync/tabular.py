"""Tab-separated record loading."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from projsync.exceptions import ParseError

Row = dict[str, str]


@dataclass(frozen=True)
class Table:
    """Parsed tabular input.

    Attributes:
        headers: Trimmed header names in file order.
        rows: One mapping per record, keyed by every header.
    """

    headers: tuple[str, ...]
    rows: tuple[Row, ...]

    def __len__(self) -> int:
        return len(self.rows)


def parse_table(text: str, delimiter: str = "\t") -> Table:
    """Parse delimited text with a header line.

    Cells are split on the delimiter only; quoting is not interpreted, so a
    value containing the delimiter cannot be represented. Rows shorter than
    the header get empty strings for the missing cells.

    Args:
        text: Raw file contents.
        delimiter: Cell separator. Defaults to a tab.

    Returns:
        Parsed table.

    Raises:
        ParseError: If there is no header line.
    """
    lines = [line.rstrip("\r") for line in text.split("\n")]
    lines = [line for line in lines if line.strip()]
    if not lines:
        raise ParseError("Input has no header line")

    headers = tuple(h.strip() for h in lines[0].split(delimiter))
    rows = []
    for line in lines[1:]:
        values = line.split(delimiter)
        rows.append(
            {h: (values[i].strip() if i < len(values) else "") for i, h in enumerate(headers)}
        )

    return Table(headers=headers, rows=tuple(rows))


def load_table(path: Path | str, delimiter: str = "\t") -> Table:
    """Read a UTF-8 file and parse it with parse_table().

    Raises:
        ParseError: If the file cannot be read or has no header line.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ParseError(f"Cannot read {path}: {e}") from e
    return parse_table(text, delimiter)
