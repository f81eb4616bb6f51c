"""Canonical output shared by the spreadsheet readers.

Every reader in crosswalk/readers/ reduces its container to a ``RawTable``:
one header tuple plus a list of row mappings keyed by those headers.  The
row extractor consumes only ``RawTable`` rows and must not know which
reader produced them.

Row contract
------------
- every header is a key in every row, missing cells are ``""``
- values are strings; numbers are rendered without a trailing ``.0``
- rows where every cell is blank are dropped by the reader
- blank header cells are ignored; repeated headers get ``_1``, ``_2`` ...
"""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

RawRow = dict[str, str]


@dataclass
class RawTable:
    """Header row plus data rows read from one sheet or delimited file."""

    headers: tuple[str, ...]
    rows: list[RawRow] = field(default_factory=list)
    source_path: str = ""
    sheet_name: str | None = None

    def __len__(self) -> int:
        return len(self.rows)


def cell_text(value: Any) -> str:
    """Render a cell value as text; ``None`` becomes ``""``."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def unique_headers(raw_headers: Iterable[Any]) -> list[str | None]:
    """Clean header cells, blank headers become None and repeats are suffixed."""
    seen: dict[str, int] = {}
    headers: list[str | None] = []
    for raw in raw_headers:
        text = cell_text(raw)
        if not text:
            headers.append(None)
            continue
        count = seen.get(text, 0)
        seen[text] = count + 1
        headers.append(text if count == 0 else f"{text}_{count}")
    return headers


def build_row(headers: list[str | None], values: Iterable[Any]) -> RawRow:
    """Zip *values* onto *headers*, padding short rows and dropping surplus cells."""
    cells = list(values)
    row: RawRow = {}
    for index, header in enumerate(headers):
        if header is None:
            continue
        row[header] = cell_text(cells[index]) if index < len(cells) else ""
    return row


def is_blank_row(row: RawRow) -> bool:
    return all(not value.strip() for value in row.values())


class BaseReader:
    """Base class for the spreadsheet readers.

    Subclasses override read() to return a ``RawTable``.  ``sheet_name`` is
    only meaningful for workbook formats and is ignored elsewhere.
    """

    def __init__(self, path: str | Path, sheet_name: str | None = None) -> None:
        self.path = Path(path)
        self.sheet_name = sheet_name

    def read(self) -> RawTable:
        raise NotImplementedError(
            f"{type(self).__name__}.read() is not yet implemented"
        )
