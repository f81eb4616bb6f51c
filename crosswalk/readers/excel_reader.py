"""Excel reader: openpyxl, one sheet per import.

Rules
-----
- Always open with read_only=True, data_only=True so formulas resolve to
  their cached values and large workbooks stream.
- The configured sheet is read; without one the first sheet in workbook
  order is used.  A missing sheet raises SheetNotFoundError listing the
  sheets that do exist.
- Row 1 is the header row; rows 2+ become RawRow mappings.
- Missing cells are "" so every row carries every header key.
"""
from __future__ import annotations

import logging
from pathlib import Path

import openpyxl

from crosswalk.core.errors import SheetNotFoundError
from crosswalk.readers.base import (
    BaseReader,
    RawTable,
    build_row,
    is_blank_row,
    unique_headers,
)

logger = logging.getLogger(__name__)


class ExcelReader(BaseReader):
    """Read one worksheet of an .xlsx workbook into a RawTable."""

    def __init__(self, path: str | Path, sheet_name: str | None = None) -> None:
        super().__init__(path, sheet_name)

    def read(self) -> RawTable:
        wb = openpyxl.load_workbook(str(self.path), read_only=True, data_only=True)
        try:
            sheet_name = self._resolve_sheet(list(wb.sheetnames))
            return self._read_sheet(wb[sheet_name], sheet_name)
        finally:
            wb.close()

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _resolve_sheet(self, available: list[str]) -> str:
        if self.sheet_name is None:
            if not available:
                raise SheetNotFoundError("<first sheet>", available)
            return available[0]
        if self.sheet_name not in available:
            raise SheetNotFoundError(self.sheet_name, available)
        return self.sheet_name

    def _read_sheet(self, sheet: object, sheet_name: str) -> RawTable:
        source = str(self.path)
        rows = iter(sheet.iter_rows(values_only=True))

        header_cells = next(rows, None)
        if header_cells is None:
            logger.info("Sheet %r in %s is empty", sheet_name, self.path.name)
            return RawTable(headers=(), source_path=source, sheet_name=sheet_name)

        headers = unique_headers(header_cells)
        table = RawTable(
            headers=tuple(h for h in headers if h is not None),
            source_path=source,
            sheet_name=sheet_name,
        )
        for values in rows:
            row = build_row(headers, values)
            if is_blank_row(row):
                continue
            table.rows.append(row)

        logger.debug(
            "Read %d rows from sheet %r of %s", len(table.rows), sheet_name, self.path.name
        )
        return table
