"""CSV reader: pandas chunksize streaming.

Rules
-----
- Data rows are always read through the chunksize iterator so large
  exports never sit in memory as one frame.
- Row 0 is the header row; every data row is keyed by those headers.
- All values are read as strings with NA detection disabled, so cells such
  as "NA" or "None" survive as text.
- Ragged rows are tolerated: missing trailing cells become "" and surplus
  cells are dropped.
"""
from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from crosswalk.readers.base import (
    BaseReader,
    RawTable,
    build_row,
    is_blank_row,
    unique_headers,
)

logger = logging.getLogger(__name__)

CHUNK_SIZE: int = 1_000  # rows per pandas iterator chunk
ENCODING: str = "utf-8-sig"  # tolerate the BOM spreadsheet tools prepend


class CSVReader(BaseReader):
    """Stream a delimited text file in chunks into a RawTable."""

    def __init__(self, path: str | Path, sheet_name: str | None = None) -> None:
        super().__init__(path, sheet_name)

    def read(self) -> RawTable:
        source = str(self.path)
        try:
            header_frame = pd.read_csv(
                source,
                header=None,
                nrows=1,
                dtype=str,
                keep_default_na=False,
                encoding=ENCODING,
                engine="python",
            )
        except pd.errors.EmptyDataError:
            logger.info("Delimited file %s is empty", self.path.name)
            return RawTable(headers=(), source_path=source)

        header_cells = list(header_frame.iloc[0]) if len(header_frame) else []
        headers = unique_headers(header_cells)
        width = len(headers)
        table = RawTable(
            headers=tuple(h for h in headers if h is not None),
            source_path=source,
        )

        try:
            for chunk in pd.read_csv(
                source,
                header=None,
                skiprows=1,
                names=list(range(width)),
                usecols=list(range(width)),
                index_col=False,
                chunksize=CHUNK_SIZE,
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
                encoding=ENCODING,
                engine="python",
            ):
                for values in chunk.itertuples(index=False, name=None):
                    cells = ["" if pd.isna(v) else v for v in values]
                    row = build_row(headers, cells)
                    if is_blank_row(row):
                        continue
                    table.rows.append(row)
        except pd.errors.EmptyDataError:
            pass  # header only

        logger.debug("Read %d rows from %s", len(table.rows), self.path.name)
        return table
