"""Error taxonomy for the import pipeline.

Only file-level problems raise.  Row extraction and merging treat malformed
or missing fields as absent and never raise; a failing file is reported by
the batch importer and the remaining files still load.

SheetNotFoundError      : requested worksheet missing from a workbook
UnsupportedFormatError  : file extension has no registered reader
ConfigError             : source profile YAML is malformed
"""
from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path


class CrosswalkError(Exception):
    """Base class for every error raised by the crosswalk package."""


class SheetNotFoundError(CrosswalkError):
    """A configured sheet name does not exist in the workbook."""

    def __init__(self, sheet_name: str, available: Sequence[str]) -> None:
        self.sheet_name = sheet_name
        self.available = list(available)
        super().__init__(
            f"Sheet {sheet_name!r} not found. "
            f"Available sheets: {', '.join(self.available) or '(none)'}"
        )


class UnsupportedFormatError(CrosswalkError):
    """No reader is registered for the file's extension."""

    def __init__(self, path: str | Path) -> None:
        self.path = str(path)
        super().__init__(f"Unsupported file format: {self.path}")


class ConfigError(CrosswalkError, ValueError):
    """A source profile could not be loaded."""
