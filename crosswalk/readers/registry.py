"""Reader registry: maps file extension to the correct reader class.

Usage
-----
    from crosswalk.readers.registry import get_reader

    reader = get_reader("mappings/CIS_to_ISO.xlsx", sheet_name="Controls v8.1")
    table = reader.read()

Rules
-----
- Always route file loading through get_reader().
- Only workbook (.xlsx/.xlsm/.xls) and delimited text (.csv) are supported;
  anything else, including a path without an extension, raises
  UnsupportedFormatError naming the path.
"""
from __future__ import annotations

import importlib
from pathlib import Path

from crosswalk.core.errors import UnsupportedFormatError
from crosswalk.readers.base import BaseReader, RawTable  # noqa: F401  re-exported

# Extension → (module_path, class_name) mapping.
# Actual imports are deferred to get_reader() so pandas is only imported
# when a delimited file is actually read.
_LAZY_REGISTRY: dict[str, tuple[str, str]] = {}

# Extension → eagerly registered reader class (for programmatic register()).
_REGISTRY: dict[str, type[BaseReader]] = {}


def register(extension: str, reader_cls: type[BaseReader]) -> None:
    """Register a reader class for a file extension.

    extension must be a non-empty string without a leading dot, e.g. "tsv".
    Raises ValueError for invalid input.
    """
    if not extension or not extension.strip() or extension.startswith("."):
        raise ValueError(
            "extension must be a non-empty string without a leading dot (e.g. 'csv')"
        )
    _REGISTRY[extension.lower()] = reader_cls


def supported_extensions() -> list[str]:
    return sorted(set(_REGISTRY) | set(_LAZY_REGISTRY))


def get_reader(path: str | Path, sheet_name: str | None = None) -> BaseReader:
    """Return an instantiated reader for the given file path.

    Raises UnsupportedFormatError when the extension is missing or has no
    registered reader.
    """
    p = Path(path)
    ext = p.suffix.lstrip(".").lower()

    reader_cls = _REGISTRY.get(ext) if ext else None
    if reader_cls is not None:
        return reader_cls(p, sheet_name)

    lazy_entry = _LAZY_REGISTRY.get(ext) if ext else None
    if lazy_entry is None:
        raise UnsupportedFormatError(p)

    module_path, class_name = lazy_entry
    mod = importlib.import_module(module_path)
    reader_cls = getattr(mod, class_name)
    return reader_cls(p, sheet_name)


def _register_defaults() -> None:
    """Populate _LAZY_REGISTRY with the built-in readers."""
    _LAZY_REGISTRY["xlsx"] = ("crosswalk.readers.excel_reader", "ExcelReader")
    _LAZY_REGISTRY["xlsm"] = ("crosswalk.readers.excel_reader", "ExcelReader")
    _LAZY_REGISTRY["xls"] = ("crosswalk.readers.excel_reader", "ExcelReader")
    _LAZY_REGISTRY["csv"] = ("crosswalk.readers.csv_reader", "CSVReader")


_register_defaults()
