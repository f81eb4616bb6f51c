"""Import orchestration: files → merged records → relationship table.

Stage order per file
--------------------
1. get_reader()        : pick the workbook or delimited reader by extension
2. extract_records()   : one RelationshipRecord per usable row
3. deduplicate()       : exact fold, then primary-key merge within the file

``import_batch`` runs the stages file by file, in the order given.  A file
that is missing is skipped with a warning; a file that fails is logged and
recorded, and the batch carries on.  Once every file is loaded the
accumulated records are merged across files and the table is rebuilt in
one ``clear()`` + ``bulk_upsert()``.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from crosswalk.importing.config import ImportConfig
from crosswalk.importing.extractor import extract_records
from crosswalk.merge.deduplicator import deduplicate, merge_by_primary
from crosswalk.models.record import RelationshipRecord
from crosswalk.readers.base import RawTable
from crosswalk.readers.registry import get_reader
from crosswalk.store.relationship_table import RelationshipTable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImportJob:
    """One file to import and the profile describing its columns."""

    path: Path
    config: ImportConfig


@dataclass
class ImportSummary:
    """Outcome of a batch import."""

    imported: dict[str, int] = field(default_factory=dict)  # path -> records after per-file dedup
    failures: dict[str, str] = field(default_factory=dict)  # path -> error message
    skipped: list[str] = field(default_factory=list)        # paths that do not exist
    total: int = 0                                           # records in the table afterwards

    @property
    def has_records(self) -> bool:
        return self.total > 0


def read_file(path: str | Path, config: ImportConfig) -> RawTable:
    """Read *path* into a RawTable using the sheet named in *config*."""
    return get_reader(path, sheet_name=config.sheet_name).read()


def import_file(
    path: str | Path,
    config: ImportConfig,
    *,
    run_id: str | None = None,
) -> list[RelationshipRecord]:
    """Read, extract and deduplicate one mapping file.

    Raises
    ------
    UnsupportedFormatError
        The extension has no reader.
    SheetNotFoundError
        The configured sheet does not exist in the workbook.
    """
    raw = read_file(path, config)
    records = extract_records(raw.rows, config, run_id=run_id)
    deduplicated = deduplicate(records)
    logger.info(
        "Imported %s as %s: %d rows, %d records, %d after deduplication",
        Path(path).name, config.source.value, len(raw.rows), len(records), len(deduplicated),
    )
    return deduplicated


def import_batch(jobs: Iterable[ImportJob], table: RelationshipTable) -> ImportSummary:
    """Import every job in order, merge across files and rebuild *table*."""
    summary = ImportSummary()
    accumulated: list[RelationshipRecord] = []

    for job in jobs:
        path = Path(job.path)
        if not path.is_file():
            logger.warning("File not found: %s (skipping)", path)
            summary.skipped.append(str(path))
            continue

        try:
            records = import_file(path, job.config)
        except Exception as exc:
            logger.error("Failed to import %s: %s", path.name, exc)
            summary.failures[str(path)] = str(exc)
            continue

        summary.imported[str(path)] = len(records)
        accumulated.extend(records)

    merged = merge_by_primary(accumulated)
    table.rebuild(merged)
    summary.total = table.count()

    logger.info(
        "Merged cross-framework mappings: %d records from %d file(s)",
        summary.total, len(summary.imported),
    )
    if not summary.has_records:
        logger.warning("No mappings were imported; check the file paths and source profiles")
    return summary


def import_into_table(
    path: str | Path,
    config: ImportConfig,
    table: RelationshipTable,
) -> int:
    """Import one more file into a populated table.

    The new records are merged with everything already in the table and the
    table is rebuilt.  Returns the table's record count afterwards.
    """
    records = import_file(path, config)
    table.rebuild(merge_by_primary([*table.all(), *records]))
    return table.count()
