"""Row extractor: raw spreadsheet rows → ``RelationshipRecord``.

Rules
-----
- Column lookup tries the exact header first, then a case-insensitive
  match.  An unconfigured or unresolved column is treated as absent.
- Rows whose cells are all blank produce nothing.
- Annex and article cells are split, normalized element-wise, then
  filtered for empties and repeats.  Clause cells are split and
  de-duplicated only.  First-seen order is kept.
- A blank relationship cell takes the profile's default kind; an
  unrecognised one does too.
- Records carrying no framework identifier at all are dropped.

Never raises on cell content.  Ids are ``<source>_<run_id>_<row index>``;
``run_id`` defaults to a fresh uuid4 per call so ids stay unique across
repeated imports within one process.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any
from uuid import uuid4

from crosswalk.importing.config import ImportConfig
from crosswalk.models.record import RelationshipKind, RelationshipRecord
from crosswalk.normalization.annex_normalizer import normalize_annex
from crosswalk.normalization.article_normalizer import normalize_article

logger = logging.getLogger(__name__)


def get_column_value(row: Mapping[str, Any], column: str | None) -> str | None:
    """Return the trimmed cell for *column*, or None when absent or blank."""
    if not column:
        return None

    if column in row:
        value = row[column]
    else:
        wanted = column.lower()
        for key, candidate in row.items():
            if str(key).lower() == wanted:
                value = candidate
                break
        else:
            return None

    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _is_blank(row: Mapping[str, Any]) -> bool:
    return all(value is None or not str(value).strip() for value in row.values())


def extract_record(
    row: Mapping[str, Any],
    config: ImportConfig,
    *,
    row_index: int,
    run_id: str,
) -> RelationshipRecord | None:
    """Build a record from one row, or return None if the row carries nothing."""
    if _is_blank(row):
        return None

    columns = config.column_mapping
    split = config.splitter

    def _identifiers(column: str | None, normalize: Callable[[str], str] | None = None) -> list[str]:
        values = split(get_column_value(row, column) or "")
        if normalize is not None:
            values = [normalize(v) for v in values]
        return list(dict.fromkeys(v for v in values if v))

    clause_ids = _identifiers(columns.clause_ids)
    annex_ids = _identifiers(columns.annex_ids, normalize_annex)
    article_ids = _identifiers(columns.article_ids, normalize_article)

    record = RelationshipRecord(
        id=f"{config.source.value}_{run_id}_{row_index}",
        provenance=(config.source,),
        relationship_kind=RelationshipKind.parse(
            get_column_value(row, columns.relationship),
            default=config.default_relationship,
        ),
        primary_control_id=get_column_value(row, columns.control_id),
        primary_subcontrol_id=get_column_value(row, columns.subcontrol_id),
        secondary_clause_ids=tuple(clause_ids),
        secondary_annex_ids=tuple(annex_ids),
        tertiary_article_ids=tuple(article_ids),
        notes=get_column_value(row, columns.notes),
        label=get_column_value(row, columns.label),
    )

    if not record.has_framework_identifier():
        return None
    return record


def extract_records(
    rows: Sequence[Mapping[str, Any]],
    config: ImportConfig,
    *,
    run_id: str | None = None,
) -> list[RelationshipRecord]:
    """Extract every usable record from *rows*, preserving row order."""
    run_id = run_id or uuid4().hex[:12]
    records: list[RelationshipRecord] = []
    for index, row in enumerate(rows):
        record = extract_record(row, config, row_index=index, run_id=run_id)
        if record is not None:
            records.append(record)

    logger.debug(
        "Extracted %d of %d rows for source %s", len(records), len(rows), config.source.value
    )
    return records
