"""CSV / JSON export and statistics for relationship records.

Everything here is pure: builders return strings or dicts and the caller
decides where they go.  The relationship table itself has no wire format.
"""
from __future__ import annotations

import csv
import io
import json
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any, Literal

from crosswalk.core.constants import EXPORT_VALUE_SEPARATOR
from crosswalk.merge.notes import split_note_sections
from crosswalk.models.record import RelationshipRecord

FrameworkFilter = Literal["cis", "iso", "nis2"]

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

#: Column order of the flat CSV export.
CSV_EXPORT_FIELDS: list[str] = [
    "control_id",
    "subcontrol_id",
    "clause_ids",
    "annex_ids",
    "article_ids",
    "sources",
    "relationship_kind",
    "notes",
]

#: Group name for records without any primary identifier.
UNGROUPED_KEY: str = "other"


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------


def _matches(record: RelationshipRecord, framework: FrameworkFilter) -> bool:
    if framework == "cis":
        return bool(record.primary_control_id or record.primary_subcontrol_id)
    if framework == "iso":
        return bool(record.secondary_clause_ids or record.secondary_annex_ids)
    if framework == "nis2":
        return bool(record.tertiary_article_ids)
    raise ValueError(f"unknown framework {framework!r}; expected 'cis', 'iso' or 'nis2'")


def filter_by_framework(
    records: Iterable[RelationshipRecord],
    framework: FrameworkFilter,
) -> list[RelationshipRecord]:
    """Return the records that carry identifiers of *framework*."""
    return [r for r in records if _matches(r, framework)]


# ---------------------------------------------------------------------------
# CSV
# ---------------------------------------------------------------------------


def _csv_row(record: RelationshipRecord) -> list[str]:
    return [
        record.primary_control_id or "",
        record.primary_subcontrol_id or "",
        EXPORT_VALUE_SEPARATOR.join(record.secondary_clause_ids),
        EXPORT_VALUE_SEPARATOR.join(record.secondary_annex_ids),
        EXPORT_VALUE_SEPARATOR.join(record.tertiary_article_ids),
        EXPORT_VALUE_SEPARATOR.join(s.value for s in record.provenance),
        record.relationship_kind.value,
        record.notes or "",
    ]


def build_csv_content(records: Iterable[RelationshipRecord]) -> str:
    """Build CSV content as a string, one row per relationship."""
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL)
    writer.writerow(CSV_EXPORT_FIELDS)
    for record in records:
        writer.writerow(_csv_row(record))
    return buf.getvalue()


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------


def _with_descriptions(record: RelationshipRecord) -> dict[str, Any]:
    payload = record.to_dict()
    payload["descriptions"] = [
        {"source": source.value if source else None, "text": text}
        for source, text in split_note_sections(record.notes, record.provenance)
    ]
    return payload


def build_json_export(
    records: Iterable[RelationshipRecord],
    *,
    now: datetime | None = None,
) -> dict[str, Any]:
    """Build the JSON export document.

    Mappings are listed flat and grouped by control id (falling back to the
    sub-control id, then ``"other"``).
    """
    records = list(records)
    mappings = [_with_descriptions(r) for r in records]

    grouped: dict[str, list[dict[str, Any]]] = {}
    for record, payload in zip(records, mappings):
        key = record.primary_control_id or record.primary_subcontrol_id or UNGROUPED_KEY
        grouped.setdefault(key, []).append(payload)

    exported_at = now or datetime.now(timezone.utc)
    return {
        "metadata": {
            "export_date": exported_at.isoformat(),
            "total_mappings": len(records),
        },
        "mappings": mappings,
        "grouped_by_control": grouped,
    }


def dump_json_export(records: Iterable[RelationshipRecord], *, now: datetime | None = None) -> str:
    return json.dumps(build_json_export(records, now=now), indent=2, ensure_ascii=False)


# ---------------------------------------------------------------------------
# Statistics
# ---------------------------------------------------------------------------


def compute_stats(records: Iterable[RelationshipRecord]) -> dict[str, int]:
    """Distinct identifier counts per framework, for health and reporting."""
    records = list(records)
    return {
        "total_mappings": len(records),
        "controls": len({r.primary_control_id for r in records if r.primary_control_id}),
        "subcontrols": len({r.primary_subcontrol_id for r in records if r.primary_subcontrol_id}),
        "clauses": len({c for r in records for c in r.secondary_clause_ids}),
        "annex_controls": len({a for r in records for a in r.secondary_annex_ids}),
        "articles": len({a for r in records for a in r.tertiary_article_ids}),
        "sources": len({s for r in records for s in r.provenance}),
    }
