"""Record deduplicator: two-pass reconciliation of extracted records.

Pass A — exact-relationship fold (``fold_exact``)
  Key: control, sub-control, sorted clauses, sorted annexes, sorted
  articles, relationship kind.  Duplicates union their provenance and
  append notes with ``"; "`` unless the note is already contained.

Pass B — cross-framework merge (``merge_by_primary``)
  Key: (control, sub-control) when either is set.  Records without any
  primary id keep their own identity and are never merged together.
  Shared keys union clauses, annexes, articles and provenance, keep the
  longer label, keep the most specific relationship kind and merge notes
  per source (see ``crosswalk.merge.notes``).

Both passes are pure: input records are never modified and output order
follows first appearance of each key.  ``merge_by_primary`` is idempotent
and re-entrant, so the merged table can be merged again with a new batch.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import replace
from typing import TypeVar

from crosswalk.core.constants import FOLDED_NOTE_SEPARATOR
from crosswalk.merge.notes import merge_tagged_notes
from crosswalk.models.record import RelationshipRecord

logger = logging.getLogger(__name__)

T = TypeVar("T")

ExactKey = tuple[str, str, str, str, str, str]
MergeKey = tuple[str, ...]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _union(existing: Sequence[T], incoming: Iterable[T]) -> tuple[T, ...]:
    """Ordered set union: existing order first, then unseen incoming values."""
    merged = list(dict.fromkeys(existing))
    seen = set(merged)
    for value in incoming:
        if value not in seen:
            merged.append(value)
            seen.add(value)
    return tuple(merged)


def exact_key(record: RelationshipRecord) -> ExactKey:
    return (
        record.primary_control_id or "",
        record.primary_subcontrol_id or "",
        ",".join(sorted(record.secondary_clause_ids)),
        ",".join(sorted(record.secondary_annex_ids)),
        ",".join(sorted(record.tertiary_article_ids)),
        record.relationship_kind.value,
    )


def merge_key(record: RelationshipRecord) -> MergeKey:
    """Pass B key; namespaced so a record id can never collide with a primary key."""
    primary = record.primary_key()
    if primary is None:
        return ("id", record.id)
    return ("primary", *primary)


def _longer_label(existing: str | None, incoming: str | None) -> str | None:
    if incoming and (not existing or len(incoming) > len(existing)):
        return incoming
    return existing


# ---------------------------------------------------------------------------
# Pass A
# ---------------------------------------------------------------------------

def _fold_into(existing: RelationshipRecord, incoming: RelationshipRecord) -> RelationshipRecord:
    notes = existing.notes
    if incoming.notes and not (existing.notes and incoming.notes in existing.notes):
        notes = (
            f"{existing.notes}{FOLDED_NOTE_SEPARATOR}{incoming.notes}"
            if existing.notes
            else incoming.notes
        )
    return replace(
        existing,
        provenance=_union(existing.provenance, incoming.provenance),
        notes=notes,
    )


def fold_exact(records: Iterable[RelationshipRecord]) -> list[RelationshipRecord]:
    """Fold records describing the identical relationship into one."""
    folded: dict[ExactKey, RelationshipRecord] = {}
    for record in records:
        key = exact_key(record)
        existing = folded.get(key)
        folded[key] = record if existing is None else _fold_into(existing, record)
    return list(folded.values())


# ---------------------------------------------------------------------------
# Pass B
# ---------------------------------------------------------------------------

def _merge_into(existing: RelationshipRecord, incoming: RelationshipRecord) -> RelationshipRecord:
    kind = existing.relationship_kind
    if incoming.relationship_kind.outranks(kind):
        kind = incoming.relationship_kind

    return replace(
        existing,
        secondary_clause_ids=_union(existing.secondary_clause_ids, incoming.secondary_clause_ids),
        secondary_annex_ids=_union(existing.secondary_annex_ids, incoming.secondary_annex_ids),
        tertiary_article_ids=_union(existing.tertiary_article_ids, incoming.tertiary_article_ids),
        provenance=_union(existing.provenance, incoming.provenance),
        label=_longer_label(existing.label, incoming.label),
        relationship_kind=kind,
        notes=merge_tagged_notes(
            existing.notes, existing.provenance, incoming.notes, incoming.provenance
        ),
    )


def merge_by_primary(records: Iterable[RelationshipRecord]) -> list[RelationshipRecord]:
    """Merge records sharing a primary identifier across source documents."""
    merged: dict[MergeKey, RelationshipRecord] = {}
    for record in records:
        key = merge_key(record)
        existing = merged.get(key)
        if existing is None or key[0] == "id":
            merged[key] = record
        else:
            merged[key] = _merge_into(existing, record)
    return list(merged.values())


def deduplicate(records: Iterable[RelationshipRecord]) -> list[RelationshipRecord]:
    """Run Pass A then Pass B over one batch of extracted records."""
    records = list(records)
    folded = fold_exact(records)
    merged = merge_by_primary(folded)
    logger.debug(
        "Deduplicated %d records: %d after exact fold, %d after primary merge",
        len(records), len(folded), len(merged),
    )
    return merged
