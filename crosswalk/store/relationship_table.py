"""In-memory relationship table with secondary indexes.

The table is an explicitly owned object: the import pipeline builds one,
fills it with merged records and hands it to readers.  There is no module
level instance.

Indexes
-------
primary   : ("primary", control_id, subcontrol_id)  — same key as the merger
secondary : ("clause", id) and ("annex", id)        — ISO/IEC 27001
tertiary  : ("article", id)                          — NIS2

Each index maps a key to the records referencing it, in insertion order.

Index maintenance is additive: ``upsert`` replaces the record in the id
map but only ever appends to the index lists, so upserting the same id
twice leaves two index entries.  Only ``clear()`` prunes.  Rebuild the
whole table with ``rebuild()`` after every merge instead of patching it.
"""
from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Literal

from crosswalk.models.record import RelationshipRecord

logger = logging.getLogger(__name__)

Framework = Literal["CIS", "ISO", "NIS2"]
IndexKey = tuple[str, ...]


@dataclass
class SearchResult:
    """One matching identifier plus every record that references it."""

    framework: Framework
    id: str
    label: str
    related: list[RelationshipRecord] = field(default_factory=list)


class RelationshipTable:
    """Keyed store of final (merged) relationship records."""

    def __init__(self) -> None:
        self._records: dict[str, RelationshipRecord] = {}
        self._primary: defaultdict[IndexKey, list[RelationshipRecord]] = defaultdict(list)
        self._secondary: defaultdict[IndexKey, list[RelationshipRecord]] = defaultdict(list)
        self._tertiary: defaultdict[IndexKey, list[RelationshipRecord]] = defaultdict(list)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def upsert(self, record: RelationshipRecord) -> None:
        self._records[record.id] = record
        self._index(record)

    def bulk_upsert(self, records: Iterable[RelationshipRecord]) -> None:
        for record in records:
            self.upsert(record)

    def clear(self) -> None:
        self._records.clear()
        self._primary.clear()
        self._secondary.clear()
        self._tertiary.clear()

    def rebuild(self, records: Iterable[RelationshipRecord]) -> None:
        """Replace the whole table with *records*."""
        self.clear()
        self.bulk_upsert(records)
        logger.info("Relationship table rebuilt with %d records", self.count())

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def all(self) -> list[RelationshipRecord]:
        return list(self._records.values())

    def get(self, record_id: str) -> RelationshipRecord | None:
        return self._records.get(record_id)

    def count(self) -> int:
        return len(self._records)

    def __len__(self) -> int:
        return self.count()

    def by_primary(
        self,
        control_id: str | None = None,
        subcontrol_id: str | None = None,
    ) -> list[RelationshipRecord]:
        """Exact lookup on the (control, sub-control) pair."""
        key = ("primary", control_id or "", subcontrol_id or "")
        return list(self._primary.get(key, []))

    def by_control(self, control_id: str) -> list[RelationshipRecord]:
        """Every record under *control_id*, whatever its sub-control."""
        if not control_id:
            return []
        found: list[RelationshipRecord] = []
        for key, records in self._primary.items():
            if key[1] == control_id:
                found.extend(records)
        return found

    def by_secondary(
        self,
        clause_id: str | None = None,
        annex_id: str | None = None,
    ) -> list[RelationshipRecord]:
        """Lookup by ISO clause and/or Annex A id.

        With both ids only records referencing both are returned.
        """
        if annex_id:
            hits = list(self._secondary.get(("annex", annex_id), []))
            if clause_id:
                hits = [r for r in hits if clause_id in r.secondary_clause_ids]
            return hits
        if clause_id:
            return list(self._secondary.get(("clause", clause_id), []))
        return []

    def by_tertiary(self, article_id: str) -> list[RelationshipRecord]:
        return list(self._tertiary.get(("article", article_id), []))

    def search(self, query: str) -> list[SearchResult]:
        """Case-insensitive substring search over every identifier family.

        Returns one result per distinct (framework, identifier) pair, CIS
        first, then ISO, then NIS2.
        """
        needle = (query or "").strip().lower()
        if not needle:
            return []

        results: list[SearchResult] = []
        seen: set[tuple[Framework, str]] = set()

        def _add(framework: Framework, ident: str, record: RelationshipRecord,
                 related: list[RelationshipRecord]) -> None:
            if (framework, ident) in seen:
                return
            seen.add((framework, ident))
            results.append(SearchResult(framework, ident, record.label or ident, related))

        records = self.all()
        for record in records:
            control = record.primary_control_id or ""
            sub = record.primary_subcontrol_id or ""
            if needle in control.lower() or needle in sub.lower():
                _add("CIS", sub or control, record,
                     self.by_primary(record.primary_control_id, record.primary_subcontrol_id))

        for record in records:
            for clause in record.secondary_clause_ids:
                if needle in clause.lower():
                    _add("ISO", clause, record, self.by_secondary(clause_id=clause))
            for annex in record.secondary_annex_ids:
                if needle in annex.lower():
                    _add("ISO", annex, record, self.by_secondary(annex_id=annex))

        for record in records:
            for article in record.tertiary_article_ids:
                if needle in article.lower():
                    _add("NIS2", article, record, self.by_tertiary(article))

        return results

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _index(self, record: RelationshipRecord) -> None:
        primary = record.primary_key()
        if primary is not None:
            self._primary[("primary", *primary)].append(record)
        for clause in record.secondary_clause_ids:
            self._secondary[("clause", clause)].append(record)
        for annex in record.secondary_annex_ids:
            self._secondary[("annex", annex)].append(record)
        for article in record.tertiary_article_ids:
            self._tertiary[("article", article)].append(record)
