"""Canonical relationship record shared by every pipeline stage.

Readers produce raw rows, the extractor turns each row into a
``RelationshipRecord`` and the merger folds records together.  Nothing
downstream of the extractor sees spreadsheet rows.

Field contract
--------------
id                     : opaque token, unique within one process lifetime
primary_control_id     : CIS control, e.g. "CIS Control 06"
primary_subcontrol_id  : CIS safeguard, e.g. "6.3"
secondary_clause_ids   : ISO/IEC 27001 clauses, e.g. ("5.2", "6.1")
secondary_annex_ids    : ISO/IEC 27001 Annex A controls, e.g. ("A.5.9",)
tertiary_article_ids   : NIS2 articles, e.g. ("Art 21(2)(d)",)
provenance             : source documents attesting the record; never empty
relationship_kind      : covers > supports > partial > related
notes                  : free text; merged records join per-source sections
label                  : short display title
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from crosswalk.core.constants import (
    DEFAULT_RELATIONSHIP,
    RELATIONSHIP_PRIORITY,
    SOURCE_NOTE_MARKERS,
)

PrimaryKey = tuple[str, str]


class RelationshipKind(str, Enum):
    COVERS = "covers"
    SUPPORTS = "supports"
    PARTIAL = "partial"
    RELATED = "related"

    @property
    def specificity(self) -> int:
        return RELATIONSHIP_PRIORITY[self.value]

    def outranks(self, other: RelationshipKind) -> bool:
        """Return True if this kind is strictly more specific than *other*."""
        return self.specificity > other.specificity

    @classmethod
    def parse(
        cls,
        raw: str | None,
        default: RelationshipKind | None = None,
    ) -> RelationshipKind:
        """Map a spreadsheet cell to a kind; blank or unknown yields *default*."""
        fallback = default if default is not None else cls(DEFAULT_RELATIONSHIP)
        if not raw or not raw.strip():
            return fallback
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return fallback


class SourceKind(str, Enum):
    CIS_ISO = "CIS_ISO"
    CIS_NIS2 = "CIS_NIS2"
    ENISA_NIS2_ISO = "ENISA_NIS2_ISO"

    @property
    def marker(self) -> str | None:
        """Bracketed note marker, or None for documents without one."""
        return SOURCE_NOTE_MARKERS.get(self.value)


@dataclass(frozen=True)
class RelationshipRecord:
    """One relationship between framework elements.

    Instances are immutable; the merger builds new records with
    ``dataclasses.replace`` instead of patching existing ones.
    """

    id: str
    provenance: tuple[SourceKind, ...]
    relationship_kind: RelationshipKind = RelationshipKind.RELATED

    primary_control_id: str | None = None
    primary_subcontrol_id: str | None = None

    secondary_clause_ids: tuple[str, ...] = ()
    secondary_annex_ids: tuple[str, ...] = ()
    tertiary_article_ids: tuple[str, ...] = ()

    notes: str | None = None
    label: str | None = None

    def __post_init__(self) -> None:
        if not self.provenance:
            raise ValueError("provenance must name at least one source document")
        if len(set(self.provenance)) != len(self.provenance):
            raise ValueError(f"provenance contains duplicates: {self.provenance!r}")

    def has_framework_identifier(self) -> bool:
        return bool(
            self.primary_control_id
            or self.primary_subcontrol_id
            or self.secondary_clause_ids
            or self.secondary_annex_ids
            or self.tertiary_article_ids
        )

    def primary_key(self) -> PrimaryKey | None:
        """Merge key for the anchor framework; None when both ids are empty."""
        if not (self.primary_control_id or self.primary_subcontrol_id):
            return None
        return (self.primary_control_id or "", self.primary_subcontrol_id or "")

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "control_id": self.primary_control_id,
            "subcontrol_id": self.primary_subcontrol_id,
            "clause_ids": list(self.secondary_clause_ids),
            "annex_ids": list(self.secondary_annex_ids),
            "article_ids": list(self.tertiary_article_ids),
            "sources": [s.value for s in self.provenance],
            "relationship_kind": self.relationship_kind.value,
            "notes": self.notes,
            "label": self.label,
        }
