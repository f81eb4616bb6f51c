"""Import configuration dataclasses.

An ``ImportConfig`` describes one mapping document: which source tag its
records carry, which sheet to read and which column header feeds each
record field.  Profiles are selected once per file and never changed
mid-import.
"""
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field, fields

from crosswalk.models.record import RelationshipKind, SourceKind
from crosswalk.normalization.multi_value import split_multi_value

MultiValueSplitter = Callable[[str], list[str]]


@dataclass(frozen=True)
class ColumnMapping:
    """Source column header for each record field; None means not present."""

    control_id: str | None = None
    subcontrol_id: str | None = None
    clause_ids: str | None = None
    annex_ids: str | None = None
    article_ids: str | None = None
    relationship: str | None = None
    notes: str | None = None
    label: str | None = None

    @classmethod
    def field_names(cls) -> frozenset[str]:
        return frozenset(f.name for f in fields(cls))


@dataclass(frozen=True)
class ImportConfig:
    """Everything the extractor needs to know about one mapping document."""

    source: SourceKind
    column_mapping: ColumnMapping = field(default_factory=ColumnMapping)
    sheet_name: str | None = None
    default_relationship: RelationshipKind = RelationshipKind.RELATED
    splitter: MultiValueSplitter = split_multi_value
    description: str = ""
