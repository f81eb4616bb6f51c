"""Shared constants for extraction, merging and export.

Relationship specificity
------------------------
covers   (4): the anchor control fully covers the mapped element
supports (3): the anchor control supports it
partial  (2): partial coverage
related  (1): general relationship; default for blank cells

Note markers
------------
Notes coming from the two mapping documents seen in practice are tagged with
a bracketed marker so merged descriptions stay attributable.  Marker lookup
follows the order below: a record attested by both documents is tagged as
NIS2.
"""
from __future__ import annotations

# ---------------------------------------------------------------------------
# Relationship kinds
# ---------------------------------------------------------------------------

RELATIONSHIP_PRIORITY: dict[str, int] = {
    "covers": 4,
    "supports": 3,
    "partial": 2,
    "related": 1,
}

DEFAULT_RELATIONSHIP: str = "related"

# ---------------------------------------------------------------------------
# Source documents
# ---------------------------------------------------------------------------

SOURCE_NOTE_MARKERS: dict[str, str] = {
    "CIS_NIS2": "[NIS2]",
    "CIS_ISO": "[CIS]",
}

# ---------------------------------------------------------------------------
# Separators
# ---------------------------------------------------------------------------

#: Characters that separate values inside one spreadsheet cell.
MULTI_VALUE_SEPARATORS: str = ",;|"

#: Joins notes of exact-duplicate relationships from the same document kind.
FOLDED_NOTE_SEPARATOR: str = "; "

#: Joins tagged notes contributed by different documents.
NOTE_SECTION_SEPARATOR: str = "\n\n---\n\n"

#: Joins multi-value fields in flat exports.
EXPORT_VALUE_SEPARATOR: str = ";"

# ---------------------------------------------------------------------------
# Untagged-note fallback heuristics
#
# Only consulted when a note section carries no marker and its record is
# attested by both document kinds.
# ---------------------------------------------------------------------------

NIS2_NOTE_KEYWORDS: tuple[str, ...] = ("directive", "relevant entities", "entity", "shall")
CIS_NOTE_KEYWORDS: tuple[str, ...] = ("establish", "ensure", "maintain")
