"""Provenance-aware note tagging.

Notes from different mapping documents describe different frameworks (a
CIS safeguard description versus NIS2 directive text), so once records
merge each note section is prefixed with its document's marker::

    [CIS] Establish and maintain a data recovery process.

    ---

    [NIS2] Member States shall ensure that essential entities ...

Markers are derived from provenance, never from the text.  Reading an
untagged section back (``split_note_sections``) infers the source from
provenance when that is unambiguous and only falls back to keyword
sniffing when a record is attested by both documents.
"""
from __future__ import annotations

from collections.abc import Iterable

from crosswalk.core.constants import (
    CIS_NOTE_KEYWORDS,
    NIS2_NOTE_KEYWORDS,
    NOTE_SECTION_SEPARATOR,
    SOURCE_NOTE_MARKERS,
)
from crosswalk.models.record import SourceKind

_MARKER_TO_SOURCE: dict[str, SourceKind] = {
    marker: SourceKind(source) for source, marker in SOURCE_NOTE_MARKERS.items()
}


def source_marker(provenance: Iterable[SourceKind]) -> str | None:
    """Return the marker for *provenance*, honouring marker precedence."""
    sources = set(provenance)
    for source, marker in SOURCE_NOTE_MARKERS.items():
        if SourceKind(source) in sources:
            return marker
    return None


def leading_marker(text: str) -> str | None:
    """Return the marker *text* starts with, if any."""
    for marker in _MARKER_TO_SOURCE:
        if text.startswith(marker):
            return marker
    return None


def tag_note(note: str, provenance: Iterable[SourceKind]) -> str:
    """Prefix *note* with the marker for *provenance* unless already tagged."""
    if leading_marker(note):
        return note
    marker = source_marker(provenance)
    return f"{marker} {note}" if marker else note


def note_sections(notes: str | None) -> list[str]:
    """Split merged notes on the section separator; blank sections are dropped."""
    if not notes:
        return []
    return [s.strip() for s in notes.split(NOTE_SECTION_SEPARATOR) if s.strip()]


def merge_tagged_notes(
    existing: str | None,
    existing_provenance: Iterable[SourceKind],
    incoming: str | None,
    incoming_provenance: Iterable[SourceKind],
) -> str | None:
    """Combine two notes, tagging both sides by their own provenance.

    Each incoming section is appended only if the existing text does not
    already contain it.  The existing note is tagged when a section is
    appended, or when the merged provenance would resolve to a different
    marker than its own; otherwise it is returned unchanged, so
    re-merging merged records is a no-op.
    """
    existing_provenance = tuple(existing_provenance)
    incoming_provenance = tuple(incoming_provenance)
    incoming_sections = [tag_note(s, incoming_provenance) for s in note_sections(incoming)]

    if not existing:
        return NOTE_SECTION_SEPARATOR.join(incoming_sections) if incoming_sections else existing

    merged = tag_note(existing, existing_provenance)
    appended = False
    for section in incoming_sections:
        if section not in merged:
            merged = f"{merged}{NOTE_SECTION_SEPARATOR}{section}"
            appended = True

    if appended:
        return merged
    if source_marker(existing_provenance) != source_marker(existing_provenance + incoming_provenance):
        return merged
    return existing


def _guess_source(text: str, position: int) -> SourceKind:
    lowered = text.lower()
    if any(k in lowered for k in NIS2_NOTE_KEYWORDS):
        return SourceKind.CIS_NIS2
    if position == 0 or any(k in lowered for k in CIS_NOTE_KEYWORDS):
        return SourceKind.CIS_ISO
    return SourceKind.CIS_NIS2


def split_note_sections(
    notes: str | None,
    provenance: Iterable[SourceKind],
) -> list[tuple[SourceKind | None, str]]:
    """Return ``(source, text)`` pairs with markers stripped from the text.

    Source resolution per section: explicit marker, else the single
    marker-bearing document in *provenance*, else (both documents present)
    a keyword guess.  ``None`` when provenance names neither document.
    """
    sources = set(provenance)
    marked = [s for s in (SourceKind(v) for v in SOURCE_NOTE_MARKERS) if s in sources]

    result: list[tuple[SourceKind | None, str]] = []
    for position, section in enumerate(note_sections(notes)):
        marker = leading_marker(section)
        if marker:
            result.append((_MARKER_TO_SOURCE[marker], section[len(marker):].strip()))
        elif len(marked) == 1:
            result.append((marked[0], section))
        elif marked:
            result.append((_guess_source(section, position), section))
        else:
            result.append((None, section))
    return result
