"""Tests for crosswalk/merge/notes.py — provenance-tagged note sections."""
from __future__ import annotations

from crosswalk.merge.notes import (
    leading_marker,
    merge_tagged_notes,
    note_sections,
    source_marker,
    split_note_sections,
    tag_note,
)
from crosswalk.models.record import SourceKind

ISO = SourceKind.CIS_ISO
NIS2 = SourceKind.CIS_NIS2
ENISA = SourceKind.ENISA_NIS2_ISO
SEP = "\n\n---\n\n"


class TestMarkers:
    def test_single_source(self):
        assert source_marker([ISO]) == "[CIS]"
        assert source_marker([NIS2]) == "[NIS2]"

    def test_nis2_takes_precedence(self):
        assert source_marker([ISO, NIS2]) == "[NIS2]"

    def test_unmarked_document(self):
        assert source_marker([ENISA]) is None
        assert ENISA.marker is None

    def test_leading_marker(self):
        assert leading_marker("[CIS] text") == "[CIS]"
        assert leading_marker("text [CIS]") is None


class TestTagNote:
    def test_tags_untagged_note(self):
        assert tag_note("Desc", [ISO]) == "[CIS] Desc"

    def test_existing_tag_kept(self):
        assert tag_note("[NIS2] Desc", [ISO]) == "[NIS2] Desc"

    def test_no_marker_available(self):
        assert tag_note("Desc", [ENISA]) == "Desc"


class TestNoteSections:
    def test_split_drops_blank_sections(self):
        assert note_sections(f"a{SEP}{SEP}b") == ["a", "b"]

    def test_none(self):
        assert note_sections(None) == []


class TestMergeTaggedNotes:
    def test_both_sides_tagged(self):
        assert merge_tagged_notes("Desc1", [ISO], "Desc2", [NIS2]) == f"[CIS] Desc1{SEP}[NIS2] Desc2"

    def test_existing_tagged_by_its_own_provenance(self):
        # the existing side keeps its CIS marker even though the union would say NIS2
        merged = merge_tagged_notes("Desc1", [ISO], "Desc2", [NIS2])
        assert merged.startswith("[CIS] Desc1")

    def test_no_incoming_note_same_source_returns_existing(self):
        assert merge_tagged_notes("Desc1", [ISO], None, [ISO]) == "Desc1"

    def test_no_incoming_note_tags_existing_when_marker_would_change(self):
        assert merge_tagged_notes("Desc1", [ISO], None, [NIS2]) == "[CIS] Desc1"

    def test_blank_incoming_note_tags_existing_when_marker_would_change(self):
        assert merge_tagged_notes("Desc1", [ISO], SEP, [NIS2]) == "[CIS] Desc1"

    def test_same_untagged_note_left_unchanged(self):
        assert merge_tagged_notes("Desc1", [ISO], "Desc1", [ISO]) == "Desc1"

    def test_no_notes_either_side(self):
        assert merge_tagged_notes(None, [ISO], None, [NIS2]) is None

    def test_no_existing_note(self):
        assert merge_tagged_notes(None, [ISO], "Desc2", [NIS2]) == "[NIS2] Desc2"

    def test_contained_section_not_repeated(self):
        existing = f"[CIS] Desc1{SEP}[NIS2] Desc2"
        assert merge_tagged_notes(existing, [ISO, NIS2], "Desc2", [NIS2]) == existing

    def test_merged_incoming_is_split_by_section(self):
        incoming = f"[CIS] Desc1{SEP}[NIS2] Desc2"
        merged = merge_tagged_notes("[CIS] Desc1", [ISO], incoming, [ISO, NIS2])
        assert merged == incoming


class TestSplitNoteSections:
    def test_markers_stripped(self):
        notes = f"[CIS] Desc1{SEP}[NIS2] Desc2"
        assert split_note_sections(notes, [ISO, NIS2]) == [(ISO, "Desc1"), (NIS2, "Desc2")]

    def test_single_source_provenance_attributes_untagged(self):
        assert split_note_sections("Desc", [NIS2]) == [(NIS2, "Desc")]

    def test_keyword_guess_when_both_sources(self):
        notes = f"Maintain an inventory{SEP}Member States shall require entities to act"
        assert split_note_sections(notes, [ISO, NIS2]) == [
            (ISO, "Maintain an inventory"),
            (NIS2, "Member States shall require entities to act"),
        ]

    def test_unknown_source(self):
        assert split_note_sections("Desc", [ENISA]) == [(None, "Desc")]
