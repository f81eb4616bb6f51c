"""Tests for crosswalk/export/exporter.py.

Covers:
- filter_by_framework() per-framework selection
- build_csv_content() flat CSV layout and value joining
- build_json_export() metadata, descriptions and grouping
- compute_stats() distinct identifier counts
"""
from __future__ import annotations

import csv
import io
import json
from datetime import datetime, timezone

import pytest
from factories import make_record

from crosswalk.export.exporter import (
    CSV_EXPORT_FIELDS,
    build_csv_content,
    build_json_export,
    compute_stats,
    dump_json_export,
    filter_by_framework,
)
from crosswalk.models.record import RelationshipKind, SourceKind

ISO = SourceKind.CIS_ISO
NIS2 = SourceKind.CIS_NIS2
FIXED_NOW = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture()
def records():
    return [
        make_record(
            "r1", annexes=("A.5.9", "A.5.10"), articles=("12.4.1",),
            provenance=(ISO, NIS2), kind=RelationshipKind.COVERS,
            notes="[CIS] Desc1\n\n---\n\n[NIS2] Desc2", label="Require MFA",
        ),
        make_record("r2", control="CIS Control 06", sub="6.4", clauses=("5.2",)),
        make_record("r3", control=None, sub=None, annexes=("A.8.1",), notes="loose"),
    ]


# ---------------------------------------------------------------------------
# filter_by_framework
# ---------------------------------------------------------------------------


class TestFilterByFramework:
    def test_cis(self, records):
        assert [r.id for r in filter_by_framework(records, "cis")] == ["r1", "r2"]

    def test_iso(self, records):
        assert [r.id for r in filter_by_framework(records, "iso")] == ["r1", "r2", "r3"]

    def test_nis2(self, records):
        assert [r.id for r in filter_by_framework(records, "nis2")] == ["r1"]

    def test_unknown_framework(self, records):
        with pytest.raises(ValueError, match="nist"):
            filter_by_framework(records, "nist")


# ---------------------------------------------------------------------------
# build_csv_content
# ---------------------------------------------------------------------------


class TestBuildCsvContent:
    def test_header_and_rows(self, records):
        rows = list(csv.reader(io.StringIO(build_csv_content(records))))

        assert rows[0] == CSV_EXPORT_FIELDS
        assert len(rows) == 4
        assert rows[1] == [
            "CIS Control 06", "6.3", "", "A.5.9;A.5.10", "12.4.1",
            "CIS_ISO;CIS_NIS2", "covers", "[CIS] Desc1\n\n---\n\n[NIS2] Desc2",
        ]

    def test_missing_values_are_empty(self, records):
        rows = list(csv.reader(io.StringIO(build_csv_content(records))))
        assert rows[3][:2] == ["", ""]

    def test_all_fields_quoted(self, records):
        first_line = build_csv_content(records).splitlines()[0]
        assert first_line.startswith('"control_id","subcontrol_id"')

    def test_empty_input_has_header_only(self):
        rows = list(csv.reader(io.StringIO(build_csv_content([]))))
        assert rows == [CSV_EXPORT_FIELDS]


# ---------------------------------------------------------------------------
# build_json_export
# ---------------------------------------------------------------------------


class TestBuildJsonExport:
    def test_metadata(self, records):
        doc = build_json_export(records, now=FIXED_NOW)
        assert doc["metadata"] == {
            "export_date": "2025-01-15T12:00:00+00:00",
            "total_mappings": 3,
        }

    def test_descriptions_split_per_source(self, records):
        mapping = build_json_export(records, now=FIXED_NOW)["mappings"][0]
        assert mapping["descriptions"] == [
            {"source": "CIS_ISO", "text": "Desc1"},
            {"source": "CIS_NIS2", "text": "Desc2"},
        ]
        assert mapping["sources"] == ["CIS_ISO", "CIS_NIS2"]
        assert mapping["annex_ids"] == ["A.5.9", "A.5.10"]

    def test_grouped_by_control(self, records):
        grouped = build_json_export(records, now=FIXED_NOW)["grouped_by_control"]
        assert list(grouped) == ["CIS Control 06", "other"]
        assert [m["id"] for m in grouped["CIS Control 06"]] == ["r1", "r2"]
        assert [m["id"] for m in grouped["other"]] == ["r3"]

    def test_dump_is_valid_json(self, records):
        doc = json.loads(dump_json_export(records, now=FIXED_NOW))
        assert doc["metadata"]["total_mappings"] == 3
        assert doc["mappings"][2]["notes"] == "loose"


# ---------------------------------------------------------------------------
# compute_stats
# ---------------------------------------------------------------------------


class TestComputeStats:
    def test_counts(self, records):
        assert compute_stats(records) == {
            "total_mappings": 3,
            "controls": 1,
            "subcontrols": 2,
            "clauses": 1,
            "annex_controls": 3,
            "articles": 1,
            "sources": 2,
        }

    def test_empty(self):
        assert set(compute_stats([]).values()) == {0}
