"""Tests for crosswalk/importing — source profile loader and registry."""
from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from crosswalk.core.errors import ConfigError
from crosswalk.importing.config import ColumnMapping, ImportConfig
from crosswalk.importing.loader import load_all_source_configs, load_source_config
from crosswalk.importing.registry import SourceConfigRegistry
from crosswalk.models.record import RelationshipKind, SourceKind
from crosswalk.normalization.multi_value import split_multi_value

BUILTIN_DIR = Path(__file__).resolve().parent.parent / "config" / "sources"


def _write(tmp_path: Path, name: str, body: str) -> Path:
    path = tmp_path / name
    path.write_text(textwrap.dedent(body), encoding="utf-8")
    return path


# ===========================================================================
# load_source_config
# ===========================================================================


class TestLoadSourceConfig:
    def test_valid_yaml_loads_correctly(self, tmp_path):
        path = _write(tmp_path, "iso.yaml", """\
            source: CIS_ISO
            sheet_name: All CIS Controls & Safeguards
            default_relationship: supports
            columns:
              control_id: CIS Control
              annex_ids: "Control #"
            """)
        config = load_source_config(path)

        assert config.source is SourceKind.CIS_ISO
        assert config.sheet_name == "All CIS Controls & Safeguards"
        assert config.default_relationship is RelationshipKind.SUPPORTS
        assert config.column_mapping == ColumnMapping(control_id="CIS Control", annex_ids="Control #")
        assert config.splitter is split_multi_value

    def test_defaults(self, tmp_path):
        path = _write(tmp_path, "min.yaml", """\
            source: CIS_NIS2
            columns:
              article_ids: "Directive #"
            """)
        config = load_source_config(path)
        assert config.sheet_name is None
        assert config.default_relationship is RelationshipKind.RELATED

    def test_missing_required_field(self, tmp_path):
        path = _write(tmp_path, "bad.yaml", "source: CIS_ISO\n")
        with pytest.raises(ConfigError, match="columns"):
            load_source_config(path)

    def test_unknown_source(self, tmp_path):
        path = _write(tmp_path, "bad.yaml", """\
            source: NIST_CSF
            columns:
              control_id: Control
            """)
        with pytest.raises(ConfigError, match="NIST_CSF"):
            load_source_config(path)

    def test_unknown_column_field(self, tmp_path):
        path = _write(tmp_path, "bad.yaml", """\
            source: CIS_ISO
            columns:
              control: CIS Control
            """)
        with pytest.raises(ConfigError, match="control"):
            load_source_config(path)

    def test_unknown_top_level_field(self, tmp_path):
        path = _write(tmp_path, "bad.yaml", """\
            source: CIS_ISO
            sheet: Controls
            columns:
              control_id: CIS Control
            """)
        with pytest.raises(ConfigError, match="sheet"):
            load_source_config(path)

    def test_unknown_default_relationship(self, tmp_path):
        path = _write(tmp_path, "bad.yaml", """\
            source: CIS_ISO
            default_relationship: equivalent
            columns:
              control_id: CIS Control
            """)
        with pytest.raises(ConfigError, match="equivalent"):
            load_source_config(path)

    def test_not_a_mapping(self, tmp_path):
        path = _write(tmp_path, "bad.yaml", "- just\n- a list\n")
        with pytest.raises(ConfigError):
            load_source_config(path)

    def test_config_error_is_value_error(self, tmp_path):
        path = _write(tmp_path, "bad.yaml", "source: CIS_ISO\n")
        with pytest.raises(ValueError):
            load_source_config(path)


# ===========================================================================
# Built-in profiles
# ===========================================================================


class TestBuiltinProfiles:
    def test_both_documents_present(self):
        configs = load_all_source_configs(BUILTIN_DIR)
        assert {c.source for c in configs} == {SourceKind.CIS_ISO, SourceKind.CIS_NIS2}

    def test_cis_iso_columns(self):
        config = SourceConfigRegistry.from_directory(BUILTIN_DIR).get("CIS_ISO")
        assert config.sheet_name == "All CIS Controls & Safeguards"
        assert config.column_mapping.annex_ids == "Control #"
        assert config.column_mapping.notes == "Description"
        assert config.column_mapping.article_ids is None

    def test_cis_nis2_columns(self):
        config = SourceConfigRegistry.from_directory(BUILTIN_DIR).get(SourceKind.CIS_NIS2)
        assert config.sheet_name == "Controls v8.1"
        assert config.column_mapping.article_ids == "Directive #"
        assert config.column_mapping.notes == "Directive"

    def test_non_yaml_files_ignored(self, tmp_path):
        _write(tmp_path, "README.md", "# profiles\n")
        _write(tmp_path, "iso.yml", """\
            source: CIS_ISO
            columns:
              control_id: CIS Control
            """)
        assert len(load_all_source_configs(tmp_path)) == 1


# ===========================================================================
# SourceConfigRegistry
# ===========================================================================


class TestSourceConfigRegistry:
    def test_register_and_get(self):
        registry = SourceConfigRegistry()
        config = ImportConfig(source=SourceKind.ENISA_NIS2_ISO)
        registry.register(config)
        assert registry.get("ENISA_NIS2_ISO") is config

    def test_missing_source_raises_key_error(self):
        with pytest.raises(KeyError, match="CIS_ISO"):
            SourceConfigRegistry().get(SourceKind.CIS_ISO)

    def test_unknown_source_string_raises_key_error(self):
        with pytest.raises(KeyError, match="BOGUS"):
            SourceConfigRegistry().get("BOGUS")

    def test_list_all_sorted(self):
        registry = SourceConfigRegistry([
            ImportConfig(source=SourceKind.CIS_NIS2),
            ImportConfig(source=SourceKind.CIS_ISO),
        ])
        assert [c.source for c in registry.list_all()] == [SourceKind.CIS_ISO, SourceKind.CIS_NIS2]

    def test_default_uses_settings_directory(self, monkeypatch):
        monkeypatch.setenv("SOURCE_CONFIG_DIR", str(BUILTIN_DIR))
        registry = SourceConfigRegistry.default()
        assert len(registry.list_all()) == 2
