"""Source profile YAML loader.

Loads import profiles from ``config/sources/*.yaml`` and returns
``ImportConfig`` instances.  A profile looks like::

    source: CIS_ISO
    sheet_name: All CIS Controls & Safeguards
    default_relationship: related
    columns:
      control_id: CIS Control
      subcontrol_id: CIS Safeguard
      annex_ids: "Control #"
"""
from __future__ import annotations

from pathlib import Path

import yaml

from crosswalk.core.errors import ConfigError
from crosswalk.importing.config import ColumnMapping, ImportConfig
from crosswalk.models.record import RelationshipKind, SourceKind

_REQUIRED_FIELDS: frozenset[str] = frozenset({"source", "columns"})
_OPTIONAL_FIELDS: frozenset[str] = frozenset({"sheet_name", "default_relationship", "description"})


def load_source_config(path: str | Path) -> ImportConfig:
    """Load a single import profile from a YAML file.

    Raises
    ------
    ConfigError
        If the document is not a mapping, a required field is missing, or
        a value names an unknown source, relationship kind or column field.
    """
    path = Path(path)
    with open(path, "r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh)

    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a YAML mapping, got {type(data).__name__}")

    missing = _REQUIRED_FIELDS - data.keys()
    if missing:
        raise ConfigError(f"{path}: missing required fields: {sorted(missing)}")

    unknown = data.keys() - _REQUIRED_FIELDS - _OPTIONAL_FIELDS
    if unknown:
        raise ConfigError(f"{path}: unknown fields: {sorted(unknown)}")

    try:
        source = SourceKind(str(data["source"]))
    except ValueError:
        raise ConfigError(
            f"{path}: unknown source {data['source']!r}; "
            f"expected one of {[s.value for s in SourceKind]}"
        )

    columns = data["columns"]
    if not isinstance(columns, dict) or not columns:
        raise ConfigError(f"{path}: 'columns' must be a non-empty mapping")

    bad_columns = columns.keys() - ColumnMapping.field_names()
    if bad_columns:
        raise ConfigError(f"{path}: unknown column fields: {sorted(bad_columns)}")

    raw_default = data.get("default_relationship") or RelationshipKind.RELATED.value
    try:
        default_relationship = RelationshipKind(str(raw_default).strip().lower())
    except ValueError:
        raise ConfigError(f"{path}: unknown default_relationship {raw_default!r}")

    sheet_name = data.get("sheet_name")
    return ImportConfig(
        source=source,
        column_mapping=ColumnMapping(
            **{name: str(header) for name, header in columns.items() if header is not None}
        ),
        sheet_name=str(sheet_name) if sheet_name is not None else None,
        default_relationship=default_relationship,
        description=str(data.get("description") or ""),
    )


def load_all_source_configs(directory: str | Path = "config/sources") -> list[ImportConfig]:
    """Load all ``*.yaml`` profiles from *directory*, in file-name order.

    Raises
    ------
    ConfigError
        If any YAML file fails validation.
    """
    directory = Path(directory)
    configs: list[ImportConfig] = []
    for path in sorted(directory.iterdir()):
        if path.suffix not in (".yaml", ".yml"):
            continue
        configs.append(load_source_config(path))
    return configs
