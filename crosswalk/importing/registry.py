"""Source profile registry.

Lookup table of import profiles keyed by ``SourceKind``.  Built once at
startup from ``config/sources/`` (or programmatically in tests) and used by
the command-line driver to resolve ``FILE:SOURCE`` arguments.
"""
from __future__ import annotations

from pathlib import Path

from crosswalk.importing.config import ImportConfig
from crosswalk.importing.loader import load_all_source_configs
from crosswalk.models.record import SourceKind


class SourceConfigRegistry:
    """In-memory registry of import profiles."""

    def __init__(self, configs: list[ImportConfig] | None = None) -> None:
        self._configs: dict[SourceKind, ImportConfig] = {}
        if configs is not None:
            for c in configs:
                self._configs[c.source] = c

    def register(self, config: ImportConfig) -> None:
        """Register (or replace) the profile for ``config.source``."""
        self._configs[config.source] = config

    def get(self, source: SourceKind | str) -> ImportConfig:
        """Return the profile for *source* or raise ``KeyError``."""
        try:
            return self._configs[SourceKind(source)]
        except (KeyError, ValueError):
            raise KeyError(f"Source profile not found: {str(getattr(source, 'value', source))!r}")

    def list_all(self) -> list[ImportConfig]:
        """Return all registered profiles sorted by source tag."""
        return sorted(self._configs.values(), key=lambda c: c.source.value)

    @classmethod
    def from_directory(cls, directory: str | Path) -> SourceConfigRegistry:
        return cls(load_all_source_configs(directory))

    @classmethod
    def default(cls) -> SourceConfigRegistry:
        """Return a registry loaded from the configured source profile directory."""
        from crosswalk.core.settings import get_settings

        return cls.from_directory(get_settings().source_config_dir)
