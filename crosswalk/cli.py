#!/usr/bin/env python3
"""Import mapping spreadsheets, merge them and report or export the result.

Usage:
    crosswalk-import CIS_ISO.xlsx:CIS_ISO CIS_NIS2.xlsx:CIS_NIS2
    crosswalk-import mappings.csv:CIS_ISO --export-json out/all-mappings.json
    crosswalk-import CIS_ISO.xlsx:CIS_ISO --search A.5.9

Relative file paths resolve against DATA_DIR; source profiles are read
from SOURCE_CONFIG_DIR (or --config-dir).
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from crosswalk.core.errors import ConfigError
from crosswalk.core.logging import setup_logging
from crosswalk.core.settings import get_settings
from crosswalk.export.exporter import build_csv_content, compute_stats, dump_json_export
from crosswalk.importing.importer import ImportJob, import_batch
from crosswalk.importing.registry import SourceConfigRegistry
from crosswalk.store.relationship_table import RelationshipTable

logger = logging.getLogger(__name__)


def parse_job_spec(spec: str) -> tuple[str, str]:
    """Split ``FILE:SOURCE`` on the last colon."""
    path, sep, source = spec.rpartition(":")
    if not sep or not path or not source:
        raise argparse.ArgumentTypeError(f"expected FILE:SOURCE, got {spec!r}")
    return path, source


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="crosswalk-import",
        description="Import framework mapping spreadsheets into one relationship table.",
    )
    parser.add_argument("jobs", nargs="+", type=parse_job_spec, metavar="FILE:SOURCE",
                        help="mapping file and its source profile, e.g. map.xlsx:CIS_ISO")
    parser.add_argument("--config-dir", default=None,
                        help="directory of source profile YAML files")
    parser.add_argument("--export-json", type=Path, default=None, help="write the JSON export here")
    parser.add_argument("--export-csv", type=Path, default=None, help="write the CSV export here")
    parser.add_argument("--search", default=None, help="print identifiers matching this text")
    parser.add_argument("--version", action="version",
                        version=f"%(prog)s {get_settings().app_version}")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging()
    settings = get_settings()

    logger.info("%s %s (%s)", settings.app_name, settings.app_version, settings.app_env)

    config_dir = args.config_dir or settings.source_config_dir
    try:
        registry = SourceConfigRegistry.from_directory(config_dir)
    except (OSError, ConfigError) as exc:
        logger.error("Cannot load source profiles from %s: %s", config_dir, exc)
        return 2

    data_dir = Path(settings.data_dir)

    jobs: list[ImportJob] = []
    for raw_path, source in args.jobs:
        try:
            config = registry.get(source)
        except KeyError as exc:
            logger.error("%s", exc.args[0])
            return 2
        path = Path(raw_path)
        jobs.append(ImportJob(path if path.is_absolute() else data_dir / path, config))

    table = RelationshipTable()
    summary = import_batch(jobs, table)

    for name, value in compute_stats(table.all()).items():
        logger.info("%s: %d", name, value)

    if args.search:
        for result in table.search(args.search):
            print(f"{result.framework}\t{result.id}\t{result.label}\t{len(result.related)}")

    if not summary.has_records:
        return 1

    if args.export_json:
        args.export_json.parent.mkdir(parents=True, exist_ok=True)
        args.export_json.write_text(dump_json_export(table.all()), encoding="utf-8")
        logger.info("Wrote %s", args.export_json)
    if args.export_csv:
        args.export_csv.parent.mkdir(parents=True, exist_ok=True)
        args.export_csv.write_text(build_csv_content(table.all()), encoding="utf-8")
        logger.info("Wrote %s", args.export_csv)

    return 0


if __name__ == "__main__":
    sys.exit(main())
