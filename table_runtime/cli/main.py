from __future__ import annotations

import argparse
import sys
from pathlib import Path

from ..config.loader import ConfigError, TableProfile, load_config
from ..exceptions import DataTableError
from ..logging.init import enable_debug, log_summary, setup_logging
from ..services.converter import ProcessingError, convert_file, read_table, write_template
from ..services.summary import render_summary_line
from ..services.validator import scan_table_files, validate_files

"""Command line entrypoint.

    python -m table_runtime.cli [--config PATH] [--debug] validate [FILE ...]
    python -m table_runtime.cli convert SRC DST
    python -m table_runtime.cli template DST
    python -m table_runtime.cli inspect FILE [--rows N]

Exit codes: 0 everything valid, 2 at least one input failed validation,
1 fatal (configuration, missing path, unsupported file type).
"""

__all__ = [
    "EXIT_FATAL",
    "EXIT_INVALID_DATA",
    "EXIT_SUCCESS_ALL",
    "main",
]

EXIT_SUCCESS_ALL = 0
EXIT_INVALID_DATA = 2
EXIT_FATAL = 1

DEFAULT_CONFIG_PATH = Path("config/table.yml")
DEFAULT_INSPECT_ROWS = 5


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="table_runtime", description="Typed table validation and csv/xlsx conversion")
    p.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="Table profile (YAML)")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    v = sub.add_parser("validate", help="Validate files against the profile")
    v.add_argument("paths", nargs="*", type=Path, help="Files to validate (default: source_directory)")

    c = sub.add_parser("convert", help="Convert between .csv and .xlsx")
    c.add_argument("source", type=Path)
    c.add_argument("destination", type=Path)

    t = sub.add_parser("template", help="Write a header-only import template")
    t.add_argument("destination", type=Path)

    i = sub.add_parser("inspect", help="Print headers and the first rows of a file")
    i.add_argument("path", type=Path)
    i.add_argument("--rows", type=int, default=DEFAULT_INSPECT_ROWS)
    return p.parse_args(argv)


def _validate(profile: TableProfile, paths: list[Path]) -> int:
    logger = setup_logging()
    if not paths:
        if profile.source_directory is None:
            logger.error("validate: no files given and no source_directory in config")
            return EXIT_FATAL
        directory = Path(profile.source_directory)
        logger.info(f"Validating files from: {directory}")
        paths = scan_table_files(directory)

    result = validate_files(profile, paths)
    summary_line = render_summary_line(len(paths), result)
    # log_summary が "SUMMARY " を付けるので除去
    log_summary(summary_line[len("SUMMARY "):])
    return EXIT_INVALID_DATA if result.invalid_files > 0 else EXIT_SUCCESS_ALL


def _convert(profile: TableProfile, source: Path, destination: Path) -> int:
    logger = setup_logging()
    try:
        convert_file(profile, source, destination)
    except DataTableError as e:
        logger.error(f"convert: {source.name}: {e}")
        return EXIT_INVALID_DATA
    return EXIT_SUCCESS_ALL


def _inspect(profile: TableProfile, path: Path, rows: int) -> int:
    logger = setup_logging()
    if not path.is_file():
        raise ProcessingError(f"file not found: {path}")
    try:
        table = read_table(profile, path)
    except DataTableError as e:
        logger.error(f"inspect: {path.name}: {e}")
        return EXIT_INVALID_DATA
    print(f"FILE: {path.name} rows={table.number_of_rows}")
    print("  columns=" + ", ".join(f"{c.name}:{c.type.name}{'?' if c.optional else ''}" for c in table.column_headers))
    for row_index in range(min(rows, table.number_of_rows)):
        print(f"  [{row_index}] {table.get_formatted_row(row_index)}")
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None のときだけ sys.argv を読む (テストの cli_main([...]) 呼び出し対策)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)

    if args.debug:
        enable_debug()

    try:
        profile = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    try:
        if args.command == "validate":
            return _validate(profile, args.paths)
        if args.command == "convert":
            return _convert(profile, args.source, args.destination)
        if args.command == "template":
            write_template(profile, args.destination)
            return EXIT_SUCCESS_ALL
        return _inspect(profile, args.path, args.rows)
    except (ProcessingError, OSError) as e:
        logger.error(f"{args.command}: {e}")
        return EXIT_FATAL
