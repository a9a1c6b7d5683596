from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from datetime import UTC, datetime
from pathlib import Path

from ..config.loader import TableProfile
from ..exceptions import DataTableError
from ..logging.error_log import ErrorLogBuffer
from ..models.error_record import UNKNOWN_POSITION, ErrorRecord
from ..models.validation_result import FileStat, ValidationResult
from .converter import SUPPORTED_SUFFIXES, ProcessingError, read_table
from .progress import ProgressTracker

"""Validation runs: import each table file against a profile and report.

Each file is read into its own fresh table, so one invalid file never affects
another. The first error of an invalid file is logged as WARN and recorded in
the error log buffer, which is flushed once at the end of the run.
"""

__all__ = [
    "ProcessingError",
    "scan_table_files",
    "validate_files",
]

logger = logging.getLogger(__name__)

STATUS_VALID = "valid"
STATUS_INVALID = "invalid"


def scan_table_files(directory: Path) -> list[Path]:
    """List ``.csv`` / ``.xlsx`` files of ``directory`` (non-recursive, sorted)."""
    if not directory.exists():
        raise ProcessingError(f"Directory not found: {directory}")
    if not directory.is_dir():
        raise ProcessingError(f"Path is not a directory: {directory}")
    try:
        return sorted(
            p for p in directory.iterdir() if p.is_file() and p.suffix.lower() in SUPPORTED_SUFFIXES
        )
    except OSError as e:
        raise ProcessingError(f"Error reading directory {directory}: {e}") from e


def validate_files(
    profile: TableProfile,
    paths: Sequence[Path],
    error_log: ErrorLogBuffer | None = None,
) -> ValidationResult:
    """Validate every file of ``paths`` against ``profile``.

    Raises ProcessingError before reading anything when a path does not exist
    or has an unsupported suffix. Data errors never raise; they mark the file
    invalid.
    """
    for path in paths:
        if not path.is_file():
            raise ProcessingError(f"file not found: {path}")
        if path.suffix.lower() not in SUPPORTED_SUFFIXES:
            raise ProcessingError(f"unsupported file type {path.suffix or '<none>'}: {path}")

    buffer = error_log if error_log is not None else ErrorLogBuffer()
    start_time = datetime.now(UTC)
    file_stats: list[FileStat] = []
    valid_count = 0
    invalid_count = 0
    total_rows = 0

    with ProgressTracker(len(paths)) as progress:
        for path in paths:
            progress.start_file(path)
            stat = _validate_single_file(profile, path, buffer)
            file_stats.append(stat)
            if stat.status == STATUS_VALID:
                valid_count += 1
                total_rows += stat.rows
            else:
                invalid_count += 1
            progress.set_postfix(valid=valid_count, invalid=invalid_count, rows=total_rows)
            progress.finish_file()

    log_path = buffer.flush()
    if log_path is not None:
        logger.info(f"error log written: {log_path}")

    end_time = datetime.now(UTC)
    elapsed = (end_time - start_time).total_seconds()
    throughput = total_rows / elapsed if elapsed > 0 else 0.0
    return ValidationResult(
        valid_files=valid_count,
        invalid_files=invalid_count,
        total_rows=total_rows,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=elapsed,
        throughput_rows_per_sec=throughput,
        file_stats=file_stats,
        error_log_path=str(log_path) if log_path is not None else None,
    )


def _validate_single_file(profile: TableProfile, path: Path, buffer: ErrorLogBuffer) -> FileStat:
    started = time.perf_counter()
    try:
        table = read_table(profile, path)
    except DataTableError as e:
        record = ErrorRecord.from_exception(path.name, e)
    except OSError as e:
        record = ErrorRecord.create(
            file=path.name,
            row=UNKNOWN_POSITION,
            column=UNKNOWN_POSITION,
            error_type="FILE_ERROR",
            message=str(e),
        )
    else:
        elapsed = time.perf_counter() - started
        logger.info(f"{path.name}: valid rows={table.number_of_rows}")
        return FileStat(path.name, STATUS_VALID, table.number_of_rows, elapsed)

    buffer.append(record)
    logger.warning(
        f"{path.name}: invalid {record.error_type} row={record.row} column={record.column}: {record.message}"
    )
    return FileStat(path.name, STATUS_INVALID, 0, time.perf_counter() - started, error=record.message)
