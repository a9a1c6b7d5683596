from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

"""Result models of a validation run over table files."""

__all__ = [
    "FileStat",
    "ValidationResult",
]


@dataclass(frozen=True)
class FileStat:
    """Per-file outcome of a validation run."""
    file_name: str
    status: str  # valid/invalid
    rows: int  # 読み込めた行数 (invalid の場合 0)
    elapsed_seconds: float
    error: str | None = None


@dataclass(frozen=True)
class ValidationResult:
    """Aggregated outcome used for the SUMMARY line and the exit code."""
    valid_files: int
    invalid_files: int
    total_rows: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    throughput_rows_per_sec: float
    file_stats: list[FileStat] | None = None
    error_log_path: str | None = None

    @property
    def total_files(self) -> int:
        return self.valid_files + self.invalid_files
