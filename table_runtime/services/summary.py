from __future__ import annotations

from ..models.validation_result import ValidationResult

"""SUMMARY line rendering for validation runs."""

__all__ = [
    "render_summary_line",
]


def _format_number(value: float) -> str:
    # 整数値は小数点なし、極小値は指数表記を避ける
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return str(round(value, 3))


def render_summary_line(total_files: int, result: ValidationResult) -> str:
    """Render the SUMMARY line of a run.

    Format::

        SUMMARY files={processed}/{total} valid={valid} invalid={invalid} rows={rows} elapsed_sec={elapsed} throughput_rps={throughput}

    >>> from datetime import datetime, timezone
    >>> start = datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)
    >>> end = datetime(2024, 1, 1, 10, 0, 2, tzinfo=timezone.utc)
    >>> result = ValidationResult(
    ...     valid_files=1, invalid_files=0, total_rows=1000, start_time=start,
    ...     end_time=end, elapsed_seconds=2.0, throughput_rows_per_sec=500.0,
    ... )
    >>> render_summary_line(1, result)
    'SUMMARY files=1/1 valid=1 invalid=0 rows=1000 elapsed_sec=2 throughput_rps=500'
    """
    return (
        f"SUMMARY files={result.total_files}/{total_files} "
        f"valid={result.valid_files} "
        f"invalid={result.invalid_files} "
        f"rows={result.total_rows} "
        f"elapsed_sec={_format_number(result.elapsed_seconds)} "
        f"throughput_rps={_format_number(result.throughput_rows_per_sec)}"
    )
