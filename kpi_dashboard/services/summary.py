from __future__ import annotations

from ..models.processing_result import ProcessingResult

"""SUMMARY line rendering for a dashboard refresh run."""


def _format_metric(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # 指数表記を避ける
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return f"{value:.3f}".rstrip("0").rstrip(".")


def render_summary_line(result: ProcessingResult) -> str:
    """Render the SUMMARY line.

    Format:
    SUMMARY files={total}/{total} success={s} failed={f} rows={rows} elapsed_sec={e} throughput_rps={t}

    >>> from datetime import datetime, timezone
    >>> t0 = datetime(2024, 1, 1, tzinfo=timezone.utc)
    >>> r = ProcessingResult(
    ...     success_files=2, failed_files=0, total_rows=120, start_time=t0, end_time=t0,
    ...     elapsed_seconds=2.0, throughput_rows_per_sec=60.0,
    ... )
    >>> render_summary_line(r)
    'SUMMARY files=2/2 success=2 failed=0 rows=120 elapsed_sec=2 throughput_rps=60'
    """
    total_files = result.success_files + result.failed_files
    return (
        f"SUMMARY files={total_files}/{total_files} "
        f"success={result.success_files} "
        f"failed={result.failed_files} "
        f"rows={result.total_rows} "
        f"elapsed_sec={_format_metric(result.elapsed_seconds)} "
        f"throughput_rps={_format_metric(result.throughput_rows_per_sec)}"
    )
