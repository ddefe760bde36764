from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

"""Run result models: per-file statistics and the aggregated run summary."""


@dataclass(frozen=True)
class FileStat:
    """Per-file processing statistics."""
    file_name: str
    report_type: str
    status: str  # success/failed
    rows: int
    elapsed_seconds: float


@dataclass(frozen=True)
class ProcessingResult:
    """Aggregated results of one dashboard refresh run (feeds the SUMMARY line)."""
    success_files: int
    failed_files: int
    total_rows: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    throughput_rows_per_sec: float
    file_stats: list[FileStat] | None = None
    app_data: dict[str, Any] = field(default_factory=dict)  # 保存済みアプリデータ
