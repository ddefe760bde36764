from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path

"""ReportFile model: processing context for one configured report file.

State transitions: pending -> processing -> (success | failed)
"""


class FileStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class ReportFile:
    """One report file and the outcome of parsing it."""
    path: Path
    name: str
    report_type: str
    start_time: datetime | None = None
    end_time: datetime | None = None
    status: FileStatus = FileStatus.PENDING
    total_rows: int = 0  # bundle の有効行数 (workload は明細行数)
    error: str | None = None  # 失敗理由
