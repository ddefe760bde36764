from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for the JSON Lines error log.

A record is written for every report file that fails as a whole (structural
error, unreadable workbook, unsupported report type). Row and cell problems
are absorbed by the pipelines and never produce records.
"""

__all__ = [
    "ErrorRecord",
]


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: source file name
        report_type: report identifier the file was parsed as
        error_type: error classification in UPPER_SNAKE_CASE format
        message: human readable reason
    """
    timestamp: str  # ISO8601 UTC
    file: str
    report_type: str
    error_type: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(file: str, report_type: str, error_type: str, message: str) -> ErrorRecord:
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            report_type=report_type,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        # 追加キー阻止: dataclass -> dict して json.dumps
        return json.dumps(asdict(self), ensure_ascii=False)
