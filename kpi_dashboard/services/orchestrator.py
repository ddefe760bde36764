from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, date, datetime
from pathlib import Path
from typing import Any

from ..config.loader import DashboardConfig
from ..db.document_store import (
    DocumentStoreError,
    clear_collection,
    ensure_table,
    load_latest,
    save_document,
)
from ..excel.reader import WorkbookReadError, read_workbook
from ..logging.error_log import ErrorLogBuffer, ErrorRecord
from ..models.processing_result import FileStat, ProcessingResult
from ..models.report_file import FileStatus, ReportFile
from ..storage.local_store import DB_STORAGE_KEY, LocalStore, LocalStoreError
from ..transform.assembler import (
    EmptySheetError,
    NoSheetsError,
    ReportStructureError,
    UnsupportedReportTypeError,
    parse_report,
)
from .dashboard import apply_report, clear_report, merge_app_data
from .progress import ProgressTracker

"""Dashboard refresh orchestration.

A refresh run:
1. loads the prior application data (remote store when enabled, else local)
2. parses every configured report file; a failed file leaves that report's
   prior data untouched and the run moves on
3. saves the merged data locally and, when enabled, remotely
4. returns a ProcessingResult for the SUMMARY line
"""

logger = logging.getLogger(__name__)


class ProcessingError(Exception):
    """Fatal error that stops the whole run."""


@dataclass(frozen=True)
class _LoadedData:
    app_data: dict[str, Any]
    doc_id: str | None = None


_ERROR_TYPES: tuple[tuple[type[Exception], str], ...] = (
    (UnsupportedReportTypeError, "UNSUPPORTED_REPORT_TYPE"),
    (NoSheetsError, "NO_SHEETS"),
    (EmptySheetError, "EMPTY_SHEET"),
    (ReportStructureError, "STRUCTURE_ERROR"),
    (WorkbookReadError, "WORKBOOK_READ_ERROR"),
)


def classify_error(error: Exception) -> str:
    for exc_type, name in _ERROR_TYPES:
        if isinstance(error, exc_type):
            return name
    return "UNEXPECTED_ERROR"


def _remote_enabled(config: DashboardConfig, cursor: Any) -> bool:
    return cursor is not None and config.remote.enabled


def load_app_data(config: DashboardConfig, store: LocalStore, cursor: Any = None) -> _LoadedData:
    """Prior data: latest remote document when available, otherwise the local store."""
    if _remote_enabled(config, cursor):
        try:
            ensure_table(cursor)
            doc = load_latest(cursor, config.remote.collection)
        except DocumentStoreError as e:
            logger.warning(f"remote load failed -> local store: {e}")
        else:
            if doc is not None:
                logger.info(f"loaded remote document id={doc.id}")
                return _LoadedData(app_data=merge_app_data(doc.payload), doc_id=doc.id)
    try:
        stored = store.get(DB_STORAGE_KEY)
    except LocalStoreError as e:
        # 破損ファイルは退避して空データから再構築
        backup = store.quarantine()
        logger.warning(f"local store unreadable, moved to {backup}, starting empty: {e}")
        stored = None
    return _LoadedData(app_data=merge_app_data(stored))


def save_app_data(
    config: DashboardConfig,
    store: LocalStore,
    app_data: dict[str, Any],
    cursor: Any = None,
    doc_id: str | None = None,
) -> str | None:
    """Save locally, then remotely when enabled. Returns the remote document id."""
    store.set(DB_STORAGE_KEY, app_data)
    if not _remote_enabled(config, cursor):
        return doc_id
    try:
        ensure_table(cursor)
        new_id = save_document(cursor, config.remote.collection, app_data, doc_id)
    except DocumentStoreError as e:
        logger.warning(f"remote save failed (local copy kept): {e}")
        return doc_id
    logger.info(f"saved remote document id={new_id}")
    return new_id


def process_report_file(
    path: Path,
    report_type: str,
    app_data: dict[str, Any],
    error_log: ErrorLogBuffer,
    today: date | None = None,
) -> tuple[ReportFile, dict[str, Any]]:
    """Parse one file and merge it; on failure the returned data is ``app_data`` unchanged."""
    start = datetime.now(UTC)
    try:
        sheets = read_workbook(path)
        bundle = parse_report(report_type, sheets, today=today)
        merged = apply_report(app_data, report_type, bundle)
    except Exception as e:
        error_type = classify_error(e)
        if error_type == "UNEXPECTED_ERROR":
            logger.exception(f"{path.name}: unexpected failure")
        else:
            logger.error(f"{path.name} ({report_type}): {e}")
        error_log.append(ErrorRecord.create(path.name, report_type, error_type, str(e)))
        return (
            ReportFile(
                path=path,
                name=path.name,
                report_type=report_type,
                start_time=start,
                end_time=datetime.now(UTC),
                status=FileStatus.FAILED,
                error=str(e),
            ),
            app_data,
        )
    logger.info(f"{path.name} -> {report_type}: {bundle.row_count} rows")
    return (
        ReportFile(
            path=path,
            name=path.name,
            report_type=report_type,
            start_time=start,
            end_time=datetime.now(UTC),
            status=FileStatus.SUCCESS,
            total_rows=bundle.row_count,
        ),
        merged,
    )


def process_all(
    config: DashboardConfig,
    cursor: Any = None,
    today: date | None = None,
    error_log: ErrorLogBuffer | None = None,
) -> ProcessingResult:
    """Run one dashboard refresh over every configured report file.

    Raises:
        ProcessingError: source directory missing, or the local store cannot be written
    """
    start_time = datetime.now(UTC)
    error_log = error_log or ErrorLogBuffer()

    directory = Path(config.source_directory)
    if not directory.is_dir():
        raise ProcessingError(f"Directory not found: {directory}")

    store = LocalStore(Path(config.store_path))
    loaded = load_app_data(config, store, cursor)
    app_data = loaded.app_data

    file_stats: list[FileStat] = []
    success_count = 0
    failed_count = 0
    total_rows = 0

    sources = config.report_paths()
    with ProgressTracker(len(sources)) as progress:
        for source, path in sources:
            progress.start_file(path, source.report_type)
            result, app_data = process_report_file(path, source.report_type, app_data, error_log, today)
            ok = result.status == FileStatus.SUCCESS
            if ok:
                success_count += 1
                total_rows += result.total_rows
            else:
                failed_count += 1
            progress.set_postfix(success=success_count, failed=failed_count, rows=total_rows)
            progress.finish_file(success=ok)
            elapsed = (result.end_time - result.start_time).total_seconds() if result.end_time and result.start_time else 0.0
            file_stats.append(
                FileStat(
                    file_name=result.name,
                    report_type=result.report_type,
                    status=result.status.value,
                    rows=result.total_rows,
                    elapsed_seconds=elapsed,
                )
            )

    if success_count > 0:
        try:
            save_app_data(config, store, app_data, cursor, loaded.doc_id)
        except (OSError, LocalStoreError) as e:
            raise ProcessingError(f"failed to write local store {store.path}: {e}") from e

    log_path = error_log.flush()
    if log_path is not None:
        logger.info(f"error log: {log_path}")

    end_time = datetime.now(UTC)
    elapsed_seconds = (end_time - start_time).total_seconds()
    throughput = total_rows / elapsed_seconds if elapsed_seconds > 0 else 0.0
    return ProcessingResult(
        success_files=success_count,
        failed_files=failed_count,
        total_rows=total_rows,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=elapsed_seconds,
        throughput_rows_per_sec=throughput,
        file_stats=file_stats,
        app_data=app_data,
    )


def clear_stored_report(config: DashboardConfig, report_type: str, cursor: Any = None) -> dict[str, Any]:
    """Reset one report key in the stored data and save it back."""
    store = LocalStore(Path(config.store_path))
    loaded = load_app_data(config, store, cursor)
    cleared = clear_report(loaded.app_data, report_type)
    save_app_data(config, store, cleared, cursor, loaded.doc_id)
    return cleared


def clear_all_data(config: DashboardConfig, cursor: Any = None) -> int:
    """Drop the stored data object locally and every remote document of the collection.

    Returns the number of remote documents removed.
    """
    store = LocalStore(Path(config.store_path))
    try:
        store.delete(DB_STORAGE_KEY)
    except LocalStoreError as e:
        backup = store.quarantine()
        logger.warning(f"local store unreadable, moved to {backup}: {e}")
    if not _remote_enabled(config, cursor):
        return 0
    try:
        ensure_table(cursor)
        removed = clear_collection(cursor, config.remote.collection)
    except DocumentStoreError as e:
        logger.warning(f"remote clear failed (local store cleared): {e}")
        return 0
    logger.info(f"removed {removed} remote document(s) from {config.remote.collection}")
    return removed
