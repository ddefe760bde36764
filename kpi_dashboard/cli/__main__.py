from __future__ import annotations

import argparse
import logging
import os
import sys
from collections.abc import Iterator
from contextlib import ExitStack, contextmanager
from pathlib import Path
from typing import Any

import psycopg2
from dotenv import load_dotenv

from kpi_dashboard.config.loader import DEFAULT_CONFIG_PATH, ConfigError, DashboardConfig, load_config
from kpi_dashboard.excel.reader import WorkbookReadError, read_workbook
from kpi_dashboard.logging.init import log_summary, set_debug, setup_logging
from kpi_dashboard.services.orchestrator import (
    ProcessingError,
    clear_all_data,
    clear_stored_report,
    process_all,
)
from kpi_dashboard.services.summary import render_summary_line
from kpi_dashboard.storage.local_store import LocalStoreError
from kpi_dashboard.transform.assembler import ReportType, UnsupportedReportTypeError
from kpi_dashboard.transform.cells import cell_text

"""CLI entrypoint.

Flow:
- .env (python-dotenv, overrides the process environment)
- config/dashboard.yml
- optional PostgreSQL connection for the remote document store
- one refresh run, SUMMARY line, exit code
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1

INSPECT_ROWS = 5


def _build_dsn(cfg: DashboardConfig) -> str:
    """Connection string; environment first, config ``database`` section as fallback.

    DATABASE_URL / PGDSN are used whole. Otherwise PGHOST / PGPORT / PGUSER /
    PGPASSWORD / PGDATABASE are read one by one.
    """
    db_cfg = cfg.database
    dsn = os.getenv("DATABASE_URL") or os.getenv("PGDSN") or db_cfg.dsn
    if dsn:
        return dsn
    host = os.getenv("PGHOST", db_cfg.host or "localhost")
    port = os.getenv("PGPORT", str(db_cfg.port) if db_cfg.port else "5432")
    user = os.getenv("PGUSER", db_cfg.user or "postgres")
    password = os.getenv("PGPASSWORD", db_cfg.password or "")
    database = os.getenv("PGDATABASE", db_cfg.database or "postgres")
    dsn = f"host={host} port={port} user={user} dbname={database}"
    if password:
        dsn += f" password={password}"
    return dsn


@contextmanager
def _db_connection(cfg: DashboardConfig) -> Iterator[Any]:  # pragma: no cover (needs a live server)
    """Yield a cursor; commit on normal exit, roll back on error."""
    conn = psycopg2.connect(_build_dsn(cfg))
    try:
        conn.autocommit = False
        with conn.cursor() as cur:
            yield cur
        conn.commit()
    except BaseException:
        conn.rollback()
        raise
    finally:
        conn.close()


@contextmanager
def _remote_cursor(cfg: DashboardConfig, logger: logging.Logger) -> Iterator[Any]:
    """Cursor for the remote store, or None (remote disabled / DISABLE_DB_CONNECT=1 / unreachable)."""
    if not cfg.remote.enabled:
        yield None
        return
    if os.getenv("DISABLE_DB_CONNECT") == "1":
        logger.debug("DB connect disabled via DISABLE_DB_CONNECT=1 -> local only")
        yield None
        return
    with ExitStack() as stack:
        try:
            cur = stack.enter_context(_db_connection(cfg))
        except psycopg2.Error as e:
            logger.warning(f"DB connection failed -> local only: {e}")
            cur = None
        yield cur


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env; connection settings in it win over the inherited environment."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Spreadsheet -> KPI dashboard report refresh")
    p.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="Config YAML path")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print the first rows of each report file then exit")
    clear = p.add_mutually_exclusive_group()
    clear.add_argument(
        "--clear",
        metavar="REPORT",
        choices=[rt.value for rt in ReportType],
        help="Reset one report in the stored data then exit",
    )
    clear.add_argument(
        "--clear-all",
        action="store_true",
        help="Delete all stored data (local store and remote collection) then exit",
    )
    return p.parse_args(argv)


def _inspect_data(cfg: DashboardConfig) -> int:
    for source, path in cfg.report_paths():
        print(f"FILE: {path.name} ({source.report_type})")
        try:
            sheets = read_workbook(path)
        except WorkbookReadError as e:
            print(f"  read_error: {e}")
            continue
        if not sheets:
            print("  no sheets")
            continue
        grid = sheets[0]
        print(f"  rows={len(grid)}")
        for row in grid[:INSPECT_ROWS]:
            print("   ", [cell_text(c) for c in row])
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # [] を渡されたとき sys.argv を読まない (pytest 引数の混入防止)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"), override=True)

    if args.debug:
        set_debug(logger)
        logger.debug("debug mode enabled")

    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.inspect_data:
        return _inspect_data(cfg)

    if args.clear:
        try:
            with _remote_cursor(cfg, logger) as cur:
                clear_stored_report(cfg, args.clear, cursor=cur)
        except (LocalStoreError, OSError, UnsupportedReportTypeError) as e:
            logger.error(f"clear: {e}")
            return EXIT_FATAL
        logger.info(f"cleared {args.clear}")
        return EXIT_SUCCESS_ALL

    if args.clear_all:
        try:
            with _remote_cursor(cfg, logger) as cur:
                removed = clear_all_data(cfg, cursor=cur)
        except OSError as e:
            logger.error(f"clear: {e}")
            return EXIT_FATAL
        logger.info(f"cleared all stored data (remote documents={removed})")
        return EXIT_SUCCESS_ALL

    logger.info(f"Processing reports from: {cfg.source_directory}")
    try:
        with _remote_cursor(cfg, logger) as cur:
            result = process_all(cfg, cursor=cur)
    except ProcessingError as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL

    summary_line = render_summary_line(result)
    log_summary(summary_line.removeprefix("SUMMARY "))

    if result.failed_files > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
