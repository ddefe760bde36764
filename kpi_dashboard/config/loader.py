from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

"""Dashboard config loader.

Responsibilities:
- Load YAML (default ``config/dashboard.yml``)
- Validate against ``config_schema.json`` (shipped next to this module)
- Apply defaults (store path, remote collection)
"""

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/dashboard.yml")
DEFAULT_STORE_PATH = "./store/dashboard.json"
DEFAULT_COLLECTION = "reports"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class DatabaseConfig:
    """Fallback connection settings; environment variables take precedence."""
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str | None = None
    dsn: str | None = None


@dataclass(frozen=True)
class RemoteConfig:
    enabled: bool = False
    collection: str = DEFAULT_COLLECTION


@dataclass(frozen=True)
class ReportSource:
    report_type: str
    file: str


@dataclass(frozen=True)
class DashboardConfig:
    source_directory: str
    reports: list[ReportSource]
    store_path: str = DEFAULT_STORE_PATH
    remote: RemoteConfig = field(default_factory=RemoteConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)

    def report_paths(self) -> list[tuple[ReportSource, Path]]:
        base = Path(self.source_directory)
        return [(src, base / src.file) for src in self.reports]


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: schema file missing / not JSON, or the config violates it
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")
    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def load_config(path: Path = DEFAULT_CONFIG_PATH) -> DashboardConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError("config validation failed: top level must be a mapping")

    _validate_config_schema(data)

    remote_raw = data.get("remote") or {}
    db_raw = data.get("database") or {}
    return DashboardConfig(
        source_directory=data["source_directory"],
        reports=[ReportSource(report_type=r["report_type"], file=r["file"]) for r in data["reports"]],
        store_path=data.get("store_path", DEFAULT_STORE_PATH),
        remote=RemoteConfig(
            enabled=remote_raw.get("enabled", False),
            collection=remote_raw.get("collection", DEFAULT_COLLECTION),
        ),
        database=DatabaseConfig(
            host=db_raw.get("host"),
            port=db_raw.get("port"),
            user=db_raw.get("user"),
            password=db_raw.get("password"),
            database=db_raw.get("database"),
            dsn=db_raw.get("dsn"),
        ),
    )
