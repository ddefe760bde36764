from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any

"""Local key-value store backed by a single JSON file.

Values must be plain data (what ``json.dumps`` accepts). Writes go through a
temporary file in the same directory and ``os.replace`` so a crash never
leaves a half-written store.
"""

__all__ = [
    "DB_STORAGE_KEY",
    "LocalStoreError",
    "LocalStore",
]

DB_STORAGE_KEY = "kpiDashboardDatabase"


class LocalStoreError(Exception):
    pass


class LocalStore:
    def __init__(self, path: Path) -> None:
        self.path = path

    def _read_all(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise LocalStoreError(f"corrupt store file {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise LocalStoreError(f"corrupt store file {self.path}: top level is not an object")
        return data

    def get(self, key: str, default: Any = None) -> Any:
        return self._read_all().get(key, default)

    def _write_all(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False)
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def set(self, key: str, value: Any) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def delete(self, key: str) -> None:
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)

    def quarantine(self) -> Path | None:
        """Move an unreadable store file aside to ``<name>.corrupt``; returns the new path."""
        if not self.path.exists():
            return None
        target = self.path.with_name(f"{self.path.name}.corrupt")
        os.replace(self.path, target)
        return target
