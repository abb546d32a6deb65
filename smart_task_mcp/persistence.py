"""
Persistence adapters for the task collection.

The whole collection lives under one storage key as a JSON array. Adapters
differ only in where that text is kept; the encoding is shared.
"""

from __future__ import annotations

import logging
import os
import sqlite3
import tempfile
from pathlib import Path
from typing import Protocol

from smart_task_mcp.config import ConfigError, Settings
from smart_task_mcp.models.task import Task
from smart_task_mcp.utils.parsers import dump_tasks_payload, parse_tasks_payload

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "smart-task-manager-tasks"


class PersistenceAdapter(Protocol):
    """What the store needs from durable storage."""

    def load(self) -> list[Task] | None:
        """Return the stored collection, or None if nothing usable is stored. Never raises."""
        ...

    def save(self, tasks: list[Task]) -> bool:
        """Overwrite the stored collection. Returns False if the write failed."""
        ...


class KeyValuePersistence:
    """Shared load/save logic over a text-valued key/value backend."""

    def __init__(self, key: str = DEFAULT_STORAGE_KEY) -> None:
        self.key = key

    def _read(self) -> str | None:
        raise NotImplementedError

    def _write(self, payload: str) -> None:
        raise NotImplementedError

    def load(self) -> list[Task] | None:
        try:
            payload = self._read()
        except (OSError, sqlite3.Error, UnicodeDecodeError):
            logger.warning("Could not read stored tasks key=%s", self.key, exc_info=True)
            return None

        if payload is None or not payload.strip():
            logger.info("No stored tasks found key=%s", self.key)
            return None

        try:
            tasks = parse_tasks_payload(payload)
        except ValueError as e:
            logger.warning("Stored tasks are unreadable key=%s: %s", self.key, e)
            return None

        logger.debug("Loaded %d task(s) key=%s", len(tasks), self.key)
        return tasks

    def save(self, tasks: list[Task]) -> bool:
        try:
            self._write(dump_tasks_payload(tasks))
        except (OSError, sqlite3.Error):
            logger.exception("Failed to save %d task(s) key=%s", len(tasks), self.key)
            return False
        return True


class MemoryPersistence(KeyValuePersistence):
    """Keeps the payload in a dict; nothing survives the process."""

    def __init__(self, key: str = DEFAULT_STORAGE_KEY, data: dict[str, str] | None = None) -> None:
        super().__init__(key)
        self.data: dict[str, str] = {} if data is None else data

    def _read(self) -> str | None:
        return self.data.get(self.key)

    def _write(self, payload: str) -> None:
        self.data[self.key] = payload


class FilePersistence(KeyValuePersistence):
    """Stores the payload as ``<directory>/<key>.json``, replaced atomically on save."""

    def __init__(self, directory: str | Path, key: str = DEFAULT_STORAGE_KEY) -> None:
        super().__init__(key)
        self.directory = Path(directory)

    @property
    def path(self) -> Path:
        return self.directory / f"{self.key}.json"

    def _read(self) -> str | None:
        if not self.path.exists():
            return None
        return self.path.read_text(encoding="utf-8")

    def _write(self, payload: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.directory, prefix=f".{self.key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp, self.path)
        except OSError:
            Path(tmp).unlink(missing_ok=True)
            raise


class SqlitePersistence(KeyValuePersistence):
    """
    Stores the payload in a one-table SQLite database.

    Each call opens its own connection; there is no long-lived handle to close.
    """

    def __init__(self, db_path: str | Path, key: str = DEFAULT_STORAGE_KEY) -> None:
        super().__init__(key)
        self.db_path = Path(db_path)

    def _get_conn(self) -> sqlite3.Connection:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(self.db_path), timeout=30.0)
        conn.execute("CREATE TABLE IF NOT EXISTS kv (key TEXT PRIMARY KEY, value TEXT NOT NULL)")
        return conn

    def _read(self) -> str | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (self.key,)).fetchone()
            return None if row is None else str(row[0])
        finally:
            conn.close()

    def _write(self, payload: str) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                "INSERT INTO kv(key, value) VALUES (?, ?) ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                (self.key, payload),
            )
            conn.commit()
        finally:
            conn.close()


def build_persistence(settings: Settings) -> KeyValuePersistence:
    """Create the adapter selected by ``SMART_TASK_STORAGE_BACKEND``."""
    if settings.storage_backend == "memory":
        adapter: KeyValuePersistence = MemoryPersistence(settings.storage_key)
    elif settings.storage_backend == "sqlite":
        adapter = SqlitePersistence(settings.db_path, settings.storage_key)
    elif settings.storage_backend == "file":
        adapter = FilePersistence(settings.data_dir, settings.storage_key)
    else:
        raise ConfigError(f"Unknown storage backend {settings.storage_backend!r}")
    logger.info("Using %s for task storage", type(adapter).__name__)
    return adapter
