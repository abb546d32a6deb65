"""Settings loaded from environment variables (+ optional .env)."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import timezone, tzinfo
from functools import lru_cache
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

from smart_task_mcp.enums import QueryMode

logger = logging.getLogger(__name__)

ENV_PREFIX = "SMART_TASK"
STORAGE_BACKENDS = ("memory", "file", "sqlite")


class SmartTaskError(Exception):
    """Base error for smart_task_mcp."""


class ConfigError(SmartTaskError):
    """Settings that cannot be acted on."""


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None or v.strip() == "" else v.strip()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def _env_choice(name: str, choices: tuple[str, ...], default: str) -> str:
    value = _env(name, default).lower()
    if value not in choices:
        logger.warning("Ignoring %s=%r (expected one of %s); using %r", name, value, ", ".join(choices), default)
        return default
    return value


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    app_version: str
    log_level: str

    # ---- Storage ----
    storage_backend: str
    data_dir: Path
    storage_key: str
    db_path: Path
    seed_defaults: bool

    # ---- Behaviour ----
    timezone_name: str
    query_mode: QueryMode

    @staticmethod
    def from_env() -> Settings:
        load_dotenv(override=False)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/smart-task"))
        query_mode = _env_choice(_k("QUERY_MODE"), tuple(m.value for m in QueryMode), QueryMode.COMPOSE.value)

        return Settings(
            app_name=_env(_k("APP_NAME"), "smart_task_mcp"),
            app_version=_env(_k("APP_VERSION"), "1.0.0"),
            log_level=_env(_k("LOG_LEVEL"), "INFO").upper(),
            storage_backend=_env_choice(_k("STORAGE_BACKEND"), STORAGE_BACKENDS, "file"),
            data_dir=data_dir,
            storage_key=_env(_k("STORAGE_KEY"), "smart-task-manager-tasks"),
            db_path=_env_path(_k("DB_PATH"), data_dir / "tasks.sqlite3"),
            seed_defaults=_env_bool(_k("SEED_DEFAULTS"), True),
            timezone_name=_env(_k("TIMEZONE"), "UTC"),
            query_mode=QueryMode(query_mode),
        )

    @property
    def tz(self) -> tzinfo:
        """Timezone calendar-day analytics are evaluated in."""
        if self.timezone_name.upper() == "UTC":
            return timezone.utc
        try:
            return ZoneInfo(self.timezone_name)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning("Unknown timezone %r; falling back to UTC", self.timezone_name)
            return timezone.utc


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()
