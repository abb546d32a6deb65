"""FastMCP server initialization for Smart Task MCP."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from mcp.server.fastmcp import FastMCP

from smart_task_mcp.config import get_settings
from smart_task_mcp.logging_setup import setup_logging
from smart_task_mcp.persistence import build_persistence
from smart_task_mcp.store import TaskStore, utc_now

logger = logging.getLogger(__name__)

# Initialize the MCP server
mcp = FastMCP("smart_task_mcp")

_store: TaskStore | None = None


def get_store() -> TaskStore:
    """Return the process-wide task store, creating it from settings on first use."""
    global _store
    if _store is None:
        settings = get_settings()
        _store = TaskStore(build_persistence(settings), seed=settings.seed_defaults)
    return _store


def set_store(store: TaskStore | None) -> None:
    """Replace the process-wide store (None resets it to be rebuilt from settings)."""
    global _store
    _store = store


def analytics_now(now: datetime | None = None) -> datetime:
    """Reference time for reports, expressed in the configured timezone."""
    tz = get_settings().tz
    if now is None:
        return utc_now().astimezone(tz)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(tz)


def run() -> None:
    """Run the MCP server."""
    settings = get_settings()
    setup_logging(settings.log_level)
    logger.info("Starting %s v%s storage=%s", settings.app_name, settings.app_version, settings.storage_backend)

    # Import tools so they register with the server
    import smart_task_mcp.tools  # noqa: F401

    get_store()
    mcp.run()


if __name__ == "__main__":
    run()
