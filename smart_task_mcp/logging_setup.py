"""Logging configuration for the MCP server process."""

from __future__ import annotations

import logging
import sys


class _ThirdPartyFilter(logging.Filter):
    """Pass all smart_task_mcp records; other libraries only at WARNING and above."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.startswith("smart_task_mcp"):
            return True
        return record.levelno >= logging.WARNING


def setup_logging(level: str | int = logging.INFO) -> None:
    """
    Configure the root logger with one stderr handler.

    stdout carries the MCP stdio transport, so nothing may log there.
    Call this once, before the server starts.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    handler.addFilter(_ThirdPartyFilter())
    root.addHandler(handler)

    # Route warnings.warn(...) into logging as 'py.warnings'
    logging.captureWarnings(True)
