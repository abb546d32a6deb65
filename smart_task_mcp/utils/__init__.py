"""Utility functions for Smart Task MCP."""

from smart_task_mcp.utils.formatters import (
    _format_alerts_markdown,
    _format_metrics_markdown,
    _format_stats_markdown,
    _format_task_concise,
    _format_task_markdown,
    _format_tasks_concise,
    _format_tasks_markdown,
)
from smart_task_mcp.utils.parsers import _parse_task, _parse_tasks, dump_tasks_payload, parse_tasks_payload

__all__ = [
    "_parse_task",
    "_parse_tasks",
    "dump_tasks_payload",
    "parse_tasks_payload",
    "_format_task_concise",
    "_format_tasks_concise",
    "_format_task_markdown",
    "_format_tasks_markdown",
    "_format_stats_markdown",
    "_format_metrics_markdown",
    "_format_alerts_markdown",
]
