"""MCP tool definitions for Smart Task MCP."""

# Import all tools to register them with the MCP server
from smart_task_mcp.tools.analytics import task_analytics, task_reminders
from smart_task_mcp.tools.core import (
    task_add,
    task_add_subtask,
    task_complete,
    task_delete,
    task_get,
    task_list,
    task_summary,
    task_toggle_subtask,
    task_update,
)
from smart_task_mcp.tools.transfer import task_clear, task_data_stats, task_export, task_import

__all__ = [
    # Core tools
    "task_list",
    "task_get",
    "task_add",
    "task_update",
    "task_complete",
    "task_delete",
    "task_add_subtask",
    "task_toggle_subtask",
    "task_summary",
    # Analytics tools
    "task_analytics",
    "task_reminders",
    # Transfer tools
    "task_export",
    "task_import",
    "task_data_stats",
    "task_clear",
]
