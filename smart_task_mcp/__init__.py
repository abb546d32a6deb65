"""
MCP Server for a smart task manager.

This server keeps a persistent collection of tasks and exposes tools to
create, update, search, filter and sort them, track subtasks, compute
productivity analytics, raise due-date reminders, and back the collection
up to JSON or CSV.
"""

# Re-export enums
from smart_task_mcp.enums import (
    Category,
    ExportFormat,
    Priority,
    QueryMode,
    ResponseFormat,
    SortKey,
    TaskStatus,
)

# Re-export models
from smart_task_mcp.models import (
    AddSubtaskInput,
    AddTaskInput,
    AnalyticsInput,
    ClearTasksInput,
    CompleteTaskInput,
    DataStatsInput,
    DeleteTaskInput,
    ExportInput,
    GetTaskInput,
    ImportInput,
    ListTasksInput,
    MetricsReport,
    RemindersInput,
    Subtask,
    SummaryInput,
    Task,
    TaskDraft,
    TaskPatch,
    ToggleSubtaskInput,
    UpdateTaskInput,
)

# Re-export MCP server instance and store access
from smart_task_mcp.server import get_store, mcp, set_store
from smart_task_mcp.store import TaskStore

# Re-export tools
from smart_task_mcp.tools import (
    task_add,
    task_add_subtask,
    task_analytics,
    task_clear,
    task_complete,
    task_data_stats,
    task_delete,
    task_export,
    task_get,
    task_import,
    task_list,
    task_reminders,
    task_summary,
    task_toggle_subtask,
    task_update,
)

# Re-export utilities (including private functions used by tests)
from smart_task_mcp.utils import (
    _format_task_concise,
    _format_task_markdown,
    _format_tasks_concise,
    _format_tasks_markdown,
    _parse_task,
    _parse_tasks,
)

__all__ = [
    # Enums
    "ResponseFormat",
    "TaskStatus",
    "Priority",
    "Category",
    "SortKey",
    "QueryMode",
    "ExportFormat",
    # Task models
    "Subtask",
    "Task",
    "TaskDraft",
    "TaskPatch",
    "MetricsReport",
    # Input models
    "ListTasksInput",
    "GetTaskInput",
    "AddTaskInput",
    "UpdateTaskInput",
    "CompleteTaskInput",
    "DeleteTaskInput",
    "AddSubtaskInput",
    "ToggleSubtaskInput",
    "SummaryInput",
    "AnalyticsInput",
    "RemindersInput",
    "ExportInput",
    "ImportInput",
    "DataStatsInput",
    "ClearTasksInput",
    # Store
    "TaskStore",
    "get_store",
    "set_store",
    # Utility functions
    "_parse_task",
    "_parse_tasks",
    "_format_task_concise",
    "_format_task_markdown",
    "_format_tasks_concise",
    "_format_tasks_markdown",
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
    # MCP server instance
    "mcp",
]
