"""Pydantic models for Smart Task MCP."""

from smart_task_mcp.models.analytics import (
    CategoryShare,
    DailyProgress,
    DueAlert,
    MetricsReport,
    MonthlyTrend,
    PriorityShare,
    TaskStats,
)
from smart_task_mcp.models.inputs import (
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
    RemindersInput,
    SummaryInput,
    ToggleSubtaskInput,
    UpdateTaskInput,
)
from smart_task_mcp.models.task import ImportedTask, Subtask, Task, TaskDraft, TaskPatch
from smart_task_mcp.models.transfer import Backup, BackupMetadata, DataStats, ImportResult

__all__ = [
    # Task models
    "Subtask",
    "Task",
    "TaskDraft",
    "TaskPatch",
    "ImportedTask",
    # Tool input models
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
    # Analytics output models
    "MetricsReport",
    "CategoryShare",
    "PriorityShare",
    "DailyProgress",
    "MonthlyTrend",
    "TaskStats",
    "DueAlert",
    # Transfer models
    "Backup",
    "BackupMetadata",
    "ImportResult",
    "DataStats",
]
