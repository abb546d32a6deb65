"""Input models for Smart Task MCP tools."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from smart_task_mcp.enums import Category, ExportFormat, Priority, QueryMode, ResponseFormat, SortKey, TaskStatus

# ============================================================================
# Core Tool Input Models
# ============================================================================


class ListTasksInput(BaseModel):
    """Input model for searching, filtering and sorting tasks."""

    model_config = ConfigDict(str_strip_whitespace=True)

    search: str | None = Field(
        default=None,
        description="Case-insensitive text matched against title, description and tags",
    )
    status: TaskStatus | None = Field(default=None, description="Only tasks with this status")
    priority: Priority | None = Field(default=None, description="Only tasks with this priority")
    category: Category | None = Field(default=None, description="Only tasks in this category")
    tags: list[str] | None = Field(default=None, description="Only tasks sharing at least one of these tags")
    sort_by: SortKey | None = Field(
        default=None,
        description="Order by 'dueDate', 'priority', 'createdDate' or 'title'; store order when omitted",
    )
    ascending: bool = Field(default=True, description="Sort direction")
    mode: QueryMode | None = Field(
        default=None,
        description="'compose' (search AND filters) or 'filter_overrides' (filters replace the search); "
        "server default when omitted",
    )
    limit: int | None = Field(default=50, description="Maximum number of tasks to return", ge=1, le=500)
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown' for human-readable or 'json' for machine-readable",
    )


class GetTaskInput(BaseModel):
    """Input model for getting a single task."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: int = Field(..., description="Task ID to retrieve", ge=1)
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown' for human-readable or 'json' for machine-readable",
    )


class AddTaskInput(BaseModel):
    """Input model for adding a new task."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., description="Task title (required)", min_length=1, max_length=500)
    description: str = Field(default="", description="Longer description", max_length=5000)
    due_date: datetime = Field(..., description="Due date-time, ISO-8601 (e.g., '2025-03-01T17:00:00Z')")
    priority: Priority = Field(default=Priority.MEDIUM, description="low, medium, high or urgent")
    status: TaskStatus = Field(default=TaskStatus.PENDING, description="Initial status")
    category: Category = Field(default=Category.OTHER, description="work, personal, health, learning or other")
    tags: list[str] | None = Field(default=None, description="Tags to apply", max_length=20)
    estimated_hours: float | None = Field(default=None, description="Estimated effort in hours", ge=0)
    actual_hours: float | None = Field(default=None, description="Hours already spent", ge=0)
    subtasks: list[str] | None = Field(default=None, description="Checklist item titles", max_length=50)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Title cannot be empty")
        return v.strip()


class UpdateTaskInput(BaseModel):
    """Input model for updating a task. Only the fields given are changed."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: int = Field(..., description="Task ID to update", ge=1)
    title: str | None = Field(default=None, description="New title", min_length=1, max_length=500)
    description: str | None = Field(default=None, description="New description")
    due_date: datetime | None = Field(default=None, description="New due date-time, ISO-8601")
    priority: Priority | None = Field(default=None, description="New priority")
    status: TaskStatus | None = Field(default=None, description="New status")
    category: Category | None = Field(default=None, description="New category")
    tags: list[str] | None = Field(default=None, description="Replacement tag list (replaces all tags)")
    estimated_hours: float | None = Field(default=None, description="New estimate in hours", ge=0)
    actual_hours: float | None = Field(default=None, description="New hours spent", ge=0)


class CompleteTaskInput(BaseModel):
    """Input model for completing a task."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: int = Field(..., description="Task ID to complete", ge=1)
    actual_hours: float | None = Field(default=None, description="Hours spent, recorded with the completion", ge=0)


class DeleteTaskInput(BaseModel):
    """Input model for deleting a task."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: int = Field(..., description="Task ID to delete", ge=1)


class AddSubtaskInput(BaseModel):
    """Input model for adding a checklist item to a task."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: int = Field(..., description="Parent task ID", ge=1)
    title: str = Field(..., description="Subtask title", min_length=1, max_length=500)


class ToggleSubtaskInput(BaseModel):
    """Input model for checking or unchecking a subtask."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: int = Field(..., description="Parent task ID", ge=1)
    subtask_id: int = Field(..., description="Subtask ID within the task", ge=1)


class SummaryInput(BaseModel):
    """Input model for the status summary."""

    model_config = ConfigDict(str_strip_whitespace=True)

    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown' for human-readable or 'json' for machine-readable",
    )


# ============================================================================
# Analytics Input Models
# ============================================================================


class AnalyticsInput(BaseModel):
    """Input model for the productivity report."""

    model_config = ConfigDict(str_strip_whitespace=True)

    now: datetime | None = Field(
        default=None,
        description="Reference time for the report (ISO-8601); the current time when omitted",
    )
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN, description="Output format: 'markdown' or 'json'"
    )


class RemindersInput(BaseModel):
    """Input model for due-date reminders."""

    model_config = ConfigDict(str_strip_whitespace=True)

    now: datetime | None = Field(default=None, description="Reference time (ISO-8601); current time when omitted")
    limit: int = Field(default=20, description="Maximum number of reminders to return", ge=1, le=100)
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN, description="Output format: 'markdown' or 'json'"
    )


# ============================================================================
# Import / Export Input Models
# ============================================================================


class ExportInput(BaseModel):
    """Input model for exporting all tasks."""

    model_config = ConfigDict(str_strip_whitespace=True)

    format: ExportFormat = Field(default=ExportFormat.JSON, description="'json' backup or 'csv' spreadsheet")


class ImportInput(BaseModel):
    """Input model for importing a JSON backup."""

    content: str = Field(..., description="Contents of a JSON backup file", min_length=1)


class DataStatsInput(BaseModel):
    """Input model for storage statistics."""

    model_config = ConfigDict(str_strip_whitespace=True)

    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN, description="Output format: 'markdown' or 'json'"
    )


class ClearTasksInput(BaseModel):
    """Input model for deleting every task."""

    confirm: bool = Field(default=False, description="Must be true; this permanently removes all tasks")
