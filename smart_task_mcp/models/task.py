"""Core task models for Smart Task MCP."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator
from pydantic.alias_generators import to_camel

from smart_task_mcp.enums import Category, Priority, TaskStatus


def format_timestamp(value: datetime) -> str:
    """Render a timestamp as ISO-8601 UTC with millisecond precision (``...T09:30:00.125Z``)."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def _as_aware(value: datetime) -> datetime:
    # Naive timestamps are taken to be UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class CamelModel(BaseModel):
    """Base for models whose wire names are camelCase (``dueDate``, ``createdDate``)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Subtask(CamelModel):
    """A checklist item scoped to one task."""

    id: int = Field(..., ge=1)
    title: str = Field(..., min_length=1)
    completed: bool = False

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Subtask title cannot be empty")
        return v.strip()


class TaskDraft(CamelModel):
    """Everything a caller supplies to create a task; the store assigns id and createdDate."""

    title: str = Field(..., min_length=1, max_length=500)
    description: str = ""
    due_date: datetime
    priority: Priority = Priority.MEDIUM
    status: TaskStatus = TaskStatus.PENDING
    category: Category = Category.OTHER
    tags: list[str] = Field(default_factory=list)
    estimated_hours: float | None = Field(default=None, ge=0)
    actual_hours: float | None = Field(default=None, ge=0)
    subtasks: list[Subtask] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Title cannot be empty")
        return v.strip()

    @field_validator("due_date")
    @classmethod
    def validate_due_date(cls, v: datetime) -> datetime:
        return _as_aware(v)

    @field_validator("tags", mode="before")
    @classmethod
    def validate_tags(cls, v: object) -> object:
        # null tags in old payloads mean "no tags"
        return [] if v is None else v

    @field_validator("subtasks", mode="before")
    @classmethod
    def validate_subtasks(cls, v: object) -> object:
        return [] if v is None else v

    @model_validator(mode="after")
    def check_subtask_ids(self) -> TaskDraft:
        ids = [s.id for s in self.subtasks]
        if len(ids) != len(set(ids)):
            raise ValueError("Subtask ids must be unique within a task")
        return self

    @field_serializer("due_date", when_used="json")
    def serialize_due_date(self, v: datetime) -> str:
        return format_timestamp(v)


class Task(TaskDraft):
    """A stored task with its identity and creation time."""

    id: int = Field(..., ge=1)
    created_date: datetime

    @field_validator("created_date")
    @classmethod
    def validate_created_date(cls, v: datetime) -> datetime:
        return _as_aware(v)

    @field_serializer("created_date", when_used="json")
    def serialize_created_date(self, v: datetime) -> str:
        return format_timestamp(v)

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED

    def next_subtask_id(self) -> int:
        return max((s.id for s in self.subtasks), default=0) + 1


class ImportedTask(TaskDraft):
    """
    A task record read from a backup file. It carries its own createdDate, and
    its id (if any) is discarded because the store assigns a fresh one. Unlike a
    draft, every enum field must be present.
    """

    description: str
    priority: Priority
    status: TaskStatus
    category: Category
    created_date: datetime

    @field_validator("created_date")
    @classmethod
    def validate_created_date(cls, v: datetime) -> datetime:
        return _as_aware(v)


class TaskPatch(CamelModel):
    """
    A partial update. Only fields that were explicitly set are applied, and each
    one replaces the stored value wholesale (``tags`` and ``subtasks`` included).
    """

    title: str | None = Field(default=None, min_length=1, max_length=500)
    description: str | None = None
    due_date: datetime | None = None
    priority: Priority | None = None
    status: TaskStatus | None = None
    category: Category | None = None
    tags: list[str] | None = None
    estimated_hours: float | None = Field(default=None, ge=0)
    actual_hours: float | None = Field(default=None, ge=0)
    subtasks: list[Subtask] | None = None

    def changes(self) -> dict:
        """Return the explicitly-set fields keyed by attribute name."""
        return self.model_dump(exclude_unset=True)
