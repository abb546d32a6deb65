"""Enums for Smart Task MCP."""

from enum import Enum


class ResponseFormat(str, Enum):
    """Output format for tool responses."""

    CONCISE = "concise"  # One line per task, for chaining
    MARKDOWN = "markdown"  # Human-readable (default)
    JSON = "json"  # Machine-readable with all fields


class TaskStatus(str, Enum):
    """Task lifecycle status."""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Priority(str, Enum):
    """Task priority levels, lowest first."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class Category(str, Enum):
    """Task categories."""

    WORK = "work"
    PERSONAL = "personal"
    HEALTH = "health"
    LEARNING = "learning"
    OTHER = "other"


class SortKey(str, Enum):
    """Fields a task list can be ordered by."""

    DUE_DATE = "dueDate"
    PRIORITY = "priority"
    CREATED_DATE = "createdDate"
    TITLE = "title"


class QueryMode(str, Enum):
    """How a text search and filter criteria combine."""

    COMPOSE = "compose"  # search AND filter
    FILTER_OVERRIDES = "filter_overrides"  # any filter criterion discards the search term


class BurnoutRisk(str, Enum):
    """Coarse workload pressure classification."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ExportFormat(str, Enum):
    """Backup/export encodings."""

    JSON = "json"
    CSV = "csv"


class AlertKind(str, Enum):
    """Due-date pressure levels for reminders."""

    OVERDUE = "overdue"
    URGENT = "urgent"  # due within the hour
    REMINDER = "reminder"  # due within a day


PRIORITY_RANK: dict[Priority, int] = {
    Priority.URGENT: 4,
    Priority.HIGH: 3,
    Priority.MEDIUM: 2,
    Priority.LOW: 1,
}
