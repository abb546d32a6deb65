"""Output models for the analytics engine."""

from pydantic import BaseModel, Field

from smart_task_mcp.enums import AlertKind, BurnoutRisk, Category, Priority
from smart_task_mcp.models.task import CamelModel, Task


class CategoryShare(CamelModel):
    """Task count and share of the total for one category."""

    category: Category
    count: int
    percentage: int


class PriorityShare(CamelModel):
    """Task count and share of the total for one priority."""

    priority: Priority
    count: int
    percentage: int


class DailyProgress(CamelModel):
    """
    Completed and created counts for one of the trailing seven days.

    ``day`` is the positional label (Mon..Sun, oldest first) the dashboard has
    always shown; ``date`` and ``weekday`` give the real calendar day.
    """

    day: str
    date: str
    weekday: str
    completed: int
    created: int


class MonthlyTrend(CamelModel):
    """Share of the tasks created in a calendar month that are now completed."""

    month: str
    year: int
    created: int
    completed: int
    productivity: int


class MetricsReport(CamelModel):
    """Fixed-shape productivity report derived from one task snapshot."""

    total_tasks: int = 0
    completed_tasks: int = 0
    completion_rate: int = 0
    average_time_per_task: float = 0
    productivity_score: int = 0
    timeliness_score: int = 0
    consistency_score: int = 0
    streak_days: int = 0
    overdue_tasks: int = 0
    time_efficiency: int = 0
    most_productive_hour: str = "N/A"
    categories_breakdown: list[CategoryShare] = Field(default_factory=list)
    priority_breakdown: list[PriorityShare] = Field(default_factory=list)
    weekly_progress: list[DailyProgress] = Field(default_factory=list)
    monthly_trends: list[MonthlyTrend] = Field(default_factory=list)
    estimation_accuracy: int = 0
    burnout_risk: BurnoutRisk = BurnoutRisk.LOW
    focus_time_recommendation: str = ""


class TaskStats(BaseModel):
    """Status counts for a snapshot."""

    total: int
    completed: int
    pending: int
    in_progress: int
    cancelled: int
    overdue: int


class DueAlert(BaseModel):
    """A task under due-date pressure and the reminder text for it."""

    task: Task
    kind: AlertKind
    title: str
    message: str
