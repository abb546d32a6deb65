"""Due-date reminders: which open tasks are overdue or due soon, and what to tell the user."""

from datetime import datetime, timedelta, timezone

from smart_task_mcp.enums import AlertKind, TaskStatus
from smart_task_mcp.models.analytics import DueAlert
from smart_task_mcp.models.task import Task

URGENT_WINDOW = timedelta(hours=1)
REMINDER_WINDOW = timedelta(hours=24)

ALERT_TITLES = {
    AlertKind.OVERDUE: "Overdue Task!",
    AlertKind.URGENT: "Task Due Soon!",
    AlertKind.REMINDER: "Upcoming Task",
}


def _plural(n: int, unit: str) -> str:
    return f"{n} {unit}{'s' if n > 1 else ''}"


def time_ago(then: datetime, now: datetime) -> str:
    """'3 days ago', '1 hour ago', 'just now'."""
    minutes = int((now - then).total_seconds() // 60)
    hours, days = minutes // 60, minutes // 1440
    if days > 0:
        return f"{_plural(days, 'day')} ago"
    if hours > 0:
        return f"{_plural(hours, 'hour')} ago"
    if minutes > 0:
        return f"{_plural(minutes, 'minute')} ago"
    return "just now"


def time_until(then: datetime, now: datetime) -> str:
    """'in 2 days', 'in 45 minutes', 'very soon'."""
    minutes = int((then - now).total_seconds() // 60)
    hours, days = minutes // 60, minutes // 1440
    if days > 0:
        return f"in {_plural(days, 'day')}"
    if hours > 0:
        return f"in {_plural(hours, 'hour')}"
    if minutes > 0:
        return f"in {_plural(minutes, 'minute')}"
    return "very soon"


def classify(task: Task, now: datetime) -> AlertKind | None:
    """Alert level for one task, or None if it is completed or not due within a day."""
    if task.status == TaskStatus.COMPLETED:
        return None
    if task.due_date < now:
        return AlertKind.OVERDUE
    if task.due_date <= now + URGENT_WINDOW:
        return AlertKind.URGENT
    if task.due_date <= now + REMINDER_WINDOW:
        return AlertKind.REMINDER
    return None


def due_alerts(tasks: list[Task], now: datetime) -> list[DueAlert]:
    """Alerts for every open task under due-date pressure, soonest due first."""
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    alerts: list[DueAlert] = []
    for task in sorted(tasks, key=lambda t: t.due_date):
        kind = classify(task, now)
        if kind is None:
            continue
        if kind == AlertKind.OVERDUE:
            message = f'"{task.title}" was due {time_ago(task.due_date, now)}'
        else:
            message = f'"{task.title}" is due {time_until(task.due_date, now)}'
        alerts.append(DueAlert(task=task, kind=kind, title=ALERT_TITLES[kind], message=message))
    return alerts
