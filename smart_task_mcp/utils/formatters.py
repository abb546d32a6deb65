"""Formatting utilities for tool output."""

from smart_task_mcp.enums import TaskStatus
from smart_task_mcp.models.analytics import DueAlert, MetricsReport, TaskStats
from smart_task_mcp.models.task import Task

STATUS_ICONS = {
    TaskStatus.PENDING: "[ ]",
    TaskStatus.IN_PROGRESS: "[~]",
    TaskStatus.COMPLETED: "[x]",
    TaskStatus.CANCELLED: "[-]",
}


def _subtask_progress(task: Task) -> str:
    done = sum(1 for s in task.subtasks if s.completed)
    return f"{done}/{len(task.subtasks)}"


def _format_task_concise(task: Task) -> str:
    """
    Format a single task in concise format for token efficiency.

    Output: "#5: Title (urgent, due:2024-12-31, work)"
    """
    title = task.title[:50]
    meta = [task.priority.value, f"due:{task.due_date.date().isoformat()}", task.category.value]
    if task.status != TaskStatus.PENDING:
        meta.insert(0, task.status.value)
    return f"#{task.id}: {title} ({', '.join(meta)})"


def _format_tasks_concise(tasks: list[Task], title: str | None = None) -> str:
    """
    Format a list of tasks in concise format.

    Output:
    2 task(s) | work
    #1: Task one (high, due:2025-02-01, work)
    #2: Task two (low, due:2025-02-03, work)
    """
    if not tasks:
        return "0 tasks"

    header = f"{len(tasks)} task(s)"
    if title:
        header = f"{len(tasks)} task(s) | {title}"

    return "\n".join([header, *(_format_task_concise(t) for t in tasks)])


def _format_task_markdown(task: Task) -> str:
    """Format a single task as markdown."""
    icon = STATUS_ICONS.get(task.status, "")
    lines = [f"### {icon} [{task.id}] {task.title}"]

    details = [
        f"**Status**: {task.status.value}",
        f"**Priority**: {task.priority.value.capitalize()}",
        f"**Category**: {task.category.value}",
        f"**Due**: {task.due_date.strftime('%Y-%m-%d %H:%M')}",
    ]
    if task.tags:
        details.append(f"**Tags**: {', '.join(task.tags)}")
    if task.estimated_hours is not None or task.actual_hours is not None:
        est = "-" if task.estimated_hours is None else f"{task.estimated_hours:g}h"
        act = "-" if task.actual_hours is None else f"{task.actual_hours:g}h"
        details.append(f"**Hours**: {act} of {est}")
    lines.append(" | ".join(details))

    if task.description:
        lines.append(task.description)

    if task.subtasks:
        lines.append(f"**Subtasks** ({_subtask_progress(task)}):")
        for s in task.subtasks:
            mark = "x" if s.completed else " "
            lines.append(f"  - [{mark}] {s.id}. {s.title}")

    return "\n".join(lines)


def _format_tasks_markdown(tasks: list[Task], title: str = "Tasks") -> str:
    """Format a list of tasks as markdown."""
    if not tasks:
        return f"# {title}\n\nNo tasks found."

    lines = [f"# {title}", f"*{len(tasks)} task(s)*", ""]

    for task in tasks:
        lines.append(_format_task_markdown(task))
        lines.append("")

    return "\n".join(lines)


def _format_stats_markdown(stats: TaskStats) -> str:
    lines = ["# Task Summary", ""]
    lines.append(f"- **Total**: {stats.total}")
    lines.append(f"- **Pending**: {stats.pending}")
    lines.append(f"- **In progress**: {stats.in_progress}")
    lines.append(f"- **Completed**: {stats.completed}")
    lines.append(f"- **Cancelled**: {stats.cancelled}")
    lines.append(f"- **Overdue**: {stats.overdue}")
    return "\n".join(lines)


def _format_metrics_markdown(report: MetricsReport) -> str:
    """Render a metrics report as a markdown dashboard."""
    if report.total_tasks == 0:
        return f"# Productivity Analytics\n\nNo tasks yet. {report.focus_time_recommendation}"

    lines = ["# Productivity Analytics", ""]

    lines.append("### Overview")
    lines.append(f"- **Productivity score**: {report.productivity_score}/100")
    lines.append(f"- **Completed**: {report.completed_tasks}/{report.total_tasks} ({report.completion_rate}%)")
    lines.append(f"- **Overdue**: {report.overdue_tasks}")
    lines.append(f"- **Streak**: {report.streak_days} day(s)")
    lines.append(f"- **Burnout risk**: {report.burnout_risk.value}")
    lines.append("")

    lines.append("### Time")
    lines.append(f"- **Average time per task**: {report.average_time_per_task:g}h")
    lines.append(f"- **Time efficiency**: {report.time_efficiency}%")
    lines.append(f"- **Estimation accuracy**: {report.estimation_accuracy}%")
    lines.append(f"- **Most productive hour**: {report.most_productive_hour}")
    lines.append("")

    if report.categories_breakdown:
        lines.append("### Categories")
        for c in report.categories_breakdown:
            lines.append(f"- {c.category.value}: {c.count} ({c.percentage}%)")
        lines.append("")

    if report.priority_breakdown:
        lines.append("### Priorities")
        for p in report.priority_breakdown:
            lines.append(f"- {p.priority.value}: {p.count} ({p.percentage}%)")
        lines.append("")

    lines.append("### Last 7 Days")
    lines.append("| Date | Completed | Created |")
    lines.append("|------|-----------|---------|")
    for d in report.weekly_progress:
        lines.append(f"| {d.weekday} {d.date} | {d.completed} | {d.created} |")
    lines.append("")

    lines.append("### Monthly Trend")
    lines.append("| Month | Created | Completed | Productivity |")
    lines.append("|-------|---------|-----------|--------------|")
    for m in report.monthly_trends:
        lines.append(f"| {m.month} {m.year} | {m.created} | {m.completed} | {m.productivity}% |")
    lines.append("")

    lines.append(f"> {report.focus_time_recommendation}")
    return "\n".join(lines)


def _format_alerts_markdown(alerts: list[DueAlert]) -> str:
    if not alerts:
        return "# Reminders\n\nNothing is overdue or due in the next 24 hours."

    lines = [f"# Reminders ({len(alerts)})", ""]
    for a in alerts:
        lines.append(f"- **{a.title}** [#{a.task.id}] {a.message}")
    return "\n".join(lines)
