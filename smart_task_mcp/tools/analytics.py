"""
Analytics tools for Smart Task MCP.

These tools turn the task snapshot into derived insight: a productivity
report (scores, streak, breakdowns, weekly and monthly trends, burnout risk)
and due-date reminders for overdue and soon-due work.
"""

import json

from mcp.types import ToolAnnotations

from smart_task_mcp.analytics import compute_metrics
from smart_task_mcp.enums import ResponseFormat
from smart_task_mcp.models.inputs import AnalyticsInput, RemindersInput
from smart_task_mcp.reminders import due_alerts
from smart_task_mcp.server import analytics_now, get_store, mcp
from smart_task_mcp.utils.formatters import _format_alerts_markdown, _format_metrics_markdown
from smart_task_mcp.utils.parsers import _serialize_task


@mcp.tool(
    name="task_analytics",
    annotations=ToolAnnotations(
        title="Productivity Analytics",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def task_analytics(params: AnalyticsInput) -> str:
    """
    Get a productivity report computed from all tasks.

    USE THIS WHEN:
    - Asking "how productive have I been?"
    - Checking completion rate, streak, time efficiency or estimation accuracy
    - Looking at the last 7 days or the last 6 months of activity
    - Checking burnout risk and getting a focus-time suggestion

    DO NOT USE WHEN:
    - You only need counts by status → use task_summary instead
    - You want a list of tasks → use task_list instead

    SCORES (0-100):
    - productivity: weighted completion, timeliness, efficiency and consistency
    - consistency: how evenly completions spread over the last 7 days
    - time efficiency: estimated vs actual hours where both are logged (capped at 200)

    Args:
        params: AnalyticsInput with optional reference time and response_format

    Returns:
        Metrics report (markdown dashboard or JSON)
    """
    report = compute_metrics(get_store().snapshot(), analytics_now(params.now))

    if params.response_format == ResponseFormat.JSON:
        return report.model_dump_json(indent=2, by_alias=True)

    if params.response_format == ResponseFormat.CONCISE:
        return (
            f"score:{report.productivity_score} | done:{report.completed_tasks}/{report.total_tasks} "
            f"({report.completion_rate}%) | overdue:{report.overdue_tasks} | streak:{report.streak_days}d | "
            f"burnout:{report.burnout_risk.value}"
        )

    return _format_metrics_markdown(report)


@mcp.tool(
    name="task_reminders",
    annotations=ToolAnnotations(
        title="Due Reminders",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def task_reminders(params: RemindersInput) -> str:
    """
    List open tasks that are overdue or due within the next 24 hours.

    Each reminder is labelled 'overdue', 'urgent' (due within an hour) or
    'reminder' (due within a day), soonest due first. Completed tasks are
    never included.

    Args:
        params: RemindersInput with optional reference time, limit and response_format

    Returns:
        Reminders (markdown or JSON)
    """
    alerts = due_alerts(get_store().snapshot(), analytics_now(params.now))[: params.limit]

    if params.response_format == ResponseFormat.JSON:
        return json.dumps(
            {
                "count": len(alerts),
                "reminders": [
                    {"kind": a.kind.value, "title": a.title, "message": a.message, "task": _serialize_task(a.task)}
                    for a in alerts
                ],
            },
            indent=2,
        )

    if params.response_format == ResponseFormat.CONCISE:
        if not alerts:
            return "0 reminders"
        return "\n".join(f"{a.kind.value}: #{a.task.id} {a.message}" for a in alerts)

    return _format_alerts_markdown(alerts)
