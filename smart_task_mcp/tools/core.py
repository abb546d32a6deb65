"""Core MCP tool definitions for Smart Task MCP."""

import json
import logging

from mcp.types import ToolAnnotations
from pydantic import ValidationError

from smart_task_mcp.analytics import task_stats
from smart_task_mcp.config import get_settings
from smart_task_mcp.enums import ResponseFormat, TaskStatus
from smart_task_mcp.models.inputs import (
    AddSubtaskInput,
    AddTaskInput,
    CompleteTaskInput,
    DeleteTaskInput,
    GetTaskInput,
    ListTasksInput,
    SummaryInput,
    ToggleSubtaskInput,
    UpdateTaskInput,
)
from smart_task_mcp.models.task import Subtask, TaskDraft, TaskPatch
from smart_task_mcp.query import FilterCriteria, TaskQuery, run_query
from smart_task_mcp.server import analytics_now, get_store, mcp
from smart_task_mcp.utils.formatters import (
    _format_stats_markdown,
    _format_task_concise,
    _format_task_markdown,
    _format_tasks_concise,
    _format_tasks_markdown,
)
from smart_task_mcp.utils.parsers import _serialize_task

logger = logging.getLogger(__name__)


def _validation_message(error: ValidationError) -> str:
    parts = []
    for e in error.errors(include_url=False):
        loc = ".".join(str(p) for p in e["loc"]) or "task"
        parts.append(f"{loc}: {e['msg']}")
    return "; ".join(parts)


def _not_found(task_id: int) -> str:
    return f"Error: Task '{task_id}' not found.\nTip: Use task_list to find valid task IDs."


@mcp.tool(
    name="task_list",
    annotations=ToolAnnotations(
        title="List Tasks",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def task_list(params: ListTasksInput) -> str:
    """
    Search, filter and sort tasks.

    USE THIS WHEN:
    - Looking for tasks by text (title, description or tags)
    - Narrowing tasks down by status, priority, category or tags
    - Getting tasks ordered by due date, priority, creation date or title

    DO NOT USE WHEN:
    - You have a specific task ID → use task_get instead
    - You want counts only → use task_summary instead
    - You want scores and trends → use task_analytics instead

    SEARCH AND FILTERS:
    - In 'compose' mode the search and every filter must all match
    - In 'filter_overrides' mode any filter replaces the search text
    - Tags match when the task shares at least one of the given tags

    Args:
        params: ListTasksInput containing search, filters, sort, limit and response_format

    Returns:
        Formatted list of tasks (markdown, concise or JSON based on response_format)

    Examples:
        - Text search: params with search="report"
        - Urgent work: params with priority="urgent", category="work"
        - Soonest due first: params with sort_by="dueDate"
        - Highest priority first: params with sort_by="priority", ascending=False
    """
    query = TaskQuery(
        search=params.search or "",
        criteria=FilterCriteria(
            status=params.status,
            priority=params.priority,
            category=params.category,
            tags=params.tags,
        ),
        sort_by=params.sort_by,
        ascending=params.ascending,
        mode=params.mode or get_settings().query_mode,
    )
    tasks = run_query(get_store().snapshot(), query)
    total_count = len(tasks)

    if params.limit and len(tasks) > params.limit:
        tasks = tasks[: params.limit]

    if params.response_format == ResponseFormat.JSON:
        return json.dumps(
            {"total": total_count, "count": len(tasks), "tasks": [_serialize_task(t) for t in tasks]},
            indent=2,
        )

    title = "Tasks"
    if params.search:
        title = f"Tasks matching '{params.search}'"

    if params.response_format == ResponseFormat.CONCISE:
        return _format_tasks_concise(tasks, params.search)

    return _format_tasks_markdown(tasks, title)


@mcp.tool(
    name="task_get",
    annotations=ToolAnnotations(
        title="Get Task Details",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def task_get(params: GetTaskInput) -> str:
    """
    Get full details of one task, including its subtasks.

    Args:
        params: GetTaskInput containing task_id and response_format

    Returns:
        The task (markdown, concise or JSON), or an error if the ID is unknown
    """
    task = get_store().get_by_id(params.task_id)
    if task is None:
        return _not_found(params.task_id)

    if params.response_format == ResponseFormat.JSON:
        return json.dumps(_serialize_task(task), indent=2)

    if params.response_format == ResponseFormat.CONCISE:
        return _format_task_concise(task)

    return _format_task_markdown(task)


@mcp.tool(
    name="task_add",
    annotations=ToolAnnotations(
        title="Add Task",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=False,
        openWorldHint=False,
    ),
)
async def task_add(params: AddTaskInput) -> str:
    """
    Create a new task.

    USE THIS WHEN:
    - Adding a new task to track
    - Creating a task with a checklist (pass subtask titles)

    DO NOT USE WHEN:
    - Changing an existing task → use task_update instead
    - Adding one checklist item to a task → use task_add_subtask instead

    Args:
        params: AddTaskInput containing title, due_date and optional attributes

    Returns:
        Confirmation message with the new task ID

    Examples:
        - Simple task: params with title="Buy groceries", due_date="2025-03-01T17:00:00Z"
        - Urgent work task: params with title="Fix outage", due_date="...", priority="urgent", category="work"
        - With checklist: params with title="Move house", due_date="...", subtasks=["Pack", "Book van"]
    """
    try:
        draft = TaskDraft(
            title=params.title,
            description=params.description,
            due_date=params.due_date,
            priority=params.priority,
            status=params.status,
            category=params.category,
            tags=params.tags or [],
            estimated_hours=params.estimated_hours,
            actual_hours=params.actual_hours,
            subtasks=[Subtask(id=i, title=t) for i, t in enumerate(params.subtasks or [], start=1)],
        )
    except ValidationError as e:
        return f"Error: Invalid task - {_validation_message(e)}\nTip: Check the field values and try again."

    task = get_store().add(draft)
    return f"Task created successfully.\n{_format_task_concise(task)}"


@mcp.tool(
    name="task_update",
    annotations=ToolAnnotations(
        title="Update Task",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def task_update(params: UpdateTaskInput) -> str:
    """
    Update an existing task's attributes.

    Only the fields you pass are changed. Each one replaces the stored value,
    so tags=[...] replaces the whole tag list. ID and creation date never change.

    USE THIS WHEN:
    - Renaming a task or changing its description, due date, priority or category
    - Moving a task between statuses (e.g. to 'in-progress')
    - Replacing its tags or recording estimated/actual hours

    DO NOT USE WHEN:
    - Finishing a task → use task_complete instead
    - Ticking a checklist item → use task_toggle_subtask instead

    Args:
        params: UpdateTaskInput containing task_id and the fields to change

    Returns:
        Confirmation message with the updated task

    Examples:
        - Start work: params with task_id=3, status="in-progress"
        - Push back: params with task_id=3, due_date="2025-03-08T17:00:00Z"
        - Re-tag: params with task_id=3, tags=["work", "q2"]
    """
    changes = params.model_dump(exclude_unset=True, exclude={"task_id"})
    if not changes:
        return "Error: No changes given.\nTip: Pass at least one field to update, e.g. status or due_date."

    store = get_store()
    try:
        updated = store.update(params.task_id, TaskPatch.model_validate(changes))
    except ValidationError as e:
        return f"Error: Invalid update - {_validation_message(e)}\nTip: Check the field values and try again."

    if not updated:
        return _not_found(params.task_id)

    task = store.get_by_id(params.task_id)
    return f"Task {params.task_id} updated successfully.\n{_format_task_concise(task)}"


@mcp.tool(
    name="task_complete",
    annotations=ToolAnnotations(
        title="Complete Task",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def task_complete(params: CompleteTaskInput) -> str:
    """
    Mark a task as completed.

    Use this tool when a task has been finished. Optionally record the hours
    it actually took, which feeds the time efficiency metrics.

    Args:
        params: CompleteTaskInput containing task_id and optional actual_hours

    Returns:
        Confirmation message

    Examples:
        - Complete task #5: params with task_id=5
        - Complete and log time: params with task_id=5, actual_hours=3.5
    """
    patch = TaskPatch(status=TaskStatus.COMPLETED)
    if params.actual_hours is not None:
        patch = TaskPatch(status=TaskStatus.COMPLETED, actual_hours=params.actual_hours)

    if not get_store().update(params.task_id, patch):
        return _not_found(params.task_id)
    return f"Task {params.task_id} marked as complete."


@mcp.tool(
    name="task_delete",
    annotations=ToolAnnotations(
        title="Delete Task",
        readOnlyHint=False,
        destructiveHint=True,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def task_delete(params: DeleteTaskInput) -> str:
    """
    Permanently delete a task.

    Deleted IDs are never handed out again.

    Args:
        params: DeleteTaskInput containing the task_id to delete

    Returns:
        Confirmation message
    """
    if not get_store().delete(params.task_id):
        return _not_found(params.task_id)
    return f"Task {params.task_id} deleted."


@mcp.tool(
    name="task_add_subtask",
    annotations=ToolAnnotations(
        title="Add Subtask",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=False,
        openWorldHint=False,
    ),
)
async def task_add_subtask(params: AddSubtaskInput) -> str:
    """
    Append a checklist item to a task.

    Args:
        params: AddSubtaskInput containing task_id and the subtask title

    Returns:
        Confirmation message with the new subtask ID

    Examples:
        - params with task_id=1, title="Write tests"
    """
    try:
        subtask = get_store().add_subtask(params.task_id, params.title)
    except ValidationError as e:
        return f"Error: Invalid subtask - {_validation_message(e)}\nTip: Give the subtask a non-empty title."

    if subtask is None:
        return _not_found(params.task_id)
    return f"Subtask {subtask.id} added to task {params.task_id}: {subtask.title}"


@mcp.tool(
    name="task_toggle_subtask",
    annotations=ToolAnnotations(
        title="Toggle Subtask",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=False,
        openWorldHint=False,
    ),
)
async def task_toggle_subtask(params: ToggleSubtaskInput) -> str:
    """
    Check or uncheck a checklist item.

    Args:
        params: ToggleSubtaskInput containing task_id and subtask_id

    Returns:
        The subtask's new state, or an error if the task or subtask is unknown
    """
    store = get_store()
    if not store.toggle_subtask(params.task_id, params.subtask_id):
        return (
            f"Error: Subtask '{params.subtask_id}' not found on task '{params.task_id}'.\n"
            f"Tip: Use task_get to see the task's subtasks."
        )

    task = store.get_by_id(params.task_id)
    subtask = next(s for s in task.subtasks if s.id == params.subtask_id)
    state = "done" if subtask.completed else "not done"
    return f"Subtask {subtask.id} on task {params.task_id} marked {state}."


@mcp.tool(
    name="task_summary",
    annotations=ToolAnnotations(
        title="Task Summary",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def task_summary(params: SummaryInput) -> str:
    """
    Get a quick count of tasks by status, plus how many are overdue.

    USE THIS WHEN:
    - Answering "how many tasks do I have?"
    - Checking for overdue work at a glance

    DO NOT USE WHEN:
    - You want scores, streaks and trends → use task_analytics instead

    Args:
        params: SummaryInput containing response_format

    Returns:
        Status counts (markdown or JSON)
    """
    stats = task_stats(get_store().snapshot(), analytics_now())

    if params.response_format == ResponseFormat.JSON:
        return stats.model_dump_json(indent=2)

    if params.response_format == ResponseFormat.CONCISE:
        return (
            f"{stats.total} tasks | {stats.pending} pending, {stats.in_progress} in progress, "
            f"{stats.completed} completed, {stats.cancelled} cancelled | {stats.overdue} overdue"
        )

    return _format_stats_markdown(stats)
