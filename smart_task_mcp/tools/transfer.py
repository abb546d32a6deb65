"""Backup, export, import and storage tools for Smart Task MCP."""

import json
import logging

from mcp.types import ToolAnnotations

from smart_task_mcp.config import get_settings
from smart_task_mcp.enums import ExportFormat, ResponseFormat
from smart_task_mcp.models.inputs import ClearTasksInput, DataStatsInput, ExportInput, ImportInput
from smart_task_mcp.server import get_store, mcp
from smart_task_mcp.store import utc_now
from smart_task_mcp.transfer import backup_filename, data_stats, export_csv, export_json, import_backup

logger = logging.getLogger(__name__)


@mcp.tool(
    name="task_export",
    annotations=ToolAnnotations(
        title="Export Tasks",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def task_export(params: ExportInput) -> str:
    """
    Export every task as a JSON backup or a CSV spreadsheet.

    The JSON backup can be re-imported with task_import. CSV is for
    spreadsheets only and cannot be imported.

    Args:
        params: ExportInput containing format ('json' or 'csv')

    Returns:
        A suggested file name on the first line, followed by the file contents
    """
    now = utc_now()
    tasks = get_store().snapshot()

    if params.format == ExportFormat.CSV:
        body = export_csv(tasks)
    else:
        body = export_json(tasks, now, get_settings().app_version)

    logger.info("Exported %d task(s) as %s", len(tasks), params.format.value)
    return f"{backup_filename(now, params.format)}\n{body}"


@mcp.tool(
    name="task_import",
    annotations=ToolAnnotations(
        title="Import Tasks",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=False,
        openWorldHint=False,
    ),
)
async def task_import(params: ImportInput) -> str:
    """
    Import tasks from a JSON backup.

    Imported tasks are appended with fresh IDs; existing tasks are never
    overwritten. Records that fail validation are skipped.

    Args:
        params: ImportInput containing the backup file contents

    Returns:
        How many tasks were imported, or why the import failed
    """
    result = import_backup(get_store(), params.content)
    if not result.success:
        return f"Error: {result.message}\nTip: Pass the full contents of a file produced by task_export."
    return result.message


@mcp.tool(
    name="task_data_stats",
    annotations=ToolAnnotations(
        title="Storage Statistics",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def task_data_stats(params: DataStatsInput) -> str:
    """
    Report how many tasks are stored, the stored size and the latest creation time.

    Args:
        params: DataStatsInput containing response_format

    Returns:
        Storage statistics (markdown or JSON)
    """
    stats = data_stats(get_store().snapshot())

    if params.response_format == ResponseFormat.JSON:
        return json.dumps(stats.model_dump(), indent=2)

    lines = ["# Stored Data", ""]
    lines.append(f"- **Tasks**: {stats.total_tasks} ({stats.completed_tasks} completed)")
    lines.append(f"- **Size**: {stats.data_size}")
    lines.append(f"- **Last created**: {stats.last_modified}")
    return "\n".join(lines)


@mcp.tool(
    name="task_clear",
    annotations=ToolAnnotations(
        title="Clear All Tasks",
        readOnlyHint=False,
        destructiveHint=True,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def task_clear(params: ClearTasksInput) -> str:
    """
    Permanently delete every task.

    DO NOT USE unless the user explicitly asked to wipe all data. Export a
    backup first with task_export.

    Args:
        params: ClearTasksInput; confirm must be true

    Returns:
        How many tasks were removed
    """
    if not params.confirm:
        return "Error: Refusing to clear tasks without confirmation.\nTip: Call again with confirm=true."

    removed = get_store().clear()
    return f"Cleared {removed} task(s)."
