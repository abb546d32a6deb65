"""JSON backup, CSV export and backup import."""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError

from smart_task_mcp.enums import ExportFormat, TaskStatus
from smart_task_mcp.models.task import ImportedTask, Task, format_timestamp
from smart_task_mcp.models.transfer import Backup, BackupMetadata, DataStats, ImportResult
from smart_task_mcp.store import TaskStore
from smart_task_mcp.utils.parsers import dump_tasks_payload

logger = logging.getLogger(__name__)

BACKUP_VERSION = "1.0"
CSV_HEADERS = [
    "Title",
    "Description",
    "Due Date",
    "Created Date",
    "Priority",
    "Status",
    "Category",
    "Tags",
    "Estimated Hours",
    "Actual Hours",
]


# ============================================================================
# Export
# ============================================================================


def build_backup(tasks: list[Task], now: datetime, app_version: str = "1.0.0") -> Backup:
    return Backup(
        version=BACKUP_VERSION,
        export_date=format_timestamp(now),
        tasks=tasks,
        metadata=BackupMetadata(
            total_tasks=len(tasks),
            completed_tasks=sum(1 for t in tasks if t.status == TaskStatus.COMPLETED),
            app_version=app_version,
        ),
    )


def export_json(tasks: list[Task], now: datetime, app_version: str = "1.0.0") -> str:
    """Serialize a snapshot as the versioned JSON backup document."""
    return build_backup(tasks, now, app_version).model_dump_json(indent=2, by_alias=True)


def _quote(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def _day(value: datetime) -> str:
    return value.astimezone(timezone.utc).date().isoformat()


def _hours(value: float | None) -> str:
    # Absent and zero are both left blank
    if not value:
        return ""
    return str(int(value)) if float(value).is_integer() else repr(float(value))


def export_csv(tasks: list[Task]) -> str:
    """Serialize a snapshot as a 10-column CSV; text fields are always quoted."""
    lines = [",".join(CSV_HEADERS)]
    for t in tasks:
        row = [
            _quote(t.title),
            _quote(t.description),
            _day(t.due_date),
            _day(t.created_date),
            t.priority.value,
            t.status.value,
            t.category.value,
            _quote(", ".join(t.tags)),
            _hours(t.estimated_hours),
            _hours(t.actual_hours),
        ]
        lines.append(",".join(row))
    return "\n".join(lines)


def backup_filename(now: datetime, fmt: ExportFormat = ExportFormat.JSON) -> str:
    day = now.date().isoformat()
    if fmt == ExportFormat.CSV:
        return f"smart-task-manager-export-{day}.csv"
    return f"smart-task-manager-backup-{day}.json"


# ============================================================================
# Import
# ============================================================================


def _validate_record(record: Any) -> ImportedTask | None:
    try:
        return ImportedTask.model_validate(record)
    except ValidationError as e:
        logger.debug("Skipping invalid imported task: %s", e.errors(include_url=False))
        return None


def import_backup(store: TaskStore, payload: str | bytes | Mapping[str, Any]) -> ImportResult:
    """
    Append the valid tasks of a backup document to the store.

    Invalid records are skipped. Every imported task gets a fresh id above the
    store's current ids. Failures are described in the result, never raised.
    """
    if isinstance(payload, (str, bytes, bytearray)):
        try:
            data = json.loads(payload)
        except ValueError as e:
            return ImportResult(success=False, message=f"Import failed: {e}")
    else:
        data = payload

    if not isinstance(data, Mapping) or not isinstance(data.get("tasks"), list):
        return ImportResult(success=False, message="Invalid file format: Missing tasks array")

    valid = [r for r in (_validate_record(x) for x in data["tasks"]) if r is not None]
    if not valid:
        return ImportResult(success=False, message="No valid tasks found in the file")

    dropped = len(data["tasks"]) - len(valid)
    if dropped:
        logger.info("Import skipped %d invalid task record(s)", dropped)

    imported = store.import_tasks(valid)
    return ImportResult(
        success=True,
        message=f"Successfully imported {len(imported)} tasks",
        imported_count=len(imported),
    )


# ============================================================================
# Storage statistics
# ============================================================================


def format_bytes(size: int) -> str:
    """Human-readable size: 0 -> '0 Bytes', 1536 -> '1.5 KB'."""
    if size <= 0:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB"]
    i = min(int(math.floor(math.log(size) / math.log(1024))), len(units) - 1)
    value = float(f"{size / 1024**i:.2f}")
    return f"{value:g} {units[i]}"


def data_stats(tasks: list[Task]) -> DataStats:
    """Counts, stored payload size and the latest creation time of a snapshot."""
    size = len(dump_tasks_payload(tasks).encode("utf-8"))
    last = max((t.created_date for t in tasks), default=None)
    return DataStats(
        total_tasks=len(tasks),
        completed_tasks=sum(1 for t in tasks if t.status == TaskStatus.COMPLETED),
        data_size=format_bytes(size),
        last_modified=format_timestamp(last) if last else "Never",
    )
