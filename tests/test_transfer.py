"""Tests for backup export, CSV export and import."""

import json
from datetime import datetime, timezone

from conftest import NOW

from smart_task_mcp.enums import ExportFormat, Priority, TaskStatus
from smart_task_mcp.transfer import (
    CSV_HEADERS,
    backup_filename,
    data_stats,
    export_csv,
    export_json,
    format_bytes,
    import_backup,
)


class TestExportJson:
    """Tests for the JSON backup document."""

    def test_document_shape(self, make_task):
        tasks = [make_task(status=TaskStatus.COMPLETED), make_task()]
        doc = json.loads(export_json(tasks, NOW, "2.1.0"))
        assert doc["version"] == "1.0"
        assert doc["exportDate"] == "2025-03-12T15:00:00.000Z"
        assert doc["metadata"] == {"totalTasks": 2, "completedTasks": 1, "appVersion": "2.1.0"}
        assert [t["id"] for t in doc["tasks"]] == [1, 2]
        assert doc["tasks"][0]["dueDate"].endswith("Z")

    def test_empty_snapshot(self):
        doc = json.loads(export_json([], NOW))
        assert doc["tasks"] == []
        assert doc["metadata"]["totalTasks"] == 0

    def test_filenames(self):
        assert backup_filename(NOW) == "smart-task-manager-backup-2025-03-12.json"
        assert backup_filename(NOW, ExportFormat.CSV) == "smart-task-manager-export-2025-03-12.csv"


class TestExportCsv:
    """Tests for the CSV export."""

    def test_header_only_for_empty(self):
        assert export_csv([]) == ",".join(CSV_HEADERS)

    def test_row_format(self, make_task):
        task = make_task(
            title='Say "hi"',
            description="a, b",
            due_date=datetime(2025, 3, 14, 23, 30, tzinfo=timezone.utc),
            created_date=datetime(2025, 3, 1, 8, 0, tzinfo=timezone.utc),
            priority=Priority.HIGH,
            tags=["x", "y"],
            estimated_hours=2,
            actual_hours=1.5,
        )
        lines = export_csv([task]).split("\n")
        assert lines[0] == (
            "Title,Description,Due Date,Created Date,Priority,Status,Category,Tags,Estimated Hours,Actual Hours"
        )
        assert lines[1] == '"Say ""hi""","a, b",2025-03-14,2025-03-01,high,pending,other,"x, y",2,1.5'

    def test_missing_and_zero_hours_are_blank(self, make_task):
        row = export_csv([make_task(estimated_hours=0)]).split("\n")[1]
        assert row.endswith(",,")


class TestImportBackup:
    """Tests for import_backup."""

    def test_round_trip_appends_with_fresh_ids(self, store, make_task):
        store.add({"title": "Already here", "due_date": NOW})
        exported = [make_task(id=10, title="A"), make_task(id=11, title="B", status=TaskStatus.COMPLETED)]

        result = import_backup(store, export_json(exported, NOW))

        assert result.success is True
        assert result.message == "Successfully imported 2 tasks"
        assert result.imported_count == 2
        tasks = store.snapshot()
        assert [(t.id, t.title) for t in tasks] == [(1, "Already here"), (2, "A"), (3, "B")]
        assert tasks[2].status == TaskStatus.COMPLETED
        assert tasks[1].created_date == exported[0].created_date

    def test_unparseable_json(self, store):
        result = import_backup(store, "{nope")
        assert result.success is False
        assert result.message.startswith("Import failed:")
        assert len(store) == 0

    def test_missing_tasks_array(self, store):
        result = import_backup(store, json.dumps({"version": "1.0"}))
        assert result.success is False
        assert result.message == "Invalid file format: Missing tasks array"

    def test_no_valid_tasks(self, store):
        result = import_backup(store, {"tasks": [{"title": "no dates"}, "junk"]})
        assert result.success is False
        assert result.message == "No valid tasks found in the file"
        assert result.imported_count is None

    def test_invalid_records_are_skipped(self, store):
        payload = {
            "tasks": [
                {"title": "Good", "description": "", "dueDate": "2025-03-20T10:00:00.000Z",
                 "createdDate": "2025-03-01T10:00:00.000Z", "priority": "low", "status": "pending",
                 "category": "work"},
                {"title": "Bad priority", "description": "", "dueDate": "2025-03-20T10:00:00.000Z",
                 "createdDate": "2025-03-01T10:00:00.000Z", "priority": "critical", "status": "pending",
                 "category": "work"},
            ]
        }
        result = import_backup(store, payload)
        assert result.success is True
        assert result.imported_count == 1
        assert [t.title for t in store.snapshot()] == ["Good"]

    def test_records_missing_enum_fields_are_skipped(self, store):
        payload = {
            "tasks": [
                {"title": "No priority", "description": "", "dueDate": "2025-03-20T10:00:00.000Z",
                 "createdDate": "2025-03-01T10:00:00.000Z", "status": "pending", "category": "work"},
                {"title": "Bare", "description": "", "dueDate": "2025-03-20T10:00:00.000Z",
                 "createdDate": "2025-03-01T10:00:00.000Z"},
            ]
        }
        result = import_backup(store, payload)
        assert result.success is False
        assert result.message == "No valid tasks found in the file"
        assert store.snapshot() == []

    def test_import_notifies_once(self, store, make_task):
        calls = []
        store.subscribe(calls.append)
        import_backup(store, export_json([make_task(), make_task(), make_task()], NOW))
        assert len(calls) == 1


class TestDataStats:
    """Tests for data_stats and format_bytes."""

    def test_format_bytes(self):
        assert format_bytes(0) == "0 Bytes"
        assert format_bytes(500) == "500 Bytes"
        assert format_bytes(1024) == "1 KB"
        assert format_bytes(1536) == "1.5 KB"
        assert format_bytes(3 * 1024 * 1024) == "3 MB"

    def test_empty(self):
        stats = data_stats([])
        assert stats.total_tasks == 0
        assert stats.last_modified == "Never"

    def test_counts_and_latest_creation(self, make_task):
        tasks = [
            make_task(status=TaskStatus.COMPLETED, created_date=datetime(2025, 3, 1, tzinfo=timezone.utc)),
            make_task(created_date=datetime(2025, 3, 5, 12, 0, tzinfo=timezone.utc)),
        ]
        stats = data_stats(tasks)
        assert (stats.total_tasks, stats.completed_tasks) == (2, 1)
        assert stats.last_modified == "2025-03-05T12:00:00.000Z"
        assert stats.data_size.endswith("Bytes") or stats.data_size.endswith("KB")
