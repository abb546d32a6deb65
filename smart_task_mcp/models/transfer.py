"""Models for backup, export and import."""

from pydantic import BaseModel, Field

from smart_task_mcp.models.task import CamelModel, Task


class BackupMetadata(CamelModel):
    total_tasks: int
    completed_tasks: int
    app_version: str


class Backup(CamelModel):
    """The JSON backup document."""

    version: str = "1.0"
    export_date: str
    tasks: list[Task] = Field(default_factory=list)
    metadata: BackupMetadata


class ImportResult(CamelModel):
    """Outcome of an import; failures are reported here rather than raised."""

    success: bool
    message: str
    imported_count: int | None = None


class DataStats(BaseModel):
    """Size and freshness of the stored collection."""

    total_tasks: int
    completed_tasks: int
    data_size: str
    last_modified: str
