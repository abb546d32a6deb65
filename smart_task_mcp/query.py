"""Search, filter and sort over a task snapshot. All functions are pure."""

from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, Field

from smart_task_mcp.enums import PRIORITY_RANK, Category, Priority, QueryMode, SortKey, TaskStatus
from smart_task_mcp.models.task import Task


class FilterCriteria(BaseModel):
    """Conjunctive filter; fields left as None (or an empty tag list) impose no constraint."""

    status: TaskStatus | None = None
    priority: Priority | None = None
    category: Category | None = None
    tags: list[str] | None = None

    def is_empty(self) -> bool:
        return self.status is None and self.priority is None and self.category is None and not self.tags


class TaskQuery(BaseModel):
    """A full list query: text search, filter criteria and ordering."""

    search: str = ""
    criteria: FilterCriteria = Field(default_factory=FilterCriteria)
    sort_by: SortKey | None = None
    ascending: bool = True
    mode: QueryMode = QueryMode.COMPOSE


def search_tasks(tasks: list[Task], query: str) -> list[Task]:
    """
    Case-insensitive substring match against title, description and tags.

    A blank query returns the input unchanged, in the same order.
    """
    if not query.strip():
        return tasks

    needle = query.lower()
    return [
        t
        for t in tasks
        if needle in t.title.lower() or needle in t.description.lower() or any(needle in tag.lower() for tag in t.tags)
    ]


def filter_tasks(tasks: list[Task], criteria: FilterCriteria) -> list[Task]:
    """Keep tasks matching every given criterion; ``tags`` matches on any shared tag."""
    result = tasks

    if criteria.status is not None:
        result = [t for t in result if t.status == criteria.status]

    if criteria.priority is not None:
        result = [t for t in result if t.priority == criteria.priority]

    if criteria.category is not None:
        result = [t for t in result if t.category == criteria.category]

    if criteria.tags:
        wanted = set(criteria.tags)
        result = [t for t in result if wanted.intersection(t.tags)]

    return result


def _title_key(task: Task) -> tuple[str, str]:
    # Case-insensitive first, raw title as tiebreak, close to localeCompare ordering
    return (task.title.casefold(), task.title)


_SORT_KEYS: dict[SortKey, Callable[[Task], Any]] = {
    SortKey.DUE_DATE: lambda t: t.due_date,
    SortKey.CREATED_DATE: lambda t: t.created_date,
    SortKey.PRIORITY: lambda t: PRIORITY_RANK[t.priority],
    SortKey.TITLE: _title_key,
}


def sort_tasks(tasks: list[Task], sort_by: SortKey, ascending: bool = True) -> list[Task]:
    """
    Return a new, stably sorted list.

    Priority sorts by rank (low < medium < high < urgent). With
    ``ascending=False`` the order is reversed but tasks that compare equal keep
    their input order.
    """
    return sorted(tasks, key=_SORT_KEYS[SortKey(sort_by)], reverse=not ascending)


def run_query(tasks: list[Task], query: TaskQuery) -> list[Task]:
    """
    Apply search, filter and sort from one snapshot.

    In ``compose`` mode the result is the intersection of the search and filter
    results. In ``filter_overrides`` mode the search term is dropped as soon as
    any filter criterion is present.
    """
    search = query.search
    if query.mode == QueryMode.FILTER_OVERRIDES and not query.criteria.is_empty():
        search = ""

    result = filter_tasks(search_tasks(tasks, search), query.criteria)

    if query.sort_by is not None:
        result = sort_tasks(result, query.sort_by, query.ascending)
    return result
