"""Tests for search, filter and sort."""

from datetime import timedelta

from conftest import NOW

from smart_task_mcp.enums import Category, Priority, QueryMode, SortKey, TaskStatus
from smart_task_mcp.query import FilterCriteria, TaskQuery, filter_tasks, run_query, search_tasks, sort_tasks


class TestSearch:
    """Tests for search_tasks."""

    def test_empty_query_returns_input_unchanged(self, make_task):
        tasks = [make_task(title="b"), make_task(title="a"), make_task(title="c")]
        result = search_tasks(tasks, "")
        assert result == tasks
        assert [t.id for t in result] == [1, 2, 3]

    def test_blank_query_returns_input_unchanged(self, make_task):
        tasks = [make_task(), make_task()]
        assert search_tasks(tasks, "   ") == tasks

    def test_matches_title_case_insensitively(self, make_task):
        tasks = [make_task(title="Quarterly REPORT"), make_task(title="Groceries")]
        assert [t.title for t in search_tasks(tasks, "report")] == ["Quarterly REPORT"]

    def test_matches_description_and_tags(self, make_task):
        tasks = [
            make_task(title="One", description="call the dentist"),
            make_task(title="Two", tags=["Dental"]),
            make_task(title="Three"),
        ]
        assert [t.title for t in search_tasks(tasks, "DENT")] == ["One", "Two"]

    def test_preserves_order(self, make_task):
        tasks = [make_task(title="fix b"), make_task(title="other"), make_task(title="fix a")]
        assert [t.title for t in search_tasks(tasks, "fix")] == ["fix b", "fix a"]


class TestFilter:
    """Tests for filter_tasks."""

    def test_empty_criteria_keeps_everything(self, make_task):
        tasks = [make_task(), make_task()]
        assert filter_tasks(tasks, FilterCriteria()) == tasks
        assert FilterCriteria(tags=[]).is_empty()

    def test_criteria_are_conjunctive(self, make_task):
        tasks = [
            make_task(status=TaskStatus.PENDING, priority=Priority.HIGH, category=Category.WORK),
            make_task(status=TaskStatus.PENDING, priority=Priority.LOW, category=Category.WORK),
            make_task(status=TaskStatus.COMPLETED, priority=Priority.HIGH, category=Category.WORK),
            make_task(status=TaskStatus.PENDING, priority=Priority.HIGH, category=Category.HEALTH),
        ]
        criteria = FilterCriteria(status=TaskStatus.PENDING, priority=Priority.HIGH, category=Category.WORK)
        assert [t.id for t in filter_tasks(tasks, criteria)] == [1]

    def test_tags_match_any(self, make_task):
        tasks = [
            make_task(tags=["home"]),
            make_task(tags=["work", "q1"]),
            make_task(tags=[]),
        ]
        result = filter_tasks(tasks, FilterCriteria(tags=["q1", "home"]))
        assert [t.id for t in result] == [1, 2]


class TestSort:
    """Tests for sort_tasks."""

    def test_priority_ascending_puts_low_first(self, make_task):
        urgent = make_task(priority=Priority.URGENT)
        low = make_task(priority=Priority.LOW)
        result = sort_tasks([urgent, low], SortKey.PRIORITY, ascending=True)
        assert result == [low, urgent]

    def test_priority_descending_reverses(self, make_task):
        urgent = make_task(priority=Priority.URGENT)
        low = make_task(priority=Priority.LOW)
        result = sort_tasks([low, urgent], SortKey.PRIORITY, ascending=False)
        assert result == [urgent, low]

    def test_priority_rank_order(self, make_task):
        tasks = [make_task(priority=p) for p in (Priority.HIGH, Priority.LOW, Priority.URGENT, Priority.MEDIUM)]
        result = sort_tasks(tasks, SortKey.PRIORITY)
        assert [t.priority for t in result] == [Priority.LOW, Priority.MEDIUM, Priority.HIGH, Priority.URGENT]

    def test_sort_is_stable_both_directions(self, make_task):
        tasks = [make_task(priority=Priority.HIGH) for _ in range(3)]
        assert [t.id for t in sort_tasks(tasks, SortKey.PRIORITY)] == [1, 2, 3]
        assert [t.id for t in sort_tasks(tasks, SortKey.PRIORITY, ascending=False)] == [1, 2, 3]

    def test_sort_by_due_date(self, make_task):
        tasks = [
            make_task(due_date=NOW + timedelta(days=3)),
            make_task(due_date=NOW - timedelta(days=1)),
            make_task(due_date=NOW + timedelta(hours=1)),
        ]
        assert [t.id for t in sort_tasks(tasks, SortKey.DUE_DATE)] == [2, 3, 1]

    def test_sort_by_created_date_descending(self, make_task):
        tasks = [
            make_task(created_date=NOW - timedelta(days=3)),
            make_task(created_date=NOW - timedelta(days=1)),
        ]
        assert [t.id for t in sort_tasks(tasks, SortKey.CREATED_DATE, ascending=False)] == [2, 1]

    def test_sort_by_title_ignores_case(self, make_task):
        tasks = [make_task(title="banana"), make_task(title="Apple"), make_task(title="cherry")]
        assert [t.title for t in sort_tasks(tasks, SortKey.TITLE)] == ["Apple", "banana", "cherry"]

    def test_sort_accepts_wire_name(self, make_task):
        tasks = [make_task(title="b"), make_task(title="a")]
        assert [t.title for t in sort_tasks(tasks, "title")] == ["a", "b"]

    def test_sort_does_not_modify_input(self, make_task):
        tasks = [make_task(title="b"), make_task(title="a")]
        sort_tasks(tasks, SortKey.TITLE)
        assert [t.title for t in tasks] == ["b", "a"]


class TestRunQuery:
    """Tests for combining search, filter and sort."""

    def _tasks(self, make_task):
        return [
            make_task(title="Report draft", priority=Priority.HIGH),
            make_task(title="Report review", priority=Priority.LOW),
            make_task(title="Gym", priority=Priority.HIGH),
        ]

    def test_compose_intersects_search_and_filter(self, make_task):
        query = TaskQuery(search="report", criteria=FilterCriteria(priority=Priority.HIGH))
        assert [t.title for t in run_query(self._tasks(make_task), query)] == ["Report draft"]

    def test_filter_overrides_drops_search(self, make_task):
        query = TaskQuery(
            search="report",
            criteria=FilterCriteria(priority=Priority.HIGH),
            mode=QueryMode.FILTER_OVERRIDES,
        )
        assert [t.title for t in run_query(self._tasks(make_task), query)] == ["Report draft", "Gym"]

    def test_filter_overrides_without_criteria_still_searches(self, make_task):
        query = TaskQuery(search="gym", mode=QueryMode.FILTER_OVERRIDES)
        assert [t.title for t in run_query(self._tasks(make_task), query)] == ["Gym"]

    def test_query_sorts_result(self, make_task):
        query = TaskQuery(search="report", sort_by=SortKey.PRIORITY)
        assert [t.title for t in run_query(self._tasks(make_task), query)] == ["Report review", "Report draft"]
