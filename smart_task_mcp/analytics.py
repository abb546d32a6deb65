"""
Productivity analytics over a task snapshot.

Everything here is a pure function of ``(tasks, now)``: no clock reads, no
randomness, no state. Calendar days and hours of day are taken in ``now``'s
timezone. ``compute_metrics`` and ``task_stats`` treat a naive ``now`` as
UTC; the individual metric functions expect an aware one.
"""

from __future__ import annotations

import math
from collections import Counter
from datetime import date, datetime, timedelta, timezone

from smart_task_mcp.enums import BurnoutRisk, Category, Priority, TaskStatus
from smart_task_mcp.models.analytics import (
    CategoryShare,
    DailyProgress,
    MetricsReport,
    MonthlyTrend,
    PriorityShare,
    TaskStats,
)
from smart_task_mcp.models.task import Task

EMPTY_RECOMMENDATION = "Start adding tasks to get personalized recommendations!"
REST_RECOMMENDATION = "Take a break! Consider reducing your workload and focusing on high-priority tasks."
PEAK_HOUR_RECOMMENDATION = "Your peak productivity is around {hour}. Schedule important tasks during this time!"
GENERIC_RECOMMENDATION = "Track your task completion times to discover your peak productivity hours!"

WEEK_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
MONTH_LABELS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

CATEGORY_ORDER = (Category.WORK, Category.PERSONAL, Category.HEALTH, Category.LEARNING, Category.OTHER)
PRIORITY_ORDER = (Priority.URGENT, Priority.HIGH, Priority.MEDIUM, Priority.LOW)

# Productivity score weights
COMPLETION_WEIGHT = 0.4
TIMELINESS_WEIGHT = 0.3
EFFICIENCY_WEIGHT = 0.2
CONSISTENCY_WEIGHT = 0.1

EFFICIENCY_CAP = 200
STREAK_WINDOW_DAYS = 30
TREND_MONTHS = 6


# ============================================================================
# Helpers
# ============================================================================


def js_round(value: float, digits: int = 0) -> float:
    """Round half up, as JavaScript's Math.round does (Python's round() is banker's rounding)."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def _pct(part: int, whole: int) -> int:
    return int(js_round(part / whole * 100)) if whole else 0


def _aware(now: datetime) -> datetime:
    return now.replace(tzinfo=timezone.utc) if now.tzinfo is None else now


def _local(value: datetime, now: datetime) -> datetime:
    return value.astimezone(now.tzinfo)


def _completed(tasks: list[Task]) -> list[Task]:
    return [t for t in tasks if t.status == TaskStatus.COMPLETED]


def _overdue(tasks: list[Task], now: datetime) -> list[Task]:
    return [t for t in tasks if t.status != TaskStatus.COMPLETED and t.due_date < now]


def _completions_by_day(tasks: list[Task], now: datetime) -> Counter[date]:
    """Completed tasks counted by the calendar day of their due date."""
    return Counter(_local(t.due_date, now).date() for t in _completed(tasks))


def _timed(tasks: list[Task]) -> list[Task]:
    """Tasks with both a positive estimate and a positive actual time."""
    return [t for t in tasks if t.estimated_hours and t.actual_hours and t.estimated_hours > 0 and t.actual_hours > 0]


def format_hour(hour: int) -> str:
    """12-hour clock label: 0 -> '12:00 AM', 13 -> '1:00 PM'."""
    ampm = "PM" if hour >= 12 else "AM"
    display = 12 if hour == 0 else hour - 12 if hour > 12 else hour
    return f"{display}:00 {ampm}"


# ============================================================================
# Individual metrics
# ============================================================================


def average_time_per_task(tasks: list[Task]) -> float:
    """Mean actual hours over tasks that logged time, to one decimal."""
    hours = [t.actual_hours for t in tasks if t.actual_hours and t.actual_hours > 0]
    if not hours:
        return 0
    return js_round(sum(hours) / len(hours), 1)


def time_efficiency(tasks: list[Task]) -> int:
    """Mean of estimate/actual as a percentage, each capped at 200. 100 when nothing qualifies."""
    timed = _timed(tasks)
    if not timed:
        return 100
    efficiencies = [min(t.estimated_hours / t.actual_hours * 100, EFFICIENCY_CAP) for t in timed]
    return int(js_round(sum(efficiencies) / len(efficiencies)))


def estimation_accuracy(tasks: list[Task]) -> int:
    timed = _timed(tasks)
    if not timed:
        return 0
    accuracies = [
        max(0.0, 100 - abs(t.estimated_hours - t.actual_hours) / t.estimated_hours * 100) for t in timed
    ]
    return int(js_round(sum(accuracies) / len(accuracies)))


def timeliness_score(tasks: list[Task], now: datetime) -> float:
    """Percentage of completed tasks whose due date has not passed. 100 with no completed tasks."""
    completed = _completed(tasks)
    if not completed:
        return 100
    on_time = [t for t in completed if t.due_date >= now]
    return len(on_time) / len(completed) * 100


def consistency_score(tasks: list[Task], now: datetime) -> int:
    """100 minus ten times the variance of daily completions over the trailing 7 days, floored at 0."""
    by_day = _completions_by_day(tasks, now)
    today = now.date()
    counts = [by_day.get(today - timedelta(days=i), 0) for i in range(7)]
    mean = sum(counts) / 7
    variance = sum((c - mean) ** 2 for c in counts) / 7
    return int(js_round(max(0.0, 100 - variance * 10)))


def productivity_score(tasks: list[Task], now: datetime) -> int:
    completion = len(_completed(tasks)) / len(tasks) * 100 if tasks else 0
    return int(
        js_round(
            completion * COMPLETION_WEIGHT
            + timeliness_score(tasks, now) * TIMELINESS_WEIGHT
            + time_efficiency(tasks) * EFFICIENCY_WEIGHT
            + consistency_score(tasks, now) * CONSISTENCY_WEIGHT
        )
    )


def streak_days(tasks: list[Task], now: datetime) -> int:
    """
    Consecutive days, counting back from today, with at least one completion.

    Today may be empty without breaking the streak; any earlier gap ends it.
    Looks back at most 30 days.
    """
    days = set(_completions_by_day(tasks, now))
    today = now.date()
    streak = 0
    for i in range(STREAK_WINDOW_DAYS):
        if today - timedelta(days=i) in days:
            streak += 1
        elif i > 0:
            break
    return streak


def most_productive_hour(tasks: list[Task], now: datetime) -> str:
    """Hour of day with the most task creations (earliest hour wins ties), or 'N/A'."""
    counts = Counter(_local(t.created_date, now).hour for t in tasks)
    best_hour, best_count = 0, 0
    for hour in range(24):
        if counts[hour] > best_count:
            best_hour, best_count = hour, counts[hour]
    if best_count == 0:
        return "N/A"
    return format_hour(best_hour)


def categories_breakdown(tasks: list[Task]) -> list[CategoryShare]:
    counts = Counter(t.category for t in tasks)
    return [
        CategoryShare(category=c, count=counts[c], percentage=_pct(counts[c], len(tasks)))
        for c in CATEGORY_ORDER
        if counts[c] > 0
    ]


def priority_breakdown(tasks: list[Task]) -> list[PriorityShare]:
    counts = Counter(t.priority for t in tasks)
    return [
        PriorityShare(priority=p, count=counts[p], percentage=_pct(counts[p], len(tasks)))
        for p in PRIORITY_ORDER
        if counts[p] > 0
    ]


def weekly_progress(tasks: list[Task], now: datetime) -> list[DailyProgress]:
    """
    Completed/created counts for the trailing 7 days, oldest first.

    The ``day`` labels are positional (Mon..Sun) and do not follow the real
    weekday; use ``date``/``weekday`` for that.
    """
    completed_by_day = _completions_by_day(tasks, now)
    created_by_day = Counter(_local(t.created_date, now).date() for t in tasks)
    today = now.date()

    progress: list[DailyProgress] = []
    for index, label in enumerate(WEEK_LABELS):
        day = today - timedelta(days=6 - index)
        progress.append(
            DailyProgress(
                day=label,
                date=day.isoformat(),
                weekday=WEEK_LABELS[day.weekday()],
                completed=completed_by_day.get(day, 0),
                created=created_by_day.get(day, 0),
            )
        )
    return progress


def monthly_trends(tasks: list[Task], now: datetime) -> list[MonthlyTrend]:
    """For the 6 months ending with the current one: share of that month's new tasks now completed."""
    months: list[tuple[int, int]] = []
    year, month = now.year, now.month
    for _ in range(TREND_MONTHS):
        months.append((year, month))
        year, month = (year - 1, 12) if month == 1 else (year, month - 1)
    months.reverse()

    created: Counter[tuple[int, int]] = Counter()
    completed: Counter[tuple[int, int]] = Counter()
    for t in tasks:
        local = _local(t.created_date, now)
        key = (local.year, local.month)
        created[key] += 1
        if t.status == TaskStatus.COMPLETED:
            completed[key] += 1

    return [
        MonthlyTrend(
            month=MONTH_LABELS[m - 1],
            year=y,
            created=created[(y, m)],
            completed=completed[(y, m)],
            productivity=_pct(completed[(y, m)], created[(y, m)]),
        )
        for y, m in months
    ]


def burnout_risk(tasks: list[Task], now: datetime) -> BurnoutRisk:
    """Tasks created in the last 7 days plus twice the overdue count: >15 high, >8 medium."""
    week = timedelta(days=7)
    workload = sum(1 for t in tasks if now - t.created_date <= week)
    stress = len(_overdue(tasks, now)) * 2
    total = workload + stress

    if total > 15:
        return BurnoutRisk.HIGH
    if total > 8:
        return BurnoutRisk.MEDIUM
    return BurnoutRisk.LOW


def focus_time_recommendation(risk: BurnoutRisk, peak_hour: str) -> str:
    if risk == BurnoutRisk.HIGH:
        return REST_RECOMMENDATION
    if peak_hour != "N/A":
        return PEAK_HOUR_RECOMMENDATION.format(hour=peak_hour)
    return GENERIC_RECOMMENDATION


# ============================================================================
# Reports
# ============================================================================


def compute_metrics(tasks: list[Task], now: datetime) -> MetricsReport:
    """
    Build the full metrics report for a snapshot.

    Args:
        tasks: snapshot to analyse (not modified)
        now: reference time; the report depends on nothing else

    Returns:
        MetricsReport; for an empty snapshot every count is 0, lists are empty,
        most_productive_hour is 'N/A' and burnout_risk is low
    """
    if not tasks:
        return MetricsReport(focus_time_recommendation=EMPTY_RECOMMENDATION)

    now = _aware(now)
    completed = _completed(tasks)
    risk = burnout_risk(tasks, now)
    peak_hour = most_productive_hour(tasks, now)

    return MetricsReport(
        total_tasks=len(tasks),
        completed_tasks=len(completed),
        completion_rate=_pct(len(completed), len(tasks)),
        average_time_per_task=average_time_per_task(tasks),
        productivity_score=productivity_score(tasks, now),
        timeliness_score=int(js_round(timeliness_score(tasks, now))),
        consistency_score=consistency_score(tasks, now),
        streak_days=streak_days(tasks, now),
        overdue_tasks=len(_overdue(tasks, now)),
        time_efficiency=time_efficiency(tasks),
        most_productive_hour=peak_hour,
        categories_breakdown=categories_breakdown(tasks),
        priority_breakdown=priority_breakdown(tasks),
        weekly_progress=weekly_progress(tasks, now),
        monthly_trends=monthly_trends(tasks, now),
        estimation_accuracy=estimation_accuracy(tasks),
        burnout_risk=risk,
        focus_time_recommendation=focus_time_recommendation(risk, peak_hour),
    )


def task_stats(tasks: list[Task], now: datetime) -> TaskStats:
    """Counts by status plus overdue."""
    now = _aware(now)
    by_status = Counter(t.status for t in tasks)
    return TaskStats(
        total=len(tasks),
        completed=by_status[TaskStatus.COMPLETED],
        pending=by_status[TaskStatus.PENDING],
        in_progress=by_status[TaskStatus.IN_PROGRESS],
        cancelled=by_status[TaskStatus.CANCELLED],
        overdue=len(_overdue(tasks, now)),
    )
