"""Aggregate reports over tasks.

The functions here are pure: they receive rows already fetched from the
entity store (anything with the right attributes works) and an explicit
``now``, and return plain dicts ready to serialize. Tasks are matched to their
team or project by identifier.
"""

import math
from collections import Counter
from datetime import UTC, datetime, timedelta
from typing import Any, Dict, List, Optional, Sequence

from teamtasks.errors import NotFoundError

ONE_DAY = timedelta(days=1)
LAST_WEEK = timedelta(days=7)


def require_rows(rows: Sequence[Any], message: str) -> Sequence[Any]:
    """Treat "no source rows at all" as not found rather than an empty report."""
    if not rows:
        raise NotFoundError(message)
    return rows


def as_utc(moment: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment


def remaining_days(task, now: datetime) -> int:
    """Whole days until the task is due, rounded up. Negative when overdue.

    The due date is ``created_at + time_to_complete`` days. It is never built as
    a datetime, so any duration works without overflowing.
    """
    elapsed = as_utc(now) - as_utc(task.created_at)
    return task.time_to_complete - math.floor(elapsed / ONE_DAY)


def closed_tasks_by_team(completed_tasks: Sequence[Any], teams: Sequence[Any]) -> List[Dict[str, Any]]:
    counts = Counter(task.team_id for task in completed_tasks)
    return [{"name": team.name, "completedTasks": counts[team.id]} for team in teams]


def pending_days_by_project(
    pending_tasks: Sequence[Any], projects: Sequence[Any], now: Optional[datetime] = None
) -> List[Dict[str, Any]]:
    """Worst-case remaining days per project.

    Overdue tasks do not take part in the maximum, so a project whose pending
    tasks are all overdue reports 0, same as a project with none.
    """
    now = now or datetime.now(UTC)
    worst: Dict[Any, int] = {}
    for task in pending_tasks:
        days = remaining_days(task, now)
        if days < 0:
            continue
        worst[task.project_id] = max(worst.get(task.project_id, 0), days)
    return [
        {"project": project.name, "remainingDaysToClose": worst.get(project.id, 0)}
        for project in projects
    ]


def last_week_cutoff(now: Optional[datetime] = None) -> datetime:
    return (now or datetime.now(UTC)) - LAST_WEEK
