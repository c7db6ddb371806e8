"""Stats aggregator: progress counters for a task store.

Counters are recomputed from scratch on every call. That is linear in the
number of tasks, which is fine for a personal list but will not scale to
very large stores.
"""

import math
from datetime import datetime, time

from tasktracker.models.stats import TaskStats
from tasktracker.models.store import TaskStore
from tasktracker.models.task import Priority, Task


def is_overdue(task: Task, now: datetime) -> bool:
    """True when an active task's due date lies before ``now``.

    A due date counts from the start of that day, so a task due today is
    overdue as soon as the day has begun.
    """
    if task.completed or task.due_date is None:
        return False
    due = datetime.combine(task.due_date, time.min, tzinfo=now.tzinfo)
    return due < now


def progress_percent(completed: int, total: int) -> int:
    """Completed share as a whole percentage, rounding halves up."""
    if total == 0:
        return 0
    return math.floor(completed / total * 100 + 0.5)


def compute_stats(state: TaskStore, now: datetime) -> TaskStats:
    """Compute aggregate counters for ``state``.

    Args:
        state: Store to summarize.
        now: Current time, used for the overdue count.
    """
    total = len(state.tasks)
    completed = sum(1 for t in state.tasks if t.completed)
    return TaskStats(
        total=total,
        completed=completed,
        active=total - completed,
        progress=progress_percent(completed, total),
        high_priority_active=sum(
            1 for t in state.tasks if not t.completed and t.priority == Priority.HIGH
        ),
        overdue_active=sum(1 for t in state.tasks if is_overdue(t, now)),
        starred=sum(1 for t in state.tasks if t.starred),
    )
