"""Query engine: filtered, searched and sorted views of a task store."""

from collections.abc import Sequence
from datetime import date
from enum import Enum

from tasktracker.models.store import TaskStore
from tasktracker.models.task import Priority, Task


class FilterMode(str, Enum):
    """Which tasks a view includes."""

    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"
    STARRED = "starred"


class SortMode(str, Enum):
    """How a view is ordered."""

    DATE = "date"
    """Newest first (descending id)."""

    PRIORITY = "priority"
    """High, then medium, then low."""

    NAME = "name"
    """Alphabetical by text."""

    DUE_DATE = "dueDate"
    """Earliest due date first, undated tasks last."""


PRIORITY_RANK: dict[Priority, int] = {
    Priority.HIGH: 0,
    Priority.MEDIUM: 1,
    Priority.LOW: 2,
}


def matches_filter(task: Task, filter_mode: FilterMode) -> bool:
    """Check a task against a filter mode."""
    if filter_mode == FilterMode.ACTIVE:
        return not task.completed
    if filter_mode == FilterMode.COMPLETED:
        return task.completed
    if filter_mode == FilterMode.STARRED:
        return task.starred
    return True


def matches_search(task: Task, search_text: str) -> bool:
    """Case-insensitive substring match on text or category.

    An empty search matches every task.
    """
    if not search_text:
        return True
    needle = search_text.casefold()
    if needle in task.text.casefold():
        return True
    return task.category is not None and needle in task.category.casefold()


def sort_tasks(tasks: Sequence[Task], sort_mode: SortMode) -> list[Task]:
    """Return a sorted copy of ``tasks``.

    All sorts are stable, so tasks that compare equal keep their incoming
    order.
    """
    if sort_mode == SortMode.PRIORITY:
        return sorted(tasks, key=lambda t: PRIORITY_RANK[t.priority])
    if sort_mode == SortMode.NAME:
        return sorted(tasks, key=lambda t: (t.text.casefold(), t.text))
    if sort_mode == SortMode.DUE_DATE:
        return sorted(tasks, key=_due_date_key)
    return sorted(tasks, key=lambda t: t.id, reverse=True)


def _due_date_key(task: Task) -> tuple[bool, date]:
    # Undated tasks sort after every dated one.
    if task.due_date is None:
        return (True, date.min)
    return (False, task.due_date)


def view(
    state: TaskStore,
    filter_mode: FilterMode = FilterMode.ALL,
    search_text: str = "",
    sort_mode: SortMode = SortMode.DATE,
) -> list[Task]:
    """Derive the display list for a store.

    Args:
        state: Store to read from. It is not modified.
        filter_mode: Status filter.
        search_text: Substring to look for in text or category.
        sort_mode: Ordering of the result.

    Returns:
        New list of the tasks passing both the filter and the search,
        in ``sort_mode`` order.
    """
    selected = [
        t for t in state.tasks if matches_filter(t, filter_mode) and matches_search(t, search_text)
    ]
    return sort_tasks(selected, sort_mode)
