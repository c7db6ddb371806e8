"""Read-only views of the audit history."""

from tasktracker.models.history import HistoryEntry
from tasktracker.models.store import TaskStore


def recent_history(state: TaskStore, limit: int = 10) -> list[HistoryEntry]:
    """Return the last ``limit`` entries, newest first."""
    if limit <= 0:
        return []
    return list(reversed(state.history[-limit:]))
