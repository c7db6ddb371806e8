"""Aggregate task statistics."""

from pydantic import BaseModel, Field


class TaskStats(BaseModel):
    """Counters derived from a task store.

    Attributes:
        total: Number of tasks.
        completed: Completed tasks.
        active: Tasks not yet completed.
        progress: Completed share as a whole percentage (0 when empty).
        high_priority_active: Active tasks with high priority.
        overdue_active: Active tasks whose due date has passed.
        starred: Starred tasks, completed or not.
    """

    total: int = 0
    completed: int = 0
    active: int = 0
    progress: int = Field(default=0, ge=0, le=100)
    high_priority_active: int = 0
    overdue_active: int = 0
    starred: int = 0
