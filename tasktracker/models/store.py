"""The task store: every task plus the audit history."""

from pydantic import BaseModel, Field

from tasktracker.models.history import HistoryEntry
from tasktracker.models.task import Task


class TaskStore(BaseModel):
    """Complete snapshot of a user's tasks and audit history.

    Instances are treated as values. The reducer always builds a new store
    instead of editing one in place.
    """

    tasks: list[Task] = Field(
        default_factory=list,
        description="Tasks in creation order",
    )
    history: list[HistoryEntry] = Field(
        default_factory=list,
        description="Append-only audit log, oldest first",
    )

    def find_task(self, task_id: int) -> Task | None:
        """Get a task by id."""
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def last_task_id(self) -> int:
        """Highest task id in the store, or 0 when empty."""
        return max((t.id for t in self.tasks), default=0)
