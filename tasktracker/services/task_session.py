"""TaskSession - one user's task store plus the dispatch/persist cycle.

Every change follows the same path: build an action, run it through the
reducer, replace the held store, then write the store to the persistence
gateway. Persistence is a separate step after the reduction; a gateway
error propagates to the caller after the in-memory store has already been
replaced.

Two sessions for the same user in different processes do not coordinate.
Whichever writes last wins.
"""

import logging
import threading
from dataclasses import dataclass
from datetime import date

from tasktracker.models.actions import (
    Action,
    AddTask,
    ClearCompleted,
    DeleteTask,
    LoadState,
    ToggleComplete,
    ToggleStar,
    UpdateFields,
)
from tasktracker.models.history import HistoryEntry
from tasktracker.models.stats import TaskStats
from tasktracker.models.store import TaskStore
from tasktracker.models.task import Priority, Task, TaskUpdate
from tasktracker.services.codec import ImportResult, export_snapshot, parse_snapshot
from tasktracker.services.history import recent_history
from tasktracker.services.persistence import PersistenceGateway, task_store_key
from tasktracker.services.query_engine import FilterMode, SortMode, view
from tasktracker.services.reducer import Clock, TaskReducer
from tasktracker.services.stats_aggregator import compute_stats

logger = logging.getLogger(__name__)

EMPTY_TEXT_MESSAGE = "Task text cannot be empty"
TASK_NOT_FOUND_MESSAGE = "Task not found"


@dataclass
class TaskResult:
    """Outcome of an add or update request."""

    success: bool
    task: Task | None = None
    error: str | None = None


class TaskSession:
    """Holds and persists one user's task store.

    Args:
        gateway: Storage for the exported store.
        user_id: Owner; namespaces the storage key.
        clock: Source of ids, ``created_at`` and history timestamps.
    """

    def __init__(self, gateway: PersistenceGateway, user_id: int, clock: Clock):
        self._gateway = gateway
        self._clock = clock
        self._reducer = TaskReducer(clock)
        self._lock = threading.Lock()
        self.user_id = user_id
        self.storage_key = task_store_key(user_id)
        self._state = TaskStore()
        self._load()

    @property
    def state(self) -> TaskStore:
        """The current store."""
        return self._state

    def _load(self) -> None:
        raw = self._gateway.get(self.storage_key)
        if raw is None:
            return
        result = parse_snapshot(raw)
        if not result.success:
            logger.warning(f"Stored tasks for user {self.user_id} unreadable: {result.error}")
            return
        self._state = self._reducer.reduce(self._state, LoadState(state=result.state))
        logger.info(f"Loaded {len(self._state.tasks)} tasks for user {self.user_id}")

    # =========================================================================
    # Dispatch
    # =========================================================================

    def dispatch(self, action: Action) -> TaskStore:
        """Apply an action, then persist the new store.

        Returns:
            The new store.
        """
        with self._lock:
            self._state = self._reducer.reduce(self._state, action)
            self._gateway.set(self.storage_key, export_snapshot(self._state))
            return self._state

    def _next_task_id(self) -> int:
        now_ms = int(self._clock().timestamp() * 1000)
        return max(now_ms, self._state.last_task_id() + 1)

    def add_task(
        self,
        text: str,
        category: str | None = None,
        priority: Priority = Priority.MEDIUM,
        due_date: date | None = None,
        notes: str | None = None,
    ) -> TaskResult:
        """Create a task from user input.

        Blank text is refused: nothing is created and nothing is recorded.
        """
        if not text or not text.strip():
            return TaskResult(success=False, error=EMPTY_TEXT_MESSAGE)

        task = Task(
            id=self._next_task_id(),
            text=text,
            category=category or None,
            priority=priority,
            due_date=due_date,
            notes=notes or None,
            created_at=self._clock(),
        )
        self.dispatch(AddTask(task=task))
        logger.debug(f"Added task {task.id} for user {self.user_id}")
        return TaskResult(success=True, task=task)

    def update_task(self, task_id: int, fields: TaskUpdate) -> TaskResult:
        """Merge edited fields into a task.

        A text edit to blank is refused. An unknown id is still dispatched
        (and recorded) but returns an unsuccessful result.
        """
        changes = fields.changes()
        if "text" in changes and not changes["text"].strip():
            return TaskResult(success=False, error=EMPTY_TEXT_MESSAGE)

        state = self.dispatch(UpdateFields(task_id=task_id, fields=fields))
        task = state.find_task(task_id)
        if task is None:
            return TaskResult(success=False, error=TASK_NOT_FOUND_MESSAGE)
        return TaskResult(success=True, task=task)

    def toggle_complete(self, task_id: int) -> Task | None:
        """Flip a task's completed flag; returns the task if it exists."""
        return self.dispatch(ToggleComplete(task_id=task_id)).find_task(task_id)

    def toggle_star(self, task_id: int) -> Task | None:
        """Flip a task's starred flag; returns the task if it exists."""
        return self.dispatch(ToggleStar(task_id=task_id)).find_task(task_id)

    def delete_task(self, task_id: int) -> bool:
        """Delete a task; returns whether it existed."""
        existed = self._state.find_task(task_id) is not None
        self.dispatch(DeleteTask(task_id=task_id))
        return existed

    def clear_completed(self) -> int:
        """Delete every completed task; returns how many were removed."""
        before = len(self._state.tasks)
        after = len(self.dispatch(ClearCompleted()).tasks)
        return before - after

    # =========================================================================
    # Views
    # =========================================================================

    def view(
        self,
        filter_mode: FilterMode = FilterMode.ALL,
        search_text: str = "",
        sort_mode: SortMode = SortMode.DATE,
    ) -> list[Task]:
        return view(self._state, filter_mode, search_text, sort_mode)

    def stats(self) -> TaskStats:
        return compute_stats(self._state, self._clock())

    def recent_history(self, limit: int = 10) -> list[HistoryEntry]:
        return recent_history(self._state, limit)

    # =========================================================================
    # Import / export
    # =========================================================================

    def export_snapshot(self) -> str:
        return export_snapshot(self._state)

    def export_filename(self, username: str) -> str:
        """Download name for an export, e.g. ``todos_alice_2024-05-01.json``."""
        return f"todos_{username}_{self._clock().date().isoformat()}.json"

    def import_snapshot(self, text: str | bytes) -> ImportResult:
        """Replace the whole store with an imported document.

        On a parse or shape failure the current store is left untouched and
        the failed result is returned.
        """
        result = parse_snapshot(text)
        if not result.success:
            return result
        self.dispatch(LoadState(state=result.state))
        logger.info(
            f"Imported {len(result.state.tasks)} tasks and "
            f"{len(result.state.history)} history entries for user {self.user_id}"
        )
        return result


class SessionManager:
    """Keeps one TaskSession per user so concurrent requests share it."""

    def __init__(self, gateway: PersistenceGateway, clock: Clock):
        self._gateway = gateway
        self._clock = clock
        self._sessions: dict[int, TaskSession] = {}
        self._lock = threading.Lock()

    def session_for(self, user_id: int) -> TaskSession:
        """Get or open the session for a user."""
        with self._lock:
            session = self._sessions.get(user_id)
            if session is None:
                session = TaskSession(self._gateway, user_id, self._clock)
                self._sessions[user_id] = session
            return session

    def close(self, user_id: int) -> None:
        """Drop a user's cached session (e.g. on logout)."""
        with self._lock:
            self._sessions.pop(user_id, None)
