"""Task reducer: the only way a task store changes.

``TaskReducer.reduce`` maps a store and an action to a new store. It never
edits its input, never reads the wall clock (timestamps come from the clock
passed in) and never raises for ids that are not in the store.

Per-action behavior:

==================  ===========================================  =============
Action              Effect                                       History entry
==================  ===========================================  =============
ADD_TASK            append task                                  ADD (snapshot)
TOGGLE_COMPLETE     flip ``completed`` (no-op if id unknown)     TOGGLE (id)
DELETE              remove task (no-op if id unknown)            DELETE (snapshot or empty)
UPDATE_FIELDS       merge fields (no-op if id unknown)           UPDATE (id)
TOGGLE_STAR         flip ``starred`` (no-op if id unknown)       none
CLEAR_COMPLETED     drop completed tasks, keep order             CLEAR_COMPLETED
LOAD_STATE          replace the whole store, history included    none
==================  ===========================================  =============
"""

import logging
from collections.abc import Callable
from datetime import datetime
from typing import assert_never

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
from tasktracker.models.history import HistoryAction, HistoryEntry
from tasktracker.models.store import TaskStore
from tasktracker.models.task import Task

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class TaskReducer:
    """Applies actions to task stores.

    Args:
        clock: Returns the timestamp recorded on history entries.
    """

    def __init__(self, clock: Clock):
        self._clock = clock

    def reduce(self, state: TaskStore, action: Action) -> TaskStore:
        """Return the store that results from applying ``action`` to ``state``."""
        logger.debug(f"Reducing {action.type} on {len(state.tasks)} tasks")

        match action:
            case AddTask(task=task):
                return self._next(
                    state,
                    [*state.tasks, task],
                    HistoryEntry(action=HistoryAction.ADD, task=task, timestamp=self._clock()),
                )

            case ToggleComplete(task_id=task_id):
                tasks = _replace_task(
                    state.tasks, task_id, lambda t: t.model_copy(update={"completed": not t.completed})
                )
                return self._next(
                    state,
                    tasks,
                    HistoryEntry(action=HistoryAction.TOGGLE, task_id=task_id, timestamp=self._clock()),
                )

            case DeleteTask(task_id=task_id):
                deleted = state.find_task(task_id)
                return self._next(
                    state,
                    [t for t in state.tasks if t.id != task_id],
                    HistoryEntry(action=HistoryAction.DELETE, task=deleted, timestamp=self._clock()),
                )

            case UpdateFields(task_id=task_id, fields=fields):
                changes = fields.changes()
                tasks = _replace_task(state.tasks, task_id, lambda t: t.model_copy(update=changes))
                return self._next(
                    state,
                    tasks,
                    HistoryEntry(action=HistoryAction.UPDATE, task_id=task_id, timestamp=self._clock()),
                )

            case ToggleStar(task_id=task_id):
                # Starring is deliberately not recorded in the audit log.
                tasks = _replace_task(
                    state.tasks, task_id, lambda t: t.model_copy(update={"starred": not t.starred})
                )
                return TaskStore(tasks=tasks, history=list(state.history))

            case ClearCompleted():
                return self._next(
                    state,
                    [t for t in state.tasks if not t.completed],
                    HistoryEntry(action=HistoryAction.CLEAR_COMPLETED, timestamp=self._clock()),
                )

            case LoadState(state=loaded):
                return loaded

            case _:
                assert_never(action)

    @staticmethod
    def _next(state: TaskStore, tasks: list[Task], entry: HistoryEntry) -> TaskStore:
        return TaskStore(tasks=tasks, history=[*state.history, entry])


def _replace_task(
    tasks: list[Task], task_id: int, change: Callable[[Task], Task]
) -> list[Task]:
    """Copy of ``tasks`` with the matching task swapped for ``change(task)``."""
    return [change(t) if t.id == task_id else t for t in tasks]
