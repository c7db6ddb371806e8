"""Domain models for the task tracker."""

from tasktracker.models.actions import (
    Action,
    AddTask,
    ClearCompleted,
    DeleteTask,
    LoadState,
    ToggleComplete,
    ToggleStar,
    UpdateFields,
    parse_action,
)
from tasktracker.models.config import AppConfig, HistoryConfig
from tasktracker.models.history import HistoryAction, HistoryEntry
from tasktracker.models.stats import TaskStats
from tasktracker.models.store import TaskStore
from tasktracker.models.task import Priority, Task, TaskUpdate
from tasktracker.models.user import User

__all__ = [
    # Task
    "Priority",
    "Task",
    "TaskUpdate",
    # Store
    "TaskStore",
    "HistoryAction",
    "HistoryEntry",
    "TaskStats",
    # Actions
    "Action",
    "AddTask",
    "ClearCompleted",
    "DeleteTask",
    "LoadState",
    "ToggleComplete",
    "ToggleStar",
    "UpdateFields",
    "parse_action",
    # User
    "User",
    # Config
    "AppConfig",
    "HistoryConfig",
]
