"""Audit history entries."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from tasktracker.models.task import Task


class HistoryAction(str, Enum):
    """Kinds of mutation recorded in the audit log.

    Star toggling and full state loads are never recorded.
    """

    ADD = "ADD"
    TOGGLE = "TOGGLE"
    DELETE = "DELETE"
    UPDATE = "UPDATE"
    CLEAR_COMPLETED = "CLEAR_COMPLETED"


class HistoryEntry(BaseModel):
    """Immutable record of a past mutation.

    ADD and DELETE carry a snapshot of the task, TOGGLE and UPDATE carry the
    task id. A DELETE of an unknown id carries neither.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    action: HistoryAction
    task: Task | None = Field(default=None, alias="todo")
    task_id: int | None = Field(default=None, alias="todoId")
    timestamp: datetime
