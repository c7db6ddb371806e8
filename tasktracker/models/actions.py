"""Actions accepted by the reducer.

Every action kind is its own model tagged by a literal ``type`` field, and
``Action`` is the closed union of them. Raw dicts (e.g. from a request body)
can be parsed into the right variant with ``parse_action``.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from tasktracker.models.store import TaskStore
from tasktracker.models.task import Task, TaskUpdate


class _ActionBase(BaseModel):
    model_config = ConfigDict(frozen=True)


class AddTask(_ActionBase):
    """Append a fully formed task (id already assigned)."""

    type: Literal["ADD_TASK"] = "ADD_TASK"
    task: Task


class ToggleComplete(_ActionBase):
    """Flip ``completed`` on the task with the given id."""

    type: Literal["TOGGLE_COMPLETE"] = "TOGGLE_COMPLETE"
    task_id: int


class DeleteTask(_ActionBase):
    """Remove the task with the given id."""

    type: Literal["DELETE"] = "DELETE"
    task_id: int


class UpdateFields(_ActionBase):
    """Merge a partial field set into the task with the given id."""

    type: Literal["UPDATE_FIELDS"] = "UPDATE_FIELDS"
    task_id: int
    fields: TaskUpdate


class ToggleStar(_ActionBase):
    """Flip ``starred`` on the task with the given id."""

    type: Literal["TOGGLE_STAR"] = "TOGGLE_STAR"
    task_id: int


class ClearCompleted(_ActionBase):
    """Drop every completed task."""

    type: Literal["CLEAR_COMPLETED"] = "CLEAR_COMPLETED"


class LoadState(_ActionBase):
    """Replace the whole store."""

    type: Literal["LOAD_STATE"] = "LOAD_STATE"
    state: TaskStore


Action = Annotated[
    AddTask | ToggleComplete | DeleteTask | UpdateFields | ToggleStar | ClearCompleted | LoadState,
    Field(discriminator="type"),
]

_action_adapter: TypeAdapter[Action] = TypeAdapter(Action)


def parse_action(data: dict) -> Action:
    """Validate a raw dict into the matching action variant.

    Raises:
        pydantic.ValidationError: If ``type`` is unknown or the payload is
            malformed.
    """
    return _action_adapter.validate_python(data)
