"""Task model and the partial field set used for updates."""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class Priority(str, Enum):
    """Task priority levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def _blank_to_none(value):
    # Older exports store "" for an unset category or due date.
    if isinstance(value, str) and value == "":
        return None
    return value


def _date_part(value):
    # Browsers sometimes hand back a full ISO timestamp for a date input.
    if isinstance(value, str) and "T" in value:
        return value.split("T", 1)[0]
    return value


class Task(BaseModel):
    """A single trackable to-do item.

    Field names follow Python conventions; the aliases are the keys used in
    the exported JSON document and in the HTTP API.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(..., description="Unique id, monotonically increasing with creation time")
    text: str = Field(..., description="Task description")
    completed: bool = Field(default=False)
    starred: bool = Field(default=False)
    category: str | None = Field(default=None)
    priority: Priority = Field(default=Priority.MEDIUM)
    due_date: date | None = Field(default=None, alias="dueDate")
    notes: str | None = Field(default=None)
    created_at: datetime = Field(..., alias="createdAt")

    @field_validator("category", "due_date", "notes", mode="before")
    @classmethod
    def _empty_string_is_unset(cls, value):
        return _blank_to_none(value)

    @field_validator("due_date", mode="before")
    @classmethod
    def _accept_datetime_strings(cls, value):
        return _date_part(value)


# Fields a Task always carries a value for; an update may change them but
# never clear them.
REQUIRED_TASK_FIELDS = ("text", "completed", "starred", "priority")


class TaskUpdate(BaseModel):
    """Partial set of editable task fields.

    Only the fields that were explicitly provided are merged into the task,
    so ``TaskUpdate(category=None)`` clears the category while
    ``TaskUpdate()`` changes nothing. ``category``, ``due_date`` and
    ``notes`` may be cleared with ``None``; the other fields may not.
    ``id`` and ``created_at`` are not editable.
    """

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    text: str | None = None
    completed: bool | None = None
    starred: bool | None = None
    category: str | None = None
    priority: Priority | None = None
    due_date: date | None = Field(default=None, alias="dueDate")
    notes: str | None = None

    @field_validator("category", "due_date", "notes", mode="before")
    @classmethod
    def _empty_string_is_unset(cls, value):
        return _blank_to_none(value)

    @field_validator("due_date", mode="before")
    @classmethod
    def _accept_datetime_strings(cls, value):
        return _date_part(value)

    @model_validator(mode="after")
    def _required_fields_not_cleared(self):
        cleared = [
            name
            for name in REQUIRED_TASK_FIELDS
            if name in self.model_fields_set and getattr(self, name) is None
        ]
        if cleared:
            raise ValueError(f"{', '.join(cleared)} cannot be null")
        return self

    def changes(self) -> dict:
        """Return only the fields the caller set, keyed by attribute name."""
        return self.model_dump(exclude_unset=True)
