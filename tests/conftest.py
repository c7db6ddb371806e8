"""Pytest configuration and shared fixtures for task tracker tests."""

from datetime import date, datetime, timedelta

import pytest

from tasktracker.models import Priority, Task, TaskStore
from tasktracker.services.config_service import reset_config_service


class FixedClock:
    """Deterministic clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float = 1.0) -> None:
        self.now = self.now + timedelta(seconds=seconds)


@pytest.fixture
def clock():
    """A clock frozen at 2024-05-01 12:00."""
    return FixedClock(datetime(2024, 5, 1, 12, 0, 0))


@pytest.fixture(autouse=True)
def reset_singleton():
    """Reset the config service between tests."""
    reset_config_service()
    yield
    reset_config_service()


def make_task(
    task_id: int,
    text: str = "Task",
    *,
    completed: bool = False,
    starred: bool = False,
    category: str | None = None,
    priority: Priority = Priority.MEDIUM,
    due_date: date | None = None,
    notes: str | None = None,
) -> Task:
    """Build a task with sensible defaults."""
    return Task(
        id=task_id,
        text=text,
        completed=completed,
        starred=starred,
        category=category,
        priority=priority,
        due_date=due_date,
        notes=notes,
        created_at=datetime(2024, 5, 1, 9, 0, 0),
    )


@pytest.fixture
def scenario_store():
    """Three tasks: A high/active, B low/completed, C medium/active due yesterday."""
    return TaskStore(
        tasks=[
            make_task(1, "A", priority=Priority.HIGH),
            make_task(2, "B", priority=Priority.LOW, completed=True),
            make_task(3, "C", priority=Priority.MEDIUM, due_date=date(2024, 4, 30)),
        ]
    )
