"""Tests for the stats aggregator and history view."""

from datetime import date, datetime

from tasktracker.models import HistoryAction, HistoryEntry, Priority, TaskStore
from tasktracker.services.history import recent_history
from tasktracker.services.stats_aggregator import compute_stats, is_overdue, progress_percent

from conftest import make_task

NOW = datetime(2024, 5, 1, 12, 0, 0)


class TestComputeStats:
    """Tests for compute_stats."""

    def test_empty_store(self):
        stats = compute_stats(TaskStore(), NOW)

        assert stats.total == 0
        assert stats.progress == 0
        assert stats.completed + stats.active == stats.total

    def test_scenario(self, scenario_store):
        """The three-task scenario yields the documented counters."""
        stats = compute_stats(scenario_store, NOW)

        assert stats.model_dump() == {
            "total": 3,
            "completed": 1,
            "active": 2,
            "progress": 33,
            "high_priority_active": 1,
            "overdue_active": 1,
            "starred": 0,
        }

    def test_completed_high_priority_not_counted(self):
        store = TaskStore(tasks=[make_task(1, priority=Priority.HIGH, completed=True)])
        assert compute_stats(store, NOW).high_priority_active == 0

    def test_starred_counts_completed_tasks_too(self):
        store = TaskStore(
            tasks=[make_task(1, starred=True, completed=True), make_task(2, starred=True)]
        )
        assert compute_stats(store, NOW).starred == 2


class TestOverdue:
    """Tests for overdue detection."""

    def test_past_due_is_overdue(self):
        assert is_overdue(make_task(1, due_date=date(2024, 4, 30)), NOW) is True

    def test_future_due_is_not_overdue(self):
        assert is_overdue(make_task(1, due_date=date(2024, 5, 2)), NOW) is False

    def test_due_today_counts_once_day_started(self):
        assert is_overdue(make_task(1, due_date=date(2024, 5, 1)), NOW) is True
        assert is_overdue(make_task(1, due_date=date(2024, 5, 1)), datetime(2024, 5, 1)) is False

    def test_completed_is_never_overdue(self):
        task = make_task(1, due_date=date(2020, 1, 1), completed=True)
        assert is_overdue(task, NOW) is False


class TestProgress:
    """Tests for progress rounding."""

    def test_rounds_half_up(self):
        assert progress_percent(1, 8) == 13
        assert progress_percent(1, 3) == 33
        assert progress_percent(2, 3) == 67

    def test_zero_total(self):
        assert progress_percent(0, 0) == 0


class TestRecentHistory:
    """Tests for the newest-first history slice."""

    def _store(self, n: int) -> TaskStore:
        return TaskStore(
            history=[
                HistoryEntry(action=HistoryAction.TOGGLE, task_id=i, timestamp=NOW)
                for i in range(n)
            ]
        )

    def test_returns_last_n_newest_first(self):
        entries = recent_history(self._store(15), 10)
        assert [e.task_id for e in entries] == list(range(14, 4, -1))

    def test_shorter_history(self):
        assert [e.task_id for e in recent_history(self._store(3), 10)] == [2, 1, 0]

    def test_does_not_prune(self):
        store = self._store(15)
        recent_history(store, 5)
        assert len(store.history) == 15

    def test_zero_limit(self):
        assert recent_history(self._store(3), 0) == []
