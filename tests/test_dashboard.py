"""Tests for dashboard task selection and the completion toggle."""

from __future__ import annotations

import datetime as dt

from jobtrack.schemas import Task
from jobtrack.services.dashboard import TODAY_TASK_LIMIT, select_today_tasks, toggle_payload

TODAY = dt.date(2025, 8, 2)


def _task(id, due_date=None, status="pending", priority="medium", created_at=None) -> Task:
    return Task(id=id, title=f"Task {id}", due_date=due_date, status=status,
                priority=priority, created_at=created_at)


class TestSelectTodayTasks:
    """Tests for the dashboard's Today list."""

    def test_includes_due_today(self) -> None:
        tasks = [_task(1, "2025-08-02"), _task(2, "2025-08-03")]
        assert [t.id for t in select_today_tasks(tasks, TODAY)] == [1]

    def test_includes_open_overdue_only(self) -> None:
        tasks = [
            _task(1, "2025-07-30"),
            _task(2, "2025-07-30", status="completed"),
        ]
        assert [t.id for t in select_today_tasks(tasks, TODAY)] == [1]

    def test_includes_undated_created_today(self) -> None:
        tasks = [
            _task(1, created_at="2025-08-02T08:15:00"),
            _task(2, created_at="2025-08-01T08:15:00"),
            _task(3),
        ]
        assert [t.id for t in select_today_tasks(tasks, TODAY)] == [1]

    def test_due_date_with_time_component(self) -> None:
        tasks = [_task(1, "2025-08-02T00:00:00")]
        assert [t.id for t in select_today_tasks(tasks, TODAY)] == [1]

    def test_completed_last_then_priority(self) -> None:
        tasks = [
            _task(1, "2025-08-02", status="completed", priority="urgent"),
            _task(2, "2025-08-02", priority="low"),
            _task(3, "2025-08-02", priority="urgent"),
            _task(4, "2025-08-02", priority="high"),
            _task(5, "2025-08-02", priority=None),
        ]
        assert [t.id for t in select_today_tasks(tasks, TODAY)] == [3, 4, 2, 5, 1]

    def test_limited_to_five(self) -> None:
        tasks = [_task(i, "2025-08-02") for i in range(10)]
        assert len(select_today_tasks(tasks, TODAY)) == TODAY_TASK_LIMIT

    def test_empty(self) -> None:
        assert select_today_tasks([], TODAY) == []


class TestTogglePayload:
    """Tests for flipping task completion."""

    def test_complete_open_task(self) -> None:
        now = dt.datetime(2025, 8, 2, 9, 30)
        assert toggle_payload(_task(1, status="in_progress"), now) == {
            "status": "completed",
            "completed_at": "2025-08-02T09:30:00",
        }

    def test_reopen_completed_task(self) -> None:
        assert toggle_payload(_task(1, status="completed")) == {"status": "pending", "completed_at": None}
