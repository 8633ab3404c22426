"""Tests for calendar data loading and response-shape normalization."""

from __future__ import annotations

import datetime as dt
from unittest.mock import AsyncMock, MagicMock

import pytest

from jobtrack.services.api_client import TrackerAPIError, TrackerAuthError
from jobtrack.services.calendar_loader import (
    LOAD_FAILED_MESSAGE,
    extract_events,
    extract_tasks,
    load_calendar_data,
    load_day_data,
)

EVENT_A = {"id": 1, "title": "Phone screen", "start_datetime": "2025-08-02T10:00:00"}
EVENT_B = {"id": 2, "title": "Onsite", "start_datetime": "2025-08-14T13:00:00"}
TASK_A = {"id": 10, "title": "Research company", "due_date": "2025-08-01", "priority": "high"}


class TestExtractEvents:
    """Tests for month view shape handling."""

    def test_flat_list(self) -> None:
        assert extract_events([EVENT_A, EVENT_B]) == [EVENT_A, EVENT_B]

    def test_events_key(self) -> None:
        assert extract_events({"events": [EVENT_A]}) == [EVENT_A]

    def test_weeks_structure(self) -> None:
        data = {
            "weeks": [
                [{"date": "2025-08-01", "events": [EVENT_A]}, {"date": "2025-08-02", "events": []}],
                [{"date": "2025-08-14", "events": [EVENT_B]}, None, {"date": "2025-08-15"}],
            ]
        }
        assert extract_events(data) == [EVENT_A, EVENT_B]

    def test_weeks_with_malformed_entries(self) -> None:
        data = {"weeks": ["not a week", [{"events": "nope"}], [{"events": [EVENT_A]}]]}
        assert extract_events(data) == [EVENT_A]

    @pytest.mark.parametrize("data", [None, "oops", 42, {"items": [EVENT_A]}, {"events": "x"}])
    def test_unknown_shapes_are_empty(self, data) -> None:
        assert extract_events(data) == []

    def test_tasks_flat_or_wrapped(self) -> None:
        assert extract_tasks([TASK_A]) == [TASK_A]
        assert extract_tasks({"tasks": [TASK_A]}) == [TASK_A]
        assert extract_tasks({"detail": "error"}) == []


def _client(month_view=None, tasks=None) -> MagicMock:
    client = MagicMock()
    client.get_month_view = AsyncMock(return_value=month_view)
    client.list_tasks = AsyncMock(return_value=tasks)
    return client


class TestLoadCalendarData:
    """Tests for the parallel fetch with empty fallbacks."""

    async def test_loads_events_and_tasks(self) -> None:
        client = _client({"events": [EVENT_A, EVENT_B]}, [TASK_A])
        data = await load_calendar_data(client, 2025, 7)

        client.get_month_view.assert_awaited_once_with(2025, 8)
        assert [e.id for e in data.events] == [1, 2]
        assert [t.id for t in data.tasks] == [10]
        assert data.notifications == []

    async def test_invalid_items_are_skipped(self) -> None:
        client = _client([EVENT_A, {"title": "no id"}, "junk"], [TASK_A, {"id": "abc"}])
        data = await load_calendar_data(client, 2025, 7)
        assert [e.id for e in data.events] == [1]
        assert [t.id for t in data.tasks] == [10]

    async def test_failure_degrades_to_empty(self) -> None:
        client = _client(tasks=[TASK_A])
        client.get_month_view.side_effect = TrackerAPIError("boom", status_code=500)

        data = await load_calendar_data(client, 2025, 7)

        assert data.events == []
        assert data.tasks == []
        assert data.notifications == [LOAD_FAILED_MESSAGE]

    async def test_auth_failure_propagates(self) -> None:
        client = _client({"events": []})
        client.list_tasks.side_effect = TrackerAuthError()

        with pytest.raises(TrackerAuthError):
            await load_calendar_data(client, 2025, 7)

    async def test_month_rolls_to_one_based(self) -> None:
        client = _client([], [])
        await load_calendar_data(client, 2024, 11)
        client.get_month_view.assert_awaited_once_with(2024, 12)

    async def test_auth_failure_wins_over_other_failure(self) -> None:
        client = _client()
        client.get_month_view.side_effect = TrackerAPIError("boom", status_code=500)
        client.list_tasks.side_effect = TrackerAuthError()

        with pytest.raises(TrackerAuthError):
            await load_calendar_data(client, 2025, 7)


class TestLoadDayData:
    """Tests for loading a single day through the day view."""

    async def test_uses_day_view(self) -> None:
        client = MagicMock()
        client.get_day_view = AsyncMock(return_value={"date": "2025-08-02", "events": [EVENT_A]})
        client.list_tasks = AsyncMock(return_value=[TASK_A])

        data = await load_day_data(client, dt.date(2025, 8, 2))

        client.get_day_view.assert_awaited_once_with("2025-08-02")
        assert [e.id for e in data.events] == [1]
        assert [t.id for t in data.tasks] == [10]

    async def test_failure_degrades_to_empty(self) -> None:
        client = MagicMock()
        client.get_day_view = AsyncMock(side_effect=TrackerAPIError("boom", status_code=502))
        client.list_tasks = AsyncMock(return_value=[TASK_A])

        data = await load_day_data(client, dt.date(2025, 8, 2))

        assert data.tasks == []
        assert data.notifications == [LOAD_FAILED_MESSAGE]
