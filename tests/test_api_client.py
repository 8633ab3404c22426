"""Tests for the tracker API client."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from jobtrack.services.api_client import TrackerAPIError, TrackerAuthError, TrackerClient, gather_calls


class TestTrackerClient:
    """Tests for request building and error mapping."""

    async def test_sends_bearer_token(self, tracker) -> None:
        tracker.add("GET", "/tasks/", body=[])
        await tracker.client(token="user-abc").list_tasks()

        request = tracker.requests[0]
        assert request.headers["Authorization"] == "Bearer user-abc"
        assert str(request.url) == "http://tracker.test/api/v1/tasks/"

    async def test_month_view_path(self, tracker) -> None:
        tracker.add("GET", "/calendar/view/month/2025/8", body={"weeks": []})
        data = await tracker.client().get_month_view(2025, 8)
        assert data == {"weeks": []}

    async def test_create_posts_json(self, tracker) -> None:
        tracker.add("POST", "/calendar/events/", body={"id": 5, "title": "Call"})
        result = await tracker.client().create_event({"title": "Call", "start_datetime": "2025-08-02T10:00:00"})

        assert result["id"] == 5
        assert tracker.bodies("POST") == [{"title": "Call", "start_datetime": "2025-08-02T10:00:00"}]

    async def test_update_uses_put(self, tracker) -> None:
        tracker.add("PUT", "/tasks/7", body={"id": 7, "status": "completed"})
        await tracker.client().update_task(7, {"status": "completed"})
        assert tracker.requests[0].method == "PUT"

    async def test_delete_with_empty_body(self, tracker) -> None:
        tracker.add("DELETE", "/job-applications/3", status=204)
        assert await tracker.client().delete_application(3) is None

    async def test_unauthorized_raises_auth_error(self, tracker) -> None:
        tracker.add("GET", "/tasks/", status=401, body={"detail": "Invalid token"})
        with pytest.raises(TrackerAuthError) as exc_info:
            await tracker.client().list_tasks()
        assert exc_info.value.status_code == 401

    async def test_server_error_carries_detail(self, tracker) -> None:
        tracker.add("GET", "/job-applications/stats", status=500, body={"detail": "db down"})
        with pytest.raises(TrackerAPIError) as exc_info:
            await tracker.client().get_application_stats()
        assert exc_info.value.status_code == 500
        assert exc_info.value.message == "db down"
        assert not isinstance(exc_info.value, TrackerAuthError)

    async def test_not_found(self, tracker) -> None:
        with pytest.raises(TrackerAPIError) as exc_info:
            await tracker.client().get_event(99)
        assert exc_info.value.status_code == 404

    async def test_connection_error(self, tracker) -> None:
        tracker.add("GET", "/tasks/", body=httpx.ConnectError("refused"))
        with pytest.raises(TrackerAPIError) as exc_info:
            await tracker.client().list_tasks()
        assert exc_info.value.status_code is None
        assert "not reachable" in exc_info.value.message

    async def test_timeout(self, tracker) -> None:
        tracker.add("GET", "/tasks/", body=httpx.ReadTimeout("slow"))
        with pytest.raises(TrackerAPIError) as exc_info:
            await tracker.client().list_tasks()
        assert "timed out" in exc_info.value.message

    async def test_scrape_job(self, tracker) -> None:
        tracker.add("POST", "/job-applications/scrape-job", body={"job_title": "Engineer"})
        result = await tracker.client().scrape_job("https://jobs.example.com/1")
        assert result == {"job_title": "Engineer"}
        assert tracker.bodies("POST") == [{"url": "https://jobs.example.com/1"}]

    def test_defaults_from_settings(self) -> None:
        client = TrackerClient(token="t")
        assert client.base_url == "http://tracker.test/api/v1"
        assert client.timeout == 10.0

    def test_base_url_trailing_slash_stripped(self) -> None:
        client = TrackerClient(token="t", base_url="http://example.com/api/v1/")
        assert client.base_url == "http://example.com/api/v1"

    async def test_day_view_path(self, tracker) -> None:
        tracker.add("GET", "/calendar/view/day/2025-08-02", body={"events": []})
        assert await tracker.client().get_day_view("2025-08-02") == {"events": []}

    async def test_application_with_follow_ups(self, tracker) -> None:
        tracker.add("GET", "/job-applications/4/with-follow-ups", body={"id": 4, "follow_ups": []})
        assert await tracker.client().get_application_with_follow_ups(4) == {"id": 4, "follow_ups": []}

    async def test_add_follow_up_posts_json(self, tracker) -> None:
        tracker.add("POST", "/job-applications/4/follow-ups", body={"id": 1, "title": "Phone screen"})
        await tracker.client().add_follow_up(4, {"title": "Phone screen", "status": "Pending"})
        assert tracker.bodies("POST") == [{"title": "Phone screen", "status": "Pending"}]


class TestGatherCalls:
    """Tests for running tracker calls concurrently."""

    async def test_results_in_call_order(self) -> None:
        async def value(v, delay):
            await asyncio.sleep(delay)
            return v

        assert await gather_calls(value("a", 0.02), value("b", 0)) == ["a", "b"]

    async def test_auth_error_wins(self) -> None:
        async def fail(exc):
            raise exc

        with pytest.raises(TrackerAuthError):
            await gather_calls(fail(TrackerAPIError("boom", 500)), fail(TrackerAuthError()))

    async def test_first_failure_raised_after_all_calls_finish(self) -> None:
        finished = []

        async def fail(message):
            raise TrackerAPIError(message, 500)

        async def slow():
            await asyncio.sleep(0.02)
            finished.append("slow")
            return "done"

        with pytest.raises(TrackerAPIError) as exc_info:
            await gather_calls(fail("first"), slow(), fail("second"))

        assert exc_info.value.message == "first"
        assert finished == ["slow"]
