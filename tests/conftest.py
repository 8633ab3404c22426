"""Shared test fixtures and configuration."""

from __future__ import annotations

import json
import os
from typing import Callable, Dict, List, Tuple

import httpx
import pytest

os.environ.setdefault("JOBTRACK_API_BASE_URL", "http://tracker.test/api/v1")
os.environ.setdefault("JOBTRACK_LOG_LEVEL", "WARNING")

from jobtrack.schemas import CalendarEvent, Task
from jobtrack.services.api_client import TrackerClient

BASE_URL = "http://tracker.test/api/v1"


@pytest.fixture
def make_event() -> Callable[..., CalendarEvent]:
    """Build a CalendarEvent with sensible defaults."""
    counter = iter(range(1, 10_000))

    def _make(start_datetime="2025-08-02T10:00:00", **overrides) -> CalendarEvent:
        data = {
            "id": next(counter),
            "title": "Interview",
            "event_type": "interview",
            "start_datetime": start_datetime,
        }
        data.update(overrides)
        return CalendarEvent(**data)

    return _make


@pytest.fixture
def make_task() -> Callable[..., Task]:
    """Build a Task with sensible defaults."""
    counter = iter(range(100, 10_000))

    def _make(due_date="2025-08-02", **overrides) -> Task:
        data = {
            "id": next(counter),
            "title": "Prepare notes",
            "status": "pending",
            "priority": "medium",
            "due_date": due_date,
        }
        data.update(overrides)
        return Task(**data)

    return _make


class FakeTracker:
    """
    In-memory stand-in for the tracker API, served through httpx.MockTransport.

    Register responses with `add(method, path, status, body)`; every request is
    recorded in `requests`.
    """

    def __init__(self) -> None:
        self.routes: Dict[Tuple[str, str], Tuple[int, object]] = {}
        self.requests: List[httpx.Request] = []

    def add(self, method: str, path: str, status: int = 200, body: object = None) -> None:
        self.routes[(method, path)] = (status, body)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/api/v1")
        status, body = self.routes.get((request.method, path), (404, {"detail": "Not found"}))
        if isinstance(body, Exception):
            raise body
        if body is None:
            return httpx.Response(status)
        return httpx.Response(status, content=json.dumps(body), headers={"Content-Type": "application/json"})

    def client(self, token: str = "user-123") -> TrackerClient:
        return TrackerClient(token=token, base_url=BASE_URL, transport=httpx.MockTransport(self.handler))

    def bodies(self, method: str) -> List[dict]:
        return [json.loads(r.content) for r in self.requests if r.method == method and r.content]


@pytest.fixture
def tracker() -> FakeTracker:
    return FakeTracker()
