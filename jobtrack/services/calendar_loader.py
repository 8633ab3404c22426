"""
JobTrack - Calendar data loading.

Fetches the displayed month's (or one day's) events and the full task list
from the tracker API in parallel, and hands the calendar aggregator plain
lists.

The calendar view endpoints have returned three shapes over time:
    [event, ...]
    {"events": [event, ...]}
    {"weeks": [[{"date": ..., "events": [event, ...]}, ...], ...]}
All three are flattened to a list of events. Anything else is treated as empty.

If either fetch fails, both collections fall back to empty lists and a
notification is returned, so the grid still renders.
"""
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Awaitable, List
import logging

from ..schemas import CalendarEvent, Task
from .api_client import TrackerClient, TrackerAPIError, TrackerAuthError, gather_calls
from .payloads import unwrap_list, parse_models

logger = logging.getLogger("jobtrack.calendar")

LOAD_FAILED_MESSAGE = "Failed to load calendar data"


@dataclass
class CalendarData:
    events: List[CalendarEvent] = field(default_factory=list)
    tasks: List[Task] = field(default_factory=list)
    notifications: List[str] = field(default_factory=list)


def extract_events(data: Any) -> List[dict]:
    """Flatten any known calendar view shape into a list of raw event dicts."""
    if isinstance(data, dict) and isinstance(data.get("weeks"), list):
        events = []
        for week in data["weeks"]:
            if not isinstance(week, list):
                continue
            for day in week:
                if isinstance(day, dict) and isinstance(day.get("events"), list):
                    events.extend(day["events"])
        logger.debug(f"Extracted {len(events)} events from {len(data['weeks'])} weeks")
        return events
    return unwrap_list(data, "events")


def extract_tasks(data: Any) -> List[dict]:
    return unwrap_list(data, "tasks")


async def _load(events_call: Awaitable[Any], client: TrackerClient, label: str) -> CalendarData:
    try:
        events_data, tasks_data = await gather_calls(events_call, client.list_tasks())
    except TrackerAuthError:
        raise
    except TrackerAPIError as e:
        logger.error(f"Error loading calendar data for {label}: {e.message}")
        return CalendarData(notifications=[LOAD_FAILED_MESSAGE])

    events = parse_models(CalendarEvent, extract_events(events_data))
    tasks = parse_models(Task, extract_tasks(tasks_data))
    logger.debug(f"Calendar data loaded for {label}: {len(events)} events, {len(tasks)} tasks")
    return CalendarData(events=events, tasks=tasks)


async def load_calendar_data(client: TrackerClient, year: int, month: int) -> CalendarData:
    """
    Load events for a zero-based month plus all tasks.

    Auth failures propagate so the caller can end the session; any other
    tracker API failure degrades to empty collections.
    """
    return await _load(client.get_month_view(year, month + 1), client, f"{year}-{month + 1:02d}")


async def load_day_data(client: TrackerClient, day: date) -> CalendarData:
    """Load events for one day plus all tasks, with the same fallbacks."""
    key = day.isoformat()
    return await _load(client.get_day_view(key), client, key)
