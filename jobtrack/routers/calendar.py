"""
JobTrack - Calendar API.

Calendar event CRUD plus the month and day views. The views load the month's
events and all tasks from the tracker API, then build the grid and agenda
locally with the calendar aggregator.

Navigation is stateless: the client sends the displayed month, the selected
day and an optional direction, and gets back the resulting view.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from datetime import date
from typing import List, Optional

from ..config import settings
from ..schemas import (
    CalendarEvent, CalendarEventCreate, CalendarEventUpdate,
    AgendaItemResponse, DayCellResponse, DayAgendaResponse, MonthViewResponse
)
from ..services.api_client import TrackerClient, TrackerAPIError, TrackerAuthError
from ..services.calendar_aggregator import (
    AgendaItem, CalendarState, DayCell, EventItem, TaskItem,
    build_agenda, build_month_view, days_in_month, event_color, is_displayable, task_color
)
from ..services.calendar_loader import load_calendar_data, load_day_data
from ..services.payloads import unwrap_list, parse_models
from ..dependencies import get_tracker_client, get_today, tracker_http_error
from ..rate_limit import limiter, RATE_LIMIT_GENERAL, RATE_LIMIT_READ

router = APIRouter()


# --- Response shaping ---

def format_day_title(day: date) -> str:
    """e.g. 'Saturday, August 2, 2025'"""
    return f"{day:%A}, {day:%B} {day.day}, {day.year}"


def agenda_item_response(item: AgendaItem) -> AgendaItemResponse:
    return AgendaItemResponse(
        kind=item.kind,
        id=item.item_id,
        title=item.title,
        subtitle=item.subtitle,
        color=item.color,
        sort_key=item.sort_key,
        event=item.event if isinstance(item, EventItem) else None,
        task=item.task if isinstance(item, TaskItem) else None,
    )


def day_agenda_response(day: date, items: List[AgendaItem]) -> DayAgendaResponse:
    return DayAgendaResponse(
        date=day,
        title=format_day_title(day),
        items=[agenda_item_response(i) for i in items],
        is_empty=not items,
    )


def day_cell_response(cell: DayCell) -> DayCellResponse:
    return DayCellResponse(
        date=cell.date,
        day=cell.day,
        is_current_month=cell.is_current_month,
        is_today=cell.is_today,
        is_selected=cell.is_selected,
        events=list(cell.events),
        tasks=list(cell.tasks),
        event_colors=[event_color(e) for e in cell.events],
        task_colors=[task_color(t) for t in cell.tasks],
    )


def initial_state(
    year: Optional[int],
    month: Optional[int],
    selected: Optional[date],
    today: date,
) -> CalendarState:
    """State sent by the client, falling back to the configured or current month."""
    if year is None and month is None:
        if settings.calendar.default_year is None:
            return CalendarState.for_today(today, selected=selected)
        year, month = settings.calendar.default_year, settings.calendar.default_month
    year = today.year if year is None else year
    month = today.month - 1 if month is None else month
    return CalendarState.for_month(year, month, selected=selected)


def require_displayable(state: CalendarState) -> CalendarState:
    """422 when the month's grid would reach past 0001-01-01 or 9999-12-31."""
    if not is_displayable(state.year, state.month):
        raise HTTPException(
            status_code=422,
            detail=f"Month {state.year}-{state.month + 1:02d} is outside the supported calendar range"
        )
    return state


# --- Views ---

@router.get("/month", response_model=MonthViewResponse)
@limiter.limit(RATE_LIMIT_READ)
async def get_month_view(
    request: Request,
    year: Optional[int] = Query(None, ge=1, le=9999),
    month: Optional[int] = Query(None, ge=-12, le=23, description="Zero-based month; out-of-range values roll over"),
    selected: Optional[date] = None,
    day: Optional[int] = Query(None, description="Select this day of the displayed month"),
    direction: Optional[str] = Query(None, pattern="^(prev|next)$"),
    clear: bool = Query(False, description="Drop the current selection"),
    jump_to_today: bool = Query(False, description="Show the current month with today selected"),
    client: TrackerClient = Depends(get_tracker_client),
    today: date = Depends(get_today)
):
    """
    Month grid (42 cells) with per-day events and tasks.

    `selected` is the selection the client currently holds; `day` selects a
    day of the displayed month and is ignored when that day does not exist.
    `clear` then drops the selection and `jump_to_today` moves to today.
    `direction` finally moves one month back or forward, keeping the selection.
    When a day is selected the response carries its agenda.

    Months whose grid falls outside 0001-01-01 .. 9999-12-31 are rejected
    with 422.
    """
    state = require_displayable(initial_state(year, month, selected, today))
    if day is not None:
        state = state.select_day(day, 1 <= day <= days_in_month(state.year, state.month))
    if clear:
        state = state.clear_selection()
    if jump_to_today:
        state = state.go_to_today(today)
    if direction:
        state = require_displayable(state.navigate_month(direction))

    try:
        data = await load_calendar_data(client, state.year, state.month)
    except TrackerAuthError as e:
        raise tracker_http_error(e)

    view = build_month_view(state, data.events, data.tasks, today=today)
    return MonthViewResponse(
        year=state.year,
        month=state.month,
        month_name=state.month_name,
        cells=[day_cell_response(c) for c in view.cells],
        selected=day_agenda_response(state.selected, view.agenda) if view.has_selection else None,
        notifications=data.notifications,
    )


@router.get("/day/{day}", response_model=DayAgendaResponse)
@limiter.limit(RATE_LIMIT_READ)
async def get_day_agenda(
    request: Request,
    day: date,
    client: TrackerClient = Depends(get_tracker_client)
):
    """Time-ordered events and tasks for one day."""
    try:
        data = await load_day_data(client, day)
    except TrackerAuthError as e:
        raise tracker_http_error(e)
    return day_agenda_response(day, build_agenda(day, data.events, data.tasks))


# --- Event CRUD ---

@router.get("/events", response_model=List[CalendarEvent])
async def list_events(client: TrackerClient = Depends(get_tracker_client)):
    """List all calendar events."""
    try:
        data = await client.list_events()
    except TrackerAPIError as e:
        raise tracker_http_error(e)
    return parse_models(CalendarEvent, unwrap_list(data, "events"))


@router.get("/events/{event_id}", response_model=CalendarEvent)
async def get_event(event_id: int, client: TrackerClient = Depends(get_tracker_client)):
    """Get a specific calendar event."""
    try:
        data = await client.get_event(event_id)
    except TrackerAPIError as e:
        raise tracker_http_error(e)
    return CalendarEvent.model_validate(data)


@router.post("/events", response_model=CalendarEvent)
@limiter.limit(RATE_LIMIT_GENERAL)
async def create_event(
    request: Request,
    event: CalendarEventCreate,
    client: TrackerClient = Depends(get_tracker_client)
):
    """Create a calendar event."""
    try:
        data = await client.create_event(event.model_dump(mode="json"))
    except TrackerAPIError as e:
        raise tracker_http_error(e)
    return CalendarEvent.model_validate(data)


@router.patch("/events/{event_id}", response_model=CalendarEvent)
@limiter.limit(RATE_LIMIT_GENERAL)
async def update_event(
    request: Request,
    event_id: int,
    event: CalendarEventUpdate,
    client: TrackerClient = Depends(get_tracker_client)
):
    """Update a calendar event. Only the fields sent are changed."""
    try:
        data = await client.update_event(event_id, event.model_dump(mode="json", exclude_unset=True))
    except TrackerAPIError as e:
        raise tracker_http_error(e)
    return CalendarEvent.model_validate(data)


@router.delete("/events/{event_id}")
@limiter.limit(RATE_LIMIT_GENERAL)
async def delete_event(
    request: Request,
    event_id: int,
    client: TrackerClient = Depends(get_tracker_client)
):
    """Delete a calendar event."""
    try:
        await client.delete_event(event_id)
    except TrackerAPIError as e:
        raise tracker_http_error(e)
    return {"message": "Event deleted"}
