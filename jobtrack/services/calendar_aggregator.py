"""
JobTrack - Calendar aggregation.

Builds the calendar month view from already-fetched events and tasks:
- A 42-cell (6 weeks x 7 days, Sunday-first) grid for a month
- Per-day event/task buckets using YYYY-MM-DD string matching
- A merged, time-ordered agenda for the selected day
- Immutable navigation state (displayed month + selected day)

Date identity is string identity: an event belongs to a day when its
start_datetime string starts with that day's key, whatever its time zone.
Nothing here performs I/O; every function returns new values.
"""
import calendar
import re
from dataclasses import dataclass, field, replace
from datetime import MAXYEAR, MINYEAR, date, datetime, timedelta
from typing import Iterable, List, Literal, Optional, Sequence, Tuple, Union

from ..schemas import CalendarEvent, Task

GRID_SIZE = 42  # 6 rows * 7 days

MONTH_NAMES = [
    'January', 'February', 'March', 'April', 'May', 'June',
    'July', 'August', 'September', 'October', 'November', 'December'
]

EVENT_COLORS = {
    'interview': '#FF9500',
    'application': '#007AFF',
    'follow_up': '#4CAF50',
    'deadline': '#FF3B30',
}

TASK_COLORS = {
    'urgent': '#FF3B30',
    'high': '#FF3B30',
    'medium': '#FF9500',
    'low': '#4CAF50',
}

DEFAULT_COLOR = '#8E8E93'

_FRACTION = re.compile(r'\.(\d+)')


# --- Helpers ---

def normalize_month(year: int, month: int) -> Tuple[int, int]:
    """Roll a zero-based month outside 0-11 into the neighbouring year(s)."""
    return year + month // 12, month % 12


def days_in_month(year: int, month: int) -> int:
    """Day count of a zero-based month."""
    year, month = normalize_month(year, month)
    return calendar.monthrange(year, month + 1)[1]


def first_weekday(year: int, month: int) -> int:
    """Weekday of day 1 of a zero-based month, 0=Sunday."""
    year, month = normalize_month(year, month)
    return (date(year, month + 1, 1).weekday() + 1) % 7


def month_name(month: int) -> str:
    return MONTH_NAMES[month % 12]


def date_key(year: int, month: int, day: int) -> str:
    """Zero-padded YYYY-MM-DD key for a one-based month."""
    return f"{year:04d}-{month:02d}-{day:02d}"


def _starts_with(value, key: str) -> bool:
    return isinstance(value, str) and value.startswith(key)


def parse_timestamp(value) -> Optional[datetime]:
    """
    Parse an ISO date or datetime string into a naive datetime.

    Date-only strings resolve to midnight. Offsets are dropped so that
    wall-clock values are compared, matching the string-based day matching.
    Returns None for missing or unparseable values.
    """
    if not isinstance(value, str) or not value:
        return None
    text = value.strip()
    if text.endswith(('Z', 'z')):
        text = text[:-1] + '+00:00'
    # Python 3.10 only accepts 3 or 6 fractional digits
    text = _FRACTION.sub(lambda m: '.' + m.group(1)[:6].ljust(6, '0'), text, count=1)
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    return parsed.replace(tzinfo=None)


def event_color(event: CalendarEvent) -> str:
    if event.color:
        return event.color
    return EVENT_COLORS.get((event.event_type or '').lower(), DEFAULT_COLOR)


def task_color(task: Task) -> str:
    return TASK_COLORS.get((task.priority or '').lower(), DEFAULT_COLOR)


# --- Date-match filter ---

@dataclass(frozen=True)
class DayMatch:
    """Events and tasks whose own date equals a given calendar day."""
    events: Tuple[CalendarEvent, ...] = ()
    tasks: Tuple[Task, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.events and not self.tasks


def match_date(
    year: int,
    month: int,
    day: int,
    events: Optional[Iterable[CalendarEvent]],
    tasks: Optional[Iterable[Task]],
) -> DayMatch:
    """
    Return the events and tasks dated (year, month, day).

    `month` is one-based here. Events match on start_datetime, tasks on
    due_date, both by string prefix. Missing collections, None entries and
    missing or non-string date fields never match.
    """
    key = date_key(year, month, day)
    day_events = tuple(
        e for e in (events or ())
        if _starts_with(getattr(e, 'start_datetime', None), key)
    )
    day_tasks = tuple(
        t for t in (tasks or ())
        if _starts_with(getattr(t, 'due_date', None), key)
    )
    return DayMatch(events=day_events, tasks=day_tasks)


def match_day(day: date, events, tasks) -> DayMatch:
    return match_date(day.year, day.month, day.day, events, tasks)


# --- Month grid ---

@dataclass(frozen=True)
class DayCell:
    date: date
    is_current_month: bool
    events: Tuple[CalendarEvent, ...] = ()
    tasks: Tuple[Task, ...] = ()
    is_today: bool = False
    is_selected: bool = False

    @property
    def day(self) -> int:
        return self.date.day


def grid_span(year: int, month: int) -> Tuple[date, date]:
    """
    First and last date shown in the 42-cell grid of a zero-based month.

    Raises ValueError when the month or its padding days fall outside
    0001-01-01 .. 9999-12-31.
    """
    year, month = normalize_month(year, month)
    if not MINYEAR <= year <= MAXYEAR:
        raise ValueError(f"Year {year} is outside the supported range")
    first = date(year, month + 1, 1)
    leading = first_weekday(year, month)
    try:
        return (
            first - timedelta(days=leading),
            first + timedelta(days=GRID_SIZE - leading - 1),
        )
    except OverflowError:
        raise ValueError(f"Calendar grid for {year}-{month + 1:02d} falls outside the supported date range")


def is_displayable(year: int, month: int) -> bool:
    try:
        grid_span(year, month)
    except ValueError:
        return False
    return True


def month_grid_dates(year: int, month: int) -> List[Tuple[date, bool]]:
    """
    Dates of the 42-cell grid for a zero-based month.

    Leading cells hold the tail of the previous month, then every day of the
    month, then the head of the next month. Each entry is
    (date, is_current_month).
    """
    start, _ = grid_span(year, month)
    year, month = normalize_month(year, month)
    cells = []
    for offset in range(GRID_SIZE):
        cell_date = start + timedelta(days=offset)
        cells.append((cell_date, (cell_date.year, cell_date.month) == (year, month + 1)))
    return cells


def build_month_grid(
    year: int,
    month: int,
    events: Optional[Sequence[CalendarEvent]] = None,
    tasks: Optional[Sequence[Task]] = None,
    today: Optional[date] = None,
    selected: Optional[date] = None,
) -> List[DayCell]:
    """
    Build the 42 day cells for a zero-based month.

    Every cell, including adjacent-month padding, is bucketed against its own
    calendar date.
    """
    grid = []
    for cell_date, is_current in month_grid_dates(year, month):
        matched = match_day(cell_date, events, tasks)
        grid.append(DayCell(
            date=cell_date,
            is_current_month=is_current,
            events=matched.events,
            tasks=matched.tasks,
            is_today=today is not None and cell_date == today,
            is_selected=is_current and selected is not None and cell_date == selected,
        ))
    return grid


# --- Agenda ---

@dataclass(frozen=True)
class EventItem:
    """Agenda entry for a calendar event, keyed by its start time."""
    event: CalendarEvent
    sort_key: Optional[datetime]
    kind: Literal["event"] = field(default="event", init=False)

    @property
    def item_id(self) -> int:
        return self.event.id

    @property
    def title(self) -> str:
        return self.event.title

    @property
    def subtitle(self) -> str:
        return "Event"

    @property
    def color(self) -> str:
        return event_color(self.event)


@dataclass(frozen=True)
class TaskItem:
    """Agenda entry for a task, keyed by its due date at midnight."""
    task: Task
    sort_key: Optional[datetime]
    kind: Literal["task"] = field(default="task", init=False)

    @property
    def item_id(self) -> int:
        return self.task.id

    @property
    def title(self) -> str:
        return self.task.title

    @property
    def subtitle(self) -> str:
        return f"Task ({self.task.priority or 'none'})"

    @property
    def color(self) -> str:
        return task_color(self.task)


AgendaItem = Union[EventItem, TaskItem]


def _agenda_sort_key(item: AgendaItem):
    # Unparseable keys go last; sorted() keeps input order within ties.
    return (item.sort_key is None, item.sort_key or datetime.min)


def build_agenda(day: date, events, tasks) -> List[AgendaItem]:
    """
    Merged agenda for one day, ascending by time.

    Events are placed before tasks before sorting, so an event and a task at
    the same instant keep that order. An empty list means nothing is
    scheduled that day.
    """
    matched = match_day(day, events, tasks)
    items: List[AgendaItem] = [
        EventItem(event=e, sort_key=parse_timestamp(e.start_datetime))
        for e in matched.events
    ]
    items.extend(
        TaskItem(task=t, sort_key=parse_timestamp(t.due_date))
        for t in matched.tasks
    )
    return sorted(items, key=_agenda_sort_key)


# --- Navigation state ---

Direction = Literal["prev", "next"]


@dataclass(frozen=True)
class CalendarState:
    """
    Displayed month (zero-based) and the selected day, if any.

    Transitions return a new state. Changing month keeps the selection even
    when it falls outside the newly displayed month.
    """
    year: int
    month: int
    selected: Optional[date] = None

    @classmethod
    def for_month(cls, year: int, month: int, selected: Optional[date] = None) -> "CalendarState":
        year, month = normalize_month(year, month)
        return cls(year=year, month=month, selected=selected)

    @classmethod
    def for_today(cls, today: date, selected: Optional[date] = None) -> "CalendarState":
        return cls(year=today.year, month=today.month - 1, selected=selected)

    def navigate_month(self, direction: Direction) -> "CalendarState":
        if direction == "prev":
            step = -1
        elif direction == "next":
            step = 1
        else:
            raise ValueError(f"Unknown direction: {direction}")
        year, month = normalize_month(self.year, self.month + step)
        return replace(self, year=year, month=month)

    def select_day(self, day: int, is_current_month: bool) -> "CalendarState":
        if not is_current_month:
            return self
        return replace(self, selected=date(self.year, self.month + 1, day))

    def clear_selection(self) -> "CalendarState":
        return replace(self, selected=None)

    def go_to_today(self, today: date) -> "CalendarState":
        return replace(self, year=today.year, month=today.month - 1, selected=today)

    @property
    def month_name(self) -> str:
        return month_name(self.month)


@dataclass(frozen=True)
class MonthView:
    """Everything the calendar screen renders for one state."""
    state: CalendarState
    cells: List[DayCell]
    agenda: Optional[List[AgendaItem]]

    @property
    def has_selection(self) -> bool:
        return self.agenda is not None


def selected_agenda(state: CalendarState, events, tasks) -> Optional[List[AgendaItem]]:
    """Agenda for the selected day, or None when no day is selected."""
    if state.selected is None:
        return None
    return build_agenda(state.selected, events, tasks)


def build_month_view(
    state: CalendarState,
    events: Optional[Sequence[CalendarEvent]],
    tasks: Optional[Sequence[Task]],
    today: Optional[date] = None,
) -> MonthView:
    cells = build_month_grid(
        state.year, state.month, events, tasks,
        today=today, selected=state.selected,
    )
    return MonthView(state=state, cells=cells, agenda=selected_agenda(state, events, tasks))
