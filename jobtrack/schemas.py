"""
JobTrack - Pydantic schemas for request/response validation.

Mirrors the tracker API's job application, task and calendar event payloads,
plus the calendar view responses produced by this service.

Response models are lenient: the tracker API may omit fields or add new ones,
and a screen should still render. Event and task date fields are kept as the
raw strings the API sends, since calendar matching is string based.
"""
from pydantic import BaseModel, Field, field_validator
from datetime import date, datetime
from typing import Optional, List, Literal
from enum import Enum
import re


# --- Enums for validated fields ---

class ApplicationStatus(str, Enum):
    APPLIED = "applied"
    INTERVIEWING = "interviewing"
    OFFERED = "offered"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"


class TaskType(str, Enum):
    JOB_APPLICATION = "job_application"
    INTERVIEW_PREP = "interview_prep"
    NETWORKING = "networking"
    SKILL_BUILDING = "skill_building"
    DAILY_GOAL = "daily_goal"
    CUSTOM = "custom"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class EventType(str, Enum):
    INTERVIEW = "interview"
    APPLICATION = "application"
    NETWORKING = "networking"
    FOLLOW_UP = "follow_up"
    DEADLINE = "deadline"
    TASK = "task"
    CUSTOM = "custom"
    OTHER = "other"


class FollowUpStatus(str, Enum):
    PENDING = "Pending"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"
    RESCHEDULED = "Rescheduled"


class EventStatus(str, Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    RESCHEDULED = "rescheduled"


# --- Helper validators ---

_DATETIME_PREFIX = re.compile(r'^\d{4}-\d{2}-\d{2}')
_TIME_PATTERN = re.compile(r'^\d{2}:\d{2}(:\d{2})?$')


def validate_datetime_string(value: Optional[str]) -> Optional[str]:
    """Require a string that starts with a YYYY-MM-DD date."""
    if value is None or value == "":
        return None
    if not _DATETIME_PREFIX.match(value):
        raise ValueError('Must start with a YYYY-MM-DD date')
    return value


def validate_time_string(value: Optional[str]) -> Optional[str]:
    if value is None or value == "":
        return None
    if not _TIME_PATTERN.match(value):
        raise ValueError('Must be HH:MM or HH:MM:SS')
    return value


# --- Job Application Schemas ---

class JobApplicationBase(BaseModel):
    job_title: str = Field(..., min_length=1, max_length=200)
    company: str = Field(..., min_length=1, max_length=200)
    location: Optional[str] = Field(None, max_length=200)
    job_description: Optional[str] = Field(None, max_length=20000)
    requirements: Optional[str] = Field(None, max_length=10000)
    salary_range: Optional[str] = Field(None, max_length=100)
    job_type: Optional[str] = Field(None, max_length=50)
    source: Optional[str] = Field(None, max_length=100)
    contact_info: Optional[str] = Field(None, max_length=500)
    notes: Optional[str] = Field(None, max_length=5000)


class JobApplicationCreate(JobApplicationBase):
    application_date: date
    status: ApplicationStatus = ApplicationStatus.APPLIED


class JobApplicationUpdate(BaseModel):
    job_title: Optional[str] = Field(None, min_length=1, max_length=200)
    company: Optional[str] = Field(None, min_length=1, max_length=200)
    location: Optional[str] = Field(None, max_length=200)
    job_description: Optional[str] = Field(None, max_length=20000)
    requirements: Optional[str] = Field(None, max_length=10000)
    salary_range: Optional[str] = Field(None, max_length=100)
    job_type: Optional[str] = Field(None, max_length=50)
    application_date: Optional[date] = None
    status: Optional[ApplicationStatus] = None
    source: Optional[str] = Field(None, max_length=100)
    contact_info: Optional[str] = Field(None, max_length=500)
    notes: Optional[str] = Field(None, max_length=5000)


class JobApplication(BaseModel):
    id: int
    user_id: Optional[str] = None
    job_title: Optional[str] = None
    company: Optional[str] = None
    location: Optional[str] = None
    job_description: Optional[str] = None
    requirements: Optional[str] = None
    salary_range: Optional[str] = None
    job_type: Optional[str] = None
    application_date: Optional[str] = None
    status: Optional[str] = None
    source: Optional[str] = None
    contact_info: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class FollowUpCreate(BaseModel):
    follow_up_type: str = Field("Interview", min_length=1, max_length=100)
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=5000)
    date: datetime
    status: FollowUpStatus = FollowUpStatus.PENDING
    outcome: Optional[str] = Field(None, max_length=2000)
    notes: Optional[str] = Field(None, max_length=5000)

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        if not v.strip():
            raise ValueError('Follow-up title is required')
        return v.strip()

    @field_validator('description', 'outcome', 'notes')
    @classmethod
    def blank_to_none(cls, v):
        return v or None


class FollowUp(BaseModel):
    id: int
    job_application_id: Optional[int] = None
    follow_up_type: Optional[str] = None
    title: str = ""
    description: Optional[str] = None
    date: Optional[str] = None
    status: Optional[str] = None
    outcome: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[str] = None


class JobApplicationWithFollowUps(JobApplication):
    follow_ups: List[FollowUp] = []


class ScrapeJobRequest(BaseModel):
    url: str = Field(..., min_length=1, max_length=2000)

    @field_validator('url')
    @classmethod
    def validate_url(cls, v):
        if not v.startswith(('http://', 'https://')):
            raise ValueError('Must be an http(s) URL')
        return v


# --- Task Schemas ---

class TaskBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=5000)
    task_type: TaskType = TaskType.CUSTOM
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: Optional[date] = None
    due_time: Optional[str] = None
    estimated_duration: Optional[int] = Field(None, ge=0)
    target_count: Optional[int] = Field(None, ge=0)
    job_application_id: Optional[int] = None

    @field_validator('due_time')
    @classmethod
    def validate_due_time(cls, v):
        return validate_time_string(v)


class TaskCreate(TaskBase):
    pass


class TaskUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=5000)
    task_type: Optional[TaskType] = None
    priority: Optional[TaskPriority] = None
    status: Optional[TaskStatus] = None
    due_date: Optional[date] = None
    due_time: Optional[str] = None
    estimated_duration: Optional[int] = Field(None, ge=0)
    actual_duration: Optional[int] = Field(None, ge=0)
    target_count: Optional[int] = Field(None, ge=0)
    completed_count: Optional[int] = Field(None, ge=0)
    job_application_id: Optional[int] = None
    completed_at: Optional[datetime] = None

    @field_validator('due_time')
    @classmethod
    def validate_due_time(cls, v):
        return validate_time_string(v)


class Task(BaseModel):
    id: int
    user_id: Optional[str] = None
    title: str = ""
    description: Optional[str] = None
    task_type: Optional[str] = None
    priority: Optional[str] = None
    status: Optional[str] = None
    due_date: Optional[str] = None
    due_time: Optional[str] = None
    estimated_duration: Optional[int] = None
    actual_duration: Optional[int] = None
    target_count: Optional[int] = None
    completed_count: int = 0
    job_application_id: Optional[int] = None
    calendar_event_id: Optional[int] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    completed_at: Optional[str] = None


# --- Calendar Event Schemas ---

class CalendarEventBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=5000)
    event_type: EventType = EventType.CUSTOM
    location: Optional[str] = Field(None, max_length=500)
    is_all_day: bool = False
    reminder_minutes: int = Field(15, ge=0)
    color: Optional[str] = Field(None, max_length=20)
    job_application_id: Optional[int] = None
    follow_up_id: Optional[int] = None


class CalendarEventCreate(CalendarEventBase):
    start_datetime: str
    end_datetime: Optional[str] = None

    @field_validator('start_datetime', 'end_datetime')
    @classmethod
    def validate_datetimes(cls, v):
        return validate_datetime_string(v)


class CalendarEventUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=5000)
    event_type: Optional[EventType] = None
    start_datetime: Optional[str] = None
    end_datetime: Optional[str] = None
    location: Optional[str] = Field(None, max_length=500)
    is_all_day: Optional[bool] = None
    reminder_minutes: Optional[int] = Field(None, ge=0)
    status: Optional[EventStatus] = None
    color: Optional[str] = Field(None, max_length=20)

    @field_validator('start_datetime', 'end_datetime')
    @classmethod
    def validate_datetimes(cls, v):
        return validate_datetime_string(v)


class CalendarEvent(BaseModel):
    id: int
    user_id: Optional[str] = None
    title: str = ""
    description: Optional[str] = None
    event_type: Optional[str] = None
    start_datetime: Optional[str] = None
    end_datetime: Optional[str] = None
    location: Optional[str] = None
    is_all_day: bool = False
    reminder_minutes: Optional[int] = None
    status: Optional[str] = None
    color: Optional[str] = None
    job_application_id: Optional[int] = None
    follow_up_id: Optional[int] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


# --- Stats Schemas ---

class SummaryStats(BaseModel):
    total_applications: int = 0
    applications_this_week: int = 0
    applications_this_month: int = 0
    interviews_scheduled: int = 0
    pending_follow_ups: int = 0
    response_rate: float = 0.0


class TaskSummary(BaseModel):
    total_tasks: int = 0
    completed_tasks: int = 0
    pending_tasks: int = 0
    overdue_tasks: int = 0
    today_tasks: int = 0
    this_week_tasks: int = 0


class DashboardResponse(BaseModel):
    stats: Optional[SummaryStats] = None
    task_summary: Optional[TaskSummary] = None
    today_tasks: List[Task] = []
    notifications: List[str] = []


# --- Calendar View Schemas ---

class AgendaItemResponse(BaseModel):
    kind: Literal["event", "task"]
    id: int
    title: str
    subtitle: str
    color: str
    sort_key: Optional[datetime] = None
    event: Optional[CalendarEvent] = None
    task: Optional[Task] = None


class DayCellResponse(BaseModel):
    date: date
    day: int
    is_current_month: bool
    is_today: bool = False
    is_selected: bool = False
    events: List[CalendarEvent] = []
    tasks: List[Task] = []
    event_colors: List[str] = []
    task_colors: List[str] = []


class DayAgendaResponse(BaseModel):
    date: date
    title: str
    items: List[AgendaItemResponse] = []
    is_empty: bool = True


class MonthViewResponse(BaseModel):
    year: int
    month: int = Field(..., ge=0, le=11, description="Zero-based month")
    month_name: str
    cells: List[DayCellResponse]
    selected: Optional[DayAgendaResponse] = None
    notifications: List[str] = []
