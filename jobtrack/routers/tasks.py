"""
JobTrack - CRUD API for tasks.

Endpoints for job-search tasks (interview prep, networking, daily goals, ...),
including a one-call completed/pending toggle used by the dashboard.
"""
from fastapi import APIRouter, Depends, Query, Request
from typing import List, Optional

from ..schemas import Task, TaskCreate, TaskUpdate, TaskSummary, TaskStatus, TaskPriority
from ..services.api_client import TrackerClient, TrackerAPIError
from ..services.payloads import unwrap_list, parse_models
from ..services.dashboard import toggle_payload
from ..dependencies import get_tracker_client, tracker_http_error
from ..rate_limit import limiter, RATE_LIMIT_GENERAL

router = APIRouter()


@router.get("/", response_model=List[Task])
async def list_tasks(
    status: Optional[TaskStatus] = None,
    priority: Optional[TaskPriority] = None,
    due_on: Optional[str] = Query(None, pattern=r"^\d{4}-\d{2}-\d{2}$"),
    client: TrackerClient = Depends(get_tracker_client)
):
    """List tasks with optional status, priority and due-date filters."""
    try:
        data = await client.list_tasks()
    except TrackerAPIError as e:
        raise tracker_http_error(e)

    tasks = parse_models(Task, unwrap_list(data, "tasks"))
    if status:
        tasks = [t for t in tasks if t.status == status.value]
    if priority:
        tasks = [t for t in tasks if t.priority == priority.value]
    if due_on:
        tasks = [t for t in tasks if t.due_date and t.due_date.startswith(due_on)]
    return tasks


@router.get("/summary", response_model=TaskSummary)
async def get_task_summary(client: TrackerClient = Depends(get_tracker_client)):
    """Get task counts for the dashboard."""
    try:
        data = await client.get_task_summary()
    except TrackerAPIError as e:
        raise tracker_http_error(e)
    return TaskSummary.model_validate(data or {})


@router.get("/{task_id}", response_model=Task)
async def get_task(task_id: int, client: TrackerClient = Depends(get_tracker_client)):
    """Get a specific task."""
    try:
        data = await client.get_task(task_id)
    except TrackerAPIError as e:
        raise tracker_http_error(e)
    return Task.model_validate(data)


@router.post("/", response_model=Task)
@limiter.limit(RATE_LIMIT_GENERAL)
async def create_task(
    request: Request,
    task: TaskCreate,
    client: TrackerClient = Depends(get_tracker_client)
):
    """Create a new task."""
    try:
        data = await client.create_task(task.model_dump(mode="json"))
    except TrackerAPIError as e:
        raise tracker_http_error(e)
    return Task.model_validate(data)


@router.patch("/{task_id}", response_model=Task)
@limiter.limit(RATE_LIMIT_GENERAL)
async def update_task(
    request: Request,
    task_id: int,
    task: TaskUpdate,
    client: TrackerClient = Depends(get_tracker_client)
):
    """Update a task. Only the fields sent are changed."""
    try:
        data = await client.update_task(task_id, task.model_dump(mode="json", exclude_unset=True))
    except TrackerAPIError as e:
        raise tracker_http_error(e)
    return Task.model_validate(data)


@router.post("/{task_id}/toggle", response_model=Task)
@limiter.limit(RATE_LIMIT_GENERAL)
async def toggle_task(
    request: Request,
    task_id: int,
    client: TrackerClient = Depends(get_tracker_client)
):
    """Mark a task completed, or reopen it if it already is."""
    try:
        current = Task.model_validate(await client.get_task(task_id))
        data = await client.update_task(task_id, toggle_payload(current))
    except TrackerAPIError as e:
        raise tracker_http_error(e)
    return Task.model_validate(data)


@router.delete("/{task_id}")
@limiter.limit(RATE_LIMIT_GENERAL)
async def delete_task(
    request: Request,
    task_id: int,
    client: TrackerClient = Depends(get_tracker_client)
):
    """Delete a task."""
    try:
        await client.delete_task(task_id)
    except TrackerAPIError as e:
        raise tracker_http_error(e)
    return {"message": "Task deleted"}
