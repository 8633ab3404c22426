"""
JobTrack - Dashboard API.

One call returning application stats, task counts and the "Today" task list.
"""
from fastapi import APIRouter, Depends, Request
from datetime import date
import logging

from ..schemas import DashboardResponse, SummaryStats, TaskSummary, Task
from ..services.api_client import TrackerClient, TrackerAPIError, TrackerAuthError, gather_calls
from ..services.dashboard import select_today_tasks
from ..services.payloads import unwrap_list, parse_models
from ..dependencies import get_tracker_client, get_today, tracker_http_error
from ..rate_limit import limiter, RATE_LIMIT_READ

router = APIRouter()
logger = logging.getLogger("jobtrack.dashboard")


@router.get("", response_model=DashboardResponse)
@limiter.limit(RATE_LIMIT_READ)
async def get_dashboard(
    request: Request,
    client: TrackerClient = Depends(get_tracker_client),
    today: date = Depends(get_today)
):
    """Dashboard overview. Tracker failures leave the sections empty with a notification."""
    try:
        stats_data, summary_data, tasks_data = await gather_calls(
            client.get_application_stats(),
            client.get_task_summary(),
            client.list_tasks(),
        )
    except TrackerAuthError as e:
        raise tracker_http_error(e)
    except TrackerAPIError as e:
        logger.error(f"Error loading dashboard data: {e.message}")
        return DashboardResponse(notifications=["Failed to load dashboard data"])

    tasks = parse_models(Task, unwrap_list(tasks_data, "tasks"))
    return DashboardResponse(
        stats=SummaryStats.model_validate(stats_data if isinstance(stats_data, dict) else {}),
        task_summary=TaskSummary.model_validate(summary_data if isinstance(summary_data, dict) else {}),
        today_tasks=select_today_tasks(tasks, today),
    )
