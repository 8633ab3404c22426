"""
JobTrack - CRUD API for job applications.

Endpoints for listing, creating and editing job applications and their
follow-ups. The tracker API stores them; this router validates input and
shapes responses.
"""
from fastapi import APIRouter, Depends, Query, Request
from typing import List, Optional
import logging

from ..schemas import (
    JobApplication, JobApplicationCreate, JobApplicationUpdate,
    JobApplicationWithFollowUps, FollowUp, FollowUpCreate,
    SummaryStats, ScrapeJobRequest
)
from ..services.api_client import TrackerClient, TrackerAPIError
from ..services.payloads import unwrap_list, parse_models
from ..dependencies import get_tracker_client, tracker_http_error
from ..rate_limit import limiter, RATE_LIMIT_GENERAL, RATE_LIMIT_SCRAPE

router = APIRouter()
logger = logging.getLogger("jobtrack.applications")


def _matches_search(application: JobApplication, term: str) -> bool:
    fields = (application.job_title, application.company, application.location, application.notes)
    return any(term in f.lower() for f in fields if f)


@router.get("/", response_model=List[JobApplication])
async def list_applications(
    status: Optional[str] = None,
    search: Optional[str] = Query(None, max_length=200),
    sort_order: Optional[str] = Query("desc", pattern="^(asc|desc)$"),
    client: TrackerClient = Depends(get_tracker_client)
):
    """List applications, newest first, with optional status filter and search."""
    try:
        data = await client.list_applications()
    except TrackerAPIError as e:
        raise tracker_http_error(e)

    applications = parse_models(JobApplication, unwrap_list(data, "applications"))

    if status:
        applications = [a for a in applications if (a.status or "").lower() == status.lower()]
    if search:
        term = search.lower()
        applications = [a for a in applications if _matches_search(a, term)]

    # Fall back to created_at when an application has no application_date
    applications.sort(
        key=lambda a: a.application_date or a.created_at or "",
        reverse=sort_order == "desc"
    )
    return applications


@router.get("/stats", response_model=SummaryStats)
async def get_application_stats(client: TrackerClient = Depends(get_tracker_client)):
    """Get application statistics for the dashboard."""
    try:
        data = await client.get_application_stats()
    except TrackerAPIError as e:
        raise tracker_http_error(e)
    return SummaryStats.model_validate(data or {})


@router.post("/scrape-job")
@limiter.limit(RATE_LIMIT_SCRAPE)
async def scrape_job(
    request: Request,
    body: ScrapeJobRequest,
    client: TrackerClient = Depends(get_tracker_client)
):
    """Pre-fill an application from a job posting URL."""
    try:
        return await client.scrape_job(body.url)
    except TrackerAPIError as e:
        raise tracker_http_error(e)


@router.get("/{application_id}", response_model=JobApplication)
async def get_application(
    application_id: int,
    client: TrackerClient = Depends(get_tracker_client)
):
    """Get a specific application."""
    try:
        data = await client.get_application(application_id)
    except TrackerAPIError as e:
        raise tracker_http_error(e)
    return JobApplication.model_validate(data)


@router.get("/{application_id}/with-follow-ups", response_model=JobApplicationWithFollowUps)
async def get_application_with_follow_ups(
    application_id: int,
    client: TrackerClient = Depends(get_tracker_client)
):
    """Get an application with its follow-ups (interviews, calls, emails)."""
    try:
        data = await client.get_application_with_follow_ups(application_id)
    except TrackerAPIError as e:
        raise tracker_http_error(e)
    data = data if isinstance(data, dict) else {}
    follow_ups = parse_models(FollowUp, unwrap_list(data.get("follow_ups"), "follow_ups"))
    return JobApplicationWithFollowUps.model_validate({**data, "follow_ups": follow_ups})


@router.post("/{application_id}/follow-ups", response_model=FollowUp)
@limiter.limit(RATE_LIMIT_GENERAL)
async def add_follow_up(
    request: Request,
    application_id: int,
    follow_up: FollowUpCreate,
    client: TrackerClient = Depends(get_tracker_client)
):
    """Record a follow-up on an application."""
    try:
        data = await client.add_follow_up(application_id, follow_up.model_dump(mode="json"))
    except TrackerAPIError as e:
        raise tracker_http_error(e)
    logger.info(f"Added {follow_up.follow_up_type} follow-up to application {application_id}")
    return FollowUp.model_validate(data)


@router.post("/", response_model=JobApplication)
@limiter.limit(RATE_LIMIT_GENERAL)
async def create_application(
    request: Request,
    application: JobApplicationCreate,
    client: TrackerClient = Depends(get_tracker_client)
):
    """Create a new application."""
    try:
        data = await client.create_application(application.model_dump(mode="json"))
    except TrackerAPIError as e:
        raise tracker_http_error(e)
    logger.info(f"Created application for {application.company}")
    return JobApplication.model_validate(data)


@router.patch("/{application_id}", response_model=JobApplication)
@limiter.limit(RATE_LIMIT_GENERAL)
async def update_application(
    request: Request,
    application_id: int,
    application: JobApplicationUpdate,
    client: TrackerClient = Depends(get_tracker_client)
):
    """Update an application. Only the fields sent are changed."""
    update_data = application.model_dump(mode="json", exclude_unset=True)
    try:
        data = await client.update_application(application_id, update_data)
    except TrackerAPIError as e:
        raise tracker_http_error(e)
    return JobApplication.model_validate(data)


@router.delete("/{application_id}")
@limiter.limit(RATE_LIMIT_GENERAL)
async def delete_application(
    request: Request,
    application_id: int,
    client: TrackerClient = Depends(get_tracker_client)
):
    """Delete an application."""
    try:
        await client.delete_application(application_id)
    except TrackerAPIError as e:
        raise tracker_http_error(e)
    return {"message": "Application deleted"}
