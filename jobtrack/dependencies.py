"""
JobTrack - Shared router dependencies.

Usage in routers:
    from ..dependencies import get_tracker_client, tracker_http_error

    @router.get("/")
    async def list_things(client: TrackerClient = Depends(get_tracker_client)):
        try:
            return await client.list_tasks()
        except TrackerAPIError as e:
            raise tracker_http_error(e)

The caller's session token is forwarded to the tracker API unchanged.
When a request carries no token, the configured JOBTRACK_API_TOKEN is used.
"""
from datetime import date
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from .services.api_client import TrackerClient, TrackerAPIError, TrackerAuthError

# auto_error=False lets requests without a header fall back to the configured token
bearer_scheme = HTTPBearer(auto_error=False)


def get_tracker_client(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> TrackerClient:
    """Build a tracker API client for the current caller."""
    token = credentials.credentials if credentials else None
    return TrackerClient(token=token)


def tracker_http_error(exc: TrackerAPIError) -> HTTPException:
    """
    Translate a tracker API failure into the HTTP error returned to our caller.

    401 and 404 pass through; every other failure is a bad gateway.
    """
    if isinstance(exc, TrackerAuthError):
        return HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session expired, please sign in again",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.message)
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=exc.message)


def get_today() -> date:
    """Today's date for the calendar and dashboard views."""
    return date.today()
