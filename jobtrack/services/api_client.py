"""
JobTrack - Tracker API client.

Async HTTP client for the remote tracker REST API, which owns all job
applications, tasks and calendar events.

Every call authenticates with `Authorization: Bearer <token>`, where the token
is the caller's session token from the hosted identity provider.

Errors:
- 401 responses raise TrackerAuthError (the session should be dropped)
- Other non-2xx responses, timeouts and connection failures raise TrackerAPIError
"""
from typing import Any, Awaitable, Dict, List, Optional
import asyncio
import logging

import httpx

from ..config import settings

logger = logging.getLogger("jobtrack.api_client")


class TrackerAPIError(Exception):
    """Raised when the tracker API fails or is unreachable."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class TrackerAuthError(TrackerAPIError):
    """Raised when the tracker API rejects the session token."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, status_code=401)


def _error_detail(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(data, dict) and data.get("detail"):
        return str(data["detail"])
    return response.reason_phrase


async def gather_calls(*calls: Awaitable[Any]) -> List[Any]:
    """
    Await tracker calls concurrently and return their results in order.

    Every call runs to completion before anything is raised. An auth failure
    wins over any other failure; otherwise the first failure in call order
    is raised.
    """
    results = await asyncio.gather(*calls, return_exceptions=True)
    errors = [r for r in results if isinstance(r, BaseException)]
    for error in errors:
        if isinstance(error, TrackerAuthError):
            raise error
    if errors:
        if len(errors) > 1:
            logger.debug(f"{len(errors)} tracker calls failed, raising the first")
        raise errors[0]
    return results


class TrackerClient:
    """
    Client for the tracker API.

    Mirrors the API's resource groups: job applications, tasks and calendar
    events. Methods return the decoded JSON body unchanged; callers decide how
    to interpret its shape.
    """

    def __init__(
        self,
        token: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.token = token or settings.api.api_token
        self.base_url = (base_url or settings.api.api_base_url).rstrip("/")
        self.timeout = timeout or settings.api.api_timeout
        self._transport = transport

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        else:
            logger.warning("No session token for tracker API request")
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> Any:
        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                logger.debug(f"{method} {url}")
                response = await client.request(
                    method,
                    url,
                    json=json,
                    headers=self._headers(),
                    timeout=timeout or self.timeout,
                )
        except httpx.TimeoutException:
            logger.error(f"Tracker API timed out: {method} {path}")
            raise TrackerAPIError("Tracker API request timed out")
        except httpx.ConnectError:
            logger.error(f"Could not connect to tracker API at {self.base_url}")
            raise TrackerAPIError("Tracker API is not reachable")
        except httpx.HTTPError as e:
            logger.error(f"Tracker API request failed: {e}")
            raise TrackerAPIError(f"Tracker API request failed: {e}")

        if response.status_code == 401:
            logger.info("Tracker API rejected the session token")
            raise TrackerAuthError()
        if response.status_code >= 400:
            detail = _error_detail(response)
            logger.warning(f"Tracker API returned {response.status_code} for {method} {path}: {detail}")
            raise TrackerAPIError(detail, status_code=response.status_code)

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            raise TrackerAPIError("Tracker API returned invalid JSON", status_code=response.status_code)

    # --- Job applications ---

    async def list_applications(self) -> Any:
        return await self._request("GET", "/job-applications/")

    async def get_application(self, application_id: int) -> Any:
        return await self._request("GET", f"/job-applications/{application_id}")

    async def create_application(self, data: Dict[str, Any]) -> Any:
        return await self._request("POST", "/job-applications/", json=data)

    async def update_application(self, application_id: int, data: Dict[str, Any]) -> Any:
        return await self._request("PUT", f"/job-applications/{application_id}", json=data)

    async def delete_application(self, application_id: int) -> None:
        await self._request("DELETE", f"/job-applications/{application_id}")

    async def get_application_with_follow_ups(self, application_id: int) -> Any:
        return await self._request("GET", f"/job-applications/{application_id}/with-follow-ups")

    async def add_follow_up(self, application_id: int, data: Dict[str, Any]) -> Any:
        return await self._request("POST", f"/job-applications/{application_id}/follow-ups", json=data)

    async def get_application_stats(self) -> Any:
        return await self._request("GET", "/job-applications/stats")

    async def scrape_job(self, url: str) -> Any:
        """Ask the tracker API to scrape a job posting. Scraping is slow."""
        logger.info(f"Requesting job scrape for {url}")
        return await self._request(
            "POST", "/job-applications/scrape-job",
            json={"url": url},
            timeout=settings.api.api_scrape_timeout,
        )

    # --- Tasks ---

    async def list_tasks(self) -> Any:
        return await self._request("GET", "/tasks/")

    async def get_task(self, task_id: int) -> Any:
        return await self._request("GET", f"/tasks/{task_id}")

    async def create_task(self, data: Dict[str, Any]) -> Any:
        return await self._request("POST", "/tasks/", json=data)

    async def update_task(self, task_id: int, data: Dict[str, Any]) -> Any:
        return await self._request("PUT", f"/tasks/{task_id}", json=data)

    async def delete_task(self, task_id: int) -> None:
        await self._request("DELETE", f"/tasks/{task_id}")

    async def get_task_summary(self) -> Any:
        return await self._request("GET", "/tasks/summary/stats")

    # --- Calendar events ---

    async def list_events(self) -> Any:
        return await self._request("GET", "/calendar/events/")

    async def get_event(self, event_id: int) -> Any:
        return await self._request("GET", f"/calendar/events/{event_id}")

    async def create_event(self, data: Dict[str, Any]) -> Any:
        return await self._request("POST", "/calendar/events/", json=data)

    async def update_event(self, event_id: int, data: Dict[str, Any]) -> Any:
        return await self._request("PUT", f"/calendar/events/{event_id}", json=data)

    async def delete_event(self, event_id: int) -> None:
        await self._request("DELETE", f"/calendar/events/{event_id}")

    async def get_day_view(self, day: str) -> Any:
        """Day view for a YYYY-MM-DD date."""
        return await self._request("GET", f"/calendar/view/day/{day}")

    async def get_month_view(self, year: int, month: int) -> Any:
        """Month view for a one-based month."""
        return await self._request("GET", f"/calendar/view/month/{year}/{month}")
