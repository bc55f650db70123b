"""HTTP client for the Hangar REST API.

Async wrapper around the ``/api/`` endpoints consumed by the project and
database dashboards and the create-project form.  Every method either returns a decoded value or raises
:class:`~hangar_dashboard.errors.ApiError` carrying the backend's
``error_code`` (and optional ``details``).
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from hangar_dashboard.constants import API_PREFIX
from hangar_dashboard.errors import ApiError
from hangar_dashboard.models import (
    CurrentUser,
    DatabaseDetails,
    DeployPayload,
    OwnedProject,
    ProjectDetails,
    ProjectMetrics,
)

logger = logging.getLogger(__name__)

_M = TypeVar("_M", bound=BaseModel)

# Default timeout for regular API calls (seconds).
_DEFAULT_TIMEOUT = 10.0

# Timeout for mutating operations that may take longer (rebuilds, scans).
_MUTATING_TIMEOUT = 120.0

# Status codes whose body-less responses map to a known error code.
_STATUS_ERROR_CODES: Dict[int, str] = {
    401: "UNAUTHORIZED",
    403: "UNAUTHORIZED",
    404: "NOT_FOUND",
}


def _error_from_response(resp: httpx.Response) -> ApiError:
    """Build an :class:`ApiError` from a non-2xx response."""
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("error_code"):
        details = body.get("details")
        return ApiError(str(body["error_code"]), str(details) if details is not None else None)
    code = _STATUS_ERROR_CODES.get(resp.status_code, f"HTTP_ERROR_{resp.status_code}")
    return ApiError(code)


def _parse(model: type[_M], data: Any, path: str) -> _M:
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        logger.warning("Unexpected payload from %s: %s", path, exc)
        raise ApiError("CLIENT_ERROR", f"Unexpected payload from {path}") from exc


class ApiClient:
    """Async HTTP client for the Hangar API.

    Parameters
    ----------
    base_url:
        Root URL of the Hangar backend, e.g. ``https://hangar.example.com``.
    token:
        Optional bearer token for authenticated endpoints.
    transport:
        Optional ``httpx`` transport (tests inject ``httpx.MockTransport``).
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._api_url = f"{self._base_url}{API_PREFIX}"
        self._token = token
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    # ── Lifecycle ────────────────────────────────────────────────

    async def connect(self) -> None:
        """Create the underlying ``httpx.AsyncClient``."""
        headers: dict[str, str] = {"Accept": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"

        self._client = httpx.AsyncClient(
            base_url=self._api_url,
            headers=headers,
            timeout=_DEFAULT_TIMEOUT,
            transport=self._transport,
        )
        logger.info("ApiClient connected to %s", self._api_url)

    async def close(self) -> None:
        """Shut down the HTTP client gracefully."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            logger.info("ApiClient closed")

    async def __aenter__(self) -> "ApiClient":
        await self.connect()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    @property
    def is_connected(self) -> bool:
        """Return *True* if the underlying client is open."""
        return self._client is not None and not self._client.is_closed

    @property
    def base_url(self) -> str:
        return self._base_url

    # ── Private helpers ──────────────────────────────────────────

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            raise RuntimeError("ApiClient is not connected, call connect() first")
        return self._client

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Send a request and translate failures into :class:`ApiError`."""
        client = self._ensure_client()
        try:
            resp = await client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise ApiError("CLIENT_ERROR", str(exc)) from exc
        if resp.is_error:
            err = _error_from_response(resp)
            logger.debug("%s %s -> %d %s", method, path, resp.status_code, err.error_code)
            raise err
        return resp

    async def _json(self, method: str, path: str, **kwargs: Any) -> Any:
        resp = await self._request(method, path, **kwargs)
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as exc:
            raise ApiError("CLIENT_ERROR", f"Invalid JSON from {path}") from exc

    # ── Identity ─────────────────────────────────────────────────

    async def get_current_user(self) -> CurrentUser:
        """``GET /api/auth/me``"""
        return _parse(CurrentUser, await self._json("GET", "auth/me"), "auth/me")

    # ── Read-only project endpoints ──────────────────────────────

    async def get_project_details(self, project_id: int) -> ProjectDetails:
        """``GET /api/projects/{id}/details``"""
        data = await self._json("GET", f"projects/{project_id}/details")
        return _parse(ProjectDetails, data, "project details")

    async def get_project_status(self, project_id: int) -> Optional[str]:
        """``GET /api/projects/{id}/status``

        The backend answers with a bare JSON string, ``null``, or an object
        carrying a ``status`` key.
        """
        data = await self._json("GET", f"projects/{project_id}/status")
        if isinstance(data, dict):
            data = data.get("status")
        return str(data) if data is not None else None

    async def get_project_metrics(self, project_id: int) -> ProjectMetrics:
        """``GET /api/projects/{id}/metrics``"""
        data = await self._json("GET", f"projects/{project_id}/metrics")
        return _parse(ProjectMetrics, data, "project metrics")

    async def get_project_logs(self, project_id: int) -> str:
        """``GET /api/projects/{id}/logs`` (raw text)"""
        resp = await self._request(
            "GET", f"projects/{project_id}/logs", headers={"Accept": "text/plain"}
        )
        return resp.text

    async def get_owned_projects(self) -> List[OwnedProject]:
        """``GET /api/projects/owned``"""
        data = await self._json("GET", "projects/owned") or []
        return [_parse(OwnedProject, p, "projects/owned") for p in data]

    # ── Project creation ─────────────────────────────────────────

    async def deploy_project(self, payload: DeployPayload) -> ProjectDetails:
        """``POST /api/projects``

        The backend builds or scans the image before answering, so this uses
        the long mutating timeout.
        """
        data = await self._json(
            "POST",
            "projects",
            json=payload.model_dump(exclude_none=True),
            timeout=_MUTATING_TIMEOUT,
        )
        return _parse(ProjectDetails, data, "projects")

    # ── Project controls ─────────────────────────────────────────

    async def start_project(self, project_id: int) -> None:
        """``POST /api/projects/{id}/start``"""
        await self._request("POST", f"projects/{project_id}/start", timeout=_MUTATING_TIMEOUT)

    async def stop_project(self, project_id: int) -> None:
        """``POST /api/projects/{id}/stop``"""
        await self._request("POST", f"projects/{project_id}/stop", timeout=_MUTATING_TIMEOUT)

    async def restart_project(self, project_id: int) -> None:
        """``POST /api/projects/{id}/restart``"""
        await self._request("POST", f"projects/{project_id}/restart", timeout=_MUTATING_TIMEOUT)

    # ── Participants ─────────────────────────────────────────────

    async def add_participant(self, project_id: int, participant_id: str) -> None:
        """``POST /api/projects/{id}/participants``"""
        await self._request(
            "POST",
            f"projects/{project_id}/participants",
            json={"participant_id": participant_id},
        )

    async def remove_participant(self, project_id: int, participant_id: str) -> None:
        """``DELETE /api/projects/{id}/participants/{login}``"""
        await self._request("DELETE", f"projects/{project_id}/participants/{participant_id}")

    # ── Deployment source ────────────────────────────────────────

    async def rebuild_project(self, project_id: int) -> None:
        """``POST /api/projects/{id}/rebuild``"""
        await self._request("POST", f"projects/{project_id}/rebuild", timeout=_MUTATING_TIMEOUT)

    async def update_project_image(self, project_id: int, new_image_url: str) -> None:
        """``PUT /api/projects/{id}/image``"""
        await self._request(
            "PUT",
            f"projects/{project_id}/image",
            json={"new_image_url": new_image_url},
            timeout=_MUTATING_TIMEOUT,
        )

    async def update_env_vars(self, project_id: int, env_vars: Dict[str, str]) -> None:
        """``PUT /api/projects/{id}/env`` (full replacement map)"""
        await self._request(
            "PUT",
            f"projects/{project_id}/env",
            json={"env_vars": env_vars},
            timeout=_MUTATING_TIMEOUT,
        )

    async def purge_project(self, project_id: int) -> None:
        """``DELETE /api/projects/{id}/purge``"""
        await self._request("DELETE", f"projects/{project_id}/purge", timeout=_MUTATING_TIMEOUT)

    # ── Databases ────────────────────────────────────────────────

    async def create_database(self) -> DatabaseDetails:
        """``POST /api/databases``"""
        data = await self._json("POST", "databases", timeout=_MUTATING_TIMEOUT)
        return _parse(DatabaseDetails, data, "databases")

    async def get_my_database(self) -> Optional[DatabaseDetails]:
        """``GET /api/databases/me`` (``None`` when the caller has none)"""
        data = await self._json("GET", "databases/me")
        if data is None:
            return None
        return _parse(DatabaseDetails, data, "databases/me")

    async def delete_database(self, db_id: int) -> None:
        """``DELETE /api/databases/{db_id}``"""
        await self._request("DELETE", f"databases/{db_id}")

    async def link_database_to_project(self, project_id: int, db_id: int) -> None:
        """``POST /api/projects/{id}/database``"""
        await self._request(
            "POST", f"projects/{project_id}/database", json={"database_id": db_id}
        )

    async def unlink_database_from_project(self, project_id: int) -> None:
        """``DELETE /api/projects/{id}/database/link``"""
        await self._request("DELETE", f"projects/{project_id}/database/link")

    async def delete_linked_database(self, project_id: int) -> None:
        """``DELETE /api/projects/{id}/database``"""
        await self._request("DELETE", f"projects/{project_id}/database")
