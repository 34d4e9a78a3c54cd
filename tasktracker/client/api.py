import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from ..config import API_BASE_URL, REQUEST_TIMEOUT_SECONDS
from ..errors import ERRORS_BY_CODE, NetworkError, NotFoundError, PersistenceError, ValidationError
from ..schemas.task import Task

logger = logging.getLogger(__name__)

_ERRORS_BY_STATUS = {
    404: NotFoundError,
    422: ValidationError,
    500: PersistenceError,
}


class TaskApiClient:
    """Thin async wrapper over the four task endpoints.

    Every failure comes back as a :mod:`tasktracker.errors` exception:
    transport problems and unexpected statuses as ``NetworkError``, typed
    server errors as their matching class.
    """

    def __init__(
        self,
        base_url: str = API_BASE_URL,
        *,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def __aenter__(self) -> "TaskApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _send(self, method: str, path: str, json: Optional[Dict[str, Any]] = None) -> httpx.Response:
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.HTTPError as exc:
            logger.error("%s %s failed: %s", method, path, exc)
            raise NetworkError(f"Request to {path} failed") from exc

        if not response.is_success:
            raise self._error_from(response)
        return response

    async def _request(self, method: str, path: str, json: Optional[Dict[str, Any]] = None) -> Any:
        response = await self._send(method, path, json=json)
        try:
            return response.json()
        except ValueError as exc:
            logger.error("%s %s returned a non-JSON body", method, path)
            raise NetworkError(f"Malformed response from {path}") from exc

    @staticmethod
    def _parse_task(data: Any) -> Task:
        try:
            return Task.model_validate(data)
        except PydanticValidationError as exc:
            logger.error("Malformed task in response: %s", exc)
            raise NetworkError("Malformed task in response") from exc

    @staticmethod
    def _error_from(response: httpx.Response) -> Exception:
        message = f"Unexpected status {response.status_code}"
        code = None
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            message = body.get("error") or message
            code = body.get("code")

        error_cls = ERRORS_BY_CODE.get(code) or _ERRORS_BY_STATUS.get(response.status_code, NetworkError)
        logger.warning(
            "%s %s -> %s %s",
            response.request.method,
            response.request.url.path,
            response.status_code,
            message,
        )
        return error_cls(message)

    async def list_tasks(self) -> List[Task]:
        data = await self._request("GET", "/api/tasks/get")
        if not isinstance(data, list):
            logger.warning("Expected a task array, got %s", type(data).__name__)
            return []
        return [self._parse_task(item) for item in data]

    async def create_task(
        self,
        title: str,
        description: Optional[str] = None,
        assigned_to: Optional[str] = None,
        created_at: Optional[str] = None,
    ) -> Task:
        payload = {"title": title, "description": description, "assignedTo": assigned_to}
        if created_at is not None:
            payload["createdAt"] = created_at
        data = await self._request("POST", "/api/tasks/create", json=payload)
        return self._parse_task(data)

    async def update_task(self, task_id: str, **changes: Any) -> Task:
        payload = {"id": task_id}
        payload.update(_camelize(changes))
        data = await self._request("PUT", "/api/tasks/update", json=payload)
        return self._parse_task(data)

    async def delete_task(self, task_id: str) -> None:
        await self._send("DELETE", "/api/tasks/delete", json={"id": task_id})


def _camelize(changes: Dict[str, Any]) -> Dict[str, Any]:
    if "assigned_to" in changes:
        changes = dict(changes)
        changes["assignedTo"] = changes.pop("assigned_to")
    return changes
