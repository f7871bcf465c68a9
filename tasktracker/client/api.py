# tasktracker/client/api.py
"""
Async HTTP client for the task endpoints.

Every call returns parsed schema objects or raises `ApiError`; the cache
layer above only ever has to handle that one exception type.
"""
from __future__ import annotations

from typing import Any, Optional

import httpx
from pydantic import BaseModel

from ..config import get_settings
from ..errors import ApiError
from ..logging import logger
from ..schemas import DeleteResult, TaskOut, TaskPage


class TaskApiClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        # A caller-supplied client (e.g. bound to an ASGI transport) is not ours to close
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url or get_settings().API_BASE_URL,
            headers={"Accept": "application/json"},
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "TaskApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _request(
        self,
        method: str,
        url: str,
        model: type[BaseModel],
        *,
        first: bool = False,
        **kwargs: Any,
    ) -> Any:
        """Send one request and parse the body into `model` (from a one-item list if `first`)."""
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.warning(f"{method} {url} did not complete: {e}")
            raise ApiError(f"Request failed: {e}") from e

        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = None
            message = body.get("error") if isinstance(body, dict) else None
            raise ApiError(message or response.reason_phrase, status_code=response.status_code)

        # A 2xx that is not the expected JSON is still a failed call:
        # ValueError covers bad JSON and pydantic.ValidationError, the others a wrong shape
        try:
            body = response.json()
            if first:
                body = body[0]
            return model.model_validate(body)
        except (ValueError, LookupError, TypeError) as e:
            logger.warning(f"{method} {url} returned an unexpected body: {e}")
            raise ApiError(
                f"Unexpected response from server: {e}", status_code=response.status_code
            ) from e

    async def list_tasks(self, params: dict[str, Any]) -> TaskPage:
        return await self._request("GET", "/tasks", TaskPage, params=params)

    async def get_task(self, task_id: int) -> TaskOut:
        return await self._request("GET", f"/tasks/{task_id}", TaskOut)

    async def create_task(self, description: str) -> TaskOut:
        return await self._request(
            "POST", "/tasks", TaskOut, first=True, json={"description": description}
        )

    async def update_description(self, task_id: int, description: str) -> TaskOut:
        return await self._request(
            "PUT", f"/tasks/{task_id}", TaskOut, first=True, json={"description": description}
        )

    async def update_status(self, task_id: int, status: str) -> TaskOut:
        return await self._request(
            "PATCH", f"/tasks/{task_id}", TaskOut, first=True, json={"status": status}
        )

    async def delete_task(self, task_id: int) -> DeleteResult:
        return await self._request("DELETE", f"/tasks/{task_id}", DeleteResult)
