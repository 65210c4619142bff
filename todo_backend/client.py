"""Async HTTP client for the todo backend."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx

from .errors import StoreError, error_for_status
from .models.todo import Todo


class TodoClient:
    """Speaks the backend's JSON envelope over HTTP.

    Use as an async context manager::

        async with TodoClient("http://127.0.0.1:7878") as client:
            todo = await client.create_todo("buy milk", "2%")
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    async def __aenter__(self) -> "TodoClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        try:
            response = await self._client.request(method, url, params=params, json=json)
        except (httpx.TimeoutException, httpx.TransportError) as exc:
            raise StoreError(f"Todo API request failed: {exc}") from exc
        try:
            payload = response.json()
        except ValueError as exc:
            raise StoreError(f"Todo API returned a non-JSON response ({response.status_code})") from exc
        if not isinstance(payload, dict):
            raise StoreError(f"Todo API returned an unexpected payload ({response.status_code})")
        if response.is_error or not payload.get("success"):
            message = payload.get("error") or f"Todo API error ({response.status_code})"
            raise error_for_status(response.status_code, message)
        return payload

    async def list_todos(self) -> List[Todo]:
        payload = await self._request("GET", "/todos")
        return [Todo.model_validate(item) for item in payload.get("todos", [])]

    async def get_todo(self, todo_id: int) -> Todo:
        payload = await self._request("GET", "/todos/todo", params={"id": todo_id})
        return Todo.model_validate(payload["todo"])

    async def get_todo_by_name(self, name: str) -> Todo:
        payload = await self._request("GET", "/todos/todo", params={"name": name})
        return Todo.model_validate(payload["todo"])

    async def create_todo(self, name: str, description: str = "") -> Todo:
        payload = await self._request(
            "POST",
            "/todos",
            json={"name": name, "description": description},
        )
        return Todo.model_validate(payload["todo"])

    async def mark_done(self, todo_id: int) -> Todo:
        payload = await self._request("PATCH", "/todos/todo", params={"id": todo_id})
        return Todo.model_validate(payload["todo"])

    async def update_todo(self, todo_id: int, name: str, description: str, done: bool) -> Todo:
        payload = await self._request(
            "PUT",
            "/todos/todo",
            params={"id": todo_id},
            json={"name": name, "description": description, "done": done},
        )
        return Todo.model_validate(payload["todo"])

    async def delete_todo(self, todo_id: int) -> str:
        payload = await self._request("DELETE", "/todos/todo", params={"id": todo_id})
        return payload["message"]
