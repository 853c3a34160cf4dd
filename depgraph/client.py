"""Async HTTP client for the dependency-graph API.

Three endpoints, all ``POST`` with a JSON body and a bearer token:

    /impact   deterministic field-name impact trace   {field_name, curriculumId?}
    /ask      natural-language question               {query, curriculumId?}
    /raw      execute a (possibly hand-edited) query  {query, curriculumId?}

Every endpoint answers ``{nodes, edges, cypher?}``.
"""

from __future__ import annotations

from typing import Any

import httpx

DEFAULT_PATH_PREFIX = "/brum-proxy/graph"

FETCH_FAILED = "Failed to fetch dependency graph"
EXECUTE_FAILED = "Failed to execute custom query"


class GraphApiError(Exception):
    """The API answered with a non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _error_message(response: httpx.Response, fallback: str) -> str:
    """Prefer the server's ``message`` field; tolerate any body at all."""
    try:
        body = response.json()
    except ValueError:
        return fallback
    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, str) and message.strip():
            return message
    return fallback


class GraphApiClient:
    """Thin wrapper over ``httpx.AsyncClient`` for the three graph endpoints.

    A fresh ``AsyncClient`` is opened per call; nothing is pooled between
    actions.
    """

    def __init__(
        self,
        base_url: str,
        context_id: str | None = None,
        path_prefix: str = DEFAULT_PATH_PREFIX,
        timeout: float = 30.0,
    ) -> None:
        prefix = path_prefix.strip("/")
        root = base_url.rstrip("/")
        self.root = f"{root}/{prefix}" if prefix else root
        self.context_id = context_id
        self.timeout = timeout

    async def impact(self, field_name: str, token: str) -> dict[str, Any]:
        return await self._post("impact", {"field_name": field_name}, token, FETCH_FAILED)

    async def ask(self, question: str, token: str) -> dict[str, Any]:
        return await self._post("ask", {"query": question}, token, FETCH_FAILED)

    async def run_raw(self, query: str, token: str) -> dict[str, Any]:
        return await self._post("raw", {"query": query}, token, EXECUTE_FAILED)

    async def _post(
        self,
        endpoint: str,
        body: dict[str, Any],
        token: str,
        fallback: str,
    ) -> dict[str, Any]:
        """POST *body* and return the decoded JSON response.

        Raises:
            GraphApiError: On a non-2xx status.
            httpx.HTTPError: On transport failures.
            ValueError: If a 2xx body is not valid JSON.
        """
        if self.context_id:
            body = {**body, "curriculumId": self.context_id}

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(
                f"{self.root}/{endpoint}",
                json=body,
                headers={
                    "Content-Type": "application/json",
                    "Authorization": f"Bearer {token}",
                },
            )

        if not response.is_success:
            raise GraphApiError(_error_message(response, fallback), response.status_code)
        return response.json()
