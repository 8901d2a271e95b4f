"""APIClient — the HTTP implementation of :class:`ResourceCapability`."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import ValidationError

from aiagents.api.errors import APIConnectionError, APIError
from aiagents.api.models import CreatedResource, ErrorBody, ResourcePage

if TYPE_CHECKING:
    from aiagents.config import Settings

logger = logging.getLogger(__name__)

_MCP_SERVERS = "mcpServers"
_AGENTS = "agents"
_AGENT_SYSTEMS = "agentSystems"


class APIClient:
    """Talks to the resource API over HTTP.

    Satisfies the :class:`~aiagents.api.provider.ResourceCapability` protocol.

    Usage::

        async with APIClient(settings) as client:
            page = await client.list_agents(limit=100, offset=0)
            agent_id = await client.create_agent({"name": "support-bot", ...})
    """

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._project_id = settings.require_project()
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> APIClient:
        headers = {"Content-Type": "application/json"}
        if self._settings.token:
            headers["Authorization"] = f"Bearer {self._settings.token}"
        self._client = httpx.AsyncClient(
            base_url=self._settings.api_url.rstrip("/"),
            headers=headers,
            timeout=self._settings.timeout,
        )
        return self

    async def __aexit__(self, *_: object) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            msg = "APIClient must be used as an async context manager"
            raise RuntimeError(msg)
        return self._client

    def _path(self, collection: str) -> str:
        return f"/api/v1/{self._project_id}/{collection}"

    async def _request(
        self,
        operation: str,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        logger.debug("%s %s params=%s", method, path, params)
        try:
            response = await self._http().request(method, path, params=params, json=json)
        except httpx.HTTPError as exc:
            raise APIConnectionError(operation, str(exc)) from exc

        logger.debug("%s %s -> %d", method, path, response.status_code)
        if response.status_code >= 400:
            raise APIError(operation, response.status_code, self._error_message(response))

        try:
            return response.json()
        except ValueError as exc:
            raise APIError(operation, response.status_code, "response is not valid JSON") from exc

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = ErrorBody.model_validate(response.json())
        except (ValueError, ValidationError):
            return response.text
        return body.message or response.text

    async def _list(self, collection: str, limit: int, offset: int) -> ResourcePage:
        operation = f"list {collection}"
        data = await self._request(
            operation,
            "GET",
            self._path(collection),
            params={"limit": limit, "offset": offset},
        )
        try:
            return ResourcePage.model_validate(data)
        except ValidationError as exc:
            raise APIError(operation, 200, f"unexpected response shape: {exc}") from exc

    async def _create(self, collection: str, payload: dict[str, Any]) -> str:
        operation = f"create {collection}"
        data = await self._request(operation, "POST", self._path(collection), json=payload)
        try:
            return CreatedResource.model_validate(data).id
        except ValidationError as exc:
            raise APIError(operation, 200, "response has no resource id") from exc

    async def list_mcp_servers(self, limit: int, offset: int) -> ResourcePage:
        return await self._list(_MCP_SERVERS, limit, offset)

    async def create_mcp_server(self, payload: dict[str, Any]) -> str:
        return await self._create(_MCP_SERVERS, payload)

    async def list_agents(self, limit: int, offset: int) -> ResourcePage:
        return await self._list(_AGENTS, limit, offset)

    async def create_agent(self, payload: dict[str, Any]) -> str:
        """Create an agent, adding the configured instance type if any."""
        if self._settings.instance_type_id and "instanceTypeId" not in payload:
            payload = {**payload, "instanceTypeId": self._settings.instance_type_id}
        return await self._create(_AGENTS, payload)

    async def list_agent_systems(self, limit: int, offset: int) -> ResourcePage:
        return await self._list(_AGENT_SYSTEMS, limit, offset)

    async def create_agent_system(self, payload: dict[str, Any]) -> str:
        return await self._create(_AGENT_SYSTEMS, payload)
