"""ResourceCapability protocol — what the deployment pipeline needs from the API.

The pipeline never talks HTTP directly.  It receives an object satisfying
this protocol, built at the program edge (see :class:`APIClient`), which
makes the catalog and reconciler testable with an in-memory fake.

Cancellation is cooperative: every method is a coroutine, so cancelling
the awaiting task (or an enclosing deadline) cancels the call.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from aiagents.api.models import ResourcePage


@runtime_checkable
class ResourceCapability(Protocol):
    """Lists and creates MCP servers, agents, and agent systems."""

    async def list_mcp_servers(self, limit: int, offset: int) -> ResourcePage:
        """Return one page of existing MCP servers."""
        ...

    async def create_mcp_server(self, payload: dict[str, Any]) -> str:
        """Create an MCP server and return its identifier.

        Raises:
            CapabilityError: If the remote operation fails.
        """
        ...

    async def list_agents(self, limit: int, offset: int) -> ResourcePage:
        """Return one page of existing agents."""
        ...

    async def create_agent(self, payload: dict[str, Any]) -> str:
        """Create an agent and return its identifier."""
        ...

    async def list_agent_systems(self, limit: int, offset: int) -> ResourcePage:
        """Return one page of existing agent systems."""
        ...

    async def create_agent_system(self, payload: dict[str, Any]) -> str:
        """Create an agent system and return its identifier."""
        ...
