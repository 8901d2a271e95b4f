"""Catalog — the in-memory name → id map for one resource kind.

A catalog is seeded by paging through the remote list operation and then
extended with every resource created (or, in dry-run, simulated) during
the current run, so later kinds can reference earlier ones by name.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

from aiagents.manifest.models import ResourceKind

if TYPE_CHECKING:
    from aiagents.api.models import ResourcePage
    from aiagents.api.provider import ResourceCapability
    from aiagents.deploy.context import DeployContext

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 100

ListOperation = Callable[[int, int], Awaitable["ResourcePage"]]
CreateOperation = Callable[[dict[str, Any]], Awaitable[str]]


def list_operation(capability: ResourceCapability, kind: ResourceKind) -> ListOperation:
    """Return the capability's list method for *kind*."""
    if kind is ResourceKind.MCP_SERVER:
        return capability.list_mcp_servers
    if kind is ResourceKind.AGENT:
        return capability.list_agents
    return capability.list_agent_systems


def create_operation(capability: ResourceCapability, kind: ResourceKind) -> CreateOperation:
    """Return the capability's create method for *kind*."""
    if kind is ResourceKind.MCP_SERVER:
        return capability.create_mcp_server
    if kind is ResourceKind.AGENT:
        return capability.create_agent
    return capability.create_agent_system


def pending_id(name: str) -> str:
    """Placeholder id for a resource that a dry-run would create."""
    return f"<pending:{name}>"


class Catalog:
    """Exact, case-sensitive name lookup for one resource kind."""

    def __init__(self, kind: ResourceKind, entries: dict[str, str] | None = None) -> None:
        self.kind = kind
        self._ids: dict[str, str] = dict(entries or {})

    def add(self, name: str, resource_id: str) -> None:
        self._ids[name] = resource_id

    def lookup(self, name: str) -> str | None:
        return self._ids.get(name)

    def names(self) -> list[str]:
        return list(self._ids)

    def __contains__(self, name: object) -> bool:
        return name in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def __repr__(self) -> str:
        return f"Catalog({self.kind.value!r}, {len(self._ids)} entries)"


async def load_catalog(
    kind: ResourceKind,
    capability: ResourceCapability,
    context: DeployContext,
    *,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> Catalog:
    """Page through the remote list for *kind* and build its catalog.

    When the remote holds several resources with the same name, the first
    one listed wins.

    Raises:
        CapabilityError: If a list call fails.
        DeployCancelledError: If the run is cancelled while listing.
    """
    lister = list_operation(capability, kind)
    catalog = Catalog(kind)
    offset = 0
    while True:
        page = await context.call(lister, page_size, offset)
        for item in page.data:
            if item.name in catalog:
                logger.debug("Ignoring duplicate remote %s name %s", kind.label, item.name)
                continue
            catalog.add(item.name, item.id)
        offset += len(page.data)
        if not page.data or offset >= page.total:
            break
    logger.info("Loaded %d existing %s(s)", len(catalog), kind.label)
    return catalog
