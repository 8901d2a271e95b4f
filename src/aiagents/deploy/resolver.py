"""Name resolver — map symbolic cross-references to remote identifiers.

Agents name their MCP servers and agent systems name their agents.  Each
name is looked up in the catalog of the referenced kind.  A miss marks the
spec unusable but resolution continues, so every miss is reported at once.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, TypeVar

from aiagents.errors import NameResolutionError

if TYPE_CHECKING:
    from aiagents.deploy.catalog import Catalog
    from aiagents.manifest.models import AgentSpec, AgentSystemSpec, MCPServerSpec

logger = logging.getLogger(__name__)

SpecT = TypeVar("SpecT", "MCPServerSpec", "AgentSpec", "AgentSystemSpec")


def resolve_references(
    specs: Sequence[SpecT],
    catalog: Catalog,
) -> tuple[list[SpecT], list[NameResolutionError]]:
    """Attach resolved ids to every spec that references *catalog*'s kind.

    Returns copies of *specs* in the same order.  Each copy carries
    ``resolved_ids`` (in the order of its references) and ``unresolved``
    (the names that were not found); the original name list is untouched.
    """
    resolved: list[SpecT] = []
    errors: list[NameResolutionError] = []

    for spec in specs:
        ids: list[str] = []
        missing: list[str] = []
        for name in spec.references:
            resource_id = catalog.lookup(name)
            if resource_id is None:
                missing.append(name)
            else:
                ids.append(resource_id)

        if missing:
            error = NameResolutionError(catalog.kind.label, spec.name, missing)
            logger.debug("Unresolved references: %s", error)
            errors.append(error)

        resolved.append(spec.model_copy(update={"resolved_ids": ids, "unresolved": missing}))

    return resolved, errors
