"""Manifest models — resource kinds, typed specs, and validation results.

A manifest document has up to three sections (``mcp-servers``, ``agents``,
``agent-systems``).  After validation each section element becomes one of
the spec models below.  Specs keep their position in the document so that
errors can point back at ``kind[index]``.

Example YAML::

    mcp-servers:
      - name: postgres-db
        options: {image: postgres-mcp}
    agents:
      - name: support-bot
        llm_options: {provider: openai, model: gpt-4o}
        mcp_servers: [postgres-db]
    agent-systems:
      - name: helpdesk
        agents: [support-bot]
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field

PathSegment = str | int


class ResourceKind(StrEnum):
    """The three resource kinds, valued by their manifest section key."""

    MCP_SERVER = "mcp-servers"
    AGENT = "agents"
    AGENT_SYSTEM = "agent-systems"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def reference_kind(self) -> ResourceKind | None:
        """The kind this kind refers to by name, if any."""
        return _REFERENCES.get(self)


_LABELS = {
    ResourceKind.MCP_SERVER: "MCP server",
    ResourceKind.AGENT: "agent",
    ResourceKind.AGENT_SYSTEM: "agent system",
}

_REFERENCES = {
    ResourceKind.AGENT: ResourceKind.MCP_SERVER,
    ResourceKind.AGENT_SYSTEM: ResourceKind.AGENT,
}

# Apply order: referenced kinds come before the kinds that reference them.
APPLY_ORDER: tuple[ResourceKind, ...] = (
    ResourceKind.MCP_SERVER,
    ResourceKind.AGENT,
    ResourceKind.AGENT_SYSTEM,
)


def format_path(segments: tuple[PathSegment, ...] | list[PathSegment]) -> str:
    """Render path segments as ``agents[2].llm_options.provider``."""
    out = ""
    for segment in segments:
        if isinstance(segment, int):
            out += f"[{segment}]"
        elif out:
            out += f".{segment}"
        else:
            out = segment
    return out


class ValidationIssue(BaseModel):
    """A single structural violation at a field path."""

    field: str
    message: str
    value: str | None = None

    def __str__(self) -> str:
        text = f"{self.field}: {self.message}"
        if self.value is not None:
            text += f" (got {self.value})"
        return text


class ValidationResult(BaseModel):
    """Every issue found in one validation pass, in document order."""

    errors: list[ValidationIssue] = []

    @property
    def valid(self) -> bool:
        return not self.errors


class _SpecBase(BaseModel):
    kind: ResourceKind
    index: int
    name: str
    description: str = ""
    options: dict[str, Any] = Field(default_factory=dict)
    resolved_ids: list[str] = []
    unresolved: list[str] = []

    @property
    def path(self) -> str:
        return format_path([self.kind.value, self.index])

    @property
    def references(self) -> list[str]:
        """Names of resources of ``kind.reference_kind`` this spec needs."""
        return []

    @property
    def is_resolved(self) -> bool:
        return not self.unresolved and len(self.resolved_ids) == len(self.references)

    def _base_payload(self) -> dict[str, Any]:
        return {"name": self.name, "description": self.description, "options": dict(self.options)}


class MCPServerSpec(_SpecBase):
    kind: Literal[ResourceKind.MCP_SERVER] = ResourceKind.MCP_SERVER

    def payload(self) -> dict[str, Any]:
        return self._base_payload()


class AgentSpec(_SpecBase):
    """An agent; ``llm_options`` is submitted as ``options.llm``."""

    kind: Literal[ResourceKind.AGENT] = ResourceKind.AGENT
    llm_options: dict[str, Any]
    mcp_servers: list[str] = []

    @property
    def references(self) -> list[str]:
        return self.mcp_servers

    def payload(self) -> dict[str, Any]:
        payload = self._base_payload()
        payload["options"]["llm"] = dict(self.llm_options)
        payload["mcpServers"] = list(self.resolved_ids)
        return payload


class AgentSystemSpec(_SpecBase):
    kind: Literal[ResourceKind.AGENT_SYSTEM] = ResourceKind.AGENT_SYSTEM
    agents: list[str]

    @property
    def references(self) -> list[str]:
        return self.agents

    def payload(self) -> dict[str, Any]:
        payload = self._base_payload()
        payload["agents"] = list(self.resolved_ids)
        return payload


Spec = Annotated[MCPServerSpec | AgentSpec | AgentSystemSpec, Field(discriminator="kind")]


class Manifest(BaseModel):
    """The typed projection of one expanded manifest document."""

    mcp_servers: list[MCPServerSpec] = []
    agents: list[AgentSpec] = []
    agent_systems: list[AgentSystemSpec] = []
    present: list[ResourceKind] = []

    def of_kind(self, kind: ResourceKind) -> list[MCPServerSpec] | list[AgentSpec] | list[AgentSystemSpec]:
        if kind is ResourceKind.MCP_SERVER:
            return self.mcp_servers
        if kind is ResourceKind.AGENT:
            return self.agents
        return self.agent_systems

    def specs(self, kinds: tuple[ResourceKind, ...] = APPLY_ORDER) -> list[Spec]:
        """All specs of *kinds* in apply order (kind order, then document order)."""
        out: list[Spec] = []
        for kind in APPLY_ORDER:
            if kind in kinds:
                out.extend(self.of_kind(kind))
        return out

    def names(self, kind: ResourceKind) -> list[str]:
        return [spec.name for spec in self.of_kind(kind)]

    def has_section(self, kind: ResourceKind) -> bool:
        return kind in self.present
