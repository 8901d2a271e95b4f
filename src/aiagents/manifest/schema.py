"""Pydantic models for the manifest document as written in YAML.

These describe the *shape* of an expanded manifest: which sections and
fields exist, their types and their limits.  :mod:`~aiagents.manifest.validator`
turns their validation errors into field-path issues and
:mod:`~aiagents.manifest.extractor` turns a validated document into specs.

Duplicate names are checked against the ``names`` entry of the validation
context (see :func:`declared_names`), so they are reported together with
every other problem in the document.
"""

from __future__ import annotations

from typing import Annotated, Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator
from pydantic_core import PydanticCustomError

from aiagents.manifest.includes import is_include
from aiagents.manifest.models import (
    APPLY_ORDER,
    AgentSpec,
    AgentSystemSpec,
    MCPServerSpec,
    ResourceKind,
    Spec,
    format_path,
)

NAME_MIN_LENGTH = 3
NAME_MAX_LENGTH = 50
DESCRIPTION_MAX_LENGTH = 500

ReferenceName = Annotated[str, Field(min_length=1)]


def check_name(name: str) -> str | None:
    """Return why *name* is not a valid resource name, or ``None``.

    Valid names are 3-50 characters of lowercase ASCII letters, digits and
    hyphens, and neither start nor end with a hyphen.
    """
    if not NAME_MIN_LENGTH <= len(name) <= NAME_MAX_LENGTH:
        return f"must be {NAME_MIN_LENGTH}-{NAME_MAX_LENGTH} characters long"
    for ch in name:
        if not ("a" <= ch <= "z" or "0" <= ch <= "9" or ch == "-"):
            return "must contain only lowercase letters, digits and hyphens"
    if name[0] == "-" or name[-1] == "-":
        return "must not start or end with a hyphen"
    return None


def declared_names(tree: Any) -> dict[str, dict[str, list[int]]]:
    """Map section key to name to every element index declaring it."""
    names: dict[str, dict[str, list[int]]] = {}
    if not isinstance(tree, dict):
        return names
    for kind in APPLY_ORDER:
        elements = tree.get(kind.value)
        if not isinstance(elements, list):
            continue
        positions = names.setdefault(kind.value, {})
        for index, element in enumerate(elements):
            if isinstance(element, dict) and isinstance(element.get("name"), str):
                positions.setdefault(element["name"], []).append(index)
    return names


class _ElementDocument(BaseModel):
    """Fields shared by every resource element."""

    model_config = ConfigDict(extra="forbid")

    kind: ClassVar[ResourceKind]

    name: str
    description: str = Field(default="", max_length=DESCRIPTION_MAX_LENGTH)
    options: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _reject_include(cls, data: Any) -> Any:
        if is_include(data):
            raise PydanticCustomError("unresolved_include", "unresolved include")
        return data

    @field_validator("name")
    @classmethod
    def _valid_name(cls, value: str, info: ValidationInfo) -> str:
        problem = check_name(value)
        if problem is not None:
            raise PydanticCustomError("invalid_name", problem)

        names = (info.context or {}).get("names", {})
        positions = names.get(cls.kind.value, {}).get(value, [])
        if len(positions) > 1:
            raise PydanticCustomError(
                "duplicate_name",
                "duplicate name '{name}' (declared at {paths})",
                {
                    "name": value,
                    "paths": ", ".join(format_path((cls.kind.value, i, "name")) for i in positions),
                },
            )
        return value

    def _common(self, index: int) -> dict[str, Any]:
        return {
            "index": index,
            "name": self.name,
            "description": self.description,
            "options": dict(self.options),
        }


class MCPServerDocument(_ElementDocument):
    kind: ClassVar[ResourceKind] = ResourceKind.MCP_SERVER

    def to_spec(self, index: int) -> MCPServerSpec:
        return MCPServerSpec(**self._common(index))


class LLMOptions(BaseModel):
    """Model settings for an agent; only ``provider`` is required."""

    model_config = ConfigDict(extra="allow")

    provider: str = Field(min_length=1)


class AgentDocument(_ElementDocument):
    kind: ClassVar[ResourceKind] = ResourceKind.AGENT

    llm_options: LLMOptions
    mcp_servers: list[ReferenceName] = Field(default_factory=list)

    def to_spec(self, index: int) -> AgentSpec:
        return AgentSpec(
            llm_options=self.llm_options.model_dump(),
            mcp_servers=list(self.mcp_servers),
            **self._common(index),
        )


class AgentSystemDocument(_ElementDocument):
    kind: ClassVar[ResourceKind] = ResourceKind.AGENT_SYSTEM

    agents: list[ReferenceName] = Field(min_length=1)

    def to_spec(self, index: int) -> AgentSystemSpec:
        return AgentSystemSpec(agents=list(self.agents), **self._common(index))


_SECTION_FIELDS = {
    ResourceKind.MCP_SERVER: "mcp_servers",
    ResourceKind.AGENT: "agents",
    ResourceKind.AGENT_SYSTEM: "agent_systems",
}


class ManifestDocument(BaseModel):
    """Top-level manifest: up to three sections, nothing else."""

    model_config = ConfigDict(extra="forbid")

    mcp_servers: list[MCPServerDocument] = Field(default_factory=list, alias="mcp-servers")
    agents: list[AgentDocument] = Field(default_factory=list)
    agent_systems: list[AgentSystemDocument] = Field(default_factory=list, alias="agent-systems")

    def sections(self) -> dict[ResourceKind, list[Spec]]:
        """Specs of every section the document declares, in apply order."""
        sections: dict[ResourceKind, list[Spec]] = {}
        for kind in APPLY_ORDER:
            field = _SECTION_FIELDS[kind]
            if field not in self.model_fields_set:
                continue
            elements = getattr(self, field)
            sections[kind] = [element.to_spec(index) for index, element in enumerate(elements)]
        return sections
