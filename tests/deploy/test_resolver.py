"""Tests for name resolution against catalogs."""

from __future__ import annotations

from aiagents.deploy.catalog import Catalog
from aiagents.deploy.resolver import resolve_references
from aiagents.errors import ErrorKind
from aiagents.manifest.models import AgentSpec, AgentSystemSpec, ResourceKind


def _agent(name: str, servers: list[str]) -> AgentSpec:
    return AgentSpec(index=0, name=name, llm_options={"provider": "x"}, mcp_servers=servers)


class TestResolveReferences:
    def test_all_resolved_in_reference_order(self) -> None:
        catalog = Catalog(ResourceKind.MCP_SERVER, {"postgres": "srv-1", "redis": "srv-2"})
        specs = [_agent("bot-one", ["redis", "postgres"])]

        resolved, errors = resolve_references(specs, catalog)

        assert errors == []
        assert resolved[0].resolved_ids == ["srv-2", "srv-1"]
        assert resolved[0].is_resolved
        assert resolved[0].mcp_servers == ["redis", "postgres"]

    def test_missing_names_are_collected_per_spec(self) -> None:
        catalog = Catalog(ResourceKind.MCP_SERVER, {"postgres": "srv-1"})
        specs = [
            _agent("bot-one", ["postgres", "ghost", "phantom"]),
            _agent("bot-two", ["postgres"]),
            _agent("bot-three", ["ghost"]),
        ]

        resolved, errors = resolve_references(specs, catalog)

        assert [r.name for r in resolved] == ["bot-one", "bot-two", "bot-three"]
        assert [e.spec_name for e in errors] == ["bot-one", "bot-three"]
        assert errors[0].missing == ["ghost", "phantom"]
        assert errors[0].kind is ErrorKind.NAME_RESOLUTION
        assert str(errors[0]) == "bot-one: unknown MCP server 'ghost', 'phantom'"
        assert not resolved[0].is_resolved
        assert resolved[1].is_resolved

    def test_originals_are_not_modified(self) -> None:
        catalog = Catalog(ResourceKind.AGENT, {"bot-one": "ag-1"})
        spec = AgentSystemSpec(index=0, name="helpdesk", agents=["bot-one"])

        resolved, _ = resolve_references([spec], catalog)

        assert spec.resolved_ids == []
        assert resolved[0].resolved_ids == ["ag-1"]

    def test_no_references(self) -> None:
        resolved, errors = resolve_references([_agent("bot-one", [])], Catalog(ResourceKind.MCP_SERVER))
        assert errors == []
        assert resolved[0].is_resolved
