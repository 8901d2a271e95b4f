"""Tests for the manifest document models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from aiagents.manifest.models import AgentSpec, ResourceKind
from aiagents.manifest.schema import (
    AgentDocument,
    ManifestDocument,
    check_name,
    declared_names,
)


class TestCheckName:
    @pytest.mark.parametrize("name", ["abc", "a1b", "support-bot", "0-9", "a" * 50])
    def test_valid(self, name: str) -> None:
        assert check_name(name) is None

    @pytest.mark.parametrize("name", ["", "ab", "a" * 51])
    def test_length(self, name: str) -> None:
        assert check_name(name) == "must be 3-50 characters long"

    @pytest.mark.parametrize("name", ["Support", "bot_1", "bot.x", "bot bot", "ботик"])
    def test_charset(self, name: str) -> None:
        assert check_name(name) == "must contain only lowercase letters, digits and hyphens"

    @pytest.mark.parametrize("name", ["-bot", "bot-", "---"])
    def test_hyphen_edges(self, name: str) -> None:
        assert check_name(name) == "must not start or end with a hyphen"


class TestDeclaredNames:
    def test_collects_positions_per_section(self) -> None:
        tree = {
            "mcp-servers": [{"name": "postgres"}, "junk", {"name": "postgres"}],
            "agents": {"not": "a list"},
        }
        assert declared_names(tree) == {"mcp-servers": {"postgres": [0, 2]}}

    def test_non_mapping(self) -> None:
        assert declared_names(["x"]) == {}


class TestManifestDocument:
    def test_sections_only_lists_declared_kinds(self) -> None:
        document = ManifestDocument.model_validate({"agents": [], "mcp-servers": [{"name": "postgres"}]})

        sections = document.sections()

        assert list(sections) == [ResourceKind.MCP_SERVER, ResourceKind.AGENT]
        assert sections[ResourceKind.AGENT] == []

    def test_python_field_names_are_not_sections(self) -> None:
        with pytest.raises(ValidationError):
            ManifestDocument.model_validate({"mcp_servers": []})

    def test_duplicates_need_context(self) -> None:
        tree = {"mcp-servers": [{"name": "postgres"}, {"name": "postgres"}]}

        ManifestDocument.model_validate(tree)
        with pytest.raises(ValidationError, match="duplicate name"):
            ManifestDocument.model_validate(tree, context={"names": declared_names(tree)})


class TestAgentDocument:
    def test_to_spec_keeps_extra_llm_options(self) -> None:
        document = AgentDocument.model_validate(
            {
                "name": "support-bot",
                "llm_options": {"provider": "openai", "model": "gpt-4o"},
                "mcp_servers": ["postgres"],
            }
        )

        spec = document.to_spec(3)

        assert spec == AgentSpec(
            index=3,
            name="support-bot",
            llm_options={"provider": "openai", "model": "gpt-4o"},
            mcp_servers=["postgres"],
        )
