"""Tests for DeployPipeline and default manifest discovery."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from aiagents.deploy.models import DeployMode, ResultStatus
from aiagents.deploy.pipeline import DeployPipeline, DeployTarget, find_manifest
from aiagents.errors import IncludeError, ManifestFileNotFoundError, ManifestValidationError
from aiagents.manifest.models import ResourceKind
from tests.fakes import FakeCapability

if TYPE_CHECKING:
    from pathlib import Path

_FULL_YAML = """\
mcp-servers:
  - name: postgres
agents:
  - name: support-bot
    llm_options: {provider: openai}
    mcp_servers: [postgres]
agent-systems:
  - name: helpdesk
    agents: [support-bot]
"""


class TestDeployTarget:
    def test_kinds(self) -> None:
        assert DeployTarget.MCP.kinds == (ResourceKind.MCP_SERVER,)
        assert DeployTarget.SYSTEM.kinds == (ResourceKind.AGENT_SYSTEM,)
        assert DeployTarget.ALL.kinds == (
            ResourceKind.MCP_SERVER,
            ResourceKind.AGENT,
            ResourceKind.AGENT_SYSTEM,
        )


class TestFindManifest:
    def test_first_existing_default_wins(self, tmp_path: Path) -> None:
        (tmp_path / "agent-systems.yaml").write_text("")
        (tmp_path / "systems.yml").write_text("")

        assert find_manifest(DeployTarget.SYSTEM, tmp_path) == tmp_path / "systems.yml"

    def test_all_defaults(self, tmp_path: Path) -> None:
        (tmp_path / "config.yaml").write_text("")
        (tmp_path / "deploy.yml").write_text("")

        assert find_manifest(DeployTarget.ALL, tmp_path) == tmp_path / "deploy.yml"

    def test_nothing_found(self, tmp_path: Path) -> None:
        with pytest.raises(ManifestFileNotFoundError, match="mcp-servers.yaml, mcp-servers.yml"):
            find_manifest(DeployTarget.MCP, tmp_path)

    def test_directories_are_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "agents.yaml").mkdir()
        with pytest.raises(ManifestFileNotFoundError):
            find_manifest(DeployTarget.AGENTS, tmp_path)


class TestDeployPipelineLoad:
    def test_scoped_target_requires_its_section(self, tmp_path: Path) -> None:
        f = tmp_path / "agents.yaml"
        f.write_text("mcp-servers:\n  - name: postgres\n")

        with pytest.raises(ManifestValidationError) as exc_info:
            DeployPipeline(f, DeployTarget.AGENTS).load()
        assert exc_info.value.issues[0].field == "agents"

    def test_all_requires_some_section(self, tmp_path: Path) -> None:
        f = tmp_path / "ai-agents.yaml"
        f.write_text("{}\n")

        with pytest.raises(ManifestValidationError) as exc_info:
            DeployPipeline(f, DeployTarget.ALL).load()
        assert exc_info.value.issues[0].field == "config"

    def test_whole_document_is_validated(self, tmp_path: Path) -> None:
        f = tmp_path / "mcp-servers.yaml"
        f.write_text("mcp-servers:\n  - name: postgres\nagents:\n  - name: BAD\n")

        with pytest.raises(ManifestValidationError) as exc_info:
            DeployPipeline(f, DeployTarget.MCP).load()
        assert {i.field for i in exc_info.value.issues} == {"agents[0].name", "agents[0].llm_options"}

    def test_include_cycle_is_fatal(self, tmp_path: Path) -> None:
        (tmp_path / "a.yaml").write_text('- "!include": root.yaml\n')
        root = tmp_path / "root.yaml"
        root.write_text('agents:\n  "!include": a.yaml\n')

        with pytest.raises(IncludeError, match="circular dependency"):
            DeployPipeline(root).load()


class TestDeployPipelineRun:
    async def test_scoped_target_applies_only_its_kind(self, tmp_path: Path) -> None:
        f = tmp_path / "ai-agents.yaml"
        f.write_text(_FULL_YAML)
        capability = FakeCapability()

        report = await DeployPipeline(f, DeployTarget.MCP).run(capability)

        assert [r.name for r in report.results] == ["postgres"]
        assert [name for _, name in capability.mutations] == ["postgres"]

    async def test_all_in_dry_run(self, tmp_path: Path) -> None:
        f = tmp_path / "ai-agents.yaml"
        f.write_text(_FULL_YAML)
        capability = FakeCapability()

        report = await DeployPipeline(f).run(capability, mode=DeployMode.DRY_RUN)

        assert [r.status for r in report.results] == [ResultStatus.SUCCESS] * 3
        assert capability.mutations == []

    async def test_include_cycle_makes_no_calls(self, tmp_path: Path) -> None:
        (tmp_path / "a.yaml").write_text('"!include": root.yaml\n')
        root = tmp_path / "root.yaml"
        root.write_text('"!include": a.yaml\n')
        capability = FakeCapability()

        with pytest.raises(IncludeError):
            await DeployPipeline(root).run(capability)
        assert capability.calls == []
