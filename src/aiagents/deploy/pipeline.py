"""Deploy pipeline — manifest file in, deployment report out.

Phases run strictly in sequence: include expansion, validation, extraction,
then reconciliation.  The first three are pure and fatal on error; only the
last one touches the capability.

Typical usage::

    pipeline = DeployPipeline(find_manifest(DeployTarget.ALL), DeployTarget.ALL)
    manifest = pipeline.load()
    async with APIClient(settings) as client:
        report = await pipeline.run(client, mode=DeployMode.DRY_RUN)
"""

from __future__ import annotations

import logging
from enum import StrEnum
from pathlib import Path
from typing import TYPE_CHECKING

from aiagents.deploy.catalog import DEFAULT_PAGE_SIZE
from aiagents.deploy.models import DeployMode, DeployReport
from aiagents.deploy.reconciler import ProgressCallback, apply_manifest
from aiagents.errors import ManifestFileNotFoundError, ManifestValidationError
from aiagents.manifest.loader import ManifestLoader
from aiagents.manifest.models import APPLY_ORDER, Manifest, ResourceKind, ValidationIssue

if TYPE_CHECKING:
    from aiagents.api.provider import ResourceCapability
    from aiagents.deploy.context import DeployContext

logger = logging.getLogger(__name__)


class DeployTarget(StrEnum):
    """What ``deploy <target>`` applies."""

    MCP = "mcp"
    AGENTS = "agents"
    SYSTEM = "system"
    ALL = "all"

    @property
    def kinds(self) -> tuple[ResourceKind, ...]:
        return _TARGET_KINDS[self]

    @property
    def default_files(self) -> tuple[str, ...]:
        return _DEFAULT_FILES[self]


_TARGET_KINDS: dict[DeployTarget, tuple[ResourceKind, ...]] = {
    DeployTarget.MCP: (ResourceKind.MCP_SERVER,),
    DeployTarget.AGENTS: (ResourceKind.AGENT,),
    DeployTarget.SYSTEM: (ResourceKind.AGENT_SYSTEM,),
    DeployTarget.ALL: APPLY_ORDER,
}

_DEFAULT_FILES: dict[DeployTarget, tuple[str, ...]] = {
    DeployTarget.MCP: ("mcp-servers.yaml", "mcp-servers.yml"),
    DeployTarget.AGENTS: ("agents.yaml", "agents.yml"),
    DeployTarget.SYSTEM: (
        "systems.yaml",
        "systems.yml",
        "agent-systems.yaml",
        "agent-systems.yml",
    ),
    DeployTarget.ALL: (
        "ai-agents.yaml",
        "ai-agents.yml",
        "deploy.yaml",
        "deploy.yml",
        "config.yaml",
        "config.yml",
    ),
}


def find_manifest(target: DeployTarget, directory: Path | None = None) -> Path:
    """Return the first default manifest for *target* that exists in *directory*.

    Raises:
        ManifestFileNotFoundError: If none of the default files exist.
    """
    base = directory or Path.cwd()
    for name in target.default_files:
        candidate = base / name
        if candidate.is_file():
            logger.debug("Using default manifest %s", candidate)
            return candidate
    raise ManifestFileNotFoundError(target.default_files)


class DeployPipeline:
    """Load, validate and apply one manifest file for one target."""

    def __init__(self, path: str | Path, target: DeployTarget = DeployTarget.ALL) -> None:
        self.path = Path(path)
        self.target = target
        self._loader = ManifestLoader(self.path)
        self._manifest: Manifest | None = None

    def load(self) -> Manifest:
        """Expand includes, validate, and extract the manifest.

        A kind-scoped target also requires its own section to be present.

        Raises:
            IncludeError: If include expansion fails.
            ManifestValidationError: If validation fails.
        """
        if self._manifest is not None:
            return self._manifest

        manifest = self._loader.load()
        if self.target is not DeployTarget.ALL:
            (kind,) = self.target.kinds
            if not manifest.has_section(kind):
                issue = ValidationIssue(field=kind.value, message="section is required for this deploy target")
                raise ManifestValidationError([issue])
        elif not manifest.present:
            sections = ", ".join(kind.value for kind in APPLY_ORDER)
            issue = ValidationIssue(field="config", message=f"no sections found; expected one of {sections}")
            raise ManifestValidationError([issue])

        ignored = [kind.value for kind in manifest.present if kind not in self.target.kinds]
        if ignored:
            logger.info("Target %s ignores section(s): %s", self.target.value, ", ".join(ignored))

        self._manifest = manifest
        return manifest

    async def run(
        self,
        capability: ResourceCapability | None,
        *,
        mode: DeployMode = DeployMode.APPLY,
        context: DeployContext | None = None,
        on_progress: ProgressCallback | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> DeployReport:
        """Load the manifest (if not loaded yet) and reconcile it in *mode*."""
        manifest = self.load()
        return await apply_manifest(
            manifest,
            mode,
            capability,
            kinds=self.target.kinds,
            context=context,
            on_progress=on_progress,
            page_size=page_size,
        )
