"""AI Agents CLI — declarative deployment of MCP servers, agents and agent systems."""

from __future__ import annotations

from typing import TYPE_CHECKING

__version__ = "0.1.0"

if TYPE_CHECKING:
    from aiagents.deploy.pipeline import DeployPipeline as DeployPipeline
    from aiagents.manifest.loader import ManifestLoader as ManifestLoader

_SDK_EXPORTS = {
    "DeployPipeline": "aiagents.deploy.pipeline",
    "ManifestLoader": "aiagents.manifest.loader",
}


def __getattr__(name: str) -> object:
    module_path = _SDK_EXPORTS.get(name)
    if module_path is not None:
        import importlib

        mod = importlib.import_module(module_path)
        return getattr(mod, name)
    raise AttributeError(f"module 'aiagents' has no attribute {name!r}")
