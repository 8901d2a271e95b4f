"""Deploy layer — catalogs, name resolution, and reconciliation."""

from aiagents.deploy.catalog import Catalog, load_catalog
from aiagents.deploy.context import DeployContext
from aiagents.deploy.models import (
    DeployMode,
    DeployReport,
    DeployResult,
    ProgressEvent,
    ResultStatus,
)
from aiagents.deploy.pipeline import DeployPipeline, DeployTarget, find_manifest
from aiagents.deploy.reconciler import Reconciler, apply_manifest
from aiagents.deploy.resolver import resolve_references

__all__ = [
    "Catalog",
    "DeployContext",
    "DeployMode",
    "DeployPipeline",
    "DeployReport",
    "DeployResult",
    "DeployTarget",
    "ProgressEvent",
    "Reconciler",
    "ResultStatus",
    "apply_manifest",
    "find_manifest",
    "load_catalog",
    "resolve_references",
]
