"""Manifest layer — include expansion, validation, and typed extraction."""

from aiagents.manifest.extractor import extract_manifest
from aiagents.manifest.includes import (
    INCLUDE_KEY,
    IncludeResolver,
    include_dependencies,
    resolve_includes,
)
from aiagents.manifest.loader import ManifestLoader, load_manifest
from aiagents.manifest.models import (
    APPLY_ORDER,
    AgentSpec,
    AgentSystemSpec,
    Manifest,
    MCPServerSpec,
    ResourceKind,
    Spec,
    ValidationIssue,
    ValidationResult,
)
from aiagents.manifest.schema import ManifestDocument, check_name
from aiagents.manifest.validator import ManifestValidator, validate_manifest

__all__ = [
    "APPLY_ORDER",
    "INCLUDE_KEY",
    "AgentSpec",
    "AgentSystemSpec",
    "IncludeResolver",
    "MCPServerSpec",
    "Manifest",
    "ManifestDocument",
    "ManifestLoader",
    "ManifestValidator",
    "ResourceKind",
    "Spec",
    "ValidationIssue",
    "ValidationResult",
    "check_name",
    "extract_manifest",
    "include_dependencies",
    "load_manifest",
    "resolve_includes",
    "validate_manifest",
]
