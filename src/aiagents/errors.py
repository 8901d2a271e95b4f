"""Shared error types for the deployment pipeline.

Every error carries a :class:`ErrorKind` so the CLI can render it once,
at the boundary, without inspecting the concrete class.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from aiagents.manifest.models import ValidationIssue


class ErrorKind(StrEnum):
    INCLUDE = "include"
    VALIDATION = "validation"
    EXTRACTION = "extraction"
    NAME_RESOLUTION = "name-resolution"
    CAPABILITY = "capability"
    IO = "io"
    CONFIGURATION = "configuration"
    CANCELLED = "cancelled"


class AIAgentsError(Exception):
    """Base error for all pipeline failures."""

    kind: ErrorKind = ErrorKind.IO


class IncludeError(AIAgentsError):
    """An ``!include`` could not be expanded (cycle, missing file, bad YAML)."""

    kind = ErrorKind.INCLUDE

    def __init__(self, file: str, message: str, cause: BaseException | None = None) -> None:
        self.file = file
        self.message = message
        self.cause = cause
        text = f"include error in {file}: {message}"
        if cause is not None:
            text += f": {cause}"
        super().__init__(text)


class ManifestValidationError(AIAgentsError):
    """The expanded manifest failed structural validation."""

    kind = ErrorKind.VALIDATION

    def __init__(self, issues: Sequence[ValidationIssue]) -> None:
        self.issues = list(issues)
        noun = "error" if len(self.issues) == 1 else "errors"
        super().__init__(f"manifest validation failed with {len(self.issues)} {noun}")


class ExtractionError(AIAgentsError):
    """A validated tree did not have the shape the extractor expects."""

    kind = ErrorKind.EXTRACTION

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        super().__init__(f"internal error at {path}: {message}")


class NameResolutionError(AIAgentsError):
    """A spec references a resource name that does not exist."""

    kind = ErrorKind.NAME_RESOLUTION

    def __init__(self, kind_label: str, spec_name: str, missing: Sequence[str]) -> None:
        self.kind_label = kind_label
        self.spec_name = spec_name
        self.missing = list(missing)
        quoted = ", ".join(f"'{m}'" for m in self.missing)
        super().__init__(f"{spec_name}: unknown {kind_label} {quoted}")


class CapabilityError(AIAgentsError):
    """A remote list or create operation failed."""

    kind = ErrorKind.CAPABILITY

    def __init__(self, operation: str, detail: str = "") -> None:
        self.operation = operation
        self.detail = detail
        super().__init__(f"{operation} failed" + (f": {detail}" if detail else ""))


class ManifestFileNotFoundError(AIAgentsError):
    """No manifest was given and none of the default files exist."""

    kind = ErrorKind.IO

    def __init__(self, candidates: Sequence[str]) -> None:
        self.candidates = list(candidates)
        super().__init__("no configuration file found, looked for: " + ", ".join(self.candidates))


class ConfigurationError(AIAgentsError):
    """Required settings for talking to the API are missing."""

    kind = ErrorKind.CONFIGURATION


class DeployCancelledError(AIAgentsError):
    """The run was cancelled or its deadline expired."""

    kind = ErrorKind.CANCELLED

    def __init__(self, reason: str = "cancelled") -> None:
        self.reason = reason
        super().__init__(f"deployment {reason}")
