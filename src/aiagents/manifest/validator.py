"""Structural validator for expanded manifest trees.

Validation is total: the tree is checked against
:class:`~aiagents.manifest.schema.ManifestDocument` in one pass, and every
pydantic error becomes a :class:`ValidationIssue` with a field path such as
``agents[2].llm_options.provider``.  Issues are ordered as their fields
appear in the document.  Cross-resource references (an agent naming an MCP
server) are *not* checked here; they need the remote catalog and are
handled by :mod:`aiagents.deploy.resolver`.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from aiagents.manifest.includes import is_include
from aiagents.manifest.models import (
    APPLY_ORDER,
    PathSegment,
    ValidationIssue,
    ValidationResult,
    format_path,
)
from aiagents.manifest.schema import ManifestDocument, declared_names

if TYPE_CHECKING:
    from pydantic_core import ErrorDetails

_VALUE_PREVIEW_LENGTH = 60

# error types whose input is not worth echoing back
_NO_VALUE = frozenset({"missing", "extra_forbidden", "too_short", "duplicate_name"})

_MESSAGES = {
    "missing": "is required",
    "string_type": "must be a string",
    "string_too_short": "must not be empty",
    "list_type": "must be a list",
    "too_short": "must contain at least one entry",
    "dict_type": "must be a mapping",
    "model_type": "must be a mapping",
    "model_attributes_type": "must be a mapping",
}

_SECTIONS = {kind.value: kind for kind in APPLY_ORDER}


def _preview(value: Any) -> str:
    try:
        text = json.dumps(value, default=str, ensure_ascii=False)
    except (TypeError, ValueError):
        text = repr(value)
    if len(text) > _VALUE_PREVIEW_LENGTH:
        text = text[: _VALUE_PREVIEW_LENGTH - 3] + "..."
    return text


def _loc(error: ErrorDetails) -> tuple[PathSegment, ...]:
    # dict key errors end in a synthetic "[key]" segment
    return tuple(segment for segment in error["loc"] if segment != "[key]")


def _message(error: ErrorDetails, loc: tuple[PathSegment, ...]) -> str:
    kind_of = _SECTIONS.get(str(loc[0])) if loc else None
    error_type = error["type"]

    if error_type == "extra_forbidden":
        if len(loc) == 1:
            return f"unknown section; expected one of {', '.join(_SECTIONS)}"
        if kind_of is not None:
            return f"unknown field for {kind_of.label}"
    if error_type in ("model_type", "model_attributes_type") and len(loc) == 2 and kind_of is not None:
        return f"{kind_of.label} must be a mapping"
    if error_type == "string_too_long":
        return f"must be at most {error['ctx']['max_length']} characters (got {len(error['input'])})"
    return _MESSAGES.get(error_type, error["msg"])


def _position(tree: Any, loc: tuple[PathSegment, ...]) -> tuple[int, ...]:
    """Where *loc* sits in *tree*; absent fields sort after their siblings."""
    position: list[int] = []
    node = tree
    for segment in loc:
        if isinstance(node, dict) and segment in node:
            position.append(list(node).index(segment))
            node = node[segment]
        elif isinstance(node, list) and isinstance(segment, int) and segment < len(node):
            position.append(segment)
            node = node[segment]
        else:
            position.append(len(node) if isinstance(node, (dict, list)) else 0)
            break
    return tuple(position)


class ManifestValidator:
    """Validate one expanded manifest tree."""

    def validate(self, tree: Any) -> ValidationResult:
        if not isinstance(tree, dict) or is_include(tree):
            issue = ValidationIssue(
                field="config",
                message="configuration must be a mapping",
                value=_preview(tree),
            )
            return ValidationResult(errors=[issue])

        try:
            ManifestDocument.model_validate(tree, context={"names": declared_names(tree)})
        except ValidationError as exc:
            return ValidationResult(errors=self._issues(tree, exc.errors()))
        return ValidationResult(errors=[])

    @staticmethod
    def _issues(tree: dict[str, Any], errors: list[ErrorDetails]) -> list[ValidationIssue]:
        located = []
        for error in errors:
            loc = _loc(error)
            issue = ValidationIssue(
                field=format_path(loc),
                message=_message(error, loc),
                value=None if error["type"] in _NO_VALUE else _preview(error["input"]),
            )
            located.append((_position(tree, loc), issue))
        located.sort(key=lambda pair: pair[0])
        return [issue for _, issue in located]


def validate_manifest(tree: Any) -> ValidationResult:
    """Validate an expanded manifest tree and return every issue found."""
    return ManifestValidator().validate(tree)
