"""Project a validated manifest tree into typed spec lists.

The extractor runs after :mod:`aiagents.manifest.validator` and reuses the
same :class:`~aiagents.manifest.schema.ManifestDocument`.  A tree that
fails it here means validation was skipped or has drifted; that is
reported as an :class:`~aiagents.errors.ExtractionError` rather than
silently skipped.
"""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from aiagents.errors import ExtractionError
from aiagents.manifest.models import Manifest, format_path
from aiagents.manifest.schema import ManifestDocument


def extract_manifest(tree: Any) -> Manifest:
    """Build a :class:`Manifest` from a tree that passed validation.

    Raises:
        ExtractionError: If the tree does not have the validated shape.
    """
    try:
        document = ManifestDocument.model_validate(tree)
    except ValidationError as exc:
        error = exc.errors()[0]
        raise ExtractionError(format_path(error["loc"]) or "config", error["msg"]) from exc

    manifest = Manifest()
    for kind, specs in document.sections().items():
        manifest.present.append(kind)
        manifest.of_kind(kind).extend(specs)  # type: ignore[arg-type]
    return manifest
