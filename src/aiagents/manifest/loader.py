"""Manifest loader — include expansion, validation and extraction in one call.

Typical usage::

    loader = ManifestLoader(Path("deploy.yaml"))
    result = loader.validate()
    if result.valid:
        manifest = loader.load()
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from aiagents.errors import ManifestValidationError
from aiagents.manifest.extractor import extract_manifest
from aiagents.manifest.includes import IncludeResolver
from aiagents.manifest.models import Manifest, ValidationResult
from aiagents.manifest.validator import validate_manifest

logger = logging.getLogger(__name__)


class ManifestLoader:
    """Load one manifest file and everything it includes.

    The expanded tree is cached after the first read so that validating and
    then loading the same file expands includes only once.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._tree: Any = None
        self._expanded = False

    def tree(self) -> Any:
        """Return the include-expanded document tree.

        Raises:
            IncludeError: If include expansion fails.
        """
        if not self._expanded:
            self._tree = IncludeResolver().resolve(self.path)
            self._expanded = True
            logger.debug("Expanded manifest %s", self.path)
        return self._tree

    def validate(self) -> ValidationResult:
        """Expand includes and validate the resulting tree."""
        result = validate_manifest(self.tree())
        logger.debug("Validated %s: %d issue(s)", self.path, len(result.errors))
        return result

    def load(self) -> Manifest:
        """Expand, validate, and extract the typed manifest.

        Raises:
            IncludeError: If include expansion fails.
            ManifestValidationError: If the expanded tree is invalid.
        """
        result = self.validate()
        if not result.valid:
            raise ManifestValidationError(result.errors)
        return extract_manifest(self.tree())


def load_manifest(path: str | Path) -> Manifest:
    """Shortcut for ``ManifestLoader(path).load()``."""
    return ManifestLoader(path).load()
