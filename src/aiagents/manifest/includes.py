"""Include resolver — expand ``!include`` references into one document tree.

An include is a mapping whose only key is ``"!include"``::

    agents:
      - "!include": agents/support-bot.yaml
      - name: billing-bot
        llm_options: {provider: openai}

The mapping is replaced by the parsed content of the named file.  Relative
paths are resolved against the directory of the file that contains the
include, so nested includes work from any depth.

Typical usage::

    tree = IncludeResolver().resolve(Path("deploy.yaml"))
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from aiagents.errors import IncludeError

logger = logging.getLogger(__name__)

INCLUDE_KEY = "!include"


def is_include(node: Any) -> bool:
    """Return ``True`` if *node* is a mapping with an ``!include`` key."""
    return isinstance(node, dict) and INCLUDE_KEY in node


class IncludeResolver:
    """Recursively expand includes with cycle detection.

    The resolver keeps the chain of files currently being expanded; a file
    that appears twice on that chain is a cycle.  The same file may still be
    included from several places as long as those are not nested within
    each other.
    """

    def __init__(self) -> None:
        self._stack: list[Path] = []
        self._visited: list[Path] = []
        self._open: set[int] = set()

    def resolve(self, path: str | Path) -> Any:
        """Read *path* and return the fully expanded tree.

        Raises:
            IncludeError: On a missing or unreadable file, a YAML parse error,
                a non-string include value, a circular include, or a YAML
                alias that contains itself.
        """
        self._stack = []
        self._visited = []
        self._open = set()
        return self._resolve_file(Path(path).resolve())

    def dependencies(self, path: str | Path) -> list[Path]:
        """Every file transitively included by *path*, in first-visit order."""
        self.resolve(path)
        seen: set[Path] = set()
        ordered: list[Path] = []
        for dep in self._visited:
            if dep not in seen:
                seen.add(dep)
                ordered.append(dep)
        return ordered

    def _resolve_file(self, path: Path) -> Any:
        if path in self._stack:
            chain = " -> ".join(str(p) for p in [*self._stack, path])
            raise IncludeError(str(path), "circular dependency", ValueError(chain))

        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise IncludeError(str(path), "failed to read file", exc) from exc

        try:
            data = yaml.safe_load(raw)
        except yaml.YAMLError as exc:
            raise IncludeError(str(path), "failed to parse", exc) from exc

        self._stack.append(path)
        try:
            return self._expand(data, path)
        finally:
            self._stack.pop()

    def _expand(self, node: Any, current: Path) -> Any:
        if not isinstance(node, (dict, list)):
            return node

        # an anchor nested inside itself has no finite expansion
        if id(node) in self._open:
            raise IncludeError(str(current), "recursive alias")
        self._open.add(id(node))
        try:
            return self._expand_container(node, current)
        finally:
            self._open.discard(id(node))

    def _expand_container(self, node: dict[Any, Any] | list[Any], current: Path) -> Any:
        if isinstance(node, dict):
            if INCLUDE_KEY in node:
                if len(node) != 1:
                    raise IncludeError(
                        str(current),
                        f"'{INCLUDE_KEY}' must be the only key in its mapping",
                    )
                target = self._target(node[INCLUDE_KEY], current)
                logger.debug("Expanding include %s from %s", target, current)
                self._visited.append(target)
                return self._resolve_file(target)
            return {key: self._expand(value, current) for key, value in node.items()}

        return [self._expand(item, current) for item in node]

    @staticmethod
    def _target(value: Any, current: Path) -> Path:
        if not isinstance(value, str):
            raise IncludeError(
                str(current),
                "include path must be a string",
                TypeError(f"expected string, got {type(value).__name__}"),
            )
        target = Path(value)
        if not target.is_absolute():
            target = current.parent / target
        target = target.resolve()
        if not target.is_file():
            raise IncludeError(str(current), f"included file does not exist: {target}")
        return target


def resolve_includes(path: str | Path) -> Any:
    """Expand every include reachable from *path* and return the tree."""
    return IncludeResolver().resolve(path)


def include_dependencies(path: str | Path) -> list[Path]:
    """List every file *path* includes, directly or transitively."""
    return IncludeResolver().dependencies(path)
