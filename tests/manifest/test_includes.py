"""Tests for the ``!include`` resolver."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from aiagents.errors import ErrorKind, IncludeError
from aiagents.manifest.includes import (
    IncludeResolver,
    include_dependencies,
    is_include,
    resolve_includes,
)

if TYPE_CHECKING:
    from pathlib import Path


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return path


class TestIsInclude:
    def test_include_mapping(self) -> None:
        assert is_include({"!include": "a.yaml"})

    def test_plain_mapping(self) -> None:
        assert not is_include({"name": "abc"})

    def test_non_mapping(self) -> None:
        assert not is_include(["!include"])
        assert not is_include("!include")


class TestResolve:
    def test_no_includes(self, tmp_path: Path) -> None:
        f = _write(tmp_path / "main.yaml", "mcp-servers:\n  - name: postgres\n")
        assert resolve_includes(f) == {"mcp-servers": [{"name": "postgres"}]}

    def test_list_element_include(self, tmp_path: Path) -> None:
        _write(tmp_path / "agents" / "bot.yaml", "name: support-bot\nllm_options: {provider: openai}\n")
        f = _write(
            tmp_path / "main.yaml",
            'agents:\n  - "!include": agents/bot.yaml\n  - name: other-bot\n    llm_options: {provider: x}\n',
        )

        tree = resolve_includes(f)

        assert tree["agents"][0] == {"name": "support-bot", "llm_options": {"provider": "openai"}}
        assert tree["agents"][1]["name"] == "other-bot"

    def test_nested_include_is_relative_to_including_file(self, tmp_path: Path) -> None:
        _write(tmp_path / "parts" / "deep" / "leaf.yaml", "provider: anthropic\n")
        _write(
            tmp_path / "parts" / "agent.yaml",
            'name: nested-bot\nllm_options:\n  "!include": deep/leaf.yaml\n',
        )
        f = _write(tmp_path / "main.yaml", 'agents:\n  - "!include": parts/agent.yaml\n')

        tree = resolve_includes(f)

        assert tree == {"agents": [{"name": "nested-bot", "llm_options": {"provider": "anthropic"}}]}

    def test_absolute_include_path(self, tmp_path: Path) -> None:
        target = _write(tmp_path / "abs" / "servers.yaml", "- name: postgres\n")
        f = _write(tmp_path / "main.yaml", f'mcp-servers:\n  "!include": "{target}"\n')

        assert resolve_includes(f) == {"mcp-servers": [{"name": "postgres"}]}

    def test_whole_document_include(self, tmp_path: Path) -> None:
        _write(tmp_path / "real.yaml", "agent-systems:\n  - name: helpdesk\n    agents: [bot]\n")
        f = _write(tmp_path / "main.yaml", '"!include": real.yaml\n')

        assert resolve_includes(f) == {"agent-systems": [{"name": "helpdesk", "agents": ["bot"]}]}

    def test_included_shape_is_kept(self, tmp_path: Path) -> None:
        _write(tmp_path / "scalar.yaml", "just-a-string\n")
        f = _write(tmp_path / "main.yaml", 'agents:\n  - "!include": scalar.yaml\n')

        assert resolve_includes(f) == {"agents": ["just-a-string"]}

    def test_no_include_key_remains(self, tmp_path: Path) -> None:
        _write(tmp_path / "a.yaml", 'x:\n  "!include": b.yaml\n')
        _write(tmp_path / "b.yaml", "- 1\n- 2\n")
        f = _write(tmp_path / "main.yaml", 'root:\n  "!include": a.yaml\nother: [1, {"!include": b.yaml}]\n')

        tree = resolve_includes(f)

        assert "!include" not in repr(tree)
        assert tree == {"root": {"x": [1, 2]}, "other": [1, [1, 2]]}

    def test_same_file_included_twice_is_not_a_cycle(self, tmp_path: Path) -> None:
        _write(tmp_path / "shared.yaml", "provider: openai\n")
        f = _write(
            tmp_path / "main.yaml",
            'a:\n  "!include": shared.yaml\nb:\n  "!include": shared.yaml\n',
        )

        assert resolve_includes(f) == {"a": {"provider": "openai"}, "b": {"provider": "openai"}}


class TestResolveErrors:
    def test_missing_root_file(self, tmp_path: Path) -> None:
        with pytest.raises(IncludeError, match="failed to read file"):
            resolve_includes(tmp_path / "nope.yaml")

    def test_missing_target(self, tmp_path: Path) -> None:
        f = _write(tmp_path / "main.yaml", 'agents:\n  - "!include": gone.yaml\n')

        with pytest.raises(IncludeError, match="included file does not exist") as exc_info:
            resolve_includes(f)
        assert exc_info.value.file == str(f.resolve())
        assert exc_info.value.kind is ErrorKind.INCLUDE

    def test_parse_failure(self, tmp_path: Path) -> None:
        f = _write(tmp_path / "main.yaml", "agents: [unclosed\n")

        with pytest.raises(IncludeError, match="failed to parse") as exc_info:
            resolve_includes(f)
        assert exc_info.value.cause is not None

    def test_parse_failure_in_included_file(self, tmp_path: Path) -> None:
        bad = _write(tmp_path / "bad.yaml", "key: [oops\n")
        f = _write(tmp_path / "main.yaml", 'x:\n  "!include": bad.yaml\n')

        with pytest.raises(IncludeError, match="failed to parse") as exc_info:
            resolve_includes(f)
        assert exc_info.value.file == str(bad.resolve())

    def test_non_string_value(self, tmp_path: Path) -> None:
        f = _write(tmp_path / "main.yaml", 'x:\n  "!include": 42\n')

        with pytest.raises(IncludeError, match="include path must be a string"):
            resolve_includes(f)

    def test_extra_keys_beside_include(self, tmp_path: Path) -> None:
        _write(tmp_path / "a.yaml", "provider: openai\n")
        f = _write(tmp_path / "main.yaml", 'x:\n  "!include": a.yaml\n  name: extra\n')

        with pytest.raises(IncludeError, match="must be the only key"):
            resolve_includes(f)

    def test_self_include_is_a_cycle(self, tmp_path: Path) -> None:
        f = _write(tmp_path / "main.yaml", 'x:\n  "!include": main.yaml\n')

        with pytest.raises(IncludeError, match="circular dependency"):
            resolve_includes(f)

    def test_indirect_cycle(self, tmp_path: Path) -> None:
        _write(tmp_path / "a.yaml", 'next:\n  "!include": b.yaml\n')
        _write(tmp_path / "b.yaml", 'next:\n  "!include": a.yaml\n')
        f = _write(tmp_path / "main.yaml", 'root:\n  "!include": a.yaml\n')

        with pytest.raises(IncludeError, match="circular dependency") as exc_info:
            resolve_includes(f)
        assert "a.yaml -> " in str(exc_info.value.cause)

    def test_self_referencing_alias(self, tmp_path: Path) -> None:
        f = _write(tmp_path / "main.yaml", "agents: &a [*a]\n")

        with pytest.raises(IncludeError, match="recursive alias") as exc_info:
            resolve_includes(f)
        assert exc_info.value.file == str(f.resolve())

    def test_shared_alias_is_not_recursive(self, tmp_path: Path) -> None:
        f = _write(
            tmp_path / "main.yaml",
            "llm: &llm {provider: openai}\nfirst: *llm\nsecond: *llm\n",
        )

        tree = resolve_includes(f)

        assert tree["first"] == tree["second"] == {"provider": "openai"}

    def test_resolver_is_reusable_after_error(self, tmp_path: Path) -> None:
        bad = _write(tmp_path / "bad.yaml", 'x:\n  "!include": bad.yaml\n')
        good = _write(tmp_path / "good.yaml", "x: 1\n")
        resolver = IncludeResolver()

        with pytest.raises(IncludeError):
            resolver.resolve(bad)
        assert resolver.resolve(good) == {"x": 1}


class TestDependencies:
    def test_lists_transitive_files_in_first_visit_order(self, tmp_path: Path) -> None:
        leaf = _write(tmp_path / "leaf.yaml", "provider: openai\n")
        mid = _write(tmp_path / "mid.yaml", 'llm_options:\n  "!include": leaf.yaml\n')
        other = _write(tmp_path / "other.yaml", "- 1\n")
        f = _write(
            tmp_path / "main.yaml",
            'a:\n  "!include": mid.yaml\nb:\n  "!include": other.yaml\nc:\n  "!include": leaf.yaml\n',
        )

        deps = include_dependencies(f)

        assert deps == [mid.resolve(), leaf.resolve(), other.resolve()]

    def test_no_includes(self, tmp_path: Path) -> None:
        f = _write(tmp_path / "main.yaml", "a: 1\n")
        assert include_dependencies(f) == []
