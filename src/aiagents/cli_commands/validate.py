"""``ai-agents validate`` — check manifests without touching the API."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from aiagents.cli_commands._output import console, print_error
from aiagents.errors import AIAgentsError, IncludeError
from aiagents.manifest.includes import include_dependencies
from aiagents.manifest.loader import ManifestLoader

_SUFFIXES = (".yaml", ".yml")


@click.command()
@click.argument("files", nargs=-1, type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--file",
    "-f",
    "file_options",
    multiple=True,
    type=click.Path(exists=True, dir_okay=False),
    help="Manifest to validate; may be repeated.",
)
@click.option(
    "--dir",
    "-d",
    "directory",
    default=".",
    type=click.Path(exists=True, file_okay=False),
    help="Directory to scan when no FILES are given.",
)
def validate(files: tuple[str, ...], file_options: tuple[str, ...], directory: str) -> None:
    """Validate one or more manifest files.

    FILES may also be given with --file. Without any, every .yaml/.yml
    file in --dir is checked, except fragments that another manifest there
    already includes.
    """
    named = files + file_options
    paths = [Path(f) for f in named] if named else _discover(Path(directory))
    if not paths:
        console.print(f"[red]No manifest files found in {directory}[/red]")
        sys.exit(1)

    invalid = 0
    for path in paths:
        loader = ManifestLoader(path)
        try:
            result = loader.validate()
        except AIAgentsError as exc:
            invalid += 1
            console.print(f"[red]✗[/red] {path}", soft_wrap=True)
            print_error(exc)
            continue

        if result.valid:
            console.print(f"[green]✓[/green] {path}", soft_wrap=True)
            continue

        invalid += 1
        console.print(f"[red]✗[/red] {path}", soft_wrap=True)
        for issue in result.errors:
            console.print(f"  {issue}", markup=False, soft_wrap=True)

    console.print(f"\n{len(paths) - invalid} valid, {invalid} invalid")
    if invalid:
        sys.exit(1)


def _discover(directory: Path) -> list[Path]:
    candidates = sorted(p for p in directory.iterdir() if p.is_file() and p.suffix in _SUFFIXES)
    included: set[Path] = set()
    for path in candidates:
        try:
            included.update(include_dependencies(path))
        except IncludeError:
            # reported when the file itself is validated
            continue
    return [p for p in candidates if p.resolve() not in included]
