"""``ai-agents includes`` — list the files a manifest pulls in."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from aiagents.cli_commands._output import console, print_error
from aiagents.errors import AIAgentsError
from aiagents.manifest.includes import include_dependencies


@click.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
def includes(file: str) -> None:
    """List every file FILE includes, directly or transitively."""
    try:
        deps = include_dependencies(Path(file))
    except AIAgentsError as exc:
        print_error(exc)
        sys.exit(1)

    if not deps:
        console.print("No includes.")
        return
    for dep in deps:
        console.print(str(dep), markup=False, soft_wrap=True)
