"""CLI subcommand registration."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all subcommands on the CLI group."""
    from aiagents.cli_commands.deploy import deploy
    from aiagents.cli_commands.includes import includes
    from aiagents.cli_commands.validate import validate

    cli.add_command(deploy)
    cli.add_command(validate)
    cli.add_command(includes)
