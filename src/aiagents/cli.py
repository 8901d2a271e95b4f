"""AI Agents CLI entrypoint."""

from __future__ import annotations

import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from aiagents import __version__


def _configure_logging(verbose: bool) -> None:
    handler = RichHandler(console=Console(stderr=True), show_path=False)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.ERROR,
        format="%(message)s",
        handlers=[handler],
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.INFO if verbose else logging.WARNING)


@click.group()
@click.version_option(version=__version__, prog_name="ai-agents")
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr.")
def main(verbose: bool) -> None:
    """AI Agents — deploy MCP servers, agents and agent systems from YAML."""
    _configure_logging(verbose)


# Register subcommands
from aiagents.cli_commands import register_commands  # noqa: E402

register_commands(main)

if __name__ == "__main__":
    main()
