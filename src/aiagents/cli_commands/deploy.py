"""``ai-agents deploy`` — apply a YAML manifest to the resource API."""

from __future__ import annotations

import asyncio
import signal
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click
from pydantic import ValidationError

from aiagents.cli_commands._output import (
    console,
    print_error,
    print_manifest_summary,
    print_progress,
    print_summary,
)
from aiagents.deploy.models import DeployMode
from aiagents.deploy.pipeline import DeployPipeline, DeployTarget, find_manifest
from aiagents.errors import AIAgentsError

if TYPE_CHECKING:
    from aiagents.config import Settings
    from aiagents.deploy.models import DeployReport


@click.command()
@click.argument("kind", type=click.Choice([t.value for t in DeployTarget]))
@click.argument("file", required=False, type=click.Path(dir_okay=False))
@click.option(
    "--file",
    "-f",
    "file_option",
    default=None,
    type=click.Path(dir_okay=False),
    help="Manifest to deploy (same as the FILE argument).",
)
@click.option("--dry-run", "-d", is_flag=True, help="Resolve and report without creating anything.")
@click.option("--validate-only", is_flag=True, help="Validate the manifest only; no API calls.")
@click.option("--timeout", type=float, default=None, help="Deadline for the whole run, in seconds.")
@click.option("--telemetry", is_flag=True, help="Export tracing spans to the console.")
@click.option("--api-url", envvar="AI_AGENTS_API_URL", show_envvar=True, help="Resource API base URL.")
@click.option("--project-id", envvar="AI_AGENTS_PROJECT_ID", show_envvar=True, help="Project that owns the resources.")
@click.option("--token", envvar="AI_AGENTS_TOKEN", show_envvar=True, help="Bearer token for the API.")
def deploy(
    kind: str,
    file: str | None,
    file_option: str | None,
    dry_run: bool,
    validate_only: bool,
    timeout: float | None,
    telemetry: bool,
    api_url: str | None,
    project_id: str | None,
    token: str | None,
) -> None:
    """Deploy the KIND section(s) of a manifest.

    KIND is one of mcp, agents, system, or all.  FILE defaults to the first
    conventional file for KIND found in the working directory
    (e.g. mcp-servers.yaml, agents.yaml, systems.yaml, ai-agents.yaml).
    """
    target = DeployTarget(kind)

    try:
        path = Path(file or file_option) if (file or file_option) else find_manifest(target)
    except AIAgentsError as exc:
        print_error(exc)
        sys.exit(1)

    console.print(f"Validating {path}...")
    pipeline = DeployPipeline(path, target)
    try:
        manifest = pipeline.load()
    except AIAgentsError as exc:
        print_error(exc)
        sys.exit(1)
    console.print("[green]Configuration is valid.[/green]")

    if validate_only:
        console.print("Validation completed successfully.")
        return

    mode = DeployMode.DRY_RUN if dry_run else DeployMode.APPLY
    if mode is DeployMode.DRY_RUN:
        print_manifest_summary(path, manifest, target.kinds)

    if telemetry:
        from aiagents.utils.telemetry import configure_telemetry

        try:
            configure_telemetry()
        except ImportError as exc:
            console.print(f"[red]Error:[/red] {exc}")
            sys.exit(1)

    overrides = {"api_url": api_url, "project_id": project_id, "token": token}
    try:
        settings = _load_settings({k: v for k, v in overrides.items() if v is not None})
        report = asyncio.run(_run(pipeline, settings, mode, timeout))
    except AIAgentsError as exc:
        print_error(exc)
        sys.exit(1)

    print_summary(report)
    if not report.ok:
        sys.exit(report.exit_code)


def _load_settings(overrides: dict[str, Any]) -> Settings:
    from aiagents.config import Settings
    from aiagents.errors import ConfigurationError

    try:
        return Settings(**overrides)
    except ValidationError as exc:
        raise ConfigurationError(str(exc)) from exc


async def _run(
    pipeline: DeployPipeline,
    settings: Settings,
    mode: DeployMode,
    timeout: float | None,
) -> DeployReport:
    from aiagents.api.client import APIClient
    from aiagents.deploy.context import DeployContext

    console.print("Starting dry run..." if mode is DeployMode.DRY_RUN else "Starting deployment...")
    context = DeployContext(timeout=timeout)
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, context.cancel, "interrupted")
    except (NotImplementedError, RuntimeError):
        # no loop signal support (Windows, or not the main thread)
        interruptible = False
    else:
        interruptible = True

    try:
        async with APIClient(settings) as client:
            return await pipeline.run(
                client,
                mode=mode,
                context=context,
                on_progress=print_progress,
                page_size=settings.page_size,
            )
    finally:
        if interruptible:
            loop.remove_signal_handler(signal.SIGINT)
