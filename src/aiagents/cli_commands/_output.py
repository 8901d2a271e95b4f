"""Shared CLI output formatters."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from aiagents.deploy.models import DeployMode, DeployReport, ProgressEvent, ResultStatus
from aiagents.errors import AIAgentsError, ErrorKind, ManifestValidationError
from aiagents.manifest.models import APPLY_ORDER

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from aiagents.manifest.models import Manifest, ResourceKind, ValidationIssue

console = Console()

_STATUS_STYLE = {
    ResultStatus.SUCCESS: ("green", "✓"),
    ResultStatus.FAILURE: ("red", "✗"),
    ResultStatus.CANCELLED: ("yellow", "■"),
}

_ERROR_LABELS = {
    ErrorKind.INCLUDE: "Include error",
    ErrorKind.VALIDATION: "Validation error",
    ErrorKind.EXTRACTION: "Internal error",
    ErrorKind.NAME_RESOLUTION: "Unknown reference",
    ErrorKind.CAPABILITY: "API error",
    ErrorKind.IO: "File error",
    ErrorKind.CONFIGURATION: "Configuration error",
    ErrorKind.CANCELLED: "Cancelled",
}


def print_validation_issues(issues: Sequence[ValidationIssue]) -> None:
    """Print every validation issue with its field path."""
    noun = "error" if len(issues) == 1 else "errors"
    console.print(f"[red]Validation failed ({len(issues)} {noun}):[/red]")
    for issue in issues:
        line = f"  [bold]{escape(issue.field)}[/bold]: {escape(issue.message)}"
        if issue.value is not None:
            line += f" [dim](got {escape(issue.value)})[/dim]"
        console.print(line, soft_wrap=True)


def print_error(exc: BaseException) -> None:
    """Render a pipeline error once, by kind."""
    if isinstance(exc, ManifestValidationError):
        print_validation_issues(exc.issues)
        return
    label = _ERROR_LABELS[exc.kind] if isinstance(exc, AIAgentsError) else "Error"
    console.print(f"[red]{label}:[/red] {escape(str(exc))}", soft_wrap=True)


def print_manifest_summary(
    path: Path,
    manifest: Manifest,
    kinds: Sequence[ResourceKind] = APPLY_ORDER,
) -> None:
    table = Table(title=f"Manifest {path}")
    table.add_column("Kind", style="cyan")
    table.add_column("Name")
    table.add_column("References")

    for spec in manifest.specs(kinds):
        table.add_row(spec.kind.label, spec.name, ", ".join(spec.references) or "-")

    console.print(table)


def print_progress(event: ProgressEvent) -> None:
    """Stream one reconciler progress event as a single line."""
    style, mark = _STATUS_STYLE[event.status]
    if event.status is ResultStatus.CANCELLED:
        console.print(f"[{style}]{mark} {escape(event.message)}[/{style}]")
        return
    prefix = escape(f"[{event.index}/{event.total}]")
    console.print(f"{prefix} [{style}]{mark}[/{style}] {escape(event.message)}", soft_wrap=True)


def print_summary(report: DeployReport) -> None:
    """Print aggregate totals for a finished run."""
    title = "Dry-run Summary" if report.mode is DeployMode.DRY_RUN else "Deployment Summary"
    console.print(f"\n[bold]{title}[/bold]")
    console.print(f"  Successful: {report.successful}")
    console.print(f"  Failed: {report.failed}")
    console.print(f"  Total: {report.total}")
    failures = [r for r in report.results if r.status is ResultStatus.FAILURE]
    if failures:
        console.print("\n[red]Failures:[/red]")
        for result in failures:
            console.print(f"  {escape(result.name)}")
            console.print(f"    {escape(str(result.error or result.message))}")
    if report.cancelled:
        console.print("  [yellow]Run was cancelled before all specs were processed.[/yellow]")
