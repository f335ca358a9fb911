"""
TreeSync CLI Main Entry Point.

Provides the command-line interface for one-way directory synchronization.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click
import humanize
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from treesync import __version__
from treesync.core.config import TreeSyncConfig, load_config
from treesync.core.logging import setup_logging
from treesync.core.models import SyncAction, SyncResult
from treesync.sync.manager import Synchronizer
from treesync.sync.planner import SyncPlan
from treesync.sync.tree import SyncRootError

console = Console()

directory_argument = click.Path(
    exists=True,
    file_okay=False,
    dir_okay=True,
    path_type=Path,
)


@click.command()
@click.version_option(version=__version__, prog_name="TreeSync")
@click.argument("source", type=directory_argument)
@click.argument("target", type=directory_argument)
@click.option(
    "--delete-missing/--no-delete-missing",
    default=None,
    help="Delete entries from target that do not exist in source",
)
@click.option(
    "--modify-window",
    type=click.FloatRange(min=0.0),
    default=None,
    help="Seconds of mtime difference still treated as identical",
)
@click.option(
    "--exclude",
    "exclude_patterns",
    multiple=True,
    help="Glob pattern of relative paths to leave alone (repeatable)",
)
@click.option("--dry-run", is_flag=True, help="Show what would change without touching the target")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file",
)
@click.option(
    "--report",
    "report_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the run result as JSON to this file",
)
@click.option(
    "--save-report/--no-save-report",
    "save_reports",
    default=None,
    help="Write a timestamped JSON report into the configured report directory",
)
@click.option("--json", "json_output", is_flag=True, help="Output in JSON format")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
def cli(
    source: Path,
    target: Path,
    delete_missing: bool | None,
    modify_window: float | None,
    exclude_patterns: tuple[str, ...],
    dry_run: bool,
    config_path: Path | None,
    report_path: Path | None,
    save_reports: bool | None,
    json_output: bool,
    quiet: bool,
) -> None:
    """
    Synchronize SOURCE into TARGET.

    Copies new and changed files (compared by size and modification time),
    creates missing directories and, with --delete-missing, removes target
    entries that no longer exist in SOURCE.
    """
    config = TreeSyncConfig.load(config_path) if config_path else load_config()
    setup_logging(config.logging)

    sync_config = config.sync.model_copy(
        update={
            key: value
            for key, value in {
                "delete_missing": delete_missing,
                "mtime_tolerance_seconds": modify_window,
                "exclude_patterns": list(exclude_patterns) or None,
                "save_reports": save_reports,
            }.items()
            if value is not None
        }
    )
    synchronizer = Synchronizer.from_config(source, target, sync_config)

    if dry_run:
        try:
            plan = synchronizer.plan()
        except SyncRootError as e:
            console.print(f"[red]Error during synchronization: {e}[/red]")
            sys.exit(1)
        if json_output:
            click.echo(json.dumps(plan.to_dict(), indent=2))
            return
        display_plan(plan, sync_config.delete_missing)
        return

    try:
        if json_output or quiet:
            result = synchronizer.run()
        else:
            with console.status(f"Synchronizing {source} → {target}..."):
                result = synchronizer.run()
    except SyncRootError as e:
        console.print(f"[red]Error during synchronization: {e}[/red]")
        sys.exit(1)

    if report_path:
        result.save_report(report_path)
    elif sync_config.save_reports:
        result.save_report(config.get_report_file())

    if json_output:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    if not quiet:
        display_result(result)
    if result.errors:
        console.print(
            f"[yellow]Synchronization completed with {len(result.errors)} error(s).[/yellow]"
        )
    else:
        console.print("[green]✅ Synchronization completed successfully.[/green]")


def display_plan(plan: SyncPlan, delete_missing: bool) -> None:
    """Print the actions a run would take."""
    if plan.is_empty and not plan.conflicts:
        console.print("[green]Target is up to date.[/green]")
        return

    table = Table(title="Planned Changes")
    table.add_column("Action", style="cyan")
    table.add_column("Path", style="white")
    table.add_column("Reason", style="yellow")

    for item in plan.forward:
        table.add_row(item.action.value, item.relative_path, item.reason)
    if delete_missing:
        for item in plan.cleanup:
            table.add_row(item.action.value, item.relative_path, item.reason)
    for item in plan.conflicts:
        table.add_row(f"[red]{item.action.value}[/red]", item.relative_path, item.reason)

    console.print(table)
    console.print(f"Unchanged files: {plan.unchanged}")


def display_result(result: SyncResult) -> None:
    """Print a summary of a finished run."""
    summary = result.summary
    content = f"""
[bold]Source:[/bold] {result.source}
[bold]Target:[/bold] {result.target}
[bold]Directories created:[/bold] {summary.created_dirs}
[bold]Files copied:[/bold] {summary.copied} ({humanize.naturalsize(summary.bytes_copied, binary=True)})
[bold]Unchanged:[/bold] {summary.unchanged}
[bold]Removed:[/bold] {summary.removed}
[bold]Errors:[/bold] {summary.errors}
"""
    if result.duration_seconds is not None:
        content += f"[bold]Duration:[/bold] {humanize.precisedelta(result.duration_seconds)}\n"
    console.print(Panel(content.strip(), title="Sync Summary"))

    if not result.errors:
        return

    table = Table(title="Errors")
    table.add_column("Action", style="cyan")
    table.add_column("Path", style="white")
    table.add_column("Error", style="red")
    for outcome in result.errors:
        action = "scan" if outcome.action is SyncAction.ACCESS else outcome.action.value
        table.add_row(action, outcome.relative_path, outcome.error or "")
    console.print(table)


def main() -> None:
    """Main entry point."""
    try:
        cli()
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled[/yellow]")
        sys.exit(130)
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
