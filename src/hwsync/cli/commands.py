"""hwsync CLI - Main Entry Point.

Usage:
    hwsync run                          # Controller daemon (periodic reconcile)
    hwsync reconcile                    # One pass over every update
    hwsync reconcile --name eu-de-1     # One pass over a single update
    hwsync check-config                 # Validate settings and updates file
"""

import asyncio
import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from hwsync import __version__
from hwsync.cli.display import render_actions, render_outcomes, render_statuses
from hwsync.controller.manager import run_controller
from hwsync.core.errors import ConfigError
from hwsync.core.logging_config import setup_logging
from hwsync.core.settings import EnvSettings, load_settings
from hwsync.inventory.client import NetBoxHTTPClient
from hwsync.inventory.netbox import NetBox
from hwsync.sync.models import ReconcileOutcome
from hwsync.sync.reconciler import ClusterReconciler, ReconcilerConfig
from hwsync.sync.source import FileUpdateSource, load_update_specs
from hwsync.sync.status import StatusStore

logger = logging.getLogger("hwsync.cli")
console = Console()

# ============================================
# App Definition
# ============================================
app = typer.Typer(
    name="hwsync",
    help="Keep NetBox device records in line with compute cluster hardware",
    add_completion=False,
    no_args_is_help=True,
)


# ============================================
# Shared Options
# ============================================
UpdatesFileOption = Annotated[
    Path | None,
    typer.Option("--updates-file", "-f", help="YAML file listing updates (default: UPDATES_FILE)"),
]
DryRunOption = Annotated[
    bool, typer.Option("--dry-run", "-n", help="Compute actions without writing to NetBox")
]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging")]


def _bootstrap(dry_run: bool, verbose: bool) -> EnvSettings:
    settings = load_settings(dry_run=dry_run or None)
    setup_logging(settings, verbose=verbose)
    try:
        settings.validate_required()
    except ConfigError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(2) from e
    return settings


def _updates_path(settings: EnvSettings, updates_file: Path | None) -> Path:
    return updates_file or settings.get_path(settings.updates_file)


@app.command()
def run(
    updates_file: UpdatesFileOption = None,
    dry_run: DryRunOption = False,
    verbose: VerboseOption = False,
) -> None:
    """Run the controller: reconcile every update now and then periodically."""
    settings = _bootstrap(dry_run, verbose)
    source = FileUpdateSource(_updates_path(settings, updates_file))
    status = StatusStore()

    with NetBoxHTTPClient.from_settings(settings) as client:
        reconciler = ClusterReconciler(NetBox.from_client(client), ReconcilerConfig.from_settings(settings))
        console.print(
            f"[bold]hwsync {__version__}[/bold] reconciling every {settings.reconcile_interval:.0f}s "
            f"from {source.path}"
        )
        asyncio.run(run_controller(settings, reconciler, source, status))

    render_statuses(console, asyncio.run(status.list_all()))


@app.command()
def reconcile(
    updates_file: UpdatesFileOption = None,
    name: Annotated[str | None, typer.Option("--name", help="Only reconcile this update")] = None,
    dry_run: DryRunOption = False,
    verbose: VerboseOption = False,
) -> None:
    """Run a single reconcile pass and print the outcome."""
    settings = _bootstrap(dry_run, verbose)
    try:
        specs = load_update_specs(_updates_path(settings, updates_file))
    except ConfigError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(2) from e

    if name:
        specs = [spec for spec in specs if spec.name == name]
        if not specs:
            console.print(f"[red]update {name} not found[/red]")
            raise typer.Exit(2)

    outcomes: dict[str, ReconcileOutcome] = {}
    with NetBoxHTTPClient.from_settings(settings) as client:
        reconciler = ClusterReconciler(NetBox.from_client(client), ReconcilerConfig.from_settings(settings))
        for spec in specs:
            outcomes[spec.name] = reconciler.reconcile(spec.clusters)

    render_outcomes(console, outcomes)
    if verbose:
        for outcome in outcomes.values():
            render_actions(console, outcome)

    if any(not outcome.ready for outcome in outcomes.values()):
        raise typer.Exit(1)


@app.command("check-config")
def check_config(updates_file: UpdatesFileOption = None) -> None:
    """Validate settings and the updates file without contacting NetBox."""
    settings = load_settings()
    errors: list[str] = []

    try:
        settings.validate_required()
    except ConfigError as e:
        errors.append(str(e))

    path = _updates_path(settings, updates_file)
    try:
        specs = load_update_specs(path)
        console.print(f"[green]✓[/green] {len(specs)} updates in {path}")
    except ConfigError as e:
        errors.append(str(e))

    console.print(f"  platform: {settings.expected_platform}")
    console.print(f"  interval: {settings.reconcile_interval}s")
    console.print(
        f"  rate limiter: burst={settings.rate_limiter_burst} "
        f"frequency={settings.rate_limiter_frequency}/s "
        f"backoff={settings.failure_base_delay}s..{settings.failure_max_delay}s"
    )

    if errors:
        for error in errors:
            console.print(f"[red]✗[/red] {error}")
        raise typer.Exit(1)
    console.print("[green]configuration OK[/green]")


@app.command()
def version() -> None:
    """Show version."""
    console.print(f"hwsync {__version__}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
