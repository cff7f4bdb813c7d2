"""Rich rendering of reconcile outcomes."""

from rich.console import Console
from rich.table import Table

from hwsync.sync.models import ReconcileOutcome
from hwsync.sync.status import UpdateStatus

STATE_STYLES = {
    "Ready": "bold green",
    "Error": "bold red",
}


def render_outcomes(console: Console, outcomes: dict[str, ReconcileOutcome]) -> None:
    """Print one row per update with its state and applied actions."""
    table = Table(title="Reconcile results", show_lines=False)
    table.add_column("Update", style="cyan")
    table.add_column("State")
    table.add_column("Actions", justify="right")
    table.add_column("Description", overflow="fold")

    for name, outcome in outcomes.items():
        state = outcome.state.value
        table.add_row(
            name,
            f"[{STATE_STYLES.get(state, 'white')}]{state}[/]",
            str(len(outcome.actions)),
            outcome.description or "-",
        )
    console.print(table)


def render_actions(console: Console, outcome: ReconcileOutcome) -> None:
    for action in outcome.actions:
        console.print(f"  [dim]•[/dim] {action.describe()}")


def render_statuses(console: Console, statuses: list[UpdateStatus]) -> None:
    table = Table(title="Update status")
    table.add_column("Update", style="cyan")
    table.add_column("State")
    table.add_column("Reason")
    table.add_column("Updated")
    for status in statuses:
        reason = status.conditions[0].reason.value if status.conditions else "-"
        table.add_row(
            status.name,
            f"[{STATE_STYLES.get(status.state.value, 'white')}]{status.state.value}[/]",
            reason,
            status.updated_at.strftime("%Y-%m-%d %H:%M:%S"),
        )
    console.print(table)
