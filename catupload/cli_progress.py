"""Console rendering and progress helpers for the cat-up CLI."""
from __future__ import annotations

from typing import Any, Dict, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskID, TextColumn, TimeElapsedColumn
from rich.table import Table

from .models import Outcome, OutcomeKind, SelectedFile, SessionState
from .notifications import Notification

console = Console(highlight=False)


def _echo(message: str) -> None:
    console.print(message)


def _human_size(value: int) -> str:
    size = float(max(value, 0))
    units = ["B", "KB", "MB", "GB", "TB"]
    unit_idx = 0
    while size >= 1024.0 and unit_idx < len(units) - 1:
        size /= 1024.0
        unit_idx += 1
    if unit_idx == 0:
        return f"{int(size)} {units[unit_idx]}"
    return f"{size:.2f} {units[unit_idx]}"


def render_configuration_summary(config: Dict[str, Any]) -> None:
    """Render startup configuration summary."""
    table = Table.grid(padding=(0, 2))
    table.add_column(style="bold cyan", justify="right")
    table.add_column(style="white")

    for key, value in config.items():
        rendered = "-" if value is None else str(value)
        table.add_row(key, rendered)

    panel = Panel(
        table,
        title="[bold green]cat-up[/bold green]",
        subtitle="[dim]upload a file to a link[/dim]",
        border_style="blue",
    )
    console.print(panel)


def render_selected_file(file: SelectedFile) -> None:
    _echo(f"[cyan]Selected:[/cyan] {escape(file.name)} ({_human_size(file.size_bytes)})")


class ConsoleNotifier:
    """Prints notifications as one coloured line each."""

    def notify(self, notification: Notification) -> None:
        color = "red" if notification.is_destructive else "green"
        _echo(f"[bold {color}]{escape(notification.title)}[/bold {color}] {escape(notification.description)}")


class SessionProgressDisplay:
    """
    Progress bar bound to session events.

    Subscribe with ``attach(controller)``; the bar appears when the session
    enters UPLOADING and disappears on the terminal outcome.
    """

    def __init__(self, filename: str):
        self.filename = filename
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold cyan]{task.fields[filename]}", justify="left"),
            BarColumn(bar_width=42),
            TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
            TimeElapsedColumn(),
            expand=False,
            console=console,
        )
        self._task_id: Optional[TaskID] = None

    def attach(self, controller) -> None:
        controller.on_state_change(self.on_state_change)
        controller.on_progress_change(self.on_progress)
        controller.on_outcome(self.on_outcome)

    def on_state_change(self, state: SessionState) -> None:
        if state == SessionState.UPLOADING:
            self._start()
        elif state.is_terminal:
            self._stop()

    def on_progress(self, percent: int) -> None:
        if self._task_id is None:
            return
        self._progress.update(self._task_id, completed=percent)

    def on_outcome(self, outcome: Outcome) -> None:
        self._stop()
        if outcome.kind == OutcomeKind.SUCCESS:
            _echo(f"[green]Uploaded:[/green] {escape(self.filename)}")
        elif outcome.kind == OutcomeKind.CANCELLED:
            _echo(f"[yellow]Cancelled:[/yellow] {escape(self.filename)}")
        else:
            _echo(f"[red]Failed:[/red] {escape(self.filename)} - {escape(outcome.message)}")

    def _start(self) -> None:
        if self._task_id is not None:
            return
        self._progress.start()
        self._task_id = self._progress.add_task(
            "upload",
            filename=escape(self.filename[:60]),
            total=100,
        )

    def _stop(self) -> None:
        if self._task_id is None:
            return
        self._progress.stop()
        self._progress.remove_task(self._task_id)
        self._task_id = None
