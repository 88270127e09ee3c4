"""Watch command - commit project changes as they happen."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from ..errors import AutoCommitError
from ..ledger.engine import CommitEngine
from ..ledger.formatting import format_oneline
from ..models import Commit
from ..watcher import run_tracking_loop


def run_watch(project_path: Path, *, force: bool = False) -> int:
    """
    Watch the project and apply its commit strategy on every settled change.

    This is a blocking command that runs until interrupted (Ctrl+C).
    `force` clears a running flag left behind by a watcher that crashed.
    """
    console = Console(stderr=True)
    engine = CommitEngine(project_path)
    try:
        state = engine.store.require_state()
    except AutoCommitError as e:
        console.print(str(e), style="bold red")
        return 1

    if state.is_running:
        if not force:
            console.print("Tracking is already marked as running for this project", style="bold red")
            console.print("If no watcher is running, retry with --force", style="dim")
            return 1
        engine.stop_tracking()
        console.print("Cleared stale running flag", style="yellow")

    console.print(f"[bold]Watching[/bold] {engine.project_path}")
    console.print(f"  Strategy: {state.config.strategy.value}")
    console.print()
    console.print("[dim]Press Ctrl+C to stop watching[/dim]")
    console.print()

    commit_count = 0

    def on_commit(commit: Commit) -> None:
        nonlocal commit_count
        commit_count += 1
        timestamp = datetime.now().strftime("%H:%M:%S")
        console.print(f"[dim]{timestamp}[/dim] {escape(format_oneline(commit))}", highlight=False)

    run_tracking_loop(engine, on_commit=on_commit)

    console.print()
    console.print(f"[bold]Stopped.[/bold] Created {commit_count} commits.")
    return 0
