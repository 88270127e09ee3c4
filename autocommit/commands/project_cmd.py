"""Project lifecycle commands: init, status, config, snapshot, diff, destroy."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.table import Table

from ..config import AutoCommitConfig, load_config_file
from ..errors import AutoCommitError
from ..ledger.engine import CommitEngine, destroy_autocommit, has_autocommit, init_autocommit
from ..ledger.util import iso_timestamp
from ..models import ChangeType

DEFAULT_AUTHOR = "autocommit"

_CHANGE_STYLES = {
    ChangeType.ADDED: ("+", "green"),
    ChangeType.MODIFIED: ("M", "yellow"),
    ChangeType.DELETED: ("-", "red"),
}


def run_init(
    project_path: Path,
    *,
    overrides: dict[str, Any],
    config_file: Path | None = None,
) -> int:
    err = Console(stderr=True)

    data: dict[str, Any] = {}
    try:
        if config_file is not None:
            data.update(load_config_file(config_file, project_path=project_path))
        data.update({k: v for k, v in overrides.items() if v is not None})
        data["project_path"] = str(project_path)
        data.setdefault("project_id", project_path.name)
        data.setdefault("author", DEFAULT_AUTHOR)
        config = AutoCommitConfig(**data)
    except (ValueError, TypeError, OSError) as e:
        err.print(f"Invalid configuration: {e}", style="bold red")
        return 1

    if not init_autocommit(config):
        err.print(f"Already initialized: {project_path}", style="yellow")
        return 1

    err.print(f"Initialized auto-commit in {project_path / '.autocommit'}", style="green")
    err.print(f"  project_id: {config.project_id}  strategy: {config.strategy.value}", style="dim")
    return 0


def run_status(project_path: Path, *, output_json: bool = False) -> int:
    err = Console(stderr=True)
    console = Console()
    try:
        state = CommitEngine(project_path).get_state()
    except AutoCommitError as e:
        err.print(str(e), style="bold red")
        return 1
    if state is None:
        err.print(f"Not initialized: {project_path}", style="bold red")
        return 1

    if output_json:
        print(json.dumps(state.to_dict(), indent=2, sort_keys=True))
        return 0

    config = state.config
    console.print(f"[bold]{config.project_id}[/bold] ({config.project_path})")
    console.print(f"  strategy: {config.strategy.value}")
    console.print(f"  tracking: {'running' if state.is_running else 'stopped'}")
    console.print(f"  head: {state.last_commit_id or '-'}")
    if state.last_commit_time is not None:
        console.print(f"  last commit: {iso_timestamp(state.last_commit_time)}")
    console.print(f"  total commits: {state.total_commits}")
    console.print(f"  pending changes: {len(state.pending_changes)}")
    return 0


def _parse_value(raw: str) -> Any:
    """Config values are JSON when they parse as JSON, plain strings otherwise."""
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def run_config_set(project_path: Path, assignments: list[str]) -> int:
    err = Console(stderr=True)
    updates: dict[str, Any] = {}
    for item in assignments:
        key, sep, raw = item.partition("=")
        if not sep or not key.strip():
            err.print(f"Expected KEY=VALUE, got {item!r}", style="bold red")
            return 1
        updates[key.strip()] = _parse_value(raw)

    try:
        config = CommitEngine(project_path).update_config(**updates)
    except (AutoCommitError, ValueError) as e:
        err.print(str(e), style="bold red")
        return 1

    print(json.dumps(config.to_dict(), indent=2, sort_keys=True))
    return 0


def run_snapshot(project_path: Path) -> int:
    err = Console(stderr=True)
    try:
        snapshots = CommitEngine(project_path).take_snapshot()
    except AutoCommitError as e:
        err.print(str(e), style="bold red")
        return 1
    err.print(f"Snapshot taken: {len(snapshots)} files", style="green")
    return 0


def run_diff(project_path: Path, *, output_json: bool = False) -> int:
    err = Console(stderr=True)
    console = Console()
    try:
        changes = CommitEngine(project_path).detect_changes()
    except AutoCommitError as e:
        err.print(str(e), style="bold red")
        return 1

    if output_json:
        print(json.dumps([c.to_dict() for c in changes], indent=2))
        return 0

    if not changes:
        console.print("No changes", style="dim")
        return 0

    table = Table(title=f"{len(changes)} change{'s' if len(changes) != 1 else ''}")
    table.add_column("", no_wrap=True)
    table.add_column("path", style="cyan")
    table.add_column("category", style="magenta")
    table.add_column("size", justify="right")
    for change in changes:
        prefix, style = _CHANGE_STYLES[change.type]
        delta = f"{change.size_delta:+d}B" if change.size_delta is not None else ""
        table.add_row(f"[{style}]{prefix}[/{style}]", change.path, change.category.value, delta)
    console.print(table)
    return 0


def run_destroy(project_path: Path, *, confirmed: bool) -> int:
    err = Console(stderr=True)
    if not confirmed:
        err.print("Refusing to destroy history without --yes", style="bold red")
        return 1
    if not has_autocommit(project_path):
        err.print(f"Nothing to destroy: {project_path}", style="yellow")
        return 1
    destroy_autocommit(project_path)
    err.print(f"Removed {project_path / '.autocommit'}", style="green")
    return 0
