"""Commit-producing commands: commit, pending add/flush, prune."""

from __future__ import annotations

from pathlib import Path

from rich.console import Console

from ..errors import AutoCommitError
from ..ledger.engine import CommitEngine
from ..ledger.formatting import format_oneline


def run_commit(
    project_path: Path,
    *,
    message: str | None = None,
    author: str | None = None,
    tags: list[str] | None = None,
) -> int:
    err = Console(stderr=True)
    console = Console()
    try:
        commit = CommitEngine(project_path).create_commit(
            message=message,
            author=author,
            tags=tags or None,
        )
    except AutoCommitError as e:
        err.print(str(e), style="bold red")
        return 1

    if commit is None:
        console.print("Nothing to commit", style="dim")
        return 0
    console.print(format_oneline(commit), markup=False, highlight=False, soft_wrap=True)
    return 0


def run_pending_add(project_path: Path) -> int:
    err = Console(stderr=True)
    engine = CommitEngine(project_path)
    try:
        before = engine.store.require_state().pending_changes
        pending = engine.add_pending_changes()
        engine.take_snapshot()
        due = engine.should_commit()
    except AutoCommitError as e:
        err.print(str(e), style="bold red")
        return 1

    added = len(pending) - len(before)
    err.print(f"Buffered {added} change{'s' if added != 1 else ''} ({len(pending)} pending)")
    if due:
        err.print("Commit strategy says a commit is due; run `autocommit pending flush`", style="yellow")
    return 0


def run_pending_flush(
    project_path: Path,
    *,
    message: str | None = None,
    author: str | None = None,
    tags: list[str] | None = None,
) -> int:
    err = Console(stderr=True)
    console = Console()
    try:
        commit = CommitEngine(project_path).flush_pending_changes(
            message=message,
            author=author,
            tags=tags or None,
        )
    except AutoCommitError as e:
        err.print(str(e), style="bold red")
        return 1

    if commit is None:
        console.print("No pending changes", style="dim")
        return 0
    console.print(format_oneline(commit), markup=False, highlight=False, soft_wrap=True)
    return 0


def run_prune(project_path: Path, keep_count: int) -> int:
    err = Console(stderr=True)
    try:
        deleted = CommitEngine(project_path).prune_commits(keep_count)
    except (AutoCommitError, ValueError) as e:
        err.print(str(e), style="bold red")
        return 1
    err.print(f"Pruned {deleted} commit{'s' if deleted != 1 else ''}", style="green")
    return 0
