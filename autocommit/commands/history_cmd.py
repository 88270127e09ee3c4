"""History and reporting commands: log, show, stats."""

from __future__ import annotations

import json
from pathlib import Path

from rich.console import Console
from rich.table import Table

from ..errors import AutoCommitError
from ..ledger.engine import CommitEngine
from ..ledger.formatting import format_full, format_oneline
from ..ledger.util import iso_timestamp
from ..models import CommitQuery


def run_log(
    project_path: Path,
    *,
    query: CommitQuery,
    oneline: bool = False,
    output_json: bool = False,
) -> int:
    err = Console(stderr=True)
    console = Console()
    try:
        history = CommitEngine(project_path).get_history(query)
    except AutoCommitError as e:
        err.print(str(e), style="bold red")
        return 1

    if output_json:
        data = {
            "project_id": history.project_id,
            "total_count": history.total_count,
            "commits": [c.to_dict() for c in history.commits],
        }
        print(json.dumps(data, indent=2))
        return 0

    if not history.commits:
        console.print("No commits", style="dim")
        return 0

    if oneline:
        for commit in history.commits:
            console.print(format_oneline(commit), markup=False, highlight=False, soft_wrap=True)
    else:
        blocks = [format_full(c) for c in history.commits]
        console.print("\n\n".join(blocks), markup=False, highlight=False, soft_wrap=True)

    shown = len(history.commits)
    if shown < history.total_count:
        err.print(f"Showing {shown} of {history.total_count} commits", style="dim")
    return 0


def run_show(project_path: Path, commit_id: str, *, output_json: bool = False) -> int:
    err = Console(stderr=True)
    console = Console()
    try:
        commit = CommitEngine(project_path).get_commit(commit_id)
    except AutoCommitError as e:
        err.print(str(e), style="bold red")
        return 1
    if commit is None:
        err.print(f"Commit not found: {commit_id}", style="bold red")
        return 1

    if output_json:
        print(json.dumps(commit.to_dict(), indent=2))
    else:
        console.print(format_full(commit), markup=False, highlight=False, soft_wrap=True)
    return 0


def run_stats(project_path: Path, *, output_json: bool = False) -> int:
    err = Console(stderr=True)
    console = Console()
    try:
        stats = CommitEngine(project_path).get_stats()
    except AutoCommitError as e:
        err.print(str(e), style="bold red")
        return 1
    if stats is None:
        err.print(f"Not initialized: {project_path}", style="bold red")
        return 1

    if output_json:
        print(json.dumps(stats.to_dict(), indent=2, sort_keys=True))
        return 0

    table = Table(title=f"Commit stats: {stats.project_id}")
    table.add_column("metric", style="cyan")
    table.add_column("value", justify="right")
    table.add_row("commits", str(stats.total_commits))
    table.add_row("changes", str(stats.total_changes))
    table.add_row("added", str(stats.files_added))
    table.add_row("modified", str(stats.files_modified))
    table.add_row("deleted", str(stats.files_deleted))
    table.add_row("avg changes/commit", f"{stats.average_changes_per_commit:.2f}")
    table.add_row("first commit", iso_timestamp(stats.first_commit) if stats.first_commit is not None else "-")
    table.add_row("last commit", iso_timestamp(stats.last_commit) if stats.last_commit is not None else "-")
    console.print(table)

    if stats.category_counts:
        categories = Table(title="Changes by category")
        categories.add_column("category", style="magenta")
        categories.add_column("changes", justify="right")
        for category, count in sorted(stats.category_counts.items(), key=lambda kv: (-kv[1], kv[0])):
            categories.add_row(category, str(count))
        console.print(categories)
    return 0
