"""CLI entrypoint for autocommit."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from . import __version__
from .config import CommitStrategy
from .ledger.store import AUTOCOMMIT_DIR


def _auto_detect_project(start: Path) -> Path:
    """Find the nearest directory holding `.autocommit/`, walking up from `start`."""
    cur = start.resolve()
    for p in (cur, *cur.parents):
        if (p / AUTOCOMMIT_DIR).is_dir():
            return p
    return cur


def _configure_logging(verbose: bool) -> None:
    from rich.console import Console
    from rich.logging import RichHandler

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@click.group()
@click.version_option(__version__, prog_name="autocommit")
@click.option(
    "--project",
    "-p",
    type=click.Path(exists=False, file_okay=False, dir_okay=True, path_type=Path),
    default=None,
    help="Project root (defaults to the nearest directory containing .autocommit, else cwd)",
)
@click.option("--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, project: Path | None, verbose: bool) -> None:
    """autocommit - checkpoint a working directory into a commit history.

    Detects added, modified and deleted files by content hash and records
    them as commits under .autocommit/.
    """
    _configure_logging(verbose)
    ctx.ensure_object(dict)
    if project is None:
        project = _auto_detect_project(Path.cwd())
    if not project.exists() or not project.is_dir():
        raise click.BadParameter(f"Directory '{project}' does not exist.", param_hint="--project / -p")
    ctx.obj["project"] = project.resolve()


# -----------------------------------------------------------------------------
# Lifecycle
# -----------------------------------------------------------------------------


@cli.command()
@click.option("--project-id", default=None, help="Project identifier (defaults to directory name)")
@click.option("--author", default=None, help="Default commit author [default: autocommit]")
@click.option(
    "--strategy",
    type=click.Choice([s.value for s in CommitStrategy]),
    default=None,
    help="When pending changes become a commit [default: immediate]",
)
@click.option("--interval-ms", type=int, default=None, help="Interval for the interval strategy")
@click.option("--batch-size", type=int, default=None, help="Threshold for the batched strategy")
@click.option("--ignore", "ignore_patterns", multiple=True, help="Ignore pattern (repeatable; replaces defaults)")
@click.option("--track", "track_extensions", multiple=True, help="Tracked extension (repeatable; replaces defaults)")
@click.option("--no-auto-message", is_flag=True, help="Use a fixed message instead of generated ones")
@click.option("--max-commits", type=int, default=None, help="Retain at most this many commits (0 = unlimited)")
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="TOML file with initial configuration (flags override it)",
)
@click.pass_context
def init(
    ctx: click.Context,
    project_id: str | None,
    author: str | None,
    strategy: str | None,
    interval_ms: int | None,
    batch_size: int | None,
    ignore_patterns: tuple[str, ...],
    track_extensions: tuple[str, ...],
    no_auto_message: bool,
    max_commits: int | None,
    config_file: Path | None,
) -> None:
    """Initialize auto-commit tracking for the project."""
    from .commands.project_cmd import run_init

    project: Path = ctx.obj["project"]
    overrides = {
        "project_id": project_id,
        "author": author,
        "strategy": strategy,
        "interval_ms": interval_ms,
        "batch_size": batch_size,
        "ignore_patterns": list(ignore_patterns) or None,
        "track_extensions": list(track_extensions) or None,
        "auto_message": False if no_auto_message else None,
        "max_commits": max_commits,
    }
    sys.exit(run_init(project, overrides=overrides, config_file=config_file))


@cli.command()
@click.option("--json", "output_json", is_flag=True, help="Output the raw state record")
@click.pass_context
def status(ctx: click.Context, output_json: bool) -> None:
    """Show the head record: strategy, head commit, pending buffer."""
    from .commands.project_cmd import run_status

    sys.exit(run_status(ctx.obj["project"], output_json=output_json))


@cli.group()
def config() -> None:
    """Inspect or change the project configuration."""
    pass


@config.command("set")
@click.argument("assignments", nargs=-1, required=True, metavar="KEY=VALUE...")
@click.pass_context
def config_set(ctx: click.Context, assignments: tuple[str, ...]) -> None:
    """Update config fields. Values are parsed as JSON when possible.

    Examples:

        autocommit config set strategy=batched batch_size=10

        autocommit config set 'ignore_patterns=[".git", "*.tmp"]'
    """
    from .commands.project_cmd import run_config_set

    sys.exit(run_config_set(ctx.obj["project"], list(assignments)))


@cli.command()
@click.pass_context
def snapshot(ctx: click.Context) -> None:
    """Record the current tree as the diff baseline without committing."""
    from .commands.project_cmd import run_snapshot

    sys.exit(run_snapshot(ctx.obj["project"]))


@cli.command()
@click.option("--json", "output_json", is_flag=True, help="Output changes as JSON")
@click.pass_context
def diff(ctx: click.Context, output_json: bool) -> None:
    """List changes since the last commit or snapshot."""
    from .commands.project_cmd import run_diff

    sys.exit(run_diff(ctx.obj["project"], output_json=output_json))


@cli.command()
@click.option("--yes", "confirmed", is_flag=True, help="Confirm irreversible removal")
@click.pass_context
def destroy(ctx: click.Context, confirmed: bool) -> None:
    """Delete all auto-commit records for the project."""
    from .commands.project_cmd import run_destroy

    sys.exit(run_destroy(ctx.obj["project"], confirmed=confirmed))


# -----------------------------------------------------------------------------
# Commits
# -----------------------------------------------------------------------------


@cli.command()
@click.option("--message", "-m", default=None, help="Commit message (generated when omitted)")
@click.option("--author", default=None, help="Override the configured author")
@click.option("--tag", "tags", multiple=True, help="Tag the commit (repeatable)")
@click.pass_context
def commit(ctx: click.Context, message: str | None, author: str | None, tags: tuple[str, ...]) -> None:
    """Commit all detected changes."""
    from .commands.commit_cmd import run_commit

    sys.exit(run_commit(ctx.obj["project"], message=message, author=author, tags=list(tags)))


@cli.group()
def pending() -> None:
    """Manage the pending-change buffer."""
    pass


@pending.command("add")
@click.pass_context
def pending_add(ctx: click.Context) -> None:
    """Buffer detected changes without committing."""
    from .commands.commit_cmd import run_pending_add

    sys.exit(run_pending_add(ctx.obj["project"]))


@pending.command("flush")
@click.option("--message", "-m", default=None, help="Commit message (generated when omitted)")
@click.option("--author", default=None, help="Override the configured author")
@click.option("--tag", "tags", multiple=True, help="Tag the commit (repeatable)")
@click.pass_context
def pending_flush(ctx: click.Context, message: str | None, author: str | None, tags: tuple[str, ...]) -> None:
    """Commit the pending buffer as a single commit."""
    from .commands.commit_cmd import run_pending_flush

    sys.exit(run_pending_flush(ctx.obj["project"], message=message, author=author, tags=list(tags)))


@cli.command()
@click.argument("keep", type=click.IntRange(min=0))
@click.pass_context
def prune(ctx: click.Context, keep: int) -> None:
    """Keep only the newest KEEP commits. Irreversible."""
    from .commands.commit_cmd import run_prune

    sys.exit(run_prune(ctx.obj["project"], keep))


# -----------------------------------------------------------------------------
# History
# -----------------------------------------------------------------------------


@cli.command()
@click.option("--since", type=int, default=None, help="Only commits at or after this epoch-ms timestamp")
@click.option("--until", type=int, default=None, help="Only commits at or before this epoch-ms timestamp")
@click.option("--author", default=None, help="Only commits by this author")
@click.option("--category", default=None, help="Only commits touching this file category")
@click.option("--search", default=None, help="Case-insensitive match on message or path")
@click.option("--limit", "-n", type=click.IntRange(min=0), default=None, help="Maximum commits to show")
@click.option("--offset", type=click.IntRange(min=0), default=0, help="Skip this many commits")
@click.option("--oneline", is_flag=True, help="One line per commit")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.pass_context
def log(
    ctx: click.Context,
    since: int | None,
    until: int | None,
    author: str | None,
    category: str | None,
    search: str | None,
    limit: int | None,
    offset: int,
    oneline: bool,
    output_json: bool,
) -> None:
    """Show commit history, newest first."""
    from .commands.history_cmd import run_log
    from .models import CommitQuery

    try:
        query = CommitQuery(
            since=since,
            until=until,
            limit=limit,
            offset=offset,
            author=author,
            category=category,
            search=search,
        )
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--category") from e
    sys.exit(run_log(ctx.obj["project"], query=query, oneline=oneline, output_json=output_json))


@cli.command()
@click.argument("commit_id")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.pass_context
def show(ctx: click.Context, commit_id: str, output_json: bool) -> None:
    """Show one commit in full."""
    from .commands.history_cmd import run_show

    sys.exit(run_show(ctx.obj["project"], commit_id, output_json=output_json))


@cli.command()
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.pass_context
def stats(ctx: click.Context, output_json: bool) -> None:
    """Aggregate counts over the retained history."""
    from .commands.history_cmd import run_stats

    sys.exit(run_stats(ctx.obj["project"], output_json=output_json))


# -----------------------------------------------------------------------------
# Watch
# -----------------------------------------------------------------------------


@cli.command()
@click.option("--force", is_flag=True, help="Start even if a previous watcher left the running flag set")
@click.pass_context
def watch(ctx: click.Context, force: bool) -> None:
    """Watch the project and commit according to its strategy.

    Runs until interrupted (Ctrl+C).
    """
    from .commands.watch_cmd import run_watch

    sys.exit(run_watch(ctx.obj["project"], force=force))


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
