"""Plain-text rendering of commits."""

from __future__ import annotations

from ..models import ChangeType, Commit, CommitChange
from .util import iso_timestamp

_PREFIXES = {
    ChangeType.ADDED: "+",
    ChangeType.DELETED: "-",
    ChangeType.MODIFIED: "M",
}


def format_oneline(commit: Commit) -> str:
    """`abc1234 Add player.gd (1 change)`"""
    short_id = commit.id[:7]
    count = len(commit.changes)
    suffix = f" ({count} change{'s' if count != 1 else ''})" if count else ""
    return f"{short_id} {commit.message}{suffix}"


def _format_change(change: CommitChange) -> str:
    line = f"    {_PREFIXES[change.type]} [{change.category.value}] {change.path}"
    if change.type == ChangeType.MODIFIED and change.size_delta is not None:
        line += f" ({change.size_delta:+d}B)"
    return line


def format_full(commit: Commit) -> str:
    """Multi-line, `git log`-style rendering of one commit."""
    lines = [f"commit {commit.id}"]
    if commit.parent_id:
        lines.append(f"Parent:   {commit.parent_id}")
    lines.extend(
        [
            f"Author:   {commit.author}",
            f"Date:     {iso_timestamp(commit.timestamp)}",
            f"Strategy: {commit.strategy.value}",
        ]
    )
    if commit.tags:
        lines.append(f"Tags:     {', '.join(commit.tags)}")

    lines.extend(["", f"    {commit.message}", ""])

    if commit.changes:
        lines.append("  Changes:")
        lines.extend(_format_change(c) for c in commit.changes)

    return "\n".join(lines)
