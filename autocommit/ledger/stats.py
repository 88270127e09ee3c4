"""Aggregate statistics over the retained commit history."""

from __future__ import annotations

from typing import Iterable

from ..models import ChangeType, Commit, CommitStats


def aggregate_stats(project_id: str, commits: Iterable[Commit]) -> CommitStats:
    """
    Fold commits into a CommitStats.

    Every commit and change is counted; the average is exact rather than
    sampled.
    """
    stats = CommitStats(project_id=project_id)

    for commit in commits:
        stats.total_commits += 1
        for change in commit.changes:
            stats.total_changes += 1
            if change.type == ChangeType.ADDED:
                stats.files_added += 1
            elif change.type == ChangeType.MODIFIED:
                stats.files_modified += 1
            elif change.type == ChangeType.DELETED:
                stats.files_deleted += 1
            key = change.category.value
            stats.category_counts[key] = stats.category_counts.get(key, 0) + 1

        if stats.first_commit is None or commit.timestamp < stats.first_commit:
            stats.first_commit = commit.timestamp
        if stats.last_commit is None or commit.timestamp > stats.last_commit:
            stats.last_commit = commit.timestamp

    if stats.total_commits:
        stats.average_changes_per_commit = stats.total_changes / stats.total_commits
    return stats
