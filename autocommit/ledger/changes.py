"""Change detection: diff a fresh scan against the snapshot baseline."""

from __future__ import annotations

from typing import Sequence

from ..models import ChangeType, CommitChange, FileSnapshot, TrackedFile
from .scanner import Scanner, categorize_file
from .snapshots import SnapshotStore


def diff_snapshots(
    baseline: dict[str, FileSnapshot],
    current: Sequence[TrackedFile],
) -> list[CommitChange]:
    """
    Compute added/modified/deleted changes.

    Added and modified entries follow the order of `current`; deletions
    follow, sorted by path.
    """
    changes: list[CommitChange] = []
    seen: set[str] = set()

    for tracked in current:
        seen.add(tracked.path)
        saved = baseline.get(tracked.path)
        if saved is None:
            changes.append(
                CommitChange(
                    path=tracked.path,
                    type=ChangeType.ADDED,
                    category=tracked.category,
                    new_hash=tracked.hash,
                    size_delta=tracked.size,
                )
            )
        elif saved.hash != tracked.hash:
            changes.append(
                CommitChange(
                    path=tracked.path,
                    type=ChangeType.MODIFIED,
                    category=tracked.category,
                    old_hash=saved.hash,
                    new_hash=tracked.hash,
                    size_delta=tracked.size - saved.size,
                )
            )

    for path in sorted(set(baseline) - seen):
        saved = baseline[path]
        changes.append(
            CommitChange(
                path=path,
                type=ChangeType.DELETED,
                category=categorize_file(path),
                old_hash=saved.hash,
                size_delta=-saved.size,
            )
        )

    return changes


class ChangeDetector:
    """Runs a scan and diffs it against the persisted baseline."""

    def __init__(self, scanner: Scanner, snapshots: SnapshotStore):
        self.scanner = scanner
        self.snapshots = snapshots

    def detect(self) -> list[CommitChange]:
        baseline = self.snapshots.load()
        current = self.scanner.scan(self.snapshots.store.project_path)
        return diff_snapshots(baseline, current)
