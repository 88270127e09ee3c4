"""
Snapshot baseline: the last recorded hash/size/mtime per tracked path.

The baseline is replaced wholesale, never patched, so it can always be
reproduced from a fresh scan of the same tree.
"""

from __future__ import annotations

import logging
from typing import Iterable

from ..models import FileSnapshot, TrackedFile
from .store import ProjectStore

logger = logging.getLogger(__name__)


def build_snapshot_map(files: Iterable[TrackedFile]) -> dict[str, FileSnapshot]:
    return {f.path: FileSnapshot.from_tracked(f) for f in files}


class SnapshotStore:
    """Loads and replaces the persisted baseline for one project."""

    def __init__(self, store: ProjectStore):
        self.store = store

    def load(self) -> dict[str, FileSnapshot]:
        return self.store.read_snapshots()

    def replace(self, files: Iterable[TrackedFile]) -> dict[str, FileSnapshot]:
        snapshots = build_snapshot_map(files)
        self.store.write_snapshots(snapshots)
        logger.debug("Snapshot baseline refreshed: %d files", len(snapshots))
        return snapshots
