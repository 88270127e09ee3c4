"""
Commit engine: the per-project handle for detecting, buffering and
committing changes.

The engine holds no state between calls beyond paths and a clock; every
operation reads the head record from disk, mutates it and writes it back.
Callers must serialize mutating calls for a given project.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Sequence

from ..config import AutoCommitConfig, CommitStrategy
from ..models import (
    AutoCommitState,
    Commit,
    CommitChange,
    CommitHistory,
    CommitQuery,
    CommitStats,
    FileSnapshot,
)
from .changes import ChangeDetector
from .history import HistoryIndex
from .messages import generate_commit_message
from .retention import RetentionManager
from .scanner import Scanner
from .snapshots import SnapshotStore
from .stats import aggregate_stats
from .store import ProjectStore
from .util import new_commit_id, now_ms

logger = logging.getLogger(__name__)

Clock = Callable[[], int]

DEFAULT_MESSAGE = "Auto-commit"

# Re-draws before giving up on finding an unused commit id.
_MAX_ID_ATTEMPTS = 16


def init_autocommit(config: AutoCommitConfig, *, clock: Clock = now_ms) -> bool:
    """
    Create the `.autocommit/` records for a project.

    Returns False, without touching anything, if the project is already
    initialized.
    """
    store = ProjectStore(config.project_path)
    if store.exists():
        return False

    store.create()
    store.write_config(config)
    store.write_snapshots({})

    now = clock()
    store.write_state(AutoCommitState(config=config, created_at=now, updated_at=now))
    logger.info("Initialized auto-commit for %s (%s)", config.project_id, store.root)
    return True


def has_autocommit(project_path: Path | str) -> bool:
    return ProjectStore(project_path).exists()


def destroy_autocommit(project_path: Path | str) -> bool:
    """Remove every auto-commit record for a project. Irreversible."""
    return ProjectStore(project_path).remove()


class CommitEngine:
    """Handle over one project's auto-commit records."""

    def __init__(self, project_path: Path | str, *, clock: Clock = now_ms):
        self.store = ProjectStore(project_path)
        self.clock = clock
        self.snapshots = SnapshotStore(self.store)
        self.history = HistoryIndex(self.store)
        self.retention = RetentionManager(self.store)

    @property
    def project_path(self) -> Path:
        return self.store.project_path

    def _detector(self, config: AutoCommitConfig) -> ChangeDetector:
        return ChangeDetector(Scanner.from_config(config), self.snapshots)

    # -- state / config -------------------------------------------------------

    def get_state(self) -> AutoCommitState | None:
        return self.store.read_state()

    def update_config(self, **updates: Any) -> AutoCommitConfig:
        """Merge `updates` into the config and persist it."""
        state = self.store.require_state()
        if "project_path" in updates and updates["project_path"] != state.config.project_path:
            raise ValueError("project_path cannot be changed after init")

        config = state.config.merged(updates)
        state.config = config
        state.updated_at = self.clock()
        self.store.write_state(state)
        self.store.write_config(config)
        return config

    # -- detection / snapshots ------------------------------------------------

    def detect_changes(self) -> list[CommitChange]:
        state = self.store.require_state()
        return self._detector(state.config).detect()

    def take_snapshot(self) -> dict[str, FileSnapshot]:
        """Replace the baseline with the current tree state."""
        state = self.store.require_state()
        return self._take_snapshot(state.config)

    def _take_snapshot(self, config: AutoCommitConfig) -> dict[str, FileSnapshot]:
        files = Scanner.from_config(config).scan(self.project_path)
        return self.snapshots.replace(files)

    # -- commits --------------------------------------------------------------

    def create_commit(
        self,
        changes: Sequence[CommitChange] | None = None,
        *,
        message: str | None = None,
        author: str | None = None,
        tags: Sequence[str] | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> Commit | None:
        """
        Commit `changes` (or freshly detected changes).

        Returns None, with no side effects, when there is nothing to commit.
        """
        state = self.store.require_state()
        config = state.config

        if changes is None:
            changes = self._detector(config).detect()
        if not changes:
            return None

        now = self.clock()
        author = author or config.author
        if message is None:
            message = generate_commit_message(changes) if config.auto_message is not False else DEFAULT_MESSAGE

        commit = Commit(
            id=self._new_id(now, message, author),
            project_id=config.project_id,
            timestamp=now,
            message=message,
            author=author,
            changes=tuple(changes),
            strategy=config.strategy,
            parent_id=state.last_commit_id,
            tags=tuple(tags) if tags is not None else None,
            metadata=metadata,
        )
        self.store.write_commit(commit)

        self._take_snapshot(config)

        state.last_commit_id = commit.id
        state.last_commit_time = now
        state.total_commits += 1
        state.pending_changes = []
        state.updated_at = now
        self.store.write_state(state)

        logger.info("Created commit %s: %s (%d changes)", commit.id, message, len(commit.changes))

        if config.max_commits:
            self.retention.prune(config.max_commits)

        return commit

    def _new_id(self, timestamp: int, message: str, author: str) -> str:
        for _ in range(_MAX_ID_ATTEMPTS):
            commit_id = new_commit_id(timestamp, message, author)
            if not self.store.has_commit(commit_id):
                return commit_id
        raise RuntimeError("Could not allocate an unused commit id")

    def get_commit(self, commit_id: str) -> Commit | None:
        return self.history.get_commit(commit_id)

    # -- pending buffer -------------------------------------------------------

    def add_pending_changes(self, changes: Sequence[CommitChange] | None = None) -> list[CommitChange]:
        """Append changes to the pending buffer without committing; returns the buffer."""
        state = self.store.require_state()
        if changes is None:
            changes = self._detector(state.config).detect()

        state.pending_changes = [*state.pending_changes, *changes]
        state.updated_at = self.clock()
        self.store.write_state(state)
        logger.info("Buffered %d changes (%d pending)", len(changes), len(state.pending_changes))
        return list(state.pending_changes)

    def flush_pending_changes(
        self,
        *,
        message: str | None = None,
        author: str | None = None,
        tags: Sequence[str] | None = None,
    ) -> Commit | None:
        """Commit the pending buffer as one commit; None when it is empty."""
        state = self.store.require_state()
        if not state.pending_changes:
            return None
        return self.create_commit(state.pending_changes, message=message, author=author, tags=tags)

    def should_commit(self, now: int | None = None) -> bool:
        """Evaluate the configured strategy. Read-only."""
        state = self.store.read_state()
        if state is None:
            return False

        config = state.config
        if config.strategy == CommitStrategy.IMMEDIATE:
            return True
        if config.strategy == CommitStrategy.BATCHED:
            return len(state.pending_changes) >= config.effective_batch_size
        if config.strategy == CommitStrategy.INTERVAL:
            if state.last_commit_time is None:
                return True
            now = self.clock() if now is None else now
            return now - state.last_commit_time >= config.effective_interval_ms
        return False

    def auto_step(self) -> Commit | None:
        """
        Apply the configured strategy once against the current tree.

        Batched projects buffer detected changes and move the baseline
        forward so the same edits are not buffered twice; the buffer is
        flushed once it reaches the batch size. Immediate and interval
        projects commit whenever the strategy allows it.
        """
        state = self.store.require_state()
        strategy = state.config.strategy

        if strategy == CommitStrategy.MANUAL:
            return None

        if strategy == CommitStrategy.BATCHED:
            changes = self._detector(state.config).detect()
            if changes:
                self.add_pending_changes(changes)
                self._take_snapshot(state.config)
            if self.should_commit():
                return self.flush_pending_changes()
            return None

        if not self.should_commit():
            return None
        return self.create_commit()

    # -- tracking -------------------------------------------------------------

    def start_tracking(self) -> bool:
        """Mark tracking as running and take a baseline. False if already running."""
        state = self.store.require_state()
        if state.is_running:
            return False

        state.is_running = True
        state.updated_at = self.clock()
        self.store.write_state(state)
        self._take_snapshot(state.config)
        logger.info("Tracking started for %s", state.config.project_id)
        return True

    def stop_tracking(self) -> bool:
        """Mark tracking as stopped. False if it was not running."""
        state = self.store.require_state()
        if not state.is_running:
            return False

        state.is_running = False
        state.updated_at = self.clock()
        self.store.write_state(state)
        logger.info("Tracking stopped for %s", state.config.project_id)
        return True

    # -- history / reporting --------------------------------------------------

    def get_history(self, query: CommitQuery | None = None) -> CommitHistory:
        return self.history.get_history(query)

    def get_stats(self) -> CommitStats | None:
        state = self.store.read_state()
        if state is None:
            return None
        return aggregate_stats(state.config.project_id, self.history.iter_chain(state.last_commit_id))

    def prune_commits(self, keep_count: int) -> int:
        return self.retention.prune(keep_count)
