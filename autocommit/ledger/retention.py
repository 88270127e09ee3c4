"""Retention: truncate the commit chain to the newest N commits."""

from __future__ import annotations

import dataclasses
import logging

from .history import HistoryIndex
from .store import ProjectStore

logger = logging.getLogger(__name__)


class RetentionManager:
    """
    Deletes commits beyond a retention depth.

    Truncation keeps the chain well-formed: the oldest survivor is
    re-parented to None. Deleted ids are assumed not to be referenced from
    anywhere else.
    """

    def __init__(self, store: ProjectStore):
        self.store = store
        self.history = HistoryIndex(store)

    def prune(self, keep_count: int) -> int:
        """Keep the newest `keep_count` commits, delete the rest, return how many went."""
        if keep_count < 0:
            raise ValueError("keep_count must be non-negative")

        state = self.store.require_state()
        chain = list(self.history.iter_chain(state.last_commit_id))
        if len(chain) <= keep_count:
            return 0

        doomed = chain[keep_count:]
        deleted = 0
        for commit in doomed:
            if self.store.delete_commit(commit.id):
                deleted += 1

        if keep_count > 0:
            oldest = chain[keep_count - 1]
            self.store.write_commit(dataclasses.replace(oldest, parent_id=None))
        else:
            # nothing survives; the head pointer must not dangle
            state.last_commit_id = None
            self.store.write_state(state)

        logger.info("Pruned %d commits (kept %d)", deleted, keep_count)
        return deleted
