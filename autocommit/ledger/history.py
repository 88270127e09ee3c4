"""
Commit history reconstruction and queries.

Commits are stored as an id-keyed table; the chain is rebuilt by following
`parent_id` from the head held in the state record.
"""

from __future__ import annotations

import logging
from typing import Iterator

from ..models import Commit, CommitHistory, CommitQuery
from .store import ProjectStore

logger = logging.getLogger(__name__)


class HistoryIndex:
    """Read-only view over one project's commit chain."""

    def __init__(self, store: ProjectStore):
        self.store = store

    def iter_chain(self, head_id: str | None) -> Iterator[Commit]:
        """
        Yield commits newest-first starting at `head_id`.

        A missing record ends the walk. So does an id seen twice, which
        can only come from hand-edited records.
        """
        seen: set[str] = set()
        current = head_id
        while current:
            if current in seen:
                logger.warning("Commit chain revisits %s; stopping walk", current)
                return
            seen.add(current)
            commit = self.store.read_commit(current)
            if commit is None:
                return
            yield commit
            current = commit.parent_id

    def walk(self) -> list[Commit]:
        """The full retained chain, newest first."""
        state = self.store.read_state()
        if state is None:
            return []
        return list(self.iter_chain(state.last_commit_id))

    def get_commit(self, commit_id: str) -> Commit | None:
        return self.store.read_commit(commit_id)

    def get_history(self, query: CommitQuery | None = None) -> CommitHistory:
        state = self.store.read_state()
        if state is None:
            return CommitHistory(project_id="", commits=[], total_count=0)

        commits = list(self.iter_chain(state.last_commit_id))
        query = query or CommitQuery()
        filtered = [c for c in commits if _matches(c, query)]

        start = query.offset
        end = start + query.limit if query.limit is not None else None
        return CommitHistory(
            project_id=state.config.project_id,
            commits=filtered[start:end],
            total_count=len(filtered),
        )


def _matches(commit: Commit, query: CommitQuery) -> bool:
    if query.since is not None and commit.timestamp < query.since:
        return False
    if query.until is not None and commit.timestamp > query.until:
        return False
    if query.author is not None and commit.author != query.author:
        return False
    if query.category is not None and not any(
        ch.category == query.category for ch in commit.changes
    ):
        return False
    if query.search:
        needle = query.search.lower()
        if needle not in commit.message.lower() and not any(
            needle in ch.path.lower() for ch in commit.changes
        ):
            return False
    return True
