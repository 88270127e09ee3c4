"""
Commit ledger for a single working directory.

Components, leaves first:
- scanner: walk the tree, apply ignore/extension rules, hash and categorize
- snapshots: the persisted path -> {hash, size, mtime} baseline
- changes: diff a fresh scan against the baseline
- engine: turn changes into commits, manage the pending buffer and strategy
- retention: truncate the chain to a configured depth
- history: rebuild, filter and paginate the chain
- stats: aggregate counts over the retained history
- formatting: render commits as text

Everything is persisted under `<project>/.autocommit/` by the store.
"""

from .changes import ChangeDetector, diff_snapshots
from .engine import CommitEngine, destroy_autocommit, has_autocommit, init_autocommit
from .formatting import format_full, format_oneline
from .history import HistoryIndex
from .messages import generate_commit_message
from .retention import RetentionManager
from .scanner import (
    ExactSegment,
    PrefixWildcard,
    Scanner,
    SuffixWildcard,
    categorize_file,
    compile_pattern,
    scan_directory,
    should_ignore,
)
from .snapshots import SnapshotStore
from .stats import aggregate_stats
from .store import ProjectStore

__all__ = [
    # Scanning
    "Scanner",
    "ExactSegment",
    "SuffixWildcard",
    "PrefixWildcard",
    "categorize_file",
    "compile_pattern",
    "scan_directory",
    "should_ignore",
    # Baseline / diff
    "SnapshotStore",
    "ChangeDetector",
    "diff_snapshots",
    # Engine
    "CommitEngine",
    "init_autocommit",
    "has_autocommit",
    "destroy_autocommit",
    "generate_commit_message",
    # Chain
    "HistoryIndex",
    "RetentionManager",
    "aggregate_stats",
    "format_oneline",
    "format_full",
    # Storage
    "ProjectStore",
]
