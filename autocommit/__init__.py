"""autocommit - content-hash change tracking and commit history for one working directory."""

__version__ = "0.1.0"

from .config import AutoCommitConfig, CommitStrategy
from .errors import AutoCommitError, CorruptRecordError, NotInitializedError
from .ledger import (
    CommitEngine,
    destroy_autocommit,
    format_full,
    format_oneline,
    generate_commit_message,
    has_autocommit,
    init_autocommit,
)
from .models import (
    AutoCommitState,
    ChangeType,
    Commit,
    CommitChange,
    CommitHistory,
    CommitQuery,
    CommitStats,
    FileCategory,
    FileSnapshot,
    TrackedFile,
)

__all__ = [
    "__version__",
    "AutoCommitConfig",
    "AutoCommitState",
    "AutoCommitError",
    "ChangeType",
    "Commit",
    "CommitChange",
    "CommitEngine",
    "CommitHistory",
    "CommitQuery",
    "CommitStats",
    "CommitStrategy",
    "CorruptRecordError",
    "FileCategory",
    "FileSnapshot",
    "NotInitializedError",
    "TrackedFile",
    "destroy_autocommit",
    "format_full",
    "format_oneline",
    "generate_commit_message",
    "has_autocommit",
    "init_autocommit",
]
