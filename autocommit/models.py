"""
Record types for the commit engine.

Persisted records (FileSnapshot, Commit, AutoCommitState) round-trip through
`to_dict` / `from_dict`. `from_dict` validates against a closed schema and
raises ValueError on any mismatch; the store turns that into a
CorruptRecordError carrying the file path.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .config import AutoCommitConfig, CommitStrategy


class ChangeType(str, Enum):
    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"


class FileCategory(str, Enum):
    SCENE = "scene"
    SCRIPT = "script"
    ASSET = "asset"
    CONFIG = "config"
    RESOURCE = "resource"
    SHADER = "shader"
    AUDIO = "audio"
    UNKNOWN = "unknown"


# -----------------------------------------------------------------------------
# Schema helpers
# -----------------------------------------------------------------------------


def _require(data: dict[str, Any], key: str, kind: type | tuple[type, ...]) -> Any:
    if key not in data:
        raise ValueError(f"missing field {key!r}")
    return _check(key, data[key], kind)


def _optional(data: dict[str, Any], key: str, kind: type | tuple[type, ...]) -> Any:
    value = data.get(key)
    if value is None:
        return None
    return _check(key, value, kind)


def _check(key: str, value: Any, kind: type | tuple[type, ...]) -> Any:
    kinds = kind if isinstance(kind, tuple) else (kind,)
    # bool is an int subclass; reject it wherever an int is expected
    if isinstance(value, bool) and bool not in kinds:
        raise ValueError(f"field {key!r} has wrong type bool")
    if not isinstance(value, kinds):
        raise ValueError(f"field {key!r} has wrong type {type(value).__name__}")
    return value


def _enum(enum_cls: type[Enum], key: str, value: Any) -> Any:
    try:
        return enum_cls(value)
    except ValueError:
        raise ValueError(f"field {key!r} has invalid value {value!r}") from None


def _require_object(data: Any, what: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise ValueError(f"{what} must be an object")
    return data


# -----------------------------------------------------------------------------
# File records
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class TrackedFile:
    """One file seen by a scan. Never persisted."""

    path: str
    hash: str
    size: int
    category: FileCategory
    last_modified: int


@dataclass(frozen=True)
class FileSnapshot:
    """Baseline entry for one tracked path."""

    path: str
    hash: str
    size: int
    last_modified: int

    @classmethod
    def from_tracked(cls, tracked: TrackedFile) -> FileSnapshot:
        return cls(
            path=tracked.path,
            hash=tracked.hash,
            size=tracked.size,
            last_modified=tracked.last_modified,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "hash": self.hash,
            "size": self.size,
            "last_modified": self.last_modified,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FileSnapshot:
        data = _require_object(data, "snapshot entry")
        return cls(
            path=_require(data, "path", str),
            hash=_require(data, "hash", str),
            size=_require(data, "size", int),
            last_modified=_require(data, "last_modified", int),
        )


# -----------------------------------------------------------------------------
# Commits
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class CommitChange:
    """A single path-level change inside a commit."""

    path: str
    type: ChangeType
    category: FileCategory
    old_hash: str | None = None
    new_hash: str | None = None
    size_delta: int | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "path": self.path,
            "type": self.type.value,
            "category": self.category.value,
        }
        if self.old_hash is not None:
            result["old_hash"] = self.old_hash
        if self.new_hash is not None:
            result["new_hash"] = self.new_hash
        if self.size_delta is not None:
            result["size_delta"] = self.size_delta
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CommitChange:
        data = _require_object(data, "change")
        return cls(
            path=_require(data, "path", str),
            type=_enum(ChangeType, "type", _require(data, "type", str)),
            category=_enum(FileCategory, "category", _require(data, "category", str)),
            old_hash=_optional(data, "old_hash", str),
            new_hash=_optional(data, "new_hash", str),
            size_delta=_optional(data, "size_delta", int),
        )


@dataclass(frozen=True)
class Commit:
    """
    Immutable record of one change set.

    Commits form a singly linked chain through `parent_id`. The only
    rewrite ever applied to a stored commit is retention re-parenting the
    oldest survivor to None.
    """

    id: str
    project_id: str
    timestamp: int
    message: str
    author: str
    changes: tuple[CommitChange, ...]
    strategy: CommitStrategy
    parent_id: str | None = None
    tags: tuple[str, ...] | None = None
    metadata: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "id": self.id,
            "project_id": self.project_id,
            "timestamp": self.timestamp,
            "message": self.message,
            "author": self.author,
            "changes": [c.to_dict() for c in self.changes],
            "strategy": self.strategy.value,
            "parent_id": self.parent_id,
        }
        if self.tags is not None:
            result["tags"] = list(self.tags)
        if self.metadata is not None:
            result["metadata"] = self.metadata
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Commit:
        data = _require_object(data, "commit")
        if "parent_id" not in data:
            raise ValueError("missing field 'parent_id'")
        tags = _optional(data, "tags", list)
        if tags is not None and not all(isinstance(t, str) for t in tags):
            raise ValueError("field 'tags' must contain only strings")
        return cls(
            id=_require(data, "id", str),
            project_id=_require(data, "project_id", str),
            timestamp=_require(data, "timestamp", int),
            message=_require(data, "message", str),
            author=_require(data, "author", str),
            changes=tuple(CommitChange.from_dict(c) for c in _require(data, "changes", list)),
            strategy=_enum(CommitStrategy, "strategy", _require(data, "strategy", str)),
            parent_id=_optional(data, "parent_id", str),
            tags=tuple(tags) if tags is not None else None,
            metadata=_optional(data, "metadata", dict),
        )


# -----------------------------------------------------------------------------
# Head record
# -----------------------------------------------------------------------------


@dataclass
class AutoCommitState:
    """Mutable head record for one project."""

    config: AutoCommitConfig
    last_commit_id: str | None = None
    last_commit_time: int | None = None
    total_commits: int = 0
    pending_changes: list[CommitChange] = field(default_factory=list)
    is_running: bool = False
    created_at: int = 0
    updated_at: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "config": self.config.to_dict(),
            "last_commit_id": self.last_commit_id,
            "last_commit_time": self.last_commit_time,
            "total_commits": self.total_commits,
            "pending_changes": [c.to_dict() for c in self.pending_changes],
            "is_running": self.is_running,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AutoCommitState:
        data = _require_object(data, "state")
        for key in ("last_commit_id", "last_commit_time"):
            if key not in data:
                raise ValueError(f"missing field {key!r}")
        return cls(
            config=AutoCommitConfig.from_dict(_require(data, "config", dict)),
            last_commit_id=_optional(data, "last_commit_id", str),
            last_commit_time=_optional(data, "last_commit_time", int),
            total_commits=_require(data, "total_commits", int),
            pending_changes=[
                CommitChange.from_dict(c) for c in _require(data, "pending_changes", list)
            ],
            is_running=_require(data, "is_running", bool),
            created_at=_require(data, "created_at", int),
            updated_at=_require(data, "updated_at", int),
        )


# -----------------------------------------------------------------------------
# Query / report types
# -----------------------------------------------------------------------------


@dataclass
class CommitQuery:
    """Filters and pagination for history queries. Bounds are inclusive."""

    since: int | None = None
    until: int | None = None
    limit: int | None = None
    offset: int = 0
    author: str | None = None
    category: FileCategory | None = None
    search: str | None = None

    def __post_init__(self) -> None:
        if self.category is not None:
            self.category = _enum(FileCategory, "category", self.category)
        if self.offset < 0:
            raise ValueError("offset must be non-negative")
        if self.limit is not None and self.limit < 0:
            raise ValueError("limit must be non-negative")


@dataclass
class CommitHistory:
    project_id: str
    commits: list[Commit]
    total_count: int


@dataclass
class CommitStats:
    """Aggregates over the retained history."""

    project_id: str
    total_commits: int = 0
    total_changes: int = 0
    files_added: int = 0
    files_modified: int = 0
    files_deleted: int = 0
    category_counts: dict[str, int] = field(default_factory=dict)
    first_commit: int | None = None
    last_commit: int | None = None
    average_changes_per_commit: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "project_id": self.project_id,
            "total_commits": self.total_commits,
            "total_changes": self.total_changes,
            "files_added": self.files_added,
            "files_modified": self.files_modified,
            "files_deleted": self.files_deleted,
            "category_counts": dict(self.category_counts),
            "first_commit": self.first_commit,
            "last_commit": self.last_commit,
            "average_changes_per_commit": self.average_changes_per_commit,
        }
