"""
Per-project auto-commit configuration.

The configuration is stored in `.autocommit/config.json` and mirrored in
the state record. It can also be bootstrapped from a TOML file whose keys
mirror the dataclass fields:

    project_id = "my-game"
    author = "agent:builder"
    strategy = "batched"
    batch_size = 10
    ignore_patterns = [".git", "*.tmp"]
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from pathlib import Path
from typing import Any


class CommitStrategy(str, Enum):
    IMMEDIATE = "immediate"  # Every detected change set is committed
    BATCHED = "batched"  # Commit once the pending buffer reaches batch_size
    INTERVAL = "interval"  # Commit at most once per interval_ms
    MANUAL = "manual"  # Never commit on its own


DEFAULT_BATCH_SIZE = 5
DEFAULT_INTERVAL_MS = 60_000

DEFAULT_IGNORE_PATTERNS: tuple[str, ...] = (
    ".autocommit",
    ".worklog",
    ".godot",
    ".import",
    "node_modules",
    ".git",
    "*.tmp",
    "*.bak",
    "*.swp",
    "~*",
)

DEFAULT_TRACK_EXTENSIONS: tuple[str, ...] = (
    ".tscn",
    ".tres",
    ".gd",
    ".gdshader",
    ".gdshaderinc",
    ".cfg",
    ".import",
    ".godot",
    ".png",
    ".jpg",
    ".svg",
    ".wav",
    ".ogg",
    ".mp3",
    ".ttf",
    ".otf",
    ".json",
    ".md",
    ".txt",
)


def parse_strategy(value: Any) -> CommitStrategy:
    """Coerce a raw value into a CommitStrategy, raising ValueError otherwise."""
    if isinstance(value, CommitStrategy):
        return value
    try:
        return CommitStrategy(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(s.value for s in CommitStrategy)
        raise ValueError(f"Invalid strategy: {value!r} (expected one of: {allowed})") from None


@dataclass
class AutoCommitConfig:
    """Settings that govern scanning and commit cadence for one project."""

    project_id: str
    project_path: str
    author: str
    strategy: CommitStrategy = CommitStrategy.IMMEDIATE
    interval_ms: int | None = None
    batch_size: int | None = None
    ignore_patterns: list[str] | None = None
    track_extensions: list[str] | None = None
    auto_message: bool | None = None
    max_commits: int | None = None

    def __post_init__(self) -> None:
        self.strategy = parse_strategy(self.strategy)
        if not isinstance(self.project_id, str) or not self.project_id:
            raise ValueError("project_id is required")
        if not isinstance(self.author, str) or not self.author:
            raise ValueError("author is required")
        for name in ("interval_ms", "batch_size", "max_commits"):
            value = getattr(self, name)
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValueError(f"{name} must be a non-negative integer")
        for name in ("ignore_patterns", "track_extensions"):
            value = getattr(self, name)
            if value is None:
                continue
            if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
                raise ValueError(f"{name} must be a list of strings")
            setattr(self, name, list(value))
        if self.track_extensions is not None:
            self.track_extensions = [_normalize_extension(e) for e in self.track_extensions]
        if self.auto_message is not None and not isinstance(self.auto_message, bool):
            raise ValueError("auto_message must be a boolean")

    @property
    def effective_ignore_patterns(self) -> list[str]:
        if self.ignore_patterns is None:
            return list(DEFAULT_IGNORE_PATTERNS)
        return list(self.ignore_patterns)

    @property
    def effective_track_extensions(self) -> list[str]:
        if self.track_extensions is None:
            return list(DEFAULT_TRACK_EXTENSIONS)
        return list(self.track_extensions)

    @property
    def effective_batch_size(self) -> int:
        return self.batch_size if self.batch_size is not None else DEFAULT_BATCH_SIZE

    @property
    def effective_interval_ms(self) -> int:
        return self.interval_ms if self.interval_ms is not None else DEFAULT_INTERVAL_MS

    def to_dict(self) -> dict[str, Any]:
        """Serialize to JSON-compatible dict, omitting unset optional fields."""
        result: dict[str, Any] = {
            "project_id": self.project_id,
            "project_path": self.project_path,
            "author": self.author,
            "strategy": self.strategy.value,
        }
        for name in _OPTIONAL_FIELDS:
            value = getattr(self, name)
            if value is not None:
                result[name] = value
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AutoCommitConfig:
        """Reconstruct from a JSON dict. Raises ValueError on schema mismatch."""
        if not isinstance(data, dict):
            raise ValueError("config must be an object")
        unknown = set(data) - _FIELD_NAMES
        if unknown:
            raise ValueError(f"unknown config keys: {', '.join(sorted(unknown))}")
        for name in ("project_id", "project_path", "author", "strategy"):
            if not isinstance(data.get(name), str):
                raise ValueError(f"config field {name!r} must be a string")
        return cls(**data)

    def merged(self, updates: dict[str, Any]) -> AutoCommitConfig:
        """Return a new config with `updates` applied on top of this one."""
        unknown = set(updates) - _FIELD_NAMES
        if unknown:
            raise ValueError(f"unknown config keys: {', '.join(sorted(unknown))}")
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        data.update(updates)
        return AutoCommitConfig(**data)


_FIELD_NAMES = frozenset(f.name for f in fields(AutoCommitConfig))
_OPTIONAL_FIELDS = (
    "interval_ms",
    "batch_size",
    "ignore_patterns",
    "track_extensions",
    "auto_message",
    "max_commits",
)


def _normalize_extension(ext: str) -> str:
    ext = ext.strip().lower()
    if ext and not ext.startswith("."):
        ext = "." + ext
    return ext


def load_config_file(path: Path, *, project_path: Path) -> dict[str, Any]:
    """
    Load config overrides from TOML.

    Returns a plain dict so callers can layer command-line flags on top
    before constructing the AutoCommitConfig. `project_path` is always
    taken from the caller, never from the file.
    """
    import tomllib

    data = tomllib.loads(path.read_text(encoding="utf-8"))
    data.pop("project_path", None)

    unknown = set(data) - _FIELD_NAMES
    if unknown:
        raise ValueError(f"{path}: unknown config keys: {', '.join(sorted(unknown))}")

    data["project_path"] = str(project_path)
    return data
