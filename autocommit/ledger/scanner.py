"""Working-tree scanning: ignore matching, extension filtering, hashing."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Iterable, Sequence, Union

from ..config import AutoCommitConfig
from ..models import FileCategory, TrackedFile
from .store import AUTOCOMMIT_DIR
from .util import short_hash

logger = logging.getLogger(__name__)


EXTENSION_CATEGORIES: dict[str, FileCategory] = {
    ".tscn": FileCategory.SCENE,
    ".tres": FileCategory.RESOURCE,
    ".gd": FileCategory.SCRIPT,
    ".gdshader": FileCategory.SHADER,
    ".gdshaderinc": FileCategory.SHADER,
    ".cfg": FileCategory.CONFIG,
    ".godot": FileCategory.CONFIG,
    ".import": FileCategory.CONFIG,
    ".png": FileCategory.ASSET,
    ".jpg": FileCategory.ASSET,
    ".jpeg": FileCategory.ASSET,
    ".svg": FileCategory.ASSET,
    ".webp": FileCategory.ASSET,
    ".wav": FileCategory.AUDIO,
    ".ogg": FileCategory.AUDIO,
    ".mp3": FileCategory.AUDIO,
    ".ttf": FileCategory.ASSET,
    ".otf": FileCategory.ASSET,
    ".json": FileCategory.CONFIG,
    ".md": FileCategory.CONFIG,
    ".txt": FileCategory.CONFIG,
}


def categorize_file(path: str) -> FileCategory:
    """Map a path to its category by extension."""
    suffix = PurePosixPath(path).suffix.lower()
    return EXTENSION_CATEGORIES.get(suffix, FileCategory.UNKNOWN)


# -----------------------------------------------------------------------------
# Ignore matchers
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class ExactSegment:
    """Matches when any path segment equals `name` (e.g. `node_modules`)."""

    name: str

    def matches(self, parts: Sequence[str]) -> bool:
        return self.name in parts


@dataclass(frozen=True)
class SuffixWildcard:
    """`*.tmp`: matches when the final segment ends with the suffix."""

    suffix: str

    def matches(self, parts: Sequence[str]) -> bool:
        return bool(parts) and parts[-1].endswith(self.suffix)


@dataclass(frozen=True)
class PrefixWildcard:
    """`~*`: matches when the final segment starts with the prefix."""

    prefix: str

    def matches(self, parts: Sequence[str]) -> bool:
        return bool(parts) and parts[-1].startswith(self.prefix)


IgnoreMatcher = Union[ExactSegment, SuffixWildcard, PrefixWildcard]


def compile_pattern(pattern: str) -> IgnoreMatcher:
    """Turn one ignore pattern into its matcher variant."""
    if pattern.startswith("*") and len(pattern) > 1:
        return SuffixWildcard(pattern[1:])
    if pattern.endswith("*") and len(pattern) > 1:
        return PrefixWildcard(pattern[:-1])
    return ExactSegment(pattern)


def compile_patterns(patterns: Iterable[str]) -> tuple[IgnoreMatcher, ...]:
    return tuple(compile_pattern(p) for p in patterns if p)


def should_ignore(path: str, patterns: Iterable[str] | Sequence[IgnoreMatcher]) -> bool:
    """
    Check a relative POSIX path against ignore patterns.

    Segments are checked progressively so that a wildcard pattern matching a
    parent directory excludes everything beneath it, the same way the walk
    prunes that directory.
    """
    matchers = [p if not isinstance(p, str) else compile_pattern(p) for p in patterns]
    parts = [part for part in path.split("/") if part]
    for depth in range(1, len(parts) + 1):
        prefix = parts[:depth]
        if any(m.matches(prefix) for m in matchers):
            return True
    return False


# -----------------------------------------------------------------------------
# Scanner
# -----------------------------------------------------------------------------


class Scanner:
    """
    Walks a project tree and produces one TrackedFile per eligible file.

    Results are sorted by relative path, so they are deterministic for a
    fixed tree. Unreadable entries are skipped rather than failing the scan.
    """

    def __init__(
        self,
        ignore_patterns: Iterable[str] = (),
        track_extensions: Iterable[str] = (),
    ):
        self.matchers = compile_patterns(ignore_patterns)
        self.track_extensions = frozenset(e.lower() for e in track_extensions)

    @classmethod
    def from_config(cls, config: AutoCommitConfig) -> Scanner:
        patterns = config.effective_ignore_patterns
        # the record directory is never part of the working tree
        if AUTOCOMMIT_DIR not in patterns:
            patterns.append(AUTOCOMMIT_DIR)
        return cls(patterns, config.effective_track_extensions)

    def is_ignored(self, relative_path: str) -> bool:
        return should_ignore(relative_path, self.matchers)

    def is_tracked_extension(self, name: str) -> bool:
        if not self.track_extensions:
            return True
        return PurePosixPath(name).suffix.lower() in self.track_extensions

    def scan(self, root: Path) -> list[TrackedFile]:
        root = Path(root)
        if not root.is_dir():
            return []
        results: list[TrackedFile] = []
        self._walk(root, (), results)
        results.sort(key=lambda f: f.path)
        return results

    def _walk(self, directory: Path, parents: tuple[str, ...], results: list[TrackedFile]) -> None:
        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            logger.debug("Skipping unreadable directory %s: %s", directory, e)
            return

        for entry in entries:
            parts = (*parents, entry.name)
            if any(m.matches(parts) for m in self.matchers):
                continue
            try:
                if entry.is_dir(follow_symlinks=False):
                    self._walk(Path(entry.path), parts, results)
                    continue
                if not entry.is_file(follow_symlinks=False):
                    continue
            except OSError as e:
                logger.debug("Skipping %s: %s", entry.path, e)
                continue

            if not self.is_tracked_extension(entry.name):
                continue

            tracked = self._track(Path(entry.path), "/".join(parts))
            if tracked is not None:
                results.append(tracked)

    def _track(self, full_path: Path, relative_path: str) -> TrackedFile | None:
        try:
            stat = full_path.stat()
            content = full_path.read_bytes()
        except OSError as e:
            logger.debug("Skipping unreadable file %s: %s", full_path, e)
            return None
        return TrackedFile(
            path=relative_path,
            hash=short_hash(content),
            size=stat.st_size,
            category=categorize_file(relative_path),
            last_modified=stat.st_mtime_ns // 1_000_000,
        )


def scan_directory(
    root: Path,
    ignore_patterns: Iterable[str],
    track_extensions: Iterable[str],
) -> list[TrackedFile]:
    """Convenience wrapper: build a Scanner and scan `root`."""
    return Scanner(ignore_patterns, track_extensions).scan(root)
