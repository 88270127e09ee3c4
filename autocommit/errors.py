"""Exceptions raised by the commit engine."""

from __future__ import annotations

from pathlib import Path


class AutoCommitError(RuntimeError):
    """Base class for engine failures."""


class NotInitializedError(AutoCommitError):
    """Raised when an operation needs `.autocommit/` state that does not exist."""

    def __init__(self, project_path: Path | str):
        self.project_path = Path(project_path)
        super().__init__(
            f"Auto-commit not initialized for {self.project_path}. Run init first."
        )


class CorruptRecordError(AutoCommitError):
    """Raised when an on-disk record does not match its schema."""

    def __init__(self, path: Path | str, reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Corrupt record {self.path}: {reason}")
