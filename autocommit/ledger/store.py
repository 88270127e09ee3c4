"""
On-disk layout for one project's auto-commit records.

    <project>/.autocommit/config.json        AutoCommitConfig
    <project>/.autocommit/state.json         AutoCommitState (head pointer)
    <project>/.autocommit/snapshots.json     {path: FileSnapshot}
    <project>/.autocommit/commits/<id>.json  one Commit per file

Every write replaces the whole file: the JSON is written to a temporary
sibling and renamed over the target, so readers never observe a partial
record.
"""

from __future__ import annotations

import json
import logging
import shutil
from pathlib import Path
from typing import Any, Callable, TypeVar

from ..config import AutoCommitConfig
from ..errors import CorruptRecordError, NotInitializedError
from ..models import AutoCommitState, Commit, FileSnapshot

logger = logging.getLogger(__name__)

AUTOCOMMIT_DIR = ".autocommit"
COMMITS_DIR = "commits"
CONFIG_FILE = "config.json"
STATE_FILE = "state.json"
SNAPSHOTS_FILE = "snapshots.json"

T = TypeVar("T")


class ProjectStore:
    """Reads and writes the `.autocommit/` records of a single project."""

    def __init__(self, project_path: Path | str):
        self.project_path = Path(project_path).resolve()
        self.root = self.project_path / AUTOCOMMIT_DIR
        self.commits_dir = self.root / COMMITS_DIR
        self.config_path = self.root / CONFIG_FILE
        self.state_path = self.root / STATE_FILE
        self.snapshots_path = self.root / SNAPSHOTS_FILE

    # -- layout ---------------------------------------------------------------

    def exists(self) -> bool:
        return self.root.exists()

    def create(self) -> None:
        """Create the directory skeleton."""
        self.commits_dir.mkdir(parents=True, exist_ok=True)

    def remove(self) -> bool:
        """Delete every record. Irreversible."""
        if not self.root.exists():
            return False
        shutil.rmtree(self.root)
        logger.info("Removed %s", self.root)
        return True

    def commit_path(self, commit_id: str) -> Path:
        return self.commits_dir / f"{commit_id}.json"

    # -- raw JSON -------------------------------------------------------------

    def _write_json(self, path: Path, data: Any) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = path.with_suffix(".tmp")
        temp_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        temp_path.replace(path)

    def _read_json(self, path: Path) -> Any:
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except UnicodeDecodeError as e:
            raise CorruptRecordError(path, f"invalid UTF-8 ({e.reason})") from e
        except json.JSONDecodeError as e:
            raise CorruptRecordError(path, f"invalid JSON ({e.msg})") from e

    def _decode(self, path: Path, parse: Callable[[Any], T]) -> T:
        data = self._read_json(path)
        try:
            return parse(data)
        except (ValueError, TypeError) as e:
            raise CorruptRecordError(path, str(e)) from e

    # -- state / config -------------------------------------------------------

    def read_state(self) -> AutoCommitState | None:
        if not self.state_path.exists():
            return None
        return self._decode(self.state_path, AutoCommitState.from_dict)

    def require_state(self) -> AutoCommitState:
        state = self.read_state()
        if state is None:
            raise NotInitializedError(self.project_path)
        return state

    def write_state(self, state: AutoCommitState) -> None:
        self._write_json(self.state_path, state.to_dict())

    def write_config(self, config: AutoCommitConfig) -> None:
        self._write_json(self.config_path, config.to_dict())

    # -- snapshots ------------------------------------------------------------

    def read_snapshots(self) -> dict[str, FileSnapshot]:
        if not self.snapshots_path.exists():
            return {}
        return self._decode(self.snapshots_path, _parse_snapshot_map)

    def write_snapshots(self, snapshots: dict[str, FileSnapshot]) -> None:
        data = {path: snap.to_dict() for path, snap in sorted(snapshots.items())}
        self._write_json(self.snapshots_path, data)

    # -- commits --------------------------------------------------------------

    def has_commit(self, commit_id: str) -> bool:
        return self.commit_path(commit_id).exists()

    def read_commit(self, commit_id: str) -> Commit | None:
        path = self.commit_path(commit_id)
        if not path.exists():
            return None
        commit = self._decode(path, Commit.from_dict)
        if commit.id != commit_id:
            raise CorruptRecordError(path, f"id mismatch (file holds {commit.id!r})")
        return commit

    def write_commit(self, commit: Commit) -> None:
        self._write_json(self.commit_path(commit.id), commit.to_dict())

    def delete_commit(self, commit_id: str) -> bool:
        path = self.commit_path(commit_id)
        if not path.exists():
            return False
        path.unlink()
        return True


def _parse_snapshot_map(data: Any) -> dict[str, FileSnapshot]:
    if not isinstance(data, dict):
        raise ValueError("snapshots must be an object")
    result: dict[str, FileSnapshot] = {}
    for path, raw in data.items():
        snap = FileSnapshot.from_dict(raw)
        if snap.path != path:
            raise ValueError(f"snapshot key {path!r} does not match entry path {snap.path!r}")
        result[path] = snap
    return result
