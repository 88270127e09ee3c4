"""Pytest configuration and fixtures."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import pytest

from autocommit.config import AutoCommitConfig
from autocommit.ledger.engine import CommitEngine, init_autocommit


class FakeClock:
    """Deterministic millisecond clock; advances 1s per reading unless told otherwise."""

    def __init__(self, start: int = 1_700_000_000_000, step: int = 1000):
        self.now = start
        self.step = step

    def __call__(self) -> int:
        current = self.now
        self.now += self.step
        return current

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """An empty project directory."""
    path = tmp_path / "game"
    path.mkdir()
    return path


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_config(project: Path) -> Callable[..., AutoCommitConfig]:
    def _make(**overrides: Any) -> AutoCommitConfig:
        data: dict[str, Any] = {
            "project_id": "test-project",
            "project_path": str(project),
            "author": "agent:test",
            "strategy": "immediate",
        }
        data.update(overrides)
        return AutoCommitConfig(**data)

    return _make


@pytest.fixture
def make_engine(
    project: Path,
    clock: FakeClock,
    make_config: Callable[..., AutoCommitConfig],
) -> Callable[..., CommitEngine]:
    """Initialize the project with config overrides and return an engine."""

    def _make(**overrides: Any) -> CommitEngine:
        init_autocommit(make_config(**overrides), clock=clock)
        return CommitEngine(project, clock=clock)

    return _make


@pytest.fixture
def write(project: Path) -> Callable[[str, str], Path]:
    """Write a text file under the project, creating parent directories."""

    def _write(relative: str, content: str) -> Path:
        path = project / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write
