from __future__ import annotations

from pathlib import Path

import pytest
from watchdog.events import FileCreatedEvent, FileModifiedEvent, FileMovedEvent

from autocommit.config import DEFAULT_IGNORE_PATTERNS, DEFAULT_TRACK_EXTENSIONS
from autocommit.ledger.scanner import Scanner
from autocommit.watcher import ProjectEventHandler, TrackingLoop


@pytest.fixture
def handler(project: Path) -> ProjectEventHandler:
    h = ProjectEventHandler(project, Scanner(DEFAULT_IGNORE_PATTERNS, DEFAULT_TRACK_EXTENSIONS))
    h.DEBOUNCE_SECONDS = 0.0
    return h


def test_relevant_paths(handler: ProjectEventHandler, project: Path) -> None:
    assert handler._is_relevant(str(project / "player.gd"))
    assert handler._is_relevant(str(project / "scenes" / "main.tscn"))
    assert not handler._is_relevant(str(project / ".autocommit" / "state.json"))
    assert not handler._is_relevant(str(project / ".godot" / "cache.cfg"))
    assert not handler._is_relevant(str(project / "level.tscn.tmp"))
    assert not handler._is_relevant(str(project))
    assert not handler._is_relevant(str(project.parent / "elsewhere.gd"))


def test_settles_once_per_burst(handler: ProjectEventHandler, project: Path) -> None:
    assert handler.take_settled() is False

    handler.dispatch(FileModifiedEvent(str(project / "player.gd")))
    handler.dispatch(FileCreatedEvent(str(project / "enemy.gd")))

    assert handler.take_settled() is True
    assert handler.take_settled() is False


def test_ignored_events_do_not_trigger(handler: ProjectEventHandler, project: Path) -> None:
    handler.dispatch(FileModifiedEvent(str(project / ".autocommit" / "state.json")))
    handler.dispatch(FileCreatedEvent(str(project / "node_modules" / "x.json")))

    assert handler.take_settled() is False


def test_move_into_project_counts(handler: ProjectEventHandler, project: Path) -> None:
    handler.dispatch(
        FileMovedEvent(str(project / "player.gd.tmp"), str(project / "player.gd"))
    )
    assert handler.take_settled() is True


def test_debounce_window_holds_events(project: Path) -> None:
    handler = ProjectEventHandler(project, Scanner([], []))
    handler.DEBOUNCE_SECONDS = 3600.0

    handler.dispatch(FileModifiedEvent(str(project / "player.gd")))

    assert handler.take_settled() is False


def _tracking_loop(engine) -> TrackingLoop:
    state = engine.get_state()
    handler = ProjectEventHandler(engine.project_path, Scanner.from_config(state.config))
    handler.DEBOUNCE_SECONDS = 0.0
    return TrackingLoop(engine, handler)


def test_interval_edit_is_committed_once_interval_elapses(make_engine, write, clock) -> None:
    engine = make_engine(strategy="interval", interval_ms=60_000)
    loop = _tracking_loop(engine)

    write("a.gd", "a")
    loop.handler.dispatch(FileCreatedEvent(str(engine.project_path / "a.gd")))
    first = loop.tick()
    assert first is not None

    write("b.gd", "b")
    loop.handler.dispatch(FileCreatedEvent(str(engine.project_path / "b.gd")))
    assert loop.tick() is None
    assert loop.dirty is True
    # no new events; the deferred edit waits for the interval
    assert loop.tick() is None

    clock.advance(120_000)
    second = loop.tick()

    assert second is not None
    assert second.parent_id == first.id
    assert [c.path for c in second.changes] == ["b.gd"]
    assert loop.dirty is False
    assert loop.tick() is None


def test_loop_without_events_does_not_step(make_engine, write) -> None:
    engine = make_engine(strategy="immediate")
    loop = _tracking_loop(engine)
    write("a.gd", "a")

    assert loop.tick() is None
    assert engine.get_history().total_count == 0


def test_batched_loop_buffers_each_burst(make_engine, write) -> None:
    engine = make_engine(strategy="batched", batch_size=2)
    loop = _tracking_loop(engine)

    write("a.gd", "a")
    loop.handler.dispatch(FileCreatedEvent(str(engine.project_path / "a.gd")))
    assert loop.tick() is None

    write("b.gd", "b")
    loop.handler.dispatch(FileCreatedEvent(str(engine.project_path / "b.gd")))
    commit = loop.tick()

    assert commit is not None
    assert sorted(c.path for c in commit.changes) == ["a.gd", "b.gd"]
