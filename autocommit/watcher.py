"""
File system watcher that drives the commit engine.

This module provides:
- Watchdog-based monitoring of the project tree
- Ignore filtering with the project's own matchers
- Debounced evaluation (editor save cycles settle before a step runs)

Each settled burst of events runs one `CommitEngine.auto_step()`; a burst
the interval strategy defers is retried once the interval has elapsed.
"""

from __future__ import annotations

import logging
import threading
import time
from pathlib import Path
from typing import Callable

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .ledger.engine import CommitEngine
from .ledger.scanner import Scanner
from .models import Commit

logger = logging.getLogger(__name__)


class ProjectEventHandler(FileSystemEventHandler):
    """
    Records that something relevant changed; the loop decides when to act.

    Events under ignored paths (including `.autocommit/` itself, where the
    engine writes) are dropped so the engine never triggers itself.
    """

    DEBOUNCE_SECONDS = 1.0

    def __init__(self, project_path: Path, scanner: Scanner):
        super().__init__()
        self.project_path = project_path.resolve()
        self.scanner = scanner
        self._lock = threading.Lock()
        self._last_event: float | None = None

    def _is_relevant(self, path: str) -> bool:
        try:
            relative = Path(path).resolve().relative_to(self.project_path).as_posix()
        except ValueError:
            return False
        if relative == ".":
            return False
        if relative.split("/", 1)[0] == ".autocommit":
            return False
        return not self.scanner.is_ignored(relative)

    def on_any_event(self, event: FileSystemEvent) -> None:
        paths = [event.src_path, getattr(event, "dest_path", "") or ""]
        if not any(p and self._is_relevant(str(p)) for p in paths):
            return
        with self._lock:
            self._last_event = time.monotonic()

    def take_settled(self) -> bool:
        """True once per burst, after the debounce window has passed."""
        with self._lock:
            if self._last_event is None:
                return False
            if time.monotonic() - self._last_event < self.DEBOUNCE_SECONDS:
                return False
            self._last_event = None
            return True


def watch_project(engine: CommitEngine) -> tuple[Observer, ProjectEventHandler]:
    """
    Start watching a project.

    Returns:
        Tuple of (observer, handler); caller should call observer.stop() to stop watching
    """
    state = engine.store.require_state()
    handler = ProjectEventHandler(engine.project_path, Scanner.from_config(state.config))

    observer = Observer()
    observer.schedule(handler, str(engine.project_path), recursive=True)
    observer.start()

    return observer, handler


class TrackingLoop:
    """
    Turns settled bursts into engine steps.

    A burst that the strategy is not ready for (an interval that has not
    elapsed yet) leaves the loop dirty, and the step is retried on later
    ticks once `should_commit()` allows it.
    """

    def __init__(self, engine: CommitEngine, handler: ProjectEventHandler):
        self.engine = engine
        self.handler = handler
        self.dirty = False

    def tick(self) -> Commit | None:
        if self.handler.take_settled():
            self.dirty = True
        elif not self.dirty or not self.engine.should_commit():
            return None

        commit = self.engine.auto_step()
        self.dirty = commit is None and not self.engine.should_commit()
        return commit


def run_tracking_loop(
    engine: CommitEngine,
    *,
    on_commit: Callable[[Commit], None] | None = None,
    poll_seconds: float = 0.5,
) -> None:
    """
    Run until interrupted.

    Marks the project as tracking on entry and stopped on exit.
    """
    engine.start_tracking()
    observer, handler = watch_project(engine)
    loop = TrackingLoop(engine, handler)

    try:
        while True:
            time.sleep(poll_seconds)
            commit = loop.tick()
            if commit is not None and on_commit:
                on_commit(commit)
    except KeyboardInterrupt:
        pass
    finally:
        observer.stop()
        observer.join()
        engine.stop_tracking()
