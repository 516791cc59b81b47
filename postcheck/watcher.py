"""File watching for Postcheck.

Re-runs a check whenever posts or the configuration change:
- Watches the content directory recursively and the project root for postcheck.yaml.
- Debounces bursts of events and skips runs when nothing relevant changed.

Key classes:
- ContentWatcher: Owns the watchdog observer and the re-run logic.
- _ChangeHandler: File system event handler that forwards relevant changes.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from pathlib import Path

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from .check import CONFIG_FILENAME, load_config, resolve_content_dir
from .frontmatter import PostcheckError
from .utils import is_markdown


class ContentWatcher:
    """Runs a callback whenever watched content changes.

    Attributes:
        project_root: Root directory of the project.
        content_dir: Directory holding the posts.
        on_change: Callback invoked for each effective change.
        on_error: Callback receiving errors raised by on_change; the watcher
            keeps running afterwards.
        _observer: File system observer, set once started.
    """

    def __init__(
        self,
        project_root: Path,
        on_change: Callable[[], None],
        on_error: Callable[[Exception], None] | None = None,
    ):
        self.project_root = project_root
        self.content_dir = resolve_content_dir(project_root, load_config(project_root))
        self.on_change = on_change
        self.on_error = on_error or _print_error
        self._observer: Observer | None = None
        self._running = False
        self._last_run_at = 0.0
        self._last_signature: tuple | None = None
        self._debounce_seconds = 0.1

    def start(self) -> None:  # pragma: no cover - integration path
        self._last_signature = self._compute_signature()
        self._start_observer()
        try:
            while True:
                time.sleep(1)
        except KeyboardInterrupt:
            self.stop()

    def stop(self) -> None:
        if self._observer:
            self._observer.stop()
            self._observer.join()
            self._observer = None

    def _start_observer(self) -> None:
        handler = _ChangeHandler(self)
        observer = Observer()
        if self.content_dir.exists():
            observer.schedule(handler, str(self.content_dir), recursive=True)
        observer.schedule(handler, str(self.project_root), recursive=False)
        observer.start()
        self._observer = observer

    def is_relevant(self, path: Path) -> bool:
        return is_markdown(path) or path.name == CONFIG_FILENAME

    def rerun(self) -> None:
        now = time.time()
        if self._running or (now - self._last_run_at) < self._debounce_seconds:
            return
        signature = self._compute_signature()
        if signature == self._last_signature:
            return
        self._running = True
        try:
            self.on_change()
        except (PostcheckError, OSError) as exc:
            self.on_error(exc)
        else:
            self._last_signature = signature
        finally:
            self._running = False
            self._last_run_at = time.time()

    def _compute_signature(self) -> tuple:
        entries: list[tuple] = []
        candidates = [self.project_root / CONFIG_FILENAME]
        if self.content_dir.exists():
            candidates.extend(sorted(self.content_dir.rglob("*")))
        for path in candidates:
            if not path.is_file() or not self.is_relevant(path):
                continue
            try:
                stat = path.stat()
            except OSError:
                continue
            entries.append((str(path), stat.st_mtime_ns, stat.st_size))
        return tuple(entries)


class _ChangeHandler(FileSystemEventHandler):
    def __init__(self, watcher: ContentWatcher):
        super().__init__()
        self.watcher = watcher

    def on_any_event(self, event):
        if event.is_directory:
            return
        paths = [event.src_path, getattr(event, "dest_path", "")]
        if not any(p and self.watcher.is_relevant(Path(p)) for p in paths):
            return
        self.watcher.rerun()


def _print_error(exc: Exception) -> None:
    print(f"Check failed: {exc}")
