"""File watcher — re-triggers generation on content changes.

Monitors the content root.  Every debounced batch of filesystem activity
becomes one tuple of :class:`ChangeEvent` objects; the consumer re-runs the
whole pipeline once per batch, not once per file.

- Document created/modified/deleted -> routes, lookups, and assets change
- Asset created/modified/deleted    -> asset record changes
"""

from __future__ import annotations

import queue
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from watchfiles import Change

if TYPE_CHECKING:
    from collections.abc import Iterator

    from whisker.config import WhiskerConfig


@dataclass(frozen=True, slots=True)
class ChangeEvent:
    """A file change detected by the watcher.

    Attributes:
        path: Absolute path to the changed file.
        kind: Type of filesystem change.
        category: Whether the file is a document or an asset.

    """

    path: Path
    kind: Literal["created", "modified", "deleted"]
    category: Literal["document", "asset"]


# Mapping from watchfiles Change enum to our kind literals.
_CHANGE_KIND_MAP: dict[Change, Literal["created", "modified", "deleted"]] = {
    Change.added: "created",
    Change.modified: "modified",
    Change.deleted: "deleted",
}


def categorize_change(path: Path, config: WhiskerConfig) -> str | None:
    """Classify a changed path the way the scanner would.

    Returns None for paths outside the content root and for hidden files,
    which the scanner ignores too.

    """
    try:
        rel = path.relative_to(config.content_path)
    except ValueError:
        return None

    if not rel.parts or any(part.startswith(".") for part in rel.parts):
        return None

    posix = rel.as_posix()
    if any(posix.endswith("." + ext) for ext in config.documents):
        return "document"
    return "asset"


class ContentWatcher:
    """Watches the content root in a background thread.

    Uses watchfiles for filesystem monitoring with a debounce window of
    ``config.debounce_ms`` so bursts of writes (editor saves, git checkouts)
    arrive as one batch.  Watchfiles reports no initial events, so starting
    the watcher never triggers a run by itself.

    Lifecycle is explicit: the owner calls :meth:`start` and :meth:`stop`.

    """

    def __init__(self, config: WhiskerConfig) -> None:
        self._config = config
        self._queue: queue.Queue[tuple[ChangeEvent, ...]] = queue.Queue()
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def is_running(self) -> bool:
        """Whether the watcher background thread is active."""
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start watching for file changes in a background thread."""
        if self.is_running:
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._watch_loop,
            name="whisker-watcher",
            daemon=True,
        )
        self._thread.start()

    def stop(self) -> None:
        """Signal the watcher to stop and wait for the thread to finish."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=5.0)
            self._thread = None

    def batches(self, *, poll: float = 0.5) -> Iterator[tuple[ChangeEvent, ...]]:
        """Yield batches of changes until the watcher stops.

        Blocks up to *poll* seconds at a time so a stop request is noticed.

        """
        while self.is_running or not self._queue.empty():
            try:
                yield self._queue.get(timeout=poll)
            except queue.Empty:
                continue

    def drain(self) -> list[ChangeEvent]:
        """Remove and return every queued change without blocking."""
        events: list[ChangeEvent] = []
        while True:
            try:
                events.extend(self._queue.get_nowait())
            except queue.Empty:
                return events

    def push(self, events: tuple[ChangeEvent, ...]) -> None:
        """Queue a batch directly (used by the watch loop)."""
        if events:
            self._queue.put(events)

    def _watch_loop(self) -> None:
        """Background thread: run watchfiles and push batches to the queue."""
        from watchfiles import watch

        for raw_changes in watch(
            self._config.content_path,
            stop_event=self._stop_event,
            debounce=self._config.debounce_ms,
            step=50,
        ):
            self.push(self.translate(raw_changes))

    def translate(self, raw_changes: set[tuple[Change, str]]) -> tuple[ChangeEvent, ...]:
        """Convert a watchfiles change set into sorted ChangeEvents."""
        events: list[ChangeEvent] = []
        for change_type, path_str in sorted(raw_changes, key=lambda c: c[1]):
            path = Path(path_str)
            category = categorize_change(path, self._config)
            if category is None:
                continue
            kind = _CHANGE_KIND_MAP.get(change_type, "modified")
            events.append(ChangeEvent(path=path, kind=kind, category=category))  # type: ignore[arg-type]
        return tuple(events)
