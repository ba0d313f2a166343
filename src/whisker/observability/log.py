"""Event log — queryable, thread-safe event store.

Stores a bounded ring buffer of generation events for inspection.  Watch
mode appends from the watcher's consumer loop while the CLI may read
summaries, so every method takes the lock.

"""

import threading
from collections import deque
from typing import Any

from whisker.observability.events import GenerationEvent

# Attributes checked, in order, when filtering events by path
_PATH_ATTRS = ("path", "trigger", "root")


def _event_path(event: GenerationEvent) -> str:
    for attr in _PATH_ATTRS:
        value = getattr(event, attr, None)
        if value:
            return value
    return ""


class EventLog:
    """Bounded event store with query support.

    Events are stored in a ring buffer (deque with maxlen).  When the
    buffer is full, the oldest events are discarded automatically.

    Args:
        max_events: Maximum number of events to retain.

    """

    __slots__ = ("_events", "_lock", "_max_events")

    def __init__(self, max_events: int = 2_000) -> None:
        self._max_events = max_events
        self._events: deque[GenerationEvent] = deque(maxlen=max_events)
        self._lock = threading.Lock()

    def append(self, event: GenerationEvent) -> None:
        """Record an event in the log."""
        with self._lock:
            self._events.append(event)

    def query(
        self,
        *,
        event_type: type | None = None,
        since_ns: int = 0,
        path: str | None = None,
        limit: int = 100,
    ) -> list[GenerationEvent]:
        """Query events with optional filters, most recent first.

        Args:
            event_type: Only return events of this type.
            since_ns: Only return events after this timestamp (nanoseconds).
            path: Only return events whose path/trigger/root contains this.
            limit: Maximum number of events to return.

        """
        with self._lock:
            snapshot = list(self._events)

        results: list[GenerationEvent] = []
        for event in reversed(snapshot):
            if len(results) >= limit:
                break
            if event_type is not None and not isinstance(event, event_type):
                continue
            if since_ns and event.timestamp_ns < since_ns:
                continue
            if path is not None and path not in _event_path(event):
                continue
            results.append(event)
        return results

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def stats(self) -> dict[str, Any]:
        """Return summary statistics about stored events."""
        with self._lock:
            events = list(self._events)

        type_counts: dict[str, int] = {}
        for event in events:
            name = type(event).__name__
            type_counts[name] = type_counts.get(name, 0) + 1

        return {
            "total": len(events),
            "max_events": self._max_events,
            "by_type": type_counts,
        }
