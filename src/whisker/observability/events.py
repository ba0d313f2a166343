"""Generation events — structured records of what each run did.

All events are frozen dataclasses with:
- ``timestamp_ns``: Monotonic nanosecond timestamp
- Descriptive fields for the specific event type

Thread Safety:
    All events are frozen (immutable) and safe to share across threads.

"""

import time
from dataclasses import dataclass
from typing import Literal


# ---------------------------------------------------------------------------
# Pipeline stage events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ContentScanned:
    """The content root was walked.

    Attributes:
        root: Absolute path of the content root.
        documents: Number of files classified as documents.
        assets: Number of files classified as assets.
        scan_ms: Time spent walking and parsing metadata.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    root: str
    documents: int
    assets: int
    scan_ms: float
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class CollisionDetected:
    """Two content paths normalized to the same generated name."""

    kind: str
    key: str
    path: str
    previous: str
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class ModuleEmitted:
    """A module text was produced.

    Attributes:
        target: ``public`` or ``internal``.
        module: Dotted Elm module name.
        routes: Number of route constructors.
        size_bytes: UTF-8 size of the module text.
        emit_ms: Time spent building and printing the module.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    target: Literal["public", "internal"]
    module: str
    routes: int
    size_bytes: int
    emit_ms: float
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class OutputWritten:
    """A generated file was written to disk."""

    kind: Literal["module", "manifest"]
    path: str
    size_bytes: int
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class RunFailed:
    """A run aborted; nothing was emitted or written.

    Attributes:
        trigger: What started the run (a changed path, or ``"manual"``).
        stage: Pipeline state the failure happened in.
        error: ``repr`` of the exception.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    trigger: str
    stage: str
    error: str
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class RunProfile:
    """Per-stage timing for one completed run.

    Attributes:
        trigger: What started the run.
        target: ``public`` or ``internal``.
        routes: Number of routes generated.
        scan_ms: Time scanning the content root.
        tree_ms: Time building route and asset trees.
        emit_ms: Time building and printing the module.
        write_ms: Time writing outputs (0 for print-only runs).
        total_ms: Wall-clock time for the run.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    trigger: str
    target: str
    routes: int
    scan_ms: float
    tree_ms: float
    emit_ms: float
    write_ms: float
    total_ms: float
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

type GenerationEvent = (
    ContentScanned
    | CollisionDetected
    | ModuleEmitted
    | OutputWritten
    | RunFailed
    | RunProfile
)


def now_ns() -> int:
    """Return the current monotonic clock value in nanoseconds."""
    return time.monotonic_ns()
