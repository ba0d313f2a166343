"""Run collector — the single entry point pipeline code uses to record events.

Thread Safety:
    The collector delegates to ``EventLog`` which is internally locked.

"""

from __future__ import annotations

from typing import TYPE_CHECKING

from whisker.observability.events import (
    CollisionDetected,
    ContentScanned,
    ModuleEmitted,
    OutputWritten,
    RunFailed,
    now_ns,
)
from whisker.observability.log import EventLog

if TYPE_CHECKING:
    from whisker.tree import NameCollision


class RunCollector:
    """Records generation events into an :class:`EventLog`.

    Args:
        log: The EventLog to store events in (a fresh one if omitted).

    """

    __slots__ = ("_log",)

    def __init__(self, log: EventLog | None = None) -> None:
        self._log = log if log is not None else EventLog()

    @property
    def log(self) -> EventLog:
        """The underlying event log."""
        return self._log

    def record_scan(
        self,
        root: str,
        *,
        documents: int = 0,
        assets: int = 0,
        scan_ms: float = 0.0,
    ) -> None:
        self._log.append(
            ContentScanned(
                root=root,
                documents=documents,
                assets=assets,
                scan_ms=scan_ms,
                timestamp_ns=now_ns(),
            )
        )

    def record_collision(self, collision: NameCollision) -> None:
        self._log.append(
            CollisionDetected(
                kind=collision.kind,
                key=collision.key,
                path=collision.path,
                previous=collision.previous,
                timestamp_ns=now_ns(),
            )
        )

    def record_emit(
        self,
        target: str,
        module: str,
        *,
        routes: int = 0,
        size_bytes: int = 0,
        emit_ms: float = 0.0,
    ) -> None:
        self._log.append(
            ModuleEmitted(
                target=target,  # type: ignore[arg-type]
                module=module,
                routes=routes,
                size_bytes=size_bytes,
                emit_ms=emit_ms,
                timestamp_ns=now_ns(),
            )
        )

    def record_write(self, kind: str, path: str, *, size_bytes: int = 0) -> None:
        self._log.append(
            OutputWritten(
                kind=kind,  # type: ignore[arg-type]
                path=path,
                size_bytes=size_bytes,
                timestamp_ns=now_ns(),
            )
        )

    def record_failure(self, trigger: str, stage: str, error: BaseException) -> None:
        self._log.append(
            RunFailed(
                trigger=trigger,
                stage=stage,
                error=repr(error),
                timestamp_ns=now_ns(),
            )
        )
