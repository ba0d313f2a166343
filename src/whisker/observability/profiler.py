"""Run profiler — per-stage timing for each generation run.

Emits a ``RunProfile`` event to the ``EventLog`` when a run finishes and,
when verbose, prints a one-line summary to stderr.

Thread Safety:
    One profiler belongs to one Generator, which runs one pipeline at a
    time.  Aggregate queries go through the locked ``EventLog``.

"""

from __future__ import annotations

import sys
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

from whisker.observability.events import RunProfile, now_ns

if TYPE_CHECKING:
    from whisker.observability.log import EventLog

STAGES = ("scan", "tree", "emit", "write")


@dataclass(slots=True)
class _Timer:
    """Accumulates timing for a named pipeline stage."""

    name: str
    _start: float = 0.0
    elapsed_ms: float = 0.0

    def start(self) -> None:
        self._start = time.perf_counter()

    def stop(self) -> None:
        if self._start > 0:
            self.elapsed_ms = (time.perf_counter() - self._start) * 1000
            self._start = 0.0


class RunProfiler:
    """Records per-stage timing for a single generation run.

    Usage::

        profiler = RunProfiler(event_log)

        profiler.begin("content/blog/post.md", "internal")
        profiler.start("scan")
        # ... scan ...
        profiler.stop("scan")
        profiler.finish(routes=12)

    """

    __slots__ = ("_log", "_t0", "_target", "_timers", "_trigger", "_verbose")

    def __init__(self, log: EventLog, *, verbose: bool = False) -> None:
        self._log = log
        self._verbose = verbose
        self._trigger = ""
        self._target = ""
        self._t0 = 0.0
        self._timers = {name: _Timer(name=name) for name in STAGES}

    def begin(self, trigger: str, target: str) -> None:
        """Start profiling a new run."""
        self._trigger = trigger
        self._target = target
        self._t0 = time.perf_counter()
        for timer in self._timers.values():
            timer.elapsed_ms = 0.0

    def start(self, stage: str) -> None:
        timer = self._timers.get(stage)
        if timer is not None:
            timer.start()

    def stop(self, stage: str) -> None:
        timer = self._timers.get(stage)
        if timer is not None:
            timer.stop()

    def elapsed(self, stage: str) -> float:
        """Milliseconds recorded so far for *stage*."""
        return self._timers[stage].elapsed_ms

    def finish(self, *, routes: int = 0) -> RunProfile:
        """Finish profiling and emit the ``RunProfile`` event."""
        total_ms = (time.perf_counter() - self._t0) * 1000 if self._t0 > 0 else 0.0

        profile = RunProfile(
            trigger=self._trigger,
            target=self._target,
            routes=routes,
            scan_ms=self._timers["scan"].elapsed_ms,
            tree_ms=self._timers["tree"].elapsed_ms,
            emit_ms=self._timers["emit"].elapsed_ms,
            write_ms=self._timers["write"].elapsed_ms,
            total_ms=total_ms,
            timestamp_ns=now_ns(),
        )

        self._log.append(profile)

        if self._verbose:
            self._print_summary(profile)

        return profile

    def _print_summary(self, p: RunProfile) -> None:
        """Print a one-line timing summary to stderr."""
        name = p.trigger.replace("\\", "/").rsplit("/", 1)[-1]
        routes = "route" if p.routes == 1 else "routes"
        stages = (
            f"scan: {p.scan_ms:.0f}ms, "
            f"tree: {p.tree_ms:.0f}ms, "
            f"emit: {p.emit_ms:.0f}ms, "
            f"write: {p.write_ms:.0f}ms"
        )
        print(
            f"  [{p.total_ms:.0f}ms] {name} -> {p.routes} {routes} "
            f"({p.target}; {stages})",
            file=sys.stderr,
        )


def compute_aggregate_stats(log: EventLog, *, limit: int = 100) -> dict:
    """Latency statistics from recent ``RunProfile`` events.

    Returns a dict with p50/p95/p99 of the total and per-stage averages.

    """
    profiles = log.query(event_type=RunProfile, limit=limit)
    if not profiles:
        return {"count": 0}

    totals = sorted(p.total_ms for p in profiles)
    count = len(totals)

    def percentile(data: list[float], pct: float) -> float:
        idx = int(len(data) * pct / 100)
        return data[min(idx, len(data) - 1)]

    return {
        "count": count,
        "total_ms": {
            "p50": round(percentile(totals, 50), 1),
            "p95": round(percentile(totals, 95), 1),
            "p99": round(percentile(totals, 99), 1),
            "min": round(totals[0], 1),
            "max": round(totals[-1], 1),
        },
        "avg_by_stage_ms": {
            stage: round(sum(getattr(p, f"{stage}_ms") for p in profiles) / count, 1)
            for stage in STAGES
        },
    }
