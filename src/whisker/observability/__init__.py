"""Run observability — structured events for every generation run.

Records what each run scanned, which names collided, what was emitted and
written, and how long each stage took.

Quick Start:
    >>> from whisker.observability import EventLog, RunCollector
    >>> collector = RunCollector(EventLog())
    >>> # Generator(config, collector=collector) records into the log

"""

from whisker.observability.collector import RunCollector
from whisker.observability.events import (
    CollisionDetected,
    ContentScanned,
    GenerationEvent,
    ModuleEmitted,
    OutputWritten,
    RunFailed,
    RunProfile,
    now_ns,
)
from whisker.observability.log import EventLog
from whisker.observability.profiler import RunProfiler, compute_aggregate_stats

__all__ = [
    "CollisionDetected",
    "ContentScanned",
    "EventLog",
    "GenerationEvent",
    "ModuleEmitted",
    "OutputWritten",
    "RunCollector",
    "RunFailed",
    "RunProfile",
    "RunProfiler",
    "compute_aggregate_stats",
    "now_ns",
]
