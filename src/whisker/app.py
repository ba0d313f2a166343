"""Whisker application — the public entry points.

``generate`` writes the module once, ``show`` returns it without writing,
and ``watch`` keeps it up to date while the content changes.
"""

from __future__ import annotations

import sys
import time
from pathlib import Path
from typing import TYPE_CHECKING

from whisker._errors import WhiskerError
from whisker.config_loader import load_config
from whisker.content.watcher import ContentWatcher
from whisker.generator import GenerationResult, Generator
from whisker.observability import EventLog, RunCollector, compute_aggregate_stats

if TYPE_CHECKING:
    from whisker._types import Target
    from whisker.config import WhiskerConfig
    from whisker.content.watcher import ChangeEvent


def _collision_warnings(result: GenerationResult) -> list[str]:
    return [
        f"name collision [{c.kind}] {c.key}: {c.path}" for c in result.collisions
    ]


class WatchSession:
    """A generator paired with the watcher that re-triggers it.

    The session owns its :class:`ContentWatcher`: :meth:`start` runs the
    pipeline once and starts watching, :meth:`stop` tears the watcher down.
    A failed run is reported and the session keeps watching.

    Args:
        config: Frozen whisker configuration.
        target: Which module variant each run writes.
        generator: Generator to drive (built from *config* if omitted).

    """

    def __init__(
        self,
        config: WhiskerConfig,
        *,
        target: Target = "internal",
        generator: Generator | None = None,
    ) -> None:
        self._config = config
        self._target = target
        self._generator = generator if generator is not None else Generator(
            config, collector=RunCollector(EventLog()), verbose=True,
        )
        self._watcher = ContentWatcher(config)

    @property
    def generator(self) -> Generator:
        return self._generator

    @property
    def watcher(self) -> ContentWatcher:
        return self._watcher

    def start(self) -> GenerationResult:
        """Run the pipeline once, then start the watcher.

        The initial run is not guarded: if the content root is broken the
        session never starts watching.

        """
        result = self._generator.write(self._target, trigger="startup")
        self._watcher.start()
        return result

    def stop(self) -> None:
        self._watcher.stop()

    def __enter__(self) -> WatchSession:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    def handle_batch(self, events: tuple[ChangeEvent, ...]) -> GenerationResult | None:
        """Re-run the pipeline for one batch of changes.

        Changes queued while this batch was waiting are folded into the
        same run.  Errors are printed, not raised, so watching continues.

        """
        pending = [*events, *self._watcher.drain()]
        if not pending:
            return None

        first = pending[0].path
        try:
            trigger = first.relative_to(self._config.content_path).as_posix()
        except ValueError:
            trigger = str(first)
        if len(pending) > 1:
            trigger += f" (+{len(pending) - 1})"

        print(f"  Regenerating for {trigger}...", file=sys.stderr)
        try:
            return self._generator.request(self._target, trigger=trigger)
        except WhiskerError as exc:
            print(f"  Generation failed: {exc}", file=sys.stderr)
            return None
        except Exception as exc:
            print(f"  Generation failed: {exc!r}", file=sys.stderr)
            return None

    def summary(self) -> str:
        """One line describing the runs this session's generator recorded."""
        log = self._generator.collector.log
        stats = compute_aggregate_stats(log)
        failed = log.stats()["by_type"].get("RunFailed", 0)
        if not stats["count"]:
            return f"  No completed runs ({failed} failed)"

        total = stats["total_ms"]
        runs = "run" if stats["count"] == 1 else "runs"
        return (
            f"  {stats['count']} {runs}, {failed} failed "
            f"(p50 {total['p50']:.0f}ms, p95 {total['p95']:.0f}ms, max {total['max']:.0f}ms)"
        )

    def run_forever(self) -> None:
        """Consume watcher batches until stopped or interrupted."""
        try:
            for batch in self._watcher.batches():
                self.handle_batch(batch)
        except KeyboardInterrupt:
            pass
        finally:
            self.stop()
            print(self.summary(), file=sys.stderr)


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------


def generate(
    root: str | Path = ".",
    *,
    target: Target = "internal",
    quiet: bool = False,
    **kwargs: object,
) -> GenerationResult:
    """Generate the routing module once and write it to disk.

    Args:
        root: Path to the site root directory.
        target: ``internal`` (stub + manifest) or ``public``.
        quiet: Skip the banner.
        **kwargs: Override WhiskerConfig fields.

    """
    from whisker.banner import print_banner

    config = load_config(Path(root), **kwargs)
    t0 = time.perf_counter()
    result = Generator(config).write(target)
    load_ms = (time.perf_counter() - t0) * 1000

    if not quiet:
        print_banner(
            config, "generate",
            target=target,
            route_count=result.route_count,
            asset_count=result.asset_count,
            load_ms=load_ms,
            warnings=_collision_warnings(result),
        )
    return result


def show(root: str | Path = ".", *, target: Target = "public", **kwargs: object) -> str:
    """Return the generated module text without writing anything."""
    config = load_config(Path(root), **kwargs)
    return Generator(config).generate(target).text


def watch(root: str | Path = ".", *, target: Target = "internal", **kwargs: object) -> None:
    """Generate once, then regenerate whenever the content changes.

    Blocks until interrupted.

    """
    from whisker.banner import print_banner

    config = load_config(Path(root), **kwargs)
    session = WatchSession(config, target=target)

    t0 = time.perf_counter()
    result = session.start()
    load_ms = (time.perf_counter() - t0) * 1000

    print_banner(
        config, "watch",
        target=target,
        route_count=result.route_count,
        asset_count=result.asset_count,
        load_ms=load_ms,
        warnings=_collision_warnings(result),
    )
    session.run_forever()
