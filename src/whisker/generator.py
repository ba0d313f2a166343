"""Generator — wires scanner -> tree builder -> emitter for one site.

A run moves linearly through::

    idle -> scanning -> tree_building -> emitting -> writing -> done

Any exception moves the generator to ``failed`` and propagates; nothing is
written for a failed run.  The emitter never sees partial scan results.

Runs requested through :meth:`Generator.request` while another run is in
progress are coalesced: the latest trigger is remembered and exactly one
follow-up run starts when the current one finishes.
"""

from __future__ import annotations

import sys
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from whisker._errors import CollisionError, GenerationError
from whisker.codegen.emitter import emit
from whisker.config import WhiskerConfig
from whisker.content.scanner import DEFAULT_DOCUMENTS, definitions_for, scan
from whisker.manifest import load_manifest, relative_prefix, rewrite_manifest, write_manifest
from whisker.observability.collector import RunCollector
from whisker.observability.profiler import RunProfiler
from whisker.tree import build_tree

if TYPE_CHECKING:
    from collections.abc import Sequence

    from whisker._types import Target
    from whisker.content.scanner import DocumentDefinition
    from whisker.tree import NameCollision

type RunState = Literal[
    "idle", "scanning", "tree_building", "emitting", "writing", "done", "failed"
]


@dataclass(frozen=True, slots=True)
class GenerationResult:
    """Outcome of one successful run.

    Attributes:
        text: The generated module source.
        target: ``public`` or ``internal``.
        route_count: Number of route constructors.
        asset_count: Number of assets in the asset record.
        collisions: Name collisions reported during tree building.
        duration_ms: Wall-clock time of the run.
        written: Files written by the run (empty for print-only runs).

    """

    text: str
    target: Target
    route_count: int
    asset_count: int
    collisions: tuple[NameCollision, ...] = ()
    duration_ms: float = 0.0
    written: tuple[Path, ...] = field(default_factory=tuple)


class Generator:
    """Runs the generation pipeline for a configured site.

    Args:
        config: Frozen whisker configuration.
        definitions: Document definitions; built from ``config.documents``
            with the front-matter parser when omitted.
        collector: Event collector (a private one if omitted).
        verbose: Print a timing line to stderr after each run.

    """

    def __init__(
        self,
        config: WhiskerConfig,
        *,
        definitions: Sequence[DocumentDefinition] | None = None,
        collector: RunCollector | None = None,
        verbose: bool = False,
    ) -> None:
        self._config = config
        self._definitions = (
            tuple(definitions) if definitions is not None else definitions_for(config.documents)
        )
        self._collector = collector if collector is not None else RunCollector()
        self._profiler = RunProfiler(self._collector.log, verbose=verbose)
        self._state: RunState = "idle"
        self._guard = threading.Lock()
        self._running = False
        self._pending: str | None = None

    @property
    def config(self) -> WhiskerConfig:
        return self._config

    @property
    def collector(self) -> RunCollector:
        return self._collector

    @property
    def state(self) -> RunState:
        """Pipeline state of the current (or last) run."""
        return self._state

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def generate(self, target: Target = "public", *, trigger: str = "manual") -> GenerationResult:
        """Scan, build, and emit; return the module text without writing it.

        Raises:
            ScanError: If the content root or a document cannot be read.
            CollisionError: On name collisions when ``config.strict`` is set.
            GenerationError: If the emitted module would be inconsistent.

        """
        return self._run(target, trigger=trigger, write=False)

    def write(self, target: Target = "internal", *, trigger: str = "manual") -> GenerationResult:
        """Generate and write the module (plus the manifest for ``internal``).

        ``public`` writes ``<public_dir>/<Module/Path>.elm``.  ``internal``
        writes ``<output_dir>/<Module/Path>.elm`` and a rewritten manifest
        into ``<output_dir>``.

        Raises:
            ManifestError: If the site manifest is missing or malformed.

        """
        return self._run(target, trigger=trigger, write=True)

    def request(
        self, target: Target = "internal", *, trigger: str = "manual"
    ) -> GenerationResult | None:
        """Write, unless a run is already in progress.

        A request arriving mid-run is remembered and replayed once the
        current run ends; further requests overwrite the remembered trigger.
        Returns None for a coalesced request.

        """
        with self._guard:
            if self._running:
                self._pending = trigger
                return None
            self._running = True

        try:
            while True:
                result = self.write(target, trigger=trigger)
                with self._guard:
                    if self._pending is None:
                        self._running = False
                        return result
                    trigger, self._pending = self._pending, None
        except BaseException:
            with self._guard:
                self._running = False
                self._pending = None
            raise

    def _run(self, target: Target, *, trigger: str, write: bool) -> GenerationResult:
        config = self._config
        profiler = self._profiler
        profiler.begin(trigger, target)

        try:
            self._state = "scanning"
            profiler.start("scan")
            entries = scan(config.content_path, self._definitions, sort=config.sort_entries)
            profiler.stop("scan")
            documents = sum(1 for e in entries if e.is_document)
            self._collector.record_scan(
                str(config.content_path),
                documents=documents,
                assets=len(entries) - documents,
                scan_ms=profiler.elapsed("scan"),
            )

            self._state = "tree_building"
            profiler.start("tree")
            tree = build_tree(entries)
            profiler.stop("tree")
            self._report_collisions(tree.collisions)

            self._state = "emitting"
            profiler.start("emit")
            text = emit(tree, target=target, module_name=config.module_name)
            profiler.stop("emit")
            self._collector.record_emit(
                target,
                config.module_name,
                routes=len(tree.route_ids),
                size_bytes=len(text.encode("utf-8")),
                emit_ms=profiler.elapsed("emit"),
            )

            written: tuple[Path, ...] = ()
            if write:
                self._state = "writing"
                profiler.start("write")
                written = self._write_outputs(target, text)
                profiler.stop("write")
        except Exception as exc:
            self._collector.record_failure(trigger, self._state, exc)
            self._state = "failed"
            raise

        self._state = "done"
        profile = profiler.finish(routes=len(tree.route_ids))
        return GenerationResult(
            text=text,
            target=target,
            route_count=len(tree.route_ids),
            asset_count=tree.asset_count,
            collisions=tuple(tree.collisions),
            duration_ms=profile.total_ms,
            written=written,
        )

    def _report_collisions(self, collisions: list[NameCollision]) -> None:
        for collision in collisions:
            self._collector.record_collision(collision)
            detail = f" (was {collision.previous})" if collision.previous else ""
            print(
                f"  ! name collision [{collision.kind}] {collision.key}: "
                f"{collision.path}{detail}",
                file=sys.stderr,
            )

        if collisions and self._config.strict:
            keys = ", ".join(sorted({c.key for c in collisions}))
            msg = f"{len(collisions)} name collision(s): {keys}"
            raise CollisionError(msg)

    def _write_outputs(self, target: Target, text: str) -> tuple[Path, ...]:
        config = self._config

        if target == "public":
            return (self._write_module(config.public_path, text),)

        # Read the manifest first so a bad manifest leaves nothing behind.
        manifest = rewrite_manifest(
            load_manifest(config.manifest_path),
            excluded=config.public_dir,
            prefix=relative_prefix(config.output_dir),
        )
        module_path = self._write_module(config.output_path, text)
        manifest_path = config.output_path / Path(config.manifest).name
        try:
            write_manifest(manifest_path, manifest)
        except OSError as exc:
            msg = f"Cannot write {manifest_path}: {exc}"
            raise GenerationError(msg) from exc
        self._collector.record_write(
            "manifest", str(manifest_path), size_bytes=manifest_path.stat().st_size
        )
        return (module_path, manifest_path)

    def _write_module(self, source_dir: Path, text: str) -> Path:
        path = source_dir / self._config.module_file
        data = text.encode("utf-8")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as exc:
            msg = f"Cannot write {path}: {exc}"
            raise GenerationError(msg) from exc
        self._collector.record_write("module", str(path), size_bytes=len(data))
        return path


# ---------------------------------------------------------------------------
# Convenience entry points
# ---------------------------------------------------------------------------


def _run_text(
    content_dir: str | Path,
    definitions: Sequence[DocumentDefinition],
    target: Target,
    **options: object,
) -> str:
    config = WhiskerConfig(root=Path(content_dir), content_dir=".", **options)
    return Generator(config, definitions=definitions).generate(target).text


def run(
    content_dir: str | Path,
    definitions: Sequence[DocumentDefinition] = DEFAULT_DOCUMENTS,
    **options: object,
) -> str:
    """Return the public routing module for *content_dir*.

    ``options`` override :class:`WhiskerConfig` fields (``module_name``,
    ``sort_entries``, ``strict``).

    """
    return _run_text(content_dir, definitions, "public", **options)


def run_internal(
    content_dir: str | Path,
    definitions: Sequence[DocumentDefinition] = DEFAULT_DOCUMENTS,
    **options: object,
) -> str:
    """Return the internal stub module for *content_dir*."""
    return _run_text(content_dir, definitions, "internal", **options)
