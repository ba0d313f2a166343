"""Route tree builder — fold flat scanned entries into nested records.

Documents and assets are inserted into two trees keyed by camelCase path
segments, mirroring the content directory::

    blog/hello-world.md  ->  routes: {blog: {helloWorld: Leaf("BlogHelloWorld")}}
    images/logo.png      ->  assets: {images: {logo: Leaf("images/logo.png")}}

Documents additionally feed the flat, scan-ordered lists the emitter turns
into the route union, the URL parser, and the lookup functions.

Name collisions never abort the build.  They are collected as
:class:`NameCollision` records and the caller decides whether to warn or
fail.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

from whisker.naming import file_extension, path_fragments, route_identifier, to_camel_case

if TYPE_CHECKING:
    from collections.abc import Sequence

    from whisker._types import FieldName, RelativePath, RouteId
    from whisker.content.scanner import ScannedEntry

# Field name the emitter adds to every record level
RESERVED_KEY = "all"

# Constructors the generated module already binds: the ``Page`` record alias
# it declares and the ``Url`` record alias it imports
RESERVED_CONSTRUCTORS = frozenset({"Page", "Url"})


@dataclass(frozen=True, slots=True)
class Leaf:
    """A record field holding a single value (route id or asset path)."""

    value: str


@dataclass(slots=True)
class Branch:
    """A record field holding a nested record, one per directory."""

    children: dict[FieldName, TreeNode] = field(default_factory=dict)

    def leaves(self) -> Iterator[str]:
        """Direct leaf values of this level, in insertion order."""
        for node in self.children.values():
            if isinstance(node, Leaf):
                yield node.value

    def __len__(self) -> int:
        return len(self.children)


type TreeNode = Leaf | Branch


@dataclass(frozen=True, slots=True)
class NameCollision:
    """Two content paths competing for the same generated name.

    Attributes:
        kind: ``route-id`` (duplicate constructor, later document dropped),
            ``leaf`` (record field overwritten), ``branch`` (a directory
            replaced a field of the same name), or ``reserved`` (field named
            ``all`` skipped, or a constructor the module already binds
            dropped).
        key: The colliding identifier or dotted record path.
        path: Relative path of the entry that caused the collision.
        previous: The value that was there before (empty if unknown).

    """

    kind: Literal["route-id", "leaf", "branch", "reserved"]
    key: str
    path: RelativePath
    previous: str = ""


@dataclass(frozen=True, slots=True)
class UrlFragment:
    """URL match/build data for one route: the raw path segments."""

    route_id: RouteId
    segments: tuple[str, ...]


@dataclass(slots=True)
class TreeData:
    """Everything the emitter needs, in scan order."""

    routes: Branch = field(default_factory=Branch)
    assets: Branch = field(default_factory=Branch)
    route_ids: list[RouteId] = field(default_factory=list)
    url_fragments: list[UrlFragment] = field(default_factory=list)
    metadata_pairs: list[tuple[RouteId, str]] = field(default_factory=list)
    extension_pairs: list[tuple[RouteId, str]] = field(default_factory=list)
    source_pairs: list[tuple[RouteId, str]] = field(default_factory=list)
    collisions: list[NameCollision] = field(default_factory=list)

    @property
    def asset_count(self) -> int:
        return _count_leaves(self.assets)


def _count_leaves(branch: Branch) -> int:
    total = 0
    for node in branch.children.values():
        total += _count_leaves(node) if isinstance(node, Branch) else 1
    return total


def insert(
    root: Branch,
    fragments: Sequence[str],
    value: str,
    source: RelativePath,
) -> list[NameCollision]:
    """Insert *value* at the camelCase key chain derived from *fragments*.

    Returns the collisions encountered (empty on a clean insert).

    """
    collisions: list[NameCollision] = []
    keys = [to_camel_case(f) for f in fragments]
    dotted = ".".join(keys)

    if RESERVED_KEY in keys:
        return [NameCollision(kind="reserved", key=dotted, path=source)]

    node = root
    for key in keys[:-1]:
        child = node.children.get(key)
        if isinstance(child, Branch):
            node = child
            continue
        if isinstance(child, Leaf):
            collisions.append(
                NameCollision(kind="branch", key=dotted, path=source, previous=child.value)
            )
        branch = Branch()
        node.children[key] = branch
        node = branch

    last = keys[-1]
    existing = node.children.get(last)
    if existing is not None:
        previous = existing.value if isinstance(existing, Leaf) else ""
        collisions.append(
            NameCollision(kind="leaf", key=dotted, path=source, previous=previous)
        )
    node.children[last] = Leaf(value)
    return collisions


def build_tree(entries: Sequence[ScannedEntry]) -> TreeData:
    """Fold scanned entries into route/asset trees and flat route lists."""
    data = TreeData()
    seen: dict[RouteId, RelativePath] = {}

    for entry in entries:
        fragments = path_fragments(entry.path)

        if not entry.is_document:
            data.collisions.extend(insert(data.assets, fragments, entry.path, entry.path))
            continue

        route_id = route_identifier(fragments)
        if route_id in RESERVED_CONSTRUCTORS:
            data.collisions.append(NameCollision(kind="reserved", key=route_id, path=entry.path))
            continue
        if route_id in seen:
            data.collisions.append(
                NameCollision(
                    kind="route-id", key=route_id, path=entry.path, previous=seen[route_id]
                )
            )
            continue
        seen[route_id] = entry.path

        data.collisions.extend(insert(data.routes, fragments, route_id, entry.path))
        data.route_ids.append(route_id)
        data.url_fragments.append(UrlFragment(route_id=route_id, segments=fragments))
        data.metadata_pairs.append((route_id, entry.metadata))
        data.extension_pairs.append((route_id, file_extension(entry.path)))
        data.source_pairs.append((route_id, entry.path))

    return data
