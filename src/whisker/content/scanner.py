"""Content scanner — classify every file under the content root.

Each non-directory file becomes a :class:`ScannedEntry`:

    content/blog/hello-world.md  -> document (metadata from front matter)
    content/images/logo.png      -> asset

A file is a document when its relative path ends with ``.<extension>`` of a
registered :class:`DocumentDefinition`.  Everything else is an asset.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

from whisker._errors import MetadataError, ScanError
from whisker.content.frontmatter import parse_front_matter

if TYPE_CHECKING:
    from collections.abc import Sequence

    from whisker._types import MetadataParser, RelativePath


@dataclass(frozen=True, slots=True)
class DocumentDefinition:
    """A document type recognised by the scanner.

    Attributes:
        extension: File extension without the leading dot (e.g. ``"md"``).
        parser: Callable turning raw file text into front matter.

    """

    extension: str
    parser: MetadataParser

    def matches(self, path: RelativePath) -> bool:
        return path.endswith("." + self.extension)


@dataclass(frozen=True, slots=True)
class ScannedEntry:
    """One file found under the content root.

    Attributes:
        path: Path relative to the content root, ``/``-separated.
        is_document: True if a document definition matched the path.
        metadata: Compact JSON of the front-matter data; ``""`` for assets.

    """

    path: RelativePath
    is_document: bool
    metadata: str = ""


DEFAULT_DOCUMENTS: tuple[DocumentDefinition, ...] = (
    DocumentDefinition(extension="md", parser=parse_front_matter),
    DocumentDefinition(extension="emu", parser=parse_front_matter),
)


def definitions_for(extensions: Sequence[str]) -> tuple[DocumentDefinition, ...]:
    """Build front-matter document definitions for a list of extensions."""
    return tuple(
        DocumentDefinition(extension=ext.lstrip("."), parser=parse_front_matter)
        for ext in extensions
    )


def _json_default(value: object) -> str:
    # YAML turns unquoted dates into date objects; keep them as ISO strings.
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def _json_key(key: object) -> str:
    if isinstance(key, (date, datetime)):
        return key.isoformat()
    if isinstance(key, bool) or key is None:
        return json.dumps(key)
    return str(key)


def _string_keys(value: object) -> object:
    """Recursively turn mapping keys into strings (YAML allows dates, ints...)."""
    if isinstance(value, dict):
        return {_json_key(k): _string_keys(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_string_keys(v) for v in value]
    return value


def serialize_metadata(data: dict[str, Any]) -> str:
    """Serialize front-matter data to the compact JSON carried in the module.

    Raises:
        RecursionError: If *data* contains itself (YAML anchors can do this).

    """
    return json.dumps(
        _string_keys(data),
        separators=(",", ":"),
        ensure_ascii=False,
        default=_json_default,
    )


def _is_hidden(relative: Path) -> bool:
    return any(part.startswith(".") for part in relative.parts)


def _match_definition(
    path: RelativePath,
    definitions: Sequence[DocumentDefinition],
) -> DocumentDefinition | None:
    """Return the matching definition; the last match in the list wins."""
    found: DocumentDefinition | None = None
    for definition in definitions:
        if definition.matches(path):
            found = definition
    return found


def _scan_file(
    full_path: Path,
    relative: RelativePath,
    definitions: Sequence[DocumentDefinition],
) -> ScannedEntry:
    definition = _match_definition(relative, definitions)
    if definition is None:
        return ScannedEntry(path=relative, is_document=False)

    try:
        text = full_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        msg = f"Cannot read document {relative}: {exc}"
        raise ScanError(msg) from exc

    try:
        parsed = definition.parser(text)
    except MetadataError as exc:
        msg = f"{relative}: {exc}"
        raise MetadataError(msg) from exc
    except Exception as exc:
        msg = f"Metadata parser for .{definition.extension} failed on {relative}: {exc}"
        raise MetadataError(msg) from exc

    data = getattr(parsed, "data", None)
    if not isinstance(data, dict):
        msg = (
            f"Metadata parser for .{definition.extension} returned "
            f"{type(data).__name__} data for {relative}, expected a mapping"
        )
        raise MetadataError(msg)

    try:
        metadata = serialize_metadata(data)
    except (TypeError, ValueError, RecursionError) as exc:
        msg = f"Cannot serialize metadata for {relative}: {exc}"
        raise MetadataError(msg) from exc

    return ScannedEntry(path=relative, is_document=True, metadata=metadata)


def scan(
    root: Path,
    definitions: Sequence[DocumentDefinition] = DEFAULT_DOCUMENTS,
    *,
    sort: bool = True,
) -> tuple[ScannedEntry, ...]:
    """Walk *root* and classify every file as a document or an asset.

    Hidden files and anything inside hidden directories are skipped.  With
    ``sort=True`` entries are ordered by relative path so the generated
    module does not depend on the platform's directory enumeration order.

    Raises:
        ScanError: If *root* is not a readable directory or a document
            cannot be read.
        MetadataError: If a document's metadata parser fails.

    """
    if not root.is_dir():
        msg = f"Content directory not found: {root}"
        raise ScanError(msg)

    try:
        candidates = list(root.rglob("*"))
    except OSError as exc:
        msg = f"Cannot list content directory {root}: {exc}"
        raise ScanError(msg) from exc

    found: list[tuple[Path, RelativePath]] = []
    for full_path in candidates:
        relative = full_path.relative_to(root)
        if _is_hidden(relative) or not full_path.is_file():
            continue
        found.append((full_path, relative.as_posix()))

    if sort:
        found.sort(key=lambda item: item[1])

    return tuple(_scan_file(full, rel, definitions) for full, rel in found)
