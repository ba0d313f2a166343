"""Front-matter parser — the default metadata parser for documents.

Splits a leading ``---`` delimited YAML block from the document body::

    ---
    title: Hello
    ---

    # Body starts here

Only ``data`` is consumed by the generator; ``content`` is kept so the
parser honours the usual ``{content, data}`` front-matter contract.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import yaml

from whisker._errors import MetadataError

_DELIMITER = "---"


@dataclass(frozen=True, slots=True)
class FrontMatter:
    """A parsed document.

    Attributes:
        content: Document body with the front-matter block removed.
        data: Key-value mapping from the front-matter block (empty if absent).

    """

    content: str
    data: dict[str, Any] = field(default_factory=dict)


def _split(text: str) -> tuple[str, str] | None:
    """Return ``(block, body)`` or None when the text has no front matter."""
    lines = text.splitlines(keepends=True)
    if not lines or lines[0].rstrip() != _DELIMITER:
        return None
    for i in range(1, len(lines)):
        if lines[i].rstrip() == _DELIMITER:
            block = "".join(lines[1:i])
            body = "".join(lines[i + 1:]).lstrip("\n")
            return block, body
    return None


def parse_front_matter(text: str) -> FrontMatter:
    """Parse a document's YAML front matter.

    Raises:
        MetadataError: If the block is not valid YAML or is not a mapping.

    """
    parts = _split(text)
    if parts is None:
        return FrontMatter(content=text)

    block, body = parts
    try:
        data = yaml.safe_load(block)
    except yaml.YAMLError as exc:
        msg = f"Invalid front matter: {exc}"
        raise MetadataError(msg) from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        msg = f"Front matter must be a mapping, got {type(data).__name__}"
        raise MetadataError(msg)

    return FrontMatter(content=body, data=data)
