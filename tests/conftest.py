"""Shared test fixtures for whisker."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from whisker.content.scanner import ScannedEntry


@pytest.fixture
def content_root(tmp_path: Path) -> Path:
    """A content directory with two documents and one asset.

    Layout::

        content/
            about.md                 (empty front matter)
            blog/hello-world.md      (title: Hi)
            images/logo.png
    """
    content = tmp_path / "content"
    (content / "blog").mkdir(parents=True)
    (content / "images").mkdir()
    (content / "blog" / "hello-world.md").write_text(
        "---\ntitle: Hi\n---\n\n# Hello\n\nFirst post.\n"
    )
    (content / "about.md").write_text("---\n---\n\nAbout this site.\n")
    (content / "images" / "logo.png").write_bytes(b"\x89PNG\r\n")
    return content


@pytest.fixture
def site_root(content_root: Path) -> Path:
    """A site root: ``content_root`` plus an ``elm.json`` manifest."""
    root = content_root.parent
    (root / "elm.json").write_text(
        json.dumps({
            "type": "application",
            "source-directories": ["src", "my"],
            "elm-version": "0.19.1",
        })
    )
    return root


def make_entries(*specs: tuple[str, str | None]) -> list[ScannedEntry]:
    """Build scanned entries from ``(path, metadata)`` pairs.

    A metadata of None marks the entry as an asset.
    """
    return [
        ScannedEntry(path=path, is_document=metadata is not None, metadata=metadata or "")
        for path, metadata in specs
    ]
