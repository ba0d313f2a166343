"""Tests for whisker.content.scanner — document/asset classification."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from whisker._errors import MetadataError, ScanError
from whisker.content.frontmatter import FrontMatter, parse_front_matter
from whisker.content.scanner import (
    DEFAULT_DOCUMENTS,
    DocumentDefinition,
    ScannedEntry,
    definitions_for,
    scan,
    serialize_metadata,
)


def _by_path(entries: tuple[ScannedEntry, ...]) -> dict[str, ScannedEntry]:
    return {e.path: e for e in entries}


class TestScan:
    """scan() over a real directory tree."""

    def test_documents_and_assets(self, content_root: Path) -> None:
        entries = _by_path(scan(content_root))

        assert set(entries) == {"about.md", "blog/hello-world.md", "images/logo.png"}
        assert entries["blog/hello-world.md"].is_document
        assert entries["about.md"].is_document
        assert not entries["images/logo.png"].is_document

    def test_metadata_serialized_as_json(self, content_root: Path) -> None:
        entries = _by_path(scan(content_root))

        assert entries["blog/hello-world.md"].metadata == '{"title":"Hi"}'
        assert entries["about.md"].metadata == "{}"
        assert entries["images/logo.png"].metadata == ""

    def test_date_keyed_front_matter(self, tmp_path: Path) -> None:
        (tmp_path / "post.md").write_text("---\n2020-01-01: launch\n---\nBody\n")
        (entry,) = scan(tmp_path)
        assert entry.metadata == '{"2020-01-01":"launch"}'

    def test_sorted_by_relative_path(self, content_root: Path) -> None:
        (content_root / "zeta.md").write_text("z")
        (content_root / "alpha.txt").write_text("a")

        paths = [e.path for e in scan(content_root)]
        assert paths == sorted(paths)
        assert paths[0] == "about.md"

    def test_unsorted_keeps_every_entry(self, content_root: Path) -> None:
        paths = {e.path for e in scan(content_root, sort=False)}
        assert paths == {"about.md", "blog/hello-world.md", "images/logo.png"}

    def test_hidden_files_skipped(self, content_root: Path) -> None:
        (content_root / ".DS_Store").write_text("")
        hidden = content_root / ".drafts"
        hidden.mkdir()
        (hidden / "secret.md").write_text("---\ntitle: x\n---\n")

        paths = {e.path for e in scan(content_root)}
        assert ".DS_Store" not in paths
        assert ".drafts/secret.md" not in paths

    def test_directories_are_not_entries(self, content_root: Path) -> None:
        (content_root / "empty-dir").mkdir()
        paths = {e.path for e in scan(content_root)}
        assert "empty-dir" not in paths
        assert "blog" not in paths

    def test_extension_must_follow_a_dot(self, tmp_path: Path) -> None:
        (tmp_path / "readme-md").write_text("")
        (tmp_path / "notes.md.bak").write_text("")

        entries = scan(tmp_path)
        assert all(not e.is_document for e in entries)

    def test_emu_is_a_default_document(self, tmp_path: Path) -> None:
        nested = tmp_path / "a-b"
        nested.mkdir()
        (nested / "c-d.emu").write_text("---\nkind: emu\n---\n")

        (entry,) = scan(tmp_path)
        assert entry.path == "a-b/c-d.emu"
        assert entry.is_document
        assert json.loads(entry.metadata) == {"kind": "emu"}

    def test_custom_definitions(self, tmp_path: Path) -> None:
        (tmp_path / "notes.txt").write_text("---\ntitle: Notes\n---\n")
        (tmp_path / "about.md").write_text("")

        entries = _by_path(scan(tmp_path, definitions_for([".txt"])))
        assert entries["notes.txt"].is_document
        assert not entries["about.md"].is_document


class TestDefinitionPrecedence:
    """Several definitions matching one file: the last one wins."""

    def test_last_matching_definition_wins(self, tmp_path: Path) -> None:
        (tmp_path / "post.page.md").write_text("body")

        definitions = [
            DocumentDefinition("md", lambda text: FrontMatter(text, {"by": "md"})),
            DocumentDefinition("page.md", lambda text: FrontMatter(text, {"by": "page.md"})),
        ]
        (entry,) = scan(tmp_path, definitions)
        assert json.loads(entry.metadata) == {"by": "page.md"}

        (entry,) = scan(tmp_path, list(reversed(definitions)))
        assert json.loads(entry.metadata) == {"by": "md"}

    def test_non_matching_later_definition_does_not_override(self, tmp_path: Path) -> None:
        (tmp_path / "post.md").write_text("body")

        definitions = [
            DocumentDefinition("md", lambda text: FrontMatter(text, {"by": "md"})),
            DocumentDefinition("emu", lambda text: FrontMatter(text, {"by": "emu"})),
        ]
        (entry,) = scan(tmp_path, definitions)
        assert json.loads(entry.metadata) == {"by": "md"}


class TestScanErrors:
    """Fail-fast behaviour: no partial results."""

    def test_missing_root(self, tmp_path: Path) -> None:
        with pytest.raises(ScanError, match="not found"):
            scan(tmp_path / "nope")

    def test_root_is_a_file(self, tmp_path: Path) -> None:
        file = tmp_path / "file.md"
        file.write_text("")
        with pytest.raises(ScanError):
            scan(file)

    def test_invalid_front_matter(self, content_root: Path) -> None:
        (content_root / "broken.md").write_text("---\ntitle: [oops\n---\n")
        with pytest.raises(MetadataError, match="broken.md"):
            scan(content_root)

    def test_parser_exception_is_wrapped(self, tmp_path: Path) -> None:
        (tmp_path / "a.md").write_text("")

        def explode(text: str) -> FrontMatter:
            raise ValueError("boom")

        with pytest.raises(MetadataError, match="boom"):
            scan(tmp_path, [DocumentDefinition("md", explode)])

    def test_parser_returning_non_mapping(self, tmp_path: Path) -> None:
        (tmp_path / "a.md").write_text("")

        def bad(text: str) -> FrontMatter:
            return FrontMatter(text, ["not", "a", "dict"])  # type: ignore[arg-type]

        with pytest.raises(MetadataError, match="expected a mapping"):
            scan(tmp_path, [DocumentDefinition("md", bad)])

    def test_unserializable_metadata_is_wrapped(self, tmp_path: Path) -> None:
        (tmp_path / "a.md").write_text("")

        def looped(text: str) -> FrontMatter:
            data: dict = {}
            data["self"] = data
            return FrontMatter(text, data)

        with pytest.raises(MetadataError, match="Cannot serialize metadata for a.md"):
            scan(tmp_path, [DocumentDefinition("md", looped)])

    def test_undecodable_document(self, tmp_path: Path) -> None:
        (tmp_path / "a.md").write_bytes(b"\xff\xfe\xfa")
        with pytest.raises(ScanError, match="a.md"):
            scan(tmp_path)

    def test_undecodable_asset_is_fine(self, tmp_path: Path) -> None:
        (tmp_path / "a.bin").write_bytes(b"\xff\xfe\xfa")
        (entry,) = scan(tmp_path)
        assert not entry.is_document


class TestSerializeMetadata:
    """Compact JSON, insertion order, ISO dates."""

    def test_compact_and_ordered(self) -> None:
        assert serialize_metadata({"b": 1, "a": [1, 2]}) == '{"b":1,"a":[1,2]}'

    def test_dates(self) -> None:
        parsed = parse_front_matter("---\npublished: 2024-01-02\n---\n")
        assert serialize_metadata(parsed.data) == '{"published":"2024-01-02"}'

    def test_unicode_kept(self) -> None:
        assert serialize_metadata({"title": "Café"}) == '{"title":"Café"}'

    def test_default_documents(self) -> None:
        assert [d.extension for d in DEFAULT_DOCUMENTS] == ["md", "emu"]

    def test_date_keys(self) -> None:
        parsed = parse_front_matter("---\n2020-01-01: launch\n---\n")
        assert serialize_metadata(parsed.data) == '{"2020-01-01":"launch"}'

    def test_nested_non_string_keys(self) -> None:
        data = {"history": [{1: "a", False: "b", None: "c"}]}
        assert serialize_metadata(data) == '{"history":[{"1":"a","false":"b","null":"c"}]}'
