"""Tests for whisker.generator — the scan/tree/emit/write pipeline."""

from __future__ import annotations

import json
import re
from pathlib import Path

import pytest

from whisker._errors import CollisionError, ManifestError, ScanError
from whisker.config import WhiskerConfig
from whisker.generator import GenerationResult, Generator, run, run_internal
from whisker.observability.events import (
    ContentScanned,
    ModuleEmitted,
    OutputWritten,
    RunFailed,
    RunProfile,
)


@pytest.fixture
def generator(site_root: Path) -> Generator:
    return Generator(WhiskerConfig(root=site_root))


def _case_section(text: str, name: str) -> str:
    """Body of the ``name route = case route of ...`` declaration."""
    return text.split(f"{name} route =\n", 1)[1].split("\n\n\n", 1)[0]


class TestGenerate:
    """generate() returns text and touches nothing on disk."""

    def test_result(self, generator: Generator) -> None:
        result = generator.generate("public")

        assert isinstance(result, GenerationResult)
        assert result.target == "public"
        assert result.route_count == 2
        assert result.asset_count == 1
        assert result.collisions == ()
        assert result.written == ()
        assert "type Route\n    = About\n    | BlogHelloWorld\n" in result.text

    def test_writes_nothing(self, generator: Generator, site_root: Path) -> None:
        generator.generate("internal")
        assert not (site_root / "my").exists()
        assert not (site_root / "elm-stuff").exists()

    def test_state_done(self, generator: Generator) -> None:
        assert generator.state == "idle"
        generator.generate()
        assert generator.state == "done"

    def test_idempotent(self, generator: Generator) -> None:
        assert generator.generate().text == generator.generate().text

    def test_events_recorded(self, generator: Generator) -> None:
        generator.generate(trigger="startup")
        log = generator.collector.log

        (scanned,) = log.query(event_type=ContentScanned)
        assert (scanned.documents, scanned.assets) == (2, 1)
        (emitted,) = log.query(event_type=ModuleEmitted)
        assert emitted.routes == 2
        assert emitted.module == "Pages.My"
        (profile,) = log.query(event_type=RunProfile)
        assert profile.trigger == "startup"
        assert profile.total_ms >= 0

    def test_new_document_adds_route(self, generator: Generator, content_root: Path) -> None:
        before = generator.generate()
        (content_root / "contact.md").write_text("---\ntitle: Contact\n---\n")
        after = generator.generate()

        assert after.route_count == before.route_count + 1
        assert "type Route\n    = About\n    | BlogHelloWorld\n    | Contact\n" in after.text
        assert "Contact" not in before.text

        for name in ("routeToString", "toMetadata", "toExtension", "toSourcePath"):
            old = _case_section(before.text, name)
            new = _case_section(after.text, name)
            old_arms = re.findall(r"^        (\w+) ->$", old, flags=re.MULTILINE)
            new_arms = re.findall(r"^        (\w+) ->$", new, flags=re.MULTILINE)
            assert new_arms == [*old_arms, "Contact"]
            assert new.startswith(old)


class TestWrite:
    """write() places the module and manifest where the compiler expects them."""

    def test_public(self, generator: Generator, site_root: Path) -> None:
        result = generator.write("public")

        module = site_root / "my" / "Pages" / "My.elm"
        assert result.written == (module,)
        assert module.read_text() == result.text
        assert "Navigation.pushUrl" in result.text
        assert not (site_root / "elm-stuff").exists()

    def test_internal(self, generator: Generator, site_root: Path) -> None:
        result = generator.write("internal")

        out = site_root / "elm-stuff" / "generated-code" / "whisker"
        assert result.written == (out / "Pages" / "My.elm", out / "elm.json")
        assert (out / "Pages" / "My.elm").read_text() == result.text
        assert "Cmd.none" in result.text
        assert not (site_root / "my").exists()

    def test_internal_manifest(self, generator: Generator, site_root: Path) -> None:
        generator.write("internal")

        out = site_root / "elm-stuff" / "generated-code" / "whisker"
        manifest = json.loads((out / "elm.json").read_text())
        assert manifest["source-directories"] == ["../../../src", "."]
        assert manifest["elm-version"] == "0.19.1"

        original = json.loads((site_root / "elm.json").read_text())
        assert original["source-directories"] == ["src", "my"]

    def test_custom_module_name(self, site_root: Path) -> None:
        generator = Generator(WhiskerConfig(root=site_root, module_name="Site.Routes"))
        (path,) = generator.write("public").written
        assert path == site_root / "my" / "Site" / "Routes.elm"
        assert path.read_text().startswith("module Site.Routes exposing")

    def test_write_events(self, generator: Generator) -> None:
        generator.write("internal")
        kinds = [e.kind for e in generator.collector.log.query(event_type=OutputWritten)]
        assert sorted(kinds) == ["manifest", "module"]

    def test_rerun_overwrites(self, generator: Generator, site_root: Path) -> None:
        first = generator.write("public")
        second = generator.write("public")
        assert first.text == second.text
        assert (site_root / "my" / "Pages" / "My.elm").read_text() == second.text


class TestFailures:
    """A failed run propagates, records, and writes nothing."""

    def test_missing_content(self, tmp_path: Path) -> None:
        generator = Generator(WhiskerConfig(root=tmp_path))
        with pytest.raises(ScanError):
            generator.write("public", trigger="startup")

        assert generator.state == "failed"
        (failed,) = generator.collector.log.query(event_type=RunFailed)
        assert failed.stage == "scanning"
        assert failed.trigger == "startup"
        assert not (tmp_path / "my").exists()

    def test_bad_document_aborts(
        self, generator: Generator, content_root: Path, site_root: Path
    ) -> None:
        (content_root / "broken.md").write_text("---\ntitle: [oops\n---\n")
        with pytest.raises(ScanError):
            generator.write("internal")
        assert not (site_root / "elm-stuff").exists()

    def test_missing_manifest(self, content_root: Path) -> None:
        root = content_root.parent
        generator = Generator(WhiskerConfig(root=root))
        with pytest.raises(ManifestError):
            generator.write("internal")

        assert generator.state == "failed"
        (failed,) = generator.collector.log.query(event_type=RunFailed)
        assert failed.stage == "writing"
        assert not (root / "elm-stuff").exists()

    def test_manifest_without_sources(self, site_root: Path) -> None:
        (site_root / "elm.json").write_text('{"type": "application"}')
        with pytest.raises(ManifestError):
            Generator(WhiskerConfig(root=site_root)).write("internal")
        assert not (site_root / "elm-stuff").exists()

    def test_public_needs_no_manifest(self, content_root: Path) -> None:
        generator = Generator(WhiskerConfig(root=content_root.parent))
        assert generator.write("public").written

    def test_recovers_after_failure(self, generator: Generator, content_root: Path) -> None:
        broken = content_root / "broken.md"
        broken.write_text("---\ntitle: [oops\n---\n")
        with pytest.raises(ScanError):
            generator.generate()

        broken.unlink()
        generator.generate()
        assert generator.state == "done"


class TestCollisions:
    """Warn by default, fail when strict."""

    @pytest.fixture
    def clashing_root(self, site_root: Path) -> Path:
        (site_root / "content" / "a-b.md").write_text("")
        (site_root / "content" / "a").mkdir()
        (site_root / "content" / "a" / "b.md").write_text("")
        return site_root

    def test_warns(self, clashing_root: Path, capsys: pytest.CaptureFixture[str]) -> None:
        result = Generator(WhiskerConfig(root=clashing_root)).generate()

        assert [c.kind for c in result.collisions] == ["route-id"]
        assert result.text.count("    | AB\n") + result.text.count("    = AB\n") == 1
        assert "name collision [route-id] AB" in capsys.readouterr().err

    def test_strict_raises(self, clashing_root: Path) -> None:
        generator = Generator(WhiskerConfig(root=clashing_root, strict=True))
        with pytest.raises(CollisionError, match="AB"):
            generator.write("public")

        assert generator.state == "failed"
        assert not (clashing_root / "my").exists()

    def test_reserved_constructor_strict(self, site_root: Path) -> None:
        (site_root / "content" / "page.md").write_text("")
        generator = Generator(WhiskerConfig(root=site_root, strict=True))
        with pytest.raises(CollisionError, match="Page"):
            generator.generate()


class _ReentrantGenerator(Generator):
    """Fires one extra request from inside the first write."""

    def __init__(self, config: WhiskerConfig) -> None:
        super().__init__(config)
        self.triggers: list[str] = []
        self.nested: list[object] = []

    def write(self, target="internal", *, trigger="manual"):
        self.triggers.append(trigger)
        if len(self.triggers) == 1:
            self.nested.append(self.request(target, trigger="second"))
            self.nested.append(self.request(target, trigger="third"))
        return super().write(target, trigger=trigger)


class TestRequest:
    """request() coalesces re-triggers into one follow-up run."""

    def test_single_request(self, generator: Generator) -> None:
        result = generator.request("public", trigger="a.md")
        assert result is not None
        assert result.target == "public"

    def test_coalesces_into_one_follow_up(self, site_root: Path) -> None:
        generator = _ReentrantGenerator(WhiskerConfig(root=site_root))
        result = generator.request("public", trigger="first")

        assert generator.nested == [None, None]
        assert generator.triggers == ["first", "third"]
        assert result is not None

    def test_failure_releases_guard(self, tmp_path: Path) -> None:
        generator = Generator(WhiskerConfig(root=tmp_path))
        with pytest.raises(ScanError):
            generator.request("public")

        (tmp_path / "content").mkdir()
        assert generator.request("public") is not None


class TestConvenience:
    """run() / run_internal() over a bare content directory."""

    def test_run(self, content_root: Path) -> None:
        text = run(content_root)
        assert text.startswith("module Pages.My exposing")
        assert "Navigation.pushUrl" in text

    def test_run_internal(self, content_root: Path) -> None:
        text = run_internal(content_root)
        assert "navigate _ _ =\n    Cmd.none" in text

    def test_options(self, content_root: Path) -> None:
        text = run(content_root, module_name="Site.Routes", sort_entries=False)
        assert text.startswith("module Site.Routes exposing")

    def test_writes_nothing(self, content_root: Path) -> None:
        before = sorted(p.name for p in content_root.rglob("*"))
        run_internal(content_root)
        assert sorted(p.name for p in content_root.rglob("*")) == before
