"""Whisker configuration.

WhiskerConfig is the central configuration object, frozen after creation.
"""

from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath


@dataclass(frozen=True, slots=True)
class WhiskerConfig:
    """Configuration for a generation run.

    Attributes:
        root: Path to the site root directory (contains content/ and elm.json).
              Always resolved to an absolute path on construction.
        content_dir: Directory scanned for documents and assets.
        module_name: Dotted Elm module name of the generated file.
        public_dir: Source directory the public module is written into.  It is
            dropped from the rewritten manifest so the stub takes precedence.
        output_dir: Directory receiving the internal stub and rewritten manifest.
        manifest: Elm manifest file name, relative to root.
        documents: Extensions (without dot) treated as documents; later
            entries win when several match the same file.
        sort_entries: Order scanned files by relative path before generating.
        strict: Fail the run on name collisions instead of warning.
        debounce_ms: Watch mode quiet period before a batch of changes re-runs
            the pipeline.

    """

    root: Path = field(default_factory=Path.cwd)
    content_dir: str = "content"
    module_name: str = "Pages.My"
    public_dir: str = "my"
    output_dir: str = "elm-stuff/generated-code/whisker"
    manifest: str = "elm.json"
    documents: tuple[str, ...] = ("md", "emu")
    sort_entries: bool = True
    strict: bool = False
    debounce_ms: int = 500

    def __post_init__(self) -> None:
        # Resolve root to absolute so that watchfiles (which returns
        # absolute paths) can be compared via Path.relative_to().
        if not self.root.is_absolute():
            object.__setattr__(self, "root", self.root.resolve())
        if not isinstance(self.documents, tuple):
            object.__setattr__(self, "documents", tuple(self.documents))

    @property
    def content_path(self) -> Path:
        """Absolute path to content directory."""
        return self.root / self.content_dir

    @property
    def manifest_path(self) -> Path:
        """Absolute path to the site's Elm manifest."""
        return self.root / self.manifest

    @property
    def output_path(self) -> Path:
        """Absolute path to the internal output directory."""
        return self.root / self.output_dir

    @property
    def public_path(self) -> Path:
        """Absolute path to the public module's source directory."""
        return self.root / self.public_dir

    @property
    def module_file(self) -> PurePosixPath:
        """Module file path relative to a source directory (``Pages/My.elm``)."""
        return PurePosixPath(*self.module_name.split(".")).with_suffix(".elm")
