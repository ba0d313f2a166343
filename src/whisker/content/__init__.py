"""Content layer — scanning, front-matter parsing, and file watching.

Turns a content directory into scanned entries for the tree builder and
watches it for changes in watch mode.
"""

from whisker.content.frontmatter import FrontMatter, parse_front_matter
from whisker.content.scanner import (
    DEFAULT_DOCUMENTS,
    DocumentDefinition,
    ScannedEntry,
    scan,
)
from whisker.content.watcher import ChangeEvent, ContentWatcher

__all__ = [
    "DEFAULT_DOCUMENTS",
    "ChangeEvent",
    "ContentWatcher",
    "DocumentDefinition",
    "FrontMatter",
    "ScannedEntry",
    "parse_front_matter",
    "scan",
]
