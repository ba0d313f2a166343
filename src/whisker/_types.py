"""Shared type definitions for whisker."""

from collections.abc import Callable
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from whisker.content.frontmatter import FrontMatter

# Which skeleton the emitter wraps around the generated sections
type Target = Literal["public", "internal"]

# Relative path of a scanned file, always "/"-separated (e.g. "blog/hello-world.md")
type RelativePath = str

# Generated Elm constructor name (e.g. "BlogHelloWorld")
type RouteId = str

# Generated Elm record field name (e.g. "helloWorld")
type FieldName = str

# Metadata parser: raw document text -> front matter
type MetadataParser = Callable[[str], FrontMatter]
