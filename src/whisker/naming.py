"""Path normalizer — filesystem path segments to Elm-safe names.

Content paths become two kinds of Elm names:

    blog/hello-world.md  -> BlogHelloWorld   (union constructor)
    blog/hello-world.md  -> blog.helloWorld  (record field chain)

Only hyphens are treated specially.  Any other character that is not valid
in an Elm identifier (spaces, dots, punctuation) passes through unchanged,
so such names will fail to compile downstream rather than being silently
rewritten here.
"""

import re

from whisker._types import FieldName, RelativePath, RouteId

_HYPHEN_WORD = re.compile(r"-(\w)")
_EXTENSION = re.compile(r"\.[^/.]+$")


def _join_hyphens(segment: str) -> str:
    return _HYPHEN_WORD.sub(lambda m: m.group(1).upper(), segment)


def to_pascal_case(segment: str) -> RouteId:
    """``hello-world`` -> ``HelloWorld``."""
    joined = _join_hyphens(segment)
    return joined[:1].upper() + joined[1:]


def to_camel_case(segment: str) -> FieldName:
    """``Hello-world`` -> ``helloWorld``."""
    joined = _join_hyphens(segment)
    return joined[:1].lower() + joined[1:]


def strip_extension(path: RelativePath) -> str:
    """Remove the final extension of the last path component, if any."""
    return _EXTENSION.sub("", path)


def file_extension(path: RelativePath) -> str:
    """Return the final extension including its leading dot, or ``""``."""
    match = _EXTENSION.search(path)
    return match.group(0) if match else ""


def path_fragments(path: RelativePath) -> tuple[str, ...]:
    """Split a relative path into segments with the extension stripped.

    ``blog/hello-world.md`` -> ``("blog", "hello-world")``

    """
    return tuple(strip_extension(path).split("/"))


def route_identifier(fragments: tuple[str, ...]) -> RouteId:
    """PascalCase-join path fragments into a union constructor name."""
    return "".join(to_pascal_case(f) for f in fragments)
