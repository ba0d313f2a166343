"""Elm manifest rewrite — point the compiler at the generated stub.

The internal module lives in a generated directory below the site root.
To compile the application against it, a copy of ``elm.json`` is written
next to the stub with its ``source-directories`` rewritten:

1. drop the directory holding the real generated module (``my``)
2. re-root every remaining entry relative to the generated directory
3. add ``.`` so the stub module is found
"""

from __future__ import annotations

import json
from pathlib import Path, PurePosixPath
from typing import Any

from whisker._errors import ManifestError

SOURCE_DIRECTORIES = "source-directories"


def relative_prefix(output_dir: str) -> str:
    """Return the ``../`` prefix leading from *output_dir* back to the root.

    ``elm-stuff/generated-code/dillonkearns/elm-pages`` -> ``../../../../``

    """
    parts = [p for p in PurePosixPath(output_dir).parts if p not in (".", "")]
    return "../" * len(parts)


def rewrite_manifest(
    manifest: dict[str, Any],
    *,
    excluded: str = "my",
    prefix: str = "../../../../",
) -> dict[str, Any]:
    """Return a rewritten copy of *manifest*; the input is not mutated.

    Raises:
        ManifestError: If ``source-directories`` is missing or not a list.

    """
    directories = manifest.get(SOURCE_DIRECTORIES)
    if not isinstance(directories, list):
        msg = f"Elm manifest has no {SOURCE_DIRECTORIES!r} list"
        raise ManifestError(msg)

    kept = [d for d in directories if d != excluded]
    rewritten = {**manifest}
    rewritten[SOURCE_DIRECTORIES] = [prefix + d for d in kept] + ["."]
    return rewritten


def load_manifest(path: Path) -> dict[str, Any]:
    """Read an ``elm.json`` file.

    Raises:
        ManifestError: If the file is missing or not a JSON object.

    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        msg = f"Cannot read Elm manifest {path}: {exc}"
        raise ManifestError(msg) from exc
    if not isinstance(data, dict):
        msg = f"Elm manifest {path} must be a JSON object"
        raise ManifestError(msg)
    return data


def write_manifest(path: Path, manifest: dict[str, Any]) -> Path:
    """Write *manifest* as JSON, creating parent directories as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(manifest, indent=4) + "\n", encoding="utf-8")
    return path
