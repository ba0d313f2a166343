"""Whisker — typed Elm routes from a content directory.

Scans a content tree of documents and assets and generates an Elm routing
module: a route union, URL parser and builder, route-to-metadata,
route-to-extension and route-to-source lookups, and nested route and asset
records mirroring the directory layout.

Quick start::

    import whisker

    whisker.generate("my-site/")

Three modes::

    whisker.generate("my-site/")     # Write the internal stub + elm.json
    whisker.show("my-site/")         # Return the public module text
    whisker.watch("my-site/")        # Regenerate on every content change

Lower-level pipeline::

    from whisker import run, run_internal
    text = run("my-site/content")

"""

__version__ = "0.1.0.dev0"
__all__ = [
    "Generator",
    "WhiskerConfig",
    "__version__",
    "generate",
    "run",
    "run_internal",
    "show",
    "watch",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import whisker`` fast while providing a clean top-level API.
    """
    if name == "WhiskerConfig":
        from whisker.config import WhiskerConfig

        return WhiskerConfig

    if name in ("Generator", "run", "run_internal"):
        from importlib import import_module

        return getattr(import_module("whisker.generator"), name)

    if name in ("generate", "show", "watch"):
        from importlib import import_module

        return getattr(import_module("whisker.app"), name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
