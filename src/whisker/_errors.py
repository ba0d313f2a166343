"""Whisker error hierarchy.

All whisker-specific errors inherit from WhiskerError for easy catching.
"""


class WhiskerError(Exception):
    """Base error for all whisker operations."""


class ConfigError(WhiskerError):
    """Invalid or missing configuration."""


class ScanError(WhiskerError):
    """Content root missing, or a file could not be read mid-scan."""


class MetadataError(ScanError):
    """A document's metadata parser failed or returned a non-mapping."""


class CollisionError(WhiskerError):
    """Two content paths normalized to the same identifier or record key."""


class GenerationError(WhiskerError):
    """The emitted module would violate its own structure (e.g. non-exhaustive case)."""


class ManifestError(WhiskerError):
    """The Elm manifest is missing fields required for the rewrite."""
