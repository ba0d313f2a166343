"""Tests for whisker._errors."""

import pytest

from whisker._errors import (
    CollisionError,
    ConfigError,
    GenerationError,
    ManifestError,
    MetadataError,
    ScanError,
    WhiskerError,
)


class TestErrorHierarchy:
    """All whisker errors inherit from WhiskerError."""

    def test_whisker_error_is_exception(self) -> None:
        assert issubclass(WhiskerError, Exception)

    @pytest.mark.parametrize(
        "error_cls",
        [ConfigError, ScanError, CollisionError, GenerationError, ManifestError],
    )
    def test_inherits_base(self, error_cls: type[WhiskerError]) -> None:
        assert issubclass(error_cls, WhiskerError)

    def test_metadata_error_is_scan_error(self) -> None:
        """A bad document aborts the scan like an unreadable one."""
        assert issubclass(MetadataError, ScanError)

    def test_catch_all_whisker_errors(self) -> None:
        """All specific errors are catchable via WhiskerError."""
        for error_cls in (ConfigError, MetadataError, CollisionError, ManifestError):
            with pytest.raises(WhiskerError):
                raise error_cls("test")
