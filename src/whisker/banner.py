"""Startup banner — mode-aware status output on stderr.

Detects ``NO_COLOR`` / ``TERM`` for safe fallback to plain text.
"""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from whisker.config import WhiskerConfig


def _supports_color() -> bool:
    """Return True if the terminal supports ANSI colors."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("TERM") == "dumb":
        return False
    return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()


_COLOR = _supports_color()

_RESET = "\033[0m" if _COLOR else ""
_BOLD = "\033[1m" if _COLOR else ""
_DIM = "\033[2m" if _COLOR else ""
_CYAN = "\033[36m" if _COLOR else ""
_GREEN = "\033[32m" if _COLOR else ""
_YELLOW = "\033[33m" if _COLOR else ""
_ORANGE = "\033[38;5;214m" if _COLOR else ""

_MODE_STYLES: dict[str, tuple[str, str]] = {
    "generate": (_YELLOW, "generate"),
    "watch": (_GREEN, "watch"),
}


def _mode_badge(mode: str) -> str:
    """Return a styled [mode] badge."""
    color, label = _MODE_STYLES.get(mode, (_DIM, mode))
    return f"{color}[{label}]{_RESET}"


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


def format_banner(
    config: WhiskerConfig,
    mode: str,
    *,
    target: str,
    route_count: int = 0,
    asset_count: int = 0,
    load_ms: float = 0.0,
    warnings: list[str] | None = None,
) -> str:
    """Build the banner text (without printing it)."""
    from whisker import __version__

    header = (
        f"  {_ORANGE}{_BOLD}=^.^={_RESET}  Whisker {_DIM}v{__version__}{_RESET}  "
        f"{_mode_badge(mode)}"
    )
    timing = f" {_DIM}in {load_ms:.0f}ms{_RESET}" if load_ms > 0 else ""

    lines: list[str] = [
        "",
        header,
        f"  {_DIM}{'─' * 43}{_RESET}",
        f"  {_DIM}├─{_RESET} {_plural(route_count, 'route')}, "
        f"{_plural(asset_count, 'asset')}{timing}",
        f"  {_DIM}├─{_RESET} content: {_DIM}{config.content_path}{_RESET}",
        f"  {_DIM}├─{_RESET} module: {_CYAN}{config.module_name}{_RESET} ({target})",
    ]

    output = config.public_path if target == "public" else config.output_path
    lines.append(f"  {_DIM}└─{_RESET} output: {_DIM}{output}{_RESET}")

    if mode == "watch":
        lines.append("")
        lines.append(f"  {_DIM}Watching for changes...{_RESET}")

    if warnings:
        lines.append("")
        lines.extend(f"  {_YELLOW}!{_RESET} {w}" for w in warnings)

    lines.append("")
    return "\n".join(lines)


def print_banner(config: WhiskerConfig, mode: str, **kwargs: object) -> None:
    """Print the Whisker banner to stderr.  See :func:`format_banner`."""
    print(format_banner(config, mode, **kwargs), file=sys.stderr)  # type: ignore[arg-type]
