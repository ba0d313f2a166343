"""Whisker CLI — whisker generate / whisker print / whisker watch.

Entry point for the ``whisker`` command-line interface.
"""

from __future__ import annotations

import argparse
import sys


def _add_common(parser: argparse.ArgumentParser, *, default_target: str) -> None:
    parser.add_argument("root", nargs="?", default=".", help="Site root directory")
    parser.add_argument(
        "--target",
        choices=("public", "internal"),
        default=default_target,
        help="Module variant to generate",
    )
    parser.add_argument("--content-dir", default=None, help="Content directory under root")
    parser.add_argument("--module", dest="module_name", default=None, help="Elm module name")
    parser.add_argument(
        "--strict", action="store_true", default=None, help="Fail on name collisions",
    )


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the whisker CLI."""
    parser = argparse.ArgumentParser(
        prog="whisker",
        description="Generate a typed Elm routing module from a content directory.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # whisker generate
    generate_parser = subparsers.add_parser(
        "generate",
        help="Write the routing module (and manifest for the internal stub)",
    )
    _add_common(generate_parser, default_target="internal")
    generate_parser.add_argument("--quiet", action="store_true", help="Suppress the banner")

    # whisker print
    print_parser = subparsers.add_parser(
        "print",
        help="Print the routing module to stdout without writing files",
    )
    _add_common(print_parser, default_target="public")

    # whisker watch
    watch_parser = subparsers.add_parser(
        "watch",
        help="Regenerate whenever the content directory changes",
    )
    _add_common(watch_parser, default_target="internal")

    return parser


def _get_version() -> str:
    """Get the package version."""
    from whisker import __version__

    return __version__


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    from whisker._errors import WhiskerError
    from whisker.app import generate, show, watch

    overrides = {
        "content_dir": args.content_dir,
        "module_name": args.module_name,
        "strict": args.strict,
    }

    try:
        if args.command == "generate":
            generate(args.root, target=args.target, quiet=args.quiet, **overrides)
        elif args.command == "print":
            sys.stdout.write(show(args.root, target=args.target, **overrides))
        elif args.command == "watch":
            watch(args.root, target=args.target, **overrides)
    except WhiskerError as exc:
        print(f"whisker: error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
