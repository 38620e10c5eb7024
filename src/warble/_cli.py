"""Warble CLI: warble routes / warble serve.

Entry point for the ``warble`` command-line interface.
"""

from __future__ import annotations

import argparse
import sys


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the warble CLI."""
    parser = argparse.ArgumentParser(
        prog="warble",
        description="Convention-routed MVC controllers for Chirp.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # warble routes
    routes_parser = subparsers.add_parser(
        "routes",
        help="Print the routes synthesized from the controllers directory",
    )
    routes_parser.add_argument("root", nargs="?", default=".", help="Application root directory")
    routes_parser.add_argument(
        "--controllers", default=None, help="Controllers directory (relative to root)",
    )

    # warble serve
    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the application server",
    )
    serve_parser.add_argument("root", nargs="?", default=".", help="Application root directory")
    serve_parser.add_argument("--host", default=None, help="Bind address")
    serve_parser.add_argument("--port", type=int, default=None, help="Bind port")
    serve_parser.add_argument("--workers", type=int, default=None, help="Worker count (0=auto)")
    serve_parser.add_argument("--debug", action="store_true", default=None, help="Debug mode")

    return parser


def _get_version() -> str:
    """Get the package version."""
    from warble import __version__

    return __version__


def _print_routes(root: str, controllers_dir: str | None) -> int:
    """Print one line per route; returns the process exit code."""
    from pathlib import Path

    from chirp import App

    from warble._errors import WarbleError
    from warble.app import wire_controllers
    from warble.config_loader import load_config
    from warble.routes.synth import describe_routes

    try:
        config = load_config(Path(root), controllers_dir=controllers_dir)
        router = wire_controllers(App(), config.controllers_path)
    except WarbleError as exc:
        print(f"warble: {exc}", file=sys.stderr)
        return 1

    rows = describe_routes(router.routes)
    if not rows:
        print("No routes.", file=sys.stderr)
        return 0

    width = max(len(row["path"]) for row in rows)
    for row in rows:
        print(f"{row['verb']:<7} {row['path']:<{width}}  {row['name']}")
    return 0


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "routes":
        sys.exit(_print_routes(args.root, args.controllers))
    elif args.command == "serve":
        from warble.app import serve

        serve(
            root=args.root,
            host=args.host,
            port=args.port,
            workers=args.workers,
            debug=args.debug,
        )


if __name__ == "__main__":
    main()
