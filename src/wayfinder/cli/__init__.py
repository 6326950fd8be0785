"""Wayfinder CLI — route listing and match debugging.

Entry point registered as ``wayfinder`` in ``pyproject.toml``::

    [project.scripts]
    wayfinder = "wayfinder.cli:main"
"""

import argparse
import logging
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``wayfinder`` command."""
    parser = argparse.ArgumentParser(
        prog="wayfinder",
        description="Wayfinder — phase-based path router.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log registrations and dispatch decisions to stderr",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- wayfinder routes -------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List registered routes")
    routes_parser.add_argument(
        "router",
        help="Import string (e.g. myapp.nav:router)",
    )

    # -- wayfinder match --------------------------------------------------
    match_parser = subparsers.add_parser("match", help="Show how a path resolves")
    match_parser.add_argument(
        "router",
        help="Import string (e.g. myapp.nav:router)",
    )
    match_parser.add_argument("path", help="Path to resolve (e.g. /users/42)")
    match_parser.add_argument(
        "--phase",
        default="entering",
        help="Phase to resolve: entering, active, leaving (or on, before, after)",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    if args.command == "routes":
        from wayfinder.cli._routes import run_routes

        run_routes(args)
    elif args.command == "match":
        from wayfinder.cli._match import run_match

        run_match(args)
