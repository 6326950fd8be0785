"""``wayfinder match`` — show how a path resolves.

Walks the route tree without running any handler and prints one line per
visited depth. Exits with status 1 when the path does not resolve.
"""

import argparse
import sys

from wayfinder.cli._resolve import resolve_or_exit
from wayfinder.cli._routes import describe_handler
from wayfinder.errors import ConfigurationError


def run_match(args: argparse.Namespace) -> None:
    router = resolve_or_exit(args)

    try:
        result = router.match(args.phase, args.path)
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    if not result.resolved:
        print(f"{result.path}: no route ({result.phase})")
        raise SystemExit(1)

    print(f"{result.path}: {result.phase}")
    for step in result.steps:
        handler = describe_handler(step.handler) if step.handler is not None else "-"
        captures = f"  {list(step.captures)}" if step.captures else ""
        print(f"  {step.depth}  {step.segment:<20}  {handler}{captures}")
    if result.params:
        print(f"params: {list(result.params)}")
