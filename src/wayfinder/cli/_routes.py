"""``wayfinder routes`` — list registered routes.

Resolves an import string to a Router and prints every registration with
its phase, resolved pattern, and handler names.
"""

import argparse

from wayfinder.cli._resolve import resolve_or_exit
from wayfinder.routing.route import Handler


def describe_handler(handler: Handler) -> str:
    """Comma-separated callable names of a handler or handler group."""
    return ", ".join(getattr(fn, "__name__", repr(fn)) for fn in handler.callables)


def run_routes(args: argparse.Namespace) -> None:
    """Print a PHASE / PATTERN / HANDLER table for a router."""
    router = resolve_or_exit(args)

    rows = [(str(phase), pattern, describe_handler(handler)) for pattern, phase, handler in router.routes]
    if not rows:
        print("No routes registered.")
        return

    max_phase = max(max(len(r[0]) for r in rows), 5)  # "PHASE" header
    max_pattern = max(max(len(r[1]) for r in rows), 7)  # "PATTERN" header

    fmt = f"{{:<{max_phase}}}  {{:<{max_pattern}}}  {{}}"
    print(fmt.format("PHASE", "PATTERN", "HANDLER"))
    sep_len = max_phase + max_pattern + 4 + max(len(r[2]) for r in rows)
    print("-" * min(sep_len, 80))
    for phase, pattern, names in rows:
        print(fmt.format(phase, pattern, names))
