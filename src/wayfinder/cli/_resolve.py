"""Locate the Router a CLI command operates on.

``wayfinder routes`` and ``wayfinder match`` take an import string such as
``myapp.nav:router``. The attribute may be a Router or a zero-argument
factory returning one.
"""

import argparse
import importlib
import sys

from wayfinder.router import Router

DEFAULT_ATTRIBUTE = "router"


def resolve_router(import_string: str) -> Router:
    """Import ``module[:attribute]`` and return the Router it names.

    ``"myapp.nav"`` is read as ``"myapp.nav:router"``. A callable that is
    not itself a Router is treated as a factory and called once.

    Raises:
        ModuleNotFoundError: The module cannot be imported.
        AttributeError: The module has no such attribute.
        TypeError: The factory failed, or the result is not a Router.

    """
    module_name, _, attribute = import_string.partition(":")
    target = getattr(importlib.import_module(module_name), attribute or DEFAULT_ATTRIBUTE)

    if not isinstance(target, Router) and callable(target):
        try:
            target = target()
        except Exception as exc:
            msg = f"Router factory {import_string!r} raised an error: {exc}"
            raise TypeError(msg) from exc

    if isinstance(target, Router):
        return target

    msg = f"{import_string!r} resolved to {type(target).__name__}, not a wayfinder.Router instance"
    raise TypeError(msg)


def resolve_or_exit(args: argparse.Namespace) -> Router:
    """Resolve ``args.router``; on failure print ``Error: ...`` and exit 1."""
    try:
        return resolve_router(args.router)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
