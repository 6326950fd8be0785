"""Wayfinder exception hierarchy.

Shared across the route tree, the dispatch engine, and the navigation
coordinator so every module raises and catches the same types.

A path that matches no route is *not* an error: it is routed to the
configured not-found handlers. A handler returning ``False`` is a
short-circuit, not an error either.
"""


class WayfinderError(Exception):
    """Base for all wayfinder-specific errors."""


class ConfigurationError(WayfinderError):
    """Raised when router options or route registrations are invalid.

    Typically raised by ``Router.configure()`` for unknown options and by
    ``Router.route()`` / ``Router.mount()`` for segment patterns that do
    not compile.
    """


class UnsupportedEnvironment(WayfinderError):  # noqa: N818 — mirrors the environment condition
    """The attached Navigator cannot report navigation changes.

    Raised by ``Router.init()``. Fatal; the router does not retry.
    """
