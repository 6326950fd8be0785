"""Wayfinder — a phase-based path router.

Maps paths to handler chains and runs them as paths are entered, become
active, and are left. Follows navigation events from any Navigator.

Basic usage::

    from wayfinder import Router

    router = Router()
    router.define("id", r"(\\d+)")

    @router.entering("/users/<id>")
    def show_user(user_id):
        ...

    router.dispatch("entering", "/users/42")

Asynchronous chains with anyio (see ``wayfinder.aio``)::

    router = Router(asynchronous=True)
    outcome = await settle(router, "entering", "/users/42")
"""

__version__ = "0.1.0"
__all__ = [
    "ConfigurationError",
    "ContinuationQueue",
    "DispatchOutcome",
    "Group",
    "MatchResult",
    "NavigationCoordinator",
    "Navigator",
    "Ordering",
    "ParamRegistry",
    "ParamScope",
    "Phase",
    "RouteTree",
    "Router",
    "RouterConfig",
    "Single",
    "UnsupportedEnvironment",
    "WayfinderError",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import wayfinder`` fast while providing a clean top-level API.
    """
    if name == "Router":
        from wayfinder.router import Router

        return Router

    if name in ("RouterConfig", "Ordering", "ParamScope"):
        from wayfinder import config as _config

        return getattr(_config, name)

    if name in ("Phase", "Single", "Group", "MatchResult"):
        from wayfinder.routing import route as _route

        return getattr(_route, name)

    if name == "RouteTree":
        from wayfinder.routing.tree import RouteTree

        return RouteTree

    if name == "ParamRegistry":
        from wayfinder.routing.params import ParamRegistry

        return ParamRegistry

    if name == "ContinuationQueue":
        from wayfinder.dispatch.queue import ContinuationQueue

        return ContinuationQueue

    if name == "DispatchOutcome":
        from wayfinder.dispatch.engine import DispatchOutcome

        return DispatchOutcome

    if name in ("NavigationCoordinator", "Navigator"):
        from wayfinder import navigation as _navigation

        return getattr(_navigation, name)

    if name in ("WayfinderError", "ConfigurationError", "UnsupportedEnvironment"):
        from wayfinder import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
