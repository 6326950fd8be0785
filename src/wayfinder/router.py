"""Wayfinder router.

The public facade: route registration, configuration, dispatch, and
navigator wiring. Registration and dispatch may be interleaved; the route
tree is only ever mutated through this class.
"""

import re
from collections.abc import Callable, Iterable, Sequence
from typing import Any, Self

from wayfinder.config import RouterConfig
from wayfinder.dispatch.engine import DispatchEngine, DispatchOutcome
from wayfinder.errors import ConfigurationError
from wayfinder.navigation import NavigationCoordinator, Navigator
from wayfinder.routing.route import Handler, MatchResult, Phase, as_handler
from wayfinder.routing.tree import MountEntries, PathLike, RouteTree, require_phase

type PathArg = PathLike | Sequence[PathLike]
type PhaseArg = Phase | str | Sequence[Phase | str]


def _is_path(value: object) -> bool:
    if isinstance(value, (str, re.Pattern)):
        return True
    return isinstance(value, (list, tuple)) and all(
        isinstance(item, (str, re.Pattern)) for item in value
    )


def _is_handler(value: object) -> bool:
    if callable(value):
        return True
    return isinstance(value, (list, tuple)) and len(value) > 0 and all(callable(v) for v in value)


def _fan_out[T](value: T | Sequence[T]) -> list[T]:
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]  # type: ignore[list-item]


class Router:
    """Path router with entering / active / leaving phases.

    Usage::

        router = Router()
        router.define("id", r"\\d+")

        @router.entering("/users/<id>")
        def show_user(user_id):
            ...

        router.route("leaving", "/users/<id>", close_user)
        router.dispatch("entering", "/users/42")

    Attach a Navigator and call ``init()`` to follow navigation events::

        router = Router(navigator=bridge)
        router.init()
    """

    __slots__ = ("_coordinator", "_engine", "_tree")

    def __init__(
        self,
        routes: MountEntries | None = None,
        config: RouterConfig | None = None,
        *,
        navigator: Navigator | None = None,
        **options: Any,
    ) -> None:
        if config is not None and options:
            msg = "Pass either a RouterConfig or keyword options, not both"
            raise ConfigurationError(msg)
        self._tree = RouteTree()
        self._engine = DispatchEngine(self._tree, config or RouterConfig.from_options(**options))
        self._coordinator = NavigationCoordinator(self._engine, navigator)
        if routes is not None:
            self.mount(routes)

    # -- State --

    @property
    def config(self) -> RouterConfig:
        return self._engine.config

    @property
    def navigator(self) -> Navigator | None:
        return self._coordinator.navigator

    @navigator.setter
    def navigator(self, navigator: Navigator | None) -> None:
        self._coordinator.teardown()
        self._coordinator.navigator = navigator

    @property
    def current_path(self) -> str:
        return self._coordinator.state.path

    @property
    def initiated(self) -> bool:
        return self._coordinator.state.initiated

    @property
    def routes(self) -> list[tuple[str, Phase, Handler]]:
        """Every registration as ``(pattern, phase, handler)``."""
        return list(self._tree.walk())

    # -- Configuration --

    def configure(self, config: RouterConfig | None = None, **options: Any) -> Self:
        """Replace the configuration.

        Keyword options are applied over the defaults, not over the
        previous configuration::

            router.configure(ordering="backward", asynchronous=True, not_found=show_404)
        """
        if config is not None and options:
            msg = "Pass either a RouterConfig or keyword options, not both"
            raise ConfigurationError(msg)
        self._engine.config = config or RouterConfig.from_options(**options)
        return self

    def define(self, name: str, pattern: str | re.Pattern[str]) -> Self:
        """Bind a ``<name>`` token to a regex fragment for later routes."""
        self._tree.params.define(name, pattern)
        return self

    # -- Registration --

    def route(
        self,
        phase_or_path: PhaseArg | PathArg,
        path_or_handler: PathArg | Callable[..., Any] | Iterable[Any] | None = None,
        handler: Callable[..., Any] | Iterable[Any] | None = None,
    ) -> Any:
        """Register a handler, or return a decorator that does.

        Accepted forms::

            router.route("/home", show_home)                 # entering
            router.route("leaving", "/home", hide_home)
            router.route(["entering", "active"], ["/a", "/b"], handler)

            @router.route("/home")                           # entering
            def show_home(): ...

            @router.route("after", "/home")
            def hide_home(): ...

        Phases and paths given as lists fan out to one registration each.
        """
        if handler is not None:
            return self._register(phase_or_path, path_or_handler, handler)  # type: ignore[arg-type]

        if path_or_handler is not None and not _is_path(path_or_handler):
            if not _is_handler(path_or_handler):
                msg = f"Cannot register {type(path_or_handler).__name__} as a route handler"
                raise ConfigurationError(msg)
            return self._register(Phase.ENTERING, phase_or_path, path_or_handler)  # type: ignore[arg-type]

        if path_or_handler is None:
            phase, path = Phase.ENTERING, phase_or_path
        else:
            phase, path = phase_or_path, path_or_handler

        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            self._register(phase, path, func)  # type: ignore[arg-type]
            return func

        return decorator

    def entering(self, path: PathArg) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Decorator registering an entering handler."""
        return self.route(Phase.ENTERING, path)

    on = entering

    def active(self, path: PathArg) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Decorator registering an active handler."""
        return self.route(Phase.ACTIVE, path)

    def leaving(self, path: PathArg) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Decorator registering a leaving handler."""
        return self.route(Phase.LEAVING, path)

    def _register(
        self,
        phases: PhaseArg,
        paths: PathArg,
        handler: Callable[..., Any] | Iterable[Any],
    ) -> Self:
        # Reject bad phases and handlers before the first insert.
        resolved = [require_phase(phase) for phase in _fan_out(phases)]
        normalized = as_handler(handler)
        for path in _fan_out(paths):
            for phase in resolved:
                self._tree.insert(phase, path, normalized)
        return self

    def mount(
        self,
        routes: MountEntries,
        prefix: PathLike | Sequence[str] | None = None,
    ) -> Self:
        """Register a nested route structure, optionally under *prefix*::

            router.mount({
                "/users": {
                    "on": list_users,
                    "<id>": {"on": show_user, "after": close_user},
                },
            })
        """
        self._tree.mount(routes, prefix)
        return self

    # -- Matching and dispatch --

    def match(self, phase: Phase | str, path: str) -> MatchResult:
        """Resolve *path* for *phase* without running anything."""
        return self._tree.match(phase, path)

    def dispatch(
        self,
        phase: Phase | str,
        path: str,
        callback: Callable[..., Any] | None = None,
        *,
        on_halt: Callable[[], Any] | None = None,
    ) -> DispatchOutcome:
        """Run the *phase* handlers for *path*.

        Entering or active for the path that is already current is
        suppressed. *callback* runs after the chain (see ``DispatchEngine``).
        """
        return self._coordinator.request(phase, path, callback, on_halt=on_halt)

    def navigate(self, path: str) -> DispatchOutcome:
        """Leave the current path, then enter and activate *path*."""
        return self._coordinator.navigate(path)

    # -- Navigator --

    def init(self, path: str | None = None) -> Self:
        """Follow the navigator and run the initial sync once loading completes.

        Raises ``UnsupportedEnvironment`` when no capable navigator is attached.
        """
        self._coordinator.init(path)
        return self

    def teardown(self) -> None:
        """Stop following the navigator."""
        self._coordinator.teardown()
