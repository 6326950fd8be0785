"""Navigation coordinator and the Navigator protocol.

The Navigator is whatever surface reports and performs navigation (a
browser bridge, a test double, a headless shell). The coordinator keeps
the current path, suppresses re-entering the path that is already
current, and asks the Navigator to reflect accepted transitions.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from wayfinder.config import RouterConfig
from wayfinder.dispatch.engine import DispatchEngine, DispatchOutcome
from wayfinder.errors import UnsupportedEnvironment
from wayfinder.routing.route import Phase
from wayfinder.routing.tree import ROOT, normalize_path

logger = logging.getLogger("wayfinder.navigation")

type Unsubscribe = Callable[[], None]


@runtime_checkable
class Navigator(Protocol):
    """Protocol for the navigation surface the router drives.

    No base class required::

        class BrowserBridge:
            supports_history = True

            def current_location(self) -> str: ...
            def subscribe(self, on_change): ...
            def push_history_entry(self, url: str) -> None: ...
            def assign_location(self, url: str) -> None: ...
            def on_load_complete(self, callback): ...
            def on_before_unload(self, callback): ...

    ``subscribe``, ``on_load_complete`` and ``on_before_unload`` return a
    zero-argument callable that removes the registration.
    ``on_load_complete`` calls back right away when loading already
    finished.
    """

    supports_history: bool

    def current_location(self) -> str: ...

    def subscribe(self, on_change: Callable[[str], None]) -> Unsubscribe: ...

    def push_history_entry(self, url: str) -> None: ...

    def assign_location(self, url: str) -> None: ...

    def on_load_complete(self, callback: Callable[[], None]) -> Unsubscribe: ...

    def on_before_unload(self, callback: Callable[[], None]) -> Unsubscribe: ...


@dataclass(slots=True)
class NavigationState:
    """Current normalized path and whether an entering dispatch happened yet."""

    path: str = ROOT
    initiated: bool = False


def compose_url(path: str, config: RouterConfig) -> str:
    """Build the history URL for a normalized *path*."""
    if path == ROOT:
        return config.base_url
    if config.omit_marker:
        return config.base_url + path[1:]
    return config.base_url + config.marker + path


def parse_location(location: str, config: RouterConfig) -> str | None:
    """Extract the route path from a location, or ``None`` if it has none."""
    if config.marker and location.startswith(config.marker):
        return location[len(config.marker) :]
    if config.omit_marker and location.startswith(config.base_url):
        return location[len(config.base_url) :]
    return None


class NavigationCoordinator:
    """Owns NavigationState and turns navigation requests into dispatches."""

    __slots__ = ("_engine", "_subscriptions", "_synced", "navigator", "state")

    def __init__(self, engine: DispatchEngine, navigator: Navigator | None = None) -> None:
        self._engine = engine
        self.navigator = navigator
        self.state = NavigationState()
        self._subscriptions: list[Unsubscribe] = []
        self._synced = False

    @property
    def config(self) -> RouterConfig:
        return self._engine.config

    # -- Requests --

    def request(
        self,
        phase: Phase | str,
        path: str,
        callback: Callable[..., Any] | None = None,
        *,
        on_halt: Callable[[], Any] | None = None,
    ) -> DispatchOutcome:
        """Dispatch a single phase for *path*.

        Entering or active for the current path is suppressed once the
        router is initiated. An accepted entering dispatch makes *path*
        current and reflects it on the navigator before handlers run.
        """
        parsed = Phase.parse(phase)
        if parsed is None:
            logger.debug("Ignoring dispatch for unknown phase %r", phase)
            return DispatchOutcome.IGNORED

        url = normalize_path(path)
        if parsed is not Phase.LEAVING and self._is_current(url):
            logger.debug("Suppressed %s %s: already current", parsed, url)
            return DispatchOutcome.SUPPRESSED

        if parsed is Phase.ENTERING:
            self._commit(url)
        return self._engine.run(parsed, url, callback, on_halt=on_halt)

    def navigate(self, path: str) -> DispatchOutcome:
        """Transition to *path*: leaving the old path, then entering and active.

        Returns the outcome of the entering dispatch, or ``SUPPRESSED``
        when *path* is already current.
        """
        url = normalize_path(path)
        if self._is_current(url):
            logger.debug("Suppressed navigation to %s: already current", url)
            return DispatchOutcome.SUPPRESSED

        self._engine.run(Phase.LEAVING, self.state.path)
        return self._enter(url)

    def _enter(self, url: str) -> DispatchOutcome:
        self._commit(url)
        outcome = self._engine.run(Phase.ENTERING, url)
        self._engine.run(Phase.ACTIVE, url)
        return outcome

    def _is_current(self, url: str) -> bool:
        return self.state.initiated and self.state.path == url

    def _commit(self, url: str) -> None:
        self.state.initiated = True
        self.state.path = url
        self._reflect(url)

    def _reflect(self, url: str) -> None:
        navigator = self.navigator
        if navigator is None:
            return

        config = self.config
        use_history = config.use_history
        if use_history is None:
            use_history = bool(getattr(navigator, "supports_history", False))

        if use_history:
            target = compose_url(url, config)
            logger.debug("Pushing history entry %s", target)
            navigator.push_history_entry(target)
        else:
            target = config.marker + url
            logger.debug("Assigning location %s", target)
            navigator.assign_location(target)

    # -- Navigator wiring --

    def init(self, path: str | None = None) -> None:
        """Attach to the navigator and schedule the initial sync.

        Raises ``UnsupportedEnvironment`` when there is no navigator or it
        cannot report navigation changes.
        """
        navigator = self.navigator
        if navigator is None or not callable(getattr(navigator, "subscribe", None)):
            msg = "Navigator does not support change notification"
            raise UnsupportedEnvironment(msg)

        config = self.config
        if path:
            if config.base_url and path.startswith(config.base_url):
                path = path[len(config.base_url) :]
        else:
            path = parse_location(navigator.current_location(), config) or ""
        self.state.path = normalize_path(path)

        self.teardown()
        self._subscriptions.append(navigator.subscribe(self._on_change))
        self._subscriptions.append(navigator.on_before_unload(self._on_before_unload))
        if not self._synced:
            self._subscriptions.append(navigator.on_load_complete(self._on_load))

    def teardown(self) -> None:
        """Release every navigator registration made by ``init()``."""
        subscriptions, self._subscriptions = self._subscriptions, []
        for unsubscribe in subscriptions:
            unsubscribe()

    def _on_load(self) -> None:
        self._synced = True
        url = self.state.path
        if self._is_current(url):
            return
        self._enter(url)

    def _on_change(self, location: str) -> None:
        path = parse_location(location, self.config)
        if path is None:
            logger.debug("Ignoring location without a route path: %r", location)
            return
        self.navigate(path)

    def _on_before_unload(self) -> None:
        self._engine.run(Phase.LEAVING, self.state.path)
