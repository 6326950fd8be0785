"""Test utilities for wayfinder routers.

``MemoryNavigator`` is an in-memory Navigator: it records what the router
asks for and lets tests play the user (navigate, finish loading, unload).
``Recorder`` builds handlers that log their calls in order::

    from wayfinder.testing import MemoryNavigator, Recorder

    nav = MemoryNavigator("#!/users/42")
    calls = Recorder()
    router = Router(navigator=nav)
    router.route("/users/<id>", calls.handler("user"))
    router.init()
    nav.go("#!/about")
"""

from collections.abc import Callable
from typing import Any


def _noop() -> None:
    return None


class MemoryNavigator:
    """Navigator backed by a location string and plain callback lists.

    Mirrors browser behaviour where it matters to the router: pushing a
    history entry notifies nobody, assigning a new hash notifies change
    listeners, and load callbacks fire right away once loading finished.
    """

    def __init__(
        self,
        location: str = "",
        *,
        supports_history: bool = True,
        loaded: bool = True,
    ) -> None:
        self.location = location
        self.supports_history = supports_history
        self.loaded = loaded
        self.pushed: list[str] = []
        self.assigned: list[str] = []
        self._listeners: list[Callable[[str], None]] = []
        self._load_callbacks: list[Callable[[], None]] = []
        self._unload_callbacks: list[Callable[[], None]] = []

    # -- Navigator protocol --

    def current_location(self) -> str:
        """The fragment (``#...``) when there is one, else the whole location."""
        _, sep, fragment = self.location.partition("#")
        return f"#{fragment}" if sep else self.location

    def subscribe(self, on_change: Callable[[str], None]) -> Callable[[], None]:
        self._listeners.append(on_change)
        return lambda: self._discard(self._listeners, on_change)

    def push_history_entry(self, url: str) -> None:
        self.pushed.append(url)
        self.location = url

    def assign_location(self, url: str) -> None:
        self.assigned.append(url)
        self._move(url)

    def on_load_complete(self, callback: Callable[[], None]) -> Callable[[], None]:
        if self.loaded:
            callback()
            return _noop
        self._load_callbacks.append(callback)
        return lambda: self._discard(self._load_callbacks, callback)

    def on_before_unload(self, callback: Callable[[], None]) -> Callable[[], None]:
        self._unload_callbacks.append(callback)
        return lambda: self._discard(self._unload_callbacks, callback)

    # -- Simulated user actions --

    def go(self, location: str) -> None:
        """Navigate like a user would (link click, back button, typed URL)."""
        self._move(location)

    def finish_loading(self) -> None:
        self.loaded = True
        callbacks, self._load_callbacks = self._load_callbacks, []
        for callback in callbacks:
            callback()

    def unload(self) -> None:
        for callback in list(self._unload_callbacks):
            callback()

    @property
    def listener_count(self) -> int:
        return len(self._listeners) + len(self._load_callbacks) + len(self._unload_callbacks)

    # -- Internals --

    def _move(self, url: str) -> None:
        before = self.current_location()
        if url.startswith("#"):
            self.location = self.location.partition("#")[0] + url
        else:
            self.location = url
        after = self.current_location()
        if after != before:
            for listener in list(self._listeners):
                listener(after)

    @staticmethod
    def _discard(callbacks: list[Any], callback: Any) -> None:
        if callback in callbacks:
            callbacks.remove(callback)


class Recorder:
    """Factory for handlers that append ``(name, args)`` to ``calls``."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple[Any, ...]]] = []

    @property
    def names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def handler(self, name: str, returning: Any = None) -> Callable[..., Any]:
        """A synchronous handler that records its arguments."""

        def record(*args: Any) -> Any:
            self.calls.append((name, args))
            return returning

        record.__name__ = name
        return record

    def advancing(self, name: str, proceed: bool = True) -> Callable[..., None]:
        """An asynchronous handler that records its arguments and advances at once.

        The trailing continuation is not recorded.
        """

        def record(*args: Any) -> None:
            *params, advance = args
            self.calls.append((name, tuple(params)))
            advance(proceed)

        record.__name__ = name
        return record

    def holding(self, name: str) -> tuple[Callable[..., None], list[Callable[..., None]]]:
        """An asynchronous handler that keeps its continuation for the test to call."""
        held: list[Callable[..., None]] = []

        def record(*args: Any) -> None:
            *params, advance = args
            self.calls.append((name, tuple(params)))
            held.append(advance)

        record.__name__ = name
        return record, held
