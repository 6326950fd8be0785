"""Continuation queue — run asynchronous units strictly one after another.

A unit is any callable accepting one argument, its continuation::

    def load_profile(advance):
        fetch(on_done=lambda: advance())     # proceed to the next unit
        # or advance(False) to halt the queue

Each continuation honours only its first call, so a group of handlers
sharing one continuation cannot advance the queue twice. Continuations
called while a unit is still running are trampolined instead of nesting,
which keeps long synchronous chains from growing the stack.
"""

import logging
from collections import deque
from collections.abc import Callable, Iterable
from typing import Any

logger = logging.getLogger("wayfinder.dispatch")

type Advance = Callable[..., None]
type Unit = Callable[[Advance], Any]


class Continuation:
    """Advance callback handed to one unit. Only the first call counts."""

    __slots__ = ("_fired", "_queue")

    def __init__(self, queue: "ContinuationQueue") -> None:
        self._queue = queue
        self._fired = False

    @property
    def fired(self) -> bool:
        return self._fired

    def __call__(self, proceed: object = True) -> None:
        if self._fired:
            return
        self._fired = True
        self._queue._resume(proceed is not False)


class ContinuationQueue:
    """Sequential runner for continuation-passing units.

    Usage::

        queue = ContinuationQueue([step_one, step_two, finish])
        queue.start()

    Exceptions raised by a unit propagate to whoever started the queue or
    called the continuation that launched the unit.
    """

    __slots__ = ("_halted", "_on_halt", "_running", "_started", "_units", "_wanted")

    def __init__(
        self,
        units: Iterable[Unit] = (),
        *,
        on_halt: Callable[[], Any] | None = None,
    ) -> None:
        self._units: deque[Unit] = deque(units)
        self._on_halt = on_halt
        self._started = False
        self._running = False
        self._wanted = False
        self._halted = False

    @property
    def halted(self) -> bool:
        """True once a unit called ``advance(False)``."""
        return self._halted

    @property
    def pending(self) -> int:
        """Number of units that have not started."""
        return len(self._units)

    @property
    def done(self) -> bool:
        """True when every unit has started or the queue halted."""
        return self._halted or (self._started and not self._units)

    def start(self) -> None:
        """Run the first unit. A no-op when empty or already started."""
        if self._started:
            return
        self._started = True
        self._resume(True)

    def _resume(self, proceed: bool) -> None:
        if self._halted:
            return
        if not proceed:
            self._halted = True
            logger.debug("Continuation queue halted with %d unit(s) pending", len(self._units))
            if self._on_halt is not None:
                self._on_halt()
            return

        self._wanted = True
        if self._running:
            # Called from inside the running unit; the loop below picks it up.
            return

        self._running = True
        try:
            while self._wanted and self._units and not self._halted:
                self._wanted = False
                unit = self._units.popleft()
                unit(Continuation(self))
        finally:
            self._running = False
