"""Phase, Handler, RouteNode, and MatchResult types."""

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import StrEnum
from itertools import chain
from typing import Any

from wayfinder.errors import ConfigurationError

# Names used by the original hash router, kept as aliases
PHASE_ALIASES: dict[str, str] = {
    "on": "entering",
    "before": "active",
    "after": "leaving",
}


class Phase(StrEnum):
    """Lifecycle phase of a path.

    ``entering``: the path becomes current.
    ``active``: the path is current (fired right after entering).
    ``leaving``: the path stops being current.
    """

    ENTERING = "entering"
    ACTIVE = "active"
    LEAVING = "leaving"

    @classmethod
    def parse(cls, name: object) -> "Phase | None":
        """Return the phase for *name* or an alias of it, else ``None``."""
        if isinstance(name, cls):
            return name
        if not isinstance(name, str):
            return None
        try:
            return cls(PHASE_ALIASES.get(name, name))
        except ValueError:
            return None


@dataclass(frozen=True, slots=True)
class Single:
    """One handler callable registered at a node."""

    fn: Callable[..., Any]

    @property
    def callables(self) -> tuple[Callable[..., Any], ...]:
        return (self.fn,)

    def merge(self, other: "Handler") -> "Group":
        return Group((self.fn, *other.callables))


@dataclass(frozen=True, slots=True)
class Group:
    """Handlers registered at the same node and phase.

    All callables of a group run within the same dispatch step.
    """

    fns: tuple[Callable[..., Any], ...]

    @property
    def callables(self) -> tuple[Callable[..., Any], ...]:
        return self.fns

    def merge(self, other: "Handler") -> "Group":
        return Group((*self.fns, *other.callables))


type Handler = Single | Group


def as_handler(value: Callable[..., Any] | Iterable[Any] | Handler) -> Handler:
    """Wrap a callable or a (possibly nested) list of callables.

    Raises ``ConfigurationError`` for empty lists and non-callables.
    """
    if isinstance(value, (Single, Group)):
        return value
    if callable(value):
        return Single(value)
    if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
        msg = f"Handler must be a callable or a list of callables, got {type(value).__name__}"
        raise ConfigurationError(msg)
    fns = tuple(chain.from_iterable(as_handler(item).callables for item in value))
    if not fns:
        msg = "Handler list is empty"
        raise ConfigurationError(msg)
    return Group(fns)


@dataclass(slots=True)
class PatternEdge:
    """A non-literal child: regex source, compiled regex, and target node."""

    source: str
    regex: re.Pattern[str]
    node: "RouteNode"


class RouteNode:
    """A node in the route tree. One per distinct segment at a given depth."""

    __slots__ = ("handlers", "literals", "patterns")

    def __init__(self) -> None:
        # Literal segment children: "users" -> node
        self.literals: dict[str, RouteNode] = {}
        # Pattern children, first match wins
        self.patterns: list[PatternEdge] = []
        self.handlers: dict[Phase, Handler] = {}

    def pattern_child(self, source: str) -> "RouteNode | None":
        for edge in self.patterns:
            if edge.source == source:
                return edge.node
        return None


@dataclass(frozen=True, slots=True)
class MatchStep:
    """One visited depth of a match."""

    depth: int
    segment: str
    handler: Handler | None = None
    captures: tuple[str | None, ...] = ()


@dataclass(frozen=True, slots=True)
class MatchResult:
    """Result of walking the route tree for one phase and path.

    ``resolved`` is False when some segment had no matching child; in that
    case ``steps`` is empty and not-found handling applies.
    """

    phase: Phase
    path: str
    resolved: bool
    steps: tuple[MatchStep, ...] = field(default=())

    @property
    def handlers(self) -> tuple[Handler, ...]:
        """The handler chain: every non-empty entry, shallow to deep."""
        return tuple(step.handler for step in self.steps if step.handler is not None)

    @property
    def captures(self) -> tuple[tuple[str | None, ...], ...]:
        """One capture array per depth that produced groups."""
        return tuple(step.captures for step in self.steps if step.captures)

    @property
    def params(self) -> tuple[str | None, ...]:
        """All captures flattened in depth order."""
        return tuple(chain.from_iterable(step.captures for step in self.steps))
