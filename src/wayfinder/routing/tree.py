"""Route tree with segment-by-segment path matching.

Each path segment is either a literal (exact text lookup) or a pattern
(regex, full-string match). Literals are tried first; pattern siblings
are tried in registration order and the first match wins.
"""

import logging
import re
from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
from typing import Any

from wayfinder.errors import ConfigurationError
from wayfinder.routing.params import ParamRegistry
from wayfinder.routing.route import (
    Handler,
    MatchResult,
    MatchStep,
    PatternEdge,
    Phase,
    RouteNode,
    as_handler,
)

logger = logging.getLogger("wayfinder.routing")

ROOT = "/"

# A resolved segment containing any of these is compiled as a regex
_PATTERN_SYNTAX = re.compile(r"[.\\+*?^\[\]$(){}|]")

type PathLike = str | re.Pattern[str]
type MountEntries = Mapping[str, Any] | Sequence[tuple[str, Any]]


def split_path(path: PathLike) -> list[str]:
    """Split a path into its non-empty segments.

    A compiled pattern contributes its source, with ``\\/`` read as ``/``::

        split_path("/users//42/")        -> ["users", "42"]
        split_path(re.compile(r"a\\/b"))  -> ["a", "b"]
    """
    if isinstance(path, re.Pattern):
        path = path.pattern.replace("\\/", "/")
    return [part for part in path.split("/") if part]


def normalize_path(path: PathLike) -> str:
    """Leading slash, no trailing slash, no empty segments. Root is ``/``."""
    return ROOT + "/".join(split_path(path))


def is_literal(segment: str) -> bool:
    return _PATTERN_SYNTAX.search(segment) is None


def require_phase(phase: Phase | str) -> Phase:
    parsed = Phase.parse(phase)
    if parsed is None:
        msg = f"Unknown phase {phase!r}. Expected entering, active, leaving (or on, before, after)."
        raise ConfigurationError(msg)
    return parsed


def _is_structure(value: object) -> bool:
    if isinstance(value, Mapping):
        return True
    return (
        isinstance(value, (list, tuple))
        and len(value) > 0
        and all(
            isinstance(item, tuple) and len(item) == 2 and isinstance(item[0], str)
            for item in value
        )
    )


def _entries(structure: MountEntries) -> Iterable[tuple[str, Any]]:
    if isinstance(structure, Mapping):
        return structure.items()
    return structure


class RouteTree:
    """Hierarchical route table.

    Usage::

        tree = RouteTree()
        tree.params.define("id", r"(\\d+)")
        tree.insert("entering", "/users/<id>", show_user)
        result = tree.match("entering", "/users/42")
        result.params  # ("42",)
    """

    __slots__ = ("_root", "params")

    def __init__(self, params: ParamRegistry | None = None) -> None:
        self.params = params or ParamRegistry()
        self._root = RouteNode()

    # -- Registration --

    def insert(
        self,
        phase: Phase | str,
        path: PathLike,
        handler: Callable[..., Any] | Iterable[Any] | Handler,
    ) -> None:
        """Register *handler* for *phase* at *path*.

        A second handler at the same phase and path joins the first in a
        group; both run in the same dispatch step, in registration order.
        """
        self._insert(require_phase(phase), split_path(path), as_handler(handler))

    def _insert(self, phase: Phase, segments: Sequence[str], handler: Handler) -> None:
        node = self._root
        for part in segments:
            node = self._child(node, self.params.resolve(part))

        existing = node.handlers.get(phase)
        node.handlers[phase] = handler if existing is None else existing.merge(handler)
        logger.debug("Registered %s handler at %s", phase, normalize_path("/".join(segments)))

    def _child(self, node: RouteNode, segment: str) -> RouteNode:
        if is_literal(segment):
            if segment not in node.literals:
                node.literals[segment] = RouteNode()
            return node.literals[segment]

        child = node.pattern_child(segment)
        if child is not None:
            return child

        try:
            regex = re.compile(segment)
        except re.error as exc:
            msg = f"Route segment {segment!r} is not a valid pattern: {exc}"
            raise ConfigurationError(msg) from exc

        child = RouteNode()
        node.patterns.append(PatternEdge(source=segment, regex=regex, node=child))
        return child

    def mount(
        self,
        structure: MountEntries,
        prefix: PathLike | Sequence[str] | None = None,
    ) -> None:
        """Register a nested route structure under *prefix*.

        Keys naming a phase are terminal: their value is a handler (or list
        of handlers) for that phase at the current prefix. Any other key is
        a path fragment whose value is a nested structure::

            tree.mount({
                "/users": {
                    "on": list_users,
                    "<id>": {"on": show_user, "after": close_user},
                },
            })
        """
        if not _is_structure(structure):
            logger.debug("Ignoring mount of %s", type(structure).__name__)
            return

        if prefix is None:
            base: list[str] = []
        elif isinstance(prefix, (str, re.Pattern)):
            base = split_path(prefix)
        else:
            base = [part for part in prefix if part]

        for key, value in _entries(structure):
            phase = Phase.parse(key)
            if phase is not None:
                self._insert(phase, base, as_handler(value))
            elif _is_structure(value):
                self.mount(value, [*base, *split_path(key)])
            else:
                logger.debug("Ignoring mount entry %r under %s", key, normalize_path("/".join(base)))

    # -- Matching --

    def match(self, phase: Phase | str, path: str) -> MatchResult:
        """Walk the tree for *path*, collecting *phase* handlers and captures.

        Returns a result with ``resolved=False`` (and no steps) when a
        segment has no matching child.
        """
        phase = require_phase(phase)
        parts = split_path(path)
        url = ROOT + "/".join(parts)

        node = self._root
        steps = [MatchStep(depth=0, segment=ROOT, handler=node.handlers.get(phase))]

        for depth, part in enumerate(parts, start=1):
            captures: tuple[str | None, ...] = ()
            child = node.literals.get(part)
            if child is None:
                for edge in node.patterns:
                    found = edge.regex.fullmatch(part)
                    if found is not None:
                        child = edge.node
                        captures = found.groups()
                        break
            if child is None:
                return MatchResult(phase=phase, path=url, resolved=False)

            node = child
            steps.append(MatchStep(depth, part, node.handlers.get(phase), captures))

        return MatchResult(phase=phase, path=url, resolved=True, steps=tuple(steps))

    # -- Introspection --

    def walk(self) -> Iterator[tuple[str, Phase, Handler]]:
        """Yield ``(pattern, phase, handler)`` for every registration, depth first."""
        yield from self._walk(self._root, [])

    def _walk(self, node: RouteNode, trail: list[str]) -> Iterator[tuple[str, Phase, Handler]]:
        pattern = ROOT + "/".join(trail)
        for phase in Phase:
            if phase in node.handlers:
                yield pattern, phase, node.handlers[phase]

        for segment, child in node.literals.items():
            yield from self._walk(child, [*trail, segment])

        for edge in node.patterns:
            yield from self._walk(edge.node, [*trail, edge.source])
