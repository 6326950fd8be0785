"""Dispatch engine — run the handler chain of a matched path.

Given a phase and a path, the engine runs the global hooks for the phase,
matches the path against the route tree, orders the resulting handler
chain, and executes it either directly or through a ContinuationQueue.

Ordering policies:

* ``none``: only the deepest handler runs, with every capture of the path.
* ``forward``: root to leaf, each step called with the captures of the
  shallower depths. A callable returning ``False`` stops the walk.
* ``backward``: leaf to root, same short-circuit rule. The arguments are
  chosen by ``ParamScope``.

In asynchronous mode every callable receives a trailing ``advance``
continuation and the walk is stopped with ``advance(False)`` instead.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from wayfinder.config import Ordering, ParamScope, RouterConfig
from wayfinder.dispatch.queue import Advance, ContinuationQueue, Unit
from wayfinder.routing.route import Handler, MatchResult, Phase
from wayfinder.routing.tree import RouteTree

logger = logging.getLogger("wayfinder.dispatch")


class DispatchOutcome(StrEnum):
    """What a dispatch call did."""

    MATCHED = "matched"
    NOT_FOUND = "not_found"
    SUPPRESSED = "suppressed"  # same path re-entered, nothing ran
    IGNORED = "ignored"  # unknown phase name


@dataclass(frozen=True, slots=True)
class Step:
    """One handler-chain entry and the arguments it is called with."""

    depth: int
    handler: Handler
    args: tuple[str | None, ...]


def plan_steps(
    result: MatchResult,
    ordering: Ordering = Ordering.NONE,
    scope: ParamScope = ParamScope.ANCESTORS,
) -> list[Step]:
    """Order the handler chain of a resolved match into execution steps.

    Forward steps receive the captures of the depths above their own.
    Backward steps receive what *scope* selects.
    """
    if ordering is Ordering.NONE:
        for step in reversed(result.steps):
            if step.handler is not None:
                return [Step(step.depth, step.handler, result.params)]
        return []

    steps: list[Step] = []
    seen: list[str | None] = []
    for match_step in result.steps:
        above = tuple(seen)
        seen.extend(match_step.captures)
        if match_step.handler is None:
            continue
        if ordering is Ordering.FORWARD:
            args = above
        elif scope is ParamScope.PATH:
            args = result.params
        else:
            args = tuple(seen)
        steps.append(Step(match_step.depth, match_step.handler, args))

    if ordering is Ordering.BACKWARD:
        steps.reverse()
    return steps


def _as_unit(step: Step) -> Unit:
    def unit(advance: Advance) -> None:
        for fn in step.handler.callables:
            fn(*step.args, advance)

    return unit


class DispatchEngine:
    """Runs hooks, matching, and handler execution for single phases.

    Holds no navigation state; deduplication is the coordinator's job.
    """

    __slots__ = ("config", "tree")

    def __init__(self, tree: RouteTree, config: RouterConfig | None = None) -> None:
        self.tree = tree
        self.config = config or RouterConfig()

    def run(
        self,
        phase: Phase,
        path: str,
        callback: Callable[..., Any] | None = None,
        *,
        on_halt: Callable[[], Any] | None = None,
    ) -> DispatchOutcome:
        """Dispatch *phase* for *path*.

        *callback* runs once the chain is done: called with no arguments in
        synchronous mode, or as the final queue unit (receiving ``advance``)
        in asynchronous mode. It does not run for unmatched paths.
        *on_halt* runs if an asynchronous unit halts the queue.
        """
        config = self.config
        for hook in config.hooks_for(phase):
            hook()

        result = self.tree.match(phase, path)
        if not result.resolved:
            logger.debug("No route for %s %s", phase, result.path)
            for fn in config.not_found:
                fn()
            return DispatchOutcome.NOT_FOUND

        steps = plan_steps(result, config.ordering, config.param_scope)
        if not steps:
            logger.debug("No %s handlers at %s", phase, result.path)

        if config.asynchronous:
            units = [_as_unit(step) for step in steps]
            if callback is not None:
                units.append(callback)
            ContinuationQueue(units, on_halt=on_halt).start()
        else:
            self._run_sync(steps, result)
            if callback is not None:
                callback()

        return DispatchOutcome.MATCHED

    def _run_sync(self, steps: list[Step], result: MatchResult) -> None:
        for step in steps:
            stop = False
            for fn in step.handler.callables:
                if fn(*step.args) is False:
                    stop = True
            if stop:
                logger.debug(
                    "%s chain for %s stopped at depth %d", result.phase, result.path, step.depth
                )
                return
