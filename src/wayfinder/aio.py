"""anyio integration for asynchronous dispatch.

The engine never awaits: asynchronous chains move forward when handlers
call their ``advance`` continuation. These helpers let anyio code wait for
a dispatch to finish and write chain steps as ``async def`` functions::

    router = Router(asynchronous=True, ordering="forward")

    async with anyio.create_task_group() as tg:
        router.route("/users/<id>/profile", spawning(tg, load_profile))
        outcome = await settle(router, "entering", "/users/42/profile")
"""

import inspect
from collections.abc import Callable
from typing import Any

import anyio
from anyio.abc import TaskGroup

from wayfinder.dispatch.engine import DispatchOutcome
from wayfinder.routing.route import Phase
from wayfinder.router import Router


async def _invoke(handler: Callable[..., Any], *args: Any) -> Any:
    """Call a handler and await the result if it's a coroutine."""
    result = handler(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


def spawning(task_group: TaskGroup, handler: Callable[..., Any]) -> Callable[..., None]:
    """Adapt a sync or async handler to the continuation-passing convention.

    The returned callable starts *handler* in *task_group* and advances the
    queue when it returns; a return value of ``False`` halts the chain.
    Exceptions propagate through the task group and the queue stays put.
    """

    def start(*args: Any) -> None:
        *params, advance = args

        async def run() -> None:
            result = await _invoke(handler, *params)
            advance(result is not False)

        task_group.start_soon(run)

    return start


async def settle(
    router: Router,
    phase: Phase | str,
    path: str,
    *,
    timeout: float | None = None,
) -> DispatchOutcome:
    """Dispatch *phase* for *path* and wait until its chain finishes.

    Returns as soon as the dispatch is suppressed, ignored or unmatched.
    A chain halted with ``advance(False)`` also counts as finished.
    Raises ``TimeoutError`` if the chain does not finish within *timeout*
    seconds; the stalled chain itself is left as it is.
    """
    finished = anyio.Event()

    def complete(*_: Any) -> None:
        finished.set()

    outcome = router.dispatch(phase, path, complete, on_halt=finished.set)
    if outcome is not DispatchOutcome.MATCHED:
        return outcome

    with anyio.fail_after(timeout):
        await finished.wait()
    return outcome
