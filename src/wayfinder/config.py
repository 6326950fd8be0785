"""Router configuration.

RouterConfig is a frozen dataclass — immutable after creation, built once
from the defaults each time the router is configured. No shared mutable
defaults between router instances.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass, fields
from enum import StrEnum
from typing import Any

from wayfinder.errors import ConfigurationError
from wayfinder.routing.route import Phase


class Ordering(StrEnum):
    """Which handler-chain entries run, and in what order."""

    NONE = "none"  # only the deepest entry
    FORWARD = "forward"  # root to leaf
    BACKWARD = "backward"  # leaf to root

    @classmethod
    def parse(cls, value: "Ordering | str | bool | None") -> "Ordering":
        if value is None or value is False:
            return cls.NONE
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            msg = f"Unknown ordering {value!r}. Expected one of: none, forward, backward."
            raise ConfigurationError(msg) from None


class ParamScope(StrEnum):
    """Which captures a step receives under backward ordering.

    ``ancestors``: captures from the root down to the step's own depth.
    ``path``: every capture of the matched path, including deeper ones.

    Forward steps always receive the captures above their own depth.
    """

    ANCESTORS = "ancestors"
    PATH = "path"


type Callback = Callable[..., Any]

_HOOK_FIELDS = frozenset({"entering_hooks", "active_hooks", "leaving_hooks"})


def as_callables(value: Callback | Iterable[Callback] | None) -> tuple[Callback, ...]:
    """Normalize a single callable or a list of callables into a tuple."""
    if value is None:
        return ()
    if callable(value):
        return (value,)
    result = tuple(value)
    for item in result:
        if not callable(item):
            msg = f"Expected a callable, got {type(item).__name__}"
            raise ConfigurationError(msg)
    return result


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Router configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = RouterConfig(ordering=Ordering.FORWARD, asynchronous=True)

    Or build from loose keyword options (aliases accepted)::

        config = RouterConfig.from_options(ordering="backward", on=track_page)
    """

    # Location
    marker: str = "#!"
    base_url: str = "/"
    use_history: bool | None = None  # None: ask the navigator
    omit_marker: bool = False

    # Dispatch
    ordering: Ordering = Ordering.NONE
    param_scope: ParamScope = ParamScope.ANCESTORS
    asynchronous: bool = False

    # Fallback and global hooks
    not_found: tuple[Callback, ...] = ()
    entering_hooks: tuple[Callback, ...] = ()
    active_hooks: tuple[Callback, ...] = ()
    leaving_hooks: tuple[Callback, ...] = ()

    def hooks_for(self, phase: Phase) -> tuple[Callback, ...]:
        """Return the global auto hooks registered for *phase*."""
        if phase is Phase.ENTERING:
            return self.entering_hooks
        if phase is Phase.ACTIVE:
            return self.active_hooks
        return self.leaving_hooks

    @classmethod
    def from_options(cls, **options: Any) -> "RouterConfig":
        """Build a config from the defaults plus keyword options.

        Phase names and their aliases (``on``, ``before``, ``after``)
        set the global hook for that phase. Single callables and lists
        are both accepted for hooks and ``not_found``.

        Raises ``ConfigurationError`` for unknown options and for two
        options naming the same phase (``on`` and ``entering``).
        """
        known = {f.name for f in fields(cls)}
        values: dict[str, Any] = {}
        for key, value in options.items():
            phase = Phase.parse(key)
            if phase is not None or key in _HOOK_FIELDS:
                field = f"{phase.value}_hooks" if phase is not None else key
                if field in values:
                    msg = f"Option {key!r} sets {field}, which another option already set"
                    raise ConfigurationError(msg)
                values[field] = as_callables(value)
            elif key not in known:
                msg = f"Unknown router option {key!r}"
                raise ConfigurationError(msg)
            elif key == "ordering":
                values[key] = Ordering.parse(value)
            elif key == "param_scope":
                try:
                    values[key] = ParamScope(value)
                except ValueError:
                    msg = f"Unknown param_scope {value!r}. Expected 'ancestors' or 'path'."
                    raise ConfigurationError(msg) from None
            elif key == "not_found":
                values[key] = as_callables(value)
            else:
                values[key] = value
        return cls(**values)
