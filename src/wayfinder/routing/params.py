"""Named parameter tokens for route segments.

A token like ``<id>`` inside a segment is replaced by the regex fragment
registered for it. A fragment without a group of its own is wrapped in
one, so a token always captures::

    registry = ParamRegistry()
    registry.define("id", r"\\d+")
    registry.resolve("user-<id>")   # -> "user-(\\d+)"
"""

import logging
import re
from collections.abc import Mapping
from types import MappingProxyType

logger = logging.getLogger("wayfinder.routing")

TOKEN_NAME = re.compile(r"[A-Za-z]+")
TOKEN = re.compile(r"<[A-Za-z]+>")

# Characters the original router treats as regex syntax
_METACHARS = re.compile(r"([.\\+*?^\[\]$(){}])")


def quote_meta(text: str) -> str:
    """Escape every regex metacharacter in *text*."""
    return _METACHARS.sub(r"\\\1", text)


def capturing(fragment: str) -> str:
    """Wrap *fragment* in a group unless it already has one."""
    try:
        groups = re.compile(fragment).groups
    except re.error:
        # Left as is; compiling the route segment reports the error.
        return fragment
    return fragment if groups else f"({fragment})"


class ParamRegistry:
    """Token name -> regex fragment, keyed by the bracketed ``<name>`` form."""

    __slots__ = ("_tokens",)

    def __init__(self) -> None:
        self._tokens: dict[str, str] = {}

    def define(self, name: str, fragment: str | re.Pattern[str]) -> bool:
        """Bind *name* to a regex fragment. Last definition wins.

        Names that do not match ``[A-Za-z]+`` are ignored and ``False`` is
        returned.
        """
        if not TOKEN_NAME.fullmatch(name):
            logger.debug("Ignoring param token with invalid name %r", name)
            return False
        source = fragment.pattern if isinstance(fragment, re.Pattern) else fragment
        self._tokens[f"<{name}>"] = source
        return True

    def resolve(self, segment: str) -> str:
        """Substitute every ``<name>`` token of *segment*.

        Registered fragments always capture. Unregistered tokens are kept
        as literal text.
        """

        def substitute(m: re.Match[str]) -> str:
            fragment = self._tokens.get(m.group(0))
            return capturing(fragment) if fragment else quote_meta(m.group(0))

        return TOKEN.sub(substitute, segment)

    @property
    def tokens(self) -> Mapping[str, str]:
        return MappingProxyType(self._tokens)
