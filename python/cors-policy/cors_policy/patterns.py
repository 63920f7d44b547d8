"""Glob-style origin pattern compiler.

Operator-authored patterns such as ``https://preview-*.vercel.app`` are
turned into anchored regular expressions. A ``*`` stands for one or more
characters of a single DNS label, so a match can never run across a ``.``,
``:``, ``/`` or ``@`` into another host. A label may hold at most one
``*``, which keeps matching linear in the length of the origin.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache

WILDCARD = "*"
LABEL_RUN = "[A-Za-z0-9-]+"

_PATTERN_SHAPE = re.compile(r"^https?://[A-Za-z0-9.*-]+(:\d{1,5})?$")


@dataclass(frozen=True)
class CompiledPattern:
    """A pattern that compiled into a matcher."""

    pattern: str
    regex: re.Pattern[str]

    def matches(self, origin: str) -> bool:
        return self.regex.fullmatch(origin) is not None


@dataclass(frozen=True)
class InvalidPattern:
    """A pattern that could not be compiled. Never matches anything."""

    pattern: str
    reason: str

    def matches(self, origin: str) -> bool:
        return False


@lru_cache(maxsize=512)
def compile_pattern(pattern: str) -> CompiledPattern | InvalidPattern:
    """Compile a wildcard origin pattern.

    Returns an InvalidPattern instead of raising, so callers can keep
    validating against the remaining patterns.
    """
    if not _PATTERN_SHAPE.match(pattern):
        return InvalidPattern(pattern, "expected http(s)://host[:port] with '*' wildcards")
    if WILDCARD * 2 in pattern:
        return InvalidPattern(pattern, "adjacent wildcards are not allowed")
    host = pattern.partition("://")[2].partition(":")[0]
    if any(label.count(WILDCARD) > 1 for label in host.split(".")):
        return InvalidPattern(pattern, "at most one wildcard per host label")

    source = LABEL_RUN.join(re.escape(part) for part in pattern.split(WILDCARD))
    try:
        regex = re.compile(f"^{source}$")
    except re.error as exc:
        return InvalidPattern(pattern, str(exc))
    return CompiledPattern(pattern, regex)
