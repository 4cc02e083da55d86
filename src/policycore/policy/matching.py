"""Wildcard matching for statement actions and resources.

``*`` stands for any run of characters, including none. Everything else in
a pattern is literal (regex metacharacters are escaped) and the match is
anchored at both ends and case-sensitive.
"""

from __future__ import annotations

import functools
import re
from typing import Iterable

WILDCARD = "*"


@functools.lru_cache(maxsize=1024)
def _compile(pattern: str) -> re.Pattern[str]:
    regex = ".*".join(re.escape(segment) for segment in pattern.split(WILDCARD))
    return re.compile(regex, re.DOTALL)


def matches(pattern: str | Iterable[str], value: str) -> bool:
    """Check if ``value`` matches a pattern or any pattern of a sequence.

    Args:
        pattern: A single pattern string, or an iterable of patterns
                 (logical OR, stops at the first match).
        value: Literal action or resource name.

    Returns:
        True if the value matches.

    Example::

        matches("*:document", "read:document")           # True
        matches("*:document", "document")                # False
        matches("document:*:sensitive", "document:sensitive")  # False
        matches(["read:*", "write:document"], "read:report")   # True
    """
    if not isinstance(pattern, str):
        return any(matches(p, value) for p in pattern)

    if WILDCARD not in pattern:
        return pattern == value
    return _compile(pattern).fullmatch(value) is not None


__all__ = ["WILDCARD", "matches"]
