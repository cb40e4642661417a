"""Name pattern matching shared by find, cb and the tree walker."""

from __future__ import annotations

import re
from typing import Callable

NameMatcher = Callable[[str], bool]


def compile_pattern(pattern: str) -> NameMatcher:
    """Compile *pattern* into a case-insensitive predicate over names.

    ``*`` matches any run of characters (including none); every other
    character is literal.  A pattern without ``*`` matches any name that
    contains it as a substring, so ``vasu find readme`` finds
    ``README.md``.  The bare pattern ``*`` matches everything, dotfiles
    included.
    """
    if pattern == "*":
        return lambda name: True
    if "*" not in pattern:
        needle = pattern.lower()
        return lambda name: needle in name.lower()
    regex = re.compile(
        ".*".join(re.escape(part) for part in pattern.split("*")),
        re.IGNORECASE | re.DOTALL,
    )
    return lambda name: regex.fullmatch(name) is not None
