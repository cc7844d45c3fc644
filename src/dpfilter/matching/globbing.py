"""Glob compilation on top of :mod:`fnmatch`.

``fnmatch.translate`` silently treats an unclosed ``[`` as a literal
bracket; filter configuration wants that to be an error instead, so the
pattern is validated before translation.
"""
from __future__ import annotations

import re
from fnmatch import translate


class GlobError(ValueError):
    """Raised when a glob pattern cannot be compiled."""


def _check_brackets(pattern: str) -> None:
    i, n = 0, len(pattern)
    while i < n:
        c = pattern[i]
        i += 1
        if c != "[":
            continue
        j = i
        if j < n and pattern[j] == "!":
            j += 1
        # A leading ']' is part of the class, not its terminator
        if j < n and pattern[j] == "]":
            j += 1
        end = pattern.find("]", j)
        if end < 0:
            raise GlobError("unexpected end of input")
        i = end + 1


def compile_glob(pattern: str) -> re.Pattern[str]:
    """Compile a glob into a regex matching the whole input.

    Supports ``*`` (any run), ``?`` (one character) and bracket classes,
    including ``[!...]`` negation and ranges.
    """
    _check_brackets(pattern)
    return re.compile(translate(pattern))
