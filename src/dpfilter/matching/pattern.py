"""Filter token classification and compilation.

A token is one of:

    literal      exact string comparison
    /regex/      unanchored regular expression search
    glob         anything containing ``*``, ``?``, ``[`` or ``]``

Any token may be prefixed with ``!`` to negate it.
"""
from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass
from typing import Iterable

from .globbing import compile_glob

logger = logging.getLogger(__name__)

NEGATION_PREFIX = "!"
_GLOB_CHARS = frozenset("*?[]")


class PatternKind(enum.Enum):
    LITERAL = "literal"
    REGEX = "regex"
    GLOB = "glob"


def strip_negation(token: str) -> tuple[str, bool]:
    """Return ``(token_without_prefix, negated)``."""
    if token.startswith(NEGATION_PREFIX):
        return token[len(NEGATION_PREFIX):], True
    return token, False


def is_regex(token: str) -> bool:
    return len(token) > 2 and token[0] == "/" and token[-1] == "/"


def is_globbed(token: str) -> bool:
    return any(c in _GLOB_CHARS for c in token)


@dataclass(frozen=True)
class Pattern:
    """A compiled filter token.

    ``compiled`` is ``None`` for literals; regexes and globs both carry a
    compiled :class:`re.Pattern` but differ in anchoring.
    """

    kind: PatternKind
    text: str
    negated: bool = False
    compiled: re.Pattern[str] | None = None

    def matches(self, value: str) -> bool:
        """Raw match, ignoring negation."""
        if self.kind is PatternKind.LITERAL:
            return value == self.text
        if self.kind is PatternKind.REGEX:
            return self.compiled.search(value) is not None  # type: ignore[union-attr]
        return self.compiled.match(value) is not None  # type: ignore[union-attr]


def compile_pattern(token: str) -> Pattern:
    """Classify and compile a single token.

    Raises:
        re.error:   invalid ``/regex/`` body.
        GlobError:  malformed glob (e.g. unterminated ``[``).
    """
    text, negated = strip_negation(token)
    if is_regex(text):
        return Pattern(PatternKind.REGEX, text, negated, re.compile(text[1:-1]))
    if is_globbed(text):
        return Pattern(PatternKind.GLOB, text, negated, compile_glob(text))
    return Pattern(PatternKind.LITERAL, text, negated)


def compile_patterns(tokens: Iterable[str]) -> list[Pattern]:
    """Compile every token; the first failure aborts the whole list."""
    patterns = [compile_pattern(t) for t in tokens]
    logger.debug("Compiled %d filter patterns", len(patterns))
    return patterns
