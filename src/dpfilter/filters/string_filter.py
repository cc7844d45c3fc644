"""String filters — combine compiled patterns for one field.

Two variants share construction but differ in how positive and negated
patterns interact:

``BasicStringFilter``
    Strict exclusion semantics. First match wins, in the order
    literal > any negated literal > regex > glob.

``OverridableStringFilter``
    Gitignore-like semantics. Positive matches accumulate, but a matching
    negated pattern vetoes the result no matter where it appears.
"""
from __future__ import annotations

from typing import Iterable, Protocol, runtime_checkable

from ..matching.pattern import Pattern, PatternKind, compile_patterns


@runtime_checkable
class StringFilter(Protocol):
    def matches(self, value: str) -> bool:
        ...


class PatternStringFilter:
    """Shared construction for both variants.

    Regexes and globs are kept in configuration order; literals are handed
    to ``_index_literals`` so each variant can resolve repeats its own way.
    An empty item list is accepted and matches nothing.
    """

    def __init__(self, items: Iterable[str]) -> None:
        self._regexps: list[Pattern] = []
        self._globs: list[Pattern] = []
        literals: list[Pattern] = []

        for pattern in compile_patterns(items):
            if pattern.kind is PatternKind.REGEX:
                self._regexps.append(pattern)
            elif pattern.kind is PatternKind.GLOB:
                self._globs.append(pattern)
            else:
                literals.append(pattern)

        self._index_literals(literals)

    def _index_literals(self, literals: list[Pattern]) -> None:
        raise NotImplementedError

    def matches(self, value: str) -> bool:
        raise NotImplementedError

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(regexps={[p.text for p in self._regexps]!r}, "
            f"globs={[p.text for p in self._globs]!r})"
        )


class BasicStringFilter(PatternStringFilter):
    """Strict string filter."""

    def _index_literals(self, literals: list[Pattern]) -> None:
        # literal text -> negated; a repeated literal keeps its last flag
        self._literals: dict[str, bool] = {p.text: p.negated for p in literals}
        self._any_literal_negated = any(self._literals.values())

    def matches(self, value: str) -> bool:
        negated = self._literals.get(value)
        if negated is not None:
            return not negated
        # A negated literal turns the filter into "everything except",
        # so anything not named explicitly counts as matched.
        if self._any_literal_negated:
            return True

        for pattern in self._regexps:
            if pattern.matches(value) != pattern.negated:
                return True

        for pattern in self._globs:
            if pattern.matches(value) != pattern.negated:
                return True

        return False


class OverridableStringFilter(PatternStringFilter):
    """Overridable string filter.

    Usage::

        f = OverridableStringFilter(["process_*", "!process_cpu"])
        f.matches("process_mem")   # True
        f.matches("process_cpu")   # False — the negation vetoes the glob
    """

    def _index_literals(self, literals: list[Pattern]) -> None:
        # A negated literal vetoes even when the same text is also listed
        # as a positive one, wherever either appears.
        self._vetoed = {p.text for p in literals if p.negated}
        self._accepted = {p.text for p in literals if not p.negated}

    def matches(self, value: str) -> bool:
        if value in self._vetoed:
            return False
        matched = value in self._accepted

        for pattern in (*self._regexps, *self._globs):
            if pattern.matches(value):
                if pattern.negated:
                    return False
                matched = True

        return matched
