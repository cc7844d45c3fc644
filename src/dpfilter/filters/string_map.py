"""Filters over a whole dimension set."""
from __future__ import annotations

import logging
from typing import ClassVar, Mapping, Sequence

from .errors import FilterConfigError
from .string_filter import (
    BasicStringFilter,
    OverridableStringFilter,
    PatternStringFilter,
    StringFilter,
)

logger = logging.getLogger(__name__)

# Trailing marker on a configured key: the key may be missing from the input
OPTIONAL_KEY_SUFFIX = "?"


class StringMapFilter:
    """Require every configured key's value to satisfy its string filter.

    Keys configured as ``"name?"`` are absence-tolerant: a point without
    that dimension still satisfies the clause.  An empty input never
    matches unless at least one key is absence-tolerant.

    Abstract: subclasses pick the per-key filter via ``string_filter_class``.
    """

    string_filter_class: ClassVar[type[PatternStringFilter] | None] = None

    def __init__(self, mapping: Mapping[str, Sequence[str]]) -> None:
        if self.string_filter_class is None:
            raise TypeError(f"{type(self).__name__} has no string_filter_class; use a concrete variant")
        self._filters: dict[str, StringFilter] = {}
        self._ok_missing: set[str] = set()

        for key, items in mapping.items():
            if not items:
                raise FilterConfigError("string map value in filter cannot be empty")
            real_key = key.removesuffix(OPTIONAL_KEY_SUFFIX)
            self._filters[real_key] = self.string_filter_class(items)
            if real_key != key:
                self._ok_missing.add(real_key)

        logger.debug(
            "Built %s over %d keys (%d optional)",
            type(self).__name__, len(self._filters), len(self._ok_missing),
        )

    def matches(self, values: Mapping[str, str]) -> bool:
        if not values and not self._ok_missing:
            return False

        for key, string_filter in self._filters.items():
            value = values.get(key)
            if value is None:
                if key not in self._ok_missing:
                    return False
            elif not string_filter.matches(value):
                return False
        return True

    @property
    def keys(self) -> list[str]:
        return sorted(self._filters)


class StrictStringMapFilter(StringMapFilter):
    string_filter_class = BasicStringFilter


class OverridableStringMapFilter(StringMapFilter):
    string_filter_class = OverridableStringFilter
