"""User-facing filter rules and the set that combines them.

Rule file format (JSON)::

    [
        {"metric_names": ["cpu.*", "!cpu.idle"]},
        {"metric_name": "memory.used", "dimensions": {"host?": "web-*"}},
        {"dimensions": {"container_name": ["*", "!pause"]}}
    ]

A bare list or ``{"filters": [...]}`` are both accepted.  A point matches
the set when any rule matches it.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Iterator

from ..model import DataPointLike
from .datapoint import DataPointFilter, OverridableDataPointFilter
from .errors import FilterConfigError

logger = logging.getLogger(__name__)


def _normalize_dimensions(raw: dict[str, Any]) -> dict[str, list[str]]:
    """Accept a single string or a list of strings per dimension key."""
    out: dict[str, list[str]] = {}
    for key, value in raw.items():
        if isinstance(value, str):
            out[key] = [value]
        elif isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value):
            out[key] = list(value)
        else:
            raise FilterConfigError(f"{value} should be either a string or string list")
    return out


@dataclass
class MetricFilter:
    """One filter rule as written in configuration.

    Attributes:
        metric_name:   Single metric-name token (merged into metric_names).
        metric_names:  Metric-name tokens; literal, glob or ``/regex/``,
                       optionally ``!``-negated.
        dimensions:    Dimension key -> token or list of tokens.  A key
                       suffixed with ``?`` may be absent from the point.
    """

    metric_name: str | None = None
    metric_names: list[str] = field(default_factory=list)
    dimensions: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.metric_name is not None and not isinstance(self.metric_name, str):
            raise FilterConfigError(f"metric_name should be a string, got {self.metric_name!r}")
        if not isinstance(self.metric_names, (list, tuple)) or not all(
            isinstance(n, str) for n in self.metric_names
        ):
            raise FilterConfigError(f"metric_names should be a string list, got {self.metric_names!r}")
        if not isinstance(self.dimensions, dict):
            raise FilterConfigError(f"dimensions should be an object, got {self.dimensions!r}")
        self.metric_names = list(self.metric_names)

    @classmethod
    def from_dict(cls, obj: dict[str, Any]) -> "MetricFilter":
        unknown = set(obj) - {"metric_name", "metric_names", "dimensions"}
        if unknown:
            raise FilterConfigError(f"unknown metric filter fields: {', '.join(sorted(unknown))}")
        return cls(
            metric_name=obj.get("metric_name"),
            metric_names=obj.get("metric_names") or [],
            dimensions=obj.get("dimensions") or {},
        )

    def all_metric_names(self) -> list[str]:
        names = list(self.metric_names)
        if self.metric_name:
            names.append(self.metric_name)
        return names

    def build(self) -> DataPointFilter:
        return OverridableDataPointFilter(
            metric_names=self.all_metric_names(),
            dimensions=_normalize_dimensions(self.dimensions),
        )


class FilterSet:
    """Logical OR over a list of :class:`MetricFilter` rules.

    Construction is all-or-nothing: the first invalid rule raises and no
    set is returned.

    Usage::

        fs = FilterSet([MetricFilter(metric_names=["cpu.*"])])
        kept = list(fs.exclude(points))
    """

    def __init__(self, filters: Iterable[MetricFilter]) -> None:
        self._rules = list(filters)
        self._filters: list[DataPointFilter] = [rule.build() for rule in self._rules]
        logger.debug("Built filter set with %d rules", len(self._filters))

    def matches(self, point: DataPointLike) -> bool:
        return any(f.matches(point) for f in self._filters)

    def filter(self, points: Iterable[DataPointLike]) -> Iterator[DataPointLike]:
        """Yield points matched by at least one rule."""
        for point in points:
            if self.matches(point):
                yield point

    def exclude(self, points: Iterable[DataPointLike]) -> Iterator[DataPointLike]:
        """Yield points no rule matches — the ones an exporter keeps."""
        for point in points:
            if not self.matches(point):
                yield point

    @property
    def rules(self) -> list[MetricFilter]:
        return list(self._rules)

    def __len__(self) -> int:
        return len(self._filters)

    def __repr__(self) -> str:
        return f"FilterSet({len(self._filters)} rules)"


def load_filter_set(path: str | Path) -> FilterSet:
    """Read a JSON rule file and build a :class:`FilterSet`."""
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    if isinstance(raw, dict):
        raw = raw.get("filters", [])
    if not isinstance(raw, list):
        raise FilterConfigError(f"{path}: expected a list of metric filters")
    rules = []
    for item in raw:
        if not isinstance(item, dict):
            raise FilterConfigError(f"{path}: metric filter must be an object, got {item!r}")
        rules.append(MetricFilter.from_dict(item))
    logger.debug("Loaded %d metric filters from %s", len(rules), path)
    return FilterSet(rules)
