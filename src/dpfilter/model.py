"""Data point model — the minimal shape filters evaluate.

Filters only need a metric name and the dimension pairs, so any object
exposing ``.metric`` and ``.dimensions`` works; :class:`DataPoint` is the
concrete type used by the CLI and the tests.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Protocol, runtime_checkable


@dataclass(frozen=True)
class Dimension:
    key: str
    value: str


@runtime_checkable
class DataPointLike(Protocol):
    """Protocol for data points — duck-typed, no inheritance required."""

    @property
    def metric(self) -> str:
        ...

    @property
    def dimensions(self) -> Iterable[Dimension]:
        ...


@dataclass(frozen=True)
class DataPoint:
    """A single telemetry measurement.

    Attributes:
        metric:      Metric name, e.g. ``cpu.utilization``.
        dimensions:  Ordered key/value tags. Duplicate keys are allowed;
                     the last one wins when flattened.
    """

    metric: str
    dimensions: tuple[Dimension, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, obj: dict[str, Any]) -> "DataPoint":
        """Build a point from ``{"metric": ..., "dimensions": ...}``.

        ``dimensions`` may be a mapping or a list of ``{"key", "value"}``
        objects (the wire shape).
        """
        if "metric" not in obj:
            raise ValueError(f"data point has no metric: {obj!r}")
        raw = obj.get("dimensions") or {}
        if isinstance(raw, dict):
            dims = tuple(Dimension(str(k), str(v)) for k, v in raw.items())
        else:
            dims = tuple(Dimension(str(d["key"]), str(d["value"])) for d in raw)
        return cls(metric=str(obj["metric"]), dimensions=dims)

    def to_dict(self) -> dict[str, Any]:
        return {
            "metric": self.metric,
            "dimensions": [{"key": d.key, "value": d.value} for d in self.dimensions],
        }


def dimensions_map(dimensions: Iterable[Dimension]) -> dict[str, str]:
    """Flatten dimension pairs into a lookup dict (last write wins)."""
    return {dim.key: dim.value for dim in dimensions}
