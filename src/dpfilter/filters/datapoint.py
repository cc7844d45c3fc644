"""Top-level predicates over a data point.

Usage::

    f = OverridableDataPointFilter(
        metric_names=["*.utilization"],
        dimensions={"container_name": ["*", "!pause"], "host?": ["web-*"]},
    )
    if f.matches(point):
        ...

Both variants are immutable once built and safe to share between workers.
"""
from __future__ import annotations

import logging
from typing import Mapping, Protocol, Sequence, runtime_checkable

from ..model import DataPointLike, dimensions_map
from .errors import FilterConfigError
from .string_filter import BasicStringFilter, OverridableStringFilter, StringFilter
from .string_map import OverridableStringMapFilter, StrictStringMapFilter

logger = logging.getLogger(__name__)

EMPTY_FILTER_MESSAGE = "metric filter must have at least one metric or dimension defined on it"


@runtime_checkable
class DataPointFilter(Protocol):
    def matches(self, point: DataPointLike) -> bool:
        """Return True if the point is matched by the filter."""
        ...


class StrictDataPointFilter:
    """Exclusion filter with dimension rules scoped per metric name.

    Args:
        metric_names:       Metric-name tokens (strict semantics).
        metric_dimensions:  ``metric name -> {dimension key -> tokens}``.
                            When given, a point whose metric has no entry
                            here never matches.
    """

    def __init__(
        self,
        metric_names: Sequence[str] | None = None,
        metric_dimensions: Mapping[str, Mapping[str, Sequence[str]]] | None = None,
    ) -> None:
        self._dim_filters: dict[str, StrictStringMapFilter] | None = None
        if metric_dimensions:
            self._dim_filters = {
                metric: StrictStringMapFilter(dims)
                for metric, dims in metric_dimensions.items()
            }

        self._metric_filter: StringFilter | None = None
        if metric_names:
            self._metric_filter = BasicStringFilter(metric_names)

        if self._metric_filter is None and self._dim_filters is None:
            raise FilterConfigError(EMPTY_FILTER_MESSAGE)

        logger.debug(
            "Built strict datapoint filter: %d metric tokens, %d dimension scopes",
            len(metric_names or ()), len(self._dim_filters or {}),
        )

    def matches(self, point: DataPointLike) -> bool:
        if self._metric_filter is not None and not self._metric_filter.matches(point.metric):
            return False
        if self._dim_filters is None:
            return True
        dim_filter = self._dim_filters.get(point.metric)
        return dim_filter is not None and dim_filter.matches(dimensions_map(point.dimensions))


class OverridableDataPointFilter:
    """Filter whose dimension rules apply to every metric.

    Both the metric-name clause and every per-key dimension clause use
    overridable semantics, so a matching negated token always wins.
    """

    def __init__(
        self,
        metric_names: Sequence[str] | None = None,
        dimensions: Mapping[str, Sequence[str]] | None = None,
    ) -> None:
        self._dim_filter = OverridableStringMapFilter(dimensions) if dimensions else None
        self._metric_filter = OverridableStringFilter(metric_names) if metric_names else None

        if self._metric_filter is None and self._dim_filter is None:
            raise FilterConfigError(EMPTY_FILTER_MESSAGE)

    def matches(self, point: DataPointLike) -> bool:
        return (
            self._metric_filter is None or self._metric_filter.matches(point.metric)
        ) and (
            self._dim_filter is None or self._dim_filter.matches(dimensions_map(point.dimensions))
        )
