"""dpfilter — datapoint filtering by metric name and dimension patterns."""
from __future__ import annotations

from .filters.datapoint import DataPointFilter, OverridableDataPointFilter, StrictDataPointFilter
from .filters.errors import FilterConfigError
from .filters.filterset import FilterSet, MetricFilter, load_filter_set
from .matching.globbing import GlobError
from .model import DataPoint, Dimension

__all__ = [
    "DataPoint",
    "DataPointFilter",
    "Dimension",
    "FilterConfigError",
    "FilterSet",
    "GlobError",
    "MetricFilter",
    "OverridableDataPointFilter",
    "StrictDataPointFilter",
    "load_filter_set",
]
