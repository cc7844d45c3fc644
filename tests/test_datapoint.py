"""Tests for the data point model and top-level datapoint filters."""
from __future__ import annotations

import pytest

from dpfilter.filters.datapoint import (
    DataPointFilter,
    OverridableDataPointFilter,
    StrictDataPointFilter,
)
from dpfilter.filters.errors import FilterConfigError
from dpfilter.matching.globbing import GlobError
from dpfilter.model import DataPoint, Dimension, dimensions_map

EMPTY = "^metric filter must have at least one metric or dimension defined on it$"


# ---------------------------------------------------------------------------
# Model
# ---------------------------------------------------------------------------

class TestModel:
    def test_dimensions_map_last_write_wins(self) -> None:
        dims = [Dimension("host", "a"), Dimension("env", "prod"), Dimension("host", "b")]
        assert dimensions_map(dims) == {"host": "b", "env": "prod"}

    def test_from_dict_mapping(self) -> None:
        p = DataPoint.from_dict({"metric": "cpu", "dimensions": {"host": "a"}})
        assert p == DataPoint("cpu", (Dimension("host", "a"),))

    def test_from_dict_wire_list(self) -> None:
        p = DataPoint.from_dict({"metric": "cpu", "dimensions": [{"key": "host", "value": "a"}]})
        assert p.dimensions == (Dimension("host", "a"),)
        assert p.to_dict() == {"metric": "cpu", "dimensions": [{"key": "host", "value": "a"}]}

    def test_from_dict_requires_metric(self) -> None:
        with pytest.raises(ValueError):
            DataPoint.from_dict({"dimensions": {}})


# ---------------------------------------------------------------------------
# StrictDataPointFilter
# ---------------------------------------------------------------------------

class TestStrictDataPointFilter:
    def test_metric_names_only(self, point) -> None:
        f = StrictDataPointFilter(["cpu.utilization", "memory.utilization"])
        assert f.matches(point("cpu.utilization"))
        assert f.matches(point("memory.utilization"))
        assert not f.matches(point("disk.utilization"))

    def test_dimensions_scoped_per_metric(self, point) -> None:
        f = StrictDataPointFilter(
            metric_names=["*.utilization"],
            metric_dimensions={"cpu.utilization": {"host": ["localhost"]}},
        )
        assert f.matches(point("cpu.utilization", host="localhost"))
        assert not f.matches(point("cpu.utilization", host="remote"))
        # No dimension rule registered for this metric
        assert not f.matches(point("memory.utilization", host="localhost"))

    def test_dimension_rules_without_metric_names(self, point) -> None:
        f = StrictDataPointFilter(metric_dimensions={"cpu": {"host": ["a", "b"]}})
        assert f.matches(point("cpu", host="b"))
        assert not f.matches(point("mem", host="b"))

    def test_conjunctive_dimensions(self, point) -> None:
        f = StrictDataPointFilter(metric_dimensions={"cpu": {"host": ["localhost"], "system": ["r4"]}})
        assert f.matches(point("cpu", host="localhost", system="r4"))
        assert not f.matches(point("cpu", host="localhost"))

    def test_metric_filter_uses_strict_semantics(self, point) -> None:
        f = StrictDataPointFilter(["!cpu.idle"])
        assert f.matches(point("disk.used"))
        assert not f.matches(point("cpu.idle"))

    @pytest.mark.parametrize("names,dims", [(None, None), ([], {}), ([], None)])
    def test_empty_rejected(self, names, dims) -> None:
        with pytest.raises(FilterConfigError, match=EMPTY):
            StrictDataPointFilter(names, dims)

    def test_invalid_glob_propagates(self) -> None:
        with pytest.raises(GlobError, match="^unexpected end of input$"):
            StrictDataPointFilter(metric_dimensions={"cpu": {"host": ["cpu.*["]}})

    def test_protocol(self) -> None:
        assert isinstance(StrictDataPointFilter(["a"]), DataPointFilter)


# ---------------------------------------------------------------------------
# OverridableDataPointFilter
# ---------------------------------------------------------------------------

class TestOverridableDataPointFilter:
    def test_shared_dimension_filter(self, point) -> None:
        f = OverridableDataPointFilter(dimensions={"container_name": ["PO"]})
        assert f.matches(point("cpu.utilization", container_name="PO"))
        assert f.matches(point("disk.utilization", container_name="PO"))
        assert not f.matches(point("disk.utilization", container_name="test"))

    def test_conjunction_of_metric_and_dimensions(self, point) -> None:
        f = OverridableDataPointFilter(["*.utilization"], {"container_name": ["test"]})
        assert f.matches(point("disk.utilization", container_name="test"))
        assert not f.matches(point("cpu.utilization", container_name="not matching"))
        assert not f.matches(point("disk.usage", container_name="test"))

    def test_point_without_dimensions(self, point) -> None:
        f = OverridableDataPointFilter(dimensions={"container_name": ["mycontainer"]})
        assert not f.matches(point("cpu.utilization"))

    def test_optional_dimension(self, point) -> None:
        f = OverridableDataPointFilter(["cpu.*"], {"host?": ["web-*"]})
        assert f.matches(point("cpu.idle"))
        assert f.matches(point("cpu.idle", host="web-1"))
        assert not f.matches(point("cpu.idle", host="db-1"))

    def test_process_metrics_scenario(self, point) -> None:
        f = OverridableDataPointFilter(["process_*", "!process_cpu"])
        assert f.matches(point("process_mem"))
        assert not f.matches(point("process_cpu"))
        assert not f.matches(point("asdf"))

    def test_duplicate_dimension_keys(self) -> None:
        f = OverridableDataPointFilter(dimensions={"host": ["b"]})
        p = DataPoint("cpu", (Dimension("host", "a"), Dimension("host", "b")))
        assert f.matches(p)

    def test_empty_rejected(self) -> None:
        with pytest.raises(FilterConfigError, match=EMPTY):
            OverridableDataPointFilter()
