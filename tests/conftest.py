"""Shared pytest fixtures for dpfilter tests."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from dpfilter.model import DataPoint, Dimension


def make_point(metric: str, **dims: str) -> DataPoint:
    return DataPoint(metric, tuple(Dimension(k, v) for k, v in dims.items()))


@pytest.fixture()
def point():
    """Return a factory: ``point("cpu.utilization", host="localhost")``."""
    return make_point


@pytest.fixture()
def rules_file(tmp_path: Path):
    """Return a factory that writes a JSON rule file."""

    def _make(rules: Any, name: str = "rules.json") -> Path:
        p = tmp_path / name
        p.write_text(json.dumps(rules), encoding="utf-8")
        return p

    return _make


@pytest.fixture()
def points_file(tmp_path: Path):
    """Return a factory that writes a JSON-lines data point file."""

    def _make(points: list[dict[str, Any]], name: str = "points.jsonl") -> Path:
        p = tmp_path / name
        p.write_text("\n".join(json.dumps(x) for x in points) + "\n", encoding="utf-8")
        return p

    return _make
