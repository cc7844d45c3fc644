"""dpfilter CLI — entry point.

Commands:
    dpfilter check <rules>             Validate a rule file and summarise it
    dpfilter match <points> [--rules]  Evaluate JSON-lines data points
"""
from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Iterator

import click
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import settings
from .filters.errors import FilterConfigError
from .filters.filterset import FilterSet, load_filter_set
from .matching.globbing import GlobError
from .model import DataPoint

console = Console()
err_console = Console(stderr=True)

# ── Helpers ─────────────────────────────────────────────────────────────────


def _load_rules(path: Path) -> FilterSet:
    """Build a filter set, turning construction errors into CLI errors."""
    try:
        return load_filter_set(path)
    except (FilterConfigError, GlobError, re.error) as exc:
        raise click.ClickException(f"{path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise click.ClickException(f"{path}: invalid JSON: {exc}") from exc


def _read_points(path: Path) -> Iterator[DataPoint]:
    with path.open(encoding="utf-8") as f:
        for lineno, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                yield DataPoint.from_dict(json.loads(line))
            except (ValueError, KeyError, TypeError) as exc:
                raise click.ClickException(f"{path}:{lineno}: bad data point: {exc}") from exc


def _format_dimensions(point: DataPoint) -> str:
    return ", ".join(f"{d.key}={d.value}" for d in point.dimensions)


# ── CLI root ─────────────────────────────────────────────────────────────────


@click.group()
@click.version_option(version="1.0.0", prog_name="dpfilter")
@click.option("--log-level", default=None, help="Override DPFILTER_LOG_LEVEL.")
def main(log_level: str | None) -> None:
    """dpfilter — match telemetry data points against filter rules."""
    logging.basicConfig(
        level=(log_level or settings.log_level).upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )


# ── check ────────────────────────────────────────────────────────────────────


@main.command()
@click.argument("rules", type=click.Path(exists=True, path_type=Path))
def check(rules: Path) -> None:
    """Validate a rule file and list its rules.

    \b
    Examples:
      dpfilter check exclude.json
    """
    filter_set = _load_rules(rules)

    tbl = Table(title=f"{rules.name}", box=box.ROUNDED)
    tbl.add_column("#", justify="right")
    tbl.add_column("metric names", overflow="fold", max_width=50)
    tbl.add_column("dimensions", overflow="fold", max_width=60)
    for i, rule in enumerate(filter_set.rules, start=1):
        tbl.add_row(
            str(i),
            escape(", ".join(rule.all_metric_names())) or "[dim]any[/dim]",
            escape(json.dumps(rule.dimensions)) if rule.dimensions else "[dim]any[/dim]",
        )
    console.print(tbl)
    console.print(f"[green]OK[/green] [dim]{len(filter_set)} rules in {rules.name}[/dim]")


# ── match ────────────────────────────────────────────────────────────────────


@main.command()
@click.argument("points", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--rules", "-r", type=click.Path(path_type=Path), default=None,
    help="JSON rule file (default: DPFILTER_FILTER_FILE).",
)
@click.option("--drop", is_flag=True, help="Emit only points no rule matches (exclusion).")
@click.option(
    "--output", "-o", "output_fmt", default=None,
    type=click.Choice(["table", "json"], case_sensitive=False),
    help="Output format (default: DPFILTER_DEFAULT_OUTPUT).",
)
def match(points: Path, rules: Path | None, drop: bool, output_fmt: str | None) -> None:
    """Evaluate data points (one JSON object per line) against a rule file.

    \b
    Examples:
      dpfilter match points.jsonl --rules exclude.json
      dpfilter match points.jsonl -r exclude.json --drop --output json
    """
    if rules is None:
        if not settings.filter_file:
            raise click.UsageError("No rule file given; pass --rules or set DPFILTER_FILTER_FILE.")
        rules = Path(settings.filter_file)
    if not rules.exists():
        raise click.ClickException(f"Rule file not found: {rules}")
    output_fmt = (output_fmt or settings.default_output).lower()

    filter_set = _load_rules(rules)
    results = [(p, filter_set.matches(p)) for p in _read_points(points)]

    if output_fmt == "json":
        for point, matched in results:
            if drop:
                if not matched:
                    click.echo(json.dumps(point.to_dict()))
            else:
                click.echo(json.dumps({**point.to_dict(), "matched": matched}))
        return

    if not results:
        err_console.print("[yellow]No data points found.[/yellow]")
        return

    tbl = Table(title=f"{points.name} vs {rules.name}", box=box.ROUNDED)
    tbl.add_column("metric", overflow="fold", max_width=50)
    tbl.add_column("dimensions", overflow="fold", max_width=60)
    tbl.add_column("result")
    for point, matched in results:
        if drop and matched:
            continue
        label = "[red]matched[/red]" if matched else "[green]kept[/green]"
        tbl.add_row(escape(point.metric), escape(_format_dimensions(point)), label)
    console.print(tbl)

    n_matched = sum(1 for _, m in results if m)
    console.print(f"\n[dim]{n_matched} of {len(results)} points matched[/dim]")
