"""Benchmark result aggregation and reporting."""

from typing import Iterable, Optional

from .aggregate import aggregate_results, entries_to_frame, save_aggregated_results
from .models import BenchmarkEntry, BenchmarkResult, CategorySection, UsecaseTable
from .parse import parse_identifier, parse_results
from .render_md import render_markdown_report
from .time_format import format_time_human_readable


def build_report(results: Iterable[BenchmarkResult], title: Optional[str] = None) -> str:
    """Parse, aggregate and render a run's results in one go."""
    return render_markdown_report(aggregate_results(parse_results(results)), title=title)


__all__ = [
    "BenchmarkEntry",
    "BenchmarkResult",
    "CategorySection",
    "UsecaseTable",
    "aggregate_results",
    "build_report",
    "entries_to_frame",
    "format_time_human_readable",
    "parse_identifier",
    "parse_results",
    "render_markdown_report",
    "save_aggregated_results",
]
