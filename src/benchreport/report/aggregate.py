"""Aggregate parsed benchmark entries into per-usecase comparison tables."""

import logging
from dataclasses import asdict
from pathlib import Path
from typing import Dict, Iterable, List

import pandas as pd

from benchreport.report.models import BenchmarkEntry, CategorySection, UsecaseTable

logger = logging.getLogger(__name__)

KEY_COLUMNS = ["category", "usecase", "test_function", "library"]
COLUMNS = KEY_COLUMNS + ["elapsed_seconds"]


def entries_to_frame(entries: Iterable[BenchmarkEntry]) -> pd.DataFrame:
    """Build a DataFrame with one row per grouping key.

    When two entries share a key, the later one wins.
    """
    frame = pd.DataFrame([asdict(entry) for entry in entries], columns=COLUMNS)
    return frame.drop_duplicates(subset=KEY_COLUMNS, keep="last").reset_index(drop=True)


def aggregate_results(entries: Iterable[BenchmarkEntry]) -> List[CategorySection]:
    """Group entries by category, usecase, test function and library.

    Args:
        entries: Parsed benchmark entries

    Returns:
        One CategorySection per category, sorted by name, each holding one
        UsecaseTable per usecase, sorted by name
    """
    frame = entries_to_frame(entries)
    sections = []

    for category, category_df in frame.groupby("category", sort=True):
        tables = []
        for usecase, usecase_df in category_df.groupby("usecase", sort=True):
            cells: Dict[str, Dict[str, float]] = {}
            for row in usecase_df.itertuples(index=False):
                cells.setdefault(row.test_function, {})[row.library] = float(row.elapsed_seconds)
            tables.append(UsecaseTable.build(str(usecase), cells))
        sections.append(CategorySection(category=str(category), tables=tuple(tables)))

    logger.info(
        f"Aggregated {len(frame)} benchmark(s) into {len(sections)} categories, "
        f"{sum(len(section.tables) for section in sections)} tables"
    )
    return sections


aggregate = aggregate_results


def save_aggregated_results(results_df: pd.DataFrame, output_dir: Path):
    """Save aggregated entries to CSV and JSON lines."""
    output_dir.mkdir(parents=True, exist_ok=True)

    csv_file = output_dir / "results.csv"
    results_df.to_csv(csv_file, index=False)

    jsonl_file = output_dir / "results.jsonl"
    with open(jsonl_file, "w", encoding="utf-8") as f:
        for _, row in results_df.iterrows():
            f.write(row.to_json(force_ascii=False) + "\n")

    logger.info(f"Aggregated results saved to {output_dir}")
    return csv_file, jsonl_file
