"""Decode benchmark identifiers into grouping keys."""

import logging
from typing import Iterable, List, Optional

from benchreport.report.models import BenchmarkEntry, BenchmarkResult

logger = logging.getLogger(__name__)

DEFAULT_USECASE = "default"

# Only one suffix is stripped, and only if it is one of these.
SOURCE_EXTENSIONS = (
    ".rs", ".py", ".go", ".c", ".cc", ".cpp", ".h", ".hpp",
    ".js", ".ts", ".java", ".kt", ".rb", ".swift", ".zig",
)


def _usecase_name(segment: str) -> str:
    for extension in SOURCE_EXTENSIONS:
        if segment.endswith(extension) and len(segment) > len(extension):
            return segment[: -len(extension)]
    return segment


def parse_identifier(identifier: str, elapsed_seconds: float) -> Optional[BenchmarkEntry]:
    """Parse ``<category>/<usecase>[.ext]::<test_function>::<library>``.

    Args:
        identifier: Benchmark uri as reported by the service
        elapsed_seconds: Measured time for this benchmark

    Returns:
        BenchmarkEntry, or None if the identifier carries no usable key
    """
    parts = identifier.split("::")
    if len(parts) < 3:
        return None

    path, test_function, library = parts[0], parts[1], parts[2]
    segments = path.split("/")
    category = segments[0]
    usecase = _usecase_name(segments[1]) if len(segments) > 1 and segments[1] else DEFAULT_USECASE

    if not category or not test_function:
        return None

    return BenchmarkEntry(
        category=category,
        usecase=usecase,
        test_function=test_function,
        library=library,
        elapsed_seconds=elapsed_seconds,
    )


def parse_results(results: Iterable[BenchmarkResult]) -> List[BenchmarkEntry]:
    """Parse all results, silently dropping malformed identifiers.

    Output keeps the input order.
    """
    entries = []
    skipped = 0
    for result in results:
        entry = parse_identifier(result.identifier, result.elapsed_seconds)
        if entry is None:
            logger.debug(f"Skipping malformed benchmark identifier: {result.identifier!r}")
            skipped += 1
            continue
        entries.append(entry)

    if skipped:
        logger.debug(f"Skipped {skipped} result(s) without a usable identifier")
    return entries


parse = parse_results
