"""Benchmark result data structures."""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple


@dataclass(frozen=True)
class BenchmarkResult:
    """A single timed result as returned by the reporting service."""

    elapsed_seconds: float
    identifier: str

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "BenchmarkResult":
        """Create BenchmarkResult from a ``results`` item of the run report.

        Args:
            data: Dictionary with ``time`` and ``benchmark.uri`` keys

        Returns:
            BenchmarkResult instance
        """
        benchmark = data.get("benchmark") or {}
        return cls(
            elapsed_seconds=float(data.get("time", 0.0)),
            identifier=benchmark.get("uri", ""),
        )

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "elapsed_seconds": self.elapsed_seconds,
            "identifier": self.identifier,
        }


@dataclass(frozen=True)
class BenchmarkEntry:
    """A result decoded into its grouping key."""

    category: str
    usecase: str
    test_function: str
    library: str
    elapsed_seconds: float

    @property
    def key(self) -> Tuple[str, str, str, str]:
        return (self.category, self.usecase, self.test_function, self.library)


@dataclass(frozen=True)
class UsecaseTable:
    """One comparison table: rows are test functions, columns are libraries."""

    usecase: str
    libraries: Tuple[str, ...]
    test_functions: Tuple[str, ...]
    cells: Mapping[str, Mapping[str, float]]

    @classmethod
    def build(cls, usecase: str, cells: Dict[str, Dict[str, float]]) -> "UsecaseTable":
        """Derive both axes from the recorded cells and freeze them."""
        libraries = sorted({library for row in cells.values() for library in row})
        return cls(
            usecase=usecase,
            libraries=tuple(libraries),
            test_functions=tuple(sorted(cells)),
            cells=MappingProxyType(
                {test_function: MappingProxyType(dict(row)) for test_function, row in cells.items()}
            ),
        )

    def cell(self, test_function: str, library: str) -> Optional[float]:
        """Elapsed seconds for a pair, or None when nothing was recorded."""
        return self.cells.get(test_function, {}).get(library)


@dataclass(frozen=True)
class CategorySection:
    """All usecase tables of one category."""

    category: str
    tables: Tuple[UsecaseTable, ...]
