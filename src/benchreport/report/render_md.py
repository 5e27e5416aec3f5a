"""Render aggregated benchmark results to a Markdown report."""

from typing import Iterable, List, Optional

from benchreport.report.models import CategorySection, UsecaseTable
from benchreport.report.time_format import format_time_human_readable

MISSING_CELL = "-"
LABEL_HEADER = "Test"


def _table_row(cells: List[str]) -> str:
    return "| " + " | ".join(cell.replace("|", "\\|") for cell in cells) + " |"


def render_usecase_table(table: UsecaseTable) -> List[str]:
    """Render one usecase as a pipe table, rows in test-function axis order."""
    lines = [
        _table_row([LABEL_HEADER] + list(table.libraries)),
        "|" + "---|" * (len(table.libraries) + 1),
    ]
    for test_function in table.test_functions:
        cells = [test_function]
        for library in table.libraries:
            value = table.cell(test_function, library)
            cells.append(MISSING_CELL if value is None else format_time_human_readable(value))
        lines.append(_table_row(cells))
    return lines


def render_markdown_report(sections: Iterable[CategorySection], title: Optional[str] = None) -> str:
    """Generate the Markdown comparison report.

    Args:
        sections: Aggregated categories, rendered in the given order
        title: Optional top-level heading

    Returns:
        Markdown report as string
    """
    report_lines = []
    if title:
        report_lines.extend([f"# {title}", ""])

    for section in sections:
        report_lines.extend([f"## {section.category}", ""])
        for table in section.tables:
            report_lines.extend([f"### {table.usecase}", ""])
            report_lines.extend(render_usecase_table(table))
            report_lines.append("")

    return "\n".join(report_lines)


render = render_markdown_report
