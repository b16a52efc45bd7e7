"""Human-readable report format rendered with rich."""

import io
from typing import Sequence

from rich.console import Console
from rich.table import Table

from ..runner.result import TestResult

FORMAT_HUMAN = "human"

REPORT_WIDTH = 160


def report_human(results: Sequence[TestResult]) -> str:
    """Format results as a plain-text table with a summary footer."""
    if not results:
        return "No test results\n"

    passed = sum(1 for r in results if r.passed)
    failed = sum(1 for r in results if r.failed)
    errors = sum(1 for r in results if r.errored)

    table = Table(title="Test results", show_header=True, show_footer=True)
    table.add_column("Test type", footer="Totals", no_wrap=True)
    table.add_column("Package", no_wrap=True)
    table.add_column("Data stream", no_wrap=True)
    table.add_column("Test case", no_wrap=True)
    table.add_column("Result", footer=f"{passed} passed, {failed} failed, {errors} errors")
    table.add_column("Time elapsed", justify="right")

    for r in results:
        table.add_row(
            r.test_type,
            r.package,
            r.data_stream,
            r.name,
            _describe(r),
            f"{r.time_elapsed:.3f}s",
        )

    console = Console(
        file=io.StringIO(),
        width=REPORT_WIDTH,
        color_system=None,
        highlight=False,
        force_terminal=False,
    )
    console.print(table)
    return console.file.getvalue()


def _describe(result: TestResult) -> str:
    if result.errored:
        return f"ERROR: {result.error_msg}"
    if result.failed:
        # details are multi-line diffs, keep the table compact
        return f"FAIL: {result.failure_msg}"
    return "PASS"
