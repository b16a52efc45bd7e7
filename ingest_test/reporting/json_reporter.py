"""JSON report format.

The document holds an overall status, a summary of counts and one entry
per test result in execution order.
"""

import json
from typing import Any, Sequence

from ..errors import ReportFormatError
from ..runner.result import TestResult

FORMAT_JSON = "json"


class JsonReporter:
    """Builds JSON documents from test results."""

    def generate(self, results: Sequence[TestResult]) -> dict[str, Any]:
        """Build the report document.

        Args:
            results: Test results in execution order.

        Returns:
            A mapping of plain JSON types. Empty messages become null.
        """
        passed = sum(1 for r in results if r.passed)
        failed = sum(1 for r in results if r.failed)
        errors = sum(1 for r in results if r.errored)

        return {
            "status": "passed" if passed == len(results) else "failed",
            "summary": {
                "total": len(results),
                "passed": passed,
                "failed": failed,
                "errors": errors,
                "time_elapsed": round(sum(r.time_elapsed for r in results), 3),
            },
            "results": [
                {
                    "test_type": r.test_type,
                    "package": r.package,
                    "data_stream": r.data_stream,
                    "name": r.name,
                    "status": r.status,
                    "time_elapsed": round(r.time_elapsed, 3),
                    "error": r.error_msg or None,
                    "failure": r.failure_msg or None,
                    "failure_details": r.failure_details or None,
                }
                for r in results
            ],
        }

    def to_json_string(self, report: dict[str, Any], indent: int = 2) -> str:
        """Serialize a report document. ``indent=0`` gives a single line."""
        return json.dumps(report, indent=indent or None, ensure_ascii=False)


def report_json(results: Sequence[TestResult]) -> str:
    """Format results as a pretty-printed JSON document."""
    reporter = JsonReporter()
    try:
        return reporter.to_json_string(reporter.generate(results)) + "\n"
    except (TypeError, ValueError) as e:
        raise ReportFormatError(f"unable to format test results as JSON: {e}") from e
