"""Reporting module - test report formats and output."""

from ..runner.registry import ReporterRegistry
from .human_reporter import FORMAT_HUMAN, report_human
from .json_reporter import FORMAT_JSON, JsonReporter, report_json
from .output import OUTPUT_FILE, OUTPUT_STDOUT, REPORT_OUTPUTS, write_report
from .xunit_reporter import FORMAT_XUNIT, report_xunit


def default_reporter_registry() -> ReporterRegistry:
    """Create a registry with every built-in report format registered."""
    registry = ReporterRegistry()
    registry.register(FORMAT_XUNIT, report_xunit)
    registry.register(FORMAT_HUMAN, report_human)
    registry.register(FORMAT_JSON, report_json)
    return registry


__all__ = [
    "FORMAT_HUMAN",
    "FORMAT_JSON",
    "FORMAT_XUNIT",
    "JsonReporter",
    "OUTPUT_FILE",
    "OUTPUT_STDOUT",
    "REPORT_OUTPUTS",
    "default_reporter_registry",
    "report_human",
    "report_json",
    "report_xunit",
    "write_report",
]
