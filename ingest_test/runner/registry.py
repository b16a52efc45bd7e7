"""Registries mapping test types to runners and report formats to reporters.

Registries are plain objects: build them once at start-up, register every
runner / reporter, then hand them to whatever performs dispatch.
"""

import logging
from typing import Callable, Generic, Optional, Sequence, TypeVar

from ..errors import UnknownReportFormatError, UnknownTestTypeError
from .result import TestOptions, TestResult

logger = logging.getLogger(__name__)

RunnerFunc = Callable[[TestOptions], list[TestResult]]
ReporterFunc = Callable[[Sequence[TestResult]], str]

F = TypeVar("F")


class Registry(Generic[F]):
    """Tag -> function mapping. Registering a tag twice overwrites it."""

    def __init__(self):
        self._entries: dict[str, F] = {}

    def register(self, tag: str, func: F) -> None:
        if tag in self._entries:
            logger.debug("Overwriting registration for %r", tag)
        self._entries[tag] = func

    def lookup(self, tag: str) -> Optional[F]:
        """Return the function registered under ``tag``, or None."""
        return self._entries.get(tag)

    def tags(self) -> list[str]:
        return sorted(self._entries)

    def __contains__(self, tag: object) -> bool:
        return tag in self._entries

    def __len__(self) -> int:
        return len(self._entries)


class RunnerRegistry(Registry[RunnerFunc]):
    """Runners keyed by test type."""

    def run(self, test_type: str, options: TestOptions) -> list[TestResult]:
        """Dispatch ``options`` to the runner registered for ``test_type``.

        Raises:
            UnknownTestTypeError: If no runner is registered for the type.
        """
        runner = self.lookup(test_type)
        if runner is None:
            raise UnknownTestTypeError(
                f"unsupported test type: {test_type} (available: {', '.join(self.tags())})"
            )
        return runner(options)


class ReporterRegistry(Registry[ReporterFunc]):
    """Reporters keyed by report format."""

    def report(self, report_format: str, results: Sequence[TestResult]) -> str:
        """Format ``results`` with the reporter registered for ``report_format``.

        Raises:
            UnknownReportFormatError: If no reporter is registered for the format.
            ReportFormatError: If the reporter fails to serialize the results.
        """
        reporter = self.lookup(report_format)
        if reporter is None:
            raise UnknownReportFormatError(
                f"unsupported report format: {report_format} (available: {', '.join(self.tags())})"
            )
        return reporter(results)
