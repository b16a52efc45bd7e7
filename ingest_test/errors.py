"""Exception hierarchy for ingest-test.

Every error carries a ``kind`` discriminant. Callers branch on
``ErrorKind.MISMATCH`` (a test case produced unexpected output) versus
``ErrorKind.INFRASTRUCTURE`` (something prevented the test from being
evaluated at all).
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Category of an ingest-test error."""
    MISMATCH = "mismatch"
    INFRASTRUCTURE = "infrastructure"


class IngestTestError(Exception):
    """Base class for all ingest-test errors."""
    kind = ErrorKind.INFRASTRUCTURE

    @property
    def is_mismatch(self) -> bool:
        return self.kind is ErrorKind.MISMATCH


class ElasticsearchError(IngestTestError):
    """Elasticsearch answered with an unexpected status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ElasticsearchConnectionError(ElasticsearchError):
    """Elasticsearch could not be reached."""


class ManifestError(IngestTestError):
    """A package or data stream manifest could not be read."""


class TestCaseLoadError(IngestTestError):
    """A test case file could not be turned into input events."""
    __test__ = False


class GoldenFileError(IngestTestError):
    """An expected result file could not be read or written."""


class PipelineInstallError(IngestTestError):
    """Ingest pipeline definitions could not be loaded or installed."""


class TestCaseMismatch(IngestTestError):
    """Observed events differ from the expected result file."""
    __test__ = False
    kind = ErrorKind.MISMATCH

    def __init__(self, message: str = "test case failed", details: str = ""):
        super().__init__(message)
        self.details = details


class TestRunError(IngestTestError):
    """A test run stopped before evaluating every test case.

    ``results`` holds the results accumulated up to and including the
    test case that caused the abort.
    """
    __test__ = False

    def __init__(self, message: str, results: Optional[list] = None):
        super().__init__(message)
        self.results = results if results is not None else []


class TestCasesFailed(TestRunError):
    """All test cases ran but at least one of them did not match."""
    __test__ = False
    kind = ErrorKind.MISMATCH

    def __init__(self, results: list, failed_count: int):
        super().__init__(
            f"at least one test case failed ({failed_count} of {len(results)})",
            results,
        )
        self.failed_count = failed_count


class UnknownTestTypeError(IngestTestError):
    """No runner is registered for the requested test type."""


class UnknownReportFormatError(IngestTestError):
    """No reporter is registered for the requested report format."""


class ReportFormatError(IngestTestError):
    """Test results could not be serialized into a report."""
